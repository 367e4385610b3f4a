# apigateway_adapter.py
"""
API Gateway calls used by the integration tests.

Metadata lookups never raise for provider errors. They report one of
FOUND, NOT_FOUND or ERROR so a missing custom domain can be told apart
from a throttled or unauthorized call. The get_* helpers collapse both
non-FOUND cases to None.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, NoReturn, Optional

import boto3
from botocore.exceptions import BotoCoreError, ClientError

from domain_fixtures import config
from domain_fixtures.context import GatewayHandles
from domain_fixtures.errors import CreationError

logger = logging.getLogger("domain_fixtures.adapters.apigateway")

NOT_FOUND_CODES = {"NotFoundException"}


class LookupStatus(str, Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    ERROR = "error"


@dataclass(frozen=True)
class Lookup:
    status: LookupStatus
    value: Optional[str] = None
    error: Optional[Exception] = None

    @property
    def found(self) -> bool:
        return self.status is LookupStatus.FOUND


def make_client(profile: Optional[str] = None, region: Optional[str] = None):
    session = boto3.Session(
        profile_name=profile or config.aws_profile(),
        region_name=region or config.aws_region(),
    )
    return session.client("apigateway")


def _error_code(err: ClientError) -> str:
    return err.response.get("Error", {}).get("Code", "")


class ApiGatewayAdapter:
    def __init__(self, client: Any = None):
        self.client = client if client is not None else make_client()

    def _lookup(self, call: Callable[[], Dict[str, Any]], extract: Callable[[Dict[str, Any]], Any]) -> Lookup:
        try:
            result = call()
        except ClientError as e:
            if _error_code(e) in NOT_FOUND_CODES:
                return Lookup(LookupStatus.NOT_FOUND, error=e)
            logger.debug("API Gateway lookup failed: %s", e)
            return Lookup(LookupStatus.ERROR, error=e)
        except BotoCoreError as e:
            logger.debug("API Gateway lookup failed: %s", e)
            return Lookup(LookupStatus.ERROR, error=e)

        try:
            value = extract(result)
        except (KeyError, IndexError, TypeError):
            return Lookup(LookupStatus.NOT_FOUND)
        if value is None:
            return Lookup(LookupStatus.NOT_FOUND)
        return Lookup(LookupStatus.FOUND, value=value)

    # -------------------------
    # Lookups
    # -------------------------
    def lookup_endpoint_type(self, domain_name: str) -> Lookup:
        return self._lookup(
            lambda: self.client.get_domain_name(domainName=domain_name),
            lambda r: r["endpointConfiguration"]["types"][0],
        )

    def lookup_stage(self, domain_name: str) -> Lookup:
        return self._lookup(
            lambda: self.client.get_base_path_mappings(domainName=domain_name),
            lambda r: r["items"][0]["stage"],
        )

    def lookup_base_path(self, domain_name: str) -> Lookup:
        return self._lookup(
            lambda: self.client.get_base_path_mappings(domainName=domain_name),
            lambda r: r["items"][0]["basePath"],
        )

    @staticmethod
    def _value_or_none(lookup: Lookup) -> Optional[str]:
        return lookup.value if lookup.found else None

    def get_endpoint_type(self, domain_name: str) -> Optional[str]:
        return self._value_or_none(self.lookup_endpoint_type(domain_name))

    def get_stage(self, domain_name: str) -> Optional[str]:
        return self._value_or_none(self.lookup_stage(domain_name))

    def get_base_path(self, domain_name: str) -> Optional[str]:
        return self._value_or_none(self.lookup_base_path(domain_name))

    def endpoint_metadata(self, domain_name: str) -> Dict[str, Optional[str]]:
        return {
            "endpoint_type": self.get_endpoint_type(domain_name),
            "stage": self.get_stage(domain_name),
            "base_path": self.get_base_path(domain_name),
        }

    # -------------------------
    # Gateway fixtures
    # -------------------------
    def create_gateway(self, run_id: str) -> GatewayHandles:
        """
        Create a REST API named rest-api-<run_id> and return its id together
        with the id of its root resource.

        Raises:
            CreationError: the API could not be created or has no resources.
                A half-created API is deleted first; its id is kept on the
                error as rest_api_id.
        """
        name = f"rest-api-{run_id}"
        try:
            rest_api_id = self.client.create_rest_api(name=name)["id"]
        except (ClientError, BotoCoreError) as e:
            raise CreationError(f"Failed to create REST API {name}: {e}") from e

        try:
            items = self.client.get_resources(restApiId=rest_api_id).get("items") or []
        except (ClientError, BotoCoreError) as e:
            self._rollback(rest_api_id, f"Failed to list resources of REST API {rest_api_id}: {e}", e)
        if not items:
            self._rollback(rest_api_id, f"REST API {rest_api_id} has no resources")

        handles = GatewayHandles(rest_api_id=rest_api_id, resource_id=items[0]["id"])
        logger.info("Created REST API %s (resource %s)", handles.rest_api_id, handles.resource_id)
        return handles

    def _rollback(self, rest_api_id: str, msg: str, cause: Optional[Exception] = None) -> NoReturn:
        """Delete a half-created REST API, then raise CreationError naming it."""
        if self.delete_gateway(rest_api_id):
            msg = f"{msg} (REST API {rest_api_id} deleted)"
        else:
            msg = f"{msg} (REST API {rest_api_id} left behind)"
        raise CreationError(msg, rest_api_id=rest_api_id) from cause

    def delete_gateway(self, rest_api_id: str) -> bool:
        try:
            self.client.delete_rest_api(restApiId=rest_api_id)
        except (ClientError, BotoCoreError) as e:
            logger.error("Failed to delete REST API %s: %s", rest_api_id, e)
            return False
        logger.info("Deleted REST API %s", rest_api_id)
        return True
