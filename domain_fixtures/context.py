# domain_fixtures/context.py
"""
Per-run state handed explicitly to every step of a fixture run.

Runs are isolated only by their run id: two runs sharing an id share a
workspace and cloud resource names. Callers must generate a fresh id per
run (see utils.generate_run_id).
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Dict, Optional

from domain_fixtures.utils import generate_run_id
from domain_fixtures.workspace import workspace_path


@dataclass(frozen=True)
class GatewayHandles:
    rest_api_id: str
    resource_id: str

    def env(self) -> Dict[str, str]:
        return {"REST_API_ID": self.rest_api_id, "RESOURCE_ID": self.resource_id}


@dataclass(frozen=True)
class RunContext:
    run_id: str
    workspace: Path
    gateway: Optional[GatewayHandles] = None

    @classmethod
    def create(cls, run_id: Optional[str] = None, gateway: Optional[GatewayHandles] = None) -> "RunContext":
        if run_id is None:
            run_id = generate_run_id()
        return cls(run_id=run_id, workspace=workspace_path(run_id), gateway=gateway)

    def with_gateway(self, gateway: GatewayHandles) -> "RunContext":
        return replace(self, gateway=gateway)

    def env(self) -> Dict[str, str]:
        """Variables the serverless fixtures read for this run."""
        return self.gateway.env() if self.gateway else {}
