# domain_fixtures/cli.py
"""
domain-fixtures command line.

Every command prints a JSON document on stdout so CI scripts can parse it.
"""

from __future__ import annotations
import json
import logging
from typing import Optional

import typer
from botocore.exceptions import BotoCoreError

from domain_fixtures import lifecycle
from domain_fixtures.cloud_adapters.apigateway_adapter import ApiGatewayAdapter
from domain_fixtures.context import GatewayHandles
from domain_fixtures.errors import CreationError
from domain_fixtures.utils import generate_run_id

app = typer.Typer(help="Provision and tear down serverless domain-manager integration fixtures.")


def _echo_json(data: dict) -> None:
    typer.echo(json.dumps(data, indent=2))


def _gateway_option(rest_api_id: Optional[str], resource_id: Optional[str]) -> Optional[GatewayHandles]:
    if rest_api_id and resource_id:
        return GatewayHandles(rest_api_id=rest_api_id, resource_id=resource_id)
    if rest_api_id or resource_id:
        typer.secho("ERROR: --rest-api-id and --resource-id must be given together", fg=typer.colors.RED, bold=True)
        raise typer.Exit(code=2)
    return None


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v", help="Log every command at DEBUG level")):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )


@app.command("run-id")
def run_id_cmd(length: int = typer.Option(10, help="Number of characters")):
    """Print a fresh random run identifier."""
    typer.echo(generate_run_id(length))


@app.command()
def provision(
    fixture: str = typer.Argument(..., help="Fixture folder under the fixtures root"),
    url: str = typer.Argument(..., help="Custom domain the fixture deploys"),
    run_id: Optional[str] = typer.Option(None, "--run-id", help="Run identifier (generated if omitted)"),
    rest_api_id: Optional[str] = typer.Option(None, "--rest-api-id"),
    resource_id: Optional[str] = typer.Option(None, "--resource-id"),
):
    """Create the workspace, then run create_domain and deploy."""
    gateway = _gateway_option(rest_api_id, resource_id)
    outcome = lifecycle.provision(fixture, url, run_id or generate_run_id(), gateway=gateway)
    _echo_json(outcome.to_dict())
    if not outcome:
        raise typer.Exit(code=1)


@app.command()
def deprovision(
    url: str = typer.Argument(..., help="Custom domain the fixture deployed"),
    run_id: str = typer.Option(..., "--run-id", help="Run identifier used at provision time"),
    rest_api_id: Optional[str] = typer.Option(None, "--rest-api-id"),
    resource_id: Optional[str] = typer.Option(None, "--resource-id"),
):
    """Run remove and delete_domain, then delete the workspace."""
    gateway = _gateway_option(rest_api_id, resource_id)
    outcome = lifecycle.deprovision(url, run_id, gateway=gateway)
    _echo_json(outcome.to_dict())
    if not outcome:
        raise typer.Exit(code=1)


def _adapter() -> ApiGatewayAdapter:
    try:
        return ApiGatewayAdapter()
    except BotoCoreError as e:
        typer.secho(f"ERROR: Cannot create API Gateway client: {e}", fg=typer.colors.RED, bold=True)
        raise typer.Exit(code=1)


@app.command()
def endpoint(domain: str = typer.Argument(..., help="Custom domain name")):
    """Show endpoint type, stage and base path of a custom domain."""
    data = {"domain": domain}
    data.update(_adapter().endpoint_metadata(domain))
    _echo_json(data)


@app.command("create-gateway")
def create_gateway(run_id: str = typer.Option(..., "--run-id")):
    """Create a REST API fixture named after the run id."""
    adapter = _adapter()
    try:
        handles = adapter.create_gateway(run_id)
    except CreationError as e:
        typer.secho(f"ERROR: {e}", fg=typer.colors.RED, bold=True)
        raise typer.Exit(code=1)
    _echo_json({"run_id": run_id, "rest_api_id": handles.rest_api_id, "resource_id": handles.resource_id})


@app.command("delete-gateway")
def delete_gateway(rest_api_id: str = typer.Argument(...)):
    """Delete a REST API fixture."""
    deleted = _adapter().delete_gateway(rest_api_id)
    _echo_json({"rest_api_id": rest_api_id, "deleted": deleted})
    if not deleted:
        raise typer.Exit(code=1)


if __name__ == "__main__":
    app()
