# domain_fixtures/lifecycle.py
"""
Provision and tear down the resources for one integration-test run.

provision:   create workspace -> create_domain -> deploy
deprovision: remove -> delete_domain -> delete workspace

Both stop at the first failing step and never raise. The outcome records
which step failed and why; on a failed deprovision the workspace is left
behind for inspection.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Tuple, Union

from domain_fixtures.cloud_adapters.serverless_adapter import ServerlessCLI
from domain_fixtures.context import GatewayHandles, RunContext
from domain_fixtures.errors import WorkspaceError
from domain_fixtures.workspace import create_workspace, remove_workspace

logger = logging.getLogger("domain_fixtures.lifecycle")


@dataclass
class RunOutcome:
    ok: bool
    run_id: str
    workspace: Optional[Path]
    step: Optional[str] = None
    error: Optional[Exception] = None

    def __bool__(self) -> bool:
        return self.ok

    def to_dict(self) -> dict:
        return {
            "ok": self.ok,
            "run_id": self.run_id,
            "workspace": str(self.workspace) if self.workspace else None,
            "step": self.step,
            "error": str(self.error) if self.error else None,
        }


class FixtureRunner:
    def __init__(self, context: RunContext, cli: Optional[ServerlessCLI] = None):
        self.context = context
        self.cli = cli or ServerlessCLI()

    def _tool_step(self, method: Callable) -> Callable[[], None]:
        ctx = self.context
        return lambda: method(ctx.workspace, ctx.run_id, ctx.env())

    def _run_steps(self, steps: List[Tuple[str, Callable[[], object]]]) -> RunOutcome:
        ctx = self.context
        for name, step in steps:
            try:
                step()
            except Exception as e:
                logger.exception("Step %s failed for run %s", name, ctx.run_id)
                return RunOutcome(False, ctx.run_id, ctx.workspace, step=name, error=e)
        return RunOutcome(True, ctx.run_id, ctx.workspace)

    def provision(self, fixture_name: str, url: str) -> RunOutcome:
        ctx = self.context
        logger.info("Creating resources for %s", url)
        logger.info("Using tmp directory %s", ctx.workspace)
        outcome = self._run_steps([
            ("create_workspace", lambda: create_workspace(fixture_name, ctx.run_id)),
            ("create_domain", self._tool_step(self.cli.create_domain)),
            ("deploy", self._tool_step(self.cli.deploy)),
        ])
        if outcome:
            logger.info("Resources created for %s", url)
        else:
            logger.error("Resources failed to create for %s", url)
        return outcome

    def deprovision(self, url: str) -> RunOutcome:
        ctx = self.context
        logger.info("Cleaning up resources for %s", url)
        outcome = self._run_steps([
            ("remove", self._tool_step(self.cli.remove)),
            ("delete_domain", self._tool_step(self.cli.delete_domain)),
            ("remove_workspace", lambda: remove_workspace(ctx.run_id)),
        ])
        if outcome:
            logger.info("Resources cleaned up for %s", url)
        else:
            logger.error("Failed to clean up resources for %s", url)
        return outcome


def _runner(
    url: str,
    run_id: str,
    gateway: Optional[GatewayHandles],
    cli: Optional[ServerlessCLI],
) -> Union[FixtureRunner, RunOutcome]:
    try:
        return FixtureRunner(RunContext.create(run_id, gateway), cli)
    except WorkspaceError as e:
        logger.error("Cannot run fixtures for %s: %s", url, e)
        return RunOutcome(False, run_id, None, step="run_context", error=e)


def provision(
    fixture_name: str,
    url: str,
    run_id: str,
    gateway: Optional[GatewayHandles] = None,
    cli: Optional[ServerlessCLI] = None,
) -> RunOutcome:
    runner = _runner(url, run_id, gateway, cli)
    if isinstance(runner, RunOutcome):
        return runner
    return runner.provision(fixture_name, url)


def deprovision(
    url: str,
    run_id: str,
    gateway: Optional[GatewayHandles] = None,
    cli: Optional[ServerlessCLI] = None,
) -> RunOutcome:
    runner = _runner(url, run_id, gateway, cli)
    if isinstance(runner, RunOutcome):
        return runner
    return runner.deprovision(url)
