# serverless_adapter.py
import logging
from enum import Enum
from pathlib import Path
from typing import Dict, Optional

from domain_fixtures import config
from domain_fixtures.shell import run_command

logger = logging.getLogger("domain_fixtures.adapters.serverless")


class Subcommand(str, Enum):
    CREATE_DOMAIN = "create_domain"
    DEPLOY = "deploy"
    DELETE_DOMAIN = "delete_domain"
    REMOVE = "remove"


class ServerlessCLI:
    """Runs `serverless <subcommand> --RANDOM_STRING <run_id>` inside a workspace."""

    def __init__(self, binary: Optional[str] = None):
        self.binary = binary or config.serverless_bin()

    def _binary_for(self, workspace: Path) -> str:
        if self.binary:
            return self.binary
        # link created by create_workspace
        return str(Path(workspace) / "node_modules" / ".bin" / "serverless")

    def run(
        self,
        workspace: Path,
        subcommand: Subcommand,
        run_id: str,
        env: Optional[Dict[str, str]] = None,
    ) -> None:
        """
        Invoke one subcommand with the run id so server-side resources are
        named uniquely per run.

        Raises:
            ValueError: subcommand is not one of Subcommand
            CommandError: non-zero exit or output on stderr
        """
        try:
            subcommand = Subcommand(subcommand)
        except ValueError:
            raise ValueError(f"Unsupported serverless subcommand: {subcommand}") from None

        cmd = [self._binary_for(workspace), subcommand.value, "--RANDOM_STRING", run_id]
        logger.info("serverless %s (run %s)", subcommand.value, run_id)
        run_command(cmd, cwd=str(workspace), env=env)

    def create_domain(self, workspace: Path, run_id: str, env: Optional[Dict[str, str]] = None) -> None:
        self.run(workspace, Subcommand.CREATE_DOMAIN, run_id, env)

    def deploy(self, workspace: Path, run_id: str, env: Optional[Dict[str, str]] = None) -> None:
        self.run(workspace, Subcommand.DEPLOY, run_id, env)

    def delete_domain(self, workspace: Path, run_id: str, env: Optional[Dict[str, str]] = None) -> None:
        self.run(workspace, Subcommand.DELETE_DOMAIN, run_id, env)

    def remove(self, workspace: Path, run_id: str, env: Optional[Dict[str, str]] = None) -> None:
        self.run(workspace, Subcommand.REMOVE, run_id, env)

    def deploy_lambdas(self, workspace: Path, run_id: str, env: Optional[Dict[str, str]] = None) -> None:
        """create_domain, then deploy."""
        self.create_domain(workspace, run_id, env)
        self.deploy(workspace, run_id, env)

    def remove_lambdas(self, workspace: Path, run_id: str, env: Optional[Dict[str, str]] = None) -> None:
        """remove, then delete_domain."""
        self.remove(workspace, run_id, env)
        self.delete_domain(workspace, run_id, env)
