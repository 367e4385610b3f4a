# domain_fixtures/errors.py
from typing import Optional, Sequence


class FixtureError(Exception):
    """Base class for fixture provisioning failures."""


class CommandError(FixtureError):
    """A subprocess exited non-zero or wrote to stderr."""

    def __init__(self, cmd: Sequence[str], returncode: Optional[int] = None, stderr: str = ""):
        self.cmd = list(cmd)
        self.returncode = returncode
        self.stderr = stderr
        msg = f"Command failed with code {returncode}: {' '.join(self.cmd)}"
        if stderr:
            msg = f"{msg}\n{stderr.strip()}"
        super().__init__(msg)


class WorkspaceError(FixtureError):
    pass


class CreationError(FixtureError):
    """Raised when a gateway fixture could not be created."""

    def __init__(self, msg: str, rest_api_id: Optional[str] = None):
        # set when the REST API exists but could not be completed or rolled back
        self.rest_api_id = rest_api_id
        super().__init__(msg)
