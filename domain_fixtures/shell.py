# domain_fixtures/shell.py
import os
import logging
import subprocess
from typing import Dict, List, Optional, Sequence

from domain_fixtures.errors import CommandError

logger = logging.getLogger("domain_fixtures.shell")


def _get_env(overlay: Optional[Dict[str, str]] = None) -> Dict[str, str]:
    env = os.environ.copy()
    if overlay:
        env.update(overlay)
    return env


def run_command(
    cmd: Sequence[str],
    cwd: Optional[str] = None,
    env: Optional[Dict[str, str]] = None,
) -> subprocess.CompletedProcess:
    """
    Run a command and require a clean exit.

    Args:
        cmd: Command and arguments
        cwd: Working directory for the child process
        env: Variables layered over the current environment

    Returns:
        The completed process

    Raises:
        CommandError: exit code was non-zero, stderr was not empty, or the
            executable could not be started
    """
    cmd_list: List[str] = [str(part) for part in cmd]
    logger.debug("Running command: %s (cwd=%s)", " ".join(cmd_list), cwd)
    try:
        proc = subprocess.run(
            cmd_list,
            cwd=str(cwd) if cwd else None,
            env=_get_env(env),
            capture_output=True,
            text=True,
        )
    except OSError as e:
        raise CommandError(cmd_list, None, str(e)) from e

    if proc.stdout:
        logger.debug("stdout: %s", proc.stdout.rstrip())
    if proc.stderr:
        logger.debug("stderr: %s", proc.stderr.rstrip())

    if proc.returncode != 0 or proc.stderr:
        raise CommandError(cmd_list, proc.returncode, proc.stderr or "")
    return proc
