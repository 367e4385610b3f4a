# domain_fixtures/workspace.py
"""
Disposable per-run project directories.

A workspace is a fresh copy of one fixture folder plus the node_modules
links that let `serverless` and the plugin under test resolve from the
project checkout. It is either absent or fully created; there is no
partial update.
"""

import os
import shutil
import logging
from pathlib import Path

from domain_fixtures import config
from domain_fixtures.errors import WorkspaceError

logger = logging.getLogger("domain_fixtures.workspace")


def _check_run_id(run_id: str) -> None:
    # must stay a single path segment below tmp_root
    separators = [sep for sep in (os.sep, os.altsep) if sep]
    if not run_id or run_id in (".", "..") or any(sep in run_id for sep in separators):
        raise WorkspaceError(f"Invalid run id: {run_id!r}")


def workspace_path(run_id: str) -> Path:
    _check_run_id(run_id)
    return config.tmp_root() / f"{config.WORKSPACE_PREFIX}{run_id}"


def _link(target: Path, link: Path) -> None:
    logger.debug("Linking %s -> %s", link, target)
    os.symlink(str(target), str(link))


def create_workspace(fixture_name: str, run_id: str) -> Path:
    """
    Recreate the workspace for run_id from the named fixture folder.

    Any stale directory at the target path is wiped first.
    """
    root = config.fixtures_root().resolve()
    source = (root / fixture_name).resolve()
    if source == root or root not in source.parents:
        raise WorkspaceError(f"Fixture {fixture_name!r} is outside {root}")
    if not source.is_dir():
        raise WorkspaceError(f"Fixture folder not found: {source}")

    wd = workspace_path(run_id)
    remove_workspace(run_id)
    wd.mkdir(parents=True)
    shutil.copytree(str(source), str(wd), symlinks=True, dirs_exist_ok=True)

    project = config.project_root().resolve()
    modules = wd / "node_modules"
    (modules / ".bin").mkdir(parents=True, exist_ok=True)
    # the plugin itself, resolvable by its checkout directory name
    _link(project, modules / project.name)
    _link(project / "node_modules" / "serverless", modules / "serverless")
    _link(
        project / "node_modules" / "serverless" / "bin" / "serverless.js",
        modules / ".bin" / "serverless",
    )

    logger.info("Created workspace %s from fixture %s", wd, fixture_name)
    return wd


def remove_workspace(run_id: str) -> None:
    wd = workspace_path(run_id)
    if wd.is_symlink() or wd.is_file():
        wd.unlink()
    elif wd.exists():
        shutil.rmtree(str(wd))
    else:
        return
    logger.info("Removed workspace %s", wd)
