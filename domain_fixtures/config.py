# domain_fixtures/config.py
"""
Settings for the integration-test fixtures.

Every setting is resolved when it is read: environment variable first, then
~/.domain_fixtures/config.json, then the built-in default.
"""

from __future__ import annotations
import json
import os
import pathlib
from typing import Any, Dict, Optional

CONFIG_DIR_NAME = ".domain_fixtures"
WORKSPACE_PREFIX = "domain-manager-test-"
DEFAULT_REGION = "us-west-2"
FIXTURES_SUBDIR = pathlib.Path("test") / "integration-tests"

ENV_VARS = {
    "aws_profile": "AWS_PROFILE",
    "aws_region": "DOMAIN_FIXTURES_REGION",
    "project_root": "DOMAIN_FIXTURES_PROJECT_ROOT",
    "fixtures_root": "DOMAIN_FIXTURES_ROOT",
    "tmp_root": "DOMAIN_FIXTURES_TMP_ROOT",
    "serverless_bin": "DOMAIN_FIXTURES_SLS_BIN",
}


def config_path() -> pathlib.Path:
    return pathlib.Path.home() / CONFIG_DIR_NAME / "config.json"


def _load_config() -> Dict[str, Any]:
    """Load the JSON config file, or an empty dict if missing/unreadable."""
    path = config_path()
    if not path.exists():
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return {}
    return data if isinstance(data, dict) else {}


def get_setting(name: str, default: Optional[str] = None) -> Optional[str]:
    """
    Resolve a single setting.

    Args:
        name: Setting key (one of ENV_VARS)
        default: Value used when neither env nor config file sets it

    Returns:
        The resolved value or default
    """
    if name not in ENV_VARS:
        raise KeyError(f"Unknown setting: {name}")
    value = os.environ.get(ENV_VARS[name])
    if value:
        return value
    value = _load_config().get(name)
    if value:
        return str(value)
    return default


def aws_profile() -> Optional[str]:
    return get_setting("aws_profile")


def aws_region() -> str:
    return get_setting("aws_region", DEFAULT_REGION)


def project_root() -> pathlib.Path:
    root = get_setting("project_root")
    return pathlib.Path(root).expanduser() if root else pathlib.Path.cwd()


def fixtures_root() -> pathlib.Path:
    root = get_setting("fixtures_root")
    if root:
        return pathlib.Path(root).expanduser()
    return project_root() / FIXTURES_SUBDIR


def tmp_root() -> pathlib.Path:
    root = get_setting("tmp_root")
    if root:
        return pathlib.Path(root).expanduser()
    return pathlib.Path.home() / "tmp"


def serverless_bin() -> Optional[str]:
    return get_setting("serverless_bin")
