"""YAML and env loader with fail-fast validation."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from dotenv import load_dotenv

from citecheck.exceptions import ConfigurationError
from citecheck.models import ValidatorConfig, build_config_from_mapping

STRICTNESS_ENV = "CITECHECK_STRICTNESS"
TOOL_NAME_ENV = "CITECHECK_EXPLORATION_TOOL"


def _read_yaml(path: str) -> dict:
    resolved = Path(path)
    if not resolved.exists():
        raise FileNotFoundError(f"Missing config file: {path}")
    try:
        with resolved.open("r", encoding="utf-8") as file_obj:
            loaded = yaml.safe_load(file_obj) or {}
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Unreadable YAML in {path}: {exc}") from exc
    if not isinstance(loaded, dict):
        raise ConfigurationError(f"Expected object at root of YAML file: {path}")
    return loaded


def _env_overrides() -> Dict[str, Any]:
    overrides: Dict[str, Any] = {}
    strictness = os.getenv(STRICTNESS_ENV, "").strip().lower()
    if strictness:
        overrides["strictness"] = strictness
    tool_name = os.getenv(TOOL_NAME_ENV, "").strip()
    if tool_name:
        overrides["exploration_tool_name"] = tool_name
    return overrides


def load_validator_config(
    config_path: Optional[str] = None,
    **overrides: Any,
) -> ValidatorConfig:
    """
    Load validator configuration.

    Precedence, lowest first: strictness preset, the ``validation`` section of
    the YAML file, environment variables, explicit keyword overrides.

    Args:
        config_path: Optional YAML file; a root without a ``validation`` key is
            read as the section itself
        **overrides: Explicit field overrides (None values are ignored)

    Returns:
        ValidatorConfig instance

    Raises:
        FileNotFoundError: If config_path does not exist
        ConfigurationError: If any value is invalid
    """
    load_dotenv()
    section: Dict[str, Any] = {}
    if config_path is not None:
        loaded = _read_yaml(config_path)
        section = loaded.get("validation", loaded)
        if not isinstance(section, dict):
            raise ConfigurationError(f"'validation' section must be a mapping in {config_path}")

    merged = {**section, **_env_overrides()}
    merged.update({key: value for key, value in overrides.items() if value is not None})
    return build_config_from_mapping(merged)
