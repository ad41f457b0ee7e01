"""
Settings loader (``budget_config.settings``).

Responsibility
--------------
Parses a YAML settings file into the frozen ``Settings`` dataclass and applies
environment overrides.  Runtime code obtains settings through
``budget_config.get_settings()`` only.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Unknown keys or invalid values  -> ``ValueError``.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

import yaml

ENV_PREFIX = "BUDGET_"

_TRUE = frozenset({"1", "true", "yes", "on"})
_FALSE = frozenset({"0", "false", "no", "off"})


@dataclass(frozen=True)
class Settings:
    """Runtime settings for the budget tracker."""

    database_url: str = "sqlite:///budget.db"
    echo_sql: bool = False
    log_level: str = "INFO"
    process_on_startup: bool = True


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
        ValueError: if the top level is not a mapping.
    """
    with open(path, encoding="utf-8") as f:
        data = yaml.safe_load(f)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"Settings file {path} must contain a mapping")
    return data


def _parse_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise ValueError(f"Setting '{key}' must be a boolean, got {value!r}")


def _parse_log_level(value: Any) -> str:
    level = str(value).strip().upper()
    if not isinstance(logging.getLevelName(level), int):
        raise ValueError(f"Setting 'log_level' has unknown level {value!r}")
    return level


def parse_settings(data: Mapping[str, Any], base: Settings | None = None) -> Settings:
    """Build Settings from a mapping of raw values layered over ``base``."""
    known = {f.name for f in fields(Settings)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown settings: {', '.join(unknown)}")

    values: dict[str, Any] = {}
    for key, raw in data.items():
        if key in ("echo_sql", "process_on_startup"):
            values[key] = _parse_bool(key, raw)
        elif key == "log_level":
            values[key] = _parse_log_level(raw)
        else:
            text = str(raw).strip() if raw is not None else ""
            if not text:
                raise ValueError(f"Setting '{key}' must not be empty")
            values[key] = text

    return replace(base or Settings(), **values)


def env_overrides(environ: Mapping[str, str]) -> dict[str, str]:
    """Collect ``BUDGET_<FIELD>`` variables for known settings fields."""
    overrides: dict[str, str] = {}
    for f in fields(Settings):
        key = ENV_PREFIX + f.name.upper()
        if key in environ:
            overrides[f.name] = environ[key]
    return overrides
