"""
budget_config -- single public entrypoint for runtime settings.

Responsibility:
    ``get_settings()`` is the ONLY way runtime code obtains configuration.
    It reads a YAML settings file and layers ``BUDGET_*`` environment
    variables on top.

Resolution order (later wins):
    1. ``Settings`` defaults.
    2. The YAML file: ``path`` argument, else ``$BUDGET_CONFIG_FILE``, else
       ``budget_config/sets/default.yaml``.
    3. Environment overrides: ``BUDGET_DATABASE_URL``, ``BUDGET_ECHO_SQL``,
       ``BUDGET_LOG_LEVEL``, ``BUDGET_PROCESS_ON_STARTUP``.

Failure modes:
    - ``FileNotFoundError`` -- the selected YAML file does not exist.
    - ``ValueError`` -- unknown keys or malformed values.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from pathlib import Path

from budget_config.settings import (
    Settings,
    env_overrides,
    load_yaml_file,
    parse_settings,
)

_logger = logging.getLogger("budget_kernel.config")

_DEFAULT_CONFIG_FILE = Path(__file__).parent / "sets" / "default.yaml"

CONFIG_FILE_ENV = "BUDGET_CONFIG_FILE"


def get_settings(
    path: Path | str | None = None,
    environ: Mapping[str, str] | None = None,
) -> Settings:
    """Return the effective settings."""
    env = os.environ if environ is None else environ
    config_path = Path(path or env.get(CONFIG_FILE_ENV) or _DEFAULT_CONFIG_FILE)

    settings = parse_settings(load_yaml_file(config_path))
    overrides = env_overrides(env)
    if overrides:
        settings = parse_settings(overrides, base=settings)

    _logger.debug(
        "settings_loaded",
        extra={
            "config_file": str(config_path),
            "overrides": sorted(overrides),
            "process_on_startup": settings.process_on_startup,
        },
    )
    return settings


__all__ = [
    "Settings",
    "get_settings",
]
