"""Configuration parsing functions for dailytodo."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable
from pathlib import Path
from typing import Any

from .models import (
    DEFAULT_CONFIG_DIR,
    DEFAULT_HISTORY_DAYS,
    DEFAULT_SECTION_HEADER,
    VAULT_CANDIDATES,
    TodoConfig,
    WatchConfig,
)

logger = logging.getLogger(__name__)


def expand_path(path: str | Path) -> Path:
    """Expand ~ and environment variables in a path."""
    path_str = str(path)
    # Expand environment variables
    path_str = os.path.expandvars(path_str)
    # Expand ~
    return Path(path_str).expanduser()


def get_config_dir() -> Path:
    """Get the configuration directory."""
    env_dir = os.environ.get("DAILYTODO_HOME")
    if env_dir:
        return expand_path(env_dir)
    return DEFAULT_CONFIG_DIR


def detect_vault_root(home: Path | None = None) -> Path | None:
    """Guess the vault directory when none is configured.

    Checks $DAILYTODO_VAULT first, then the usual Obsidian locations
    under the home directory.
    """
    env_vault = os.environ.get("DAILYTODO_VAULT")
    if env_vault:
        return expand_path(env_vault)

    if home is None:
        home = Path.home()
    for candidate in VAULT_CANDIDATES:
        path = home / candidate
        if path.is_dir():
            return path
    return None


def _parse_optional_path(value: Any) -> Path | None:
    if value is None or value == "":
        return None
    return expand_path(value)


def _parse_number(
    data: dict[str, Any],
    key: str,
    convert: Callable[[Any], Any],
    default: Any,
    minimum: Any,
) -> Any:
    """Read a numeric setting, falling back to the default if it is invalid."""
    value = data.get(key, default)
    try:
        number = convert(value)
    except (TypeError, ValueError):
        logger.warning("Invalid %s in config: %r; using %s", key, value, default)
        return default
    if number < minimum:
        logger.warning(
            "%s must be at least %s, got %s; using %s", key, minimum, number, default
        )
        return default
    return number


def _parse_todo_config(data: dict[str, Any] | None) -> TodoConfig:
    """Parse todo section configuration."""
    if not isinstance(data, dict):
        data = {}

    section_header = data.get("section_header") or DEFAULT_SECTION_HEADER
    return TodoConfig(
        section_header=str(section_header),
        history_days=_parse_number(data, "history_days", int, DEFAULT_HISTORY_DAYS, 1),
    )


def _parse_watch_config(data: dict[str, Any] | None) -> WatchConfig:
    """Parse watch configuration."""
    if not isinstance(data, dict):
        data = {}

    defaults = WatchConfig()
    return WatchConfig(
        rollover_interval=_parse_number(
            data, "rollover_interval", float, defaults.rollover_interval, 1.0
        ),
        debounce_seconds=_parse_number(
            data, "debounce_seconds", float, defaults.debounce_seconds, 0.0
        ),
    )
