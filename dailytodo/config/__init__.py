"""Configuration management for dailytodo.

This package provides configuration loading, saving, and management for the
dtd CLI. The main entry points are:
- get_config(): Get the global configuration instance
- reset_config(): Clear the cached configuration
- load_config(): Load configuration from file
- save_config(): Save configuration to file

Library code such as TodoSession takes a Config explicitly; only the CLI
uses the cached global instance.
"""

from __future__ import annotations

from .io import (
    _serialize_dataclass_fields,
    init_config,
    load_config,
    save_config,
)
from .models import (
    DEFAULT_CONFIG_YAML,
    DEFAULT_HISTORY_DAYS,
    DEFAULT_SECTION_HEADER,
    Config,
    TodoConfig,
    WatchConfig,
)
from .parsers import (
    _parse_todo_config,
    _parse_watch_config,
    detect_vault_root,
    expand_path,
    get_config_dir,
)
from .utils import (
    CONFIGURABLE_SETTINGS,
    get_config_value,
    list_config_settings,
    set_config_value,
)

# Singleton config instance
_config: Config | None = None


def get_config() -> Config:
    """Get the global configuration instance.

    Loads config on first call, returns cached instance thereafter.
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def reset_config() -> None:
    """Reset the cached configuration (useful for testing)."""
    global _config
    _config = None


__all__ = [
    "CONFIGURABLE_SETTINGS",
    "DEFAULT_CONFIG_YAML",
    "DEFAULT_HISTORY_DAYS",
    "DEFAULT_SECTION_HEADER",
    "Config",
    "TodoConfig",
    "WatchConfig",
    "_parse_todo_config",
    "_parse_watch_config",
    "_serialize_dataclass_fields",
    "detect_vault_root",
    "expand_path",
    "get_config",
    "get_config_dir",
    "get_config_value",
    "init_config",
    "list_config_settings",
    "load_config",
    "reset_config",
    "save_config",
    "set_config_value",
]
