"""Configuration utility functions for dailytodo."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from .parsers import expand_path

if TYPE_CHECKING:
    from .models import Config

# Configurable settings with descriptions
CONFIGURABLE_SETTINGS = {
    "vault_root": "Directory holding the YYYY-MM-DD.md daily notes",
    "template_path": "Template file for new daily notes (supports {{date}}, {{today}})",
    "todo.section_header": "Heading that starts the todo section (default: ### 重点事项)",
    "todo.history_days": "Number of days shown by 'dtd list --history' (default 30)",
    "watch.rollover_interval": "Seconds between date-change checks in 'dtd watch' (default 60)",
    "watch.debounce_seconds": "Quiet period before reloading after a file change (default 0.5)",
}

CLEAR_VALUES = ("", "none")


def _parse_positive_int(value: str, setting_name: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise ValueError(f"{setting_name} must be an integer, got '{value}'") from None
    if number < 1:
        raise ValueError(f"{setting_name} must be at least 1")
    return number


def _parse_float(value: str, setting_name: str, minimum: float = 0.0) -> float:
    try:
        number = float(value)
    except ValueError:
        raise ValueError(f"{setting_name} must be a number, got '{value}'") from None
    if number < minimum:
        raise ValueError(f"{setting_name} must be at least {minimum}")
    return number


def get_config_value(key: str, config: Config | None = None) -> Any:
    """Get a config value by dot-notation key.

    Args:
        key: Configuration key (e.g., 'vault_root', 'todo.section_header')
        config: Config to read from (defaults to the global config)

    Returns:
        The configuration value, or None if not found.

    """
    if config is None:
        # Import here to avoid circular imports
        from . import get_config

        config = get_config()

    parts = key.split(".")

    if len(parts) == 1:
        if key == "vault_root":
            return str(config.vault_root) if config.vault_root else None
        elif key == "template_path":
            return str(config.template_path) if config.template_path else None
    elif parts[0] == "todo" and len(parts) == 2:
        attr = parts[1]
        if hasattr(config.todo, attr):
            return getattr(config.todo, attr)
    elif parts[0] == "watch" and len(parts) == 2:
        attr = parts[1]
        if hasattr(config.watch, attr):
            return getattr(config.watch, attr)

    return None


def set_config_value(key: str, value: str, config: Config | None = None) -> bool:
    """Set a config value by dot-notation key and save the config file.

    Args:
        key: Configuration key (e.g., 'vault_root', 'todo.section_header')
        value: Value to set (use empty string or 'none' to clear optional paths)
        config: Config to update (defaults to the global config)

    Returns:
        True if successful, False if key not recognized.

    Raises:
        ValueError: If the value is invalid for the setting type.

    """
    from .io import save_config

    if config is None:
        from . import get_config

        config = get_config()

    parts = key.split(".")

    if len(parts) == 1:
        if key == "vault_root":
            if value.lower() in CLEAR_VALUES:
                config.vault_root = None
                config.vault_detected = False
            else:
                path = expand_path(value)
                if not path.is_dir():
                    raise ValueError(f"Directory does not exist: {path}")
                config.vault_root = path
                config.vault_detected = False
        elif key == "template_path":
            if value.lower() in CLEAR_VALUES:
                config.template_path = None
            else:
                config.template_path = expand_path(value)
        else:
            return False
    elif parts[0] == "todo" and len(parts) == 2:
        attr = parts[1]
        if attr == "section_header":
            if not value.strip():
                raise ValueError("section_header must not be empty")
            config.todo.section_header = value
        elif attr == "history_days":
            config.todo.history_days = _parse_positive_int(value, "todo.history_days")
        else:
            return False
    elif parts[0] == "watch" and len(parts) == 2:
        attr = parts[1]
        if attr == "rollover_interval":
            config.watch.rollover_interval = _parse_float(value, key, minimum=1.0)
        elif attr == "debounce_seconds":
            config.watch.debounce_seconds = _parse_float(value, key)
        else:
            return False
    else:
        return False

    save_config(config)
    return True


def list_config_settings(config: Config | None = None) -> dict[str, tuple[str, Any]]:
    """List all configurable settings with their current values.

    Returns:
        Dict mapping key to (description, current_value).

    """
    result = {}
    for key, description in CONFIGURABLE_SETTINGS.items():
        result[key] = (description, get_config_value(key, config))
    return result
