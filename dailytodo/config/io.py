"""Configuration I/O functions for dailytodo."""

from __future__ import annotations

import logging
from dataclasses import fields, is_dataclass
from pathlib import Path
from typing import Any

import yaml

from .models import DEFAULT_CONFIG_YAML, Config, WatchConfig
from .parsers import (
    _parse_optional_path,
    _parse_todo_config,
    _parse_watch_config,
    detect_vault_root,
    get_config_dir,
)

logger = logging.getLogger(__name__)


def load_config(config_path: Path | None = None) -> Config:
    """Load configuration from YAML file.

    Missing settings fall back to defaults. If no vault is configured,
    an existing vault is looked up with detect_vault_root().
    """
    if config_path is None:
        config_path = get_config_dir() / "config.yaml"

    data: Any = {}
    if config_path.exists():
        with config_path.open(encoding="utf-8") as f:
            try:
                data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                logger.warning("Could not parse %s, using defaults: %s", config_path, e)
    if not isinstance(data, dict):
        logger.warning("Ignoring %s: expected a mapping", config_path)
        data = {}

    vault_root = _parse_optional_path(data.get("vault_root"))
    vault_detected = False
    if vault_root is None:
        vault_root = detect_vault_root()
        vault_detected = vault_root is not None

    return Config(
        config_dir=config_path.parent,
        vault_root=vault_root,
        vault_detected=vault_detected,
        template_path=_parse_optional_path(data.get("template_path")),
        todo=_parse_todo_config(data.get("todo")),
        watch=_parse_watch_config(data.get("watch")),
    )


def _serialize_dataclass_fields(
    obj: Any,
    defaults: Any | None = None,
    exclude: set[str] | None = None,
    include_none: bool = False,
) -> dict[str, Any]:
    """Serialize a dataclass to a dict using field introspection.

    Args:
        obj: The dataclass instance to serialize.
        defaults: Optional defaults instance to compare against. If provided,
            only fields that differ from defaults will be included.
        exclude: Set of field names to exclude from serialization.
        include_none: If False (default), exclude None values.

    Returns:
        Dictionary of field names to values.

    """
    if not is_dataclass(obj):
        raise TypeError(f"{obj} is not a dataclass instance")

    exclude = exclude or set()
    result: dict[str, Any] = {}

    for _field in fields(obj):
        if _field.name in exclude:
            continue

        value = getattr(obj, _field.name)

        if value is None and not include_none:
            continue

        if defaults is not None:
            default_value = getattr(defaults, _field.name, None)
            if value == default_value:
                continue

        if isinstance(value, Path):
            value = str(value)

        result[_field.name] = value

    return result


def _configured_vault(config: Config) -> str | None:
    if config.vault_root is None or config.vault_detected:
        return None
    return str(config.vault_root)


def save_config(config: Config) -> None:
    """Save configuration to YAML file.

    Serialization strategies:
    - vault_root, template_path: always written (null when unset)
    - vault_root stays null while it is only auto-detected
    - todo: all fields
    - watch: only non-default values
    """
    data: dict[str, Any] = {
        "vault_root": _configured_vault(config),
        "template_path": str(config.template_path) if config.template_path else None,
        "todo": _serialize_dataclass_fields(config.todo),
    }

    watch_data = _serialize_dataclass_fields(config.watch, defaults=WatchConfig())
    if watch_data:
        data["watch"] = watch_data

    config.config_path.parent.mkdir(parents=True, exist_ok=True)
    with config.config_path.open("w", encoding="utf-8") as f:
        yaml.safe_dump(
            data, f, default_flow_style=False, sort_keys=False, allow_unicode=True
        )


def init_config(config_dir: Path | None = None) -> Config:
    """Initialize configuration for first-time setup.

    Writes the default config file if it doesn't exist yet.
    """
    if config_dir is None:
        config_dir = get_config_dir()

    config_path = config_dir / "config.yaml"
    config_dir.mkdir(parents=True, exist_ok=True)

    if not config_path.exists():
        with config_path.open("w", encoding="utf-8") as f:
            f.write("# dailytodo configuration\n\n")
            f.write(DEFAULT_CONFIG_YAML)

    return load_config(config_path)
