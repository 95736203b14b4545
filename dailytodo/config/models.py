"""Configuration dataclass models for dailytodo."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_SECTION_HEADER = "### 重点事项"
DEFAULT_HISTORY_DAYS = 30
DEFAULT_CONFIG_DIR = Path.home() / ".dailytodo"

# Candidate vault locations, checked in order when no vault is configured
VAULT_CANDIDATES = (
    Path("Documents") / "Obsidian",
    Path("Obsidian"),
    Path("Documents"),
)

DEFAULT_CONFIG_YAML = f"""\
# Directory holding the YYYY-MM-DD.md daily notes
vault_root: null

# Optional template for new daily notes ({{{{date}}}} and {{{{today}}}} are replaced)
template_path: null

todo:
  section_header: "{DEFAULT_SECTION_HEADER}"
  history_days: {DEFAULT_HISTORY_DAYS}

watch:
  rollover_interval: 60.0
  debounce_seconds: 0.5
"""


@dataclass
class TodoConfig:
    """Configuration for the todo section."""

    section_header: str = DEFAULT_SECTION_HEADER  # H3 heading that starts the section
    history_days: int = DEFAULT_HISTORY_DAYS  # Days shown in the history view


@dataclass
class WatchConfig:
    """Configuration for `dtd watch`."""

    rollover_interval: float = 60.0  # Seconds between date-change checks
    debounce_seconds: float = 0.5  # Quiet period before reloading after a change


@dataclass
class Config:
    """Application configuration."""

    config_dir: Path = DEFAULT_CONFIG_DIR
    vault_root: Path | None = None
    vault_detected: bool = False  # vault_root was auto-detected, not read from the file
    template_path: Path | None = None
    todo: TodoConfig = field(default_factory=TodoConfig)
    watch: WatchConfig = field(default_factory=WatchConfig)

    @property
    def config_path(self) -> Path:
        """Return path to config.yaml."""
        return self.config_dir / "config.yaml"

    @property
    def log_path(self) -> Path:
        """Return path to the watch log file."""
        return self.config_dir / "watch.log"
