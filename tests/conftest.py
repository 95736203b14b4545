"""Shared fixtures for dailytodo tests."""

from __future__ import annotations

from collections.abc import Callable, Generator
from datetime import date
from pathlib import Path

import pytest
from click.testing import CliRunner

from dailytodo import config as config_module
from dailytodo.cli import config_cmd as config_cmd_module
from dailytodo.cli import utils as cli_utils_module
from dailytodo.config import Config, TodoConfig, WatchConfig

SECTION_HEADER = "### 重点事项"


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep tests away from the real ~/.dailytodo and vault detection."""
    monkeypatch.setenv("DAILYTODO_HOME", str(tmp_path / ".dailytodo"))
    monkeypatch.delenv("DAILYTODO_VAULT", raising=False)
    monkeypatch.setenv("HOME", str(tmp_path / "home"))


@pytest.fixture
def temp_vault(tmp_path: Path) -> Path:
    """Create a temporary vault directory."""
    vault = tmp_path / "vault"
    vault.mkdir()
    return vault


@pytest.fixture
def temp_config(tmp_path: Path, temp_vault: Path) -> Generator[Config]:
    """Create a temporary configuration for testing."""
    config_dir = tmp_path / ".dailytodo"
    config_dir.mkdir(exist_ok=True)
    cfg = Config(
        config_dir=config_dir,
        vault_root=temp_vault,
        todo=TodoConfig(section_header=SECTION_HEADER, history_days=30),
        watch=WatchConfig(rollover_interval=60.0, debounce_seconds=0.0),
    )

    yield cfg

    config_module.reset_config()


@pytest.fixture
def mock_config(temp_config: Config, monkeypatch: pytest.MonkeyPatch) -> Config:
    """Mock get_config() to return temp_config.

    Patches get_config in dailytodo.config and in the modules that import it
    at module level.
    """
    config_module.reset_config()
    monkeypatch.setattr(config_module, "_config", temp_config)
    monkeypatch.setattr(config_module, "get_config", lambda: temp_config)
    monkeypatch.setattr(cli_utils_module, "get_config", lambda: temp_config)
    monkeypatch.setattr(config_cmd_module, "get_config", lambda: temp_config)
    return temp_config


@pytest.fixture
def fixed_today(monkeypatch: pytest.MonkeyPatch) -> date:
    """Fix date.today() to a known value for deterministic tests."""
    fixed = date(2025, 11, 28)  # A Friday

    class MockDate(date):
        @classmethod
        def today(cls) -> date:
            return fixed

    monkeypatch.setattr("dailytodo.utils.dates.date", MockDate)
    monkeypatch.setattr("dailytodo.core.notes.date", MockDate)
    monkeypatch.setattr("dailytodo.core.session.date", MockDate)
    return fixed


@pytest.fixture
def cli_runner() -> CliRunner:
    """Create a Click CLI runner for testing commands."""
    return CliRunner()


@pytest.fixture
def create_daily_note(temp_vault: Path) -> Callable[[date, str], Path]:
    """Factory fixture to create daily note files.

    Usage:
        def test_something(create_daily_note):
            path = create_daily_note(date(2025, 11, 28), "### 重点事项\\n- [ ] Task")
    """

    def _create(dt: date, content: str) -> Path:
        path = temp_vault / f"{dt.isoformat()}.md"
        path.write_bytes(content.encode("utf-8"))
        return path

    return _create


@pytest.fixture
def read_daily_note(temp_vault: Path) -> Callable[[date], str]:
    """Factory fixture returning a daily note's raw content."""

    def _read(dt: date) -> str:
        return (temp_vault / f"{dt.isoformat()}.md").read_bytes().decode("utf-8")

    return _read
