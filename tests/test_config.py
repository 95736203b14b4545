"""Tests for dailytodo.config module."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from dailytodo.config import (
    DEFAULT_HISTORY_DAYS,
    DEFAULT_SECTION_HEADER,
    Config,
    TodoConfig,
    WatchConfig,
    _parse_todo_config,
    _parse_watch_config,
    detect_vault_root,
    expand_path,
    get_config,
    get_config_dir,
    get_config_value,
    init_config,
    list_config_settings,
    load_config,
    reset_config,
    save_config,
    set_config_value,
)
from dailytodo.config.models import DEFAULT_CONFIG_DIR


class TestConfigModels:
    """Tests for configuration dataclasses."""

    def test_todo_defaults(self):
        todo = TodoConfig()
        assert todo.section_header == "### 重点事项"
        assert todo.history_days == 30

    def test_watch_defaults(self):
        watch = WatchConfig()
        assert watch.rollover_interval == 60.0
        assert watch.debounce_seconds == 0.5

    def test_paths(self, tmp_path: Path):
        cfg = Config(config_dir=tmp_path)
        assert cfg.config_path == tmp_path / "config.yaml"
        assert cfg.log_path == tmp_path / "watch.log"
        assert cfg.section_header == DEFAULT_SECTION_HEADER


class TestExpandPath:
    """Tests for expand_path function."""

    def test_tilde_expansion(self, tmp_path: Path):
        assert expand_path("~/vault") == tmp_path / "home" / "vault"

    def test_env_var_expansion(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("VAULTS", "/data/vaults")
        assert expand_path("$VAULTS/main") == Path("/data/vaults/main")

    def test_path_object(self):
        assert expand_path(Path("/tmp/test")) == Path("/tmp/test")


class TestConfigDir:
    """Tests for locating the config directory."""

    def test_env_override(self, tmp_path: Path):
        assert get_config_dir() == tmp_path / ".dailytodo"

    def test_default(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.delenv("DAILYTODO_HOME")
        assert get_config_dir() == DEFAULT_CONFIG_DIR


class TestDetectVaultRoot:
    """Tests for vault auto-detection."""

    def test_env_var_wins(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("DAILYTODO_VAULT", str(tmp_path / "env-vault"))
        assert detect_vault_root(tmp_path) == tmp_path / "env-vault"

    def test_candidates_in_order(self, tmp_path: Path):
        (tmp_path / "Documents" / "Obsidian").mkdir(parents=True)
        (tmp_path / "Obsidian").mkdir()

        assert detect_vault_root(tmp_path) == tmp_path / "Documents" / "Obsidian"

    def test_falls_back_to_documents(self, tmp_path: Path):
        (tmp_path / "Documents").mkdir()
        assert detect_vault_root(tmp_path) == tmp_path / "Documents"

    def test_nothing_found(self, tmp_path: Path):
        assert detect_vault_root(tmp_path) is None


class TestParsers:
    """Tests for section parsers."""

    def test_todo_none(self):
        todo = _parse_todo_config(None)
        assert todo.section_header == DEFAULT_SECTION_HEADER
        assert todo.history_days == DEFAULT_HISTORY_DAYS

    def test_todo_custom(self):
        todo = _parse_todo_config({"section_header": "### Today", "history_days": 7})
        assert todo.section_header == "### Today"
        assert todo.history_days == 7

    def test_todo_empty_header_uses_default(self):
        assert _parse_todo_config({"section_header": ""}).section_header == (
            DEFAULT_SECTION_HEADER
        )

    def test_watch_custom(self):
        watch = _parse_watch_config({"rollover_interval": 30, "debounce_seconds": 1})
        assert watch.rollover_interval == 30.0
        assert watch.debounce_seconds == 1.0

    @pytest.mark.parametrize("value", ["abc", None, 0, -5])
    def test_todo_invalid_history_days_uses_default(self, value, caplog):
        with caplog.at_level("WARNING"):
            todo = _parse_todo_config({"history_days": value})

        assert todo.history_days == DEFAULT_HISTORY_DAYS
        assert "history_days" in caplog.text

    def test_watch_invalid_values_use_defaults(self):
        watch = _parse_watch_config(
            {"rollover_interval": "soon", "debounce_seconds": -1}
        )
        assert watch == WatchConfig()

    def test_section_not_a_mapping(self):
        assert _parse_todo_config("oops") == TodoConfig()
        assert _parse_watch_config(["x"]) == WatchConfig()


class TestLoadConfig:
    """Tests for load_config function."""

    def test_load_existing_config(self, tmp_path: Path, temp_vault: Path):
        config_path = tmp_path / "cfg" / "config.yaml"
        config_path.parent.mkdir()
        config_data = {
            "vault_root": str(temp_vault),
            "template_path": "~/templates/daily.md",
            "todo": {"section_header": "### 今日", "history_days": 14},
            "watch": {"rollover_interval": 30},
        }
        config_path.write_text(
            yaml.safe_dump(config_data, allow_unicode=True), encoding="utf-8"
        )

        cfg = load_config(config_path)

        assert cfg.config_dir == tmp_path / "cfg"
        assert cfg.vault_root == temp_vault
        assert cfg.template_path == tmp_path / "home" / "templates" / "daily.md"
        assert cfg.todo.section_header == "### 今日"
        assert cfg.todo.history_days == 14
        assert cfg.watch.rollover_interval == 30.0
        assert cfg.watch.debounce_seconds == 0.5

    def test_load_nonexistent_uses_defaults(self, tmp_path: Path):
        cfg = load_config(tmp_path / "nonexistent" / "config.yaml")

        assert cfg.vault_root is None
        assert cfg.template_path is None
        assert cfg.todo == TodoConfig()
        assert cfg.watch == WatchConfig()

    def test_detected_vault_not_saved(self, tmp_path: Path):
        documents = tmp_path / "home" / "Documents"
        documents.mkdir(parents=True)
        config_path = tmp_path / "cfg" / "config.yaml"

        cfg = load_config(config_path)
        assert cfg.vault_root == documents
        assert not config_path.exists()

    def test_detected_vault_not_written_by_set(self, tmp_path: Path):
        documents = tmp_path / "home" / "Documents"
        documents.mkdir(parents=True)
        config_path = tmp_path / "cfg" / "config.yaml"

        cfg = load_config(config_path)
        assert cfg.vault_detected is True
        assert set_config_value("todo.history_days", "7", cfg) is True

        data = yaml.safe_load(config_path.read_text(encoding="utf-8"))
        assert data["vault_root"] is None
        assert data["todo"]["history_days"] == 7
        assert load_config(config_path).vault_root == documents

    def test_env_vault_not_written_by_set(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ):
        config_path = tmp_path / "cfg" / "config.yaml"
        monkeypatch.setenv("DAILYTODO_VAULT", str(tmp_path / "first"))
        cfg = load_config(config_path)
        set_config_value("watch.debounce_seconds", "1.0", cfg)

        monkeypatch.setenv("DAILYTODO_VAULT", str(tmp_path / "second"))
        assert load_config(config_path).vault_root == tmp_path / "second"

    def test_explicit_vault_replaces_detected(self, tmp_path: Path, temp_vault: Path):
        (tmp_path / "home" / "Documents").mkdir(parents=True)
        config_path = tmp_path / "cfg" / "config.yaml"

        cfg = load_config(config_path)
        set_config_value("vault_root", str(temp_vault), cfg)

        assert cfg.vault_detected is False
        reloaded = load_config(config_path)
        assert reloaded.vault_root == temp_vault
        assert reloaded.vault_detected is False

    def test_invalid_yaml_uses_defaults(self, tmp_path: Path):
        config_path = tmp_path / "config.yaml"
        config_path.write_text("todo: [unclosed\n", encoding="utf-8")

        assert load_config(config_path).todo == TodoConfig()

    def test_invalid_history_days_in_file(self, tmp_path: Path):
        config_path = tmp_path / "config.yaml"
        config_path.write_text("todo:\n  history_days: abc\n", encoding="utf-8")

        assert load_config(config_path).todo.history_days == DEFAULT_HISTORY_DAYS

    def test_empty_file(self, tmp_path: Path):
        config_path = tmp_path / "config.yaml"
        config_path.write_text("", encoding="utf-8")

        assert load_config(config_path).todo == TodoConfig()


class TestSaveConfig:
    """Tests for save_config function."""

    def test_save_and_reload(self, tmp_path: Path, temp_vault: Path):
        cfg = Config(
            config_dir=tmp_path / "cfg",
            vault_root=temp_vault,
            todo=TodoConfig(section_header="### 重点事项", history_days=10),
        )

        save_config(cfg)
        loaded = load_config(cfg.config_path)

        assert loaded.vault_root == temp_vault
        assert loaded.todo.history_days == 10
        assert loaded.todo.section_header == "### 重点事项"

    def test_unicode_written_verbatim(self, tmp_path: Path):
        cfg = Config(config_dir=tmp_path)
        save_config(cfg)

        assert "### 重点事项" in cfg.config_path.read_text(encoding="utf-8")

    def test_default_watch_settings_omitted(self, tmp_path: Path):
        cfg = Config(config_dir=tmp_path)
        save_config(cfg)

        data = yaml.safe_load(cfg.config_path.read_text(encoding="utf-8"))
        assert "watch" not in data
        assert data["vault_root"] is None

    def test_changed_watch_settings_saved(self, tmp_path: Path):
        cfg = Config(config_dir=tmp_path, watch=WatchConfig(rollover_interval=5.0))
        save_config(cfg)

        data = yaml.safe_load(cfg.config_path.read_text(encoding="utf-8"))
        assert data["watch"] == {"rollover_interval": 5.0}


class TestInitConfig:
    """Tests for first-run setup."""

    def test_creates_default_file(self, tmp_path: Path):
        cfg = init_config(tmp_path / "cfg")

        assert cfg.config_path.exists()
        assert cfg.todo == TodoConfig()
        assert "section_header" in cfg.config_path.read_text(encoding="utf-8")

    def test_keeps_existing_file(self, tmp_path: Path):
        config_dir = tmp_path / "cfg"
        config_dir.mkdir()
        (config_dir / "config.yaml").write_text("todo:\n  history_days: 3\n", encoding="utf-8")

        assert init_config(config_dir).todo.history_days == 3


class TestConfigSingleton:
    """Tests for get_config and reset_config."""

    def test_cached(self):
        reset_config()
        try:
            assert get_config() is get_config()
        finally:
            reset_config()

    def test_reads_from_config_home(self, tmp_path: Path):
        config_dir = tmp_path / ".dailytodo"
        config_dir.mkdir()
        (config_dir / "config.yaml").write_text("todo:\n  history_days: 9\n", encoding="utf-8")

        reset_config()
        try:
            assert get_config().todo.history_days == 9
        finally:
            reset_config()


class TestConfigValues:
    """Tests for get/set/list of dot-notation settings."""

    def test_get_values(self, temp_config: Config, temp_vault: Path):
        assert get_config_value("vault_root", temp_config) == str(temp_vault)
        assert get_config_value("template_path", temp_config) is None
        assert get_config_value("todo.section_header", temp_config) == "### 重点事项"
        assert get_config_value("todo.history_days", temp_config) == 30
        assert get_config_value("watch.rollover_interval", temp_config) == 60.0

    def test_get_unknown(self, temp_config: Config):
        assert get_config_value("editor", temp_config) is None
        assert get_config_value("todo.missing", temp_config) is None
        assert get_config_value("todo.section_header.extra", temp_config) is None

    def test_set_history_days(self, temp_config: Config):
        assert set_config_value("todo.history_days", "7", temp_config) is True
        assert temp_config.todo.history_days == 7
        assert load_config(temp_config.config_path).todo.history_days == 7

    @pytest.mark.parametrize("value", ["0", "-3", "seven"])
    def test_set_history_days_invalid(self, temp_config: Config, value: str):
        with pytest.raises(ValueError):
            set_config_value("todo.history_days", value, temp_config)

    def test_set_section_header(self, temp_config: Config):
        assert set_config_value("todo.section_header", "### Today", temp_config) is True
        assert temp_config.section_header == "### Today"

    def test_set_empty_section_header(self, temp_config: Config):
        with pytest.raises(ValueError):
            set_config_value("todo.section_header", "  ", temp_config)

    def test_set_vault_root(self, temp_config: Config, tmp_path: Path):
        other = tmp_path / "other"
        other.mkdir()

        assert set_config_value("vault_root", str(other), temp_config) is True
        assert temp_config.vault_root == other

    def test_set_missing_vault_root(self, temp_config: Config, tmp_path: Path):
        with pytest.raises(ValueError, match="does not exist"):
            set_config_value("vault_root", str(tmp_path / "missing"), temp_config)

    def test_clear_template_path(self, temp_config: Config, tmp_path: Path):
        set_config_value("template_path", str(tmp_path / "t.md"), temp_config)
        assert temp_config.template_path == tmp_path / "t.md"

        set_config_value("template_path", "none", temp_config)
        assert temp_config.template_path is None

    def test_set_watch_values(self, temp_config: Config):
        assert set_config_value("watch.debounce_seconds", "0", temp_config) is True
        assert temp_config.watch.debounce_seconds == 0.0

        with pytest.raises(ValueError):
            set_config_value("watch.rollover_interval", "0.5", temp_config)

    def test_set_unknown(self, temp_config: Config):
        assert set_config_value("editor", "vim", temp_config) is False
        assert set_config_value("todo.color", "red", temp_config) is False

    def test_uses_global_config(self, mock_config: Config):
        assert get_config_value("todo.history_days") == 30
        set_config_value("todo.history_days", "12")
        assert mock_config.todo.history_days == 12

    def test_list_settings(self, temp_config: Config):
        settings = list_config_settings(temp_config)

        assert list(settings) == [
            "vault_root",
            "template_path",
            "todo.section_header",
            "todo.history_days",
            "watch.rollover_interval",
            "watch.debounce_seconds",
        ]
        description, value = settings["todo.history_days"]
        assert "history" in description
        assert value == 30

