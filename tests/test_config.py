"""
Tests for configuration loading and the persisted settings store
"""

import pytest
from dotenv import dotenv_values

from mcs_builder.config import DEFAULT_MODEL, BuilderConfig, SettingsStore, load_config


class TestBuilderConfig:
    """Test BuilderConfig defaults and read-time precedence"""

    def test_defaults(self):
        config = BuilderConfig()
        assert config.build_mode == "text"
        assert config.max_rounds == 5
        assert config.command_delay_ms == 5
        assert config.progress_interval == 100
        assert config.placement_progress_interval == 50
        assert config.anthropic_version == "2023-06-01"
        assert config.get_model() == DEFAULT_MODEL

    def test_environment_key_wins_at_read_time(self, monkeypatch):
        """The environment variable is consulted on every read"""
        config = BuilderConfig(api_key="stored-key")
        assert config.get_api_key() == "stored-key"

        monkeypatch.setenv("CLAUDE_API_KEY", "env-key")
        assert config.get_api_key() == "env-key"

    def test_empty_key_is_unset(self):
        assert BuilderConfig(api_key="").get_api_key() is None
        assert BuilderConfig().get_api_key() is None

    def test_environment_model(self, monkeypatch):
        config = BuilderConfig(model="claude-stored")
        monkeypatch.setenv("CLAUDE_MODEL", "claude-env")
        assert config.get_model() == "claude-env"

    def test_invalid_build_mode(self):
        with pytest.raises(ValueError):
            BuilderConfig(build_mode="voxels")


class TestSettingsStore:
    """Test the key-value settings file"""

    def test_ensure_exists_seeds_from_environment(self, tmp_path, monkeypatch):
        monkeypatch.setenv("CLAUDE_API_KEY", "sk-ant-from-env")
        store = SettingsStore(str(tmp_path / "cfg"))
        store.ensure_exists()

        assert store.path.exists()
        values = dotenv_values(store.path)
        assert values["api_key"] == "sk-ant-from-env"
        assert values["model"] == DEFAULT_MODEL

    def test_ensure_exists_keeps_existing_file(self, tmp_path):
        store = SettingsStore(str(tmp_path))
        store.save_api_key("sk-ant-first")
        store.ensure_exists()
        assert store.load()["api_key"] == "sk-ant-first"

    def test_load_skips_empty_and_unknown_values(self, tmp_path):
        store = SettingsStore(str(tmp_path))
        store.path.write_text("api_key=\nmodel=claude-x\nother=1\n", encoding="utf-8")
        assert store.load() == {"model": "claude-x"}

    def test_save_unknown_key(self, tmp_path):
        with pytest.raises(KeyError):
            SettingsStore(str(tmp_path)).save("password", "hunter2")

    def test_load_missing_file(self, tmp_path):
        assert SettingsStore(str(tmp_path / "nowhere")).load() == {}


class TestLoadConfig:
    """Test layering of defaults, persisted settings, environment and overrides"""

    def test_persisted_values_used(self, tmp_path):
        store = SettingsStore(str(tmp_path))
        store.save_api_key("sk-ant-persisted")
        store.save("model", "claude-persisted")

        config = load_config(str(tmp_path))
        assert config.get_api_key() == "sk-ant-persisted"
        assert config.get_model() == "claude-persisted"
        assert config.config_dir == str(tmp_path)

    def test_environment_beats_persisted(self, tmp_path, monkeypatch):
        SettingsStore(str(tmp_path)).save_api_key("sk-ant-persisted")
        monkeypatch.setenv("CLAUDE_API_KEY", "sk-ant-env")

        config = load_config(str(tmp_path))
        assert config.get_api_key() == "sk-ant-env"

    def test_overrides_win(self, tmp_path):
        config = load_config(str(tmp_path), build_mode="blocks", max_rounds=2)
        assert config.build_mode == "blocks"
        assert config.max_rounds == 2

    def test_config_dir_from_environment(self, tmp_path, monkeypatch):
        monkeypatch.setenv("CLAUDE_CONFIG_DIR", str(tmp_path / "envdir"))
        config = load_config()
        assert config.config_dir == str(tmp_path / "envdir")
        assert (tmp_path / "envdir" / "config.env").exists()
