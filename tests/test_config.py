"""
Tests for bmk/config.py configuration management.

Tests the hierarchical configuration system with sensible defaults,
including file loading, environment variables, and path expansion.
"""
import pytest
import tomli
from pathlib import Path

from bmk.config import BmkConfig, get_config, init_config


class TestBmkConfigDefaults:
    """Test default configuration values."""

    def test_default_database_is_bmk_db(self):
        assert BmkConfig().database == "bmk.db"

    def test_default_storage_key(self):
        assert BmkConfig().storage_key == "bookmarks"

    def test_default_sort_is_newest(self):
        assert BmkConfig().default_sort == "newest"

    def test_confirm_import_enabled_by_default(self):
        assert BmkConfig().confirm_import is True

    def test_default_database_url_is_none(self):
        assert BmkConfig().database_url is None


class TestConfigLoading:
    """Test configuration loading from files."""

    def test_load_defaults_when_no_files_exist(self):
        config = BmkConfig.load()
        assert config.database == "bmk.db"
        assert config.output_format == "table"

    def test_load_from_local_bmk_toml(self, tmp_path):
        (tmp_path / "bmk.toml").write_text('database = "custom.db"\nstorage_key = "work"\n')
        config = BmkConfig.load()
        assert config.database == "custom.db"
        assert config.storage_key == "work"

    def test_load_from_bmkrc(self, tmp_path):
        (tmp_path / ".bmkrc").write_text('database = "rc.db"\n')
        assert BmkConfig.load().database == "rc.db"

    def test_load_from_user_config_file(self):
        user_dir = Path.home() / ".config" / "bmk"
        user_dir.mkdir(parents=True)
        (user_dir / "config.toml").write_text('default_sort = "title"\n')
        assert BmkConfig.load().default_sort == "title"

    def test_local_config_overrides_user_config(self, tmp_path):
        user_dir = Path.home() / ".config" / "bmk"
        user_dir.mkdir(parents=True)
        (user_dir / "config.toml").write_text('database = "user.db"\nexport_dir = "exports"\n')
        (tmp_path / "bmk.toml").write_text('database = "local.db"\n')

        config = BmkConfig.load()
        assert config.database == "local.db"
        assert config.export_dir == "exports"

    def test_explicit_config_file(self, tmp_path):
        path = tmp_path / "other.toml"
        path.write_text('log_level = "DEBUG"\n')
        assert BmkConfig.load(path).log_level == "DEBUG"

    def test_unknown_keys_are_ignored(self, tmp_path):
        (tmp_path / "bmk.toml").write_text('colour = "blue"\n')
        assert not hasattr(BmkConfig.load(), "colour")


class TestEnvironmentVariables:
    """Test BMK_* environment overrides."""

    def test_string_value(self, monkeypatch):
        monkeypatch.setenv("BMK_DATABASE", "env.db")
        assert BmkConfig.load().database == "env.db"

    @pytest.mark.parametrize("raw,expected", [("true", True), ("1", True), ("no", False)])
    def test_bool_value(self, monkeypatch, raw, expected):
        monkeypatch.setenv("BMK_CONFIRM_IMPORT", raw)
        assert BmkConfig.load().confirm_import is expected

    def test_env_overrides_files(self, tmp_path, monkeypatch):
        (tmp_path / "bmk.toml").write_text('database = "file.db"\n')
        monkeypatch.setenv("BMK_DATABASE", "env.db")
        assert BmkConfig.load().database == "env.db"

    def test_paths_are_expanded(self, monkeypatch):
        monkeypatch.setenv("BMK_DATABASE", "~/bookmarks/bmk.db")
        assert BmkConfig.load().database == str(Path.home() / "bookmarks" / "bmk.db")


class TestSaveAndHelpers:
    """Test save and database helpers."""

    def test_save_round_trip(self, tmp_path):
        config = BmkConfig(database="saved.db")
        path = tmp_path / "saved.toml"
        config.save(path)

        with open(path, "rb") as f:
            data = tomli.load(f)
        assert data["database"] == "saved.db"
        assert "database_url" not in data
        assert BmkConfig.load(path).database == "saved.db"

    def test_save_defaults_to_user_config(self):
        BmkConfig().save()
        assert (Path.home() / ".config" / "bmk" / "config.toml").exists()

    def test_get_database_url_from_path(self, tmp_path):
        config = BmkConfig(database=str(tmp_path / "x.db"))
        assert config.get_database_url() == f"sqlite:///{tmp_path / 'x.db'}"
        assert config.is_sqlite()

    def test_database_url_wins(self):
        config = BmkConfig(database_url="postgresql://localhost/bookmarks")
        assert config.get_database_url() == "postgresql://localhost/bookmarks"
        assert not config.is_sqlite()


class TestGlobalConfig:
    """Test get_config and init_config."""

    def test_get_config_caches(self):
        assert get_config() is get_config()

    def test_reload(self):
        first = get_config()
        assert get_config(reload=True) is not first

    def test_init_config_overrides(self):
        config = init_config(database="cli.db", output_format="json", missing=None)
        assert config.database == "cli.db"
        assert config.output_format == "json"

    def test_init_config_with_file(self, tmp_path):
        path = tmp_path / "cli.toml"
        path.write_text('storage_key = "cli"\n')
        assert init_config(config_file=path).storage_key == "cli"
