"""
Tests for bmk/db.py key-value storage.
"""
import os
from pathlib import Path

from bmk.db import Database, get_db


class TestDatabaseInit:
    """Test Database initialization."""

    def test_init_with_path(self, tmp_path):
        db_path = tmp_path / "bookmarks.db"
        db = Database(path=str(db_path))
        assert db.path == db_path
        assert db.url == f"sqlite:///{db_path}"
        assert db_path.exists()

    def test_init_creates_parent_directory(self, tmp_path):
        db_path = tmp_path / "nested" / "dir" / "bmk.db"
        Database(path=str(db_path))
        assert db_path.parent.is_dir()

    def test_init_with_url(self):
        db = Database(url="sqlite://")
        assert db.path is None
        assert db.url == "sqlite://"

    def test_init_uses_config_default(self, tmp_path):
        db = Database()
        assert db.path == Path(os.getcwd()) / "bmk.db"

    def test_in_memory_keeps_data_between_sessions(self):
        db = Database(url="sqlite://")
        db.set("k", "v")
        assert db.get("k") == "v"


class TestKeyValueOperations:
    """Test get and set."""

    def test_get_missing_returns_none(self, db):
        assert db.get("bookmarks") is None

    def test_set_and_get(self, db):
        db.set("bookmarks", "[]")
        assert db.get("bookmarks") == "[]"

    def test_set_overwrites(self, db):
        db.set("bookmarks", "[1]")
        db.set("bookmarks", "[2]")
        assert db.get("bookmarks") == "[2]"
        assert db.get("other") is None

    def test_values_persist_across_connections(self, db_path):
        Database(path=str(db_path)).set("bookmarks", "[\"x\"]")
        assert Database(path=str(db_path)).get("bookmarks") == "[\"x\"]"

    def test_keys_are_independent(self, db):
        for key in ("b", "a", "c"):
            db.set(key, key.upper())
        assert [db.get(k) for k in ("a", "b", "c")] == ["A", "B", "C"]


class TestGetDb:
    def test_get_db_caches_instance(self, tmp_path):
        first = get_db(str(tmp_path / "one.db"))
        assert get_db() is first

    def test_get_db_with_path_reconnects(self, tmp_path):
        first = get_db(str(tmp_path / "one.db"))
        second = get_db(str(tmp_path / "two.db"))
        assert first is not second
