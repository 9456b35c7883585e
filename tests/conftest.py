import json
import os
import pytest

import bmk.config
import bmk.db
from bmk.db import Database
from bmk.store import BookmarkStore


@pytest.fixture(autouse=True)
def isolated_env(tmp_path, monkeypatch):
    """Keep tests away from real config files and cached globals."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    for key in list(os.environ):
        if key.startswith("BMK_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(bmk.config, "_config", None)
    monkeypatch.setattr(bmk.db, "_db", None)
    yield


@pytest.fixture
def sample_bookmarks():
    """Sample serialized bookmarks, as found in an export file."""
    return [
        {
            "id": "1",
            "title": "Go Docs",
            "url": "https://go.dev",
            "category": "dev",
            "description": "Official Go documentation",
            "createdAt": "2024-01-10T08:00:00.000Z",
            "updatedAt": "2024-01-10T08:00:00.000Z",
            "isFavorite": False,
        },
        {
            "id": "2",
            "title": "Dribbble",
            "url": "https://dribbble.com",
            "category": "design",
            "description": "",
            "createdAt": "2024-03-05T12:30:00.000Z",
            "updatedAt": "2024-03-06T09:00:00.000Z",
            "isFavorite": True,
        },
        {
            "id": "3",
            "title": "Hacker News",
            "url": "https://news.ycombinator.com",
            "category": "news",
            "description": "Tech news and discussion",
            "createdAt": "2024-02-20T18:45:00.000Z",
            "updatedAt": "2024-02-20T18:45:00.000Z",
            "isFavorite": False,
        },
    ]


@pytest.fixture
def db_path(tmp_path):
    return tmp_path / "test.db"


@pytest.fixture
def db(db_path):
    return Database(path=str(db_path))


@pytest.fixture
def store(db):
    """An empty, loaded store."""
    s = BookmarkStore(db)
    s.load()
    return s


@pytest.fixture
def populated_store(db, sample_bookmarks):
    """A store loaded from a database holding the sample bookmarks."""
    db.set("bookmarks", json.dumps(sample_bookmarks))
    s = BookmarkStore(db)
    s.load()
    return s


@pytest.fixture
def import_file(tmp_path):
    """Factory writing JSON (or raw text) to a file for import tests."""
    def _write(content, name="import.json"):
        path = tmp_path / name
        if not isinstance(content, str):
            content = json.dumps(content, ensure_ascii=False)
        path.write_text(content, encoding="utf-8")
        return path
    return _write
