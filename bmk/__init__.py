"""
BMK - Bookmark Keeper

A small bookmark manager that keeps its whole collection as one JSON value
in a key-value store backed by SQLAlchemy.

Example Usage:
    >>> from bmk import BookmarkStore, Database, query
    >>> store = BookmarkStore(Database())  # Uses config default
    >>> store.load()
    >>> store.add("Python", "https://python.org", "dev")
    >>> query(store.bookmarks, search="python", sort="title")
"""

__version__ = "0.1.0"
__author__ = "BMK Contributors"

# Storage
from bmk.db import Database, get_db
from bmk.store import BookmarkStore

# Configuration
from bmk.config import BmkConfig, get_config, init_config

# Models
from bmk.models import Bookmark

# Query
from bmk.query import query, filter_bookmarks, sort_bookmarks

# Import/Export
from bmk.importers import ImportResult, merge_bookmarks, read_import_file
from bmk.exporters import ExportResult, export_bookmarks, export_file, export_filename

# Errors
from bmk.errors import (
    BookmarkError,
    ValidationError,
    ParseError,
    FormatError,
    BookmarkIOError,
    EmptyExportError,
)

__all__ = [
    # Storage
    "Database",
    "get_db",
    "BookmarkStore",
    # Config
    "BmkConfig",
    "get_config",
    "init_config",
    # Models
    "Bookmark",
    # Query
    "query",
    "filter_bookmarks",
    "sort_bookmarks",
    # Import/Export
    "ImportResult",
    "merge_bookmarks",
    "read_import_file",
    "ExportResult",
    "export_bookmarks",
    "export_file",
    "export_filename",
    # Errors
    "BookmarkError",
    "ValidationError",
    "ParseError",
    "FormatError",
    "BookmarkIOError",
    "EmptyExportError",
]
