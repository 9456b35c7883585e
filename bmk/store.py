"""
Bookmark store for BMK.

BookmarkStore owns the in-memory collection and keeps it in sync with one
key of the key-value database. Every mutation writes the whole collection
back with a single call.

Example Usage:
    >>> from bmk import BookmarkStore, Database
    >>> store = BookmarkStore(Database(path="bmk.db"))
    >>> store.load()
    >>> store.add("Go Docs", "https://go.dev", "dev")
    >>> store.toggle_favorite(store.bookmarks[0].id)
"""
import json
import logging
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

from sqlalchemy.exc import SQLAlchemyError

from bmk.constants import DEFAULT_STORAGE_KEY
from bmk.db import Database
from bmk.errors import FormatError, ParseError, StorageError, ValidationError
from bmk.importers import ImportResult, merge_bookmarks, read_import_file
from bmk.models import Bookmark

logger = logging.getLogger(__name__)


class BookmarkStore:
    """
    The single owner of the bookmark collection.

    Args:
        db: Key-value database holding the persisted collection
        key: Key the collection is stored under
    """

    def __init__(self, db: Database, key: str = DEFAULT_STORAGE_KEY):
        self.db = db
        self.key = key
        self._bookmarks: List[Bookmark] = []

    @property
    def bookmarks(self) -> List[Bookmark]:
        """The current collection in insertion order (a copy)."""
        return list(self._bookmarks)

    def __len__(self) -> int:
        return len(self._bookmarks)

    def __iter__(self):
        return iter(list(self._bookmarks))

    # Persistence

    def load(self) -> List[Bookmark]:
        """
        Replace the in-memory collection with the persisted one.

        A missing key yields an empty collection. Records without an
        ``isFavorite`` flag are migrated to False.

        Raises:
            ParseError: If the stored value is not JSON
            FormatError: If the stored value is not a JSON array
            StorageError: If the database cannot be read
        """
        try:
            raw = self.db.get(self.key)
        except SQLAlchemyError as e:
            raise StorageError(f"Could not read bookmarks: {e}") from e

        if raw is None:
            self._bookmarks = []
            logger.debug("No stored collection under %r", self.key)
            return self.bookmarks

        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, RecursionError) as e:
            raise ParseError(f"Stored bookmarks are not valid JSON: {e}") from e

        if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
            raise FormatError("Stored bookmarks must be a JSON array of objects")

        self._bookmarks = [Bookmark.from_dict(item) for item in data]
        logger.debug("Loaded %d bookmarks from %r", len(self._bookmarks), self.key)
        return self.bookmarks

    def save(self) -> None:
        """Write the whole collection back to the database."""
        self._commit(self._bookmarks)

    def _commit(self, bookmarks: List[Bookmark]) -> None:
        """
        Persist a new collection, then make it the current one.

        The in-memory collection only changes once the write succeeded.

        Raises:
            StorageError: If the database cannot be written
        """
        payload = json.dumps(
            [b.to_dict() for b in bookmarks],
            ensure_ascii=False,
            separators=(",", ":"),
        )
        try:
            self.db.set(self.key, payload)
        except SQLAlchemyError as e:
            raise StorageError(f"Could not save bookmarks: {e}") from e
        self._bookmarks = list(bookmarks)
        logger.debug("Saved %d bookmarks to %r", len(bookmarks), self.key)

    def _replace(self, updated: Bookmark) -> None:
        self._commit([updated if b.id == updated.id else b for b in self._bookmarks])

    # Lookups

    def get(self, bookmark_id: str) -> Optional[Bookmark]:
        """Find a bookmark by id."""
        for bookmark in self._bookmarks:
            if bookmark.id == bookmark_id:
                return bookmark
        return None

    def categories(self) -> List[str]:
        """Distinct categories in first-seen order."""
        seen = []
        for bookmark in self._bookmarks:
            if bookmark.category not in seen:
                seen.append(bookmark.category)
        return seen

    # Mutations

    def add(self, title: str, url: str, category: str, description: str = "") -> Bookmark:
        """
        Add a new bookmark and persist.

        Args:
            title: Bookmark title (required)
            url: The URL (required)
            category: Category name (required)
            description: Optional description

        Returns:
            The created bookmark

        Raises:
            ValidationError: If title, url or category is blank
        """
        title = (title or "").strip()
        url = (url or "").strip()
        category = (category or "").strip()
        description = (description or "").strip()

        for name, value in (("title", title), ("url", url), ("category", category)):
            if not value:
                raise ValidationError(f"{name} is required", field=name)

        bookmark = Bookmark.create(title, url, category, description)
        self._commit(self._bookmarks + [bookmark])
        logger.info("Added bookmark %s (%s)", bookmark.id, url)
        return bookmark

    def delete(self, bookmark_id: str) -> bool:
        """
        Delete a bookmark.

        Returns:
            True if a bookmark was removed, False if the id was unknown
        """
        remaining = [b for b in self._bookmarks if b.id != bookmark_id]
        if len(remaining) == len(self._bookmarks):
            return False
        self._commit(remaining)
        logger.info("Deleted bookmark %s", bookmark_id)
        return True

    def toggle_favorite(self, bookmark_id: str) -> Optional[Bookmark]:
        """Flip the favorite flag. Returns None if the id is unknown."""
        bookmark = self.get(bookmark_id)
        if bookmark is None:
            return None
        updated = replace(bookmark, is_favorite=not bookmark.is_favorite)
        self._replace(updated)
        return updated

    def edit(self, bookmark_id: str, title: Optional[str] = None, url: Optional[str] = None,
             category: Optional[str] = None, description: Optional[str] = None) -> Optional[Bookmark]:
        """
        Update a bookmark's fields.

        Blank title, url or category values keep the old value. A description
        that is given at all replaces the old one, even when blank. The update
        timestamp is always refreshed.

        Returns:
            The updated bookmark, or None if the id is unknown
        """
        bookmark = self.get(bookmark_id)
        if bookmark is None:
            return None

        updated = replace(bookmark, extra=dict(bookmark.extra))
        for name, value in (("title", title), ("url", url), ("category", category)):
            if value is not None and value.strip():
                setattr(updated, name, value.strip())

        if description is not None:
            updated.description = description.strip()

        updated.touch()
        self._replace(updated)
        logger.info("Edited bookmark %s", bookmark_id)
        return updated

    # Import

    def import_text(self, raw_text: str, proceed: bool = True) -> ImportResult:
        """
        Merge exported JSON text into the collection and persist.

        On any error the collection is left untouched.
        """
        result = merge_bookmarks(raw_text, self._bookmarks, proceed=proceed)
        if result.proceeded and result.imported_count:
            self._commit(result.merged)
        return result

    def import_file(self, path: Path, proceed: bool = True) -> ImportResult:
        """Read a .json file and merge it into the collection."""
        return self.import_text(read_import_file(path), proceed=proceed)
