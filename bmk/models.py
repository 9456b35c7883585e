"""
Data models for BMK.

Bookmark is the in-memory record the rest of the package works with. It
serializes to the camelCase JSON objects kept in the persisted collection
and in export files.

KeyValue is the SQLAlchemy table behind the persistent key-value slot:
the whole collection lives as a single JSON string under one key.
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy import String, Text, DateTime
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from bmk.utils import format_timestamp, generate_unique_id, parse_timestamp


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


class KeyValue(Base):
    """
    One slot of the key-value store.

    Attributes:
        key: Slot name (e.g. ``bookmarks``)
        value: Serialized payload
        updated_at: Time of the last write
    """
    __tablename__ = 'kv_store'

    key: Mapped[str] = mapped_column(String(255), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc)
    )

    def __repr__(self) -> str:
        return f"<KeyValue(key='{self.key}', size={len(self.value or '')})>"


# Serialized key for each dataclass attribute
_FIELD_KEYS = {
    "id": "id",
    "title": "title",
    "url": "url",
    "category": "category",
    "description": "description",
    "created_at": "createdAt",
    "updated_at": "updatedAt",
    "is_favorite": "isFavorite",
}


def _text(value: Any) -> str:
    return "" if value is None else str(value)


@dataclass
class Bookmark:
    """
    A saved link with its metadata.

    Attributes:
        id: Opaque unique identifier, immutable after creation
        title: Display title
        url: The bookmarked URL
        category: Category name used for filtering
        description: Optional free text
        created_at: ISO-8601 creation timestamp, never changes
        updated_at: ISO-8601 timestamp of the last edit
        is_favorite: Favorite flag
        extra: Unknown keys carried through load/save and import/export
    """
    id: str
    title: str
    url: str
    category: str
    description: str = ""
    created_at: str = ""
    updated_at: str = ""
    is_favorite: bool = False
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def create(cls, title: str, url: str, category: str, description: str = "") -> "Bookmark":
        """Build a brand new bookmark with a fresh id and both timestamps set to now."""
        now = format_timestamp()
        return cls(
            id=generate_unique_id(),
            title=title,
            url=url,
            category=category,
            description=description,
            created_at=now,
            updated_at=now,
            is_favorite=False,
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Bookmark":
        """
        Build a bookmark from its serialized form.

        A missing ``isFavorite`` defaults to False, which migrates records
        written before the flag existed. Numeric ids become strings.
        """
        return cls(
            id=_text(data.get("id")),
            title=_text(data.get("title")),
            url=_text(data.get("url")),
            category=_text(data.get("category")),
            description=_text(data.get("description")),
            created_at=_text(data.get("createdAt")),
            updated_at=_text(data.get("updatedAt")),
            is_favorite=bool(data.get("isFavorite", False)),
            extra={k: v for k, v in data.items() if k not in _FIELD_KEYS.values()},
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a camelCase dict, unknown keys included."""
        data = {key: getattr(self, attr) for attr, key in _FIELD_KEYS.items()}
        data.update(self.extra)
        return data

    @property
    def created(self) -> Optional[datetime]:
        """Parsed creation time, None if the stored value is unreadable."""
        return parse_timestamp(self.created_at)

    @property
    def updated(self) -> Optional[datetime]:
        return parse_timestamp(self.updated_at)

    def touch(self) -> None:
        """Refresh the update timestamp."""
        self.updated_at = format_timestamp()
