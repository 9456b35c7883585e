"""
Export of bookmark collections to JSON files.
"""
import json
import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from bmk.constants import (
    EXPORT_EXTENSION, EXPORT_FILENAME_PREFIX, EXPORT_INDENT, EXPORT_TIMESTAMP_FORMAT,
)
from bmk.errors import BookmarkIOError, EmptyExportError
from bmk.models import Bookmark

logger = logging.getLogger(__name__)


@dataclass
class ExportResult:
    """Serialized collection plus the file name it should be saved under."""
    text: str
    filename: str
    count: int


def export_filename(now: Optional[datetime] = None) -> str:
    """Build ``bookmarks_YYYYMMDD_HHMMSS.json`` from local time."""
    now = now or datetime.now()
    return f"{EXPORT_FILENAME_PREFIX}_{now.strftime(EXPORT_TIMESTAMP_FORMAT)}{EXPORT_EXTENSION}"


def export_bookmarks(bookmarks: List[Bookmark], now: Optional[datetime] = None,
                     pretty: bool = True) -> ExportResult:
    """
    Serialize a whole collection for export.

    Args:
        bookmarks: Collection to export
        now: Time used for the file name (defaults to now)
        pretty: Indent the JSON output

    Returns:
        ExportResult with the JSON text and the derived file name

    Raises:
        EmptyExportError: If there is nothing to export
    """
    if not bookmarks:
        raise EmptyExportError("No bookmarks to export")

    data = [b.to_dict() for b in bookmarks]
    text = json.dumps(data, indent=EXPORT_INDENT if pretty else None, ensure_ascii=False)
    return ExportResult(text=text, filename=export_filename(now), count=len(data))


def export_file(bookmarks: List[Bookmark], directory: Path, now: Optional[datetime] = None,
                pretty: bool = True) -> Path:
    """
    Export bookmarks to a timestamped JSON file.

    Args:
        bookmarks: Collection to export
        directory: Output directory (created if missing)
        now: Time used for the file name

    Returns:
        Path of the written file
    """
    result = export_bookmarks(bookmarks, now=now, pretty=pretty)
    directory = Path(directory)
    path = directory / result.filename
    try:
        directory.mkdir(parents=True, exist_ok=True)
        path.write_text(result.text, encoding="utf-8")
    except OSError as e:
        raise BookmarkIOError(f"Could not write {path}: {e}") from e

    logger.info("Exported %d bookmarks to %s", result.count, path)
    return path
