"""
Import of bookmark collections from JSON text.

The merge is id based: incoming records whose id already exists in the
current collection are dropped and counted, never overwritten.
"""
import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List

from bmk.constants import EXPORT_EXTENSION, REQUIRED_FIELDS
from bmk.errors import BookmarkIOError, FormatError, ParseError, ValidationError
from bmk.models import Bookmark
from bmk.utils import is_present

logger = logging.getLogger(__name__)


@dataclass
class ImportResult:
    """
    Outcome of an import merge.

    Attributes:
        merged: The resulting collection (current records first)
        imported_count: Number of new records appended
        duplicate_count: Number of incoming records dropped for a known id
        duplicate_ids: Ids of the dropped records, in input order
        proceeded: False when the caller declined to merge into a non-empty collection
    """
    merged: List[Bookmark]
    imported_count: int = 0
    duplicate_count: int = 0
    duplicate_ids: List[str] = field(default_factory=list)
    proceeded: bool = True


def parse_import(raw_text: str) -> List[Any]:
    """
    Parse import text into a list of raw records.

    Raises:
        ParseError: If the text is not JSON
        FormatError: If the JSON is not an array
    """
    try:
        data = json.loads(raw_text)
    except (json.JSONDecodeError, TypeError, RecursionError) as e:
        raise ParseError(f"Invalid JSON: {e}") from e

    if not isinstance(data, list):
        raise FormatError("Bookmark data must be a JSON array")

    return data


def validate_import(records: List[Any]) -> None:
    """
    Check every record has a non-empty id, title, url and category.

    Raises:
        ValidationError: For the first offending record
    """
    for index, item in enumerate(records):
        if not isinstance(item, dict):
            raise ValidationError(f"Record {index} is not an object", index=index)
        for name in REQUIRED_FIELDS:
            if not is_present(item.get(name)):
                raise ValidationError(
                    f"Record {index} is missing required field '{name}'",
                    field=name,
                    index=index,
                )


def merge_bookmarks(raw_text: str, current: List[Bookmark], proceed: bool = True) -> ImportResult:
    """
    Merge an exported collection into the current one.

    Args:
        raw_text: JSON text of the incoming collection
        current: Current collection (not modified)
        proceed: Caller's decision to merge into a non-empty collection

    Returns:
        ImportResult with the merged list and counts

    Raises:
        ParseError, FormatError, ValidationError: Nothing is merged
    """
    records = parse_import(raw_text)
    validate_import(records)

    if current and not proceed:
        return ImportResult(merged=list(current), proceeded=False)

    existing_ids = {b.id for b in current}
    kept = []
    duplicate_ids = []
    for item in records:
        bookmark = Bookmark.from_dict(item)
        if bookmark.id in existing_ids:
            duplicate_ids.append(bookmark.id)
        else:
            # Repeats inside the incoming batch count as duplicates too
            existing_ids.add(bookmark.id)
            kept.append(bookmark)

    logger.info("Import: %d new, %d duplicates", len(kept), len(duplicate_ids))
    return ImportResult(
        merged=list(current) + kept,
        imported_count=len(kept),
        duplicate_count=len(records) - len(kept),
        duplicate_ids=duplicate_ids,
    )


def read_import_file(path: Path) -> str:
    """
    Read an import file as UTF-8 text.

    Raises:
        FormatError: If the file name does not end in .json
        BookmarkIOError: If the file cannot be read or decoded
    """
    path = Path(path)
    if not path.name.endswith(EXPORT_EXTENSION):
        raise FormatError(f"Only {EXPORT_EXTENSION} files can be imported: {path.name}")

    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise BookmarkIOError(f"Could not read {path}: {e}") from e
