"""
Error types raised by BMK.

Every error derives from BookmarkError so front ends can report any
failure with a single except clause.
"""


class BookmarkError(Exception):
    """Base class for all BMK errors."""


class ValidationError(BookmarkError):
    """A required field is missing or empty."""

    def __init__(self, message: str, field: str = None, index: int = None):
        super().__init__(message)
        self.field = field
        self.index = index


class ParseError(BookmarkError):
    """Persisted or imported text is not valid JSON."""


class FormatError(BookmarkError):
    """Data parsed fine but has the wrong shape (e.g. not a list)."""


class BookmarkIOError(BookmarkError, OSError):
    """Reading or writing an import/export file failed."""


class EmptyExportError(BookmarkError):
    """There is nothing to export."""


class StorageError(BookmarkError):
    """The key-value database could not be read or written."""
