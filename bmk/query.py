"""
Filtering and sorting of bookmark collections.

All functions here are pure: they never modify the list they are given and
always return a new list.
"""
import locale
import unicodedata
from datetime import datetime, timezone
from typing import Callable, Dict, Iterable, List, Optional

from bmk.constants import (
    CATEGORY_ALL, FAVORITES_ALL, FAVORITES_ONLY, FAVORITE_MODES,
    SORT_NEWEST, SORT_OLDEST, SORT_TITLE, SORT_CATEGORY,
)
from bmk.models import Bookmark

# Unreadable timestamps sort before every real one
_EARLIEST = datetime.min.replace(tzinfo=timezone.utc)


def _strip_accents(value: str) -> str:
    decomposed = unicodedata.normalize("NFKD", value)
    return "".join(c for c in decomposed if not unicodedata.combining(c))


def collation_key(value: str):
    """
    Locale-aware sort key.

    Compares accent- and case-insensitively first, then with accents, then
    the raw text, each through the active LC_COLLATE locale. strxfrm rejects
    NUL characters, so they are dropped from the key.
    """
    value = (value or "").replace("\x00", "")
    folded = value.casefold()
    return (
        locale.strxfrm(_strip_accents(folded)),
        locale.strxfrm(folded),
        locale.strxfrm(value),
    )


def _created_key(bookmark: Bookmark) -> datetime:
    return bookmark.created or _EARLIEST


def matches(bookmark: Bookmark, search: str = "", category: str = CATEGORY_ALL,
            favorites: str = FAVORITES_ALL) -> bool:
    """
    Check a bookmark against the three list filters.

    Args:
        bookmark: Bookmark to test
        search: Case-insensitive text looked up in title, url and description
        category: Category to keep, or "all"
        favorites: "all" or "favorites"

    Returns:
        True if the bookmark passes every filter
    """
    if search:
        needle = search.lower()
        haystacks = (bookmark.title, bookmark.url, bookmark.description or "")
        if not any(needle in text.lower() for text in haystacks):
            return False

    if category != CATEGORY_ALL and bookmark.category != category:
        return False

    if favorites == FAVORITES_ONLY and not bookmark.is_favorite:
        return False

    return True


def filter_bookmarks(bookmarks: Iterable[Bookmark], search: str = "",
                     category: str = CATEGORY_ALL,
                     favorites: str = FAVORITES_ALL) -> List[Bookmark]:
    """Keep the bookmarks matching all filters, in their original order."""
    if favorites not in FAVORITE_MODES:
        raise ValueError(f"Unknown favorites filter: {favorites}")
    search = search or ""
    category = category or CATEGORY_ALL
    return [b for b in bookmarks if matches(b, search, category, favorites)]


_SORTS: Dict[str, Callable[[List[Bookmark]], List[Bookmark]]] = {
    SORT_NEWEST: lambda items: sorted(items, key=_created_key, reverse=True),
    SORT_OLDEST: lambda items: sorted(items, key=_created_key),
    SORT_TITLE: lambda items: sorted(items, key=lambda b: collation_key(b.title)),
    SORT_CATEGORY: lambda items: sorted(items, key=lambda b: collation_key(b.category)),
}


def sort_bookmarks(bookmarks: Iterable[Bookmark], method: Optional[str]) -> List[Bookmark]:
    """
    Sort bookmarks by one of the named methods.

    Args:
        bookmarks: Bookmarks to sort
        method: newest, oldest, title or category. Anything else keeps
            the given order.

    Returns:
        A new, sorted list
    """
    items = list(bookmarks)
    sorter = _SORTS.get(method)
    if sorter is None:
        return items
    return sorter(items)


def query(bookmarks: Iterable[Bookmark], search: str = "",
          category: str = CATEGORY_ALL, favorites: str = FAVORITES_ALL,
          sort: Optional[str] = None) -> List[Bookmark]:
    """
    Filter then sort a collection.

    Examples:
        >>> query(store.bookmarks, search="python", sort="title")
        >>> query(store.bookmarks, category="dev", favorites="favorites")
    """
    return sort_bookmarks(filter_bookmarks(bookmarks, search, category, favorites), sort)
