"""
Constants for BMK.

These constants are used by various modules for sensible defaults.
Several are also available via the config system.
"""

# Storage
DEFAULT_STORAGE_KEY = "bookmarks"
DEFAULT_DATABASE = "bmk.db"

# Filter sentinels
CATEGORY_ALL = "all"
FAVORITES_ALL = "all"
FAVORITES_ONLY = "favorites"
FAVORITE_MODES = (FAVORITES_ALL, FAVORITES_ONLY)

# Sort methods
SORT_NEWEST = "newest"
SORT_OLDEST = "oldest"
SORT_TITLE = "title"
SORT_CATEGORY = "category"
SORT_METHODS = (SORT_NEWEST, SORT_OLDEST, SORT_TITLE, SORT_CATEGORY)

# Suggested categories offered by the front end
DEFAULT_CATEGORIES = ("dev", "design", "news", "utility", "other")

# Required fields of a serialized bookmark
REQUIRED_FIELDS = ("id", "title", "url", "category")

# Export
EXPORT_FILENAME_PREFIX = "bookmarks"
EXPORT_TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"
EXPORT_EXTENSION = ".json"
EXPORT_INDENT = 2
