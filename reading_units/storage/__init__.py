"""SQLite storage for chapters, reading units and debug scores."""

from reading_units.storage.database import get_connection, initialize_database
from reading_units.storage.repository import (
    SqliteChapterLookup,
    delete_reading_units,
    fetch_debug_scores,
    fetch_reading_units,
    load_chapters,
    load_toc_levels,
    save_chapters,
    save_debug_scores,
    save_reading_units,
)

__all__ = [
    "SqliteChapterLookup",
    "delete_reading_units",
    "fetch_debug_scores",
    "fetch_reading_units",
    "get_connection",
    "initialize_database",
    "load_chapters",
    "load_toc_levels",
    "save_chapters",
    "save_debug_scores",
    "save_reading_units",
]
