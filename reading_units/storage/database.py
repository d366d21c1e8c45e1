"""SQLite database initialization and connection management."""

import sqlite3
from pathlib import Path


def get_connection(db_path: str | Path) -> sqlite3.Connection:
    """Create a connection to the SQLite database.

    Args:
        db_path: Path to the SQLite database file.

    Returns:
        A sqlite3 Connection with row_factory set to Row.
    """
    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA foreign_keys=ON")
    return conn


def initialize_database(db_path: str | Path) -> None:
    """Create the database schema if it doesn't exist.

    Args:
        db_path: Path to the SQLite database file.
    """
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    conn = get_connection(db_path)
    try:
        conn.executescript(
            """
            CREATE TABLE IF NOT EXISTS books (
                id INTEGER PRIMARY KEY,
                title TEXT NOT NULL,
                author TEXT DEFAULT '',
                file_path TEXT NOT NULL UNIQUE,
                file_format TEXT NOT NULL,
                parse_status TEXT DEFAULT 'pending',
                added_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            );

            CREATE TABLE IF NOT EXISTS chapters (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                book_id INTEGER NOT NULL,
                title TEXT NOT NULL,
                chapter_index INTEGER NOT NULL,
                confidence_level TEXT DEFAULT 'explicit',
                raw_html TEXT,
                render_mode TEXT DEFAULT 'irp',
                toc_level INTEGER,
                FOREIGN KEY (book_id) REFERENCES books(id) ON DELETE CASCADE
            );

            CREATE TABLE IF NOT EXISTS blocks (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                chapter_id INTEGER NOT NULL,
                block_index INTEGER NOT NULL,
                block_type TEXT NOT NULL,
                runs_json TEXT NOT NULL,
                FOREIGN KEY (chapter_id) REFERENCES chapters(id) ON DELETE CASCADE
            );

            CREATE TABLE IF NOT EXISTS reading_units (
                id TEXT PRIMARY KEY,
                book_id INTEGER NOT NULL,
                title TEXT NOT NULL,
                level INTEGER NOT NULL CHECK(level IN (1, 2)),
                parent_id TEXT,
                segment_ids TEXT NOT NULL,
                start_block_id INTEGER NOT NULL,
                end_block_id INTEGER NOT NULL,
                source TEXT NOT NULL CHECK(source IN ('toc', 'heuristic')),
                content_type TEXT CHECK(content_type IN ('frontmatter', 'body', 'backmatter')),
                summary_text TEXT,
                summary_generated_at INTEGER,
                summary_model TEXT,
                created_at INTEGER NOT NULL,
                FOREIGN KEY (book_id) REFERENCES books(id) ON DELETE CASCADE,
                FOREIGN KEY (parent_id) REFERENCES reading_units(id) ON DELETE CASCADE
            );

            CREATE TABLE IF NOT EXISTS debug_segment_scores (
                segment_id TEXT PRIMARY KEY,
                book_id INTEGER NOT NULL,
                scores TEXT NOT NULL,
                weights TEXT NOT NULL,
                total_score REAL NOT NULL,
                decision TEXT NOT NULL CHECK(decision IN ('merge', 'new')),
                decision_reason TEXT NOT NULL,
                fallback INTEGER NOT NULL DEFAULT 0 CHECK(fallback IN (0, 1)),
                fallback_reason TEXT,
                content_type TEXT CHECK(content_type IN ('frontmatter', 'body', 'backmatter')),
                level INTEGER CHECK(level IN (1, 2)),
                created_at INTEGER NOT NULL,
                FOREIGN KEY (book_id) REFERENCES books(id) ON DELETE CASCADE
            );

            CREATE INDEX IF NOT EXISTS idx_chapters_book_index
                ON chapters(book_id, chapter_index);
            CREATE INDEX IF NOT EXISTS idx_blocks_chapter_id ON blocks(chapter_id);
            CREATE INDEX IF NOT EXISTS idx_reading_units_book_id ON reading_units(book_id);
            CREATE INDEX IF NOT EXISTS idx_reading_units_level ON reading_units(book_id, level);
            CREATE INDEX IF NOT EXISTS idx_reading_units_parent_id ON reading_units(parent_id);
            CREATE INDEX IF NOT EXISTS idx_debug_scores_book_id ON debug_segment_scores(book_id);
            """
        )
        conn.commit()
    finally:
        conn.close()
