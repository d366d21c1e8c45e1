"""Read and write access to chapters, reading units and debug scores.

Write helpers do not commit; wrap them in ``with conn:`` to get a
transaction.
"""

import json
import logging
import sqlite3
import time

from reading_units.models import (
    BlockData,
    ChapterData,
    DebugSegmentScore,
    ReadingUnit,
    Summary,
)
from reading_units.pipeline.segment_builder import ChapterLookupError

logger = logging.getLogger(__name__)


class SqliteChapterLookup:
    """Resolves chapter IDs and block ranges from the chapters/blocks tables."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def get_chapter_id(self, book_id: int, chapter_index: int) -> int:
        try:
            row = self._conn.execute(
                "SELECT id FROM chapters WHERE book_id = ? AND chapter_index = ?",
                (book_id, chapter_index),
            ).fetchone()
        except sqlite3.Error as exc:
            raise ChapterLookupError(
                f"chapter id query failed for book {book_id} index {chapter_index}: {exc}"
            ) from exc

        if row is None:
            raise ChapterLookupError(
                f"no chapter with index {chapter_index} in book {book_id}"
            )
        return int(row[0])

    def get_block_range(self, chapter_id: int) -> tuple[int, int]:
        """Return (min, max) block ID; empty chapters map to (chapter_id, chapter_id)."""
        try:
            row = self._conn.execute(
                "SELECT MIN(id), MAX(id) FROM blocks WHERE chapter_id = ?",
                (chapter_id,),
            ).fetchone()
        except sqlite3.Error as exc:
            raise ChapterLookupError(
                f"block range query failed for chapter {chapter_id}: {exc}"
            ) from exc

        start_id, end_id = row[0], row[1]
        if start_id is None and end_id is None:
            return chapter_id, chapter_id
        if start_id is None or end_id is None:
            raise ChapterLookupError(f"inconsistent block range for chapter {chapter_id}")
        return int(start_id), int(end_id)


def save_chapters(
    conn: sqlite3.Connection,
    book_id: int,
    chapters: list[ChapterData],
    toc_levels: dict[int, int] | None = None,
) -> list[int]:
    """Store parser output for a book.

    Args:
        conn: Open database connection.
        book_id: Owning book ID.
        chapters: Chapters in book order.
        toc_levels: Optional TOC level per chapter index.

    Returns:
        The new chapter IDs, in chapter order.
    """
    toc_levels = toc_levels or {}
    chapter_ids: list[int] = []

    for index, chapter in enumerate(chapters):
        cursor = conn.execute(
            """
            INSERT INTO chapters
                (book_id, title, chapter_index, confidence_level, raw_html,
                 render_mode, toc_level)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                book_id,
                chapter.title,
                index,
                chapter.confidence,
                chapter.raw_html,
                chapter.render_mode,
                toc_levels.get(index),
            ),
        )
        chapter_id = int(cursor.lastrowid)
        chapter_ids.append(chapter_id)

        conn.executemany(
            """
            INSERT INTO blocks (chapter_id, block_index, block_type, runs_json)
            VALUES (?, ?, ?, ?)
            """,
            [
                (
                    chapter_id,
                    block_index,
                    block.block_type,
                    json.dumps([run.model_dump() for run in block.runs], ensure_ascii=False),
                )
                for block_index, block in enumerate(chapter.blocks)
            ],
        )

    return chapter_ids


def load_chapters(conn: sqlite3.Connection, book_id: int) -> list[ChapterData]:
    """Reload a book's stored chapters in chapter_index order."""
    chapter_rows = conn.execute(
        """
        SELECT id, title, confidence_level, raw_html, render_mode
        FROM chapters WHERE book_id = ? ORDER BY chapter_index
        """,
        (book_id,),
    ).fetchall()

    chapters: list[ChapterData] = []
    for row in chapter_rows:
        block_rows = conn.execute(
            """
            SELECT block_type, runs_json FROM blocks
            WHERE chapter_id = ? ORDER BY block_index
            """,
            (row["id"],),
        ).fetchall()
        chapters.append(
            ChapterData(
                title=row["title"],
                blocks=[
                    BlockData(block_type=block["block_type"], runs=json.loads(block["runs_json"]))
                    for block in block_rows
                ],
                confidence=row["confidence_level"] or "explicit",
                raw_html=row["raw_html"],
                render_mode=row["render_mode"] or "irp",
            )
        )
    return chapters


def load_toc_levels(conn: sqlite3.Connection, book_id: int) -> dict[int, int]:
    """Map chapter ID to TOC level for chapters that have one."""
    rows = conn.execute(
        "SELECT id, toc_level FROM chapters WHERE book_id = ? AND toc_level IS NOT NULL",
        (book_id,),
    ).fetchall()
    return {int(row["id"]): int(row["toc_level"]) for row in rows}


def delete_reading_units(conn: sqlite3.Connection, book_id: int) -> None:
    """Remove a book's reading units and debug scores."""
    conn.execute("DELETE FROM debug_segment_scores WHERE book_id = ?", (book_id,))
    # Sections first so parent rows are never dangling.
    conn.execute("DELETE FROM reading_units WHERE book_id = ? AND level = 2", (book_id,))
    conn.execute("DELETE FROM reading_units WHERE book_id = ?", (book_id,))


def save_reading_units(conn: sqlite3.Connection, units: list[ReadingUnit]) -> None:
    """Insert units; chapters must precede their sections."""
    created_at = int(time.time())
    conn.executemany(
        """
        INSERT INTO reading_units
            (id, book_id, title, level, parent_id, segment_ids, start_block_id,
             end_block_id, source, content_type, summary_text,
             summary_generated_at, summary_model, created_at)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        [
            (
                unit.id,
                unit.book_id,
                unit.title,
                unit.level,
                unit.parent_id,
                json.dumps(unit.segment_ids),
                unit.start_block_id,
                unit.end_block_id,
                unit.source,
                unit.content_type.value if unit.content_type else None,
                unit.summary.text if unit.summary else None,
                unit.summary.generated_at if unit.summary else None,
                unit.summary.model if unit.summary else None,
                created_at,
            )
            for unit in units
        ],
    )
    logger.debug("Saved %d reading units", len(units))


def save_debug_scores(
    conn: sqlite3.Connection, book_id: int, scores: list[DebugSegmentScore]
) -> None:
    created_at = int(time.time())
    conn.executemany(
        """
        INSERT OR REPLACE INTO debug_segment_scores
            (segment_id, book_id, scores, weights, total_score, decision,
             decision_reason, fallback, fallback_reason, content_type, level,
             created_at)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
        """,
        [
            (
                score.segment_id,
                book_id,
                json.dumps(score.scores),
                json.dumps(score.weights),
                score.total_score,
                score.decision.value,
                score.decision_reason,
                int(score.fallback),
                score.fallback_reason,
                score.content_type.value if score.content_type else None,
                score.level,
                created_at,
            )
            for score in scores
        ],
    )


def fetch_reading_units(conn: sqlite3.Connection, book_id: int) -> list[ReadingUnit]:
    """All reading units of a book, ordered by start_block_id."""
    rows = conn.execute(
        "SELECT * FROM reading_units WHERE book_id = ? ORDER BY start_block_id, rowid",
        (book_id,),
    ).fetchall()

    units: list[ReadingUnit] = []
    for row in rows:
        summary = None
        if row["summary_text"] is not None:
            summary = Summary(
                text=row["summary_text"],
                generated_at=row["summary_generated_at"] or 0,
                model=row["summary_model"] or "",
            )
        units.append(
            ReadingUnit(
                id=row["id"],
                book_id=row["book_id"],
                title=row["title"],
                level=row["level"],
                parent_id=row["parent_id"],
                segment_ids=json.loads(row["segment_ids"]),
                start_block_id=row["start_block_id"],
                end_block_id=row["end_block_id"],
                source=row["source"],
                content_type=row["content_type"],
                summary=summary,
            )
        )
    return units


def fetch_debug_scores(conn: sqlite3.Connection, book_id: int) -> list[DebugSegmentScore]:
    """All debug score records of a book, ordered by segment_id."""
    rows = conn.execute(
        "SELECT * FROM debug_segment_scores WHERE book_id = ? ORDER BY segment_id",
        (book_id,),
    ).fetchall()
    return [
        DebugSegmentScore(
            segment_id=row["segment_id"],
            scores=json.loads(row["scores"]),
            weights=json.loads(row["weights"]),
            total_score=row["total_score"],
            decision=row["decision"],
            decision_reason=row["decision_reason"],
            fallback=bool(row["fallback"]),
            fallback_reason=row["fallback_reason"],
            content_type=row["content_type"],
            level=row["level"],
        )
        for row in rows
    ]
