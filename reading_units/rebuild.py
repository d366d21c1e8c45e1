"""Rebuild and persist the reading units of a stored book."""

import logging
import sqlite3

from reading_units.config import AppConfig
from reading_units.models import SourceFormat
from reading_units.pipeline import (
    PipelineResult,
    ReadingUnitPipeline,
    SegmentBuilder,
    set_toc_levels,
)
from reading_units.storage import (
    SqliteChapterLookup,
    delete_reading_units,
    load_chapters,
    load_toc_levels,
    save_debug_scores,
    save_reading_units,
)

logger = logging.getLogger(__name__)


def rebuild_reading_units(
    conn: sqlite3.Connection,
    book_id: int,
    source_format: SourceFormat,
    config: AppConfig | None = None,
) -> PipelineResult:
    """Recompute a book's reading units from its stored chapters.

    Existing units and debug scores of the book are replaced in a single
    transaction.

    Args:
        conn: Open database connection.
        book_id: The book to process.
        source_format: Format the book was imported from.
        config: Application configuration. Defaults to AppConfig().

    Returns:
        The units and debug scores that were stored.

    Raises:
        SegmentBuildError: If stored chapters or block ranges are
            inconsistent. Nothing is written in that case.
    """
    chapters = load_chapters(conn, book_id)
    builder = SegmentBuilder(book_id, source_format, SqliteChapterLookup(conn))
    segments = builder.build_segments(chapters)

    if source_format.has_toc:
        segments = set_toc_levels(segments, load_toc_levels(conn, book_id))

    result = ReadingUnitPipeline(book_id, config).run(segments)

    with conn:
        delete_reading_units(conn, book_id)
        save_reading_units(conn, result.units)
        save_debug_scores(conn, book_id, result.debug_scores)

    logger.info("Stored %d reading units for book %s", len(result.units), book_id)
    return result
