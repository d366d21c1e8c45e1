"""Entry point: rebuild the reading units of a stored book."""

import argparse
import logging
import sys

from reading_units.config import load_config
from reading_units.models import SourceFormat
from reading_units.pipeline import SegmentBuildError
from reading_units.rebuild import rebuild_reading_units
from reading_units.storage import get_connection, initialize_database

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Rebuild reading units for the book given on the command line."""
    arg_parser = argparse.ArgumentParser(description=__doc__)
    arg_parser.add_argument("book_id", type=int, help="ID of the stored book")
    arg_parser.add_argument("--config", default="config.yaml", help="YAML config path")
    args = arg_parser.parse_args(argv)

    config = load_config(args.config)
    logging.basicConfig(level=config.logging.level, format=config.logging.format)
    logger.info(
        "%s %s: rebuilding book %s", config.app.name, config.app.version, args.book_id
    )

    # Initialize SQLite database
    initialize_database(config.storage.sqlite_path)

    conn = get_connection(config.storage.sqlite_path)
    try:
        row = conn.execute(
            "SELECT file_format FROM books WHERE id = ?", (args.book_id,)
        ).fetchone()
        if row is None:
            logger.error("Book %s not found", args.book_id)
            return 1

        result = rebuild_reading_units(
            conn, args.book_id, SourceFormat(row["file_format"]), config
        )
    except SegmentBuildError:
        logger.exception("Reading unit pass failed for book %s", args.book_id)
        return 1
    finally:
        conn.close()

    for unit in result.units:
        indent = "  " if unit.level == 2 else ""
        print(f"{indent}{unit.title} [{unit.start_block_id}-{unit.end_block_id}]")
    return 0


if __name__ == "__main__":
    sys.exit(main())
