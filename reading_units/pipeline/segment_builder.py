"""Builds Segments from parser output and stored block ranges."""

import logging
from typing import Protocol

from reading_units.models import ChapterData, Heading, Segment, SourceFormat

logger = logging.getLogger(__name__)

HEADING_BLOCK_TYPE = "heading"

# Titles parsers assign when a chapter has no real title.
GENERIC_TITLES: frozenset[str] = frozenset({"未命名章节", "untitled", "untitled chapter"})


class ChapterLookupError(LookupError):
    """A chapter row or its block range could not be resolved."""


class SegmentBuildError(RuntimeError):
    """Segments could not be built for a book; the import is corrupt."""


class ChapterLookup(Protocol):
    """Storage-side lookups needed to anchor chapters to content blocks."""

    def get_chapter_id(self, book_id: int, chapter_index: int) -> int:
        ...

    def get_block_range(self, chapter_id: int) -> tuple[int, int]:
        ...


class SegmentBuilder:
    """Turns a book's parsed chapters into one Segment per chapter.

    Args:
        book_id: ID of the book whose chapters are being segmented.
        source_format: Format the chapters were parsed from.
        lookup: Resolves chapter IDs and block-id ranges from storage.
    """

    def __init__(
        self, book_id: int, source_format: SourceFormat, lookup: ChapterLookup
    ) -> None:
        self._book_id = book_id
        self._source_format = source_format
        self._lookup = lookup

    def build_segments(self, chapters: list[ChapterData]) -> list[Segment]:
        """Build segments in chapter order.

        Args:
            chapters: Parser output, ordered by chapter index.

        Returns:
            One Segment per chapter, without TOC levels.

        Raises:
            SegmentBuildError: If a chapter ID or block range cannot be
                resolved.
        """
        total = len(chapters)
        segments: list[Segment] = []

        for index, chapter in enumerate(chapters):
            try:
                chapter_id = self._lookup.get_chapter_id(self._book_id, index)
                start_block_id, end_block_id = self._lookup.get_block_range(chapter_id)
            except ChapterLookupError as exc:
                logger.error(
                    "Segment lookup failed for book %s chapter %d: %s",
                    self._book_id,
                    index,
                    exc,
                )
                raise SegmentBuildError(
                    f"Cannot build segments for book {self._book_id}: {exc}"
                ) from exc

            segments.append(
                Segment(
                    id=f"seg-{self._book_id}-{chapter_id}",
                    chapter_id=chapter_id,
                    heading=self.extract_heading(chapter),
                    length=self.calculate_content_length(chapter),
                    position_ratio=index / (total - 1) if total > 1 else 0.5,
                    toc_level=None,
                    source_format=self._source_format,
                    start_block_id=start_block_id,
                    end_block_id=end_block_id,
                )
            )

        logger.debug("Built %d segments for book %s", len(segments), self._book_id)
        return segments

    @staticmethod
    def calculate_content_length(chapter: ChapterData) -> int:
        """Count characters in all non-heading blocks."""
        return sum(
            len(block.text)
            for block in chapter.blocks
            if block.block_type != HEADING_BLOCK_TYPE
        )

    @staticmethod
    def extract_heading(chapter: ChapterData) -> Heading | None:
        """Pick the chapter title, else the first non-blank heading block."""
        title = chapter.title.strip()
        if title and title.lower() not in GENERIC_TITLES:
            return Heading(text=title)

        for block in chapter.blocks:
            if block.block_type == HEADING_BLOCK_TYPE:
                text = block.text.strip()
                if text:
                    return Heading(text=text)

        return None


def set_toc_levels(
    segments: list[Segment], toc_mapping: dict[int, int]
) -> list[Segment]:
    """Attach TOC levels keyed by chapter ID.

    Segments whose chapter is absent from the mapping are returned unchanged.
    """
    return [
        segment.model_copy(update={"toc_level": toc_mapping[segment.chapter_id]})
        if segment.chapter_id in toc_mapping
        else segment
        for segment in segments
    ]
