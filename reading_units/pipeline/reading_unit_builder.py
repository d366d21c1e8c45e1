"""Folds the ordered (segment, decision) stream into a two-level unit tree."""

import logging

from reading_units.models import (
    ContentFeature,
    ContentType,
    Decision,
    MergeDecision,
    ReadingUnit,
    Segment,
)
from reading_units.pipeline.patterns import classify_content

logger = logging.getLogger(__name__)

FRONTMATTER_RATIO = 0.05
BACKMATTER_RATIO = 0.95
FRONTMATTER_MAX_LENGTH = 500


class _UnitAccumulator:
    """Holds at most one open unit: either empty or open.

    ``open`` and ``flush`` both hand back whatever unit was open, so every
    unit that is opened is emitted exactly once.
    """

    def __init__(self) -> None:
        self._unit: ReadingUnit | None = None

    @property
    def is_open(self) -> bool:
        return self._unit is not None

    def open(self, unit: ReadingUnit) -> list[ReadingUnit]:
        closed = self.flush()
        self._unit = unit
        return closed

    def extend(self, segment: Segment) -> None:
        if self._unit is None:
            raise RuntimeError("cannot extend: no unit is open")
        self._unit.segment_ids.append(segment.id)
        self._unit.end_block_id = segment.end_block_id

    def flush(self) -> list[ReadingUnit]:
        if self._unit is None:
            return []
        unit, self._unit = self._unit, None
        return [unit]


class ReadingUnitBuilder:
    """Builds the reading units of one book from its decided segments.

    Each builder owns its unit-id counter; use one builder per book.

    Args:
        book_id: ID of the book the units belong to.
    """

    def __init__(self, book_id: int) -> None:
        self._book_id = book_id
        self._next_unit_id = 1

    def build(
        self, segments: list[Segment], decisions: list[Decision]
    ) -> list[ReadingUnit]:
        """Build units in a single pass over segments and their decisions.

        Args:
            segments: Segments in book order.
            decisions: One decision per segment, in the same order.

        Returns:
            Units in book order. Sections follow the chapter they belong to.

        Raises:
            ValueError: If segments and decisions differ in length.
        """
        if len(segments) != len(decisions):
            raise ValueError(
                f"segments and decisions differ in length: "
                f"{len(segments)} != {len(decisions)}"
            )

        self._next_unit_id = 1
        total = len(segments)
        units: list[ReadingUnit] = []
        accumulator = _UnitAccumulator()
        last_chapter_id: str | None = None

        for index, (segment, decision) in enumerate(zip(segments, decisions)):
            if decision.decision is MergeDecision.MERGE and accumulator.is_open:
                accumulator.extend(segment)
                continue

            if decision.decision is MergeDecision.MERGE:
                # First segment merges with nothing: open an implicit chapter.
                logger.debug(
                    "Segment %s merges with no open unit, opening a chapter",
                    segment.id,
                )
                level = 1
            else:
                level = decision.level or 1

            parent_id = last_chapter_id if level == 2 else None
            if level == 2 and parent_id is None:
                logger.debug("Section %s has no preceding chapter", segment.id)

            unit = self._create_unit(segment, level, parent_id, index, total)
            # Only an explicit new chapter parents later sections.
            if decision.decision is MergeDecision.CREATE_NEW and level == 1:
                last_chapter_id = unit.id
            units.extend(accumulator.open(unit))

        units.extend(accumulator.flush())
        return units

    def _create_unit(
        self,
        segment: Segment,
        level: int,
        parent_id: str | None,
        index: int,
        total: int,
    ) -> ReadingUnit:
        unit_id = f"ru-{self._book_id}-{self._next_unit_id}"
        self._next_unit_id += 1

        return ReadingUnit(
            id=unit_id,
            book_id=self._book_id,
            title=segment.heading_text or f"Untitled chapter {segment.chapter_id}",
            level=level,
            parent_id=parent_id,
            segment_ids=[segment.id],
            start_block_id=segment.start_block_id,
            end_block_id=segment.end_block_id,
            source="toc" if segment.toc_level is not None else "heuristic",
            content_type=determine_content_type(segment, index, total),
        )


def determine_content_type(segment: Segment, index: int, total: int) -> ContentType:
    """Tag a unit by its seed segment's heading keywords and position."""
    if classify_content(segment.heading_text) is not ContentFeature.BODY:
        return ContentType.FRONTMATTER
    if index < int(total * FRONTMATTER_RATIO) and segment.length < FRONTMATTER_MAX_LENGTH:
        return ContentType.FRONTMATTER
    if index >= int(total * BACKMATTER_RATIO):
        return ContentType.BACKMATTER
    return ContentType.BODY
