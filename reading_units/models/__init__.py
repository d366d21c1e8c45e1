"""Data models for the reading unit pipeline."""

from reading_units.models.features import (
    SCORE_DIMENSIONS,
    ContentFeature,
    HeadingStrength,
    LengthFeature,
    SegmentFeatures,
    SegmentScore,
)
from reading_units.models.parsed import BlockData, ChapterData, TextRun
from reading_units.models.reading_unit import (
    ContentType,
    DebugSegmentScore,
    Decision,
    MergeDecision,
    ReadingUnit,
    Summary,
)
from reading_units.models.segment import Heading, Segment, SourceFormat

__all__ = [
    "SCORE_DIMENSIONS",
    "BlockData",
    "ChapterData",
    "ContentFeature",
    "ContentType",
    "DebugSegmentScore",
    "Decision",
    "Heading",
    "HeadingStrength",
    "LengthFeature",
    "MergeDecision",
    "ReadingUnit",
    "Segment",
    "SegmentFeatures",
    "SegmentScore",
    "SourceFormat",
    "Summary",
    "TextRun",
]
