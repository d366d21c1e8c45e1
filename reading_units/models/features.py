"""Feature and score models for segment boundary decisions."""

from enum import Enum

from pydantic import BaseModel

# Score dimensions, in the order they are reported.
SCORE_DIMENSIONS: tuple[str, ...] = (
    "toc",
    "heading",
    "length",
    "content",
    "position",
    "continuity",
)


class HeadingStrength(str, Enum):
    STRONG = "strong"  # chapter heading, e.g. "Chapter 3", "第三章"
    WEAK = "weak"  # numbered section, e.g. "1.2", "§3"
    NONE = "none"


class LengthFeature(str, Enum):
    VERY_SHORT = "very_short"  # < 300
    SHORT = "short"  # 300-799
    MEDIUM = "medium"  # 800-1999
    LONG = "long"  # 2000-5999
    VERY_LONG = "very_long"  # >= 6000


class ContentFeature(str, Enum):
    COPYRIGHT = "copyright"
    TOC = "toc"
    PREFACE = "preface"
    BODY = "body"

    @property
    def is_metadata(self) -> bool:
        return self is not ContentFeature.BODY


class SegmentFeatures(BaseModel):
    """Features of one segment, computed with the preceding segment as context."""

    toc_level: int | None = None
    heading_strength: HeadingStrength = HeadingStrength.NONE
    length_feature: LengthFeature = LengthFeature.MEDIUM
    content_feature: ContentFeature = ContentFeature.BODY
    position_in_book: float = 0.5
    is_after_strong_heading: bool = False
    is_consecutive_strong_heading: bool = False
    numbering_continuity: bool | None = None  # None when either side is unnumbered


class SegmentScore(BaseModel):
    """Per-dimension scores and their weighted total.

    Positive totals lean towards merging into the open unit, negative
    totals towards starting a new one.
    """

    toc_score: float | None = None
    heading_score: float | None = None
    length_score: float | None = None
    content_score: float | None = None
    position_score: float | None = None
    continuity_score: float | None = None
    total_score: float = 0.0

    def as_map(self) -> dict[str, float]:
        """Return the present dimension scores keyed by dimension name."""
        scores: dict[str, float] = {}
        for dimension in SCORE_DIMENSIONS:
            value = getattr(self, f"{dimension}_score")
            if value is not None:
                scores[dimension] = value
        return scores

    def calculate_total(self, weights: dict[str, float]) -> float:
        """Set and return the weighted sum of the present dimensions.

        Dimensions without a score or without a weight contribute nothing.
        """
        self.total_score = sum(
            (
                score * weights[dimension]
                for dimension, score in self.as_map().items()
                if dimension in weights
            ),
            0.0,
        )
        return self.total_score
