"""Feature extraction for segment boundary scoring."""

from reading_units.models import (
    HeadingStrength,
    LengthFeature,
    Segment,
    SegmentFeatures,
)
from reading_units.pipeline.patterns import (
    SECTION_NUMBER_PATTERN,
    WEAK_HEADING_PATTERN,
    classify_content,
    is_strong_heading,
)

# Upper bounds (exclusive) of each length bucket, in characters.
LENGTH_BUCKETS: tuple[tuple[int, LengthFeature], ...] = (
    (300, LengthFeature.VERY_SHORT),
    (800, LengthFeature.SHORT),
    (2000, LengthFeature.MEDIUM),
    (6000, LengthFeature.LONG),
)


class FeatureExtractor:
    """Derives scoring features from a segment and its predecessor.

    Stateless: the same (segment, previous) pair always yields the same
    features.
    """

    def extract(
        self, segment: Segment, previous: Segment | None = None
    ) -> SegmentFeatures:
        """Extract all features of ``segment``.

        Args:
            segment: The segment being decided.
            previous: The segment immediately before it in book order, if any.

        Returns:
            SegmentFeatures for the scoring engine.
        """
        current_strong = is_strong_heading(segment.heading_text)
        previous_strong = previous is not None and is_strong_heading(previous.heading_text)

        return SegmentFeatures(
            toc_level=segment.toc_level,
            heading_strength=self.heading_strength(segment.heading_text),
            length_feature=self.length_feature(segment.length),
            content_feature=classify_content(segment.heading_text),
            position_in_book=segment.position_ratio,
            is_after_strong_heading=previous_strong,
            is_consecutive_strong_heading=current_strong and previous_strong,
            numbering_continuity=self.numbering_continuity(segment, previous),
        )

    @staticmethod
    def heading_strength(text: str | None) -> HeadingStrength:
        if not text:
            return HeadingStrength.NONE
        if is_strong_heading(text):
            return HeadingStrength.STRONG
        if WEAK_HEADING_PATTERN.match(text):
            return HeadingStrength.WEAK
        return HeadingStrength.NONE

    @staticmethod
    def length_feature(length: int) -> LengthFeature:
        for upper_bound, feature in LENGTH_BUCKETS:
            if length < upper_bound:
                return feature
        return LengthFeature.VERY_LONG

    def numbering_continuity(
        self, segment: Segment, previous: Segment | None
    ) -> bool | None:
        """Check whether the section number follows on from the previous one.

        Returns None when either heading carries no leading number.
        """
        current_number = self.section_number(segment.heading_text)
        previous_number = (
            self.section_number(previous.heading_text) if previous is not None else None
        )
        if current_number is None or previous_number is None:
            return None
        return is_continuous_numbering(previous_number, current_number)

    @staticmethod
    def section_number(text: str | None) -> list[int] | None:
        """Parse a leading number such as "1.2.3" into [1, 2, 3]."""
        if not text:
            return None
        match = SECTION_NUMBER_PATTERN.match(text)
        if match is None:
            return None
        return [int(part) for part in match.group(1).split(".")]


def is_continuous_numbering(previous: list[int], current: list[int]) -> bool:
    """True if ``current`` is the next sibling of ``previous`` (1.1 -> 1.2)."""
    if len(previous) != len(current):
        return False
    return current[:-1] == previous[:-1] and current[-1] == previous[-1] + 1
