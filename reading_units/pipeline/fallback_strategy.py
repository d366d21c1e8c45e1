"""Reduced decision rules for when the scoring path cannot be used."""

from reading_units.models import Decision, MergeDecision, Segment
from reading_units.pipeline.patterns import is_strong_heading


class FallbackStrategy:
    """Decides a segment from its heading and length alone.

    Produces no level; callers treat a new unit from the fallback as a
    chapter.
    """

    def __init__(self, gray_zone_length: int = 800) -> None:
        self.gray_zone_length = gray_zone_length

    def apply(self, segment: Segment) -> Decision:
        if is_strong_heading(segment.heading_text):
            return Decision(
                decision=MergeDecision.CREATE_NEW,
                reason="fallback: strong heading, new chapter",
            )

        if segment.length < self.gray_zone_length:
            return Decision(
                decision=MergeDecision.MERGE,
                reason=f"fallback: length {segment.length} < {self.gray_zone_length}, merge",
            )

        return Decision(
            decision=MergeDecision.CREATE_NEW,
            reason=f"fallback: length {segment.length} >= {self.gray_zone_length}, new chapter",
        )
