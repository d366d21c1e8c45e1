"""Priority cascade deciding whether a segment merges or starts a new unit."""

from reading_units.models import (
    Decision,
    HeadingStrength,
    MergeDecision,
    Segment,
    SegmentFeatures,
    SegmentScore,
)

METADATA_CONTENT_SCORE = 5.0


class DecisionEngine:
    """Turns a segment's score and features into a merge/new decision.

    Rules are evaluated in priority order and the first match wins:

    1. Metadata content (copyright, contents, preface) always merges.
    2. A level-1 TOC entry that is not metadata starts a chapter.
    3. A level-2 TOC entry starts a section.
    4. A total score at or above ``merge_threshold`` merges.
    5. A total score at or below ``new_threshold`` starts a new unit.
    6. Otherwise (gray zone) short segments merge and longer ones start
       a new unit.

    Args:
        merge_threshold: Total score from which a segment merges.
        new_threshold: Total score up to which a segment starts a new unit.
        gray_zone_length: Segments shorter than this merge in the gray zone.
    """

    def __init__(
        self,
        merge_threshold: float = 3.0,
        new_threshold: float = -3.0,
        gray_zone_length: int = 800,
    ) -> None:
        self.merge_threshold = merge_threshold
        self.new_threshold = new_threshold
        self.gray_zone_length = gray_zone_length

    def set_thresholds(
        self, merge: float, new: float, gray_zone_length: int
    ) -> None:
        self.merge_threshold = merge
        self.new_threshold = new
        self.gray_zone_length = gray_zone_length

    def decide(
        self, score: SegmentScore, features: SegmentFeatures, segment: Segment
    ) -> Decision:
        if score.content_score is not None and score.content_score >= METADATA_CONTENT_SCORE:
            return Decision(
                decision=MergeDecision.MERGE,
                reason="metadata content, forced merge",
            )

        if features.toc_level == 1 and not features.content_feature.is_metadata:
            return Decision(
                decision=MergeDecision.CREATE_NEW,
                reason="TOC level 1 entry, new chapter",
                level=1,
            )

        if features.toc_level == 2:
            return Decision(
                decision=MergeDecision.CREATE_NEW,
                reason="TOC level 2 entry, new section",
                level=2,
            )

        total = score.total_score
        if total >= self.merge_threshold:
            return Decision(
                decision=MergeDecision.MERGE,
                reason=f"total score {total:.1f} >= +{self.merge_threshold:.1f}, merge",
            )

        if total <= self.new_threshold:
            return Decision(
                decision=MergeDecision.CREATE_NEW,
                reason=f"total score {total:.1f} <= {self.new_threshold:.1f}, new unit",
                level=self.determine_level(features),
            )

        if segment.length < self.gray_zone_length:
            return Decision(
                decision=MergeDecision.MERGE,
                reason=(
                    f"gray zone: length {segment.length} < {self.gray_zone_length}, merge"
                ),
            )
        return Decision(
            decision=MergeDecision.CREATE_NEW,
            reason=(
                f"gray zone: length {segment.length} >= {self.gray_zone_length}, new unit"
            ),
            level=self.determine_level(features),
        )

    @staticmethod
    def determine_level(features: SegmentFeatures) -> int:
        """Sections for numbered headings, chapters otherwise."""
        if features.heading_strength is HeadingStrength.WEAK:
            return 2
        return 1
