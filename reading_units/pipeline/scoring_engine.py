"""Weighted scoring of segment features."""

from reading_units.models import (
    ContentFeature,
    HeadingStrength,
    LengthFeature,
    SegmentFeatures,
    SegmentScore,
)

DEFAULT_WEIGHTS: dict[str, float] = {
    "toc": 1.5,
    "heading": 1.2,
    "length": 1.0,
    "content": 1.0,
    "position": 0.8,
    "continuity": 0.8,
}

HEADING_SCORES: dict[HeadingStrength, float] = {
    HeadingStrength.STRONG: -3.0,
    HeadingStrength.WEAK: 2.0,
    HeadingStrength.NONE: 1.0,
}

LENGTH_SCORES: dict[LengthFeature, float] = {
    LengthFeature.VERY_SHORT: 3.0,
    LengthFeature.SHORT: 2.0,
    LengthFeature.MEDIUM: 0.0,
    LengthFeature.LONG: -1.0,
    LengthFeature.VERY_LONG: -2.0,
}

CONTENT_SCORES: dict[ContentFeature, float] = {
    ContentFeature.COPYRIGHT: 5.0,
    ContentFeature.TOC: 5.0,
    ContentFeature.PREFACE: 5.0,
    ContentFeature.BODY: 0.0,
}


class ScoringEngine:
    """Maps segment features to per-dimension scores and a weighted total.

    Positive totals lean towards merging, negative towards a new unit.

    Args:
        weights: Weight per dimension. Defaults to DEFAULT_WEIGHTS.
    """

    def __init__(self, weights: dict[str, float] | None = None) -> None:
        self._weights = dict(weights if weights is not None else DEFAULT_WEIGHTS)

    @property
    def weights(self) -> dict[str, float]:
        return dict(self._weights)

    def set_weights(self, weights: dict[str, float]) -> None:
        self._weights = dict(weights)

    def score(self, features: SegmentFeatures) -> SegmentScore:
        result = SegmentScore(
            toc_score=self.toc_score(features.toc_level),
            heading_score=HEADING_SCORES[features.heading_strength],
            length_score=LENGTH_SCORES[features.length_feature],
            content_score=CONTENT_SCORES[features.content_feature],
            position_score=self.position_score(features),
            continuity_score=self.continuity_score(features.numbering_continuity),
        )
        result.calculate_total(self._weights)
        return result

    @staticmethod
    def toc_score(toc_level: int | None) -> float | None:
        if toc_level is None:
            return None
        if toc_level == 1:
            return -3.0
        if toc_level == 2:
            return 1.0
        return 2.0

    @staticmethod
    def position_score(features: SegmentFeatures) -> float:
        score = 0.0
        if (
            features.position_in_book < 0.05
            and features.heading_strength is not HeadingStrength.STRONG
        ):
            score += 2.0
        if features.position_in_book > 0.95:
            score += 1.0
        if features.is_after_strong_heading:
            score += 1.0
        if features.is_consecutive_strong_heading:
            score -= 1.0
        return score

    @staticmethod
    def continuity_score(numbering_continuity: bool | None) -> float | None:
        if numbering_continuity is None:
            return None
        return 2.0 if numbering_continuity else -1.0
