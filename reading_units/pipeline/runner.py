"""Runs the scoring pipeline over a book's segments and builds its units."""

import logging

from pydantic import BaseModel, Field

from reading_units.config import AppConfig
from reading_units.models import (
    ContentFeature,
    ContentType,
    DebugSegmentScore,
    Decision,
    ReadingUnit,
    Segment,
)
from reading_units.pipeline.decision_engine import DecisionEngine
from reading_units.pipeline.fallback_strategy import FallbackStrategy
from reading_units.pipeline.feature_extractor import FeatureExtractor
from reading_units.pipeline.reading_unit_builder import ReadingUnitBuilder
from reading_units.pipeline.scoring_engine import ScoringEngine

logger = logging.getLogger(__name__)

CONTENT_TYPES: dict[ContentFeature, ContentType] = {
    ContentFeature.COPYRIGHT: ContentType.FRONTMATTER,
    ContentFeature.TOC: ContentType.FRONTMATTER,
    ContentFeature.PREFACE: ContentType.FRONTMATTER,
    ContentFeature.BODY: ContentType.BODY,
}


class PipelineResult(BaseModel):
    """Reading units of a book plus the scoring trace that produced them."""

    units: list[ReadingUnit] = Field(default_factory=list)
    debug_scores: list[DebugSegmentScore] = Field(default_factory=list)

    @property
    def fallback_count(self) -> int:
        return sum(1 for score in self.debug_scores if score.fallback)


class ReadingUnitPipeline:
    """Decides every segment of one book and folds them into reading units.

    Segments are processed strictly in book order because each segment's
    features depend on its predecessor. When feature extraction, scoring
    or the decision cascade raises for a segment, that segment is decided
    by the fallback rules instead.

    Args:
        book_id: ID of the book being processed.
        config: Application configuration. Defaults to AppConfig().
    """

    def __init__(self, book_id: int, config: AppConfig | None = None) -> None:
        config = config or AppConfig()
        self._book_id = book_id
        self._force_fallback = config.fallback.force
        self.extractor = FeatureExtractor()
        self.scorer = ScoringEngine(config.scoring.weights())
        self.decider = DecisionEngine(
            merge_threshold=config.decision.merge_threshold,
            new_threshold=config.decision.new_threshold,
            gray_zone_length=config.decision.gray_zone_length,
        )
        self.fallback = FallbackStrategy(gray_zone_length=config.fallback.gray_zone_length)

    def run(self, segments: list[Segment]) -> PipelineResult:
        decisions: list[Decision] = []
        debug_scores: list[DebugSegmentScore] = []

        previous: Segment | None = None
        for segment in segments:
            if self._force_fallback:
                decision, debug = self._decide_with_fallback(
                    segment, "fallback forced by configuration"
                )
            else:
                try:
                    decision, debug = self._decide(segment, previous)
                except Exception as exc:
                    logger.warning(
                        "Scoring failed for segment %s, using fallback: %s",
                        segment.id,
                        exc,
                    )
                    decision, debug = self._decide_with_fallback(segment, str(exc))
            decisions.append(decision)
            debug_scores.append(debug)
            previous = segment

        units = ReadingUnitBuilder(self._book_id).build(segments, decisions)
        result = PipelineResult(units=units, debug_scores=debug_scores)
        logger.info(
            "Book %s: %d segments -> %d reading units (%d by fallback)",
            self._book_id,
            len(segments),
            len(units),
            result.fallback_count,
        )
        return result

    def _decide(
        self, segment: Segment, previous: Segment | None
    ) -> tuple[Decision, DebugSegmentScore]:
        features = self.extractor.extract(segment, previous)
        score = self.scorer.score(features)
        decision = self.decider.decide(score, features, segment)
        debug = DebugSegmentScore(
            segment_id=segment.id,
            scores=score.as_map(),
            weights=self.scorer.weights,
            total_score=score.total_score,
            decision=decision.decision,
            decision_reason=decision.reason,
            content_type=CONTENT_TYPES[features.content_feature],
            level=decision.level,
        )
        return decision, debug

    def _decide_with_fallback(
        self, segment: Segment, fallback_reason: str
    ) -> tuple[Decision, DebugSegmentScore]:
        decision = self.fallback.apply(segment)
        debug = DebugSegmentScore(
            segment_id=segment.id,
            weights=self.scorer.weights,
            decision=decision.decision,
            decision_reason=decision.reason,
            fallback=True,
            fallback_reason=fallback_reason,
        )
        return decision, debug
