"""Reading unit construction: segmenting, scoring, deciding and building."""

from reading_units.pipeline.decision_engine import DecisionEngine
from reading_units.pipeline.fallback_strategy import FallbackStrategy
from reading_units.pipeline.feature_extractor import FeatureExtractor
from reading_units.pipeline.reading_unit_builder import ReadingUnitBuilder
from reading_units.pipeline.runner import PipelineResult, ReadingUnitPipeline
from reading_units.pipeline.scoring_engine import ScoringEngine
from reading_units.pipeline.segment_builder import (
    ChapterLookup,
    ChapterLookupError,
    SegmentBuildError,
    SegmentBuilder,
    set_toc_levels,
)

__all__ = [
    "ChapterLookup",
    "ChapterLookupError",
    "DecisionEngine",
    "FallbackStrategy",
    "FeatureExtractor",
    "PipelineResult",
    "ReadingUnitBuilder",
    "ReadingUnitPipeline",
    "ScoringEngine",
    "SegmentBuildError",
    "SegmentBuilder",
    "set_toc_levels",
]
