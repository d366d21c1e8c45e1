"""Tests for the end-to-end reading unit pipeline."""

import pytest

from reading_units.config import AppConfig, FallbackConfig, ScoringConfig
from reading_units.models import (
    ContentType,
    Heading,
    MergeDecision,
    Segment,
    SegmentFeatures,
)
from reading_units.pipeline import FeatureExtractor, ReadingUnitPipeline
from reading_units.pipeline.scoring_engine import DEFAULT_WEIGHTS


def _segment(
    seg_id: str,
    chapter_id: int,
    heading: str | None,
    length: int,
    position: float,
    toc_level: int | None = None,
) -> Segment:
    return Segment(
        id=seg_id,
        chapter_id=chapter_id,
        heading=Heading(text=heading) if heading is not None else None,
        length=length,
        position_ratio=position,
        toc_level=toc_level,
        start_block_id=chapter_id,
        end_block_id=chapter_id,
    )


class FailingExtractor(FeatureExtractor):
    """Raises for one segment to exercise the fallback path."""

    def __init__(self, failing_id: str) -> None:
        self._failing_id = failing_id

    def extract(self, segment: Segment, previous: Segment | None = None) -> SegmentFeatures:
        if segment.id == self._failing_id:
            raise RuntimeError("feature extraction failed")
        return super().extract(segment, previous)


@pytest.fixture
def pipeline() -> ReadingUnitPipeline:
    return ReadingUnitPipeline(book_id=1)


# ── Full pipeline ────────────────────────────────────────────────────────────


class TestPipeline:
    def test_simple_book(self, pipeline: ReadingUnitPipeline) -> None:
        segments = [
            _segment("seg-1", 1, "版权所有", 100, 0.0),
            _segment("seg-2", 2, "第一章", 1500, 0.33),
            _segment("seg-3", 3, "第二章", 2000, 0.67),
        ]
        result = pipeline.run(segments)

        assert [u.title for u in result.units] == ["版权所有", "第一章", "第二章"]
        assert result.units[0].content_type is ContentType.FRONTMATTER
        assert all(u.level == 1 for u in result.units)

    def test_toc_sections(self, pipeline: ReadingUnitPipeline) -> None:
        segments = [
            _segment("seg-1", 1, "第一章", 1500, 0.0, toc_level=1),
            _segment("seg-2", 2, "1.1 小节", 800, 0.33, toc_level=2),
            _segment("seg-3", 3, "1.2 小节", 900, 0.67, toc_level=2),
        ]
        units = pipeline.run(segments).units

        assert len(units) == 3
        assert [u.level for u in units] == [1, 2, 2]
        assert units[1].parent_id == units[0].id
        assert units[2].parent_id == units[0].id
        assert all(u.source == "toc" for u in units)

    def test_short_untitled_segment_merges_into_chapter(
        self, pipeline: ReadingUnitPipeline
    ) -> None:
        segments = [
            _segment("seg-1", 1, "Chapter 1", 3000, 0.0),
            _segment("seg-2", 2, None, 200, 0.5),
        ]
        units = pipeline.run(segments).units

        assert len(units) == 1
        assert units[0].segment_ids == ["seg-1", "seg-2"]
        assert units[0].end_block_id == 2

    def test_empty_book(self, pipeline: ReadingUnitPipeline) -> None:
        result = pipeline.run([])
        assert result.units == []
        assert result.debug_scores == []


# ── Debug records ────────────────────────────────────────────────────────────


class TestDebugScores:
    def test_one_record_per_segment(self, pipeline: ReadingUnitPipeline) -> None:
        segments = [
            _segment("seg-1", 1, "版权所有", 100, 0.0),
            _segment("seg-2", 2, "第一章", 1500, 0.5),
            _segment("seg-3", 3, None, 200, 1.0),
        ]
        debug = pipeline.run(segments).debug_scores

        assert [d.segment_id for d in debug] == ["seg-1", "seg-2", "seg-3"]
        assert [d.decision for d in debug] == [
            MergeDecision.MERGE,
            MergeDecision.CREATE_NEW,
            MergeDecision.MERGE,
        ]
        assert debug[0].content_type is ContentType.FRONTMATTER
        assert debug[1].content_type is ContentType.BODY
        assert debug[1].level == 1
        assert all(not d.fallback for d in debug)

    def test_scores_and_weights_recorded(self, pipeline: ReadingUnitPipeline) -> None:
        debug = pipeline.run([_segment("seg-1", 1, "第一章", 1500, 0.5)]).debug_scores[0]

        assert debug.weights == DEFAULT_WEIGHTS
        assert set(debug.scores) == {"heading", "length", "content", "position"}
        assert debug.total_score == pytest.approx(-3.6)


# ── Fallback ─────────────────────────────────────────────────────────────────


class TestFallback:
    def test_failure_falls_back_for_that_segment(self, pipeline: ReadingUnitPipeline) -> None:
        pipeline.extractor = FailingExtractor("seg-2")
        segments = [
            _segment("seg-1", 1, "Chapter 1", 3000, 0.0),
            _segment("seg-2", 2, "Chapter 2", 3000, 0.5),
            _segment("seg-3", 3, None, 200, 1.0),
        ]
        result = pipeline.run(segments)
        debug = result.debug_scores

        assert [d.fallback for d in debug] == [False, True, False]
        assert debug[1].fallback_reason == "feature extraction failed"
        assert debug[1].scores == {}
        assert debug[1].decision is MergeDecision.CREATE_NEW
        assert result.fallback_count == 1

        assert len(result.units) == 2
        assert result.units[1].level == 1
        assert result.units[1].segment_ids == ["seg-2", "seg-3"]

    def test_forced_fallback(self) -> None:
        config = AppConfig(fallback=FallbackConfig(force=True))
        pipeline = ReadingUnitPipeline(book_id=1, config=config)
        segments = [
            _segment("seg-1", 1, "版权所有", 100, 0.0),
            _segment("seg-2", 2, "第一章", 1500, 0.5),
        ]
        result = pipeline.run(segments)

        assert all(d.fallback for d in result.debug_scores)
        assert result.debug_scores[0].fallback_reason == "fallback forced by configuration"
        assert len(result.units) == 2


# ── Configuration ────────────────────────────────────────────────────────────


class TestConfiguredPipeline:
    def test_zero_weights_push_everything_into_gray_zone(self) -> None:
        zero = ScoringConfig(toc=0, heading=0, length=0, content=0, position=0, continuity=0)
        pipeline = ReadingUnitPipeline(book_id=1, config=AppConfig(scoring=zero))
        segments = [
            _segment("seg-1", 1, "Chapter 1", 1500, 0.0),
            _segment("seg-2", 2, "Notes", 500, 1.0),
        ]
        debug = pipeline.run(segments).debug_scores

        assert all(d.decision_reason.startswith("gray zone") for d in debug)
        assert [d.decision for d in debug] == [MergeDecision.CREATE_NEW, MergeDecision.MERGE]
