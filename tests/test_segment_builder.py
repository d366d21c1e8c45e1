"""Tests for building segments from parser output."""

import pytest

from reading_units.models import BlockData, ChapterData, SourceFormat, TextRun
from reading_units.pipeline.segment_builder import (
    ChapterLookupError,
    SegmentBuildError,
    SegmentBuilder,
    set_toc_levels,
)


class FakeLookup:
    """In-memory ChapterLookup: chapter N has id 100 + N and ten blocks."""

    def __init__(self, missing_index: int | None = None, empty_chapters: set[int] | None = None) -> None:
        self._missing_index = missing_index
        self._empty_chapters = empty_chapters or set()

    def get_chapter_id(self, book_id: int, chapter_index: int) -> int:
        if chapter_index == self._missing_index:
            raise ChapterLookupError(f"no chapter with index {chapter_index}")
        return 100 + chapter_index

    def get_block_range(self, chapter_id: int) -> tuple[int, int]:
        if chapter_id in self._empty_chapters:
            return chapter_id, chapter_id
        start = (chapter_id - 100) * 10 + 1
        return start, start + 9


def _block(block_type: str, text: str) -> BlockData:
    return BlockData(block_type=block_type, runs=[TextRun(text=text)])


def _chapter(title: str, *blocks: BlockData) -> ChapterData:
    return ChapterData(title=title, blocks=list(blocks))


@pytest.fixture
def builder() -> SegmentBuilder:
    return SegmentBuilder(book_id=1, source_format=SourceFormat.EPUB, lookup=FakeLookup())


# ── Content length ───────────────────────────────────────────────────────────


class TestContentLength:
    def test_excludes_heading_blocks(self) -> None:
        chapter = _chapter(
            "第一章",
            _block("heading", "第一章 标题"),
            _block("paragraph", "这是正文内容。"),
        )
        assert SegmentBuilder.calculate_content_length(chapter) == 7

    def test_sums_runs_across_blocks(self) -> None:
        chapter = _chapter(
            "Chapter 1",
            BlockData(block_type="paragraph", runs=[TextRun(text="abc"), TextRun(text="de")]),
            _block("code", "12345"),
        )
        assert SegmentBuilder.calculate_content_length(chapter) == 10

    def test_empty_chapter(self) -> None:
        assert SegmentBuilder.calculate_content_length(_chapter("Empty")) == 0


# ── Heading extraction ───────────────────────────────────────────────────────


class TestExtractHeading:
    def test_uses_chapter_title(self) -> None:
        heading = SegmentBuilder.extract_heading(_chapter("第一章"))
        assert heading is not None
        assert heading.text == "第一章"

    def test_title_is_stripped(self) -> None:
        heading = SegmentBuilder.extract_heading(_chapter("  Chapter 1 \n"))
        assert heading is not None
        assert heading.text == "Chapter 1"

    def test_placeholder_title_falls_back_to_heading_block(self) -> None:
        chapter = _chapter("未命名章节", _block("heading", "第一章 开始"))
        heading = SegmentBuilder.extract_heading(chapter)
        assert heading is not None
        assert heading.text == "第一章 开始"

    def test_untitled_placeholder_is_case_insensitive(self) -> None:
        chapter = _chapter("UNTITLED", _block("heading", "  Chapter 2  "))
        heading = SegmentBuilder.extract_heading(chapter)
        assert heading is not None
        assert heading.text == "Chapter 2"

    def test_skips_blank_heading_blocks(self) -> None:
        chapter = _chapter(
            "",
            _block("heading", "   "),
            _block("paragraph", "body"),
            _block("heading", "1.2 Scope"),
        )
        heading = SegmentBuilder.extract_heading(chapter)
        assert heading is not None
        assert heading.text == "1.2 Scope"

    def test_no_heading(self) -> None:
        chapter = _chapter("", _block("paragraph", "just text"))
        assert SegmentBuilder.extract_heading(chapter) is None


# ── Building ─────────────────────────────────────────────────────────────────


class TestBuildSegments:
    def test_one_segment_per_chapter_in_order(self, builder: SegmentBuilder) -> None:
        chapters = [_chapter(f"Chapter {i}", _block("paragraph", "x" * i)) for i in range(1, 4)]
        segments = builder.build_segments(chapters)

        assert [s.id for s in segments] == ["seg-1-100", "seg-1-101", "seg-1-102"]
        assert [s.chapter_id for s in segments] == [100, 101, 102]
        assert [s.length for s in segments] == [1, 2, 3]
        assert all(s.source_format is SourceFormat.EPUB for s in segments)
        assert all(s.toc_level is None for s in segments)

    def test_position_ratios(self, builder: SegmentBuilder) -> None:
        chapters = [_chapter(f"Chapter {i}") for i in range(3)]
        segments = builder.build_segments(chapters)
        assert [s.position_ratio for s in segments] == [0.0, 0.5, 1.0]

    def test_single_chapter_position(self, builder: SegmentBuilder) -> None:
        segments = builder.build_segments([_chapter("Only")])
        assert segments[0].position_ratio == 0.5

    def test_block_ranges(self, builder: SegmentBuilder) -> None:
        segments = builder.build_segments([_chapter("A"), _chapter("B")])
        assert (segments[0].start_block_id, segments[0].end_block_id) == (1, 10)
        assert (segments[1].start_block_id, segments[1].end_block_id) == (11, 20)

    def test_empty_chapter_gets_degenerate_range(self) -> None:
        builder = SegmentBuilder(1, SourceFormat.TXT, FakeLookup(empty_chapters={101}))
        segments = builder.build_segments([_chapter("A"), _chapter("B")])
        assert (segments[1].start_block_id, segments[1].end_block_id) == (101, 101)

    def test_no_chapters(self, builder: SegmentBuilder) -> None:
        assert builder.build_segments([]) == []

    def test_lookup_failure_is_fatal(self) -> None:
        builder = SegmentBuilder(1, SourceFormat.PDF, FakeLookup(missing_index=1))
        with pytest.raises(SegmentBuildError) as exc_info:
            builder.build_segments([_chapter("A"), _chapter("B"), _chapter("C")])
        assert isinstance(exc_info.value.__cause__, ChapterLookupError)


# ── TOC levels ───────────────────────────────────────────────────────────────


class TestSetTocLevels:
    def test_assigns_by_chapter_id(self, builder: SegmentBuilder) -> None:
        segments = builder.build_segments([_chapter("A"), _chapter("B"), _chapter("C")])
        updated = set_toc_levels(segments, {100: 1, 102: 2})

        assert [s.toc_level for s in updated] == [1, None, 2]
        assert [s.id for s in updated] == [s.id for s in segments]
        # Originals are untouched
        assert all(s.toc_level is None for s in segments)
