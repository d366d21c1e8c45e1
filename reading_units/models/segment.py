"""Segment data model."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class SourceFormat(str, Enum):
    """Book file format a segment was parsed from."""

    EPUB = "epub"
    PDF = "pdf"
    TXT = "txt"
    MD = "md"
    HTML = "html"

    @property
    def has_toc(self) -> bool:
        """Whether the format declares a table of contents."""
        return self in (SourceFormat.EPUB, SourceFormat.HTML)


class Heading(BaseModel):
    """Heading text of a segment."""

    model_config = ConfigDict(frozen=True)

    text: str
    level: int | None = None  # HTML heading level (1-6), when known


class Segment(BaseModel):
    """Atomic candidate unit: one source chapter before merging.

    Segments are immutable; use ``model_copy(update=...)`` to derive a
    variant (e.g. with a TOC level attached).
    """

    model_config = ConfigDict(frozen=True)

    id: str
    chapter_id: int
    heading: Heading | None = None
    length: int = Field(default=0, ge=0)  # body characters, headings excluded
    position_ratio: float = Field(default=0.5, ge=0.0, le=1.0)
    toc_level: int | None = None
    source_format: SourceFormat = SourceFormat.TXT
    start_block_id: int
    end_block_id: int

    @property
    def heading_text(self) -> str | None:
        return self.heading.text if self.heading else None
