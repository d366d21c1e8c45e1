"""Parser output models consumed by the reading unit pipeline."""

from pydantic import BaseModel, Field


class TextRun(BaseModel):
    """A run of text sharing the same inline marks."""

    text: str
    marks: list[str] = Field(default_factory=list)


class BlockData(BaseModel):
    """A single content block of a parsed chapter."""

    block_type: str  # "paragraph", "heading", "image", "code"
    runs: list[TextRun] = Field(default_factory=list)

    @property
    def text(self) -> str:
        return "".join(run.text for run in self.runs)


class ChapterData(BaseModel):
    """One chapter as emitted by a format parser (EPUB, PDF, TXT, Markdown).

    The pipeline only reads ``title`` and ``blocks``; the remaining fields
    are carried so stored chapters can be reloaded without loss.
    """

    title: str
    blocks: list[BlockData] = Field(default_factory=list)
    confidence: str = "explicit"  # "explicit", "inferred", "linear"
    raw_html: str | None = None
    render_mode: str = "irp"  # "html", "irp"
