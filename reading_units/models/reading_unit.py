"""Reading unit and decision data models."""

from enum import Enum
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class MergeDecision(str, Enum):
    """Whether a segment extends the open unit or starts a new one."""

    MERGE = "merge"
    CREATE_NEW = "new"


class ContentType(str, Enum):
    FRONTMATTER = "frontmatter"  # copyright page, table of contents, preface
    BODY = "body"
    BACKMATTER = "backmatter"  # appendices, afterword, colophon


class Decision(BaseModel):
    """Outcome of deciding one segment boundary.

    ``level`` is only meaningful for CREATE_NEW; a missing level is
    treated as a chapter (level 1).
    """

    model_config = ConfigDict(frozen=True)

    decision: MergeDecision
    reason: str
    level: Literal[1, 2] | None = None

    @property
    def is_merge(self) -> bool:
        return self.decision is MergeDecision.MERGE


class Summary(BaseModel):
    """AI summary attached to a reading unit by an external step."""

    text: str
    generated_at: int  # unix seconds
    model: str


class ReadingUnit(BaseModel):
    """A chapter (level 1) or section (level 2) used for navigation.

    A unit covers a contiguous run of segments; ``end_block_id`` always
    equals the last contributing segment's ``end_block_id``.
    """

    id: str
    book_id: int
    title: str
    level: Literal[1, 2] = 1
    parent_id: str | None = None  # level-1 unit id, level 2 only
    segment_ids: list[str] = Field(default_factory=list)
    start_block_id: int
    end_block_id: int
    source: Literal["toc", "heuristic"] = "heuristic"
    content_type: ContentType | None = None
    summary: Summary | None = None


class DebugSegmentScore(BaseModel):
    """Scoring trace of one segment, persisted for debugging."""

    segment_id: str
    scores: dict[str, float] = Field(default_factory=dict)
    weights: dict[str, float] = Field(default_factory=dict)
    total_score: float = 0.0
    decision: MergeDecision
    decision_reason: str
    fallback: bool = False
    fallback_reason: str | None = None
    content_type: ContentType | None = None
    level: Literal[1, 2] | None = None
