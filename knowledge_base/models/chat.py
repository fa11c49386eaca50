"""Answer-generation response models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from knowledge_base.models.document import SourceType


class SourceReference(BaseModel):
    """A knowledge document cited in a chat answer."""

    model_config = ConfigDict(frozen=True)

    source_type: SourceType
    title: str
    date: str | None = None
    relevance_score: float = Field(ge=0.0, le=1.0)


class ChatResponse(BaseModel):
    """Answer text plus the documents it was grounded on."""

    model_config = ConfigDict(frozen=True)

    answer: str
    sources: list[SourceReference] = Field(default_factory=list)
