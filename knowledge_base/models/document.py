"""Knowledge document models.

A :class:`KnowledgeDocument` is the unit the ingestion pipeline produces and
the vector store persists: a chunk of text plus metadata describing where it
came from.  The metadata is a *discriminated union* keyed by
``source_type``: pydantic picks the variant from the tag and rejects a
payload whose fields do not match it.  Parsers are the only producers;
consumers switch on ``metadata.source_type``.

All models use frozen config: a parsed document is never mutated, only
replaced.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class SourceType(str, Enum):  # noqa: UP042
    """Origin of a knowledge document."""

    TRANSCRIPT = "transcript"
    DISTRIBUTION_LIST = "distribution_list"
    PDF = "pdf"


# ---------------------------------------------------------------------------
# Metadata variants
# ---------------------------------------------------------------------------
class TranscriptMetadata(BaseModel):
    """Metadata for one time-window chunk of a meeting transcript."""

    model_config = ConfigDict(frozen=True)

    source_type: Literal["transcript"] = "transcript"
    meeting_subject: str
    # ISO-8601 start time of the meeting; range filters compare it as a string.
    meeting_date: str
    meeting_id: str
    speakers: list[str] = Field(default_factory=list)
    timestamp_start: str
    timestamp_end: str
    attendees: list[str] = Field(default_factory=list)


class DistributionListMetadata(BaseModel):
    """Metadata for a distribution-list roster document."""

    model_config = ConfigDict(frozen=True)

    source_type: Literal["distribution_list"] = "distribution_list"
    dl_name: str
    dl_email: str
    dl_id: str
    member_count: int = Field(ge=0)


class PdfMetadata(BaseModel):
    """Metadata for one chunk of a PDF document.

    ``page_start`` / ``page_end`` are estimates projected from character
    offsets, not exact page boundaries.
    """

    model_config = ConfigDict(frozen=True)

    source_type: Literal["pdf"] = "pdf"
    pdf_filename: str
    pdf_file_id: str
    page_start: int = Field(ge=1)
    page_end: int = Field(ge=1)
    total_pages: int = Field(ge=0)
    chunk_index: int = Field(ge=0)


DocumentMetadata = Annotated[
    Union[TranscriptMetadata, DistributionListMetadata, PdfMetadata],
    Field(discriminator="source_type"),
]


# ---------------------------------------------------------------------------
# Documents
# ---------------------------------------------------------------------------
class KnowledgeDocument(BaseModel):
    """A chunk of content with its source metadata, ready for embedding."""

    model_config = ConfigDict(frozen=True)

    content: str
    metadata: DocumentMetadata


class StoredDocument(KnowledgeDocument):
    """A knowledge document as persisted: embedding plus backend id."""

    embedding: list[float]
    id: str | None = None


class VectorRecord(BaseModel):
    """Backend-facing insert shape for the vector store.

    Metadata is already serialised to a plain dict so store implementations
    never need to know about the metadata variants.
    """

    model_config = ConfigDict(frozen=True)

    content: str
    embedding: list[float]
    metadata: dict[str, Any]
