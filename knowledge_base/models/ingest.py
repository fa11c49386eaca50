"""Ingestion input and result models.

Raw upstream shapes are what the extractors hand to the parsers after the
mapping step has normalised external field names.  ``IngestResult`` is the
summary every orchestrator returns, even when some or all items failed.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Meeting transcripts
# ---------------------------------------------------------------------------
class RawTranscript(BaseModel):
    """A transcript reference listed for a call record."""

    model_config = ConfigDict(frozen=True)

    id: str
    meeting_id: str
    meeting_organizer_id: str = ""
    created_at: str | None = None


class RawMeetingDetails(BaseModel):
    """Meeting details after mapping from the upstream API."""

    model_config = ConfigDict(frozen=True)

    id: str
    subject: str = "Untitled Meeting"
    start_time: str = ""
    end_time: str = ""
    attendees: list[str] = Field(default_factory=list)


class TranscriptItem(BaseModel):
    """One extracted transcript: reference, WEBVTT content and meeting details."""

    model_config = ConfigDict(frozen=True)

    transcript: RawTranscript
    vtt_content: str
    meeting: RawMeetingDetails


# ---------------------------------------------------------------------------
# Distribution lists
# ---------------------------------------------------------------------------
class RawDLMember(BaseModel):
    """A member of a distribution list."""

    model_config = ConfigDict(frozen=True)

    id: str
    display_name: str = ""
    mail: str = ""
    job_title: str | None = None


class RawDistributionList(BaseModel):
    """A distribution list with its member roster."""

    model_config = ConfigDict(frozen=True)

    id: str
    display_name: str = ""
    mail: str = ""
    description: str | None = None
    members: list[RawDLMember] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# PDF files
# ---------------------------------------------------------------------------
class PdfSource(BaseModel):
    """Where to read a PDF from: an in-memory buffer or a URL.

    ``filename`` is the display name stored in chunk metadata.
    """

    model_config = ConfigDict(frozen=True)

    filename: str
    buffer: bytes | None = None
    url: str | None = None


# ---------------------------------------------------------------------------
# IngestResult: summary of one orchestrator run.
# ---------------------------------------------------------------------------
class IngestResult(BaseModel):
    """Summary of an ingestion run.

    ``processed`` counts stored chunks, ``errors`` counts failed items (plus
    one for a fatal extraction failure), ``details`` holds one line per
    notable event in processing order.
    """

    processed: int = Field(default=0, ge=0)
    errors: int = Field(default=0, ge=0)
    details: list[str] = Field(default_factory=list)
