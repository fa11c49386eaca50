"""Non-vector entity models persisted through the metadata store.

``FileRecord`` tracks one PDF ingestion from upload to a terminal state;
``SyncState`` holds the last-successful-sync watermark of an ingestion job.
Both surface their backend id as an opaque string.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class FileStatus(str, Enum):  # noqa: UP042
    """Lifecycle of a file ingestion.

    PENDING → PROCESSING → COMPLETED | FAILED.  Terminal states are final.
    """

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class FileSource(str, Enum):  # noqa: UP042
    """How a file reached the service."""

    UPLOAD = "upload"
    URL = "url"


class FileRecord(BaseModel):
    """Tracking record for one ingested file."""

    model_config = ConfigDict(frozen=True)

    id: str | None = None
    filename: str
    source: FileSource
    original_url: str | None = None
    status: FileStatus = FileStatus.PENDING
    error: str | None = None
    chunks_count: int | None = Field(default=None, ge=0)
    created_at: datetime
    updated_at: datetime


class SyncState(BaseModel):
    """Watermark of the last successful run of an ingestion job."""

    model_config = ConfigDict(frozen=True)

    id: str | None = None
    job_name: str
    last_success: datetime
    updated_at: datetime | None = None
