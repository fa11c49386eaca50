"""File-record tracking for PDF ingestion.

A record is created ``pending`` when a file is accepted, moves to
``processing`` when ingestion starts, and ends ``completed`` (with
``chunks_count``) or ``failed`` (with ``error``).  Terminal states are
final: status updates on a completed or failed record are ignored.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import structlog

from knowledge_base.interfaces.store import IStore
from knowledge_base.models.records import FileRecord, FileSource, FileStatus
from knowledge_base.services.entity_service import EntityService
from knowledge_base.utils.logging import get_logger

logger: structlog.BoundLogger = get_logger(__name__)

TERMINAL_STATUSES = frozenset({FileStatus.COMPLETED, FileStatus.FAILED})


class FileService(EntityService[FileRecord]):
    """CRUD plus status transitions for :class:`FileRecord`."""

    def __init__(self, store: IStore, collection: str = "files") -> None:
        super().__init__(store, collection, FileRecord)

    async def create(
        self,
        filename: str,
        source: FileSource,
        original_url: str | None = None,
    ) -> str:
        """Insert a ``pending`` record and return its id."""
        now = datetime.now(timezone.utc)
        file_id = await self.insert(
            {
                "filename": filename,
                "source": FileSource(source).value,
                "original_url": original_url,
                "status": FileStatus.PENDING.value,
                "created_at": now,
                "updated_at": now,
            }
        )
        logger.info("file_record_created", file_id=file_id, filename=filename, source=str(source))
        return file_id

    async def update_status(
        self,
        file_id: str,
        status: FileStatus,
        error: str | None = None,
        chunks_count: int | None = None,
    ) -> bool:
        """Move the record to *status*; returns ``False`` if the update was refused.

        The update is refused when the record does not exist or is already
        in a terminal state.
        """
        record = await self.find_by_id(file_id)
        if record is None:
            logger.warning("file_record_not_found", file_id=file_id)
            return False
        if record.status in TERMINAL_STATUSES:
            logger.warning(
                "file_status_transition_refused",
                file_id=file_id,
                current=record.status.value,
                requested=FileStatus(status).value,
            )
            return False

        data: dict[str, Any] = {"status": FileStatus(status).value}
        if error is not None:
            data["error"] = error
        if chunks_count is not None:
            data["chunks_count"] = chunks_count
        await self.update(file_id, data)
        logger.info("file_status_updated", file_id=file_id, status=data["status"])
        return True
