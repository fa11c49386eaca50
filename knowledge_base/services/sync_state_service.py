"""Last-successful-sync watermarks for the ingestion jobs.

Each job (``transcript``, ``distribution_list``) owns one record keyed by
``job_name``.  The record is created by upsert the first time a run
completes and is read back as the ``since`` bound of the next delta run.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

import structlog

from knowledge_base.interfaces.store import IStore
from knowledge_base.models.records import SyncState
from knowledge_base.services.entity_service import EntityService
from knowledge_base.utils.logging import get_logger

logger: structlog.BoundLogger = get_logger(__name__)

# Look-back used when a job has never completed or its record is unreadable.
DEFAULT_LOOKBACK = timedelta(hours=24)


class SyncStateService(EntityService[SyncState]):
    """Reads and advances per-job sync watermarks."""

    def __init__(self, store: IStore, collection: str = "sync_state") -> None:
        super().__init__(store, collection, SyncState)

    async def get_last_sync(self, job_name: str) -> datetime:
        """Return the last successful sync time of *job_name*.

        Falls back to 24 hours before now when no record exists or the
        read fails; a read failure is logged, never raised.
        """
        try:
            record = await self.find_one({"job_name": job_name})
        except Exception as exc:  # noqa: BLE001
            logger.warning("sync_state_read_failed", job_name=job_name, error=str(exc))
            record = None

        if record is not None:
            return record.last_success
        return datetime.now(timezone.utc) - DEFAULT_LOOKBACK

    async def mark_success(self, job_name: str, at: datetime | None = None) -> None:
        """Advance the watermark of *job_name* to *at* (default: now)."""
        now = datetime.now(timezone.utc)
        await self.upsert(
            {"job_name": job_name},
            {"last_success": at or now, "updated_at": now},
        )
        logger.info("sync_state_updated", job_name=job_name, last_success=(at or now).isoformat())
