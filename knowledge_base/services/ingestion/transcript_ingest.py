"""Meeting transcript ingestion: list -> fetch -> parse -> embed -> store.

Delta sync: a run covers transcripts created since the job watermark (or
an explicit ``since``).  Listing the transcripts is the only fatal step:
it aborts the run and leaves the watermark where it was, so the next run
retries the same window.  Fetching, parsing and storing happen per
transcript; a failure there is counted and the run moves on.
"""

from __future__ import annotations

from datetime import datetime

import structlog

from knowledge_base.interfaces.extractor import ITranscriptExtractor
from knowledge_base.mappers.microsoft import meeting_to_metadata
from knowledge_base.models.document import SourceType
from knowledge_base.models.ingest import IngestResult
from knowledge_base.services.document_service import DocumentService
from knowledge_base.services.ingestion.parsers.transcript_parser import TranscriptParser
from knowledge_base.services.sync_state_service import SyncStateService

logger = structlog.get_logger(logger_name=__name__)

JOB_NAME = SourceType.TRANSCRIPT.value


class TranscriptIngestion:
    """Orchestrates one transcript ingestion run."""

    def __init__(
        self,
        extractor: ITranscriptExtractor,
        documents: DocumentService,
        sync_state: SyncStateService,
        parser: TranscriptParser | None = None,
    ) -> None:
        self._extractor = extractor
        self._documents = documents
        self._sync_state = sync_state
        self._parser = parser or TranscriptParser()

    async def run(self, since: datetime | None = None) -> IngestResult:
        if since is None:
            since = await self._sync_state.get_last_sync(JOB_NAME)

        result = IngestResult()
        logger.info("transcript_ingestion_started", since=since.isoformat())

        try:
            transcripts = await self._extractor.extract(since=since)
            logger.info("transcripts_listed", count=len(transcripts))

            for transcript in transcripts:
                try:
                    item = await self._extractor.fetch(transcript)
                    docs = self._parser.parse(
                        item.vtt_content, **meeting_to_metadata(item.meeting)
                    )
                    if docs:
                        await self._documents.add(docs)
                        result.processed += len(docs)
                        result.details.append(
                            f'Processed meeting "{item.meeting.subject}": {len(docs)} chunks'
                        )
                except Exception as exc:  # noqa: BLE001
                    result.errors += 1
                    result.details.append(
                        f"Error processing transcript {transcript.id}: {exc}"
                    )
                    logger.error(
                        "transcript_processing_failed",
                        transcript_id=transcript.id,
                        error=str(exc),
                    )

            await self._sync_state.mark_success(JOB_NAME)
        except Exception as exc:  # noqa: BLE001
            result.errors += 1
            result.details.append(f"Fatal error during transcript ingestion: {exc}")
            logger.error("transcript_ingestion_failed", error=str(exc))

        logger.info(
            "transcript_ingestion_complete",
            processed=result.processed,
            errors=result.errors,
        )
        return result
