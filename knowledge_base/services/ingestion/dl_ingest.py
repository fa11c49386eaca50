"""Distribution-list ingestion: a full refresh on every run.

Membership has no delta key, so each run deletes every
``distribution_list`` document and re-inserts the current set.  The
delete belongs to the fatal pre-loop region together with extraction.
"""

from __future__ import annotations

import structlog

from knowledge_base.interfaces.extractor import IExtractor
from knowledge_base.models.document import SourceType
from knowledge_base.models.ingest import IngestResult, RawDistributionList
from knowledge_base.models.search import SearchFilters
from knowledge_base.services.document_service import DocumentService
from knowledge_base.services.ingestion.parsers.dl_parser import DistributionListParser
from knowledge_base.services.sync_state_service import SyncStateService

logger = structlog.get_logger(logger_name=__name__)

JOB_NAME = SourceType.DISTRIBUTION_LIST.value


class DistributionListIngestion:
    """Orchestrates one distribution-list refresh."""

    def __init__(
        self,
        extractor: IExtractor[RawDistributionList],
        documents: DocumentService,
        sync_state: SyncStateService,
        parser: DistributionListParser | None = None,
    ) -> None:
        self._extractor = extractor
        self._documents = documents
        self._sync_state = sync_state
        self._parser = parser or DistributionListParser()

    async def run(self) -> IngestResult:
        result = IngestResult()
        logger.info("dl_ingestion_started")

        try:
            lists = await self._extractor.extract()
            logger.info("distribution_lists_extracted", count=len(lists))

            deleted = await self._documents.delete(
                SearchFilters(source_type=SourceType.DISTRIBUTION_LIST)
            )
            result.details.append(f"Deleted {deleted} existing DL documents")

            for dl in lists:
                try:
                    doc = self._parser.parse(dl)
                    await self._documents.add([doc])
                    result.processed += 1
                    result.details.append(
                        f'Processed DL "{dl.display_name}" ({len(dl.members)} members)'
                    )
                except Exception as exc:  # noqa: BLE001
                    result.errors += 1
                    result.details.append(f"Error processing DL {dl.display_name}: {exc}")
                    logger.error("dl_processing_failed", dl_id=dl.id, error=str(exc))

            await self._sync_state.mark_success(JOB_NAME)
        except Exception as exc:  # noqa: BLE001
            result.errors += 1
            result.details.append(f"Fatal error during DL ingestion: {exc}")
            logger.error("dl_ingestion_failed", error=str(exc))

        logger.info("dl_ingestion_complete", processed=result.processed, errors=result.errors)
        return result
