"""PDF ingestion with file-record lifecycle tracking.

``create_file_record`` registers the file as ``pending``; ``run`` moves it
to ``processing``, reads the bytes (buffer or URL), parses, stores the
chunks and finishes ``completed`` with ``chunks_count`` or ``failed`` with
the error message.  ``run`` reports failures through the returned
:class:`IngestResult` and the file record instead of raising.
"""

from __future__ import annotations

import structlog

from knowledge_base.interfaces.extractor import IExtractor
from knowledge_base.models.ingest import IngestResult, PdfSource
from knowledge_base.models.records import FileRecord, FileSource, FileStatus
from knowledge_base.services.document_service import DocumentService
from knowledge_base.services.file_service import FileService
from knowledge_base.services.ingestion.parsers.pdf_parser import PdfParser

logger = structlog.get_logger(logger_name=__name__)


class PdfIngestion:
    """Orchestrates the ingestion of one PDF file."""

    def __init__(
        self,
        extractor: IExtractor[bytes],
        documents: DocumentService,
        files: FileService,
        parser: PdfParser | None = None,
    ) -> None:
        self._extractor = extractor
        self._documents = documents
        self._files = files
        self._parser = parser or PdfParser()

    async def create_file_record(
        self,
        filename: str,
        source: FileSource,
        original_url: str | None = None,
    ) -> str:
        return await self._files.create(filename, source, original_url)

    async def get_file_record(self, file_id: str) -> FileRecord | None:
        return await self._files.find_by_id(file_id)

    async def run(self, source: PdfSource, file_id: str) -> IngestResult:
        result = IngestResult()
        try:
            await self._files.update_status(file_id, FileStatus.PROCESSING)
            logger.info("pdf_ingestion_started", file_id=file_id, filename=source.filename)

            payloads = await self._extractor.extract(buffer=source.buffer, url=source.url)
            docs = self._parser.parse(payloads[0], file_id, source.filename)

            if docs:
                await self._documents.add(docs)
            else:
                logger.warning("pdf_no_extractable_text", file_id=file_id, filename=source.filename)

            await self._files.update_status(
                file_id, FileStatus.COMPLETED, chunks_count=len(docs)
            )
            result.processed = len(docs)
            result.details.append(f'Processed PDF "{source.filename}": {len(docs)} chunks')
            logger.info("pdf_ingestion_completed", file_id=file_id, chunks=len(docs))
        except Exception as exc:  # noqa: BLE001
            result.errors += 1
            result.details.append(f"Error processing PDF {source.filename}: {exc}")
            logger.error(
                "pdf_ingestion_failed",
                file_id=file_id,
                filename=source.filename,
                error=str(exc),
            )
            await self._mark_failed(file_id, str(exc))
        return result

    async def _mark_failed(self, file_id: str, error: str) -> None:
        try:
            await self._files.update_status(file_id, FileStatus.FAILED, error=error)
        except Exception as exc:  # noqa: BLE001
            logger.error("pdf_failure_not_recorded", file_id=file_id, error=str(exc))
