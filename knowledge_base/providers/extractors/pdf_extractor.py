"""PDF extractor: returns PDF bytes from an in-memory buffer or a URL download."""

from __future__ import annotations

from typing import Any

import httpx
import structlog

from knowledge_base.interfaces.extractor import IExtractor
from knowledge_base.utils.errors import ExtractionError

logger = structlog.get_logger(logger_name=__name__)


class PdfExtractor(IExtractor[bytes]):
    """Yields exactly one PDF payload per call.

    ``buffer`` wins when both ``buffer`` and ``url`` are given.
    """

    def __init__(self, http_client: httpx.AsyncClient) -> None:
        self._http = http_client

    async def extract(self, **options: Any) -> list[bytes]:
        buffer: bytes | None = options.get("buffer")
        url: str | None = options.get("url")

        if buffer:
            return [buffer]
        if url:
            return [await self._download(url)]
        raise ExtractionError(
            message="Either a buffer or a url is required to extract a PDF",
            provider_name="pdf",
        )

    async def _download(self, url: str) -> bytes:
        logger.info("pdf_download_started", url=url)
        try:
            response = await self._http.get(url, follow_redirects=True)
        except httpx.HTTPError as exc:
            raise ExtractionError(
                message=f"PDF download failed: {exc}", provider_name="pdf"
            ) from exc
        if not response.is_success:
            raise ExtractionError(
                message=f"PDF download failed with HTTP {response.status_code}",
                provider_name="pdf",
            )
        logger.info("pdf_download_completed", url=url, size=len(response.content))
        return response.content
