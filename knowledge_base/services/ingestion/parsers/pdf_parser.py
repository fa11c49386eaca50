"""PDF parser.

Reads the whole document with PyMuPDF, chunks the concatenated page text
with :class:`TextChunker` (1000/200 profile) and attaches an *estimated*
page range to every chunk.  Page estimates project character offsets onto
an average page length of ``max(total_chars / total_pages, 500)``.
"""

from __future__ import annotations

import math

import fitz  # PyMuPDF -- the "fitz" import name is a PyMuPDF convention
import structlog

from knowledge_base.models.document import KnowledgeDocument, PdfMetadata
from knowledge_base.services.ingestion.chunker import TextChunker
from knowledge_base.utils.errors import ParseError

logger = structlog.get_logger(logger_name=__name__)

PDF_CHUNK_SIZE = 1000
PDF_CHUNK_OVERLAP = 200
_MIN_CHARS_PER_PAGE = 500


def estimate_page(offset: int, chars_per_page: float, total_pages: int) -> int:
    """Project a character offset onto a 1-based page number."""
    page = math.floor(offset / chars_per_page) + 1
    return min(max(page, 1), max(total_pages, 1))


class PdfParser:
    """Converts PDF bytes into page-annotated knowledge documents."""

    def __init__(self, chunker: TextChunker | None = None) -> None:
        self._chunker = chunker or TextChunker(PDF_CHUNK_SIZE, PDF_CHUNK_OVERLAP)

    def parse(self, data: bytes, file_id: str, filename: str) -> list[KnowledgeDocument]:
        """Parse *data* into chunks.

        Returns an empty list when the document has no extractable text.

        Raises
        ------
        ParseError
            If *data* is not a readable PDF.
        """
        text, total_pages = self._extract_text(data, filename)
        if not text.strip():
            logger.warning("pdf_no_text_extracted", filename=filename, pages=total_pages)
            return []

        chars_per_page = max(len(text) / max(total_pages, 1), _MIN_CHARS_PER_PAGE)
        documents = [
            KnowledgeDocument(
                content=chunk.text,
                metadata=PdfMetadata(
                    pdf_filename=filename,
                    pdf_file_id=file_id,
                    page_start=estimate_page(chunk.start_char, chars_per_page, total_pages),
                    page_end=estimate_page(chunk.end_char, chars_per_page, total_pages),
                    total_pages=total_pages,
                    chunk_index=chunk.index,
                ),
            )
            for chunk in self._chunker.chunk(text)
        ]

        logger.info(
            "pdf_parsed",
            filename=filename,
            pages=total_pages,
            chars=len(text),
            chunks=len(documents),
        )
        return documents

    @staticmethod
    def _extract_text(data: bytes, filename: str) -> tuple[str, int]:
        try:
            doc = fitz.open(stream=data, filetype="pdf")
        except (RuntimeError, ValueError) as exc:
            raise ParseError(
                message=f"Could not open PDF {filename}: {exc}",
                provider_name="pymupdf",
            ) from exc

        try:
            total_pages = doc.page_count
            text = "\n".join(page.get_text("text") for page in doc)
        finally:
            doc.close()
        return text, total_pages
