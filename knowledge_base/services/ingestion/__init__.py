"""Ingestion pipeline for the knowledge base.

Every source follows **extract -> parse -> embed -> store**:

1. **Extract** (providers/extractors/) -- fetch raw items from Microsoft
   Graph or a PDF buffer / URL.
2. **Parse** (parsers/) -- turn each raw item into KnowledgeDocument
   chunks; transcripts by time window, lists as one roster document, PDFs
   through :class:`TextChunker`.
3. **Embed + Store** (DocumentService) -- batch-embed and insert.

The orchestrators isolate per-item failures, keep the sync watermarks
current and track PDF file records.
"""

from knowledge_base.services.ingestion.chunker import TextChunk, TextChunker
from knowledge_base.services.ingestion.dl_ingest import DistributionListIngestion
from knowledge_base.services.ingestion.pdf_ingest import PdfIngestion
from knowledge_base.services.ingestion.transcript_ingest import TranscriptIngestion

__all__ = [
    "DistributionListIngestion",
    "PdfIngestion",
    "TextChunk",
    "TextChunker",
    "TranscriptIngestion",
]
