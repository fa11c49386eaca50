"""Pydantic v2 data models for the knowledge base.

- **document** -- KnowledgeDocument and its discriminated metadata variants.
- **search** -- SearchFilters, SearchOptions, SearchResult.
- **records** -- FileRecord and SyncState metadata-store entities.
- **ingest** -- Raw upstream shapes and the IngestResult summary.
- **chat** -- ChatResponse and SourceReference.
"""

from knowledge_base.models.chat import ChatResponse, SourceReference
from knowledge_base.models.document import (
    DistributionListMetadata,
    DocumentMetadata,
    KnowledgeDocument,
    PdfMetadata,
    SourceType,
    StoredDocument,
    TranscriptMetadata,
    VectorRecord,
)
from knowledge_base.models.ingest import (
    IngestResult,
    PdfSource,
    RawDistributionList,
    RawDLMember,
    RawMeetingDetails,
    RawTranscript,
    TranscriptItem,
)
from knowledge_base.models.records import FileRecord, FileSource, FileStatus, SyncState
from knowledge_base.models.search import SearchFilters, SearchOptions, SearchResult

__all__ = [
    "ChatResponse",
    "DistributionListMetadata",
    "DocumentMetadata",
    "FileRecord",
    "FileSource",
    "FileStatus",
    "IngestResult",
    "KnowledgeDocument",
    "PdfMetadata",
    "PdfSource",
    "RawDLMember",
    "RawDistributionList",
    "RawMeetingDetails",
    "RawTranscript",
    "SearchFilters",
    "SearchOptions",
    "SearchResult",
    "SourceReference",
    "SourceType",
    "StoredDocument",
    "SyncState",
    "TranscriptItem",
    "TranscriptMetadata",
    "VectorRecord",
]
