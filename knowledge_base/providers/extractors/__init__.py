"""Upstream extractors: Microsoft Graph transcripts and lists, and PDFs."""

from knowledge_base.providers.extractors.dl_extractor import GraphDistributionListExtractor
from knowledge_base.providers.extractors.graph_client import GraphClient, static_token
from knowledge_base.providers.extractors.pdf_extractor import PdfExtractor
from knowledge_base.providers.extractors.transcript_extractor import GraphTranscriptExtractor

__all__ = [
    "GraphClient",
    "GraphDistributionListExtractor",
    "GraphTranscriptExtractor",
    "PdfExtractor",
    "static_token",
]
