"""Source parsers: raw upstream content to KnowledgeDocument chunks."""

from knowledge_base.services.ingestion.parsers.dl_parser import DistributionListParser
from knowledge_base.services.ingestion.parsers.pdf_parser import PdfParser
from knowledge_base.services.ingestion.parsers.transcript_parser import TranscriptParser

__all__ = ["DistributionListParser", "PdfParser", "TranscriptParser"]
