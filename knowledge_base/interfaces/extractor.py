"""Abstract base class for upstream content extractors."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

from knowledge_base.models.ingest import RawTranscript, TranscriptItem

T = TypeVar("T")


# Concrete implementations: GraphDistributionListExtractor, PdfExtractor.
# Located in: knowledge_base/providers/extractors/
class IExtractor(ABC, Generic[T]):
    """Fetches raw items of type *T* from an upstream source.

    Extraction is all-or-nothing from the orchestrator's point of view: an
    exception here aborts the run before any item is processed.
    """

    @abstractmethod
    async def extract(self, **options: Any) -> list[T]:
        """Return the raw items to ingest, in processing order.

        Raises
        ------
        knowledge_base.utils.errors.ExtractionError
            If the upstream source cannot be listed or downloaded.
        """


# Concrete implementation: GraphTranscriptExtractor.
class ITranscriptExtractor(IExtractor[RawTranscript]):
    """Two-step transcript source: list references, then fetch each one.

    ``extract`` lists the transcripts in scope and is fatal for the run when
    it fails.  ``fetch`` is called once per reference inside the
    orchestrator's per-item error handling, so a transcript whose content
    or meeting details cannot be read is counted as a failed item.
    """

    @abstractmethod
    async def fetch(self, transcript: RawTranscript) -> TranscriptItem:
        """Return the WEBVTT content and meeting details for *transcript*.

        Raises
        ------
        knowledge_base.utils.errors.ExtractionError
            If the content or the meeting details cannot be fetched.
        """
