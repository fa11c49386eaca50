"""Retrieval-augmented answer generation over the knowledge base.

The data flow is a plain RAG chain:
  1. RETRIEVE -- search the knowledge base for the question.
  2. CONTEXT  -- render each hit as a labelled ``--- Document i [...] ---``
                 block so the model can cite meetings, lists and PDFs.
  3. ANSWER   -- hand question + context to the chat provider.
  4. SOURCES  -- return one :class:`SourceReference` per hit.

When retrieval finds nothing, the model is not called at all and a fixed
"not enough information" answer is returned.
"""

from __future__ import annotations

import structlog

from knowledge_base.interfaces.llm_provider import ILLMProvider
from knowledge_base.models.chat import ChatResponse, SourceReference
from knowledge_base.models.document import (
    DistributionListMetadata,
    SourceType,
    TranscriptMetadata,
)
from knowledge_base.models.search import SearchFilters, SearchOptions, SearchResult
from knowledge_base.services.document_service import DocumentService
from knowledge_base.utils.logging import get_logger

logger: structlog.BoundLogger = get_logger(__name__)

NO_RESULTS_ANSWER = (
    "I don't have enough information to answer that question. "
    "No relevant documents were found in the knowledge base."
)


def source_label(result: SearchResult) -> str:
    """Return the bracketed source label used in context blocks."""
    meta = result.document.metadata
    if isinstance(meta, TranscriptMetadata):
        return f"[Meeting: {meta.meeting_subject} ({meta.meeting_date})]"
    if isinstance(meta, DistributionListMetadata):
        return f"[Distribution List: {meta.dl_name}]"
    return f"[PDF: {meta.pdf_filename}]"


def build_context(results: list[SearchResult]) -> str:
    """Render search hits as numbered context blocks separated by blank lines."""
    return "\n\n".join(
        f"--- Document {i} {source_label(result)} ---\n{result.document.content}"
        for i, result in enumerate(results, start=1)
    )


def build_source_reference(result: SearchResult) -> SourceReference:
    meta = result.document.metadata
    if isinstance(meta, TranscriptMetadata):
        return SourceReference(
            source_type=SourceType.TRANSCRIPT,
            title=meta.meeting_subject,
            date=meta.meeting_date,
            relevance_score=result.score,
        )
    if isinstance(meta, DistributionListMetadata):
        return SourceReference(
            source_type=SourceType.DISTRIBUTION_LIST,
            title=meta.dl_name,
            relevance_score=result.score,
        )
    return SourceReference(
        source_type=SourceType.PDF,
        title=meta.pdf_filename,
        relevance_score=result.score,
    )


class ChatService:
    """Answers questions from knowledge-base context.

    Parameters
    ----------
    documents:
        Document service used for retrieval.
    llm:
        Chat provider that produces the answer.
    default_limit:
        Number of documents retrieved when the caller does not say.
    min_score:
        Similarity threshold applied to retrieval when the caller does not say.
    """

    def __init__(
        self,
        documents: DocumentService,
        llm: ILLMProvider,
        default_limit: int = 5,
        min_score: float = 0.2,
    ) -> None:
        self._documents = documents
        self._llm = llm
        self._default_limit = default_limit
        self._min_score = min_score

    async def ask(
        self,
        question: str,
        filters: SearchFilters | None = None,
        limit: int | None = None,
        min_score: float | None = None,
    ) -> ChatResponse:
        logger.info("chat_query_received", question=question[:200], has_filters=filters is not None)

        results = await self._documents.search(
            question,
            SearchOptions(
                limit=limit or self._default_limit,
                min_score=self._min_score if min_score is None else min_score,
                filter=filters,
            ),
        )
        if not results:
            logger.info("chat_query_no_results")
            return ChatResponse(answer=NO_RESULTS_ANSWER, sources=[])

        answer = await self._llm.invoke(question, build_context(results))
        sources = [build_source_reference(result) for result in results]
        logger.info("chat_query_completed", sources=len(sources))
        return ChatResponse(answer=answer, sources=sources)
