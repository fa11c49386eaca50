"""Unit tests for the retrieval-augmented chat service."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from knowledge_base.interfaces.llm_provider import ILLMProvider
from knowledge_base.models.document import (
    DistributionListMetadata,
    KnowledgeDocument,
    PdfMetadata,
    SourceType,
    TranscriptMetadata,
)
from knowledge_base.models.search import SearchFilters, SearchResult
from knowledge_base.services.chat_service import (
    NO_RESULTS_ANSWER,
    ChatService,
    build_context,
    source_label,
)
from knowledge_base.services.document_service import DocumentService


def _transcript_hit(score: float = 0.9) -> SearchResult:
    return SearchResult(
        document=KnowledgeDocument(
            content="[Alice] (00:00:01.000): We agreed on the budget.",
            metadata=TranscriptMetadata(
                meeting_subject="Budget Review",
                meeting_date="2024-05-02T14:00:00Z",
                meeting_id="m-1",
                timestamp_start="00:00:01.000",
                timestamp_end="00:00:05.000",
            ),
        ),
        score=score,
    )


def _dl_hit(score: float = 0.8) -> SearchResult:
    return SearchResult(
        document=KnowledgeDocument(
            content="Distribution List: Finance Team",
            metadata=DistributionListMetadata(
                dl_name="Finance Team", dl_email="f@example.com", dl_id="dl-1", member_count=3
            ),
        ),
        score=score,
    )


def _pdf_hit(score: float = 0.7) -> SearchResult:
    return SearchResult(
        document=KnowledgeDocument(
            content="Travel policy text",
            metadata=PdfMetadata(
                pdf_filename="policy.pdf",
                pdf_file_id="1",
                page_start=1,
                page_end=2,
                total_pages=2,
                chunk_index=0,
            ),
        ),
        score=score,
    )


def _service(results: list[SearchResult], answer: str = "The answer.") -> tuple:
    documents = MagicMock(spec=DocumentService)
    documents.search = AsyncMock(return_value=results)
    llm = MagicMock(spec=ILLMProvider)
    llm.invoke = AsyncMock(return_value=answer)
    return ChatService(documents, llm, default_limit=5, min_score=0.2), documents, llm


class TestContextAssembly:
    def test_labels_per_source_type(self) -> None:
        assert source_label(_transcript_hit()) == (
            "[Meeting: Budget Review (2024-05-02T14:00:00Z)]"
        )
        assert source_label(_dl_hit()) == "[Distribution List: Finance Team]"
        assert source_label(_pdf_hit()) == "[PDF: policy.pdf]"

    def test_numbered_blocks(self) -> None:
        context = build_context([_transcript_hit(), _dl_hit()])
        assert context == (
            "--- Document 1 [Meeting: Budget Review (2024-05-02T14:00:00Z)] ---\n"
            "[Alice] (00:00:01.000): We agreed on the budget.\n\n"
            "--- Document 2 [Distribution List: Finance Team] ---\n"
            "Distribution List: Finance Team"
        )


class TestChatService:
    @pytest.mark.asyncio
    async def test_no_results_skips_llm(self) -> None:
        service, _, llm = _service([])

        response = await service.ask("What was decided?")

        assert response.answer == NO_RESULTS_ANSWER
        assert response.sources == []
        llm.invoke.assert_not_called()

    @pytest.mark.asyncio
    async def test_answer_with_sources(self) -> None:
        service, documents, llm = _service([_transcript_hit(0.91), _pdf_hit(0.65)])

        response = await service.ask("What was decided?")

        assert response.answer == "The answer."
        question, context = llm.invoke.call_args.args
        assert question == "What was decided?"
        assert context.startswith("--- Document 1 [Meeting: Budget Review")
        assert [s.source_type for s in response.sources] == [SourceType.TRANSCRIPT, SourceType.PDF]
        assert response.sources[0].title == "Budget Review"
        assert response.sources[0].date == "2024-05-02T14:00:00Z"
        assert response.sources[1].title == "policy.pdf"
        assert response.sources[1].date is None
        assert response.sources[1].relevance_score == 0.65

    @pytest.mark.asyncio
    async def test_defaults_and_overrides_reach_search(self) -> None:
        service, documents, _ = _service([])
        filters = SearchFilters(source_type=SourceType.DISTRIBUTION_LIST)

        await service.ask("q")
        await service.ask("q", filters=filters, limit=3, min_score=0.0)

        first = documents.search.call_args_list[0].args[1]
        assert (first.limit, first.min_score, first.filter) == (5, 0.2, None)
        second = documents.search.call_args_list[1].args[1]
        assert (second.limit, second.min_score, second.filter) == (3, 0.0, filters)
