"""Unit tests for the document, sync-state and file services."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

from knowledge_base.interfaces.embedding_provider import IEmbeddingProvider
from knowledge_base.interfaces.store import IStore
from knowledge_base.models.document import (
    DistributionListMetadata,
    KnowledgeDocument,
    PdfMetadata,
    SourceType,
)
from knowledge_base.models.records import FileSource, FileStatus
from knowledge_base.models.search import SearchFilters, SearchOptions
from knowledge_base.services.document_service import DocumentService
from knowledge_base.services.file_service import FileService
from knowledge_base.services.sync_state_service import DEFAULT_LOOKBACK, SyncStateService
from knowledge_base.utils.errors import EmbeddingError, StoreNotConnectedError


def _dl_doc(name: str) -> KnowledgeDocument:
    return KnowledgeDocument(
        content=f"Distribution List: {name}",
        metadata=DistributionListMetadata(
            dl_name=name, dl_email=f"{name}@example.com", dl_id=name, member_count=0
        ),
    )


def _pdf_doc(name: str, index: int = 0) -> KnowledgeDocument:
    return KnowledgeDocument(
        content=f"{name} chunk {index}",
        metadata=PdfMetadata(
            pdf_filename=name,
            pdf_file_id="1",
            page_start=1,
            page_end=1,
            total_pages=1,
            chunk_index=index,
        ),
    )


# ======================================================================
# DocumentService
# ======================================================================


class TestDocumentService:
    @pytest.mark.asyncio
    async def test_add_embeds_in_one_batch_and_stores(self, memory_store, fake_embedder) -> None:
        service = DocumentService(memory_store, fake_embedder)
        docs = [_dl_doc("finance"), _pdf_doc("a.pdf")]

        ids = await service.add(docs)

        assert ids == ["1", "2"]
        assert fake_embedder.calls == [[d.content for d in docs]]
        rows = memory_store.vector_stores["knowledge_base"].rows
        assert rows[0]["metadata"]["source_type"] == "distribution_list"
        assert len(rows[1]["embedding"]) == fake_embedder.dimensions

    @pytest.mark.asyncio
    async def test_add_empty_makes_no_calls(self, memory_store, fake_embedder) -> None:
        assert await DocumentService(memory_store, fake_embedder).add([]) == []
        assert fake_embedder.calls == []

    @pytest.mark.asyncio
    async def test_search_finds_exact_match_first(self, memory_store, fake_embedder) -> None:
        service = DocumentService(memory_store, fake_embedder)
        docs = [_pdf_doc("a.pdf", i) for i in range(5)]
        await service.add(docs)

        results = await service.search(docs[3].content, SearchOptions(limit=2, min_score=0.0))

        assert len(results) == 2
        assert results[0].document.content == docs[3].content
        assert results[0].score == pytest.approx(1.0)

    @pytest.mark.asyncio
    async def test_search_respects_filters(self, memory_store, fake_embedder) -> None:
        service = DocumentService(memory_store, fake_embedder)
        await service.add([_dl_doc("finance"), _pdf_doc("a.pdf")])

        results = await service.search(
            "anything",
            SearchOptions(
                limit=5, min_score=0.0, filter=SearchFilters(source_type=SourceType.PDF)
            ),
        )

        assert [r.document.metadata.source_type for r in results] == ["pdf"]

    @pytest.mark.asyncio
    async def test_delete_by_filter(self, memory_store, fake_embedder) -> None:
        service = DocumentService(memory_store, fake_embedder)
        await service.add([_dl_doc("a"), _dl_doc("b"), _pdf_doc("c.pdf")])

        deleted = await service.delete(SearchFilters(source_type=SourceType.DISTRIBUTION_LIST))

        assert deleted == 2
        assert len(memory_store.vector_stores["knowledge_base"].rows) == 1

    @pytest.mark.asyncio
    async def test_embedding_errors_propagate(self, memory_store) -> None:
        embedder = MagicMock(spec=IEmbeddingProvider)
        embedder.embed_batch = AsyncMock(side_effect=EmbeddingError("boom", provider_name="fake"))
        service = DocumentService(memory_store, embedder)

        with pytest.raises(EmbeddingError):
            await service.add([_dl_doc("a")])
        assert memory_store.vector_stores.get("knowledge_base") is None

    @pytest.mark.asyncio
    async def test_unconnected_store_raises(self, fake_embedder) -> None:
        store = MagicMock(spec=IStore)
        store.get_vector_store.side_effect = StoreNotConnectedError(provider_name="mongo")
        with pytest.raises(StoreNotConnectedError):
            await DocumentService(store, fake_embedder).add([_dl_doc("a")])


# ======================================================================
# SyncStateService
# ======================================================================


class TestSyncStateService:
    @pytest.mark.asyncio
    async def test_missing_record_falls_back_to_24_hours(self, memory_store) -> None:
        before = datetime.now(timezone.utc)
        last = await SyncStateService(memory_store).get_last_sync("transcript")
        after = datetime.now(timezone.utc)
        assert before - DEFAULT_LOOKBACK <= last <= after - DEFAULT_LOOKBACK
        assert DEFAULT_LOOKBACK == timedelta(hours=24)

    @pytest.mark.asyncio
    async def test_mark_success_then_read_back(self, memory_store) -> None:
        service = SyncStateService(memory_store)
        at = datetime(2024, 5, 2, 12, 0, tzinfo=timezone.utc)

        await service.mark_success("transcript", at=at)

        assert await service.get_last_sync("transcript") == at

    @pytest.mark.asyncio
    async def test_mark_success_upserts_single_record(self, memory_store) -> None:
        service = SyncStateService(memory_store)
        await service.mark_success("transcript", at=datetime(2024, 1, 1, tzinfo=timezone.utc))
        await service.mark_success("transcript", at=datetime(2024, 2, 1, tzinfo=timezone.utc))
        await service.mark_success("distribution_list")

        assert len(memory_store.tables["sync_state"]) == 2
        last = await service.get_last_sync("transcript")
        assert last == datetime(2024, 2, 1, tzinfo=timezone.utc)

    @pytest.mark.asyncio
    async def test_read_failure_falls_back(self) -> None:
        store = MagicMock(spec=IStore)
        meta = MagicMock()
        meta.find_one = AsyncMock(side_effect=RuntimeError("db down"))
        store.get_meta_store.return_value = meta

        last = await SyncStateService(store).get_last_sync("transcript")

        expected = datetime.now(timezone.utc) - DEFAULT_LOOKBACK
        assert abs((last - expected).total_seconds()) < 5


# ======================================================================
# FileService
# ======================================================================


class TestFileService:
    @pytest.mark.asyncio
    async def test_create_is_pending(self, memory_store) -> None:
        service = FileService(memory_store)
        file_id = await service.create("a.pdf", FileSource.URL, "https://example.com/a.pdf")

        record = await service.find_by_id(file_id)
        assert record is not None
        assert record.status == FileStatus.PENDING
        assert record.source == FileSource.URL
        assert record.original_url == "https://example.com/a.pdf"
        assert record.chunks_count is None

    @pytest.mark.asyncio
    async def test_lifecycle_to_completed(self, memory_store) -> None:
        service = FileService(memory_store)
        file_id = await service.create("a.pdf", FileSource.UPLOAD)

        assert await service.update_status(file_id, FileStatus.PROCESSING) is True
        assert await service.update_status(file_id, FileStatus.COMPLETED, chunks_count=4) is True

        record = await service.find_by_id(file_id)
        assert record.status == FileStatus.COMPLETED
        assert record.chunks_count == 4

    @pytest.mark.asyncio
    @pytest.mark.parametrize("terminal", [FileStatus.COMPLETED, FileStatus.FAILED])
    async def test_terminal_states_are_final(self, memory_store, terminal: FileStatus) -> None:
        service = FileService(memory_store)
        file_id = await service.create("a.pdf", FileSource.UPLOAD)
        await service.update_status(file_id, terminal, error="x" if terminal == FileStatus.FAILED else None)

        assert await service.update_status(file_id, FileStatus.PROCESSING) is False
        record = await service.find_by_id(file_id)
        assert record.status == terminal

    @pytest.mark.asyncio
    async def test_failed_records_error(self, memory_store) -> None:
        service = FileService(memory_store)
        file_id = await service.create("a.pdf", FileSource.UPLOAD)
        await service.update_status(file_id, FileStatus.FAILED, error="corrupt file")

        record = await service.find_by_id(file_id)
        assert record.error == "corrupt file"

    @pytest.mark.asyncio
    async def test_unknown_file_is_refused(self, memory_store) -> None:
        assert await FileService(memory_store).update_status("999", FileStatus.PROCESSING) is False
