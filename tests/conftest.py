"""Shared pytest fixtures for the knowledge base test suite."""

from __future__ import annotations

import hashlib
import itertools
import math
from datetime import datetime, timezone
from typing import Any

import pytest

from knowledge_base.interfaces.embedding_provider import IEmbeddingProvider
from knowledge_base.interfaces.meta_store import IMetaStore, T
from knowledge_base.interfaces.store import IStore
from knowledge_base.interfaces.vector_store import IVectorStore
from knowledge_base.models.document import KnowledgeDocument, VectorRecord
from knowledge_base.models.ingest import (
    RawDistributionList,
    RawDLMember,
    RawMeetingDetails,
    RawTranscript,
    TranscriptItem,
)
from knowledge_base.models.search import (
    DATE_FILTER_FIELD,
    SearchFilters,
    SearchOptions,
    SearchResult,
)
from knowledge_base.utils.errors import StoreNotConnectedError

# ---------------------------------------------------------------------------
# Fakes
# ---------------------------------------------------------------------------

FAKE_DIMENSIONS = 8


class FakeEmbedder(IEmbeddingProvider):
    """Deterministic hash-based embeddings; identical text -> identical vector."""

    def __init__(self, dimensions: int = FAKE_DIMENSIONS) -> None:
        self._dimensions = dimensions
        self.calls: list[list[str]] = []

    def _vector(self, text: str) -> list[float]:
        digest = hashlib.sha256(text.encode("utf-8")).digest()
        return [(b / 255.0) + 0.01 for b in digest[: self._dimensions]]

    async def embed(self, text: str) -> list[float]:
        self.calls.append([text])
        return self._vector(text)

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        self.calls.append(list(texts))
        return [self._vector(t) for t in texts]

    @property
    def dimensions(self) -> int:
        return self._dimensions

    def get_provider_name(self) -> str:
        return "fake_embedding"

    def is_available(self) -> bool:
        return True


def _cosine(a: list[float], b: list[float]) -> float:
    dot = sum(x * y for x, y in zip(a, b))
    norm = math.sqrt(sum(x * x for x in a)) * math.sqrt(sum(y * y for y in b))
    return dot / norm if norm else 0.0


class InMemoryVectorStore(IVectorStore):
    """List-backed vector store with the same filter semantics as the real backends."""

    def __init__(self) -> None:
        self.rows: list[dict[str, Any]] = []
        self._ids = itertools.count(1)

    async def insert(self, records: list[VectorRecord]) -> list[str]:
        ids = []
        for record in records:
            row_id = str(next(self._ids))
            self.rows.append({"id": row_id, **record.model_dump()})
            ids.append(row_id)
        return ids

    @staticmethod
    def _matches(row: dict[str, Any], filters: SearchFilters | None, dates: bool) -> bool:
        if filters is None:
            return True
        meta = row["metadata"]
        for field, value in filters.equality_fields().items():
            if meta.get(field) != value:
                return False
        if dates:
            date = meta.get(DATE_FILTER_FIELD)
            if filters.date_from and (date is None or date < filters.date_from):
                return False
            if filters.date_to and (date is None or date > filters.date_to):
                return False
        return True

    async def search(self, embedding: list[float], options: SearchOptions) -> list[SearchResult]:
        scored = []
        for row in self.rows:
            if not self._matches(row, options.filter, dates=True):
                continue
            score = min(max(_cosine(embedding, row["embedding"]), 0.0), 1.0)
            if score < options.min_score:
                continue
            document = KnowledgeDocument.model_validate(
                {"content": row["content"], "metadata": row["metadata"]}
            )
            scored.append(SearchResult(document=document, score=score))
        scored.sort(key=lambda r: r.score, reverse=True)
        return scored[: options.limit]

    async def delete(self, filters: SearchFilters) -> int:
        if filters.is_empty():
            return 0
        before = len(self.rows)
        self.rows = [r for r in self.rows if not self._matches(r, filters, dates=False)]
        return before - len(self.rows)


class InMemoryMetaStore(IMetaStore[T]):
    """Dict-backed metadata store; ids are stringified counters."""

    def __init__(self, rows: dict[str, dict[str, Any]], model: type[T]) -> None:
        self._rows = rows
        self._model = model

    def _to_model(self, row_id: str, row: dict[str, Any]) -> T:
        return self._model.model_validate({**row, "id": row_id})

    async def insert(self, data: dict[str, Any]) -> str:
        row_id = str(len(self._rows) + 1)
        self._rows[row_id] = dict(data)
        return row_id

    async def find_by_id(self, entity_id: str) -> T | None:
        row = self._rows.get(entity_id)
        return None if row is None else self._to_model(entity_id, row)

    async def find_one(self, filter: dict[str, Any]) -> T | None:
        for row_id, row in self._rows.items():
            if all(row.get(k) == v for k, v in filter.items()):
                return self._to_model(row_id, row)
        return None

    async def update(self, entity_id: str, data: dict[str, Any]) -> None:
        if entity_id in self._rows:
            self._rows[entity_id].update(data, updated_at=datetime.now(timezone.utc))

    async def delete(self, entity_id: str) -> None:
        self._rows.pop(entity_id, None)

    async def upsert(self, filter: dict[str, Any], data: dict[str, Any]) -> None:
        now = datetime.now(timezone.utc)
        for row in self._rows.values():
            if all(row.get(k) == v for k, v in filter.items()):
                row.update(data, updated_at=now)
                return
        await self.insert({**filter, **data, "updated_at": now})


class InMemoryStore(IStore):
    """Store facade over in-memory collections, shared across accessor calls."""

    def __init__(self) -> None:
        self.connected = False
        self.setup_dimensions: int | None = None
        self.vector_stores: dict[str, InMemoryVectorStore] = {}
        self.tables: dict[str, dict[str, dict[str, Any]]] = {}

    async def connect(self) -> None:
        self.connected = True

    async def close(self) -> None:
        self.connected = False

    async def setup(self, dimensions: int) -> None:
        self.setup_dimensions = dimensions

    def get_vector_store(self, name: str) -> InMemoryVectorStore:
        if not self.connected:
            raise StoreNotConnectedError(provider_name="memory")
        return self.vector_stores.setdefault(name, InMemoryVectorStore())

    def get_meta_store(self, name: str, model: type[T]) -> IMetaStore[T]:
        if not self.connected:
            raise StoreNotConnectedError(provider_name="memory")
        return InMemoryMetaStore(self.tables.setdefault(name, {}), model)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def fake_embedder() -> FakeEmbedder:
    return FakeEmbedder()


@pytest.fixture
def memory_store() -> InMemoryStore:
    """A connected in-memory store."""
    store = InMemoryStore()
    store.connected = True
    return store


@pytest.fixture
def sample_vtt() -> str:
    """Three cues: two speakers inside the first window, one after four minutes."""
    return (
        "WEBVTT\n"
        "\n"
        "00:00:01.000 --> 00:00:05.000\n"
        "<v Alice Smith>Welcome everyone to the planning call.</v>\n"
        "\n"
        "00:00:06.500 --> 00:00:10.000\n"
        "<v Bob Jones>Thanks Alice, let's start with the roadmap.</v>\n"
        "\n"
        "00:04:30.000 --> 00:04:35.000\n"
        "<v Alice Smith>Next topic is hiring.</v>\n"
    )


@pytest.fixture
def sample_meeting() -> RawMeetingDetails:
    return RawMeetingDetails(
        id="meeting-1",
        subject="Quarterly Planning",
        start_time="2024-05-02T14:00:00Z",
        end_time="2024-05-02T15:00:00Z",
        attendees=["Alice Smith", "Bob Jones"],
    )


@pytest.fixture
def make_transcript_item(sample_vtt: str, sample_meeting: RawMeetingDetails):
    """Factory for :class:`TranscriptItem` values with distinct ids."""

    def _make(
        transcript_id: str = "t-1",
        vtt: str | None = None,
        subject: str | None = None,
    ) -> TranscriptItem:
        meeting = sample_meeting
        if subject is not None:
            meeting = sample_meeting.model_copy(update={"subject": subject})
        return TranscriptItem(
            transcript=RawTranscript(
                id=transcript_id,
                meeting_id=meeting.id,
                meeting_organizer_id="organizer-1",
            ),
            vtt_content=sample_vtt if vtt is None else vtt,
            meeting=meeting,
        )

    return _make


@pytest.fixture
def sample_distribution_list() -> RawDistributionList:
    return RawDistributionList(
        id="dl-1",
        display_name="Finance Team",
        mail="finance@example.com",
        description="All finance staff",
        members=[
            RawDLMember(id="u-1", display_name="Carol White", mail="carol@example.com",
                        job_title="Controller"),
            RawDLMember(id="u-2", display_name="Dan Brown", mail="dan@example.com"),
        ],
    )
