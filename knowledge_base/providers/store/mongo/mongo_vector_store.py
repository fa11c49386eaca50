"""MongoDB Atlas Vector Search implementation of :class:`IVectorStore`.

Operates on pre-computed embeddings; no embedding logic lives here.
Similarity search runs the ``$vectorSearch`` aggregation stage against the
Atlas search index created by :meth:`MongoStore.setup`.  Equality and date
filters are pushed down as the stage's pre-filter; the ``min_score``
threshold is applied afterwards so both backends share one post-filter.
"""

from __future__ import annotations

from typing import Any

import structlog
from pymongo.asynchronous.collection import AsyncCollection

from knowledge_base.interfaces.vector_store import IVectorStore
from knowledge_base.models.document import KnowledgeDocument, VectorRecord
from knowledge_base.models.search import (
    DATE_FILTER_FIELD,
    SearchFilters,
    SearchOptions,
    SearchResult,
)

logger = structlog.get_logger(logger_name=__name__)

VECTOR_INDEX_NAME = "knowledge_base_vector_index"
VECTOR_FIELD = "embedding"

# Candidates fetched per requested result before the min_score post-filter.
_OVERSAMPLE_FACTOR = 10
# Atlas caps numCandidates at 10 000.
_MAX_NUM_CANDIDATES = 10_000


def build_search_filter(filters: SearchFilters | None) -> dict[str, Any]:
    """Translate *filters* into a ``$vectorSearch`` pre-filter document."""
    if filters is None:
        return {}
    query: dict[str, Any] = {
        f"metadata.{field}": {"$eq": value}
        for field, value in filters.equality_fields().items()
    }
    date_range: dict[str, str] = {}
    if filters.date_from:
        date_range["$gte"] = filters.date_from
    if filters.date_to:
        date_range["$lte"] = filters.date_to
    if date_range:
        query[f"metadata.{DATE_FILTER_FIELD}"] = date_range
    return query


def build_delete_filter(filters: SearchFilters) -> dict[str, Any]:
    """Translate the equality fields of *filters* into a ``delete_many`` query."""
    return {f"metadata.{field}": value for field, value in filters.equality_fields().items()}


class MongoVectorStore(IVectorStore):
    """Vector store over one Atlas collection with a ``vectorSearch`` index."""

    def __init__(
        self,
        collection: AsyncCollection,
        index_name: str = VECTOR_INDEX_NAME,
    ) -> None:
        self._collection = collection
        self._index_name = index_name

    async def insert(self, records: list[VectorRecord]) -> list[str]:
        if not records:
            return []

        result = await self._collection.insert_many([record.model_dump() for record in records])
        ids = [str(inserted_id) for inserted_id in result.inserted_ids]
        logger.info("vector_documents_inserted", backend="mongo", count=len(ids))
        return ids

    async def search(
        self, embedding: list[float], options: SearchOptions
    ) -> list[SearchResult]:
        candidates = options.limit * _OVERSAMPLE_FACTOR
        stage: dict[str, Any] = {
            "index": self._index_name,
            "path": VECTOR_FIELD,
            "queryVector": embedding,
            "numCandidates": min(candidates * _OVERSAMPLE_FACTOR, _MAX_NUM_CANDIDATES),
            "limit": candidates,
        }
        pre_filter = build_search_filter(options.filter)
        if pre_filter:
            stage["filter"] = pre_filter

        pipeline: list[dict[str, Any]] = [
            {"$vectorSearch": stage},
            {
                "$project": {
                    "_id": 0,
                    "content": 1,
                    "metadata": 1,
                    "score": {"$meta": "vectorSearchScore"},
                }
            },
        ]

        cursor = await self._collection.aggregate(pipeline)
        rows = await cursor.to_list(length=None)

        results: list[SearchResult] = []
        for row in rows:
            # vectorSearchScore for cosine is (1 + cos) / 2, already in [0, 1].
            score = min(max(float(row["score"]), 0.0), 1.0)
            if score < options.min_score:
                continue
            document = KnowledgeDocument.model_validate(
                {"content": row["content"], "metadata": row["metadata"]}
            )
            results.append(SearchResult(document=document, score=score))

        results.sort(key=lambda r: r.score, reverse=True)
        results = results[: options.limit]
        logger.info(
            "vector_search_completed",
            backend="mongo",
            candidates=len(rows),
            returned=len(results),
            min_score=options.min_score,
        )
        return results

    async def delete(self, filters: SearchFilters) -> int:
        query = build_delete_filter(filters)
        if not query:
            logger.warning("vector_delete_skipped_empty_filter", backend="mongo")
            return 0

        result = await self._collection.delete_many(query)
        logger.info("vector_documents_deleted", backend="mongo", count=result.deleted_count, filter=query)
        return result.deleted_count
