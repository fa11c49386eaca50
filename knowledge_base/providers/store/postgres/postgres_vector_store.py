"""PostgreSQL + pgvector implementation of :class:`IVectorStore`.

Similarity is ``1 - cosine distance`` (the ``<=>`` operator), clamped to
``[0, 1]``.  Inserts run row by row inside one transaction so a failure
rolls back the whole batch; the dimension of each vector is checked by the
``VECTOR(n)`` column type and the driver error propagates unchanged.
"""

from __future__ import annotations

import asyncpg
import structlog

from knowledge_base.interfaces.vector_store import IVectorStore
from knowledge_base.models.document import KnowledgeDocument, VectorRecord
from knowledge_base.models.search import SearchFilters, SearchOptions, SearchResult
from knowledge_base.providers.store.postgres.queries import (
    build_metadata_where,
    parse_row_count,
    validate_identifier,
)

logger = structlog.get_logger(logger_name=__name__)

_OVERSAMPLE_FACTOR = 10


class PostgresVectorStore(IVectorStore):
    """Vector store over one pgvector table with an HNSW cosine index."""

    def __init__(self, pool: asyncpg.Pool, table: str) -> None:
        self._pool = pool
        self._table = validate_identifier(table)

    async def insert(self, records: list[VectorRecord]) -> list[str]:
        if not records:
            return []

        sql = (
            f"INSERT INTO {self._table} (content, embedding, metadata) "
            "VALUES ($1, $2, $3) RETURNING id"
        )
        ids: list[str] = []
        async with self._pool.acquire() as conn:
            async with conn.transaction():
                for record in records:
                    row_id = await conn.fetchval(
                        sql, record.content, record.embedding, record.metadata
                    )
                    ids.append(str(row_id))

        logger.info("vector_documents_inserted", backend="postgres", count=len(ids))
        return ids

    async def search(
        self, embedding: list[float], options: SearchOptions
    ) -> list[SearchResult]:
        where, params = build_metadata_where(options.filter, start_index=2)
        candidates = options.limit * _OVERSAMPLE_FACTOR
        sql = (
            f"SELECT content, metadata, 1 - (embedding <=> $1) AS score "
            f"FROM {self._table} "
            f"{f'WHERE {where} ' if where else ''}"
            f"ORDER BY embedding <=> $1 "
            f"LIMIT ${len(params) + 2}"
        )

        rows = await self._pool.fetch(sql, embedding, *params, candidates)

        results: list[SearchResult] = []
        for row in rows:
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
            backend="postgres",
            candidates=len(rows),
            returned=len(results),
            min_score=options.min_score,
        )
        return results

    async def delete(self, filters: SearchFilters) -> int:
        where, params = build_metadata_where(filters, include_dates=False)
        if not where:
            logger.warning("vector_delete_skipped_empty_filter", backend="postgres")
            return 0

        status = await self._pool.execute(f"DELETE FROM {self._table} WHERE {where}", *params)
        count = parse_row_count(status)
        logger.info("vector_documents_deleted", backend="postgres", count=count)
        return count
