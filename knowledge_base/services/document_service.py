"""High-level API over the knowledge-base vector store.

Composes the embedding provider with the vector store: documents are
embedded in one batch and inserted; queries are embedded and searched.
Provider errors are not caught here; they reach the caller unchanged.
"""

from __future__ import annotations

import structlog

from knowledge_base.interfaces.embedding_provider import IEmbeddingProvider
from knowledge_base.interfaces.store import IStore
from knowledge_base.interfaces.vector_store import IVectorStore
from knowledge_base.models.document import KnowledgeDocument, VectorRecord
from knowledge_base.models.search import SearchFilters, SearchOptions, SearchResult

logger = structlog.get_logger(logger_name=__name__)


class DocumentService:
    """Embed-and-store, search and delete for knowledge documents.

    Parameters
    ----------
    store:
        Connected (or soon to be connected) store facade.
    embedder:
        Embedding provider whose dimension matches the store schema.
    collection:
        Name of the knowledge-base collection / table.
    """

    def __init__(
        self,
        store: IStore,
        embedder: IEmbeddingProvider,
        collection: str = "knowledge_base",
    ) -> None:
        self._store = store
        self._embedder = embedder
        self._collection = collection

    @property
    def vectors(self) -> IVectorStore:
        return self._store.get_vector_store(self._collection)

    async def add(self, documents: list[KnowledgeDocument]) -> list[str]:
        """Embed *documents* and insert them; returns ids in input order."""
        if not documents:
            return []

        embeddings = await self._embedder.embed_batch([doc.content for doc in documents])
        records = [
            VectorRecord(
                content=doc.content,
                embedding=embedding,
                metadata=doc.metadata.model_dump(mode="json"),
            )
            for doc, embedding in zip(documents, embeddings, strict=True)
        ]
        ids = await self.vectors.insert(records)
        logger.info("documents_added", count=len(ids))
        return ids

    async def search(self, query: str, options: SearchOptions) -> list[SearchResult]:
        """Embed *query* and return the most similar documents."""
        logger.info(
            "documents_search",
            query=query[:200],
            limit=options.limit,
            min_score=options.min_score,
        )
        embedding = await self._embedder.embed(query)
        return await self.vectors.search(embedding, options)

    async def delete(self, filters: SearchFilters) -> int:
        """Delete documents matching the equality fields of *filters*."""
        return await self.vectors.delete(filters)
