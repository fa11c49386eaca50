"""PostgreSQL + pgvector backend: store facade, vector store and metadata store."""

from knowledge_base.providers.store.postgres.postgres_meta_store import PostgresMetaStore
from knowledge_base.providers.store.postgres.postgres_store import PostgresStore
from knowledge_base.providers.store.postgres.postgres_vector_store import PostgresVectorStore

__all__ = ["PostgresMetaStore", "PostgresStore", "PostgresVectorStore"]
