"""PostgreSQL + pgvector implementation of the :class:`IStore` facade.

Owns one ``asyncpg`` pool for the process.  Every pooled connection is
initialised with the pgvector codec (``list[float]`` <-> ``vector``) and a
JSONB codec (``dict`` <-> ``jsonb``), so the stores pass plain Python
values.  The codec registration needs the ``vector`` type: ``connect``
fails with :class:`StoreConnectionError` on a database where the extension
has never been created.
"""

from __future__ import annotations

import json

import asyncpg
import structlog
from pgvector.asyncpg import register_vector

from knowledge_base.interfaces.meta_store import IMetaStore, T
from knowledge_base.interfaces.store import IStore
from knowledge_base.interfaces.vector_store import IVectorStore
from knowledge_base.providers.store.postgres.postgres_meta_store import PostgresMetaStore
from knowledge_base.providers.store.postgres.postgres_vector_store import PostgresVectorStore
from knowledge_base.providers.store.postgres.queries import validate_identifier
from knowledge_base.utils.errors import StoreConnectionError, StoreNotConnectedError

logger = structlog.get_logger(logger_name=__name__)

_PROVIDER = "postgres"


async def _init_connection(conn: asyncpg.Connection) -> None:
    await register_vector(conn)
    await conn.set_type_codec(
        "jsonb",
        encoder=json.dumps,
        decoder=json.loads,
        schema="pg_catalog",
    )


def schema_statements(
    dimensions: int,
    knowledge_base_table: str,
    files_table: str,
    sync_state_table: str,
) -> list[str]:
    """Return the idempotent DDL run by :meth:`PostgresStore.setup`, in order."""
    kb = validate_identifier(knowledge_base_table)
    files = validate_identifier(files_table)
    sync = validate_identifier(sync_state_table)
    statements = [
        "CREATE EXTENSION IF NOT EXISTS vector",
        f"""\
CREATE TABLE IF NOT EXISTS {kb} (
    id          BIGSERIAL PRIMARY KEY,
    content     TEXT        NOT NULL,
    embedding   VECTOR({int(dimensions)}) NOT NULL,
    metadata    JSONB       NOT NULL DEFAULT '{{}}'::jsonb,
    created_at  TIMESTAMPTZ NOT NULL DEFAULT NOW()
)""",
    ]
    for field in ("source_type", "meeting_date", "meeting_subject", "dl_name"):
        statements.append(
            f"CREATE INDEX IF NOT EXISTS idx_{kb}_{field} ON {kb} ((metadata->>'{field}'))"
        )
    statements += [
        f"""\
CREATE INDEX IF NOT EXISTS idx_{kb}_embedding_hnsw
    ON {kb} USING hnsw (embedding vector_cosine_ops)
    WITH (m = 16, ef_construction = 64)""",
        f"""\
CREATE TABLE IF NOT EXISTS {files} (
    id            BIGSERIAL PRIMARY KEY,
    filename      TEXT        NOT NULL,
    original_url  TEXT,
    source        TEXT        NOT NULL CHECK (source IN ('upload', 'url')),
    status        TEXT        NOT NULL DEFAULT 'pending'
                  CHECK (status IN ('pending', 'processing', 'completed', 'failed')),
    error         TEXT,
    chunks_count  INTEGER,
    created_at    TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    updated_at    TIMESTAMPTZ NOT NULL DEFAULT NOW()
)""",
        f"""\
CREATE TABLE IF NOT EXISTS {sync} (
    job_name      TEXT        PRIMARY KEY,
    last_success  TIMESTAMPTZ NOT NULL,
    updated_at    TIMESTAMPTZ NOT NULL DEFAULT NOW()
)""",
    ]
    return statements


class PostgresStore(IStore):
    """Store facade over a PostgreSQL database with the pgvector extension."""

    def __init__(
        self,
        dsn: str,
        min_size: int = 1,
        max_size: int = 10,
        knowledge_base_table: str = "knowledge_base",
        files_table: str = "files",
        sync_state_table: str = "sync_state",
    ) -> None:
        self._dsn = dsn
        self._min_size = min_size
        self._max_size = max_size
        self._knowledge_base_table = validate_identifier(knowledge_base_table)
        self._files_table = validate_identifier(files_table)
        self._sync_state_table = validate_identifier(sync_state_table)
        # Tables keyed by a natural key instead of the BIGSERIAL id.
        self._primary_keys = {self._sync_state_table: "job_name"}
        self._pool: asyncpg.Pool | None = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def connect(self) -> None:
        try:
            self._pool = await asyncpg.create_pool(
                dsn=self._dsn,
                min_size=self._min_size,
                max_size=self._max_size,
                init=_init_connection,
            )
        except (OSError, asyncpg.PostgresError, asyncpg.InterfaceError, ValueError) as exc:
            raise StoreConnectionError(
                message=f"PostgreSQL connection failed: {exc}",
                provider_name=_PROVIDER,
            ) from exc
        logger.info("store_connected", backend=_PROVIDER)

    async def close(self) -> None:
        if self._pool is None:
            return
        await self._pool.close()
        self._pool = None
        logger.info("store_closed", backend=_PROVIDER)

    async def setup(self, dimensions: int) -> None:
        pool = self._require_pool()
        async with pool.acquire() as conn:
            for statement in schema_statements(
                dimensions,
                self._knowledge_base_table,
                self._files_table,
                self._sync_state_table,
            ):
                await conn.execute(statement)
        logger.info("store_setup_complete", backend=_PROVIDER, dimensions=dimensions)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def get_vector_store(self, name: str) -> IVectorStore:
        return PostgresVectorStore(self._require_pool(), name)

    def get_meta_store(self, name: str, model: type[T]) -> IMetaStore[T]:
        return PostgresMetaStore(
            self._require_pool(),
            name,
            model,
            primary_key=self._primary_keys.get(name, "id"),
        )

    def _require_pool(self) -> asyncpg.Pool:
        if self._pool is None:
            raise StoreNotConnectedError(provider_name=_PROVIDER)
        return self._pool
