"""MongoDB implementation of the :class:`IStore` facade.

Owns one ``AsyncMongoClient`` for the process and hands out vector and
metadata stores bound to its database.  ``setup`` provisions the Atlas
``vectorSearch`` index (check-then-create) and the unique index that backs
sync-state upserts.
"""

from __future__ import annotations

from typing import Any

import structlog
from pymongo import AsyncMongoClient
from pymongo.asynchronous.database import AsyncDatabase
from pymongo.errors import PyMongoError
from pymongo.operations import SearchIndexModel

from knowledge_base.interfaces.meta_store import IMetaStore, T
from knowledge_base.interfaces.store import IStore
from knowledge_base.interfaces.vector_store import IVectorStore
from knowledge_base.models.search import DATE_FILTER_FIELD, EQUALITY_FILTER_FIELDS
from knowledge_base.providers.store.mongo.mongo_meta_store import MongoMetaStore
from knowledge_base.providers.store.mongo.mongo_vector_store import (
    VECTOR_FIELD,
    VECTOR_INDEX_NAME,
    MongoVectorStore,
)
from knowledge_base.utils.errors import StoreConnectionError, StoreNotConnectedError

logger = structlog.get_logger(logger_name=__name__)

_PROVIDER = "mongo"


def vector_index_definition(dimensions: int) -> dict[str, Any]:
    """Return the Atlas ``vectorSearch`` index definition for *dimensions*."""
    filter_paths = [*EQUALITY_FILTER_FIELDS, DATE_FILTER_FIELD]
    return {
        "fields": [
            {
                "type": "vector",
                "path": VECTOR_FIELD,
                "numDimensions": dimensions,
                "similarity": "cosine",
            },
            *({"type": "filter", "path": f"metadata.{path}"} for path in filter_paths),
        ]
    }


class MongoStore(IStore):
    """Store facade over a MongoDB Atlas deployment."""

    def __init__(
        self,
        uri: str,
        db_name: str,
        knowledge_base_collection: str = "knowledge_base",
        sync_state_collection: str = "sync_state",
    ) -> None:
        self._uri = uri
        self._db_name = db_name
        self._knowledge_base_collection = knowledge_base_collection
        self._sync_state_collection = sync_state_collection
        self._client: AsyncMongoClient | None = None
        self._db: AsyncDatabase | None = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def connect(self) -> None:
        client: AsyncMongoClient = AsyncMongoClient(self._uri, tz_aware=True)
        try:
            await client.admin.command("ping")
        except PyMongoError as exc:
            await client.close()
            raise StoreConnectionError(
                message=f"MongoDB ping failed: {exc}",
                provider_name=_PROVIDER,
            ) from exc

        self._client = client
        self._db = client[self._db_name]
        logger.info("store_connected", backend=_PROVIDER, database=self._db_name)

    async def close(self) -> None:
        if self._client is None:
            return
        await self._client.close()
        self._client = None
        self._db = None
        logger.info("store_closed", backend=_PROVIDER)

    async def setup(self, dimensions: int) -> None:
        db = self._require_db()
        collection = db[self._knowledge_base_collection]

        cursor = await collection.list_search_indexes()
        existing = await cursor.to_list(length=None)
        if any(index.get("name") == VECTOR_INDEX_NAME for index in existing):
            # An index built for another dimension is left as-is.
            logger.info("vector_index_exists", backend=_PROVIDER, index=VECTOR_INDEX_NAME)
        else:
            await collection.create_search_index(
                SearchIndexModel(
                    definition=vector_index_definition(dimensions),
                    name=VECTOR_INDEX_NAME,
                    type="vectorSearch",
                )
            )
            logger.info(
                "vector_index_created",
                backend=_PROVIDER,
                index=VECTOR_INDEX_NAME,
                dimensions=dimensions,
            )

        await db[self._sync_state_collection].create_index("job_name", unique=True)
        logger.info("store_setup_complete", backend=_PROVIDER, dimensions=dimensions)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def get_vector_store(self, name: str) -> IVectorStore:
        return MongoVectorStore(self._require_db()[name], VECTOR_INDEX_NAME)

    def get_meta_store(self, name: str, model: type[T]) -> IMetaStore[T]:
        return MongoMetaStore(self._require_db()[name], model)

    def _require_db(self) -> AsyncDatabase:
        if self._db is None:
            raise StoreNotConnectedError(provider_name=_PROVIDER)
        return self._db
