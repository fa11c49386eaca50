"""MongoDB implementation of :class:`IMetaStore`.

Generic CRUD on one collection; used for file records, sync state and any
other non-vector entity.  ``_id`` values are ObjectIds in the database and
strings at the interface boundary.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from bson import ObjectId
from bson.errors import InvalidId
from pymongo.asynchronous.collection import AsyncCollection

from knowledge_base.interfaces.meta_store import IMetaStore, T


def _object_id(entity_id: str) -> ObjectId | None:
    try:
        return ObjectId(entity_id)
    except (InvalidId, TypeError):
        return None


class MongoMetaStore(IMetaStore[T]):
    """Metadata store over a single MongoDB collection."""

    def __init__(self, collection: AsyncCollection, model: type[T]) -> None:
        self._collection = collection
        self._model = model

    async def insert(self, data: dict[str, Any]) -> str:
        result = await self._collection.insert_one(dict(data))
        return str(result.inserted_id)

    async def find_by_id(self, entity_id: str) -> T | None:
        oid = _object_id(entity_id)
        if oid is None:
            return None
        doc = await self._collection.find_one({"_id": oid})
        return self._to_model(doc)

    async def find_one(self, filter: dict[str, Any]) -> T | None:
        doc = await self._collection.find_one(filter)
        return self._to_model(doc)

    async def update(self, entity_id: str, data: dict[str, Any]) -> None:
        oid = _object_id(entity_id)
        if oid is None:
            return
        await self._collection.update_one(
            {"_id": oid},
            {"$set": {**data, "updated_at": datetime.now(timezone.utc)}},
        )

    async def delete(self, entity_id: str) -> None:
        oid = _object_id(entity_id)
        if oid is None:
            return
        await self._collection.delete_one({"_id": oid})

    async def upsert(self, filter: dict[str, Any], data: dict[str, Any]) -> None:
        await self._collection.update_one(
            filter,
            {"$set": {**data, "updated_at": datetime.now(timezone.utc)}},
            upsert=True,
        )

    def _to_model(self, doc: dict[str, Any] | None) -> T | None:
        if doc is None:
            return None
        data = dict(doc)
        data["id"] = str(data.pop("_id"))
        return self._model.model_validate(data)
