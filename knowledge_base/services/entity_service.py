"""Generic CRUD delegate over one metadata-store collection.

Entity services subclass :class:`EntityService` and add only their domain
methods.  The metadata store is resolved from the store facade on every
call, so a service can be constructed before the store is connected.
"""

from __future__ import annotations

from typing import Any, Generic

from knowledge_base.interfaces.meta_store import IMetaStore, T
from knowledge_base.interfaces.store import IStore


class EntityService(Generic[T]):
    """CRUD over the *collection* metadata store, typed as *model*."""

    def __init__(self, store: IStore, collection: str, model: type[T]) -> None:
        self._store = store
        self._collection = collection
        self._model = model

    @property
    def meta(self) -> IMetaStore[T]:
        return self._store.get_meta_store(self._collection, self._model)

    async def insert(self, data: dict[str, Any]) -> str:
        return await self.meta.insert(data)

    async def find_by_id(self, entity_id: str) -> T | None:
        return await self.meta.find_by_id(entity_id)

    async def find_one(self, filter: dict[str, Any]) -> T | None:
        return await self.meta.find_one(filter)

    async def update(self, entity_id: str, data: dict[str, Any]) -> None:
        await self.meta.update(entity_id, data)

    async def delete(self, entity_id: str) -> None:
        await self.meta.delete(entity_id)

    async def upsert(self, filter: dict[str, Any], data: dict[str, Any]) -> None:
        await self.meta.upsert(filter, data)
