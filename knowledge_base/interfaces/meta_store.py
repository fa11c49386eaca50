"""Abstract base class for the metadata (non-vector entity) store."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T", bound=BaseModel)


# Concrete implementations: MongoMetaStore, PostgresMetaStore
# Located in: knowledge_base/providers/store/
class IMetaStore(ABC, Generic[T]):
    """CRUD over one collection / table of entities of type *T*.

    Ids are opaque strings at this boundary.  A malformed id (not an
    ObjectId for MongoDB, not an integer for PostgreSQL) is treated as
    "not found": :meth:`find_by_id` returns ``None`` and :meth:`update` /
    :meth:`delete` do nothing.
    """

    @abstractmethod
    async def insert(self, data: dict[str, Any]) -> str:
        """Insert one entity and return its id."""

    @abstractmethod
    async def find_by_id(self, entity_id: str) -> T | None:
        """Return the entity with *entity_id*, or ``None``."""

    @abstractmethod
    async def find_one(self, filter: dict[str, Any]) -> T | None:
        """Return the first entity whose fields equal *filter*, or ``None``."""

    @abstractmethod
    async def update(self, entity_id: str, data: dict[str, Any]) -> None:
        """Set *data* on the entity and stamp ``updated_at`` with the current time."""

    @abstractmethod
    async def delete(self, entity_id: str) -> None:
        """Delete the entity with *entity_id* if it exists."""

    @abstractmethod
    async def upsert(self, filter: dict[str, Any], data: dict[str, Any]) -> None:
        """Update the entity matching *filter* with *data*, or insert it.

        The inserted entity carries both the *filter* fields and *data*;
        ``updated_at`` is stamped in either case.
        """
