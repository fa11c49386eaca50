"""Abstract base class for the store facade.

The facade owns the backend connection (Mongo client or asyncpg pool) and
hands out vector / metadata stores bound to it.  The concrete facade is
chosen once, at startup, by :func:`knowledge_base.providers.store.build_store`.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from knowledge_base.interfaces.meta_store import IMetaStore, T
from knowledge_base.interfaces.vector_store import IVectorStore


# Concrete implementations: MongoStore, PostgresStore
# Located in: knowledge_base/providers/store/
class IStore(ABC):
    """Lifecycle and accessors for one storage backend.

    Accessors raise :class:`~knowledge_base.utils.errors.StoreNotConnectedError`
    until :meth:`connect` has completed.
    """

    @abstractmethod
    async def connect(self) -> None:
        """Open the connection and verify the backend is reachable.

        Raises
        ------
        knowledge_base.utils.errors.StoreConnectionError
            If the backend cannot be reached.
        """

    @abstractmethod
    async def close(self) -> None:
        """Release the connection.  Calling it twice is harmless."""

    @abstractmethod
    async def setup(self, dimensions: int) -> None:
        """Create indexes / tables that do not exist yet.

        Idempotent: existing objects are left untouched, including a vector
        index created earlier with a different dimension.
        """

    @abstractmethod
    def get_vector_store(self, name: str) -> IVectorStore:
        """Return the vector store for collection / table *name*."""

    @abstractmethod
    def get_meta_store(self, name: str, model: type[T]) -> IMetaStore[T]:
        """Return a metadata store for *name* whose rows validate as *model*."""
