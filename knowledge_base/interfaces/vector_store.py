"""Abstract base class for the vector store.

One implementation per backend: MongoDB Atlas ``$vectorSearch`` and
PostgreSQL + pgvector.  Both must behave identically for insert, filtered
similarity search and filtered delete, so callers never branch on the
backend type.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from knowledge_base.models.document import VectorRecord
from knowledge_base.models.search import SearchFilters, SearchOptions, SearchResult


# Concrete implementations: MongoVectorStore, PostgresVectorStore
# Located in: knowledge_base/providers/store/
class IVectorStore(ABC):
    """Contract for storing and querying embedded knowledge documents.

    **Filter semantics** (see :class:`~knowledge_base.models.search.SearchFilters`):

    * Equality fields (``source_type``, ``meeting_subject``, ``dl_name``,
      ``pdf_filename``) match nested metadata fields exactly.
    * ``date_from`` / ``date_to`` bound ``metadata.meeting_date``
      inclusively; search honours them, delete does not.
    """

    @abstractmethod
    async def insert(self, records: list[VectorRecord]) -> list[str]:
        """Persist *records* and return their ids in input order.

        An empty input performs no backend call and returns ``[]``.
        """

    @abstractmethod
    async def search(
        self, embedding: list[float], options: SearchOptions
    ) -> list[SearchResult]:
        """Return the most similar documents for *embedding*.

        Parameters
        ----------
        embedding:
            Query vector of the configured dimension.
        options:
            ``limit`` caps the result count, ``min_score`` drops results
            below the threshold, ``filter`` restricts by metadata.

        Returns
        -------
        list[SearchResult]
            At most ``options.limit`` results, every score within
            ``[min_score, 1]``, sorted by score descending.
        """

    @abstractmethod
    async def delete(self, filters: SearchFilters) -> int:
        """Delete documents matching the equality fields of *filters*.

        Returns the number of deleted documents.  A filter with no equality
        field set deletes nothing and returns ``0``.
        """
