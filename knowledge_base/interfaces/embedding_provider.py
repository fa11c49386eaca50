"""Abstract base class for text-embedding service providers.

Defines the contract for generating embedding vectors from text.
Implementations wrap OpenAI-compatible embeddings APIs (OpenAI, Azure
OpenAI, DeepSeek, custom base URLs) or a local Ollama server.  The
Document Service only ever talks to this interface.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


# Concrete implementations:
#   OpenAIEmbeddingProvider  : OpenAI / Azure / DeepSeek / custom base URL
#   OllamaEmbeddingProvider  : local models served by Ollama
# Located in: knowledge_base/providers/embedding/
class IEmbeddingProvider(ABC):
    """Contract for embedding services used by ingestion and retrieval.

    Every vector produced by one provider instance has the same length,
    :attr:`dimensions`, which must match the dimension the store schema
    was set up with.
    """

    @abstractmethod
    async def embed(self, text: str) -> list[float]:
        """Generate an embedding vector for a single text (e.g. a query).

        Raises
        ------
        knowledge_base.utils.errors.EmbeddingError
            If the embedding API call fails.
        """

    @abstractmethod
    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """Generate embedding vectors for a batch of texts.

        Parameters
        ----------
        texts:
            Texts to embed.  Implementations split the input into
            provider-sized batches internally.

        Returns
        -------
        list[list[float]]
            Vectors positionally aligned with *texts*.

        Raises
        ------
        knowledge_base.utils.errors.EmbeddingError
            If any batch fails.
        """

    @property
    @abstractmethod
    def dimensions(self) -> int:
        """Length of every vector this provider returns."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier, e.g. ``"openai_embedding"``."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if the provider is configured and reachable."""
