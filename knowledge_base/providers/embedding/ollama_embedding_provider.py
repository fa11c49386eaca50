"""Ollama embedding provider adapter (local, no API key).

Talks to the OpenAI-compatible ``/v1`` endpoint that Ollama exposes, so the
same ``openai`` client is reused with a different base URL.
"""

from __future__ import annotations

import httpx
import openai
import structlog

from knowledge_base.config.settings import Settings
from knowledge_base.interfaces.embedding_provider import IEmbeddingProvider
from knowledge_base.utils.errors import EmbeddingError

logger = structlog.get_logger(logger_name=__name__)

_OLLAMA_BATCH_LIMIT = 512


class OllamaEmbeddingProvider(IEmbeddingProvider):
    """Embedding provider backed by a model served by Ollama.

    ``EMBED_MODEL_NAME`` selects the model (e.g. ``nomic-embed-text``) and
    ``EMBED_DIMENSIONS`` must match its output size.
    """

    def __init__(self, settings: Settings) -> None:
        self._base_url = (settings.embed_base_url or settings.ollama_base_url).rstrip("/")
        self._client = openai.AsyncOpenAI(
            base_url=f"{self._base_url}/v1",
            api_key="ollama",  # Ollama doesn't require a real key
        )
        self._model = settings.embed_model_name
        self._dimensions = settings.embed_dimensions

    async def embed(self, text: str) -> list[float]:
        result = await self.embed_batch([text])
        return result[0]

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """Embed *texts*, splitting into batches of 512 for the Ollama backend."""
        if not texts:
            return []

        try:
            all_embeddings: list[list[float]] = []
            for start in range(0, len(texts), _OLLAMA_BATCH_LIMIT):
                batch = texts[start : start + _OLLAMA_BATCH_LIMIT]
                response = await self._client.embeddings.create(input=batch, model=self._model)
                all_embeddings.extend(item.embedding for item in response.data)
                logger.info("ollama_embedding_batch", model=self._model, batch_size=len(batch))
            return all_embeddings
        except openai.APIError as exc:
            raise EmbeddingError(
                message=f"Ollama embedding API error: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

    @property
    def dimensions(self) -> int:
        return self._dimensions

    def get_provider_name(self) -> str:
        return "ollama_embedding"

    def is_available(self) -> bool:
        """Return ``True`` if the Ollama server is reachable."""
        if not self._base_url:
            return False
        try:
            response = httpx.get(f"{self._base_url}/api/tags", timeout=3.0)
            return response.status_code == 200
        except (httpx.ConnectError, httpx.TimeoutException):
            return False
