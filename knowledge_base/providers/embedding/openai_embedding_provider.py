"""OpenAI-compatible embedding provider adapter.

Wraps the ``openai`` async client to implement :class:`IEmbeddingProvider`.
One adapter covers every provider that speaks the OpenAI embeddings API:

* ``OPENAI``   -- api.openai.com
* ``DEEPSEEK`` -- api.deepseek.com unless ``EMBED_BASE_URL`` overrides it
* ``CUSTOM``   -- any endpoint given by ``EMBED_BASE_URL``
* ``AZURE``    -- Azure OpenAI through ``openai.AsyncAzureOpenAI``; the
  model name is the deployment name
"""

from __future__ import annotations

import openai
import structlog

from knowledge_base.config.settings import Settings
from knowledge_base.interfaces.embedding_provider import IEmbeddingProvider
from knowledge_base.utils.errors import ConfigurationError, EmbeddingError

logger = structlog.get_logger(logger_name=__name__)

_OPENAI_BATCH_LIMIT = 2048

# Default base URLs per provider; None means the SDK default.
_DEFAULT_BASE_URLS: dict[str, str | None] = {
    "OPENAI": None,
    "DEEPSEEK": "https://api.deepseek.com",
    "CUSTOM": None,
}


class OpenAIEmbeddingProvider(IEmbeddingProvider):
    """Embedding provider backed by an OpenAI-compatible embeddings API.

    Handles automatic batching for inputs exceeding the per-call limit.
    The ``dimensions`` request parameter is only sent to
    ``text-embedding-3-*`` models, which are the ones that accept it.
    """

    def __init__(self, settings: Settings, provider: str = "OPENAI") -> None:
        self._provider = provider.upper()
        self._dimensions = settings.embed_dimensions

        if self._provider == "AZURE":
            endpoint = settings.azure_openai_endpoint or settings.embed_base_url
            if not endpoint:
                raise ConfigurationError(
                    message="AZURE_OPENAI_ENDPOINT is required for AZURE embeddings",
                    provider_name="azure_embedding",
                )
            self._api_key = settings.azure_openai_api_key or settings.embed_api_key
            self._model = settings.azure_openai_embeddings_deployment or settings.embed_model_name
            self._client: openai.AsyncOpenAI = openai.AsyncAzureOpenAI(
                api_key=self._api_key,
                azure_endpoint=endpoint,
                api_version=settings.azure_openai_api_version,
            )
        else:
            if self._provider not in _DEFAULT_BASE_URLS:
                raise ConfigurationError(
                    message=f"Unsupported embedding provider: {provider}",
                    provider_name="embedding",
                )
            self._api_key = settings.embed_api_key
            self._model = settings.embed_model_name
            base_url = settings.embed_base_url or _DEFAULT_BASE_URLS[self._provider]
            if self._provider == "CUSTOM" and not base_url:
                raise ConfigurationError(
                    message="EMBED_BASE_URL is required for CUSTOM embeddings",
                    provider_name="custom_embedding",
                )
            client_kwargs: dict = {"api_key": self._api_key}
            if base_url:
                client_kwargs["base_url"] = base_url
            self._client = openai.AsyncOpenAI(**client_kwargs)

        self._provider_label = f"{self._provider.lower()}_embedding"

    # ------------------------------------------------------------------
    # IEmbeddingProvider implementation
    # ------------------------------------------------------------------

    async def embed(self, text: str) -> list[float]:
        result = await self.embed_batch([text])
        return result[0]

    async def embed_batch(self, texts: list[str]) -> list[list[float]]:
        """Embed *texts*, splitting into batches of 2048."""
        if not texts:
            return []

        extra: dict = {}
        if self._model.startswith("text-embedding-3"):
            extra["dimensions"] = self._dimensions

        try:
            all_embeddings: list[list[float]] = []
            for start in range(0, len(texts), _OPENAI_BATCH_LIMIT):
                batch = texts[start : start + _OPENAI_BATCH_LIMIT]
                response = await self._client.embeddings.create(
                    input=batch,
                    model=self._model,
                    **extra,
                )
                all_embeddings.extend(item.embedding for item in response.data)
                logger.info(
                    "openai_embedding_batch",
                    model=self._model,
                    provider=self._provider_label,
                    batch_size=len(batch),
                    tokens=response.usage.total_tokens if response.usage else None,
                )
            return all_embeddings
        except openai.APIError as exc:
            raise EmbeddingError(
                message=f"{self._provider_label} API error: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

    @property
    def dimensions(self) -> int:
        return self._dimensions

    def get_provider_name(self) -> str:
        return self._provider_label

    def is_available(self) -> bool:
        """Return ``True`` if an API key is configured."""
        return bool(self._api_key)
