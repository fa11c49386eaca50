"""Unit tests for embedding provider adapters -- OpenAI-compatible, Ollama."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import openai
import pytest

from knowledge_base.config.settings import Settings
from knowledge_base.utils.errors import ConfigurationError, EmbeddingError

_OPENAI_MODULE = "knowledge_base.providers.embedding.openai_embedding_provider.openai"


def _settings(**overrides) -> Settings:
    defaults = {
        "embed_provider": "OPENAI",
        "embed_api_key": "sk-test",
        "embed_model_name": "text-embedding-3-small",
        "embed_base_url": "",
        "embed_dimensions": 4,
        "ollama_base_url": "http://localhost:11434",
    }
    defaults.update(overrides)
    return Settings(**defaults)


def _response(vectors: list[list[float]]) -> MagicMock:
    response = MagicMock()
    response.data = [MagicMock(embedding=v) for v in vectors]
    response.usage = MagicMock(total_tokens=10)
    return response


# ======================================================================
# OpenAI-compatible provider
# ======================================================================


class TestOpenAIEmbeddingProvider:
    def test_provider_name_and_dimensions(self) -> None:
        from knowledge_base.providers.embedding.openai_embedding_provider import (
            OpenAIEmbeddingProvider,
        )

        provider = OpenAIEmbeddingProvider(_settings())
        assert provider.get_provider_name() == "openai_embedding"
        assert provider.dimensions == 4
        assert provider.is_available() is True

    def test_unavailable_without_key(self) -> None:
        from knowledge_base.providers.embedding.openai_embedding_provider import (
            OpenAIEmbeddingProvider,
        )

        assert OpenAIEmbeddingProvider(_settings(embed_api_key="")).is_available() is False

    def test_deepseek_default_base_url(self) -> None:
        from knowledge_base.providers.embedding.openai_embedding_provider import (
            OpenAIEmbeddingProvider,
        )

        with patch(f"{_OPENAI_MODULE}.AsyncOpenAI") as client_cls:
            OpenAIEmbeddingProvider(_settings(), provider="DEEPSEEK")
        assert client_cls.call_args.kwargs["base_url"] == "https://api.deepseek.com"

    def test_custom_requires_base_url(self) -> None:
        from knowledge_base.providers.embedding.openai_embedding_provider import (
            OpenAIEmbeddingProvider,
        )

        with pytest.raises(ConfigurationError):
            OpenAIEmbeddingProvider(_settings(), provider="CUSTOM")

    def test_azure_uses_azure_client(self) -> None:
        from knowledge_base.providers.embedding.openai_embedding_provider import (
            OpenAIEmbeddingProvider,
        )

        settings = _settings(
            azure_openai_api_key="azure-key",
            azure_openai_endpoint="https://example.openai.azure.com",
            azure_openai_embeddings_deployment="embed-deploy",
        )
        with patch(f"{_OPENAI_MODULE}.AsyncAzureOpenAI") as azure_cls:
            provider = OpenAIEmbeddingProvider(settings, provider="AZURE")

        kwargs = azure_cls.call_args.kwargs
        assert kwargs["azure_endpoint"] == "https://example.openai.azure.com"
        assert kwargs["api_key"] == "azure-key"
        assert provider.get_provider_name() == "azure_embedding"

    @pytest.mark.asyncio
    async def test_embed_batch_sends_dimensions_for_v3_models(self) -> None:
        from knowledge_base.providers.embedding.openai_embedding_provider import (
            OpenAIEmbeddingProvider,
        )

        client = MagicMock()
        client.embeddings.create = AsyncMock(return_value=_response([[0.1] * 4, [0.2] * 4]))
        with patch(f"{_OPENAI_MODULE}.AsyncOpenAI", return_value=client):
            provider = OpenAIEmbeddingProvider(_settings())
            result = await provider.embed_batch(["a", "b"])

        assert result == [[0.1] * 4, [0.2] * 4]
        kwargs = client.embeddings.create.call_args.kwargs
        assert kwargs["input"] == ["a", "b"]
        assert kwargs["model"] == "text-embedding-3-small"
        assert kwargs["dimensions"] == 4

    @pytest.mark.asyncio
    async def test_no_dimensions_param_for_older_models(self) -> None:
        from knowledge_base.providers.embedding.openai_embedding_provider import (
            OpenAIEmbeddingProvider,
        )

        client = MagicMock()
        client.embeddings.create = AsyncMock(return_value=_response([[0.1] * 4]))
        with patch(f"{_OPENAI_MODULE}.AsyncOpenAI", return_value=client):
            provider = OpenAIEmbeddingProvider(_settings(embed_model_name="text-embedding-ada-002"))
            await provider.embed("a")

        assert "dimensions" not in client.embeddings.create.call_args.kwargs

    @pytest.mark.asyncio
    async def test_batches_of_2048(self) -> None:
        from knowledge_base.providers.embedding.openai_embedding_provider import (
            OpenAIEmbeddingProvider,
        )

        client = MagicMock()
        client.embeddings.create = AsyncMock(
            side_effect=lambda input, **_: _response([[0.0] * 4 for _ in input])
        )
        with patch(f"{_OPENAI_MODULE}.AsyncOpenAI", return_value=client):
            provider = OpenAIEmbeddingProvider(_settings())
            result = await provider.embed_batch([f"t{i}" for i in range(5000)])

        assert len(result) == 5000
        sizes = [len(c.kwargs["input"]) for c in client.embeddings.create.call_args_list]
        assert sizes == [2048, 2048, 904]

    @pytest.mark.asyncio
    async def test_empty_batch_makes_no_call(self) -> None:
        from knowledge_base.providers.embedding.openai_embedding_provider import (
            OpenAIEmbeddingProvider,
        )

        client = MagicMock()
        client.embeddings.create = AsyncMock()
        with patch(f"{_OPENAI_MODULE}.AsyncOpenAI", return_value=client):
            assert await OpenAIEmbeddingProvider(_settings()).embed_batch([]) == []
        client.embeddings.create.assert_not_called()

    @pytest.mark.asyncio
    async def test_api_error_wrapped(self) -> None:
        from knowledge_base.providers.embedding.openai_embedding_provider import (
            OpenAIEmbeddingProvider,
        )

        request = httpx.Request("POST", "https://api.openai.com/v1/embeddings")
        client = MagicMock()
        client.embeddings.create = AsyncMock(
            side_effect=openai.APIConnectionError(request=request)
        )
        with patch(f"{_OPENAI_MODULE}.AsyncOpenAI", return_value=client):
            provider = OpenAIEmbeddingProvider(_settings())
            with pytest.raises(EmbeddingError):
                await provider.embed("a")


# ======================================================================
# Ollama provider
# ======================================================================


class TestOllamaEmbeddingProvider:
    def test_points_client_at_v1(self) -> None:
        from knowledge_base.providers.embedding.ollama_embedding_provider import (
            OllamaEmbeddingProvider,
        )

        with patch(
            "knowledge_base.providers.embedding.ollama_embedding_provider.openai.AsyncOpenAI"
        ) as client_cls:
            provider = OllamaEmbeddingProvider(_settings(embed_provider="OLLAMA"))

        assert client_cls.call_args.kwargs["base_url"] == "http://localhost:11434/v1"
        assert provider.get_provider_name() == "ollama_embedding"

    @pytest.mark.asyncio
    async def test_batches_of_512(self) -> None:
        from knowledge_base.providers.embedding.ollama_embedding_provider import (
            OllamaEmbeddingProvider,
        )

        client = MagicMock()
        client.embeddings.create = AsyncMock(
            side_effect=lambda input, **_: _response([[0.0] * 4 for _ in input])
        )
        with patch(
            "knowledge_base.providers.embedding.ollama_embedding_provider.openai.AsyncOpenAI",
            return_value=client,
        ):
            provider = OllamaEmbeddingProvider(_settings(embed_provider="OLLAMA"))
            result = await provider.embed_batch([str(i) for i in range(1000)])

        assert len(result) == 1000
        sizes = [len(c.kwargs["input"]) for c in client.embeddings.create.call_args_list]
        assert sizes == [512, 488]

    def test_is_available_unreachable(self) -> None:
        from knowledge_base.providers.embedding.ollama_embedding_provider import (
            OllamaEmbeddingProvider,
        )

        provider = OllamaEmbeddingProvider(_settings(embed_provider="OLLAMA"))
        with patch(
            "knowledge_base.providers.embedding.ollama_embedding_provider.httpx.get",
            side_effect=httpx.ConnectError("refused"),
        ):
            assert provider.is_available() is False
