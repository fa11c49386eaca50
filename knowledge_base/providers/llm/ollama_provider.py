"""Ollama chat provider adapter.

Ollama exposes an OpenAI-compatible ``/v1`` API, so this adapter reuses
the ``openai.AsyncOpenAI`` client pointed at the local server.
"""

from __future__ import annotations

import httpx
import openai
import structlog

from knowledge_base.config.settings import Settings
from knowledge_base.interfaces.llm_provider import ILLMProvider
from knowledge_base.providers.llm.system_prompt import build_messages
from knowledge_base.utils.errors import LLMError

logger = structlog.get_logger(logger_name=__name__)


class OllamaLLMProvider(ILLMProvider):
    """Chat provider backed by a local Ollama server."""

    def __init__(self, settings: Settings) -> None:
        self._base_url = (settings.chat_base_url or settings.ollama_base_url).rstrip("/")
        self._client = openai.AsyncOpenAI(
            base_url=f"{self._base_url}/v1",
            api_key="ollama",  # Ollama doesn't require a real key
        )
        self._model = settings.chat_model_name
        self._temperature = settings.chat_temperature

    async def invoke(self, question: str, context: str | None = None) -> str:
        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=build_messages(question, context),
                temperature=self._temperature,
            )
        except openai.APIError as exc:
            raise LLMError(
                message=f"Ollama API error: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        content = response.choices[0].message.content
        if content is None:
            raise LLMError(message="Ollama returned empty response", provider_name="ollama")
        logger.info("ollama_completion", model=self._model)
        return content

    def get_provider_name(self) -> str:
        return "ollama"

    def is_available(self) -> bool:
        """Return ``True`` if the Ollama server answers on ``/api/tags``."""
        try:
            response = httpx.get(f"{self._base_url}/api/tags", timeout=3.0)
            return response.status_code == 200
        except (httpx.ConnectError, httpx.TimeoutException):
            return False
