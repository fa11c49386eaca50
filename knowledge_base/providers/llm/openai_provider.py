"""OpenAI-compatible chat provider adapter.

Wraps the ``openai`` async client to implement :class:`ILLMProvider`.  The
same adapter serves ``OPENAI``, ``DEEPSEEK`` (default base URL
api.deepseek.com), ``CUSTOM`` (``CHAT_BASE_URL`` required) and ``AZURE``
(through ``openai.AsyncAzureOpenAI`` with the chat deployment as model).
"""

from __future__ import annotations

import openai
import structlog

from knowledge_base.config.settings import Settings
from knowledge_base.interfaces.llm_provider import ILLMProvider
from knowledge_base.providers.llm.system_prompt import build_messages
from knowledge_base.utils.errors import ConfigurationError, LLMError

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_BASE_URLS: dict[str, str | None] = {
    "OPENAI": None,
    "DEEPSEEK": "https://api.deepseek.com",
    "CUSTOM": None,
}


class OpenAILLMProvider(ILLMProvider):
    """Chat provider backed by an OpenAI-compatible chat completions API."""

    def __init__(self, settings: Settings, provider: str = "OPENAI") -> None:
        self._provider = provider.upper()
        self._temperature = settings.chat_temperature

        if self._provider == "AZURE":
            endpoint = settings.azure_openai_endpoint or settings.chat_base_url
            if not endpoint:
                raise ConfigurationError(
                    message="AZURE_OPENAI_ENDPOINT is required for AZURE chat",
                    provider_name="azure",
                )
            self._api_key = settings.azure_openai_api_key or settings.chat_api_key
            self._model = settings.azure_openai_chat_deployment or settings.chat_model_name
            self._client: openai.AsyncOpenAI = openai.AsyncAzureOpenAI(
                api_key=self._api_key,
                azure_endpoint=endpoint,
                api_version=settings.azure_openai_api_version,
            )
        else:
            if self._provider not in _DEFAULT_BASE_URLS:
                raise ConfigurationError(
                    message=f"Unsupported chat provider: {provider}",
                    provider_name="chat",
                )
            base_url = settings.chat_base_url or _DEFAULT_BASE_URLS[self._provider]
            if self._provider == "CUSTOM" and not base_url:
                raise ConfigurationError(
                    message="CHAT_BASE_URL is required for CUSTOM chat",
                    provider_name="custom",
                )
            self._api_key = settings.chat_api_key
            self._model = settings.chat_model_name
            client_kwargs: dict = {
                "api_key": self._api_key,
                "timeout": openai.Timeout(60.0, connect=5.0),
            }
            if base_url:
                client_kwargs["base_url"] = base_url
            self._client = openai.AsyncOpenAI(**client_kwargs)

        self._provider_label = self._provider.lower()

    async def invoke(self, question: str, context: str | None = None) -> str:
        try:
            response = await self._client.chat.completions.create(
                model=self._model,
                messages=build_messages(question, context),
                temperature=self._temperature,
            )
        except openai.APIError as exc:
            raise LLMError(
                message=f"{self._provider_label} API error: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        content = response.choices[0].message.content
        if content is None:
            raise LLMError(
                message=f"{self._provider_label} returned empty response",
                provider_name=self.get_provider_name(),
            )
        logger.info(
            "chat_completion",
            model=self._model,
            provider=self._provider_label,
            tokens=response.usage.total_tokens if response.usage else None,
        )
        return content

    def get_provider_name(self) -> str:
        return self._provider_label

    def is_available(self) -> bool:
        return bool(self._api_key)
