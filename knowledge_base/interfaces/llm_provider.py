"""Abstract base class for answer-generation (chat) providers."""

from __future__ import annotations

from abc import ABC, abstractmethod


# Concrete implementations: OpenAILLMProvider, OllamaLLMProvider
# Located in: knowledge_base/providers/llm/
class ILLMProvider(ABC):
    """Contract for the chat model that turns retrieved context into an answer."""

    @abstractmethod
    async def invoke(self, question: str, context: str | None = None) -> str:
        """Answer *question*, grounded on *context* when given.

        Parameters
        ----------
        question:
            The user's question, sent as the user message.
        context:
            Pre-assembled context blocks.  When present the provider fills
            its system prompt template with it; when ``None`` the question
            is sent without a system prompt.

        Returns
        -------
        str
            The model's text answer.

        Raises
        ------
        knowledge_base.utils.errors.LLMError
            If the API call fails or returns no content.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a human-readable identifier for this provider."""

    @abstractmethod
    def is_available(self) -> bool:
        """Return ``True`` if credentials / endpoint are configured."""
