"""Chat (answer-generation) provider adapters.

Two concrete implementations of ILLMProvider:
    - OpenAILLMProvider -- OpenAI, Azure OpenAI, DeepSeek, custom endpoints
    - OllamaLLMProvider -- local models via Ollama
"""

from knowledge_base.providers.llm.ollama_provider import OllamaLLMProvider
from knowledge_base.providers.llm.openai_provider import OpenAILLMProvider

__all__ = ["OllamaLLMProvider", "OpenAILLMProvider"]
