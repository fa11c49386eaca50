"""Embedding provider implementations.

Two implementations of IEmbeddingProvider:
    1. OpenAIEmbeddingProvider -- OpenAI, Azure OpenAI, DeepSeek or any
       OpenAI-compatible endpoint (batches of 2048).
    2. OllamaEmbeddingProvider -- local models via Ollama (batches of 512).

main.py imports the selected module lazily; importing this package
imports both.
"""

from knowledge_base.providers.embedding.ollama_embedding_provider import OllamaEmbeddingProvider
from knowledge_base.providers.embedding.openai_embedding_provider import OpenAIEmbeddingProvider

__all__ = ["OllamaEmbeddingProvider", "OpenAIEmbeddingProvider"]
