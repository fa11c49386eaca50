"""Utility modules for the knowledge base service.

- **errors** -- Domain exception hierarchy rooted at KnowledgeBaseError.
- **logging** -- structlog setup with a dual-renderer pattern: coloured
  console output in development, structured JSON in production.
"""

from knowledge_base.utils.errors import (
    ConfigurationError,
    EmbeddingError,
    ExtractionError,
    KnowledgeBaseError,
    LLMError,
    ParseError,
    StoreConnectionError,
    StoreError,
    StoreNotConnectedError,
)
from knowledge_base.utils.logging import configure_logging, get_logger

__all__ = [
    "ConfigurationError",
    "EmbeddingError",
    "ExtractionError",
    "KnowledgeBaseError",
    "LLMError",
    "ParseError",
    "StoreConnectionError",
    "StoreError",
    "StoreNotConnectedError",
    "configure_logging",
    "get_logger",
]
