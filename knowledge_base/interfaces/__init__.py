"""Public interface definitions for storage backends and external services.

Business logic (document service, ingestion orchestrators, chat service)
depends only on these abstract base classes.  Concrete adapters live in
``knowledge_base/providers/`` and are wired together in
``knowledge_base/main.py``.

CONCRETE PROVIDER MAP:
    Interface            →  Concrete implementations
    ─────────────────────────────────────────────────────────────
    IStore               →  MongoStore, PostgresStore
    IVectorStore         →  MongoVectorStore, PostgresVectorStore
    IMetaStore           →  MongoMetaStore, PostgresMetaStore
    IEmbeddingProvider   →  OpenAIEmbeddingProvider, OllamaEmbeddingProvider
    ILLMProvider         →  OpenAILLMProvider, OllamaLLMProvider
    IExtractor           →  GraphDistributionListExtractor, PdfExtractor
    ITranscriptExtractor →  GraphTranscriptExtractor
"""

from knowledge_base.interfaces.embedding_provider import IEmbeddingProvider
from knowledge_base.interfaces.extractor import IExtractor, ITranscriptExtractor
from knowledge_base.interfaces.llm_provider import ILLMProvider
from knowledge_base.interfaces.meta_store import IMetaStore
from knowledge_base.interfaces.store import IStore
from knowledge_base.interfaces.vector_store import IVectorStore

__all__ = [
    "IEmbeddingProvider",
    "IExtractor",
    "ILLMProvider",
    "IMetaStore",
    "IStore",
    "ITranscriptExtractor",
    "IVectorStore",
]
