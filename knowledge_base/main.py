"""Knowledge base application wiring.

Builds settings, logging, the store facade, providers, services and
ingestion orchestrators once and hands them out through an explicit
:class:`AppContext` handle.  There are no module-level singletons: every
entry point (CLI, tests) calls :func:`create_app_context` and
closes the context when done.

Provider modules are imported inside the factory functions.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import httpx
import structlog

from knowledge_base.config.settings import Settings
from knowledge_base.interfaces.embedding_provider import IEmbeddingProvider
from knowledge_base.interfaces.llm_provider import ILLMProvider
from knowledge_base.interfaces.store import IStore
from knowledge_base.providers.extractors.dl_extractor import GraphDistributionListExtractor
from knowledge_base.providers.extractors.graph_client import (
    GraphClient,
    TokenProvider,
    static_token,
)
from knowledge_base.providers.extractors.pdf_extractor import PdfExtractor
from knowledge_base.providers.extractors.transcript_extractor import GraphTranscriptExtractor
from knowledge_base.providers.store import build_store
from knowledge_base.services.chat_service import ChatService
from knowledge_base.services.document_service import DocumentService
from knowledge_base.services.file_service import FileService
from knowledge_base.services.ingestion.dl_ingest import DistributionListIngestion
from knowledge_base.services.ingestion.pdf_ingest import PdfIngestion
from knowledge_base.services.ingestion.transcript_ingest import TranscriptIngestion
from knowledge_base.services.sync_state_service import SyncStateService
from knowledge_base.utils.errors import ConfigurationError
from knowledge_base.utils.logging import configure_logging

logger = structlog.get_logger(logger_name=__name__)

# Provider names accepted by the OpenAI-compatible providers.
_OPENAI_COMPATIBLE = frozenset({"AZURE", "OPENAI", "DEEPSEEK", "CUSTOM"})


# ---------------------------------------------------------------------------
# Provider factories
# ---------------------------------------------------------------------------


def build_embedding_provider(app_settings: Settings) -> IEmbeddingProvider:
    """Create the embedding provider named by ``EMBED_PROVIDER``.

    Raises
    ------
    ConfigurationError
        If ``EMBED_PROVIDER`` is unset or names an unknown provider.
    """
    provider = app_settings.embed_provider.strip().upper()
    if not provider:
        raise ConfigurationError(
            message="EMBED_PROVIDER is not set", provider_name="embedding"
        )

    if provider == "OLLAMA":
        from knowledge_base.providers.embedding.ollama_embedding_provider import (
            OllamaEmbeddingProvider,
        )

        return OllamaEmbeddingProvider(settings=app_settings)

    if provider in _OPENAI_COMPATIBLE:
        from knowledge_base.providers.embedding.openai_embedding_provider import (
            OpenAIEmbeddingProvider,
        )

        return OpenAIEmbeddingProvider(settings=app_settings, provider=provider)

    raise ConfigurationError(
        message=f"Unknown embedding provider: {app_settings.embed_provider}",
        provider_name="embedding",
    )


def build_llm_provider(app_settings: Settings) -> ILLMProvider:
    """Create the chat provider named by ``CHAT_PROVIDER``.

    Raises
    ------
    ConfigurationError
        If ``CHAT_PROVIDER`` is unset or names an unknown provider.
    """
    provider = app_settings.chat_provider.strip().upper()
    if not provider:
        raise ConfigurationError(message="CHAT_PROVIDER is not set", provider_name="llm")

    if provider == "OLLAMA":
        from knowledge_base.providers.llm.ollama_provider import OllamaLLMProvider

        return OllamaLLMProvider(settings=app_settings)

    if provider in _OPENAI_COMPATIBLE:
        from knowledge_base.providers.llm.openai_provider import OpenAILLMProvider

        return OpenAILLMProvider(settings=app_settings, provider=provider)

    raise ConfigurationError(
        message=f"Unknown chat provider: {app_settings.chat_provider}",
        provider_name="llm",
    )


# ---------------------------------------------------------------------------
# Application context
# ---------------------------------------------------------------------------


@dataclass
class AppContext:
    """Everything an entry point needs, built once per process.

    The chat service is created on first use so ingestion-only runs do not
    require a chat provider to be configured.
    """

    settings: Settings
    store: IStore
    http_client: httpx.AsyncClient
    embedder: IEmbeddingProvider
    documents: DocumentService
    sync_state: SyncStateService
    files: FileService
    transcripts: TranscriptIngestion
    distribution_lists: DistributionListIngestion
    pdfs: PdfIngestion
    _chat: ChatService | None = field(default=None, repr=False)

    @property
    def chat(self) -> ChatService:
        if self._chat is None:
            self._chat = ChatService(
                documents=self.documents,
                llm=build_llm_provider(self.settings),
                default_limit=self.settings.search_default_limit,
                min_score=self.settings.search_min_score,
            )
        return self._chat

    async def setup(self) -> None:
        """Create the backend schema / indexes for the embedder's dimension."""
        await self.store.setup(self.embedder.dimensions)

    async def close(self) -> None:
        await self.http_client.aclose()
        await self.store.close()
        logger.info("app_context_closed")


async def create_app_context(
    app_settings: Settings | None = None,
    token_provider: TokenProvider | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> AppContext:
    """Build and connect the application context.

    Parameters
    ----------
    app_settings:
        Settings to use; read from the environment when omitted.
    token_provider:
        Bearer-token coroutine function for Microsoft Graph.  Defaults to
        the static ``GRAPH_ACCESS_TOKEN``.
    http_client:
        Shared HTTP client for Graph and PDF downloads.
    """
    app_settings = app_settings or Settings()
    configure_logging(log_level=app_settings.log_level, app_env=app_settings.app_env)

    embedder = build_embedding_provider(app_settings)
    store = build_store(app_settings)
    await store.connect()

    http_client = http_client or httpx.AsyncClient(timeout=app_settings.graph_timeout_seconds)
    graph = GraphClient(
        http_client=http_client,
        token_provider=token_provider or static_token(app_settings.graph_access_token),
        base_url=app_settings.graph_base_url,
    )

    documents = DocumentService(
        store=store,
        embedder=embedder,
        collection=app_settings.knowledge_base_collection,
    )
    sync_state = SyncStateService(store, collection=app_settings.sync_state_collection)
    files = FileService(store, collection=app_settings.files_collection)

    context = AppContext(
        settings=app_settings,
        store=store,
        http_client=http_client,
        embedder=embedder,
        documents=documents,
        sync_state=sync_state,
        files=files,
        transcripts=TranscriptIngestion(
            extractor=GraphTranscriptExtractor(graph),
            documents=documents,
            sync_state=sync_state,
        ),
        distribution_lists=DistributionListIngestion(
            extractor=GraphDistributionListExtractor(graph),
            documents=documents,
            sync_state=sync_state,
        ),
        pdfs=PdfIngestion(
            extractor=PdfExtractor(http_client),
            documents=documents,
            files=files,
        ),
    )
    logger.info(
        "app_context_ready",
        store_type=app_settings.store_type,
        embedding_provider=embedder.get_provider_name(),
    )
    return context
