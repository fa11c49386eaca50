"""Custom exception hierarchy for the knowledge base service.

All application exceptions inherit from :class:`KnowledgeBaseError`, which
carries an optional ``provider_name`` so error handlers can identify which
backend or external service (e.g. "mongo", "postgres", "openai", "graph")
caused the failure.

The hierarchy is organized by layer:

    KnowledgeBaseError  (base -- catch-all for any knowledge base error)
    +-- ConfigurationError      (startup / missing or unsupported config)
    +-- StoreError              (vector / metadata store failure)
    |   +-- StoreNotConnectedError  (store accessed before connect())
    |   +-- StoreConnectionError    (backend unreachable on connect())
    +-- ExtractionError         (upstream source listing / download failure)
    +-- ParseError              (raw input could not be turned into documents)
    +-- EmbeddingError          (embedding provider call failed)
    +-- LLMError                (answer-generation provider call failed)

Ingestion orchestrators catch per-item failures of any type; everything
else propagates so the caller decides the user-facing behaviour.
"""


class KnowledgeBaseError(Exception):
    """Base exception for all knowledge base errors.

    Every subclass carries a human-readable ``message`` and an optional
    ``provider_name`` identifying which backend or service triggered the
    error.  The ``__str__`` method prefixes the provider name in brackets
    for structured log output, e.g. ``[postgres] connect() must be called``.
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Configuration errors
# ---------------------------------------------------------------------------

class ConfigurationError(KnowledgeBaseError):
    """Raised when configuration is invalid or missing at startup."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Store errors
# ---------------------------------------------------------------------------

class StoreError(KnowledgeBaseError):
    """Raised when a vector or metadata store operation fails."""

    def __init__(
        self,
        message: str = "Store operation failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class StoreNotConnectedError(StoreError):
    """Raised when a store accessor is requested before ``connect()``."""

    def __init__(self, provider_name: str | None = None) -> None:
        super().__init__(
            message="connect() must be called before accessing stores",
            provider_name=provider_name,
        )


class StoreConnectionError(StoreError):
    """Raised when the backend cannot be reached during ``connect()``."""

    def __init__(
        self,
        message: str = "Could not connect to the store backend",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Ingestion errors
# ---------------------------------------------------------------------------

class ExtractionError(KnowledgeBaseError):
    """Raised when raw data cannot be fetched from an upstream source."""

    def __init__(
        self,
        message: str = "Extraction failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class ParseError(KnowledgeBaseError):
    """Raised when raw input cannot be converted into knowledge documents."""

    def __init__(
        self,
        message: str = "Parsing failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Model provider errors
# ---------------------------------------------------------------------------

class EmbeddingError(KnowledgeBaseError):
    """Raised when an embedding provider call fails."""

    def __init__(
        self,
        message: str = "Embedding request failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class LLMError(KnowledgeBaseError):
    """Raised when an LLM API call fails or returns an unusable response."""

    def __init__(
        self,
        message: str = "LLM API call failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
