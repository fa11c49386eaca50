"""Application settings loaded from environment variables via pydantic-settings.

Values are read from two sources (in priority order):

  1. Environment variables, e.g. ``STORE_TYPE=postgres``
  2. A ``.env`` file in the working directory

Field names map to upper-cased env vars automatically (``postgres_url`` ->
``POSTGRES_URL``).  Empty strings mean "not configured"; the provider
factories in :mod:`knowledge_base.main` reject unconfigured providers with
a :class:`~knowledge_base.utils.errors.ConfigurationError` at first use
rather than at import time.
"""

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Knowledge base service settings.

    Environment variables override defaults. Loaded from .env file when present.
    """

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # === Store selection ===
    # Fixed for the lifetime of the process; switching requires a restart.
    store_type: Literal["mongo", "postgres"] = "mongo"

    mongodb_uri: str = ""
    mongodb_db_name: str = "knowledge_base"

    postgres_url: str = ""
    postgres_pool_min: int = 1
    postgres_pool_max: int = 10

    # Collection / table names shared by both backends.
    knowledge_base_collection: str = "knowledge_base"
    files_collection: str = "files"
    sync_state_collection: str = "sync_state"

    # === Embedding provider ===
    # AZURE | OPENAI | DEEPSEEK | OLLAMA | CUSTOM
    embed_provider: str = ""
    embed_api_key: str = ""
    embed_model_name: str = "text-embedding-3-small"
    embed_base_url: str = ""
    embed_dimensions: int = 1536

    # === Chat (answer generation) provider ===
    chat_provider: str = ""
    chat_api_key: str = ""
    chat_model_name: str = "gpt-4o-mini"
    chat_base_url: str = ""
    chat_temperature: float = 0.3

    # === Azure OpenAI (used when a provider is AZURE) ===
    azure_openai_api_key: str = ""
    azure_openai_endpoint: str = ""
    azure_openai_api_version: str = "2024-06-01"
    azure_openai_embeddings_deployment: str = ""
    azure_openai_chat_deployment: str = ""

    # === Ollama ===
    ollama_base_url: str = "http://localhost:11434"

    # === Microsoft Graph source ===
    # Token acquisition is external; GRAPH_ACCESS_TOKEN is a static fallback.
    graph_base_url: str = "https://graph.microsoft.com/v1.0"
    graph_access_token: str = ""
    graph_timeout_seconds: float = 30.0

    # === Retrieval defaults ===
    search_default_limit: int = 5
    search_min_score: float = 0.2

    # === App Config ===
    app_env: str = "development"
    log_level: str = "INFO"
