"""Storage backends and the factory that picks one.

:func:`build_store` is the only place that looks at ``settings.store_type``;
everything downstream talks to :class:`~knowledge_base.interfaces.store.IStore`.
Backend modules are imported lazily so a deployment only needs the driver
for the backend it uses.
"""

from __future__ import annotations

from knowledge_base.config.settings import Settings
from knowledge_base.interfaces.store import IStore
from knowledge_base.utils.errors import ConfigurationError


def build_store(settings: Settings) -> IStore:
    """Create the (unconnected) store facade selected by ``settings.store_type``.

    Raises
    ------
    ConfigurationError
        If the selected backend has no connection string configured.
    """
    if settings.store_type == "mongo":
        if not settings.mongodb_uri:
            raise ConfigurationError(
                message="MONGODB_URI is required when STORE_TYPE=mongo",
                provider_name="mongo",
            )
        from knowledge_base.providers.store.mongo.mongo_store import MongoStore

        return MongoStore(
            uri=settings.mongodb_uri,
            db_name=settings.mongodb_db_name,
            knowledge_base_collection=settings.knowledge_base_collection,
            sync_state_collection=settings.sync_state_collection,
        )

    if settings.store_type == "postgres":
        if not settings.postgres_url:
            raise ConfigurationError(
                message="POSTGRES_URL is required when STORE_TYPE=postgres",
                provider_name="postgres",
            )
        from knowledge_base.providers.store.postgres.postgres_store import PostgresStore

        return PostgresStore(
            dsn=settings.postgres_url,
            min_size=settings.postgres_pool_min,
            max_size=settings.postgres_pool_max,
            knowledge_base_table=settings.knowledge_base_collection,
            files_table=settings.files_collection,
            sync_state_table=settings.sync_state_collection,
        )

    raise ConfigurationError(message=f"Unsupported STORE_TYPE: {settings.store_type}")


__all__ = ["build_store"]
