"""MongoDB Atlas backend: store facade, vector store and metadata store."""

from knowledge_base.providers.store.mongo.mongo_meta_store import MongoMetaStore
from knowledge_base.providers.store.mongo.mongo_store import MongoStore
from knowledge_base.providers.store.mongo.mongo_vector_store import MongoVectorStore

__all__ = ["MongoMetaStore", "MongoStore", "MongoVectorStore"]
