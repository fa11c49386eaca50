"""Meeting knowledge base: ingestion pipeline over a MongoDB or PostgreSQL vector store."""

__version__ = "0.1.0"
