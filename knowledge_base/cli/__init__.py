"""Operator command-line tools for the knowledge base.

- ``python -m knowledge_base.cli setup`` -- create collections / tables and
  the vector index for the configured embedding dimension.
- ``python -m knowledge_base.cli transcripts`` -- delta-sync meeting transcripts.
- ``python -m knowledge_base.cli dls`` -- refresh distribution lists.
- ``python -m knowledge_base.cli pdf`` -- ingest one PDF file or URL.
- ``python -m knowledge_base.cli search`` / ``ask`` -- query the knowledge base.
"""
