"""Allow ``python -m knowledge_base.cli`` execution."""

from knowledge_base.cli.ingest import main

main()
