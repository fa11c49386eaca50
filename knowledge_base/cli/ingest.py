"""Standalone CLI for populating and querying the knowledge base.

Usage::

    python -m knowledge_base.cli setup
    python -m knowledge_base.cli transcripts --since 2024-05-01T00:00:00Z
    python -m knowledge_base.cli dls
    python -m knowledge_base.cli pdf --file ./handbook.pdf
    python -m knowledge_base.cli pdf --url https://example.com/report.pdf
    python -m knowledge_base.cli search "quarterly roadmap" --source-type transcript
    python -m knowledge_base.cli ask "Who is on the finance list?"

Configuration comes from environment variables / ``.env`` (see
:class:`~knowledge_base.config.settings.Settings`).
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from datetime import datetime
from pathlib import Path
from urllib.parse import urlparse

from knowledge_base.config.settings import Settings
from knowledge_base.main import AppContext, create_app_context
from knowledge_base.models.document import SourceType
from knowledge_base.models.ingest import IngestResult, PdfSource
from knowledge_base.models.records import FileSource
from knowledge_base.models.search import SearchFilters, SearchOptions
from knowledge_base.utils.errors import KnowledgeBaseError


def _print_result(title: str, result: IngestResult) -> None:
    print(f"\n{title} complete:")
    print(f"  Chunks stored: {result.processed}")
    print(f"  Errors:        {result.errors}")
    for line in result.details:
        print(f"    - {line}")


def _parse_since(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid ISO-8601 timestamp: {value}") from exc


def _filename_from_url(url: str) -> str:
    name = Path(urlparse(url).path).name
    return name or "download.pdf"


# ---------------------------------------------------------------------------
# Subcommand handlers
# ---------------------------------------------------------------------------


async def _handle_setup(args: argparse.Namespace, ctx: AppContext) -> int:
    print(f"Setting up {ctx.settings.store_type} store ({ctx.embedder.dimensions} dimensions)")
    await ctx.setup()
    print("Setup complete.")
    return 0


async def _handle_transcripts(args: argparse.Namespace, ctx: AppContext) -> int:
    result = await ctx.transcripts.run(since=args.since)
    _print_result("Transcript ingestion", result)
    return 0 if result.errors == 0 else 2


async def _handle_dls(args: argparse.Namespace, ctx: AppContext) -> int:
    result = await ctx.distribution_lists.run()
    _print_result("Distribution list ingestion", result)
    return 0 if result.errors == 0 else 2


async def _handle_pdf(args: argparse.Namespace, ctx: AppContext) -> int:
    if args.file:
        path = Path(args.file)
        source = PdfSource(filename=args.name or path.name, buffer=path.read_bytes())
        file_id = await ctx.pdfs.create_file_record(source.filename, FileSource.UPLOAD)
    else:
        source = PdfSource(filename=args.name or _filename_from_url(args.url), url=args.url)
        file_id = await ctx.pdfs.create_file_record(
            source.filename, FileSource.URL, original_url=args.url
        )

    print(f"Ingesting PDF: {source.filename} (file id {file_id})")
    result = await ctx.pdfs.run(source, file_id)
    _print_result("PDF ingestion", result)

    record = await ctx.pdfs.get_file_record(file_id)
    if record is not None:
        print(f"  File status:   {record.status.value}")
    return 0 if result.errors == 0 else 2


async def _handle_search(args: argparse.Namespace, ctx: AppContext) -> int:
    filters = SearchFilters(source_type=args.source_type) if args.source_type else None
    results = await ctx.documents.search(
        args.query,
        SearchOptions(
            limit=args.limit or ctx.settings.search_default_limit,
            min_score=(
                ctx.settings.search_min_score if args.min_score is None else args.min_score
            ),
            filter=filters,
        ),
    )
    if not results:
        print("No matching documents.")
        return 0

    for i, hit in enumerate(results, start=1):
        meta = hit.document.metadata
        print(f"{i:>2}. [{meta.source_type.value}] score={hit.score:.3f}")
        print(f"    {hit.document.content[:200]}")
    return 0


async def _handle_ask(args: argparse.Namespace, ctx: AppContext) -> int:
    filters = SearchFilters(source_type=args.source_type) if args.source_type else None
    response = await ctx.chat.ask(args.question, filters=filters, limit=args.limit)

    print(response.answer)
    if response.sources:
        print("\nSources:")
        for ref in response.sources:
            date = f" ({ref.date})" if ref.date else ""
            print(f"  - {ref.title}{date} [{ref.source_type.value}] {ref.relevance_score:.3f}")
    return 0


_HANDLERS = {
    "setup": _handle_setup,
    "transcripts": _handle_transcripts,
    "dls": _handle_dls,
    "pdf": _handle_pdf,
    "search": _handle_search,
    "ask": _handle_ask,
}


async def _run(args: argparse.Namespace, app_settings: Settings) -> int:
    ctx = await create_app_context(app_settings)
    try:
        return await _HANDLERS[args.command](args, ctx)
    finally:
        await ctx.close()


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    """Build the argparse parser for the knowledge-base CLI."""
    parser = argparse.ArgumentParser(
        prog="python -m knowledge_base.cli",
        description="Populate and query the meeting knowledge base.",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    subparsers.add_parser("setup", help="Create collections, tables and the vector index")

    transcripts_parser = subparsers.add_parser("transcripts", help="Ingest meeting transcripts")
    transcripts_parser.add_argument(
        "--since",
        type=_parse_since,
        default=None,
        help="ISO-8601 start time (default: last successful sync)",
    )

    subparsers.add_parser("dls", help="Refresh distribution lists")

    pdf_parser = subparsers.add_parser("pdf", help="Ingest a PDF document")
    source_group = pdf_parser.add_mutually_exclusive_group(required=True)
    source_group.add_argument("--file", help="Path to a local PDF file")
    source_group.add_argument("--url", help="URL to download the PDF from")
    pdf_parser.add_argument("--name", default=None, help="Display filename (default: derived)")

    search_parser = subparsers.add_parser("search", help="Similarity search")
    search_parser.add_argument("query", help="Search text")
    search_parser.add_argument("--limit", type=int, default=None, help="Maximum results")
    search_parser.add_argument(
        "--min-score", type=float, default=None, dest="min_score", help="Score threshold"
    )
    search_parser.add_argument(
        "--source-type",
        choices=[s.value for s in SourceType],
        default=None,
        dest="source_type",
        help="Restrict to one source type",
    )

    ask_parser = subparsers.add_parser("ask", help="Answer a question from the knowledge base")
    ask_parser.add_argument("question", help="Question text")
    ask_parser.add_argument("--limit", type=int, default=None, help="Documents to retrieve")
    ask_parser.add_argument(
        "--source-type",
        choices=[s.value for s in SourceType],
        default=None,
        dest="source_type",
        help="Restrict to one source type",
    )

    return parser


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


def main(argv: list[str] | None = None) -> None:
    """CLI entry point: parse arguments, build the app context, dispatch."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    app_settings = Settings()
    try:
        exit_code = asyncio.run(_run(args, app_settings))
    except KnowledgeBaseError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        exit_code = 1

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
