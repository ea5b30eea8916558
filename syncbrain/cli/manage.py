# =============================================================================
# syncbrain/cli/manage.py -- Operator CLI
# =============================================================================
#
# Runs the same coordinators as the HTTP API, one command per process:
#
#   ingest    -- save a note or link for an owner
#   list      -- list an owner's saved content
#   delete    -- delete one record (both stores)
#   search    -- semantic search with a grounded answer
#   reconcile -- re-embed records missing a vector, drop orphan vectors
#
# Usage examples:
#   python -m syncbrain.cli ingest --owner alice --kind note \
#       --title "Groceries" --body "eggs, milk"
#   python -m syncbrain.cli ingest --owner alice --kind url-generic \
#       --url https://example.com/post
#   python -m syncbrain.cli search --owner alice --query "what did I buy?"
#   python -m syncbrain.cli reconcile --owner alice
# =============================================================================

"""Operator CLI for SyncBrain."""

from __future__ import annotations

import argparse
import asyncio
import sys
from typing import Any

from syncbrain.config.settings import Settings
from syncbrain.models.content import SourceInput, SourceKind
from syncbrain.utils.errors import SyncBrainError


async def _handle_ingest(args: argparse.Namespace, components: dict[str, Any]) -> int:
    record = await components["ingestion_service"].ingest(
        args.owner,
        args.kind,
        SourceInput(url=args.url, title=args.title, body=args.body),
    )
    print("Saved:")
    print(f"  Id:        {record.id}")
    print(f"  Title:     {record.title}")
    print(f"  Type:      {record.source_kind.value}")
    print(f"  Thumbnail: {record.thumbnail or '-'}")
    return 0


async def _handle_list(args: argparse.Namespace, components: dict[str, Any]) -> int:
    records = await components["ingestion_service"].list_content(args.owner)
    if not records:
        print(f"No saved content for {args.owner!r}.")
        return 0
    for record in records:
        stamp = record.created_at.strftime("%Y-%m-%d %H:%M")
        print(f"{record.id}  {stamp}  {record.source_kind.value:<12} {record.title}")
    return 0


async def _handle_delete(args: argparse.Namespace, components: dict[str, Any]) -> int:
    await components["ingestion_service"].delete_content(args.owner, args.id)
    print(f"Deleted {args.id}.")
    return 0


async def _handle_search(args: argparse.Namespace, components: dict[str, Any]) -> int:
    result = await components["retrieval_service"].search(args.owner, args.query)
    print(result.message)
    if result.answer:
        print(f"\n{result.answer}\n")
    for scored in result.results:
        print(f"  {scored.score:.3f}  {scored.record.title}  ({scored.record.id})")
    return 0


async def _handle_reconcile(args: argparse.Namespace, components: dict[str, Any]) -> int:
    report = await components["ingestion_service"].reconcile(args.owner)
    print(f"Reconciled {report.owner!r}:")
    print(f"  Records checked:  {report.records_checked}")
    print(f"  Re-embedded:      {len(report.reembedded)}")
    print(f"  Orphans removed:  {len(report.orphans_removed)}")
    print(f"  Failed:           {len(report.failed)}")
    for record_id in report.failed:
        print(f"    {record_id}")
    return 1 if report.failed else 0


_HANDLERS = {
    "ingest": _handle_ingest,
    "list": _handle_list,
    "delete": _handle_delete,
    "search": _handle_search,
    "reconcile": _handle_reconcile,
}


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="python -m syncbrain.cli",
        description="Manage SyncBrain content from the command line.",
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    ingest_parser = subparsers.add_parser("ingest", help="Save a note or link")
    ingest_parser.add_argument("--owner", required=True, help="Owner id")
    ingest_parser.add_argument(
        "--kind",
        required=True,
        choices=[kind.value for kind in SourceKind],
        help="Content type",
    )
    ingest_parser.add_argument("--url", help="Link (required for url-* kinds)")
    ingest_parser.add_argument("--title", help="Title override")
    ingest_parser.add_argument("--body", help="Note text, or a body override")

    list_parser = subparsers.add_parser("list", help="List saved content")
    list_parser.add_argument("--owner", required=True, help="Owner id")

    delete_parser = subparsers.add_parser("delete", help="Delete one record")
    delete_parser.add_argument("--owner", required=True, help="Owner id")
    delete_parser.add_argument("--id", required=True, help="Record id")

    search_parser = subparsers.add_parser("search", help="Search saved content")
    search_parser.add_argument("--owner", required=True, help="Owner id")
    search_parser.add_argument("--query", required=True, help="Natural-language question")

    reconcile_parser = subparsers.add_parser(
        "reconcile", help="Repair missing and orphan vectors"
    )
    reconcile_parser.add_argument("--owner", required=True, help="Owner id")

    return parser


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------


async def _run(args: argparse.Namespace, app_settings: Settings) -> int:
    # Deferred: building components pulls in chromadb, playwright, and the SDKs.
    from syncbrain.main import build_components, close_components, initialize_components

    components = build_components(app_settings)
    await initialize_components(components)
    try:
        return await _HANDLERS[args.command](args, components)
    finally:
        await close_components(components)


def main(argv: list[str] | None = None) -> None:
    """Parse *argv*, run the command, and exit with its status code."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    app_settings = Settings()
    try:
        exit_code = asyncio.run(_run(args, app_settings))
    except SyncBrainError as exc:
        print(f"Error ({type(exc).__name__}): {exc}", file=sys.stderr)
        sys.exit(2)
    sys.exit(exit_code)


if __name__ == "__main__":
    main()
