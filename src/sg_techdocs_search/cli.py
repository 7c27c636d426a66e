"""Command line entry point for building and querying the search index."""

import argparse
import json
import logging
import sys
from collections.abc import Sequence
from pathlib import Path

from pydantic import ValidationError

from sg_techdocs_search.config import SearchSettings
from sg_techdocs_search.engine import QueryEngine
from sg_techdocs_search.index_store import IndexStore
from sg_techdocs_search.indexer import DEFAULT_MANIFEST, SearchIndexBuilder, discover_manifest
from sg_techdocs_search.models import SearchPayload
from sg_techdocs_search.parser import DocumentParser

logger = logging.getLogger(__name__)


def build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="techdocs-search",
        description="Build and query the technical documentation search index",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    build = subparsers.add_parser("build", help="Build the search index from Markdown pages")
    build.add_argument("--content-dir", type=Path, help="Directory holding the Markdown pages")
    build.add_argument("--output", type=Path, help="Where to write the JSON index")
    build.add_argument("--path-prefix", help="Base path the site is served from")
    build.add_argument(
        "--discover",
        action="store_true",
        help="Index every Markdown file in the content directory instead of the built-in page list",
    )

    search = subparsers.add_parser("search", help="Query a built index")
    search.add_argument("query", help="Text to search for")
    search.add_argument("--index", type=Path, help="Path to the JSON index")
    search.add_argument("--json", action="store_true", help="Print the result payload as JSON")

    return parser


def _configure_logging(level: str) -> None:
    if logging.getLogger().handlers:
        return
    logging.basicConfig(level=level.upper(), format="%(levelname)s %(name)s: %(message)s")


def _format_payload(payload: SearchPayload) -> str:
    if not payload.results:
        lines = [payload.message or "", "Try: " + ", ".join(payload.suggestions)]
        return "\n".join(lines)

    lines = [payload.header or ""]
    for item in payload.results:
        lines.append("")
        lines.append(f"{item.title} <{item.url}>")
        lines.append(f"  {item.display_summary}")
    return "\n".join(lines)


def _run_build(args: argparse.Namespace, settings: SearchSettings) -> int:
    content_dir = args.content_dir or settings.content_dir
    output = args.output or settings.index_path
    path_prefix = args.path_prefix if args.path_prefix is not None else settings.path_prefix

    try:
        manifest = discover_manifest(content_dir) if args.discover else DEFAULT_MANIFEST
    except ValueError as exc:
        logger.error("%s", exc)
        return 1

    builder = SearchIndexBuilder(
        manifest,
        path_prefix=path_prefix,
        parser=DocumentParser(summary_length=settings.summary_length),
    )
    records = builder.index_from_path(content_dir)
    if not records:
        logger.error("No pages could be indexed from %s", content_dir)
        return 1

    IndexStore(output).save(records)
    return 0


def _run_search(args: argparse.Namespace, settings: SearchSettings) -> int:
    if len(args.query) < settings.min_query_length:
        logger.error("Query must be at least %d characters", settings.min_query_length)
        return 2

    engine = QueryEngine(settings)
    engine.init(args.index or settings.index_path)
    if not engine.ready():
        return 1

    payload = engine.render(engine.search(args.query), args.query)
    if args.json:
        sys.stdout.write(json.dumps(payload.as_dict(), ensure_ascii=False, indent=2) + "\n")
    else:
        sys.stdout.write(_format_payload(payload) + "\n")
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_argument_parser()
    args = parser.parse_args(argv)

    try:
        settings = SearchSettings()
    except ValidationError as exc:
        sys.stderr.write(f"Invalid configuration: {exc}\n")
        return 1

    _configure_logging(settings.log_level)

    if args.command == "build":
        return _run_build(args, settings)
    return _run_search(args, settings)


if __name__ == "__main__":
    raise SystemExit(main())
