"""
Command-line interface for the template knowledge base.

Examples:
    template-kb search "parameterized pytest template"
    template-kb search "regression test for bug" --json
    template-kb list --ecosystem javascript
    template-kb show integration-test-template-javascript-jest --code-only
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

import yaml
from pydantic import ValidationError

from template_kb.config import LOG_LEVELS, TemplateKBSettings, resolve_config
from template_kb.document import Category, Ecosystem, TemplateEntry
from template_kb.errors import InvalidArgument, TemplateKBError
from template_kb.loader import KnowledgeBaseLoader
from template_kb.models import EntryModel, SearchHit, SearchRequest, SearchResponse
from template_kb.store import TemplateStore

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_NOT_FOUND = 1
EXIT_ERROR = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="template-kb",
        description="Search the testing-standards template knowledge base",
    )
    parser.add_argument(
        "--document",
        "-d",
        help="Knowledge base file or directory (default: bundled document)",
    )
    parser.add_argument("--config", "-c", help="Path to a YAML configuration file")
    parser.add_argument(
        "--log-level",
        choices=LOG_LEVELS,
        type=str.upper,
        help="Logging level (default: from config, INFO)",
    )
    subparsers = parser.add_subparsers(dest="command", help="Command to execute")

    categories = [c.value for c in Category]
    ecosystems = [e.value for e in Ecosystem]

    # Search command
    search_parser = subparsers.add_parser("search", help="Find matching templates")
    search_parser.add_argument("query", help="Free-text query")
    search_parser.add_argument(
        "--top-k", "-k", type=int, help="Maximum number of results (default: 3)"
    )
    search_parser.add_argument("--category", choices=categories)
    search_parser.add_argument("--ecosystem", choices=ecosystems)
    search_parser.add_argument("--json", action="store_true", help="Print JSON")
    search_parser.add_argument(
        "--code-only", action="store_true", help="Print only the code blocks"
    )

    # List command
    list_parser = subparsers.add_parser("list", help="List all entries")
    list_parser.add_argument("--category", choices=categories)
    list_parser.add_argument("--ecosystem", choices=ecosystems)
    list_parser.add_argument("--json", action="store_true", help="Print JSON")

    # Show command
    show_parser = subparsers.add_parser("show", help="Show one entry by id")
    show_parser.add_argument("id", help="Entry id, as printed by 'list'")
    show_parser.add_argument("--json", action="store_true", help="Print JSON")
    show_parser.add_argument(
        "--code-only", action="store_true", help="Print only the code blocks"
    )

    return parser


def run_search(store: TemplateStore, request: SearchRequest) -> SearchResponse:
    hits = [
        SearchHit.from_scored(entry, score)
        for entry, score in store.iter_search(
            request.query,
            request.top_k,
            category=request.category,
            ecosystem=request.ecosystem,
        )
    ]
    return SearchResponse(query=request.query, top_k=request.top_k, hits=hits)


def _format_entry(entry: TemplateEntry, code_only: bool = False) -> str:
    if code_only:
        if not entry.code_blocks:
            return f"# {entry.title}: no code blocks"
        return "\n\n".join(block.code for block in entry.code_blocks)

    header = f"{entry.title} [{entry.id}] ({entry.category.value}, {entry.ecosystem.value})"
    return f"{header}\n{'=' * len(header)}\n{entry.body}"


def _cmd_search(args, store: TemplateStore, default_top_k: int) -> int:
    top_k = args.top_k if args.top_k is not None else default_top_k
    try:
        request = SearchRequest(
            query=args.query,
            top_k=top_k,
            category=args.category,
            ecosystem=args.ecosystem,
        )
    except ValidationError as e:
        raise InvalidArgument(str(e)) from e

    response = run_search(store, request)

    if args.json:
        print(response.model_dump_json(indent=2))
        return EXIT_OK

    if not response.hits:
        print(f"No templates match {args.query!r}")
        return EXIT_OK

    for i, hit in enumerate(response.hits, 1):
        entry = store.get(hit.id)
        if args.code_only:
            print(_format_entry(entry, code_only=True))
        else:
            print(f"[{i}] score={hit.score}")
            print(_format_entry(entry))
        print()
    return EXIT_OK


def _cmd_list(args, store: TemplateStore) -> int:
    entries = store.filter(category=args.category, ecosystem=args.ecosystem)
    if args.json:
        payload = [EntryModel.from_entry(e).model_dump(mode="json") for e in entries]
        print(json.dumps(payload, indent=2))
        return EXIT_OK

    for entry in entries:
        print(
            f"{entry.id:<50} {entry.category.value:<20} "
            f"{entry.ecosystem.value:<18} {entry.title}"
        )
    return EXIT_OK


def _cmd_show(args, store: TemplateStore) -> int:
    try:
        entry = store.get(args.id)
    except KeyError:
        print(f"Unknown entry id: {args.id}", file=sys.stderr)
        suggestions = store.suggest(args.id)
        if suggestions:
            print(f"Did you mean: {', '.join(suggestions)}", file=sys.stderr)
        return EXIT_NOT_FOUND

    if args.json:
        print(EntryModel.from_entry(entry).model_dump_json(indent=2))
    else:
        print(_format_entry(entry, code_only=args.code_only))
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return EXIT_OK

    try:
        settings = TemplateKBSettings()
        config = resolve_config(args.config, settings)
    except (OSError, ValueError, yaml.YAMLError) as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        return EXIT_ERROR

    logging.basicConfig(
        level=getattr(logging, args.log_level or config.log_level),
        format="%(levelname)s %(name)s: %(message)s",
    )

    document = args.document or config.document_path
    try:
        store = KnowledgeBaseLoader.load_path(
            document, extra_stop_words=config.extra_stop_words
        )
        if args.command == "search":
            return _cmd_search(args, store, config.default_top_k)
        elif args.command == "list":
            return _cmd_list(args, store)
        elif args.command == "show":
            return _cmd_show(args, store)
    except FileNotFoundError as e:
        logger.error(str(e))
        return EXIT_ERROR
    except TemplateKBError as e:
        logger.error(f"{type(e).__name__}: {e}")
        return EXIT_ERROR

    parser.print_help()
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
