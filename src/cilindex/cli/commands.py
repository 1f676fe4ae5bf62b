"""
CLI commands — argparse subcommands for cilindex.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Optional

from ..config import ProjectConfig
from ..core.indexer import Indexer, TypeIndex
from ..core.query import KINDS, TypeQuery
from ..errors import StructuralError
from ..parsers.cil import DeclarationFileParser
from . import formatter


def _get_config(args) -> ProjectConfig:
    """Load project config from .cilindex.yaml."""
    project_root = Path(args.project).resolve()
    return ProjectConfig.load(project_root)


def _build_index(args) -> TypeIndex:
    project_root = Path(args.project).resolve()
    indexer = Indexer(project_root, config=_get_config(args))
    return indexer.build()


def cmd_scan(args) -> int:
    """Index the project and show statistics."""
    index = _build_index(args)
    stats = index.stats()

    if args.json:
        print(json.dumps(asdict(stats), indent=2))
    else:
        print(f"Indexed {index.project_root}")
        print(formatter.format_stats(stats))
        for entry in index.files.values():
            if entry.parse_error:
                print(f"  {entry.rel_path}: {entry.parse_error}")
    return 0


def cmd_parse(args) -> int:
    """Parse one file and list its types."""
    config = _get_config(args)
    try:
        parser = DeclarationFileParser(args.file, encoding=config.encoding)
    except (StructuralError, OSError) as e:
        print(f"{args.file}: {e}", file=sys.stderr)
        return 1

    if args.json:
        types = sorted(parser.types, key=lambda t: t.start_line)
        print(json.dumps([t.to_dict() for t in types], indent=2))
    else:
        print(formatter.format_types(parser.types, args.file))
    return 0


def cmd_context(args) -> int:
    """Get context for a type."""
    query = TypeQuery(_build_index(args))
    ctx = query.get_context(args.name)

    if args.json:
        print(json.dumps(ctx.to_dict(), indent=2, default=str))
    else:
        print(formatter.format_context(ctx.to_dict()))
    return 0 if ctx.type else 1


def cmd_search(args) -> int:
    """Search the index."""
    query = TypeQuery(_build_index(args))
    results = query.search(args.query, kind=args.kind, limit=args.limit)

    if args.json:
        print(json.dumps(results, indent=2, default=str))
    else:
        print(formatter.format_search(results))
    return 0


def cmd_file(args) -> int:
    """Get file summary."""
    query = TypeQuery(_build_index(args))
    result = query.get_file_summary(args.path)

    if result is None:
        print(f"File not found: {args.path}")
        return 1
    if args.json:
        print(json.dumps(result, indent=2, default=str))
    else:
        print(formatter.format_file_summary(result))
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="cilindex",
        description="Type declaration index for CIL disassembly listings",
    )
    parser.add_argument(
        "--project", "-p", default=".",
        help="Project root directory (default: current dir)",
    )
    parser.add_argument(
        "--json", "-j", action="store_true", default=False,
        help="Output as JSON",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", default=False,
        help="Enable debug logging",
    )

    sub = parser.add_subparsers(dest="command", help="Available commands")

    # scan
    sub.add_parser("scan", help="Index the project and show statistics")

    # parse
    p = sub.add_parser("parse", help="Parse one disassembly file")
    p.add_argument("file", help="Path to the .il file")

    # context
    p = sub.add_parser("context", help="Get context for a type")
    p.add_argument("name", help="Unique or simple type name")

    # search
    p = sub.add_parser("search", help="Search type names")
    p.add_argument("query", help="Substring to look for")
    p.add_argument("--kind", choices=list(KINDS))
    p.add_argument("--limit", type=int, default=20)

    # file
    p = sub.add_parser("file", help="Get file summary")
    p.add_argument("path", help="Relative file path")

    return parser


def run_cli(argv: Optional[list[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        return 0

    commands = {
        "scan": cmd_scan,
        "parse": cmd_parse,
        "context": cmd_context,
        "search": cmd_search,
        "file": cmd_file,
    }

    cmd = commands.get(args.command)
    if cmd:
        return cmd(args)
    parser.print_help()
    return 0
