# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""domlocator CLI: locate and reduce commands.

Usage:
    python -m domlocator.cli locate --url URL --description TEXT [--headed] [--format json]
    python -m domlocator.cli reduce [FILE] [--max-chars N] [--keep-empty]
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from pathlib import Path

from .config import Settings, load_settings, with_overrides
from .errors import DomLocatorError
from .logging_config import configure


def cmd_locate(args: argparse.Namespace, settings: Settings) -> None:
    """Resolve a description to a selector on a live URL."""
    settings = with_overrides(
        settings,
        headless=False if args.headed else None,
        max_chars=args.max_chars,
        highlight_ms=args.highlight_ms,
    )
    resolution = asyncio.run(_locate(args.url, args.description, settings))

    if args.format == "json":
        print(json.dumps(resolution.to_dict(), ensure_ascii=False, indent=2))
    else:
        print(resolution.locator)


async def _locate(url: str, description: str, settings: Settings):
    from .inference import ChatCompletionsInference
    from .resolver import resolve_locator

    async with ChatCompletionsInference(settings.inference) as inference:
        return await resolve_locator(url, description, settings=settings, inference=inference)


def cmd_reduce(args: argparse.Namespace, settings: Settings) -> None:
    """Reduce an HTML file (or stdin) and print the markup."""
    from .reduction.pipeline import simplify_dom
    from .reduction.tree import parse_body

    settings = with_overrides(
        settings,
        max_chars=args.max_chars,
        drop_empty_elements=False if args.keep_empty else None,
    )
    if args.file in (None, "-"):
        raw = sys.stdin.read()
    else:
        path = Path(args.file)
        if not path.is_file():
            print(f"Error: file not found: {path}", file=sys.stderr)
            sys.exit(1)
        raw = path.read_text(encoding="utf-8", errors="replace")

    result = simplify_dom(parse_body(raw), settings.reduction)
    print(result.markup)
    if args.verbose:
        s = result.stats
        print(
            f"removed_subtrees={s.removed_subtrees} stripped_attributes={s.stripped_attributes} "
            f"pruned_nodes={s.pruned_nodes} chars={s.serialized_chars} truncated={s.truncated}",
            file=sys.stderr,
        )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Resolve natural-language element descriptions to CSS selectors",
        prog="python -m domlocator.cli",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    parser.add_argument("--log-json", action="store_true", help="Emit logs as JSON lines on stderr")
    subparsers = parser.add_subparsers(dest="command", required=True)

    _locate_epilog = """\
examples:
  %(prog)s --url https://www.baidu.com --description "main search input box"
  %(prog)s --url https://example.com --description "More information link" --format json
  %(prog)s --url https://example.com --description "login button" --headed
"""
    p_locate = subparsers.add_parser(
        "locate",
        help="Find and verify a selector for a described element",
        epilog=_locate_epilog,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p_locate.add_argument("--url", type=str, required=True, metavar="URL", help="Page to open")
    p_locate.add_argument(
        "--description", "-d", type=str, required=True, metavar="TEXT", help="Element to find, in plain words"
    )
    p_locate.add_argument("--headed", action="store_true", help="Show the browser window")
    p_locate.add_argument("--max-chars", type=int, metavar="N", help="Cap on markup sent to inference")
    p_locate.add_argument(
        "--highlight-ms", type=int, metavar="MS", help="How long to keep the match highlighted (default: 3000)"
    )
    p_locate.add_argument("--format", type=str, choices=["text", "json"], default="text", help="Output format")

    p_reduce = subparsers.add_parser("reduce", help="Reduce an HTML file offline and print the markup")
    p_reduce.add_argument("file", nargs="?", metavar="FILE", help="HTML file (default: stdin)")
    p_reduce.add_argument("--max-chars", type=int, metavar="N", help="Truncate output to N characters")
    p_reduce.add_argument("--keep-empty", action="store_true", help="Keep elements left empty after pruning")

    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.max_chars is not None and args.max_chars < 0:
        parser.error("--max-chars must be >= 0")

    configure(json_output=args.log_json, level="DEBUG" if args.verbose else "INFO")
    commands = {"locate": cmd_locate, "reduce": cmd_reduce}

    try:
        commands[args.command](args, load_settings())
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        sys.exit(130)
    except DomLocatorError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
