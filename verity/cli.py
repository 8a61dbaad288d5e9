"""Command-line entry-point for verity.

Usage::

    verity diff <actual.json> <expected.json> [--max-depth N] [--no-color]
    verity snapshot <file.json> [-o <out.json>]
    verity config [<verity.yaml>]
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from verity import log
from verity.compare.json_compare import JsonComparator, to_canonical_json
from verity.core.config import DEFAULT_CONFIG_FILE, load_config
from verity.core.types import VerityError

logger = logging.getLogger(__name__)

_KIND_STYLES = {
    "missing": "yellow",
    "unexpected": "magenta",
    "mismatch": "red",
    "type_mismatch": "red",
    "count_mismatch": "red",
    "too_deep": "dim",
}


def _read_json(path: str):
    with open(path, encoding="utf-8") as fh:
        return json.load(fh)


# ---------------------------------------------------------------------------
# Sub-command handlers
# ---------------------------------------------------------------------------

def _cmd_diff(args: argparse.Namespace, console: Console) -> int:
    actual = _read_json(args.actual)
    expected = _read_json(args.expected)
    diffs = JsonComparator(args.max_depth).compare_nodes(actual, expected)
    if not diffs:
        console.print("No differences.")
        return 0

    table = Table(title=f"{args.actual} vs {args.expected}")
    table.add_column("Path")
    table.add_column("Kind")
    table.add_column("Actual")
    table.add_column("Expected")
    for d in diffs:
        style = _KIND_STYLES.get(d.kind.value, "")
        table.add_row(
            escape(d.location),
            f"[{style}]{d.kind.value}[/{style}]",
            escape(d.actual_summary),
            escape(d.expected_summary),
        )
    console.print(table)
    console.print(f"\n{len(diffs)} difference(s)")
    return 1


def _cmd_snapshot(args: argparse.Namespace, console: Console) -> int:
    text = to_canonical_json(_read_json(args.file)) + "\n"
    if args.output:
        out = Path(args.output)
        out.parent.mkdir(parents=True, exist_ok=True)
        out.write_text(text, encoding="utf-8")
        console.print(f"Wrote {out}")
    else:
        sys.stdout.write(text)
    return 0


def _cmd_config(args: argparse.Namespace, console: Console) -> int:
    config = load_config(args.path)
    for name in (
        "throw_on_failure",
        "tolerance",
        "max_recursion_depth",
        "colorize",
        "append_code_line",
        "max_details",
    ):
        console.print(f"  {name:22s} {getattr(config, name)}")
    for name in ("adapter", "listener", "observer"):
        value = getattr(config, name)
        console.print(f"  {name:22s} {type(value).__name__ if value is not None else '-'}")
    return 0


# ---------------------------------------------------------------------------
# Parser
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="verity", description="Structural diff and snapshot tools")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command")

    p = sub.add_parser("diff", help="Structurally diff two JSON documents")
    p.add_argument("actual")
    p.add_argument("expected")
    p.add_argument("--max-depth", type=int, default=20)
    p.add_argument("--no-color", action="store_true", help="Disable coloured output")

    p = sub.add_parser("snapshot", help="Rewrite a JSON file in canonical snapshot form")
    p.add_argument("file")
    p.add_argument("-o", "--output", default=None, help="Output file path")

    p = sub.add_parser("config", help="Validate and show a verity.yaml")
    p.add_argument("path", nargs="?", default=DEFAULT_CONFIG_FILE)

    return parser


def main(argv: list[str] | None = None) -> int:
    """CLI entry-point; returns the exit status."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 2

    log.setup(logging.DEBUG if args.verbose else logging.WARNING)
    console = Console(no_color=getattr(args, "no_color", False), highlight=False)
    dispatch = {
        "diff": _cmd_diff,
        "snapshot": _cmd_snapshot,
        "config": _cmd_config,
    }
    try:
        return dispatch[args.command](args, console)
    except (OSError, json.JSONDecodeError, VerityError) as exc:
        logger.error("%s", exc)
        return 2
    finally:
        log.teardown()


if __name__ == "__main__":
    sys.exit(main())
