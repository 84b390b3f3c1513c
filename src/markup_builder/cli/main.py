"""Main CLI entry point for the markup-builder command-line tool.

Renders JSON tree descriptions to markup files and exposes the escaping
helpers for quick shell use.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from markup_builder import __version__
from markup_builder.api import TreeSpecError, load_tree_file, render_tree
from markup_builder.character import escape, unescape
from markup_builder.shared.config import BuilderConfig, ConfigError
from markup_builder.shared.logging import get_logger
from markup_builder.tree import MarkupTreeError, NodeArena

logger = get_logger(__name__, None, "cli")


def decode_separator(value: str) -> str:
    r"""Turn backslash escapes such as ``\n`` or ``\t`` into real characters."""
    try:
        # Only backslash escapes are decoded; other characters pass through
        return value.encode("latin-1", "backslashreplace").decode("unicode_escape")
    except UnicodeDecodeError as e:
        raise argparse.ArgumentTypeError(f"Invalid separator escape: {e}") from e


def load_config(args: argparse.Namespace) -> BuilderConfig:
    """Resolve the configuration from --config, --pretty and --separator."""
    config = BuilderConfig()
    if getattr(args, "config", None):
        config = BuilderConfig.from_json(args.config.read_text(encoding="utf-8"))
    if getattr(args, "pretty", False):
        config = config.override(render__separator="\n", render__trailing_newline=True)
    if getattr(args, "separator", None) is not None:
        config = config.override(render__separator=args.separator)
    return config


def create_argument_parser() -> argparse.ArgumentParser:
    """Create the main argument parser."""
    parser = argparse.ArgumentParser(
        prog="markup-builder",
        description="Build and render markup trees from JSON descriptions"
    )

    parser.add_argument("--version", action="version", version=__version__)

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Render command
    render_parser = subparsers.add_parser("render", help="Render a JSON tree description")
    render_parser.add_argument(
        "tree",
        type=Path,
        help="JSON file describing the tree"
    )
    render_parser.add_argument(
        "--separator", "-s",
        type=decode_separator,
        help="Separator between fragments; backslash escapes allowed (default: none)"
    )
    render_parser.add_argument(
        "--pretty", "-p",
        action="store_true",
        help="Put each fragment on its own line"
    )
    render_parser.add_argument(
        "--output", "-o",
        type=Path,
        help="Output file (default: stdout)"
    )
    render_parser.add_argument(
        "--config", "-c",
        type=Path,
        help="Configuration file path"
    )
    render_parser.add_argument(
        "--stats",
        action="store_true",
        help="Print render statistics as JSON to stderr"
    )

    # Escape / unescape commands
    escape_parser = subparsers.add_parser("escape", help="Escape reserved characters")
    escape_parser.add_argument("text", help="Text to escape")

    unescape_parser = subparsers.add_parser("unescape", help="Unescape named entities")
    unescape_parser.add_argument("text", help="Text to unescape")

    # Global options
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output"
    )
    parser.add_argument(
        "--quiet", "-q",
        action="store_true",
        help="Quiet output"
    )

    return parser


def cmd_render(args: argparse.Namespace) -> int:
    """Handle render command."""
    if not args.tree.exists():
        print(f"File not found: {args.tree}", file=sys.stderr)
        return 1

    try:
        config = load_config(args)
    except (ConfigError, OSError) as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return 1

    if not (args.verbose or args.quiet):
        logging.getLogger("markup_builder").setLevel(config.global_.logging_level)

    try:
        root = load_tree_file(args.tree, NodeArena(config.tree))
        result = render_tree(root, config=config)
    except (TreeSpecError, MarkupTreeError) as e:
        logger.error("Failed to render tree", extra={"file": str(args.tree)}, exc_info=False)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    for diagnostic in result.diagnostics:
        print(f"{diagnostic.severity.name}: {diagnostic.message}", file=sys.stderr)

    if args.output:
        try:
            args.output.parent.mkdir(parents=True, exist_ok=True)
            args.output.write_text(result.output, encoding="utf-8")
        except OSError as e:
            print(f"Error writing output: {e}", file=sys.stderr)
            return 1
        if not args.quiet:
            print(f"Rendered {result.node_count} nodes to {args.output}", file=sys.stderr)
    else:
        sys.stdout.write(result.output)
        if not result.output.endswith("\n"):
            sys.stdout.write("\n")

    if args.stats:
        print(json.dumps({
            "node_count": result.node_count,
            "output_size_bytes": result.performance.output_size_bytes,
            "memory_used_bytes": result.performance.memory_used_bytes,
            "processing_time_ms": round(result.processing_time_ms, 3),
        }), file=sys.stderr)

    return 0


def cmd_escape(args: argparse.Namespace) -> int:
    """Handle escape command."""
    print(escape(args.text))
    return 0


def cmd_unescape(args: argparse.Namespace) -> int:
    """Handle unescape command."""
    print(unescape(args.text))
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)
    elif args.quiet:
        logging.basicConfig(level=logging.ERROR)

    try:
        if args.command == "render":
            return cmd_render(args)
        elif args.command == "escape":
            return cmd_escape(args)
        elif args.command == "unescape":
            return cmd_unescape(args)
        else:
            print(f"Unknown command: {args.command}", file=sys.stderr)
            return 1

    except KeyboardInterrupt:
        print("\nOperation interrupted by user", file=sys.stderr)
        return 130


if __name__ == "__main__":
    sys.exit(main())
