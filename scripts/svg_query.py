#!/usr/bin/env python3
"""Run a selector against an SVG file and list the matching elements."""

import argparse
import json
import logging
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from svg_adapter.adapter import LegacyNode
from svg_adapter.exceptions import XastParseError
from svg_adapter.selector import is_supported, unsupported_parts
from svg_adapter.xast import load_svg_tree


def describe(node: LegacyNode) -> str:
    """One-line description of a matched element."""
    attrs = " ".join(f'{r.name}="{r.value}"' for r in node.attrs)
    return f"<{node.name} {attrs}>" if attrs else f"<{node.name}>"


def main() -> int:
    """Main entry point.

    Returns:
        Exit code:
        - 0: At least one match
        - 1: I/O or parse error
        - 3: No matches
    """
    parser = argparse.ArgumentParser(
        description="Run a selector against an SVG file and list the matching elements.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s icon.svg path
  %(prog)s icon.svg 'path[fill="url(#grad1)"]'
  %(prog)s icon.svg 'path, rect' --format json
""",
    )
    parser.add_argument("svg_file", type=Path, help="Path to SVG file to query")
    parser.add_argument("selector", help="Selector (tag, tag[attr=\"value\"], comma list)")
    parser.add_argument(
        "-f",
        "--format",
        choices=["text", "json"],
        default="text",
        help="Output format (default: text)",
    )
    parser.add_argument("--first", action="store_true", help="Only print the first match")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    args = parser.parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    if not args.svg_file.exists():
        print(f"Error: SVG file not found: {args.svg_file}", file=sys.stderr)
        return 1

    try:
        root = load_svg_tree(args.svg_file)
    except XastParseError as e:
        print(f"Error: Failed to parse SVG: {e}", file=sys.stderr)
        return 1

    for part in unsupported_parts(args.selector):
        print(f"Warning: unsupported selector: {part}", file=sys.stderr)
    if not is_supported(args.selector):
        print("Warning: selector cannot match any element", file=sys.stderr)

    if args.first:
        first = root.query_selector(args.selector)
        matches = [first] if first is not None else []
    else:
        matches = root.query_selector_all(args.selector)

    if args.format == "json":
        data = [{"name": n.name, "attributes": n.attrs.to_dict()} for n in matches]
        print(json.dumps(data, indent=2, ensure_ascii=False))
    else:
        for node in matches:
            print(describe(node))
        print(f"\n{len(matches)} match(es)")

    return 0 if matches else 3


if __name__ == "__main__":
    sys.exit(main())
