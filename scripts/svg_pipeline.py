#!/usr/bin/env python3
"""Run tree plugins from a YAML rule file against an SVG file."""

import argparse
import logging
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from svg_adapter.exceptions import XastParseError
from svg_adapter.pipeline import (
    PLUGINS,
    format_pipeline_report,
    parse_pipeline_rule_file,
    run_pipeline,
)
from svg_adapter.xast import load_svg_tree


def parse_steps(steps_arg: str | None) -> list[str] | None:
    """Parse steps argument.

    Args:
        steps_arg: Comma-separated plugin names or 'all'.

    Returns:
        List of plugin names to execute, or None for all.

    Raises:
        ValueError: If invalid plugin name is provided.
    """
    if steps_arg is None or steps_arg.lower() == "all":
        return None

    steps: list[str] = []
    for step in steps_arg.split(","):
        step = step.strip().lower()
        if step not in PLUGINS:
            valid_steps = ", ".join(PLUGINS)
            raise ValueError(f"Invalid step '{step}'. Valid steps: {valid_steps}, all")
        steps.append(step)

    return steps


def main() -> int:
    """Main entry point.

    Returns:
        Exit code:
        - 0: Success
        - 1: I/O or parse error
        - 2: Rule file error
        - 3: Plugin errors detected
    """
    parser = argparse.ArgumentParser(
        description="Run tree plugins from a YAML rule file against an SVG file.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run every configured plugin and print the report
  %(prog)s input.svg --rule plugins.yaml

  # Run specific plugins only
  %(prog)s input.svg --rule plugins.yaml --steps remove_elements,default_fill
""",
    )
    parser.add_argument("svg_file", type=Path, help="Path to SVG file to process")
    parser.add_argument(
        "--rule", "-r", type=Path, required=True, help="Path to YAML rule file"
    )
    parser.add_argument(
        "--steps",
        "-s",
        type=str,
        default="all",
        help="Plugins to run, comma separated, or 'all' (default: all)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    args = parser.parse_args()
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    if not args.svg_file.exists():
        print(f"Error: SVG file not found: {args.svg_file}", file=sys.stderr)
        return 1

    if not args.rule.exists():
        print(f"Error: Rule file not found: {args.rule}", file=sys.stderr)
        return 1

    try:
        steps = parse_steps(args.steps)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    try:
        rule = parse_pipeline_rule_file(args.rule)
    except Exception as e:
        print(f"Error: Failed to parse rule file: {e}", file=sys.stderr)
        return 2

    try:
        root = load_svg_tree(args.svg_file)
    except XastParseError as e:
        print(f"Error: Failed to parse SVG: {e}", file=sys.stderr)
        return 1

    report = run_pipeline(root, rule, steps=steps)
    report.source = str(args.svg_file)
    print(format_pipeline_report(report))

    if report.has_errors:
        return 3

    return 0


if __name__ == "__main__":
    sys.exit(main())
