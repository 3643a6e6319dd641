"""SVG Adapter - legacy node API over XAST trees, with selector queries."""

__version__ = "0.1.0"

from .attributes import AttributeMap, AttributeRecord, split_qualified_name
from .node import Node
from .navigator import iter_tree, splice, traverse
from .selector import (
    is_supported,
    parse_selector,
    query_selector,
    query_selector_all,
    unsupported_parts,
)
from .adapter import LegacyNode, wrap_xast
from .exceptions import InvalidAttributeError, InvalidMutationError, XastParseError
from .xast import load_svg_tree, parse_svg, parse_svg_string
from .pipeline import (
    PipelineReport,
    PipelineRule,
    format_pipeline_report,
    parse_pipeline_rule_file,
    run_pipeline,
)

__all__ = [
    # Attributes
    "AttributeMap",
    "AttributeRecord",
    "split_qualified_name",
    # Tree
    "Node",
    "LegacyNode",
    "wrap_xast",
    "iter_tree",
    "splice",
    "traverse",
    # Selectors
    "parse_selector",
    "query_selector",
    "query_selector_all",
    "is_supported",
    "unsupported_parts",
    # Parsing boundary
    "load_svg_tree",
    "parse_svg",
    "parse_svg_string",
    # Errors
    "InvalidAttributeError",
    "InvalidMutationError",
    "XastParseError",
    # Pipeline
    "PipelineReport",
    "PipelineRule",
    "format_pipeline_report",
    "parse_pipeline_rule_file",
    "run_pipeline",
]
