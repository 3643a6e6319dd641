"""Build raw XAST mappings from SVG markup using ElementTree."""

import logging
from pathlib import Path
from typing import Any
from xml.etree import ElementTree as ET

from .adapter import LegacyNode, wrap_xast
from .exceptions import XastParseError
from .utils import qualify_name, register_namespaces

logger = logging.getLogger(__name__)


def _text_node(text: str | None) -> dict[str, Any] | None:
    if text is None or not text.strip():
        return None
    return {"type": "text", "value": text}


def element_to_xast(element: ET.Element) -> dict[str, Any]:
    """Convert an ElementTree element and its subtree to an XAST mapping.

    Tag and attribute names are qualified with their usual prefixes
    (``xlink:href``, ``inkscape:label``). Text that is not pure whitespace
    becomes ``text`` nodes; comments and processing instructions are
    dropped by the parser.
    """
    result = _element_fields(element)
    stack = [(element, result)]
    while stack:
        current, data = stack.pop()
        children = data["children"]
        leading = _text_node(current.text)
        if leading:
            children.append(leading)

        for child in current:
            if isinstance(child.tag, str):
                child_data = _element_fields(child)
                children.append(child_data)
                stack.append((child, child_data))
            tail = _text_node(child.tail)
            if tail:
                children.append(tail)

    return result


def _element_fields(element: ET.Element) -> dict[str, Any]:
    """XAST mapping for one element, with an empty children list."""
    return {
        "type": "element",
        "name": qualify_name(element.tag),
        "attributes": {
            qualify_name(name): value for name, value in element.attrib.items()
        },
        "children": [],
    }


def parse_svg_string(svg: str | bytes) -> dict[str, Any]:
    """Parse SVG markup into a root XAST mapping.

    Raises:
        XastParseError: If the markup is empty or not well-formed XML.
    """
    if not svg or not svg.strip():
        raise XastParseError("SVG source is empty")

    register_namespaces()
    try:
        element = ET.fromstring(svg)
    except ET.ParseError as e:
        raise XastParseError(f"Failed to parse SVG: {e}") from e

    logger.debug("Parsed SVG root <%s>", qualify_name(element.tag))
    return {"type": "root", "children": [element_to_xast(element)]}


def load_svg(file_path: Path) -> dict[str, Any]:
    """Read and parse an SVG file into a root XAST mapping.

    Raises:
        FileNotFoundError: If the file does not exist.
        XastParseError: If the file is not valid XML.
    """
    data = Path(file_path).read_bytes()
    try:
        return parse_svg_string(data)
    except XastParseError as e:
        raise XastParseError(f"{file_path}: {e}") from e


def parse_svg(svg: str | bytes) -> LegacyNode:
    """Parse SVG markup and wrap it as a LegacyNode tree."""
    return wrap_xast(parse_svg_string(svg))


def load_svg_tree(file_path: Path) -> LegacyNode:
    """Load an SVG file and wrap it as a LegacyNode tree."""
    return wrap_xast(load_svg(file_path))
