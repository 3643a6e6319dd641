"""Namespace helpers for SVG tag and attribute names."""

from xml.etree import ElementTree as ET

# SVG namespace mappings
SVG_NAMESPACES = {
    "svg": "http://www.w3.org/2000/svg",
    "inkscape": "http://www.inkscape.org/namespaces/inkscape",
    "sodipodi": "http://sodipodi.sourceforge.net/DTD/sodipodi-0.dtd",
    "xlink": "http://www.w3.org/1999/xlink",
}

XML_NAMESPACE = "http://www.w3.org/XML/1998/namespace"

# Namespace URI -> prefix used in qualified names. SVG itself is the
# default namespace and gets no prefix.
NAMESPACE_PREFIXES = {
    uri: prefix for prefix, uri in SVG_NAMESPACES.items() if prefix != "svg"
}
NAMESPACE_PREFIXES[XML_NAMESPACE] = "xml"


def register_namespaces() -> None:
    """Register SVG namespaces to preserve prefixes when parsing."""
    for prefix, uri in SVG_NAMESPACES.items():
        ET.register_namespace(prefix, uri)


def get_local_name(tag: str) -> str:
    """Extract local name from a namespaced or prefixed tag.

    Example:
        >>> get_local_name("{http://www.w3.org/2000/svg}rect")
        'rect'
        >>> get_local_name("inkscape:label")
        'label'
    """
    if tag.startswith("{"):
        return tag.split("}", 1)[1]
    return tag.rpartition(":")[2]


def qualify_name(tag: str) -> str:
    """Convert an ElementTree tag into a prefixed qualified name.

    Known namespaces become their usual prefix, the SVG namespace is
    dropped, unknown namespaces keep the ``{uri}local`` form.

    Example:
        >>> qualify_name("{http://www.w3.org/1999/xlink}href")
        'xlink:href'
        >>> qualify_name("{http://www.w3.org/2000/svg}path")
        'path'
    """
    if not tag.startswith("{"):
        return tag
    uri, local = tag[1:].split("}", 1)
    if uri == SVG_NAMESPACES["svg"]:
        return local
    prefix = NAMESPACE_PREFIXES.get(uri)
    if prefix is None:
        return tag
    return f"{prefix}:{local}"
