"""Restricted CSS selector engine.

Supported forms:

    path                      tag name
    path[fill="url(#g1)"]     tag with exact attribute value
    [fill="none"]             exact attribute value on any element
    path, rect                alternation of any of the above

There are no combinators, pseudo-classes or escapes. A selector that does
not fit one of these forms is not an error: it simply matches nothing.
"""

import re
from dataclasses import dataclass
from functools import lru_cache

from .navigator import iter_tree
from .node import Node

NAME_PATTERN = r"[A-Za-z0-9_:\-]+"
TAG_RE = re.compile(rf"^{NAME_PATTERN}$")
ATTRIBUTE_RE = re.compile(rf'^({NAME_PATTERN})?\[({NAME_PATTERN})="([^"]+)"\]$')


@dataclass(frozen=True)
class TagSelector:
    """Matches elements by exact tag name."""

    name: str

    def matches(self, node: Node) -> bool:
        return node.is_element and node.name == self.name


@dataclass(frozen=True)
class AttributeSelector:
    """Matches elements whose attribute has an exact value."""

    tag: str | None
    attribute: str
    value: str

    def matches(self, node: Node) -> bool:
        if not node.is_element:
            return False
        if self.tag is not None and node.name != self.tag:
            return False
        return node.has_attr(self.attribute, self.value)


@dataclass(frozen=True)
class AnyOfSelector:
    """Matches when any alternative matches."""

    alternatives: tuple["Selector", ...]

    def matches(self, node: Node) -> bool:
        return any(alt.matches(node) for alt in self.alternatives)


@dataclass(frozen=True)
class NoMatchSelector:
    """Selector outside the supported grammar."""

    source: str

    def matches(self, node: Node) -> bool:
        return False


Selector = TagSelector | AttributeSelector | AnyOfSelector | NoMatchSelector


def split_alternatives(selector: str) -> list[str]:
    """Split a selector at commas that are not inside brackets or quotes.

    Example:
        >>> split_alternatives('path, [d="M0,0"]')
        ['path', '[d="M0,0"]']
    """
    parts: list[str] = []
    current: list[str] = []
    depth = 0
    in_quotes = False
    for char in selector:
        if char == '"':
            in_quotes = not in_quotes
        elif not in_quotes and char == "[":
            depth += 1
        elif not in_quotes and char == "]":
            depth = max(depth - 1, 0)
        elif char == "," and depth == 0 and not in_quotes:
            parts.append("".join(current).strip())
            current = []
            continue
        current.append(char)
    parts.append("".join(current).strip())
    return parts


def _parse_simple(selector: str) -> Selector:
    if TAG_RE.match(selector):
        return TagSelector(selector)

    match = ATTRIBUTE_RE.match(selector)
    if match:
        tag, attribute, value = match.groups()
        return AttributeSelector(tag=tag, attribute=attribute, value=value)

    return NoMatchSelector(selector)


@lru_cache(maxsize=256)
def parse_selector(selector: str) -> Selector:
    """Parse a selector string into a matcher.

    Args:
        selector: Selector text.

    Returns:
        A selector variant; NoMatchSelector for unsupported syntax.
    """
    selector = selector.strip()
    alternatives = split_alternatives(selector)
    if len(alternatives) == 1:
        return _parse_simple(alternatives[0])
    return AnyOfSelector(tuple(_parse_simple(alt) for alt in alternatives))


def unsupported_parts(selector: str | Selector) -> list[str]:
    """Source text of every alternative outside the supported grammar.

    Example:
        >>> unsupported_parts("path, g > rect")
        ['g > rect']
    """
    if isinstance(selector, str):
        selector = parse_selector(selector)
    if isinstance(selector, AnyOfSelector):
        alternatives = selector.alternatives
    else:
        alternatives = (selector,)
    return [alt.source for alt in alternatives if isinstance(alt, NoMatchSelector)]


def is_supported(selector: str | Selector) -> bool:
    """True when at least one alternative can match something."""
    if isinstance(selector, str):
        selector = parse_selector(selector)
    if isinstance(selector, AnyOfSelector):
        return any(is_supported(alt) for alt in selector.alternatives)
    return not isinstance(selector, NoMatchSelector)


def matches(node: Node, selector: str | Selector) -> bool:
    """Check whether a single node matches a selector."""
    if isinstance(selector, str):
        selector = parse_selector(selector)
    return selector.matches(node)


def query_selector_all(root: Node, selector: str | Selector) -> list[Node]:
    """Find all matching nodes in pre-order, root included."""
    if isinstance(selector, str):
        selector = parse_selector(selector)
    return [node for node in iter_tree(root) if selector.matches(node)]


def query_selector(root: Node, selector: str | Selector) -> Node | None:
    """Find the first matching node in pre-order, or None."""
    if isinstance(selector, str):
        selector = parse_selector(selector)
    for node in iter_tree(root):
        if selector.matches(node):
            return node
    return None
