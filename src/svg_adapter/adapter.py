"""Legacy plugin-facing node API and the XAST construction boundary."""

import logging
from typing import Any, Callable, Mapping

from . import navigator, selector
from .exceptions import XastParseError
from .node import Node

logger = logging.getLogger(__name__)


class LegacyNode(Node):
    """Node with the query and mutation methods legacy plugins call."""

    def query_selector_all(self, sel: str) -> list["LegacyNode"]:
        return selector.query_selector_all(self, sel)

    def query_selector(self, sel: str) -> "LegacyNode | None":
        return selector.query_selector(self, sel)

    def matches(self, sel: str) -> bool:
        return selector.matches(self, sel)

    def traverse(self, visit: Callable[[Node], object]) -> None:
        navigator.traverse(self, visit)

    def splice_content(
        self,
        start: int,
        remove_count: int,
        items: navigator.SpliceItems = (),
    ) -> list[Node]:
        return navigator.splice(self, start, remove_count, items)

    def index_in_parent(self) -> int | None:
        """Position of this node among its parent's children."""
        parent = self.parent
        if parent is None:
            return None
        for index, child in enumerate(parent.children):
            if child is self:
                return index
        return None

    def detach(self) -> "LegacyNode":
        """Remove this node from its parent."""
        parent = self.parent
        index = self.index_in_parent()
        if parent is not None and index is not None:
            navigator.splice(parent, index, 1)
        return self


def wrap_xast(data: Mapping[str, Any] | None) -> LegacyNode:
    """Wrap a raw XAST root produced by an external parser.

    Args:
        data: Root XAST mapping, or None when the parser produced nothing.

    Returns:
        Root LegacyNode of a deep-wrapped tree.

    Raises:
        XastParseError: If no tree was produced.
    """
    if data is None:
        raise XastParseError("Parser produced no tree")
    if not isinstance(data, Mapping):
        raise XastParseError(
            f"Expected an XAST mapping, got {type(data).__name__}"
        )
    root = LegacyNode.from_xast(data)
    logger.debug(
        "Wrapped XAST %s with %d top-level children", root.kind, len(root.children)
    )
    return root
