"""Tree traversal and structural mutation for wrapped XAST trees."""

import logging
from collections.abc import Iterable, Mapping
from typing import Any, Callable, Iterator

from .exceptions import InvalidMutationError
from .node import Node

logger = logging.getLogger(__name__)

# Zero or more items to insert: a node, a raw XAST mapping, None, or a
# sequence of those nested at most one level deep.
SpliceItem = Node | Mapping[str, Any] | None
SpliceItems = SpliceItem | Iterable[SpliceItem | Iterable[SpliceItem]]


def traverse(node: Node, visit: Callable[[Node], object]) -> None:
    """Visit a node and then its descendants in pre-order.

    Args:
        node: Subtree root, visited first.
        visit: Callback invoked once per node.
    """
    for current in iter_tree(node):
        visit(current)


def iter_tree(node: Node) -> Iterator[Node]:
    """Yield a node and its descendants in pre-order.

    Each child list is copied before it is walked, so the sequence is the
    tree as it was when each node was reached.
    """
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(list(current.children)))


def is_ancestor(candidate: Node, node: Node | None) -> bool:
    """Check whether candidate is node itself or one of its ancestors."""
    while node is not None:
        if node is candidate:
            return True
        node = node.parent
    return False


def _flatten_items(parent: Node, items: SpliceItems) -> list[Node]:
    """Normalize splice input into a flat list of nodes."""
    if items is None:
        return []
    if isinstance(items, (Node, Mapping)):
        items = [items]
    elif isinstance(items, (str, bytes)) or not isinstance(items, Iterable):
        raise InvalidMutationError(
            f"Cannot insert {type(items).__name__} into <{parent.name}>"
        )

    flat: list[Node] = []
    for item in items:
        if item is None:
            continue
        if isinstance(item, (Node, Mapping)):
            flat.append(_as_node(parent, item))
            continue
        if isinstance(item, (str, bytes)) or not isinstance(item, Iterable):
            raise InvalidMutationError(
                f"Cannot insert {type(item).__name__} into <{parent.name}>"
            )
        for nested in item:
            if nested is None:
                continue
            if not isinstance(nested, (Node, Mapping)):
                raise InvalidMutationError(
                    f"Cannot insert {type(nested).__name__} into <{parent.name}>"
                )
            flat.append(_as_node(parent, nested))
    return flat


def _as_node(parent: Node, item: Node | Mapping[str, Any]) -> Node:
    if isinstance(item, Node):
        return item
    return type(parent).from_xast(item)


def _validate_items(parent: Node, nodes: list[Node]) -> None:
    seen: set[int] = set()
    for node in nodes:
        if id(node) in seen:
            raise InvalidMutationError(f"{node!r} is inserted more than once")
        seen.add(id(node))
        if is_ancestor(node, parent):
            raise InvalidMutationError(
                f"Cannot insert {node!r} into its own subtree"
            )


def _detach_from(old_parent: Node, node: Node) -> None:
    old_parent.children[:] = [c for c in old_parent.children if c is not node]


def splice(
    parent: Node,
    start: int,
    remove_count: int,
    items: SpliceItems = (),
) -> list[Node]:
    """Replace a run of children with new nodes.

    Removes ``remove_count`` children starting at ``start`` and inserts
    ``items`` at that position in the given order. Inserted nodes that
    still belong to another parent are detached from it first. Every
    inserted node has its parent set to ``parent``; removed nodes have
    their parent cleared.

    Args:
        parent: Node whose children are edited.
        start: Index of the first child to remove. Negative values count
            from the end; values past the end append.
        remove_count: Number of children to remove.
        items: Zero or more nodes or raw XAST mappings to insert.

    Returns:
        The removed nodes, in their former order.

    Raises:
        InvalidMutationError: If remove_count is negative, an item is not a
            node, a node is inserted twice, or the edit would create a cycle.
    """
    if remove_count < 0:
        raise InvalidMutationError(
            f"remove_count must be >= 0, got {remove_count}"
        )

    new_nodes = _flatten_items(parent, items)
    _validate_items(parent, new_nodes)

    children = parent.children
    if start < 0:
        start = max(len(children) + start, 0)
    start = min(start, len(children))
    end = min(start + remove_count, len(children))

    removed = children[start:end]
    incoming = {id(node) for node in new_nodes}

    # Detach nodes that currently live under a different parent.
    for node in new_nodes:
        old_parent = node.parent
        if old_parent is not None and old_parent is not parent:
            _detach_from(old_parent, node)

    before = [c for c in children[:start] if id(c) not in incoming]
    after = [c for c in children[end:] if id(c) not in incoming]
    children[:] = before + new_nodes + after

    for node in new_nodes:
        node.parent = parent
    for node in removed:
        if id(node) not in incoming:
            node.parent = None

    logger.debug(
        "Spliced <%s>: removed %d, inserted %d at %d",
        parent.name or parent.kind,
        len(removed),
        len(new_nodes),
        start,
    )
    return [node for node in removed if id(node) not in incoming]
