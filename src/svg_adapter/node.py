"""Node wrapper exposing the legacy element API over an XAST node."""

from typing import Any, Callable, Mapping, Sequence

from .attributes import AttributeMap, AttributeRecord
from .exceptions import InvalidMutationError

# Node kinds that take part in selector matching
ELEMENT_KINDS = frozenset(["element", "root"])

# Raw XAST node as produced by the parser boundary
RawNode = Mapping[str, Any]

AttributeInput = AttributeMap | Mapping[str, str] | None


def _resolve_attributes(attributes: AttributeInput) -> AttributeMap:
    """Turn the constructor's attribute input into a fresh AttributeMap."""
    if attributes is None:
        return AttributeMap()
    if isinstance(attributes, AttributeMap):
        return attributes.copy()
    return AttributeMap.from_mapping(attributes)


class Node:
    """One node of a wrapped XAST tree.

    A node owns its attributes and its children. ``parent`` is a plain
    back reference to the node holding this one in its ``children``; it is
    ``None`` for the root and for nodes that have been removed from the
    tree. Wrapping and export walk the tree with explicit stacks, so depth
    is not bounded by the interpreter's recursion limit.
    """

    def __init__(
        self,
        kind: str = "element",
        name: str = "",
        attributes: AttributeInput = None,
        children: Sequence["Node | RawNode"] = (),
        parent: "Node | None" = None,
        value: str | None = None,
    ) -> None:
        self.kind = kind
        self.name = name
        self.value = value
        self.attrs = _resolve_attributes(attributes)
        self.parent = parent
        self.children: list[Node] = []
        self._append_children(children)

    @classmethod
    def from_xast(cls, data: RawNode, parent: "Node | None" = None) -> "Node":
        """Wrap a raw XAST mapping and all of its descendants.

        Attributes are read from ``attributes`` (flat name -> value) or,
        when that key is absent, from ``attrs`` (prebuilt records).
        """
        node = cls._from_fields(data, parent)
        node._append_children(data.get("children") or ())
        return node

    @classmethod
    def _from_fields(cls, data: RawNode, parent: "Node | None") -> "Node":
        """Wrap a single raw node without its children."""
        if "attributes" in data:
            attributes: AttributeInput = data["attributes"]
        elif data.get("attrs") is not None:
            attributes = AttributeMap.from_records(data["attrs"])
        else:
            attributes = None
        return cls(
            kind=data.get("type") or "element",
            name=data.get("name") or "",
            attributes=attributes,
            parent=parent,
            value=data.get("value"),
        )

    def _append_children(self, children: Sequence["Node | RawNode"]) -> None:
        stack: list[tuple[Node, Sequence[Node | RawNode]]] = [(self, children)]
        while stack:
            node, items = stack.pop()
            for item in items:
                if isinstance(item, Node):
                    node._adopt(item)
                    continue
                child = type(node)._from_fields(item, parent=node)
                node.children.append(child)
                stack.append((child, item.get("children") or ()))

    def _adopt(self, child: "Node") -> None:
        """Move an existing node to the end of this node's children."""
        ancestor: Node | None = self
        while ancestor is not None:
            if ancestor is child:
                raise InvalidMutationError(
                    f"Cannot adopt {child!r} into its own subtree"
                )
            ancestor = ancestor.parent
        old_parent = child.parent
        if old_parent is not None:
            old_parent.children[:] = [c for c in old_parent.children if c is not child]
        child.parent = self
        self.children.append(child)

    @property
    def is_element(self) -> bool:
        """True for nodes that selectors can match."""
        if self.kind == "element":
            return True
        return self.kind in ELEMENT_KINDS and bool(self.name)

    def is_empty(self) -> bool:
        return not self.children

    def rename_elem(self, new_name: str) -> "Node":
        self.name = new_name
        return self

    # Legacy attribute accessors

    def has_attr(self, name: str, value: str | None = None) -> bool:
        return self.attrs.has(name, value)

    def attr(self, name: str) -> AttributeRecord | None:
        return self.attrs.get(name)

    def add_attr(self, record: AttributeRecord) -> AttributeRecord:
        """Store a full attribute record under its own qualified name."""
        self.attrs.set_record(record)
        return record

    def remove_attr(self, name: str) -> None:
        self.attrs.remove(name)

    def each_attr(self, visit: Callable[[AttributeRecord], object]) -> None:
        self.attrs.for_each(visit)

    def _export_fields(self) -> dict[str, Any]:
        data: dict[str, Any] = {"type": self.kind}
        if self.kind in ELEMENT_KINDS:
            if self.name:
                data["name"] = self.name
            data["attributes"] = self.attrs.to_dict()
        if self.value is not None:
            data["value"] = self.value
        if self.kind in ELEMENT_KINDS or self.children:
            data["children"] = []
        return data

    def to_xast(self) -> dict[str, Any]:
        """Export this subtree as a fresh raw XAST mapping."""
        result = self._export_fields()
        stack: list[tuple[Node, dict[str, Any]]] = [(self, result)]
        while stack:
            node, data = stack.pop()
            for child in node.children:
                child_data = child._export_fields()
                data["children"].append(child_data)
                stack.append((child, child_data))
        return result

    def __repr__(self) -> str:
        if self.is_element:
            return f"<{type(self).__name__} {self.name} attrs={len(self.attrs)}>"
        return f"<{type(self).__name__} {self.kind}>"
