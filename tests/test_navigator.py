"""Tests for svg_adapter.navigator module."""

import pytest
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from svg_adapter.exceptions import InvalidMutationError
from svg_adapter.navigator import is_ancestor, iter_tree, splice, traverse
from svg_adapter.node import Node


def element(name: str, *children: dict, **attributes: str) -> dict:
    """Build a raw XAST element."""
    return {
        "type": "element",
        "name": name,
        "attributes": attributes,
        "children": list(children),
    }


@pytest.fixture
def root() -> Node:
    return Node.from_xast(
        {
            "type": "root",
            "children": [
                element(
                    "svg",
                    element("g", element("path", id="p1"), element("rect", id="r1")),
                    element("path", id="p2"),
                    {"type": "text", "value": "x"},
                )
            ],
        }
    )


def names(nodes) -> list[str]:
    return [n.attr("id").value if n.attr("id") else n.name or n.kind for n in nodes]


def check_parents(node: Node) -> None:
    """Assert every child in the subtree points back to its holder."""
    for child in node.children:
        assert child.parent is node
        assert sum(1 for c in node.children if c is child) == 1
        check_parents(child)


class TestTraverse:
    """Tests for traverse and iter_tree."""

    def test_pre_order(self, root):
        visited = []
        traverse(root, visited.append)
        assert names(visited) == ["root", "svg", "g", "p1", "r1", "p2", "text"]

    def test_iter_tree_matches_traverse(self, root):
        visited = []
        traverse(root, visited.append)
        assert list(iter_tree(root)) == visited

    def test_restartable(self, root):
        assert list(iter_tree(root)) == list(iter_tree(root))

    def test_subtree(self, root):
        group = root.children[0].children[0]
        assert names(iter_tree(group)) == ["g", "p1", "r1"]

    def test_single_node(self):
        node = Node(name="path")
        assert list(iter_tree(node)) == [node]

    def test_deeper_than_recursion_limit(self):
        top = Node(name="g")
        node = top
        for _ in range(sys.getrecursionlimit() + 500):
            child = Node(name="g")
            splice(node, 0, 0, child)
            node = child
        assert len(list(iter_tree(top))) == sys.getrecursionlimit() + 501


class TestIsAncestor:
    """Tests for is_ancestor function."""

    def test_self(self, root):
        assert is_ancestor(root, root) is True

    def test_ancestor(self, root):
        path = root.children[0].children[0].children[0]
        assert is_ancestor(root, path) is True
        assert is_ancestor(path, root) is False


class TestSplice:
    """Tests for splice function."""

    def test_replace_range(self, root):
        svg = root.children[0]
        before = list(svg.children)
        new_a = Node(name="circle")
        new_b = Node(name="ellipse")

        removed = splice(svg, 1, 1, [new_a, new_b])

        assert removed == [before[1]]
        assert svg.children == [before[0], new_a, new_b, before[2]]
        assert new_a.parent is svg
        assert new_b.parent is svg
        assert before[1].parent is None
        check_parents(root)

    def test_pure_insertion(self, root):
        svg = root.children[0]
        before = list(svg.children)
        new = Node(name="circle")
        assert splice(svg, 0, 0, new) == []
        assert svg.children == [new] + before
        assert new.parent is svg

    def test_pure_deletion(self, root):
        svg = root.children[0]
        before = list(svg.children)
        removed = splice(svg, 0, 2, [])
        assert removed == before[:2]
        assert svg.children == before[2:]
        assert all(node.parent is None for node in removed)

    def test_start_past_end_appends(self, root):
        svg = root.children[0]
        new = Node(name="circle")
        splice(svg, 100, 5, new)
        assert svg.children[-1] is new
        assert len(svg.children) == 4

    def test_negative_start_counts_from_end(self, root):
        svg = root.children[0]
        before = list(svg.children)
        new = Node(name="circle")
        splice(svg, -1, 1, new)
        assert svg.children == [before[0], before[1], new]

    def test_count_past_end_is_clamped(self, root):
        svg = root.children[0]
        first = svg.children[0]
        removed = splice(svg, 1, 99)
        assert len(removed) == 2
        assert svg.children == [first]

    def test_nested_lists_flattened_and_empties_dropped(self, root):
        group = root.children[0].children[0]
        a, b, c = Node(name="a"), Node(name="b"), Node(name="c")
        splice(group, 2, 0, [[a, b], None, [], [c]])
        assert [n.name for n in group.children] == ["path", "rect", "a", "b", "c"]
        check_parents(root)

    def test_none_items(self, root):
        group = root.children[0].children[0]
        splice(group, 0, 1, None)
        assert [n.name for n in group.children] == ["rect"]

    def test_raw_mapping_is_wrapped(self, root):
        group = root.children[0].children[0]
        splice(group, 0, 0, element("circle", element("title"), r="4"))
        circle = group.children[0]
        assert isinstance(circle, Node)
        assert circle.attr("r").value == "4"
        assert circle.parent is group
        assert circle.children[0].parent is circle

    def test_move_between_parents(self, root):
        svg = root.children[0]
        group = svg.children[0]
        p2 = svg.children[1]

        splice(group, 0, 0, p2)

        assert p2.parent is group
        assert p2 not in svg.children
        assert group.children[0] is p2
        check_parents(root)

    def test_move_within_parent(self, root):
        group = root.children[0].children[0]
        path, rect = group.children
        splice(group, 0, 0, rect)
        assert group.children == [rect, path]
        check_parents(root)

    def test_reinsert_removed_node(self, root):
        group = root.children[0].children[0]
        path, rect = group.children
        removed = splice(group, 0, 2, [rect, path])
        assert removed == []
        assert group.children == [rect, path]
        assert path.parent is group
        assert rect.parent is group

    def test_negative_count_rejected(self, root):
        with pytest.raises(InvalidMutationError):
            splice(root, 0, -1)

    def test_cycle_rejected(self, root):
        svg = root.children[0]
        group = svg.children[0]
        with pytest.raises(InvalidMutationError):
            splice(group, 0, 0, svg)
        with pytest.raises(InvalidMutationError):
            splice(group, 0, 0, group)
        check_parents(root)

    def test_duplicate_rejected(self, root):
        new = Node(name="circle")
        with pytest.raises(InvalidMutationError):
            splice(root, 0, 0, [new, new])

    @pytest.mark.parametrize("bad", ["path", 42, [42]])
    def test_invalid_item_rejected(self, root, bad):
        before = list(root.children)
        with pytest.raises(InvalidMutationError):
            splice(root, 0, 0, bad)
        assert root.children == before
