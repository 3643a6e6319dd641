"""Tests for svg_adapter.selector module."""

import pytest
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from svg_adapter.navigator import splice
from svg_adapter.node import Node
from svg_adapter.selector import (
    AnyOfSelector,
    AttributeSelector,
    NoMatchSelector,
    TagSelector,
    is_supported,
    matches,
    parse_selector,
    query_selector,
    query_selector_all,
    split_alternatives,
    unsupported_parts,
)


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
    """Three paths and two rects, mixed in document order."""
    return Node.from_xast(
        {
            "type": "root",
            "children": [
                element(
                    "svg",
                    element("path", id="p1", fill="url(#grad1)"),
                    element(
                        "g",
                        element("rect", id="r1", fill="url(#grad1)"),
                        element("path", id="p2", fill="url(#grad2)"),
                    ),
                    element("rect", id="r2"),
                    element("path", id="p3", fill="url(#grad1)"),
                    {"type": "text", "value": "path"},
                )
            ],
        }
    )


def ids(nodes) -> list[str]:
    return [node.attr("id").value for node in nodes]


class TestParseSelector:
    """Tests for parse_selector function."""

    def test_tag(self):
        assert parse_selector("path") == TagSelector("path")

    def test_prefixed_tag(self):
        assert parse_selector("svg:path") == TagSelector("svg:path")

    def test_attribute_with_tag(self):
        assert parse_selector('path[fill="url(#grad1)"]') == AttributeSelector(
            tag="path", attribute="fill", value="url(#grad1)"
        )

    def test_attribute_without_tag(self):
        assert parse_selector('[xlink:href="#a"]') == AttributeSelector(
            tag=None, attribute="xlink:href", value="#a"
        )

    def test_alternation(self):
        assert parse_selector("path, rect") == AnyOfSelector(
            (TagSelector("path"), TagSelector("rect"))
        )

    def test_surrounding_whitespace(self):
        assert parse_selector("  path ") == TagSelector("path")

    @pytest.mark.parametrize(
        "selector",
        ["", "#id", ".cls", "g path", "g > path", "path:nth-child(2)", "path[fill]",
         "path[fill='x']", 'path[fill=""]', "*"],
    )
    def test_unsupported(self, selector):
        assert isinstance(parse_selector(selector), NoMatchSelector)

    def test_split_ignores_commas_in_values(self):
        assert split_alternatives('path[d="M0,0 L1,1"], rect') == [
            'path[d="M0,0 L1,1"]',
            "rect",
        ]


class TestSupportedSelectors:
    """Tests for is_supported and unsupported_parts."""

    @pytest.mark.parametrize("selector", ["path", 'path[fill="red"]', "path, g > rect"])
    def test_supported(self, selector):
        assert is_supported(selector) is True

    @pytest.mark.parametrize("selector", ["", "#id", "g > path, .cls", "*, path[fill]"])
    def test_unsupported(self, selector):
        assert is_supported(selector) is False

    def test_unsupported_parts_of_list(self):
        assert unsupported_parts("#a, path, .b") == ["#a", ".b"]

    def test_unsupported_parts_single(self):
        assert unsupported_parts("g path") == ["g path"]
        assert unsupported_parts("rect") == []

    def test_accepts_parsed_selector(self):
        assert is_supported(parse_selector("#a, .b")) is False
        assert unsupported_parts(parse_selector("#a, .b")) == ["#a", ".b"]


class TestQuerySelectorAll:
    """Tests for query_selector_all function."""

    def test_tag_in_document_order(self, root):
        assert ids(query_selector_all(root, "path")) == ["p1", "p2", "p3"]

    def test_attribute_exact(self, root):
        found = query_selector_all(root, 'path[fill="url(#grad1)"]')
        assert ids(found) == ["p1", "p3"]

    def test_attribute_without_tag(self, root):
        found = query_selector_all(root, '[fill="url(#grad1)"]')
        assert ids(found) == ["p1", "r1", "p3"]

    def test_alternation_in_document_order(self, root):
        found = query_selector_all(root, "path, rect")
        assert ids(found) == ["p1", "r1", "p2", "r2", "p3"]

    def test_alternation_with_attribute(self, root):
        found = query_selector_all(root, 'rect, path[fill="url(#grad2)"]')
        assert ids(found) == ["r1", "p2", "r2"]

    def test_includes_subtree_root(self, root):
        group = query_selector(root, "g")
        assert query_selector_all(group, "g") == [group]

    def test_text_nodes_never_match(self, root):
        assert all(node.kind == "element" for node in query_selector_all(root, "path"))

    def test_unsupported_matches_nothing(self, root):
        assert query_selector_all(root, "g path") == []

    def test_idempotent(self, root):
        first = query_selector_all(root, "path, rect")
        second = query_selector_all(root, "path, rect")
        assert first == second

    def test_sees_mutations(self, root):
        svg = root.children[0]
        splice(svg, 0, 1)
        assert ids(query_selector_all(root, "path")) == ["p2", "p3"]

    def test_accepts_parsed_selector(self, root):
        assert ids(query_selector_all(root, TagSelector("rect"))) == ["r1", "r2"]


class TestQuerySelector:
    """Tests for query_selector function."""

    def test_first_match(self, root):
        assert query_selector(root, "rect").attr("id").value == "r1"

    def test_no_match(self, root):
        assert query_selector(root, "circle") is None

    def test_unsupported_returns_none(self, root):
        assert query_selector(root, "g > path") is None


class TestMatches:
    """Tests for matches function."""

    def test_single_node(self):
        node = Node(name="path", attributes={"fill": "none"})
        assert matches(node, "path") is True
        assert matches(node, 'path[fill="none"]') is True
        assert matches(node, 'rect[fill="none"]') is False

    def test_nameless_root_never_matches(self):
        root = Node(kind="root", attributes={"fill": "none"})
        assert matches(root, '[fill="none"]') is False
