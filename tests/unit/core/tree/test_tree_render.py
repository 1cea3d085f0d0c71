from __future__ import annotations

"""
Unit tests for the stateless tree rendering helpers.
"""

from typing import List

from assetlib.core.tree.render import build_tree, flatten, node_path, render_tree
from assetlib.domain.models import ResourceNode


def _nodes() -> List[ResourceNode]:
    return [
        ResourceNode(id="1", name="Images"),
        ResourceNode(id="2", name="Documents"),
        ResourceNode(id="3", name="Web Assets", parent_id="1"),
        ResourceNode(id="4", name="Icons", parent_id="3", child_item_ids={"a", "b"}),
        ResourceNode(id="5", name="Orphan", parent_id="missing"),
    ]


def test_build_tree_nests_children() -> None:
    """TC-01: Nested shape with 'children' lists."""
    tree = build_tree(_nodes())

    assert [entry["id"] for entry in tree] == ["1", "2", "5"]
    images = tree[0]
    assert images["children"][0]["name"] == "Web Assets"
    assert images["children"][0]["children"][0]["items"] == ["a", "b"]


def test_dangling_parent_is_rendered_as_root() -> None:
    roots = [entry["name"] for entry in build_tree(_nodes())]

    assert "Orphan" in roots


def test_flatten_depths() -> None:
    depths = {node.id: depth for depth, node in flatten(_nodes())}

    assert depths == {"1": 0, "3": 1, "4": 2, "2": 0, "5": 0}


def test_node_path() -> None:
    assert node_path(_nodes(), "4") == "Images/Web Assets/Icons"
    assert node_path(_nodes(), "4", separator=" > ") == "Images > Web Assets > Icons"
    assert node_path(_nodes(), "unknown") == ""


def test_render_tree_connectors() -> None:
    """TC-02: Entries sorted by name with box-drawing connectors."""
    lines = render_tree(_nodes(), show_counts=True)

    assert lines == [
        "├── Documents (0)",
        "├── Images (0)",
        "│   └── Web Assets (0)",
        "│       └── Icons (2)",
        "└── Orphan (0)",
    ]


def test_render_tree_with_ids() -> None:
    lines = render_tree([ResourceNode(id="x", name="Solo")], show_ids=True)

    assert lines == ["└── Solo [x]"]
