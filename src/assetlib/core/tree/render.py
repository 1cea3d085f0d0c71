from __future__ import annotations

"""
Tree Rendering Helpers.

Stateless reads over a flat node list: nested tree building, display-order
flattening, path resolution and ASCII rendering. None of these helpers
mutates nodes or enforces the acyclic invariant; that belongs to the engine.
"""

from typing import Any, Dict, List, Optional, Sequence, Set, Tuple

from assetlib.domain.models import ResourceNode

# -----------------------------------------------------------------------------
# PUBLIC API
# -----------------------------------------------------------------------------

def build_tree(nodes: Sequence[ResourceNode]) -> List[Dict[str, Any]]:
    """
    Nest a flat node list into ``{..., "children": [...]}`` dictionaries.

    Nodes whose parent is absent from ``nodes`` are treated as roots.

    Returns:
        List[Dict[str, Any]]: One entry per root, children in input order.
    """
    children, roots = _index(nodes)

    def _nest(node: ResourceNode, seen: Set[str]) -> Dict[str, Any]:
        seen.add(node.id)
        entry = node.to_dict()
        entry["children"] = [_nest(c, seen) for c in children.get(node.id, []) if c.id not in seen]
        return entry

    seen: Set[str] = set()
    return [_nest(root, seen) for root in roots]


def flatten(nodes: Sequence[ResourceNode]) -> List[Tuple[int, ResourceNode]]:
    """Return ``(depth, node)`` pairs in display order (pre-order)."""
    children, roots = _index(nodes)
    out: List[Tuple[int, ResourceNode]] = []
    seen: Set[str] = set()

    def _walk(node: ResourceNode, depth: int) -> None:
        seen.add(node.id)
        out.append((depth, node))
        for child in children.get(node.id, []):
            if child.id not in seen:
                _walk(child, depth + 1)

    for root in roots:
        _walk(root, 0)
    return out


def node_path(nodes: Sequence[ResourceNode], node_id: str, separator: str = "/") -> str:
    """
    Join the names from the root down to ``node_id``.

    Returns an empty string when ``node_id`` is unknown.
    """
    by_id = {n.id: n for n in nodes}
    names: List[str] = []
    seen: Set[str] = set()
    current: Optional[str] = node_id
    while current is not None and current in by_id and current not in seen:
        seen.add(current)
        names.append(by_id[current].name)
        current = by_id[current].parent_id
    return separator.join(reversed(names))


def render_tree(nodes: Sequence[ResourceNode], *, show_ids: bool = False, show_counts: bool = False) -> List[str]:
    """
    Render the hierarchy as ASCII lines using ``├──``/``└──`` connectors.

    Args:
        nodes: Flat node list.
        show_ids: Append ``[id]`` to each entry.
        show_counts: Append the number of member items.

    Returns:
        List[str]: One line per node.
    """
    children, roots = _index(nodes)
    lines: List[str] = []
    _render_level(roots, children, lines, "", set(), show_ids, show_counts)
    return lines


# -----------------------------------------------------------------------------
# PRIVATE HELPERS
# -----------------------------------------------------------------------------

def _index(nodes: Sequence[ResourceNode]) -> Tuple[Dict[str, List[ResourceNode]], List[ResourceNode]]:
    """Group nodes by parent and collect the roots (including dangling ones)."""
    known = {n.id for n in nodes}
    children: Dict[str, List[ResourceNode]] = {}
    roots: List[ResourceNode] = []
    for node in nodes:
        if node.parent_id is None or node.parent_id not in known:
            roots.append(node)
        else:
            children.setdefault(node.parent_id, []).append(node)
    return children, roots


def _label(node: ResourceNode, show_ids: bool, show_counts: bool) -> str:
    label = node.name
    if show_counts:
        label += f" ({len(node.child_item_ids)})"
    if show_ids:
        label += f" [{node.id}]"
    return label


def _render_level(
        level: List[ResourceNode],
        children: Dict[str, List[ResourceNode]],
        lines: List[str],
        prefix: str,
        seen: Set[str],
        show_ids: bool,
        show_counts: bool,
) -> None:
    entries = sorted(level, key=lambda n: n.name.lower())
    total = len(entries)

    for i, node in enumerate(entries):
        if node.id in seen:
            continue
        seen.add(node.id)

        is_last = (i == total - 1)
        connector = "└── " if is_last else "├── "
        lines.append(f"{prefix}{connector}{_label(node, show_ids, show_counts)}")

        sub = children.get(node.id, [])
        if sub:
            new_prefix = prefix + ("    " if is_last else "│   ")
            _render_level(sub, children, lines, new_prefix, seen, show_ids, show_counts)
