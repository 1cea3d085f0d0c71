from __future__ import annotations

"""
Hierarchical Tree Engine.

Keeps folder and collection hierarchies as flat, parent-referencing node
sets and guards the one structural invariant of the data layer: the
``parent_id`` graph must stay a forest. Every mutation is all-or-nothing;
a rejected operation raises before touching the node set.
"""

import copy
import logging
from typing import Any, Dict, Iterable, List, Optional, Set

from assetlib.domain.errors import ConflictError, CycleError, HasChildrenError, NotFoundError
from assetlib.domain.models import ResourceNode

logger = logging.getLogger(__name__)


class TreeEngine:
    """
    In-memory index of one hierarchy (all folders, or all collections).

    Nodes are stored by id in insertion order. Callers only ever receive
    copies, so the index can only change through the methods below.
    """

    def __init__(self, nodes: Optional[Iterable[ResourceNode]] = None, *, id_prefix: str = "node") -> None:
        """
        Args:
            nodes: Initial node set.
            id_prefix: Prefix for identifiers generated by ``create``.
        """
        self._nodes: Dict[str, ResourceNode] = {}
        self._id_prefix = id_prefix
        self._counter = 0
        if nodes is not None:
            self.load(nodes)

    # -------------------------------------------------------------------------
    # Index access
    # -------------------------------------------------------------------------

    def load(self, nodes: Iterable[ResourceNode]) -> None:
        """Replace the whole node set (used after a full refresh)."""
        self._nodes = {n.id: n.copy() for n in nodes}

    def snapshot(self) -> List[ResourceNode]:
        """Return copies of every node in insertion order."""
        return [n.copy() for n in self._nodes.values()]

    def get(self, node_id: str) -> ResourceNode:
        return self._require(node_id).copy()

    def ids(self) -> List[str]:
        return list(self._nodes)

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._nodes

    # -------------------------------------------------------------------------
    # Traversal (pure reads)
    # -------------------------------------------------------------------------

    def children_of(self, node_id: Optional[str]) -> List[ResourceNode]:
        """Direct children of ``node_id`` (roots when ``node_id`` is None)."""
        return [n.copy() for n in self._nodes.values() if n.parent_id == node_id]

    def root_nodes(self) -> List[ResourceNode]:
        return self.children_of(None)

    def descendants(self, node_id: str) -> List[str]:
        """
        Identifiers below ``node_id``, depth-first pre-order.

        The walk goes downward following child links, so it stays correct
        even for nodes whose ancestry chain is broken.
        """
        children = self._child_map()
        out: List[str] = []
        seen: Set[str] = {node_id}
        stack = list(reversed(children.get(node_id, [])))
        while stack:
            current = stack.pop()
            if current in seen:
                continue
            seen.add(current)
            out.append(current)
            stack.extend(reversed(children.get(current, [])))
        return out

    def ancestors(self, node_id: str) -> List[str]:
        """Identifiers from the parent of ``node_id`` up to its root."""
        out: List[str] = []
        seen: Set[str] = {node_id}
        current = self._require(node_id).parent_id
        while current is not None and current in self._nodes and current not in seen:
            out.append(current)
            seen.add(current)
            current = self._nodes[current].parent_id
        return out

    def is_descendant(self, candidate_id: str, of_id: str) -> bool:
        """True when ``candidate_id`` is ``of_id`` itself or lies below it."""
        return candidate_id == of_id or candidate_id in self.descendants(of_id)

    # -------------------------------------------------------------------------
    # Validation (no mutation)
    # -------------------------------------------------------------------------

    def validate_move(self, node_id: str, new_parent_id: Optional[str]) -> None:
        """
        Check that re-parenting ``node_id`` under ``new_parent_id`` keeps the
        hierarchy acyclic.

        Raises:
            NotFoundError: ``node_id`` is not in the index.
            CycleError: ``new_parent_id`` is ``node_id`` or one of its
                descendants.
        """
        self._require(node_id)
        if new_parent_id is None:
            return
        if self.is_descendant(new_parent_id, node_id):
            node = self._nodes[node_id]
            logger.warning(f"Tree: Rejected move of '{node.name}' ({node_id}) under {new_parent_id}: cycle.")
            raise CycleError(
                f"Cannot move '{node.name}' into itself or one of its descendants",
                debug={"node_id": node_id, "target_parent_id": new_parent_id},
            )

    def validate_delete(self, node_id: str, cascade: bool) -> List[str]:
        """
        Compute the removal order for deleting ``node_id``.

        Returns:
            List[str]: Identifiers to remove, children before parents, with
            ``node_id`` last.

        Raises:
            NotFoundError: ``node_id`` is not in the index.
            HasChildrenError: The node has children and ``cascade`` is False.
        """
        node = self._require(node_id)
        children = self._child_map()
        if children.get(node_id) and not cascade:
            logger.warning(f"Tree: Rejected delete of '{node.name}' ({node_id}): {len(children[node_id])} child node(s).")
            raise HasChildrenError(
                f"Cannot delete '{node.name}': it has child nodes. Delete with cascade to remove them.",
                debug={"node_id": node_id, "children": list(children[node_id])},
            )

        order: List[str] = []
        seen: Set[str] = set()

        def _visit(current: str) -> None:
            seen.add(current)
            for child in children.get(current, []):
                if child not in seen:
                    _visit(child)
            order.append(current)

        _visit(node_id)
        return order

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def create(
            self,
            name: str,
            parent_id: Optional[str] = None,
            *,
            node_id: Optional[str] = None,
            color: str = "",
            child_item_ids: Optional[Iterable[str]] = None,
            extra: Optional[Dict[str, Any]] = None,
    ) -> ResourceNode:
        """
        Append a node. The parent is not required to exist.

        Raises:
            ConflictError: ``node_id`` is already used.
        """
        if node_id is None:
            node_id = self._next_id()
        elif node_id in self._nodes:
            raise ConflictError(f"Node '{node_id}' already exists", code="duplicate_id")

        node = ResourceNode(
            id=node_id,
            name=name,
            parent_id=parent_id,
            color=color,
            child_item_ids=set(child_item_ids or ()),
            extra=copy.deepcopy(extra or {}),
        )
        self._nodes[node_id] = node
        logger.debug(f"Tree: Created '{name}' ({node_id}) under {parent_id}")
        return node.copy()

    def rename(self, node_id: str, name: str) -> ResourceNode:
        node = self._require(node_id)
        node.name = name
        return node.copy()

    def update(self, node_id: str, changes: Dict[str, Any]) -> ResourceNode:
        """
        Apply non-structural field changes (name, color, extra fields).

        ``id`` and ``parent_id`` are ignored here; re-parenting goes through
        ``move`` so the acyclic check cannot be bypassed.
        """
        node = self._require(node_id)
        for key, value in changes.items():
            if key in ("id", "parent_id", "parent", "parentId"):
                continue
            if key == "name":
                node.name = str(value)
            elif key == "color":
                node.color = str(value or "")
            elif key == "items":
                node.child_item_ids = {str(i) for i in value or []}
            else:
                node.extra[key] = copy.deepcopy(value)
        return node.copy()

    def move(self, node_id: str, new_parent_id: Optional[str]) -> ResourceNode:
        """
        Re-parent ``node_id`` under ``new_parent_id`` (None moves to root).

        Raises:
            NotFoundError: ``node_id`` is not in the index.
            CycleError: The move would create a cycle; nothing is changed.
        """
        self.validate_move(node_id, new_parent_id)
        node = self._nodes[node_id]
        node.parent_id = new_parent_id
        logger.debug(f"Tree: Moved '{node.name}' ({node_id}) under {new_parent_id}")
        return node.copy()

    def delete(self, node_id: str, cascade: bool = False) -> List[str]:
        """
        Remove ``node_id``; with ``cascade`` its descendants go first.

        Returns:
            List[str]: Removed identifiers in removal order.

        Raises:
            NotFoundError: ``node_id`` is not in the index.
            HasChildrenError: Children exist and ``cascade`` is False.
        """
        order = self.validate_delete(node_id, cascade)
        for current in order:
            del self._nodes[current]
        logger.debug(f"Tree: Deleted {len(order)} node(s) rooted at {node_id}")
        return order

    def upsert(self, node: ResourceNode) -> ResourceNode:
        """
        Insert ``node``, or replace the stored node with the same id in place.

        Used to apply results the server has already committed, so it does
        not require the node (or its parent) to be indexed yet.

        Raises:
            CycleError: ``node.parent_id`` is the node itself or lies below it.
        """
        if node.parent_id is not None and self.is_descendant(node.parent_id, node.id):
            logger.warning(f"Tree: Rejected upsert of '{node.name}' ({node.id}) under {node.parent_id}: cycle.")
            raise CycleError(
                f"Cannot place '{node.name}' under itself or one of its descendants",
                debug={"node_id": node.id, "target_parent_id": node.parent_id},
            )
        self._nodes[node.id] = node.copy()
        return node.copy()

    def discard(self, node_ids: Iterable[str]) -> List[str]:
        """Remove whichever of ``node_ids`` are still indexed and return those."""
        removed = [i for i in node_ids if self._nodes.pop(i, None) is not None]
        if removed:
            logger.debug(f"Tree: Discarded {len(removed)} node(s)")
        return removed

    def add_items(self, node_id: str, item_ids: Iterable[str]) -> ResourceNode:
        node = self._require(node_id)
        node.child_item_ids.update(str(i) for i in item_ids)
        return node.copy()

    def remove_items(self, node_id: str, item_ids: Iterable[str]) -> ResourceNode:
        node = self._require(node_id)
        node.child_item_ids.difference_update(str(i) for i in item_ids)
        return node.copy()

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _require(self, node_id: str) -> ResourceNode:
        node = self._nodes.get(node_id)
        if node is None:
            raise NotFoundError(f"Node '{node_id}' not found")
        return node

    def _child_map(self) -> Dict[Optional[str], List[str]]:
        """Parent id -> child ids, rebuilt from the flat set on every call."""
        children: Dict[Optional[str], List[str]] = {}
        for node in self._nodes.values():
            children.setdefault(node.parent_id, []).append(node.id)
        return children

    def _next_id(self) -> str:
        while True:
            self._counter += 1
            candidate = f"{self._id_prefix}_{self._counter}"
            if candidate not in self._nodes:
                return candidate
