from __future__ import annotations

"""
Hierarchy Service.

Client-side mirror of one folder or collection hierarchy. Structural
operations are checked against the local TreeEngine before anything is
dispatched to a backend, so a move into a descendant or a non-cascading
delete of a parent is rejected without a network round trip. Successful
backend results are then applied to the mirror.
"""

import logging
from typing import Any, Dict, Iterable, List, Optional

from assetlib.core.backends.base import Entity, ResourceBackend
from assetlib.core.services.data_source import DataSource
from assetlib.core.tree.engine import TreeEngine
from assetlib.core.tree.render import render_tree
from assetlib.domain import constants as const
from assetlib.domain.errors import NotFoundError
from assetlib.domain.models import ResourceNode

logger = logging.getLogger(__name__)


def flatten_tree_payload(tree: Iterable[Dict[str, Any]]) -> List[ResourceNode]:
    """Turn a nested ``get_tree`` payload back into flat nodes (pre-order)."""
    nodes: List[ResourceNode] = []
    stack = list(reversed(list(tree)))
    while stack:
        entry = dict(stack.pop())
        children = entry.pop("children", None) or []
        nodes.append(ResourceNode.from_dict(entry))
        stack.extend(reversed(children))
    return nodes


class HierarchyService:
    """Validated structural operations over one hierarchical kind."""

    def __init__(self, data_source: DataSource, kind: str = const.KIND_FOLDERS) -> None:
        if kind not in const.TREE_KINDS:
            raise ValueError(f"'{kind}' is not a hierarchical resource kind")
        self._data_source = data_source
        self._kind = kind
        self._engine = TreeEngine(id_prefix=kind)

    @property
    def kind(self) -> str:
        return self._kind

    @property
    def engine(self) -> TreeEngine:
        return self._engine

    def nodes(self) -> List[ResourceNode]:
        return self._engine.snapshot()

    def render(self, *, show_ids: bool = False, show_counts: bool = False) -> List[str]:
        return render_tree(self._engine.snapshot(), show_ids=show_ids, show_counts=show_counts)

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    async def refresh(self) -> List[ResourceNode]:
        """Reload the whole hierarchy from the active backend."""
        tree = await self._backend().get_tree()
        nodes = flatten_tree_payload(tree or [])
        self._engine.load(nodes)
        logger.debug(f"Hierarchy: Loaded {len(nodes)} {self._kind} node(s)")
        return self._engine.snapshot()

    # -------------------------------------------------------------------------
    # Structural operations
    # -------------------------------------------------------------------------

    async def create(self, name: str, parent_id: Optional[str] = None, **fields: Any) -> ResourceNode:
        """
        Create a node under ``parent_id`` (None for a root).

        Raises:
            NotFoundError: ``parent_id`` is not part of the hierarchy.
        """
        if parent_id is not None and parent_id not in self._engine:
            raise NotFoundError(f"Parent '{parent_id}' not found", code="parent_not_found")

        entity = await self._backend().create({**fields, "name": name, "parent_id": parent_id})
        return self._apply_entity(entity)

    async def rename(self, node_id: str, name: str) -> ResourceNode:
        self._engine.get(node_id)
        entity = await self._backend().update(node_id, {"name": name})
        return self._apply_entity(entity)

    async def move(self, node_id: str, new_parent_id: Optional[str]) -> ResourceNode:
        """
        Re-parent a node after checking the move locally.

        Raises:
            CycleError: The target is the node itself or one of its
                descendants; nothing is dispatched.
        """
        self._engine.validate_move(node_id, new_parent_id)
        if new_parent_id is not None and new_parent_id not in self._engine:
            raise NotFoundError(f"Parent '{new_parent_id}' not found", code="parent_not_found")

        entity = await self._backend().move(node_id, new_parent_id)
        return self._apply_entity(entity)

    async def delete(self, node_id: str, cascade: bool = False) -> List[str]:
        """
        Delete a node, and with ``cascade`` its whole subtree.

        The mirror may have been reloaded while the request was in flight;
        only the ids still present are removed from it afterwards.

        Returns:
            List[str]: Removed identifiers, children before parents.

        Raises:
            HasChildrenError: Children exist and ``cascade`` is False; nothing
                is dispatched.
        """
        order = self._engine.validate_delete(node_id, cascade)
        await self._backend().delete(node_id, {"cascade": True} if cascade else None)

        if cascade:
            # Nodes mirrored under it while the request was in flight go as well
            order = [i for i in reversed(self._engine.descendants(node_id)) if i not in order] + order
        self._engine.discard(order)
        logger.info(f"Hierarchy: Deleted {len(order)} {self._kind} node(s)")
        return order

    async def add_items(self, node_id: str, item_ids: List[str]) -> ResourceNode:
        self._engine.get(node_id)
        entity = await self._backend().add_items(node_id, item_ids)
        return self._apply_entity(entity)

    async def remove_items(self, node_id: str, item_ids: List[str]) -> ResourceNode:
        self._engine.get(node_id)
        entity = await self._backend().remove_items(node_id, item_ids)
        return self._apply_entity(entity)

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _backend(self) -> ResourceBackend:
        return self._data_source.backend(self._kind)

    def _apply_entity(self, entity: Entity) -> ResourceNode:
        """Insert or replace the mirrored node with the backend's version of it."""
        return self._engine.upsert(ResourceNode.from_dict(entity))
