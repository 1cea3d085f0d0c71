from __future__ import annotations

"""
Backend call surface.

Both the real (HTTP) and the simulated (in-memory) backends implement this
interface for each resource kind. Operations a kind does not support raise
UnsupportedOperationError, which is a programming error rather than an
ApiError.
"""

from typing import Any, Dict, List, Optional

from assetlib.domain.errors import UnsupportedOperationError

Entity = Dict[str, Any]
Query = Optional[Dict[str, Any]]


class ResourceBackend:
    """Asynchronous CRUD surface of one resource kind."""

    kind: str = ""
    is_simulated: bool = False

    async def list(self, query: Query = None) -> Dict[str, Any]:
        """Return ``{"items": [...], "meta": {...}}``."""
        raise UnsupportedOperationError(self._unsupported("list"))

    async def get_by_id(self, entity_id: str) -> Entity:
        raise UnsupportedOperationError(self._unsupported("get_by_id"))

    async def create(self, entity: Entity) -> Entity:
        raise UnsupportedOperationError(self._unsupported("create"))

    async def update(self, entity_id: str, partial: Entity) -> Entity:
        raise UnsupportedOperationError(self._unsupported("update"))

    async def delete(self, entity_id: str, options: Query = None) -> None:
        raise UnsupportedOperationError(self._unsupported("delete"))

    async def move(self, entity_id: str, target_parent_id: Optional[str]) -> Entity:
        raise UnsupportedOperationError(self._unsupported("move"))

    async def add_items(self, collection_id: str, item_ids: List[str]) -> Entity:
        raise UnsupportedOperationError(self._unsupported("add_items"))

    async def remove_items(self, collection_id: str, item_ids: List[str]) -> Entity:
        raise UnsupportedOperationError(self._unsupported("remove_items"))

    async def get_tree(self) -> List[Entity]:
        """Nested hierarchy (tree kinds only)."""
        raise UnsupportedOperationError(self._unsupported("get_tree"))

    async def get_children(self, entity_id: str, query: Query = None) -> Dict[str, Any]:
        raise UnsupportedOperationError(self._unsupported("get_children"))

    async def get_contents(self, entity_id: str, query: Query = None) -> Dict[str, Any]:
        raise UnsupportedOperationError(self._unsupported("get_contents"))

    def _unsupported(self, operation: str) -> str:
        return f"{type(self).__name__} ({self.kind}) does not support '{operation}'"

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind!r})"
