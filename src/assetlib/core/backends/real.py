from __future__ import annotations

"""
Real (HTTP) backend.

Maps the backend call surface onto the REST API of the media library
server. The transport is blocking (requests), so every call is pushed to a
worker thread with ``asyncio.to_thread`` to keep the event loop free.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

from assetlib.core.backends.base import Entity, Query, ResourceBackend
from assetlib.domain import constants as const
from assetlib.domain.config import ConfigStore
from assetlib.domain.errors import UnsupportedOperationError
from assetlib.domain.models import paginate
from assetlib.infra.network import api_request

logger = logging.getLogger(__name__)


class RealBackend(ResourceBackend):
    """
    REST client for one resource kind.

    Endpoint and headers are read from the configuration store on every
    call, so a changed ``base_endpoint`` applies to the next request.
    """

    is_simulated = False

    def __init__(self, kind: str, config_store: ConfigStore, *, auth_token: Optional[str] = None) -> None:
        self.kind = kind
        self._config_store = config_store
        self._auth_token = auth_token

    # -------------------------------------------------------------------------
    # Transport
    # -------------------------------------------------------------------------

    async def _call(
            self,
            method: str,
            path: str,
            *,
            body: Optional[Any] = None,
            query: Query = None,
    ) -> Any:
        cfg = self._config_store.get_config()
        logger.debug(f"Backend: {self.kind} {method} {path} via {cfg['base_endpoint']}")
        return await asyncio.to_thread(
            api_request,
            cfg["base_endpoint"],
            path,
            method,
            body=body,
            query=query,
            headers=cfg.get("default_headers"),
            timeout=float(cfg.get("request_timeout", 30.0)),
            auth_token=self._auth_token,
        )

    def _path(self, *parts: str) -> str:
        return "/" + "/".join([self.kind, *[str(p) for p in parts]])

    # -------------------------------------------------------------------------
    # Surface
    # -------------------------------------------------------------------------

    async def list(self, query: Query = None) -> Dict[str, Any]:
        payload = await self._call("GET", self._path(), query=query)
        return _as_page(payload)

    async def get_by_id(self, entity_id: str) -> Entity:
        return await self._call("GET", self._path(entity_id))

    async def create(self, entity: Entity) -> Entity:
        return await self._call("POST", self._path(), body=entity)

    async def update(self, entity_id: str, partial: Entity) -> Entity:
        return await self._call("PUT", self._path(entity_id), body=partial)

    async def delete(self, entity_id: str, options: Query = None) -> None:
        await self._call("DELETE", self._path(entity_id), query=options)

    async def move(self, entity_id: str, target_parent_id: Optional[str]) -> Entity:
        field = "folder" if self.kind == const.KIND_MEDIA else "parent_id"
        return await self._call("PUT", self._path(entity_id), body={field: target_parent_id})

    async def add_items(self, collection_id: str, item_ids: List[str]) -> Entity:
        self._require_collections("add_items")
        return await self._call("POST", self._path(collection_id, "items"), body={"item_ids": list(item_ids)})

    async def remove_items(self, collection_id: str, item_ids: List[str]) -> Entity:
        self._require_collections("remove_items")
        return await self._call("DELETE", self._path(collection_id, "items"), body={"item_ids": list(item_ids)})

    async def get_tree(self) -> List[Entity]:
        self._require_tree("get_tree")
        return await self._call("GET", self._path("tree"))

    async def get_children(self, entity_id: str, query: Query = None) -> Dict[str, Any]:
        self._require_tree("get_children")
        return await self._call("GET", self._path(entity_id, "children"), query=query)

    async def get_contents(self, entity_id: str, query: Query = None) -> Dict[str, Any]:
        self._require_tree("get_contents")
        return await self._call("GET", self._path(entity_id, "contents"), query=query)

    # -------------------------------------------------------------------------
    # Guards
    # -------------------------------------------------------------------------

    def _require_tree(self, operation: str) -> None:
        if self.kind not in const.TREE_KINDS:
            raise UnsupportedOperationError(self._unsupported(operation))

    def _require_collections(self, operation: str) -> None:
        if self.kind != const.KIND_COLLECTIONS:
            raise UnsupportedOperationError(self._unsupported(operation))


def _as_page(payload: Any) -> Dict[str, Any]:
    """Normalize a list response into ``{"items", "meta"}``."""
    if isinstance(payload, dict) and "items" in payload:
        if "meta" not in payload:
            payload["meta"] = paginate(payload["items"], 1, max(1, len(payload["items"])))["meta"]
        return payload

    # Bare list: the server did not paginate, so the list is one full page
    items = payload if isinstance(payload, list) else []
    return paginate(items, 1, max(1, len(items)))
