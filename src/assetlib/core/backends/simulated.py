from __future__ import annotations

"""
Simulated Backend.

In-memory implementations of the backend call surface for every resource
kind. Each call first waits for a configurable delay, then fails with the
configured probability, and only then performs its work against the held
data. Returned values are deep copies, so callers can never reach the
internal state through them.

Folder and collection backends keep their nodes in a TreeEngine, so they
enforce exactly the same structural rules as the rest of the data layer.
"""

import asyncio
import copy
import logging
import random
from typing import Any, Callable, Dict, Iterable, List, Optional, Set, Tuple, Type

from assetlib.core.backends.base import Entity, Query, ResourceBackend
from assetlib.core.tree.engine import TreeEngine
from assetlib.core.tree.render import build_tree, node_path
from assetlib.domain import constants as const
from assetlib.domain import seed
from assetlib.domain.config import ConfigStore
from assetlib.domain.errors import (
    ApiError,
    NetworkError,
    NotFoundError,
    ServerError,
    ValidationError,
    utc_timestamp,
)
from assetlib.domain.models import ResourceNode, paginate

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# FAILURE INJECTION TABLE
# -----------------------------------------------------------------------------
# Operation -> (error class, status, code)
_READ_FAILURE = (ServerError, 503, "service_unavailable")
_WRITE_FAILURE = (ValidationError, 400, "invalid_request")
_STRUCTURE_FAILURE = (NetworkError, 0, "network_error")

_FAILURES: Dict[str, Tuple[Type[ApiError], int, str]] = {
    "list": _READ_FAILURE,
    "get_by_id": _READ_FAILURE,
    "get_tree": _READ_FAILURE,
    "get_children": _READ_FAILURE,
    "get_contents": _READ_FAILURE,
    "create": _WRITE_FAILURE,
    "update": _WRITE_FAILURE,
    "delete": _STRUCTURE_FAILURE,
    "move": _STRUCTURE_FAILURE,
    "add_items": _STRUCTURE_FAILURE,
    "remove_items": _STRUCTURE_FAILURE,
}

_VERBS: Dict[str, str] = {
    "list": "fetch",
    "get_by_id": "fetch",
    "get_tree": "fetch tree of",
    "get_children": "fetch children of",
    "get_contents": "fetch contents of",
    "create": "create",
    "update": "update",
    "delete": "delete",
    "move": "move",
    "add_items": "add items to",
    "remove_items": "remove items from",
}


def failure_for(operation: str) -> Tuple[Type[ApiError], int, str]:
    """Return the (class, status, code) injected for ``operation``."""
    return _FAILURES.get(operation, _READ_FAILURE)


# -----------------------------------------------------------------------------
# BASE
# -----------------------------------------------------------------------------

class SimulatedBackend(ResourceBackend):
    """
    Shared latency and failure injection.

    The configuration is read from the store on every call, so a change to
    the delay bounds or the error rate applies to the very next request.
    """

    is_simulated = True

    def __init__(self, config_store: ConfigStore, *, rng: Optional[random.Random] = None) -> None:
        self._config_store = config_store
        self._rng = rng or random.Random()

    def compute_delay_ms(self, config: Optional[Dict[str, Any]] = None) -> float:
        """Fixed delay when configured, otherwise uniform in [min, max]."""
        cfg = config or self._config_store.get_config()
        delay = cfg["simulated_delay"]
        if delay.get("fixed") is not None:
            return float(delay["fixed"])
        return self._rng.uniform(float(delay["min"]), float(delay["max"]))

    async def _simulate(self, operation: str) -> None:
        """
        Wait for the simulated latency, then maybe raise an injected failure.

        Raises:
            ApiError: The error assigned to ``operation`` in the injection
                table, with probability ``simulated_error_rate``.
        """
        cfg = self._config_store.get_config()
        delay_ms = self.compute_delay_ms(cfg)
        logger.debug(f"Simulated: {self.kind}.{operation} (delay {delay_ms:.0f}ms)")
        await asyncio.sleep(delay_ms / 1000.0)

        rate = float(cfg["simulated_error_rate"])
        if self._rng.random() < rate:
            error = self._injected_failure(operation, rate)
            logger.info(f"Simulated: Injected {type(error).__name__} into {self.kind}.{operation}")
            raise error

    def _injected_failure(self, operation: str, rate: float) -> ApiError:
        cls, status, code = failure_for(operation)
        message = f"Failed to {_VERBS.get(operation, operation)} {self.kind}"
        debug = {"simulated_failure": True, "probability": rate, "operation": operation}
        if issubclass(cls, ValidationError):
            return cls(message, status=status, code=code, fields=[], debug=debug)
        return cls(message, status=status, code=code, debug=debug)


def _sort_records(items: List[Entity], query: Dict[str, Any]) -> List[Entity]:
    """Sort by ``sort_by`` (missing values last); ``sort_order=desc`` reverses."""
    sort_by = query.get("sort_by")
    if not sort_by:
        return items
    reverse = str(query.get("sort_order", "asc")).lower() == "desc"

    def _key(record: Entity) -> Tuple[int, Any]:
        value = record.get(sort_by)
        if value is None:
            return (1, "")
        if isinstance(value, str):
            return (0, value.lower())
        return (0, value)

    present = [r for r in items if r.get(sort_by) is not None]
    missing = [r for r in items if r.get(sort_by) is None]
    return sorted(present, key=_key, reverse=reverse) + missing


def _page(items: List[Any], query: Dict[str, Any]) -> Dict[str, Any]:
    return paginate(items, query.get("page", 1), query.get("page_size", const.DEFAULT_PAGE_SIZE))


# -----------------------------------------------------------------------------
# FLAT RECORD KINDS
# -----------------------------------------------------------------------------

class SimulatedRecordBackend(SimulatedBackend):
    """Dictionary-backed CRUD for kinds without a hierarchy."""

    id_prefix = "item"
    search_fields: Tuple[str, ...] = ("name",)

    def __init__(
            self,
            config_store: ConfigStore,
            records: Iterable[Entity],
            *,
            rng: Optional[random.Random] = None,
    ) -> None:
        super().__init__(config_store, rng=rng)
        self._records: Dict[str, Entity] = {str(r["id"]): copy.deepcopy(r) for r in records}
        self._counter = 0

    # --- Backend surface -----------------------------------------------------

    async def list(self, query: Query = None) -> Dict[str, Any]:
        await self._simulate("list")
        q = dict(query or {})
        items = [r for r in self._records.values() if self._matches(r, q)]
        items = _sort_records(items, q)
        return copy.deepcopy(_page(items, q))

    async def get_by_id(self, entity_id: str) -> Entity:
        await self._simulate("get_by_id")
        return copy.deepcopy(self._require(entity_id))

    async def create(self, entity: Entity) -> Entity:
        await self._simulate("create")
        if not entity.get("name"):
            raise ValidationError(f"{self.kind} name is required", fields=["name"])

        record = copy.deepcopy(entity)
        record["id"] = self._next_id()
        self._records[record["id"]] = record
        return copy.deepcopy(record)

    async def update(self, entity_id: str, partial: Entity) -> Entity:
        await self._simulate("update")
        record = self._require(entity_id)
        for key, value in partial.items():
            if key != "id":
                record[key] = copy.deepcopy(value)
        return copy.deepcopy(record)

    async def delete(self, entity_id: str, options: Query = None) -> None:
        await self._simulate("delete")
        self._require(entity_id)
        del self._records[self._resolve_id(entity_id)]

    # --- Internal accessors (no latency, used by sibling backends) ----------

    def peek_ids(self) -> Set[str]:
        return set(self._records)

    def peek_where(self, predicate: Callable[[Entity], bool]) -> List[Entity]:
        return [copy.deepcopy(r) for r in self._records.values() if predicate(r)]

    # --- Hooks ---------------------------------------------------------------

    def _matches(self, record: Entity, query: Dict[str, Any]) -> bool:
        search = str(query.get("search") or "").strip().lower()
        if search:
            haystack = " ".join(str(record.get(f, "")) for f in self.search_fields).lower()
            if search not in haystack:
                return False
        return True

    def _resolve_id(self, entity_id: str) -> str:
        return str(entity_id)

    def _require(self, entity_id: str) -> Entity:
        record = self._records.get(self._resolve_id(entity_id))
        if record is None:
            raise NotFoundError(f"{self.kind} item '{entity_id}' not found")
        return record

    def _next_id(self) -> str:
        while True:
            self._counter += 1
            candidate = f"{self.id_prefix}_{self._counter}"
            if candidate not in self._records:
                return candidate


class SimulatedMediaBackend(SimulatedRecordBackend):
    kind = const.KIND_MEDIA
    id_prefix = "media"
    search_fields = ("name", "type", "tags")

    # Resolves a collection id to its member media ids (wired by the factory)
    collection_members: Optional[Callable[[str], Set[str]]] = None

    def _matches(self, record: Entity, query: Dict[str, Any]) -> bool:
        if not super()._matches(record, query):
            return False

        folder = query.get("folder")
        if folder not in (None, "", "all") and str(record.get("folder")) != str(folder):
            return False

        types = query.get("types") or []
        if types and record.get("type") not in types:
            return False

        tags = query.get("tags") or []
        if tags and not set(tags).issubset(set(record.get("tags") or [])):
            return False

        ids = query.get("ids")
        if ids is not None and str(record["id"]) not in {str(i) for i in ids}:
            return False

        collection = query.get("collection")
        if collection not in (None, "") and self.collection_members is not None:
            if str(record["id"]) not in self.collection_members(str(collection)):
                return False
        return True

    async def move(self, entity_id: str, target_parent_id: Optional[str]) -> Entity:
        """Re-file a media item into another folder."""
        await self._simulate("move")
        record = self._require(entity_id)
        record["folder"] = target_parent_id
        return copy.deepcopy(record)


class SimulatedTagBackend(SimulatedRecordBackend):
    kind = const.KIND_TAGS
    id_prefix = "tag"

    async def list(self, query: Query = None) -> Dict[str, Any]:
        q = dict(query or {})
        if q.get("sort_by") == "count" and "sort_order" not in q:
            q["sort_order"] = "desc"
        limit = q.pop("limit", None)
        if limit:
            q["page"], q["page_size"] = 1, int(limit)
        return await super().list(q)

    async def create(self, entity: Entity) -> Entity:
        record = dict(entity)
        record.setdefault("count", 0)
        record.setdefault("color", self._rng.choice(const.NODE_COLORS))
        return await super().create(record)


class SimulatedUserBackend(SimulatedRecordBackend):
    kind = const.KIND_USERS
    id_prefix = "user"
    search_fields = ("name", "email")

    def __init__(self, *args: Any, current_user_id: str = seed.CURRENT_USER_ID, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._current_user_id = current_user_id

    def _resolve_id(self, entity_id: str) -> str:
        return self._current_user_id if entity_id == "me" else str(entity_id)

    async def update(self, entity_id: str, partial: Entity) -> Entity:
        # Preferences merge key by key instead of being replaced
        prefs = partial.get("preferences")
        if isinstance(prefs, dict):
            record = self._records.get(self._resolve_id(entity_id))
            if record is not None:
                partial = dict(partial)
                partial["preferences"] = {**(record.get("preferences") or {}), **prefs}
        return await super().update(entity_id, partial)


# -----------------------------------------------------------------------------
# HIERARCHICAL KINDS
# -----------------------------------------------------------------------------

_NODE_FIELDS = {"id", "name", "parent_id", "parent", "parentId", "color", "items"}


class SimulatedTreeBackend(SimulatedBackend):
    """Backend for folders and collections, backed by a TreeEngine."""

    id_prefix = "node"

    def __init__(
            self,
            config_store: ConfigStore,
            nodes: Iterable[Entity],
            *,
            media: Optional[SimulatedMediaBackend] = None,
            rng: Optional[random.Random] = None,
    ) -> None:
        super().__init__(config_store, rng=rng)
        self._engine = TreeEngine((ResourceNode.from_dict(n) for n in nodes), id_prefix=self.id_prefix)
        self._media = media

    def snapshot(self) -> List[ResourceNode]:
        """Copies of the held nodes (no latency, no failure injection)."""
        return self._engine.snapshot()

    # --- Backend surface -----------------------------------------------------

    async def list(self, query: Query = None) -> Dict[str, Any]:
        await self._simulate("list")
        q = dict(query or {})
        nodes = self._select_for_listing(q)

        search = str(q.get("search") or "").strip().lower()
        if search:
            nodes = [n for n in nodes if search in n.name.lower()]

        items = _sort_records([self._entity(n) for n in nodes], q)
        return _page(items, q)

    async def get_by_id(self, entity_id: str) -> Entity:
        await self._simulate("get_by_id")
        return self._entity(self._engine.get(entity_id))

    async def create(self, entity: Entity) -> Entity:
        await self._simulate("create")
        name = str(entity.get("name") or "").strip()
        if not name:
            raise ValidationError(f"{self.kind} name is required", fields=["name"])

        parent_id = ResourceNode.from_dict({"id": "_", **entity}).parent_id
        if parent_id is not None and parent_id not in self._engine:
            raise NotFoundError(f"Parent '{parent_id}' not found", code="parent_not_found")

        extra = {k: copy.deepcopy(v) for k, v in entity.items() if k not in _NODE_FIELDS}
        self._decorate_new(extra, name, parent_id)
        node = self._engine.create(
            name,
            parent_id,
            color=entity.get("color") or self._rng.choice(const.NODE_COLORS),
            child_item_ids=entity.get("items") or (),
            extra=extra,
        )
        return self._entity(node)

    async def update(self, entity_id: str, partial: Entity) -> Entity:
        await self._simulate("update")
        self._engine.get(entity_id)

        parent_keys = [k for k in ("parent_id", "parentId", "parent") if k in partial]
        if parent_keys:
            target = partial[parent_keys[0]]
            self._apply_move(entity_id, None if target in (None, "") else str(target))

        self._engine.update(entity_id, partial)
        if "name" in partial:
            self._after_rename(entity_id)
        self._touch(entity_id)
        return self._entity(self._engine.get(entity_id))

    async def delete(self, entity_id: str, options: Query = None) -> None:
        await self._simulate("delete")
        opts = options or {}
        cascade = bool(opts.get("cascade") or opts.get("force") or opts.get("delete_children"))
        self._engine.delete(entity_id, cascade=cascade)

    async def move(self, entity_id: str, target_parent_id: Optional[str]) -> Entity:
        await self._simulate("move")
        self._apply_move(entity_id, target_parent_id)
        self._touch(entity_id)
        return self._entity(self._engine.get(entity_id))

    async def get_tree(self) -> List[Entity]:
        await self._simulate("get_tree")
        return copy.deepcopy(build_tree(self._engine.snapshot()))

    async def get_children(self, entity_id: str, query: Query = None) -> Dict[str, Any]:
        await self._simulate("get_children")
        q = dict(query or {})
        parent = self._engine.get(entity_id)
        children = [self._entity(n) for n in self._engine.children_of(entity_id)]
        return {"parent": self._entity(parent), "children": _page(children, q)}

    async def get_contents(self, entity_id: str, query: Query = None) -> Dict[str, Any]:
        await self._simulate("get_contents")
        q = dict(query or {})
        node = self._engine.get(entity_id)
        media = self._contents_of(node, q)
        return {"node": self._entity(node), "contents": _page(media, q)}

    # --- Hooks ---------------------------------------------------------------

    def _select_for_listing(self, query: Dict[str, Any]) -> List[ResourceNode]:
        if "parent_id" in query:
            parent = query["parent_id"]
            parent = None if parent in (None, "") else str(parent)
            if query.get("recursive") and parent is not None:
                wanted = set(self._engine.descendants(parent))
                return [n for n in self._engine.snapshot() if n.id in wanted]
            return self._engine.children_of(parent)
        return self._engine.snapshot()

    def _contents_of(self, node: ResourceNode, query: Dict[str, Any]) -> List[Entity]:
        return []

    def _decorate_new(self, extra: Dict[str, Any], name: str, parent_id: Optional[str]) -> None:
        pass

    def _after_move(self, entity_id: str) -> None:
        pass

    def _after_rename(self, entity_id: str) -> None:
        pass

    def _touch(self, entity_id: str) -> None:
        pass

    # --- Internals -----------------------------------------------------------

    def _apply_move(self, entity_id: str, target_parent_id: Optional[str]) -> None:
        if target_parent_id is not None and target_parent_id not in self._engine:
            raise NotFoundError(f"Parent '{target_parent_id}' not found", code="parent_not_found")
        self._engine.move(entity_id, target_parent_id)
        self._after_move(entity_id)

    @staticmethod
    def _entity(node: ResourceNode) -> Entity:
        return copy.deepcopy(node.to_dict())


class SimulatedFolderBackend(SimulatedTreeBackend):
    """Folders: root-level listing by default and ``path`` maintenance."""

    kind = const.KIND_FOLDERS
    id_prefix = "folder"

    def _select_for_listing(self, query: Dict[str, Any]) -> List[ResourceNode]:
        if "parent_id" not in query and not query.get("all"):
            return self._engine.root_nodes()
        return super()._select_for_listing(query)

    def _contents_of(self, node: ResourceNode, query: Dict[str, Any]) -> List[Entity]:
        if self._media is None:
            return []
        return self._media.peek_where(lambda r: str(r.get("folder")) == node.id)

    def _decorate_new(self, extra: Dict[str, Any], name: str, parent_id: Optional[str]) -> None:
        if parent_id is None:
            extra["path"] = name
        else:
            parent_path = self._engine.get(parent_id).extra.get("path") or node_path(self._engine.snapshot(), parent_id)
            extra["path"] = f"{parent_path}/{name}"

    def _after_move(self, entity_id: str) -> None:
        self._refresh_paths(entity_id)

    def _after_rename(self, entity_id: str) -> None:
        self._refresh_paths(entity_id)

    def _refresh_paths(self, entity_id: str) -> None:
        """Recompute ``path`` for a node and its whole subtree."""
        nodes = self._engine.snapshot()
        for node_id in [entity_id] + self._engine.descendants(entity_id):
            self._engine.update(node_id, {"path": node_path(nodes, node_id)})


class SimulatedCollectionBackend(SimulatedTreeBackend):
    """Collections: timestamps, item membership and nested contents."""

    kind = const.KIND_COLLECTIONS
    id_prefix = "coll"

    async def add_items(self, collection_id: str, item_ids: List[str]) -> Entity:
        await self._simulate("add_items")
        ids = self._require_item_ids(item_ids)
        self._engine.get(collection_id)

        if self._media is not None:
            invalid = [i for i in ids if i not in self._media.peek_ids()]
            if invalid:
                raise ValidationError(
                    f"Invalid media item IDs: {', '.join(invalid)}",
                    code="invalid_media_ids",
                    fields=["item_ids"],
                )

        self._engine.add_items(collection_id, ids)
        self._touch(collection_id)
        return self._entity(self._engine.get(collection_id))

    async def remove_items(self, collection_id: str, item_ids: List[str]) -> Entity:
        await self._simulate("remove_items")
        ids = self._require_item_ids(item_ids)
        self._engine.remove_items(collection_id, ids)
        self._touch(collection_id)
        return self._entity(self._engine.get(collection_id))

    def member_ids(self, collection_id: str) -> Set[str]:
        """Media ids of a collection; empty for unknown ids."""
        if collection_id not in self._engine:
            return set()
        return set(self._engine.get(collection_id).child_item_ids)

    def _contents_of(self, node: ResourceNode, query: Dict[str, Any]) -> List[Entity]:
        wanted = set(node.child_item_ids)
        if query.get("include_child_collections") in (True, "true"):
            for child_id in self._engine.descendants(node.id):
                wanted.update(self._engine.get(child_id).child_item_ids)
        if self._media is None:
            return [{"id": i} for i in sorted(wanted)]
        return self._media.peek_where(lambda r: str(r["id"]) in wanted)

    def _decorate_new(self, extra: Dict[str, Any], name: str, parent_id: Optional[str]) -> None:
        now = utc_timestamp()
        extra.setdefault("created", now)
        extra["modified"] = now
        extra.setdefault("is_shared", False)
        extra.setdefault("shared_with", [])

    def _touch(self, entity_id: str) -> None:
        self._engine.update(entity_id, {"modified": utc_timestamp()})

    @staticmethod
    def _require_item_ids(item_ids: List[str]) -> List[str]:
        if not item_ids:
            raise ValidationError("No media items specified", fields=["item_ids"])
        return [str(i) for i in item_ids]


# -----------------------------------------------------------------------------
# FACTORY
# -----------------------------------------------------------------------------

def build_simulated_backends(
        config_store: ConfigStore,
        *,
        rng: Optional[random.Random] = None,
) -> Dict[str, SimulatedBackend]:
    """
    Create one simulated backend per resource kind over the seed data.

    All backends share one random source so a seeded ``rng`` makes a whole
    session reproducible.
    """
    rng = rng or random.Random()
    media = SimulatedMediaBackend(config_store, seed.seed_media(), rng=rng)
    collections = SimulatedCollectionBackend(config_store, seed.seed_collections(), media=media, rng=rng)
    media.collection_members = collections.member_ids
    return {
        const.KIND_MEDIA: media,
        const.KIND_FOLDERS: SimulatedFolderBackend(config_store, seed.seed_folders(), media=media, rng=rng),
        const.KIND_COLLECTIONS: collections,
        const.KIND_TAGS: SimulatedTagBackend(config_store, seed.seed_tags(), rng=rng),
        const.KIND_USERS: SimulatedUserBackend(config_store, seed.seed_users(), rng=rng),
    }
