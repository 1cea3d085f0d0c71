from __future__ import annotations

"""
Data Layer Domain Models.

Defines the structures exchanged between the tree engine, the backends and
the request controllers: hierarchy nodes, request state snapshots, the
response envelope and the pagination helper.
"""

import copy
import math
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence, Set, Tuple

from assetlib.domain.errors import new_request_id, utc_timestamp

# -----------------------------------------------------------------------------
# HIERARCHY
# -----------------------------------------------------------------------------

@dataclass
class ResourceNode:
    """
    A folder or collection entry in a hierarchy.

    Attributes:
        id: Unique identifier.
        name: Display name.
        parent_id: Identifier of the parent node, None for roots.
        color: Display colour (hex string).
        child_item_ids: Media item identifiers filed under this node.
        extra: Kind-specific fields carried along untouched (path, created...).
    """
    id: str
    name: str
    parent_id: Optional[str] = None
    color: str = ""
    child_item_ids: Set[str] = field(default_factory=set)
    extra: Dict[str, Any] = field(default_factory=dict)

    @property
    def is_root(self) -> bool:
        return self.parent_id is None

    def copy(self) -> "ResourceNode":
        """Return an independent copy; nested extra values are duplicated too."""
        return ResourceNode(
            id=self.id,
            name=self.name,
            parent_id=self.parent_id,
            color=self.color,
            child_item_ids=set(self.child_item_ids),
            extra=copy.deepcopy(self.extra),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the JSON shape served by the backends."""
        data = dict(self.extra)
        data.update({
            "id": self.id,
            "name": self.name,
            "parent_id": self.parent_id,
            "color": self.color,
            "items": sorted(self.child_item_ids),
        })
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ResourceNode":
        """
        Build a node from a backend entity.

        Accepts ``parent_id`` as well as the legacy ``parent``/``parentId``
        spellings, and ``items`` for the member media ids.
        """
        known = {"id", "name", "parent_id", "parent", "parentId", "color", "items"}
        parent = data.get("parent_id", data.get("parentId", data.get("parent")))
        return cls(
            id=str(data["id"]),
            name=str(data.get("name", "")),
            parent_id=None if parent in (None, "") else str(parent),
            color=str(data.get("color") or ""),
            child_item_ids={str(i) for i in data.get("items") or []},
            extra={k: v for k, v in data.items() if k not in known},
        )


# -----------------------------------------------------------------------------
# REQUEST STATE
# -----------------------------------------------------------------------------

STATUS_IDLE = "idle"
STATUS_LOADING = "loading"
STATUS_SUCCESS = "success"
STATUS_ERROR = "error"


@dataclass(frozen=True)
class RequestState:
    """
    Snapshot of a request controller.

    Attributes:
        data: Last successfully received payload (kept across errors).
        loading: True while the current call is in flight.
        error: Error of the last settled call, None on success.
        status: One of idle, loading, success, error.
        sequence: Sequence number of the call this snapshot reflects.
    """
    data: Any = None
    loading: bool = False
    error: Optional[Exception] = None
    status: str = STATUS_IDLE
    sequence: int = 0


@dataclass(frozen=True)
class RequestDescriptor:
    """The (function, params, dependency key) unit of work of a call site."""
    fn: Callable[[Any], Any]
    params: Any = None
    dependency_key: Tuple[Any, ...] = ()


# -----------------------------------------------------------------------------
# RESPONSE ENVELOPE
# -----------------------------------------------------------------------------

@dataclass(frozen=True)
class ApiResponse:
    """Standard success envelope returned by the server and the simulator."""
    data: Any
    message: str = "Success"
    success: bool = True
    timestamp: str = field(default_factory=utc_timestamp)
    request_id: str = field(default_factory=new_request_id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": self.success,
            "data": self.data,
            "message": self.message,
            "timestamp": self.timestamp,
            "request_id": self.request_id,
        }


def paginate(items: Sequence[Any], page: int = 1, page_size: int = 20) -> Dict[str, Any]:
    """
    Slice a sequence into one page plus navigation metadata.

    Args:
        items: Full ordered sequence.
        page: 1-based page number (values below 1 are treated as 1).
        page_size: Number of items per page (at least 1).

    Returns:
        Dict[str, Any]: ``{"items": [...], "meta": {...}}``.
    """
    page = max(1, int(page))
    page_size = max(1, int(page_size))
    start = (page - 1) * page_size
    end = start + page_size
    page_items: List[Any] = list(items[start:end])

    return {
        "items": page_items,
        "meta": {
            "page": page,
            "page_size": page_size,
            "total": len(items),
            "total_pages": math.ceil(len(items) / page_size),
            "has_next_page": end < len(items),
            "has_previous_page": page > 1,
        },
    }
