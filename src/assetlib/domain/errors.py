from __future__ import annotations

"""
Error Taxonomy.

Typed errors shared by the real and the simulated backends. Both backends
raise exactly these classes with the same attributes, so error handling code
cannot tell which backend produced a failure.
"""

import random
import string
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Type

_REQUEST_ID_ALPHABET = string.ascii_lowercase + string.digits


def new_request_id(rng: Optional[random.Random] = None) -> str:
    """Generate an opaque request identifier (``req_`` + 10 base-36 chars)."""
    source = rng or random
    return "req_" + "".join(source.choice(_REQUEST_ID_ALPHABET) for _ in range(10))


def utc_timestamp() -> str:
    """Return the current UTC time in ISO-8601 format."""
    return datetime.now(timezone.utc).isoformat()


# -----------------------------------------------------------------------------
# BASE ERROR
# -----------------------------------------------------------------------------

class ApiError(Exception):
    """
    Base class for every failure surfaced by a backend call.

    Attributes:
        message: Human readable description.
        status: HTTP-like status code (0 when no response was received).
        code: Machine readable error code.
        timestamp: ISO-8601 time at which the error was created.
        request_id: Identifier of the failed request, when known.
        debug: Free-form diagnostic data.
    """

    default_status: int = 500
    default_code: str = "api_error"

    def __init__(
            self,
            message: str = "An unexpected error occurred",
            *,
            status: Optional[int] = None,
            code: Optional[str] = None,
            request_id: Optional[str] = None,
            timestamp: Optional[str] = None,
            debug: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status = self.default_status if status is None else status
        self.code = code or self.default_code
        self.request_id = request_id or new_request_id()
        self.timestamp = timestamp or utc_timestamp()
        self.debug = debug or {}

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-friendly representation of the error."""
        return {
            "type": type(self).__name__,
            "message": self.message,
            "status": self.status,
            "code": self.code,
            "timestamp": self.timestamp,
            "request_id": self.request_id,
        }

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status={self.status}, code={self.code!r}, message={self.message!r})"


# -----------------------------------------------------------------------------
# TRANSPORT ERRORS
# -----------------------------------------------------------------------------

class NetworkError(ApiError):
    """No response was received from the server."""
    default_status = 0
    default_code = "network_error"


class RequestTimeoutError(ApiError):
    """The request did not complete within the configured timeout."""
    default_status = 408
    default_code = "timeout"


# -----------------------------------------------------------------------------
# SERVER RESPONSE ERRORS
# -----------------------------------------------------------------------------

class ValidationError(ApiError):
    """The request was rejected because of invalid input."""
    default_status = 400
    default_code = "invalid_request"

    def __init__(self, message: str = "Invalid request", *, fields: Optional[List[str]] = None, **kwargs: Any) -> None:
        super().__init__(message, **kwargs)
        self.fields: List[str] = list(fields or [])

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["fields"] = list(self.fields)
        return data


class AuthenticationError(ApiError):
    default_status = 401
    default_code = "unauthorized"


class AccessDeniedError(ApiError):
    """403 response (named to avoid shadowing the builtin PermissionError)."""
    default_status = 403
    default_code = "forbidden"


class NotFoundError(ApiError):
    default_status = 404
    default_code = "not_found"


class ConflictError(ApiError):
    default_status = 409
    default_code = "conflict"


class ServerError(ApiError):
    default_status = 500
    default_code = "server_error"


# -----------------------------------------------------------------------------
# TREE ERRORS
# -----------------------------------------------------------------------------

class CycleError(ApiError):
    """A move would make a node its own ancestor."""
    default_status = 400
    default_code = "circular_reference"


class HasChildrenError(ConflictError):
    """A non-cascading delete targeted a node that still has children."""
    default_code = "has_children"


# -----------------------------------------------------------------------------
# PROGRAMMER ERRORS
# -----------------------------------------------------------------------------

class UnsupportedOperationError(NotImplementedError):
    """The selected backend does not implement the requested operation."""


# -----------------------------------------------------------------------------
# STATUS MAPPING
# -----------------------------------------------------------------------------

_STATUS_MAP: Dict[int, Type[ApiError]] = {
    0: NetworkError,
    400: ValidationError,
    401: AuthenticationError,
    403: AccessDeniedError,
    404: NotFoundError,
    408: RequestTimeoutError,
    409: ConflictError,
}

_CODE_MAP: Dict[str, Type[ApiError]] = {
    "circular_reference": CycleError,
    "has_children": HasChildrenError,
    "folder_has_children": HasChildrenError,
}


def error_from_status(status: int, body: Optional[Dict[str, Any]] = None) -> ApiError:
    """
    Build the typed error matching an HTTP status and a JSON error body.

    The body may carry ``message``, ``code``, ``requestId`` (or
    ``request_id``) and, for validation failures, ``fields``.

    Args:
        status: HTTP status code of the response.
        body: Decoded JSON body, if any.

    Returns:
        ApiError: An instance of the most specific matching class.
    """
    body = body if isinstance(body, dict) else {}
    code = body.get("code") or None
    message = body.get("message") or "An error occurred"
    request_id = body.get("requestId") or body.get("request_id") or "unknown"

    cls = _CODE_MAP.get(code or "")
    if cls is None:
        cls = _STATUS_MAP.get(status)
    if cls is None:
        cls = ServerError if status >= 500 else ApiError

    kwargs: Dict[str, Any] = {"status": status, "code": code or "api_error", "request_id": request_id}
    if issubclass(cls, ValidationError):
        kwargs["fields"] = body.get("fields") or []
    return cls(message, **kwargs)
