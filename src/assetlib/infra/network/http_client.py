from __future__ import annotations

"""
JSON-over-HTTP transport for the real backend.

Every failure is converted into the shared error taxonomy: no response
becomes NetworkError, an expired timeout becomes RequestTimeoutError and
non-2xx responses are mapped from their status and ``{message, code,
requestId}`` body.
"""

import logging
from typing import Any, Dict, Mapping, Optional

import requests

from assetlib.domain.errors import (
    NetworkError,
    RequestTimeoutError,
    ServerError,
    error_from_status,
)
from assetlib.infra.network.common import DEFAULT_TIMEOUT, build_headers, build_query_string

logger = logging.getLogger(__name__)


def api_request(
        base_endpoint: str,
        path: str,
        method: str = "GET",
        *,
        body: Optional[Any] = None,
        query: Optional[Mapping[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
        timeout: float = DEFAULT_TIMEOUT,
        auth_token: Optional[str] = None,
) -> Any:
    """
    Execute one blocking request and return the decoded payload.

    A ``{"data": ...}`` envelope is unwrapped; other JSON bodies are returned
    as they are. Empty responses (204) yield None.

    Args:
        base_endpoint: Base URL, without trailing slash.
        path: Resource path starting with ``/``.
        method: HTTP verb.
        body: JSON body for non-GET requests.
        query: Query parameters.
        headers: Default headers from the runtime configuration.
        timeout: Seconds before the request is abandoned.
        auth_token: Optional bearer token.

    Raises:
        ApiError: The typed error matching the failure.
    """
    url = f"{base_endpoint.rstrip('/')}{path}{build_query_string(query)}"
    kwargs: Dict[str, Any] = {
        "headers": build_headers(headers, auth_token),
        "timeout": timeout,
    }
    if body is not None and method.upper() != "GET":
        kwargs["json"] = body

    logger.debug(f"Network: {method.upper()} {url}")

    try:
        response = requests.request(method.upper(), url, **kwargs)
    except requests.exceptions.Timeout as e:
        logger.warning(f"Network: {method.upper()} {path} timed out after {timeout}s.")
        raise RequestTimeoutError(f"Request timed out after {timeout}s") from e
    except requests.exceptions.RequestException as e:
        logger.error(f"Network: Communication error on {method.upper()} {path}: {e}")
        raise NetworkError(f"Network request failed: {e}") from e

    payload = _decode(response)

    if not response.ok:
        error = error_from_status(response.status_code, payload if isinstance(payload, dict) else None)
        logger.info(f"Network: {method.upper()} {path} -> {response.status_code} ({error.code})")
        raise error

    if isinstance(payload, dict) and "data" in payload and "success" in payload:
        return payload["data"]
    return payload


def _decode(response: requests.Response) -> Any:
    """Decode a JSON body; non-JSON success bodies are a server fault."""
    if response.status_code == 204 or not response.content:
        return None
    try:
        return response.json()
    except ValueError as e:
        if response.ok:
            raise ServerError(
                "Malformed response from server (body is not JSON)",
                status=response.status_code,
                code="invalid_response",
            ) from e
        return None
