from __future__ import annotations

"""
Network Communication Infrastructure.

JSON-over-HTTP transport used by the real backend.
"""

from assetlib.infra.network.common import (
    DEFAULT_TIMEOUT,
    USER_AGENT,
    build_headers,
    build_query_string,
)
from assetlib.infra.network.http_client import api_request

__all__ = [
    "api_request",
    "build_headers",
    "build_query_string",
    "DEFAULT_TIMEOUT",
    "USER_AGENT",
]
