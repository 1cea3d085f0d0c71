from __future__ import annotations

from typing import Any, Dict, List, Mapping, Optional, Tuple
from urllib.parse import urlencode

USER_AGENT = "AssetLib-Client/1.0.0"
DEFAULT_TIMEOUT = 30.0


def build_query_string(params: Optional[Mapping[str, Any]]) -> str:
    """
    Encode query parameters, skipping None values.

    Lists are sent as repeated ``key[]`` entries and booleans as
    ``true``/``false``.

    Returns:
        str: ``"?a=1&b[]=x"`` or an empty string when nothing remains.
    """
    if not params:
        return ""

    pairs: List[Tuple[str, str]] = []
    for key, value in params.items():
        if value is None:
            continue
        if isinstance(value, (list, tuple, set)):
            for item in value:
                if item is not None:
                    pairs.append((f"{key}[]", _as_text(item)))
        else:
            pairs.append((key, _as_text(value)))

    query = urlencode(pairs)
    return f"?{query}" if query else ""


def build_headers(default_headers: Optional[Dict[str, str]], auth_token: Optional[str] = None) -> Dict[str, str]:
    """Merge the configured default headers with client identification."""
    headers = {"User-Agent": USER_AGENT}
    headers.update(default_headers or {})
    if auth_token:
        headers["Authorization"] = f"Bearer {auth_token}"
    return headers


def _as_text(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
