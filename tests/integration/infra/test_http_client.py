from __future__ import annotations

"""
Integration tests for Network Infrastructure.

Utilizes mocking of 'requests.request' to verify URL and header building,
envelope unwrapping and the mapping of transport failures onto the error
taxonomy without making real network calls.
"""

from typing import Any
from unittest.mock import MagicMock, patch

import pytest
import requests

from assetlib.domain.errors import (
    CycleError,
    NetworkError,
    NotFoundError,
    RequestTimeoutError,
    ServerError,
    ValidationError,
)
from assetlib.infra.network import USER_AGENT, api_request, build_headers, build_query_string

BASE = "https://api.test/v1"


def _response(status: int, payload: Any = None, *, content: bytes = b"{}") -> MagicMock:
    mock_response = MagicMock()
    mock_response.status_code = status
    mock_response.ok = 200 <= status < 400
    mock_response.content = content
    if isinstance(payload, Exception):
        mock_response.json.side_effect = payload
    else:
        mock_response.json.return_value = payload
    return mock_response


# -----------------------------------------------------------------------------
# REQUEST BUILDING
# -----------------------------------------------------------------------------

def test_query_string_encoding() -> None:
    """TC-01: None is skipped, lists repeat 'key[]', booleans are lowercase."""
    query = build_query_string({"page": 2, "folder": None, "types": ["image", "video"], "cascade": True})

    assert query == "?page=2&types%5B%5D=image&types%5B%5D=video&cascade=true"
    assert build_query_string({"folder": None}) == ""
    assert build_query_string(None) == ""


def test_headers_include_identification_and_token() -> None:
    headers = build_headers({"Content-Type": "application/json"}, auth_token="abc")

    assert headers["User-Agent"] == USER_AGENT
    assert headers["Content-Type"] == "application/json"
    assert headers["Authorization"] == "Bearer abc"
    assert "Authorization" not in build_headers(None)


def test_get_request_and_envelope_unwrapping() -> None:
    """TC-02: {"success", "data"} envelopes are unwrapped."""
    envelope = {"success": True, "data": [{"id": "1"}], "message": "Success"}

    with patch("requests.request", return_value=_response(200, envelope)) as req:
        result = api_request(BASE + "/", "/folders", query={"parent_id": "1"}, timeout=5)

    assert result == [{"id": "1"}]
    args, kwargs = req.call_args
    assert args == ("GET", "https://api.test/v1/folders?parent_id=1")
    assert kwargs["timeout"] == 5
    assert "json" not in kwargs


def test_body_sent_as_json_for_writes() -> None:
    with patch("requests.request", return_value=_response(201, {"id": "9"})) as req:
        result = api_request(BASE, "/folders", "post", body={"name": "New"})

    assert result == {"id": "9"}
    assert req.call_args.args[0] == "POST"
    assert req.call_args.kwargs["json"] == {"name": "New"}


def test_no_content_returns_none() -> None:
    with patch("requests.request", return_value=_response(204, None, content=b"")):
        assert api_request(BASE, "/folders/1", "DELETE") is None


# -----------------------------------------------------------------------------
# ERROR MAPPING
# -----------------------------------------------------------------------------

def test_timeout_maps_to_request_timeout_error() -> None:
    """TC-03: requests timeouts become RequestTimeoutError."""
    with patch("requests.request", side_effect=requests.exceptions.Timeout("slow")):
        with pytest.raises(RequestTimeoutError) as exc:
            api_request(BASE, "/media", timeout=1)

    assert exc.value.status == 408


def test_connection_failure_maps_to_network_error() -> None:
    with patch("requests.request", side_effect=requests.exceptions.ConnectionError("refused")):
        with pytest.raises(NetworkError) as exc:
            api_request(BASE, "/media")

    assert exc.value.status == 0


def test_error_body_is_mapped() -> None:
    """TC-04: Non-2xx responses use status and body to pick the class."""
    body = {"message": "Folder not found", "code": "not_found", "requestId": "req_123"}

    with patch("requests.request", return_value=_response(404, body)):
        with pytest.raises(NotFoundError) as exc:
            api_request(BASE, "/folders/x")

    assert exc.value.message == "Folder not found"
    assert exc.value.request_id == "req_123"


def test_validation_and_tree_errors() -> None:
    with patch("requests.request", return_value=_response(400, {"message": "bad", "fields": ["name"]})):
        with pytest.raises(ValidationError) as exc:
            api_request(BASE, "/folders", "POST", body={})
    assert exc.value.fields == ["name"]

    with patch("requests.request", return_value=_response(400, {"code": "circular_reference"})):
        with pytest.raises(CycleError):
            api_request(BASE, "/folders/1", "PUT", body={"parent_id": "2"})


def test_server_error_without_json_body() -> None:
    with patch("requests.request", return_value=_response(502, ValueError("no json"), content=b"<html>")):
        with pytest.raises(ServerError) as exc:
            api_request(BASE, "/media")

    assert exc.value.status == 502


def test_malformed_success_body() -> None:
    with patch("requests.request", return_value=_response(200, ValueError("no json"), content=b"oops")):
        with pytest.raises(ServerError) as exc:
            api_request(BASE, "/media")

    assert exc.value.code == "invalid_response"
