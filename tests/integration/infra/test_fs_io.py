from __future__ import annotations

"""
Integration tests for FileSystem Infrastructure.

Validates cross-platform data directory resolution and the JSON document
reader/writer used by the configuration store.
"""

import json
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from assetlib.infra.fs import DATA_DIR_ENV, get_user_data_dir, read_json_document, write_json_document

# -----------------------------------------------------------------------------
# PATH RESOLUTION TESTS
# -----------------------------------------------------------------------------

def test_get_user_data_dir_override(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """TC-01: The environment override wins and the directory is created."""
    target = tmp_path / "data"
    monkeypatch.setenv(DATA_DIR_ENV, str(target))

    path = get_user_data_dir()

    assert path == os.path.abspath(str(target))
    assert target.is_dir()


def test_get_user_data_dir_windows(monkeypatch: pytest.MonkeyPatch) -> None:
    """TC-02: Verify resolution of %LOCALAPPDATA% on Windows systems."""
    monkeypatch.delenv(DATA_DIR_ENV, raising=False)
    mock_appdata = "C:/Users/Test/AppData/Local"
    with patch("os.name", "nt"):
        with patch.dict(os.environ, {"LOCALAPPDATA": mock_appdata}):
            with patch("os.makedirs"):
                path = get_user_data_dir()
                assert "AssetLib" in path
                assert path.lower().startswith(os.path.abspath(mock_appdata).lower())


def test_get_user_data_dir_unix(monkeypatch: pytest.MonkeyPatch) -> None:
    """TC-02: Verify resolution of ~/.assetlib on Unix-like systems."""
    monkeypatch.delenv(DATA_DIR_ENV, raising=False)
    mock_home = "/home/testuser"
    with patch("os.name", "posix"):
        with patch("os.path.expanduser", return_value=mock_home):
            with patch("os.makedirs"):
                path = get_user_data_dir()
                normalized_path = path.replace("\\", "/")
                assert normalized_path.endswith("/home/testuser/.assetlib")


def test_get_user_data_dir_tolerates_mkdir_failure(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv(DATA_DIR_ENV, str(tmp_path / "locked"))
    with patch("os.makedirs", side_effect=OSError("Permission Denied")):
        path = get_user_data_dir()

    assert path.endswith("locked")


# -----------------------------------------------------------------------------
# JSON DOCUMENT TESTS
# -----------------------------------------------------------------------------

def test_write_then_read_document(tmp_path: Path) -> None:
    """TC-03: Parent directories are created on write."""
    target = tmp_path / "deep" / "nested" / "config.json"

    assert write_json_document(str(target), {"data_source_config": {"version": 1}}) is True
    assert read_json_document(str(target)) == {"data_source_config": {"version": 1}}


def test_read_missing_document(tmp_path: Path) -> None:
    assert read_json_document(str(tmp_path / "absent.json")) is None


def test_read_malformed_or_non_object(tmp_path: Path) -> None:
    """TC-04: Corrupt and non-object documents read as absent."""
    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    listing = tmp_path / "list.json"
    listing.write_text(json.dumps([1, 2, 3]), encoding="utf-8")

    assert read_json_document(str(broken)) is None
    assert read_json_document(str(listing)) is None


def test_write_failure_returns_false(tmp_path: Path) -> None:
    with patch("builtins.open", side_effect=OSError("disk full")):
        assert write_json_document(str(tmp_path / "config.json"), {}) is False
