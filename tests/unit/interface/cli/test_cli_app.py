from __future__ import annotations

"""
Unit tests for the CLI Application Controller.

Drives ``main`` in-process against an isolated config file. Logging setup
is patched out so the root logger is left untouched.
"""

import json
from pathlib import Path
from typing import Iterator, List
from unittest.mock import patch

import pytest

from assetlib.domain.config import ENV_BASE_ENDPOINT, ENV_USE_REAL_BACKEND
from assetlib.domain.errors import NetworkError
from assetlib.interface.cli.app import main


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    monkeypatch.delenv(ENV_USE_REAL_BACKEND, raising=False)
    monkeypatch.delenv(ENV_BASE_ENDPOINT, raising=False)
    with patch("assetlib.interface.cli.app.configure_logging"):
        yield


@pytest.fixture
def cli(config_path: Path):
    """Run the CLI against the test config file."""
    def _run(*args: str) -> int:
        argv: List[str] = ["--config-file", str(config_path)] + list(args)
        return main(argv)
    return _run


@pytest.fixture
def fast_cli(cli):
    assert cli("config", "set", "--delay-fixed", "0", "--error-rate", "0") == 0
    return cli


# -----------------------------------------------------------------------------
# CONFIG COMMAND
# -----------------------------------------------------------------------------

def test_config_show_defaults(cli, capsys: pytest.CaptureFixture[str]) -> None:
    """TC-01: Human readable summary of the default configuration."""
    assert cli("config", "show") == 0

    out = capsys.readouterr().out
    assert "Data source:     mock" in out
    assert "Simulated delay: 200-800 ms" in out
    assert "Error rate:      5.0%" in out


def test_config_set_persists(cli, config_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    """TC-02: Changes are written to disk and visible to the next run."""
    assert cli("config", "set", "--real", "--endpoint", "http://localhost:3000/api") == 0
    capsys.readouterr()

    assert cli("--json", "config", "show") == 0
    shown = json.loads(capsys.readouterr().out)

    assert shown["use_real_backend"] is True
    assert shown["base_endpoint"] == "http://localhost:3000/api"
    assert config_path.exists()


def test_config_set_without_flags(cli, capsys: pytest.CaptureFixture[str]) -> None:
    assert cli("config", "set") == 2
    assert "Nothing to change" in capsys.readouterr().err


def test_config_set_invalid_value(cli, capsys: pytest.CaptureFixture[str]) -> None:
    """TC-03: Out of range values are rejected instead of clamped."""
    assert cli("config", "set", "--error-rate", "1.5") == 2
    assert "Invalid setting" in capsys.readouterr().err

    assert cli("--json", "config", "show") == 0
    assert json.loads(capsys.readouterr().out)["simulated_error_rate"] == 0.05


def test_config_reset(cli, capsys: pytest.CaptureFixture[str]) -> None:
    cli("config", "set", "--delay-fixed", "10")
    capsys.readouterr()

    assert cli("--json", "config", "reset") == 0
    assert json.loads(capsys.readouterr().out)["simulated_delay"]["fixed"] is None


# -----------------------------------------------------------------------------
# TREE COMMAND
# -----------------------------------------------------------------------------

def test_tree_renders_folders(fast_cli, capsys: pytest.CaptureFixture[str]) -> None:
    """TC-04: Folder hierarchy as connector lines, sorted by name."""
    capsys.readouterr()
    assert fast_cli("tree", "--ids") == 0

    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "├── Documents [2]"
    assert lines[-2:] == ["└── Videos [3]", "    └── Tutorials [9]"]
    assert len(lines) == 17


def test_tree_json_collections(fast_cli, capsys: pytest.CaptureFixture[str]) -> None:
    capsys.readouterr()
    assert fast_cli("--json", "tree", "collections") == 0

    roots = json.loads(capsys.readouterr().out)
    assert {r["id"] for r in roots} == {"1", "2", "3", "6"}
    nested = next(r for r in roots if r["id"] == "6")
    assert [c["id"] for c in nested["children"]] == ["7"]


def test_tree_reports_backend_errors(cli, capsys: pytest.CaptureFixture[str]) -> None:
    """TC-05: Backend failures become a one-line error and exit code 1."""
    cli("config", "set", "--real")
    capsys.readouterr()

    with patch("assetlib.core.backends.real.api_request", side_effect=NetworkError("Connection refused")):
        assert cli("tree") == 1

    assert "ERROR: Connection refused (network_error)" in capsys.readouterr().err


# -----------------------------------------------------------------------------
# PROBE COMMAND
# -----------------------------------------------------------------------------

def test_probe_counts_injected_failures(cli, capsys: pytest.CaptureFixture[str]) -> None:
    """TC-06: With every call failing, all failures are counted by code."""
    cli("config", "set", "--delay-fixed", "0", "--error-rate", "1")
    capsys.readouterr()

    assert cli("--json", "probe", "--kind", "tags", "--calls", "4") == 0

    report = json.loads(capsys.readouterr().out)
    assert report["backend"] == "SimulatedTagBackend"
    assert report["data_source"] == "mock"
    assert report["failures"] == 4
    assert report["failure_rate"] == 1.0
    assert report["errors"] == {"service_unavailable": 4}


def test_probe_human_readable(fast_cli, capsys: pytest.CaptureFixture[str]) -> None:
    capsys.readouterr()
    assert fast_cli("probe", "--calls", "2") == 0

    out = capsys.readouterr().out
    assert "Data source: mock (SimulatedFolderBackend)" in out
    assert "Failures: 0 (0.0%)" in out


def test_probe_rejects_zero_calls(cli, capsys: pytest.CaptureFixture[str]) -> None:
    assert cli("probe", "--calls", "0") == 2
    assert "--calls" in capsys.readouterr().err
