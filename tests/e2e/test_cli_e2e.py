from __future__ import annotations

"""
End-to-End (E2E) CLI Tests.

Verifies the application's external behavior by invoking the entry point
script via subprocess. These tests validate argument parsing, exit codes,
stream output (stdout/stderr) and the persisted state document in the user
data directory.
"""

import json
import os
import subprocess
import sys
from pathlib import Path
from typing import List

import pytest

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
SRC_DIR = PROJECT_ROOT / "src"
ENTRY_POINT = SRC_DIR / "assetlib" / "main.py"


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    return tmp_path / "userdata"


def run_cli(args: List[str], data_dir: Path) -> subprocess.CompletedProcess[str]:
    """
    Helper to execute the CLI in a separate process.

    Injects the 'src' directory into PYTHONPATH so the package resolves
    without installation, and points the user data directory at ``data_dir``.

    Args:
        args: List of command line arguments (excluding 'python' and script path).
        data_dir: Directory holding the state document for this run.

    Returns:
        subprocess.CompletedProcess: The result object containing returncode, stdout, and stderr.
    """
    env = os.environ.copy()
    env["PYTHONPATH"] = str(SRC_DIR) + os.pathsep + env.get("PYTHONPATH", "")
    env["ASSETLIB_DATA_DIR"] = str(data_dir)
    env.pop("ASSETLIB_USE_REAL_BACKEND", None)
    env.pop("ASSETLIB_BASE_ENDPOINT", None)

    cmd = [sys.executable, str(ENTRY_POINT)] + args

    return subprocess.run(
        cmd,
        env=env,
        capture_output=True,
        text=True,
        encoding="utf-8"
    )


def test_cli_help_execution(data_dir: Path) -> None:
    """TC-01: Verify the help menu displays correctly and exits with 0."""
    result = run_cli(["--help"], data_dir)

    assert result.returncode == 0
    assert "usage:" in result.stdout.lower()
    assert "probe" in result.stdout


def test_cli_missing_command(data_dir: Path) -> None:
    result = run_cli([], data_dir)

    assert result.returncode == 2
    assert "usage:" in result.stderr.lower()


def test_cli_config_round_trip(data_dir: Path) -> None:
    """TC-02: 'config set' persists under the data directory for later runs."""
    result = run_cli(["config", "set", "--delay-fixed", "0", "--error-rate", "0"], data_dir)
    assert result.returncode == 0, result.stderr

    document = json.loads((data_dir / "config.json").read_text(encoding="utf-8"))
    assert document["data_source_config"]["simulated_delay"]["fixed"] == 0

    shown = run_cli(["--json", "config", "show"], data_dir)
    assert json.loads(shown.stdout)["simulated_error_rate"] == 0.0


def test_cli_tree_with_simulated_backend(data_dir: Path) -> None:
    """TC-03: The simulated folder hierarchy is rendered end to end."""
    run_cli(["config", "set", "--delay-fixed", "0", "--error-rate", "0"], data_dir)

    result = run_cli(["tree", "--ids"], data_dir)

    assert result.returncode == 0, result.stderr
    assert "├── Documents [2]" in result.stdout
    assert "Icons [12]" in result.stdout


def test_cli_probe_json_report(data_dir: Path) -> None:
    """TC-04: Every injected failure is reported and the run still succeeds."""
    run_cli(["config", "set", "--delay-fixed", "0", "--error-rate", "1"], data_dir)

    result = run_cli(["--json", "probe", "--kind", "media", "--calls", "3"], data_dir)

    assert result.returncode == 0, result.stderr
    report = json.loads(result.stdout)
    assert report["failures"] == 3
    assert report["backend"] == "SimulatedMediaBackend"


def test_cli_invalid_setting(data_dir: Path) -> None:
    result = run_cli(["config", "set", "--timeout", "0"], data_dir)

    assert result.returncode == 2
    assert "Invalid setting" in result.stderr
