from __future__ import annotations

"""
Global Pytest Configuration and Fixtures.

This module sets up the testing environment, including:
1. Path manipulation to ensure the 'src' directory is importable.
2. Shared fixtures for configuration stores and seeded hierarchies.
"""

import os
import random
import sys
from pathlib import Path
from typing import List

import pytest

# -----------------------------------------------------------------------------
# Path Configuration
# -----------------------------------------------------------------------------
_SRC_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src"))
if _SRC_PATH not in sys.path:
    sys.path.insert(0, _SRC_PATH)

from assetlib.core.tree.engine import TreeEngine  # noqa: E402
from assetlib.domain import seed  # noqa: E402
from assetlib.domain.config import ConfigStore  # noqa: E402
from assetlib.domain.models import ResourceNode  # noqa: E402


# -----------------------------------------------------------------------------
# Shared Fixtures
# -----------------------------------------------------------------------------
@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    """Location of an isolated state document (never the real user dir)."""
    return tmp_path / "state" / "config.json"


@pytest.fixture
def config_store(config_path: Path) -> ConfigStore:
    """A store with defaults, ignoring ASSETLIB_* environment variables."""
    return ConfigStore(str(config_path), apply_env=False)


@pytest.fixture
def fast_store(config_store: ConfigStore) -> ConfigStore:
    """A store configured for zero latency and no injected failures."""
    config_store.update_config({
        "simulated_delay": {"fixed": 0},
        "simulated_error_rate": 0.0,
    })
    return config_store


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def folder_nodes() -> List[ResourceNode]:
    return [ResourceNode.from_dict(f) for f in seed.seed_folders()]


@pytest.fixture
def folder_engine(folder_nodes: List[ResourceNode]) -> TreeEngine:
    """TreeEngine loaded with the seed folder hierarchy."""
    return TreeEngine(folder_nodes, id_prefix="folder")
