from __future__ import annotations

"""
Integration tests for the DataSource facade.

Verifies that backend selection follows the configuration on every access
and that the simulated data set behaves as one consistent library.
"""

import asyncio
import random
from unittest.mock import patch

import pytest

from assetlib.core.backends.real import RealBackend
from assetlib.core.backends.simulated import SimulatedBackend
from assetlib.core.services.data_source import DataSource
from assetlib.domain.config import ConfigStore


@pytest.fixture
def data_source(fast_store: ConfigStore) -> DataSource:
    return DataSource(fast_store, rng=random.Random(3))


def test_toggle_switches_backend_without_restart(data_source: DataSource, fast_store: ConfigStore) -> None:
    """TC-01: The same facade serves the new backend after a config change."""
    assert isinstance(data_source.media, SimulatedBackend)

    fast_store.update_config({"use_real_backend": True})
    assert isinstance(data_source.media, RealBackend)

    fast_store.update_config({"use_real_backend": False})
    assert isinstance(data_source.media, SimulatedBackend)


def test_simulated_state_survives_toggle(data_source: DataSource, fast_store: ConfigStore) -> None:
    created = asyncio.run(data_source.tags.create({"name": "archive"}))

    fast_store.update_config({"use_real_backend": True})
    fast_store.update_config({"use_real_backend": False})

    fetched = asyncio.run(data_source.tags.get_by_id(created["id"]))
    assert fetched["name"] == "archive"


def test_real_backend_uses_current_endpoint(data_source: DataSource, fast_store: ConfigStore) -> None:
    """TC-02: The endpoint is read per request, not captured at selection."""
    fast_store.update_config({"use_real_backend": True, "base_endpoint": "http://first.test/api"})
    backend = data_source.folders
    fast_store.update_config({"base_endpoint": "http://second.test/api"})

    with patch("assetlib.core.backends.real.api_request", return_value={"id": "1"}) as api:
        asyncio.run(backend.get_by_id("1"))

    assert api.call_args.args[0] == "http://second.test/api"
    assert api.call_args.args[1] == "/folders/1"


def test_unknown_kind(data_source: DataSource) -> None:
    with pytest.raises(KeyError):
        data_source.backend("playlists")


def test_describe(data_source: DataSource, fast_store: ConfigStore) -> None:
    """TC-03: Summary names the data source and the class serving each kind."""
    info = data_source.describe()

    assert info["data_source"] == "mock"
    assert info["is_using_real_api"] is False
    assert info["backends"]["collections"] == "SimulatedCollectionBackend"
    assert set(info["backends"]) == {"media", "folders", "collections", "tags", "users"}

    fast_store.update_config({"use_real_backend": True})
    assert set(data_source.describe()["backends"].values()) == {"RealBackend"}


def test_collection_membership_visible_through_media(data_source: DataSource) -> None:
    """TC-04: Adding items to a collection is reflected by the media filter."""
    asyncio.run(data_source.collections.add_items("3", ["9"]))

    page = asyncio.run(data_source.media.list({"collection": "3"}))

    assert {m["id"] for m in page["items"]} == {"4", "7", "9"}
