from __future__ import annotations

"""
Data Source Facade.

Single entry point for views and tools. Every attribute access re-selects
the backend of its kind from the current configuration, so switching
between the real and the simulated backend needs no restart.
"""

import logging
import random
from typing import Any, Dict, Optional

from assetlib.core.backends.base import ResourceBackend
from assetlib.core.backends.registry import BackendRegistry
from assetlib.domain import constants as const
from assetlib.domain.config import ConfigStore

logger = logging.getLogger(__name__)


class DataSource:
    """Facade over a BackendRegistry and the runtime configuration store."""

    def __init__(
            self,
            config_store: Optional[ConfigStore] = None,
            registry: Optional[BackendRegistry] = None,
            *,
            rng: Optional[random.Random] = None,
            auth_token: Optional[str] = None,
    ) -> None:
        self._config_store = config_store or ConfigStore()
        self._registry = registry or BackendRegistry.default(
            self._config_store, rng=rng, auth_token=auth_token
        )
        logger.debug(f"DataSource: Ready with kinds {self._registry.kinds()}")

    @property
    def config_store(self) -> ConfigStore:
        return self._config_store

    @property
    def registry(self) -> BackendRegistry:
        return self._registry

    def backend(self, kind: str) -> ResourceBackend:
        """
        Resolve the backend serving ``kind`` right now.

        Raises:
            KeyError: Unknown resource kind.
        """
        return self._registry.select(kind, self._config_store.get_config())

    @property
    def media(self) -> ResourceBackend:
        return self.backend(const.KIND_MEDIA)

    @property
    def folders(self) -> ResourceBackend:
        return self.backend(const.KIND_FOLDERS)

    @property
    def collections(self) -> ResourceBackend:
        return self.backend(const.KIND_COLLECTIONS)

    @property
    def tags(self) -> ResourceBackend:
        return self.backend(const.KIND_TAGS)

    @property
    def users(self) -> ResourceBackend:
        return self.backend(const.KIND_USERS)

    def describe(self) -> Dict[str, Any]:
        """Active data source summary plus the backend class serving each kind."""
        config = self._config_store.get_config()
        info = self._config_store.describe()
        info["backends"] = {
            kind: type(self._registry.select(kind, config)).__name__ for kind in self._registry.kinds()
        }
        return info
