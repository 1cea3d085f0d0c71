from __future__ import annotations

"""
Backend Selector.

Keeps a (real, simulated) backend pair per resource kind and resolves which
one serves a call from the runtime configuration. Resolution happens on
every ``select`` call and nothing is cached, so toggling
``use_real_backend`` takes effect on the next request.
"""

import logging
import random
from typing import Any, Dict, List, Mapping, Optional, Tuple

from assetlib.core.backends.base import ResourceBackend
from assetlib.core.backends.real import RealBackend
from assetlib.core.backends.simulated import build_simulated_backends
from assetlib.domain import constants as const
from assetlib.domain.config import ConfigStore

logger = logging.getLogger(__name__)


class BackendRegistry:
    """Registry of backend pairs keyed by resource kind."""

    def __init__(self) -> None:
        self._pairs: Dict[str, Tuple[ResourceBackend, ResourceBackend]] = {}

    def register(self, kind: str, real: ResourceBackend, simulated: ResourceBackend) -> None:
        """Register (or replace) the backend pair serving ``kind``."""
        self._pairs[kind] = (real, simulated)
        logger.debug(f"Registry: Registered backends for '{kind}'")

    def kinds(self) -> List[str]:
        return list(self._pairs)

    def select(self, kind: str, config: Mapping[str, Any]) -> ResourceBackend:
        """
        Return the backend that should serve ``kind`` under ``config``.

        Args:
            kind: Resource kind (media, folders, collections, tags, users).
            config: Current runtime configuration.

        Raises:
            KeyError: ``kind`` was never registered.
        """
        try:
            real, simulated = self._pairs[kind]
        except KeyError:
            raise KeyError(f"No backend registered for resource kind '{kind}'") from None
        return real if config.get("use_real_backend") else simulated

    @classmethod
    def default(
            cls,
            config_store: ConfigStore,
            *,
            rng: Optional[random.Random] = None,
            auth_token: Optional[str] = None,
    ) -> "BackendRegistry":
        """Registry wired with the HTTP and in-memory backends of every kind."""
        registry = cls()
        simulated = build_simulated_backends(config_store, rng=rng)
        for kind in const.RESOURCE_KINDS:
            registry.register(kind, RealBackend(kind, config_store, auth_token=auth_token), simulated[kind])
        return registry
