from __future__ import annotations

"""
Runtime Configuration Store.

Holds the process-wide data source settings (backend mode, base endpoint,
simulated latency and error rate). The settings are loaded once from the
state document in the user data directory, merged with the compiled-in
defaults, and re-persisted on every change made through ``update_config``.
"""

import copy
import logging
import os
from typing import Any, Dict, Optional

from assetlib.domain import constants as const
from assetlib.domain.migrations import run_migrations
from assetlib.domain.validator import get_default_config, validate_config
from assetlib.infra.fs import get_user_data_dir, read_json_document, write_json_document

logger = logging.getLogger(__name__)

ENV_USE_REAL_BACKEND = "ASSETLIB_USE_REAL_BACKEND"
ENV_BASE_ENDPOINT = "ASSETLIB_BASE_ENDPOINT"


def get_default_config_path() -> str:
    """Resolve the state document path inside the user data directory."""
    return os.path.join(get_user_data_dir(), const.CONFIG_FILENAME)


def _deep_merge(base: Dict[str, Any], partial: Dict[str, Any]) -> Dict[str, Any]:
    """Merge ``partial`` into a copy of ``base``, recursing into nested dicts."""
    out = copy.deepcopy(base)
    for key, value in partial.items():
        if isinstance(value, dict) and isinstance(out.get(key), dict):
            out[key] = _deep_merge(out[key], value)
        else:
            out[key] = copy.deepcopy(value)
    return out


# -----------------------------------------------------------------------------
# Store
# -----------------------------------------------------------------------------
class ConfigStore:
    """
    Owner of the runtime configuration.

    One instance is created at process start and handed explicitly to the
    backend registry and to the simulated backends. There is no locking: all
    mutation happens on the event loop thread and the last writer wins.
    """

    def __init__(self, path: Optional[str] = None, *, apply_env: bool = True) -> None:
        """
        Args:
            path: State document location; defaults to the user data dir.
            apply_env: Apply ``ASSETLIB_*`` environment overrides on load.
        """
        self._path = path or get_default_config_path()
        self._apply_env = apply_env
        self._config: Dict[str, Any] = get_default_config()
        self._loaded = False

    @property
    def path(self) -> str:
        return self._path

    @property
    def loaded(self) -> bool:
        return self._loaded

    # --- Lifecycle -----------------------------------------------------------

    def load(self) -> Dict[str, Any]:
        """
        Read the persisted blob and merge it over the defaults.

        Missing or corrupted documents fall back to defaults. Environment
        overrides are layered on top and become part of the active
        configuration like any other loaded value.

        Returns:
            Dict[str, Any]: A copy of the active configuration.
        """
        document = read_json_document(self._path) or {}
        blob = document.get(const.CONFIG_STORAGE_KEY)

        if blob is None:
            logger.debug("Config: No persisted data source blob. Using defaults.")
            blob = {}
        elif not isinstance(blob, dict):
            logger.warning("Config: Corrupted data source blob. Resetting to defaults.")
            blob = {}

        merged = _deep_merge(get_default_config(), run_migrations(blob))
        if self._apply_env:
            merged = _deep_merge(merged, _env_overrides())

        clean, warnings = validate_config(merged, strict=False)
        for w in warnings:
            logger.warning(f"Config: {w}")

        self._config = clean
        self._loaded = True
        logger.debug(f"Config: Loaded data source settings from {self._path}")
        return self.get_config()

    def save(self) -> bool:
        """
        Persist the active configuration under the well-known key.

        Other sections of the state document are preserved.

        Returns:
            bool: True when the document was written.
        """
        document = read_json_document(self._path) or {}
        document["version"] = const.CURRENT_CONFIG_VERSION
        document[const.CONFIG_STORAGE_KEY] = copy.deepcopy(self._config)
        ok = write_json_document(self._path, document)
        if ok:
            logger.debug(f"Config: Saved data source settings to {self._path}")
        return ok

    # --- Access --------------------------------------------------------------

    def get_config(self) -> Dict[str, Any]:
        """Return a deep copy of the active configuration."""
        if not self._loaded:
            self.load()
        return copy.deepcopy(self._config)

    def update_config(self, partial: Dict[str, Any], *, strict: bool = False) -> Dict[str, Any]:
        """
        Merge a partial configuration, validate it and persist the result.

        Nested blocks (``simulated_delay``) merge key by key, so
        ``{"simulated_delay": {"fixed": 0}}`` keeps ``min`` and ``max``.

        Args:
            partial: Keys to change.
            strict: Raise on invalid values instead of coercing them.

        Returns:
            Dict[str, Any]: A copy of the merged configuration.
        """
        if not self._loaded:
            self.load()

        merged = _deep_merge(self._config, run_migrations(partial))
        clean, warnings = validate_config(merged, strict=strict)
        for w in warnings:
            logger.warning(f"Config: {w}")

        changed = sorted(k for k in clean if clean.get(k) != self._config.get(k))
        self._config = clean
        self.save()

        if changed:
            logger.info(f"Config: Updated {', '.join(changed)}")
        return self.get_config()

    def reset(self) -> Dict[str, Any]:
        """Restore the defaults and persist them."""
        self._config = get_default_config()
        self._loaded = True
        self.save()
        logger.info("Config: Data source settings reset to defaults.")
        return self.get_config()

    def describe(self) -> Dict[str, Any]:
        """Summarize the active data source for status displays."""
        cfg = self.get_config()
        return {
            "data_source": "real" if cfg["use_real_backend"] else "mock",
            "is_using_real_api": cfg["use_real_backend"],
            "base_endpoint": cfg["base_endpoint"],
        }


def _env_overrides() -> Dict[str, Any]:
    """Collect runtime overrides from the environment."""
    overrides: Dict[str, Any] = {}
    use_real = os.environ.get(ENV_USE_REAL_BACKEND)
    if use_real is not None and use_real.strip():
        overrides["use_real_backend"] = use_real.strip()
    endpoint = os.environ.get(ENV_BASE_ENDPOINT)
    if endpoint is not None and endpoint.strip():
        overrides["base_endpoint"] = endpoint.strip()
    return overrides
