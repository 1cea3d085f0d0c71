from __future__ import annotations

import logging
from typing import Any, Dict

logger = logging.getLogger(__name__)

# Browser-era flat keys -> current schema
_LEGACY_FLAT_KEYS = {
    "useRealApi": "use_real_backend",
    "apiBaseUrl": "base_endpoint",
    "mockErrorRate": "simulated_error_rate",
}
_LEGACY_DELAY_KEYS = {
    "mockDelayMin": "min",
    "mockDelayMax": "max",
    "mockDelayFixed": "fixed",
}


def run_migrations(data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Upgrade a persisted data source blob to the current schema.

    Applies each migration in order; every step is a no-op on blobs that
    are already current.

    Args:
        data: The raw blob read from the state document.

    Returns:
        Dict[str, Any]: A new dictionary in the current schema (unknown keys
        are kept so validation can report them).
    """
    migrated = dict(data)

    # 1. Flat camelCase schema (browser localStorage) -> nested snake_case
    if any(k in migrated for k in list(_LEGACY_FLAT_KEYS) + list(_LEGACY_DELAY_KEYS)):
        logger.info("Migrations: Detected legacy flat data source schema. Upgrading...")
        migrated = _migrate_flat_schema(migrated)

    # 2. Nested camelCase keys inside an otherwise current blob
    for old, new in (("useRealBackend", "use_real_backend"),
                     ("baseEndpoint", "base_endpoint"),
                     ("simulatedDelay", "simulated_delay"),
                     ("simulatedErrorRate", "simulated_error_rate")):
        if old in migrated and new not in migrated:
            migrated[new] = migrated.pop(old)
            logger.info(f"Migrations: Renamed '{old}' -> '{new}'.")

    return migrated


def _migrate_flat_schema(data: Dict[str, Any]) -> Dict[str, Any]:
    """Fold ``mockDelay*`` keys into ``simulated_delay`` and rename the rest."""
    out: Dict[str, Any] = {}
    delay: Dict[str, Any] = dict(data.get("simulated_delay") or {})

    for key, value in data.items():
        if key in _LEGACY_FLAT_KEYS:
            out[_LEGACY_FLAT_KEYS[key]] = value
        elif key in _LEGACY_DELAY_KEYS:
            delay[_LEGACY_DELAY_KEYS[key]] = value
        elif key != "simulated_delay":
            out[key] = value

    if delay:
        out["simulated_delay"] = delay
    return out
