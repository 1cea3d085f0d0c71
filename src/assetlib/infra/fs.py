from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Resolves the per-user directory where AssetLib keeps its durable client-side
state (the runtime configuration blob and the diagnostic logs).
"""

import json
import logging
import os
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# GLOBAL CONSTANTS
# -----------------------------------------------------------------------------

APP_DIR_NAME = "AssetLib"
UNIX_APP_DIR_NAME = ".assetlib"
DATA_DIR_ENV = "ASSETLIB_DATA_DIR"

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def get_user_data_dir() -> str:
    """
    Resolve the standard OS-specific directory for persistent application data.

    Automatically creates the hierarchy if it does not exist.
    Standards:
    - Override: $ASSETLIB_DATA_DIR
    - Windows: %LOCALAPPDATA%/AssetLib
    - Linux/Mac: ~/.assetlib

    Returns:
        str: Absolute path to the application data directory.
    """
    path: str = os.environ.get(DATA_DIR_ENV, "").strip()

    # Windows specific resolution
    if not path and os.name == "nt":
        base = os.environ.get("LOCALAPPDATA") or os.environ.get("APPDATA")
        if base:
            path = os.path.join(base, APP_DIR_NAME)

    # Posix fallback (Linux/Mac)
    if not path:
        path = os.path.join(os.path.expanduser("~"), UNIX_APP_DIR_NAME)

    # Idempotent directory creation
    try:
        os.makedirs(path, exist_ok=True)
    except OSError as e:
        logger.debug(f"FS: Could not create data directory '{path}': {e}")

    return os.path.abspath(path)


# -----------------------------------------------------------------------------
# JSON DOCUMENT I/O
# -----------------------------------------------------------------------------

def read_json_document(path: str) -> Optional[Dict[str, Any]]:
    """
    Read a JSON object from disk.

    Args:
        path: Absolute path of the document.

    Returns:
        Optional[Dict[str, Any]]: The parsed object, or None when the file is
        missing, unreadable, malformed or not a JSON object.
    """
    if not os.path.exists(path):
        return None

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError) as e:
        logger.warning(f"FS: Failed to read '{path}': {e}")
        return None

    if not isinstance(data, dict):
        logger.warning(f"FS: Ignoring '{path}' (root is not an object).")
        return None
    return data


def write_json_document(path: str, data: Dict[str, Any]) -> bool:
    """
    Persist a JSON object to disk, creating parent directories as needed.

    Returns:
        bool: True when the document was written.
    """
    try:
        os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(data, f, ensure_ascii=False, indent=4)
        return True
    except OSError as e:
        logger.error(f"FS: Failed to write '{path}': {e}")
        return False
