from __future__ import annotations

"""
Domain Constants.

Application-wide constants: configuration versioning and storage keys,
resource kinds served by the backends, and the node colour palette.
"""

from typing import List, Tuple

CURRENT_CONFIG_VERSION = "1.0.0"

# Name of the state document in the user data directory
CONFIG_FILENAME = "config.json"

# Well-known key holding the data source configuration blob
CONFIG_STORAGE_KEY = "data_source_config"

DEFAULT_BASE_ENDPOINT = "https://api.medialibrary.example.com/v1"

# -----------------------------------------------------------------------------
# RESOURCE KINDS
# -----------------------------------------------------------------------------
KIND_MEDIA = "media"
KIND_FOLDERS = "folders"
KIND_COLLECTIONS = "collections"
KIND_TAGS = "tags"
KIND_USERS = "users"

RESOURCE_KINDS: Tuple[str, ...] = (
    KIND_MEDIA,
    KIND_FOLDERS,
    KIND_COLLECTIONS,
    KIND_TAGS,
    KIND_USERS,
)

# Kinds whose entities form a parent-referencing hierarchy
TREE_KINDS: Tuple[str, ...] = (KIND_FOLDERS, KIND_COLLECTIONS)

# -----------------------------------------------------------------------------
# PRESENTATION DEFAULTS
# -----------------------------------------------------------------------------
NODE_COLORS: List[str] = [
    "#3B82F6", "#10B981", "#F59E0B", "#6366F1", "#EC4899",
    "#14B8A6", "#8B5CF6", "#F43F5E", "#0EA5E9", "#F97316", "#EF4444",
]

DEFAULT_PAGE_SIZE = 20
