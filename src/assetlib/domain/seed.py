from __future__ import annotations

"""
Seed Data for the Simulated Backend.

A small, self-consistent media library: a folder hierarchy, nested
collections, media items filed in those folders, tags and users. Factories
return fresh copies so every simulated backend owns its own data.
"""

import copy
from typing import Any, Dict, List

_FOLDERS: List[Dict[str, Any]] = [
    {"id": "1", "name": "Images", "parent_id": None, "path": "Images", "color": "#3B82F6"},
    {"id": "2", "name": "Documents", "parent_id": None, "path": "Documents", "color": "#10B981"},
    {"id": "3", "name": "Videos", "parent_id": None, "path": "Videos", "color": "#F59E0B"},
    {"id": "4", "name": "Marketing", "parent_id": "1", "path": "Images/Marketing", "color": "#6366F1"},
    {"id": "5", "name": "Products", "parent_id": "1", "path": "Images/Products", "color": "#EC4899"},
    {"id": "6", "name": "Team", "parent_id": "1", "path": "Images/Team", "color": "#14B8A6"},
    {"id": "7", "name": "Reports", "parent_id": "2", "path": "Documents/Reports", "color": "#8B5CF6"},
    {"id": "8", "name": "Contracts", "parent_id": "2", "path": "Documents/Contracts", "color": "#F43F5E"},
    {"id": "9", "name": "Tutorials", "parent_id": "3", "path": "Videos/Tutorials", "color": "#EF4444"},
    {"id": "10", "name": "Web Assets", "parent_id": "1", "path": "Images/Web Assets", "color": "#0EA5E9"},
    {"id": "11", "name": "Social Media", "parent_id": "1", "path": "Images/Social Media", "color": "#F97316"},
    {"id": "12", "name": "Icons", "parent_id": "10", "path": "Images/Web Assets/Icons", "color": "#8B5CF6"},
    {"id": "13", "name": "Banners", "parent_id": "10", "path": "Images/Web Assets/Banners", "color": "#EC4899"},
    {"id": "14", "name": "Logos", "parent_id": "10", "path": "Images/Web Assets/Logos", "color": "#10B981"},
    {"id": "15", "name": "Instagram", "parent_id": "11", "path": "Images/Social Media/Instagram", "color": "#6366F1"},
    {"id": "16", "name": "Twitter", "parent_id": "11", "path": "Images/Social Media/Twitter", "color": "#0EA5E9"},
    {"id": "17", "name": "Facebook", "parent_id": "11", "path": "Images/Social Media/Facebook", "color": "#3B82F6"},
]

_COLLECTIONS: List[Dict[str, Any]] = [
    {"id": "1", "name": "Homepage Redesign", "parent_id": None, "items": ["1", "3", "8"],
     "color": "#8B5CF6", "created_by": "user1", "is_shared": True,
     "created": "2025-03-10", "modified": "2025-03-15"},
    {"id": "2", "name": "Spring Campaign", "parent_id": None, "items": ["3", "5", "6"],
     "color": "#10B981", "created_by": "user1", "is_shared": True,
     "created": "2025-02-20", "modified": "2025-02-28"},
    {"id": "3", "name": "Legal Documents", "parent_id": None, "items": ["4", "7"],
     "color": "#F43F5E", "created_by": "user2", "is_shared": False,
     "created": "2025-01-15", "modified": "2025-03-01"},
    {"id": "4", "name": "Product Photoshoot", "parent_id": "1", "items": ["1", "12", "17"],
     "color": "#F59E0B", "created_by": "user3", "is_shared": False,
     "created": "2025-03-05", "modified": "2025-03-12"},
    {"id": "5", "name": "Social Media Content", "parent_id": "2", "items": ["6", "15", "16"],
     "color": "#6366F1", "created_by": "user1", "is_shared": True,
     "created": "2025-02-25", "modified": "2025-03-10"},
    {"id": "6", "name": "Annual Report Materials", "parent_id": None, "items": ["4", "18", "13"],
     "color": "#0EA5E9", "created_by": "user2", "is_shared": True,
     "created": "2025-01-05", "modified": "2025-02-15"},
    {"id": "7", "name": "Team Resources", "parent_id": "6", "items": ["2", "11", "19"],
     "color": "#14B8A6", "created_by": "user1", "is_shared": True,
     "created": "2024-12-10", "modified": "2025-03-01"},
]

_MEDIA: List[Dict[str, Any]] = [
    {"id": "1", "name": "hero-banner.jpg", "type": "image", "folder": "13", "tags": ["hero", "banner", "web"]},
    {"id": "2", "name": "team-photo.jpg", "type": "image", "folder": "6", "tags": ["team", "office"]},
    {"id": "3", "name": "spring-promo.png", "type": "image", "folder": "4", "tags": ["seasonal", "marketing"]},
    {"id": "4", "name": "annual-report-2024.pdf", "type": "document", "folder": "7", "tags": ["report"]},
    {"id": "5", "name": "campaign-brief.docx", "type": "document", "folder": "4", "tags": ["marketing"]},
    {"id": "6", "name": "instagram-post-01.jpg", "type": "image", "folder": "15", "tags": ["social"]},
    {"id": "7", "name": "vendor-contract.pdf", "type": "document", "folder": "8", "tags": ["contract"]},
    {"id": "8", "name": "homepage-mockup.fig", "type": "design", "folder": "10", "tags": ["design", "web"]},
    {"id": "9", "name": "onboarding.mp4", "type": "video", "folder": "9", "tags": ["tutorial"]},
    {"id": "10", "name": "company-logo.svg", "type": "image", "folder": "14", "tags": ["logo", "brand"]},
    {"id": "11", "name": "style-guide.pdf", "type": "document", "folder": "2", "tags": ["brand", "identity"]},
    {"id": "12", "name": "product-front.jpg", "type": "image", "folder": "5", "tags": ["product", "photography"]},
    {"id": "13", "name": "q4-chart.png", "type": "image", "folder": "7", "tags": ["report", "corporate"]},
    {"id": "14", "name": "icon-set.zip", "type": "archive", "folder": "12", "tags": ["icons", "ui"]},
    {"id": "15", "name": "twitter-header.png", "type": "image", "folder": "16", "tags": ["social", "banner"]},
    {"id": "16", "name": "facebook-cover.png", "type": "image", "folder": "17", "tags": ["social"]},
    {"id": "17", "name": "product-side.jpg", "type": "image", "folder": "5", "tags": ["product"]},
    {"id": "18", "name": "financials.xlsx", "type": "document", "folder": "7", "tags": ["report"]},
    {"id": "19", "name": "office-tour.mp4", "type": "video", "folder": "3", "tags": ["office", "team"]},
]

_TAGS: List[Dict[str, Any]] = [
    {"id": "1", "name": "product", "color": "#3B82F6", "count": 15, "category_id": "cat3"},
    {"id": "2", "name": "hero", "color": "#10B981", "count": 8, "category_id": "cat1"},
    {"id": "3", "name": "banner", "color": "#F59E0B", "count": 12, "category_id": "cat1"},
    {"id": "4", "name": "team", "color": "#8B5CF6", "count": 7, "category_id": "cat3"},
    {"id": "5", "name": "report", "color": "#EC4899", "count": 5, "category_id": "cat2"},
    {"id": "6", "name": "logo", "color": "#14B8A6", "count": 4, "category_id": "cat1"},
    {"id": "7", "name": "featured", "color": "#F43F5E", "count": 6, "category_id": "cat2"},
    {"id": "8", "name": "contract", "color": "#0EA5E9", "count": 3, "category_id": "cat1"},
    {"id": "9", "name": "tutorial", "color": "#F97316", "count": 2, "category_id": "cat2"},
    {"id": "10", "name": "social", "color": "#6366F1", "count": 9, "category_id": "cat2"},
    {"id": "11", "name": "seasonal", "color": "#EF4444", "count": 8, "category_id": "cat4"},
    {"id": "12", "name": "marketing", "color": "#8B5CF6", "count": 10, "category_id": "cat4"},
]

_USERS: List[Dict[str, Any]] = [
    {"id": "user1", "name": "Alex Johnson", "email": "alex.johnson@example.com", "role": "admin",
     "preferences": {"theme": "light", "view_mode": "grid", "grid_size": "medium", "default_sort": "name"}},
    {"id": "user2", "name": "Samantha Chen", "email": "samantha.chen@example.com", "role": "editor",
     "preferences": {"theme": "dark", "view_mode": "list", "grid_size": "small", "default_sort": "date"}},
    {"id": "user3", "name": "Michael Rodriguez", "email": "michael.rodriguez@example.com", "role": "editor",
     "preferences": {"theme": "light", "view_mode": "grid", "grid_size": "large", "default_sort": "name"}},
    {"id": "user4", "name": "Emily Williams", "email": "emily.williams@example.com", "role": "viewer",
     "preferences": {"theme": "system", "view_mode": "grid", "grid_size": "medium", "default_sort": "size"}},
]

CURRENT_USER_ID = "user1"


def seed_folders() -> List[Dict[str, Any]]:
    return copy.deepcopy(_FOLDERS)


def seed_collections() -> List[Dict[str, Any]]:
    return copy.deepcopy(_COLLECTIONS)


def seed_media() -> List[Dict[str, Any]]:
    return copy.deepcopy(_MEDIA)


def seed_tags() -> List[Dict[str, Any]]:
    return copy.deepcopy(_TAGS)


def seed_users() -> List[Dict[str, Any]]:
    return copy.deepcopy(_USERS)
