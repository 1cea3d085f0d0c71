"""AssetLib: adaptive data access layer for the media asset organizer."""

__version__ = "1.0.0"
