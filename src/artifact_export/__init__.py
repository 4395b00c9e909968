"""Artifact Export - bulk-export Claude conversation artifacts into a ZIP archive."""

__version__ = "0.1.0"
