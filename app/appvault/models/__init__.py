"""Data models for appvault.

This module exports the core data structures used throughout the application.
"""

from appvault.models.bundle import BundleMetadata, find_bundle, read_bundle_metadata
from appvault.models.catalog import CatalogEntry, CatalogKind, create_catalog_entry
from appvault.models.credential import SigningCredential

__all__ = [
    "BundleMetadata",
    "CatalogEntry",
    "CatalogKind",
    "SigningCredential",
    "create_catalog_entry",
    "find_bundle",
    "read_bundle_metadata",
]
