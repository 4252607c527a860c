"""Shared helpers for building command dependencies from settings."""

import typer

from appvault.core.catalog import JsonlCatalog
from appvault.core.config import ConfigError, Settings, load_settings
from appvault.core.storage import StorageLayout
from appvault.libraries.store import LibraryStore
from appvault.utils.formatting import print_error


def require_settings() -> Settings:
    """Load settings, exiting with code 1 when the file is invalid."""
    try:
        return load_settings()
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from None


def get_catalog() -> JsonlCatalog:
    """Catalog backed by the default state directory."""
    return JsonlCatalog()


def get_storage(settings: Settings) -> StorageLayout:
    """Storage layout rooted at the configured data directory."""
    return StorageLayout(settings.effective_data_dir)


def get_library_store(settings: Settings) -> LibraryStore:
    """Default library store at the configured location."""
    return LibraryStore(settings.effective_libraries_dir)
