"""Default libraries injected into imported applications."""

from appvault.libraries.deb import DebExtractionError, extract_dylibs_from_deb, read_ar
from appvault.libraries.store import LibraryStore, LibraryStoreError

__all__ = [
    "DebExtractionError",
    "LibraryStore",
    "LibraryStoreError",
    "extract_dylibs_from_deb",
    "read_ar",
]
