"""Catalog persistence for stored applications.

This module provides the catalog repository interface used by the import
pipeline and a JSON Lines implementation of it.
"""

import json
import logging
import threading
from pathlib import Path
from typing import Protocol

from appvault.core.paths import ensure_state_dir, get_state_dir
from appvault.models.catalog import CatalogEntry, CatalogKind

logger = logging.getLogger(__name__)


class CatalogRepository(Protocol):
    """Interface the import pipeline writes catalog records through."""

    def add(self, entry: CatalogEntry) -> None:
        """Insert a new entry."""
        ...

    def latest(self, kind: CatalogKind | None = None) -> CatalogEntry | None:
        """Most recently added entry, optionally filtered by kind."""
        ...

    def all(self, kind: CatalogKind | None = None) -> list[CatalogEntry]:
        """All entries, newest first, optionally filtered by kind."""
        ...


class JsonlCatalog:
    """Catalog stored as a JSON Lines file.

    Storage location: ~/.local/state/appvault/catalog.jsonl

    Each line is one CatalogEntry. The file is append-only; entries are
    never rewritten. Appends from concurrent imports in the same process
    are serialized with a lock.

    Attributes:
        state_dir: Directory containing the catalog file.
    """

    CATALOG_FILENAME = "catalog.jsonl"

    def __init__(self, state_dir: Path | None = None) -> None:
        """Initialize JsonlCatalog.

        Args:
            state_dir: Optional override for state directory.
                      Default: ~/.local/state/appvault
        """
        self._state_dir = state_dir if state_dir is not None else get_state_dir()
        self._lock = threading.Lock()

    @property
    def path(self) -> Path:
        """Path to catalog.jsonl."""
        return self._state_dir / self.CATALOG_FILENAME

    def add(self, entry: CatalogEntry) -> None:
        """Append an entry to the catalog file.

        Creates the file and parent directories if they don't exist.

        Args:
            entry: The catalog entry to record.

        Raises:
            RuntimeError: If the state directory cannot be created.
            OSError: If the file cannot be written.
        """
        if self._state_dir == get_state_dir():
            ensure_state_dir()
        else:
            self._state_dir.mkdir(parents=True, exist_ok=True)

        line = entry.to_json_line()

        with self._lock, self.path.open(mode="a", encoding="utf-8") as f:
            f.write(line + "\n")
            f.flush()

        logger.debug("Recorded %s entry %s", entry.kind.value, entry.uuid)

    def all(self, kind: CatalogKind | None = None) -> list[CatalogEntry]:
        """Read catalog entries, newest first.

        Corrupt lines are skipped with a warning.

        Args:
            kind: Only return entries of this kind.

        Returns:
            List of CatalogEntry, newest first. Empty if the file doesn't exist.
        """
        if not self.path.exists():
            return []

        entries: list[CatalogEntry] = []

        with self.path.open(encoding="utf-8") as f:
            for line_num, line in enumerate(f, start=1):
                line = line.strip()
                if not line:
                    continue

                try:
                    entry = CatalogEntry.from_json_line(line)
                except (json.JSONDecodeError, KeyError, ValueError) as e:
                    logger.warning("Skipping corrupt catalog line %d: %s", line_num, str(e))
                    continue

                if kind is None or entry.kind == kind:
                    entries.append(entry)

        entries.reverse()
        return entries

    def latest(self, kind: CatalogKind | None = None) -> CatalogEntry | None:
        """Most recently added entry, optionally filtered by kind."""
        entries = self.all(kind)
        return entries[0] if entries else None

    def get(self, uuid: str) -> CatalogEntry | None:
        """Find an entry by its UUID."""
        for entry in self.all():
            if entry.uuid == uuid:
                return entry
        return None
