"""Default library store.

Library files placed in the store are injected into every imported
application. Storage location: ~/.local/share/appvault/DefaultLibraries/
"""

from __future__ import annotations

import logging
import shutil
import uuid
from pathlib import Path

from appvault.core.paths import get_libraries_dir
from appvault.libraries.deb import DebExtractionError, extract_dylibs_from_deb

logger = logging.getLogger(__name__)

SUPPORTED_EXTENSIONS = (".dylib", ".deb")


class LibraryStoreError(RuntimeError):
    """Raised when the library store cannot be read or modified."""


class LibraryStore:
    """Persistent directory of default libraries (.dylib and .deb files).

    Attributes:
        directory: Directory holding the library files.
    """

    def __init__(self, directory: Path | None = None) -> None:
        self._directory = directory if directory is not None else get_libraries_dir()

    @property
    def directory(self) -> Path:
        """Directory holding the library files."""
        return self._directory

    def list(self) -> list[Path]:
        """List stored library files sorted by name.

        Hidden files and unsupported extensions are ignored. A missing
        directory yields an empty list.
        """
        if not self._directory.is_dir():
            return []

        try:
            contents = list(self._directory.iterdir())
        except OSError as e:
            logger.warning("Failed to load default libraries: %s", e)
            return []

        libraries = [
            p
            for p in contents
            if p.is_file()
            and not p.name.startswith(".")
            and p.suffix.lower() in SUPPORTED_EXTENSIONS
        ]
        return sorted(libraries, key=lambda p: p.name)

    def add(self, source: Path) -> Path:
        """Copy a library file into the store.

        A name clash is resolved by appending _1, _2, ... to the stem.

        Args:
            source: .dylib or .deb file to add.

        Returns:
            Path of the stored copy.

        Raises:
            LibraryStoreError: If the file type is unsupported or the copy fails.
        """
        if source.suffix.lower() not in SUPPORTED_EXTENSIONS:
            msg = f"Unsupported library type: {source.name} (expected .dylib or .deb)"
            raise LibraryStoreError(msg)

        destination = self._directory / source.name
        counter = 1
        while destination.exists():
            destination = self._directory / f"{source.stem}_{counter}{source.suffix}"
            counter += 1

        try:
            self._directory.mkdir(parents=True, exist_ok=True)
            shutil.copy2(source, destination)
        except OSError as e:
            msg = f"Failed to add default library {source.name}: {e}"
            raise LibraryStoreError(msg) from e

        logger.info("Added default library %s", destination.name)
        return destination

    def remove(self, name: str) -> None:
        """Remove a stored library by file name.

        Raises:
            LibraryStoreError: If the library does not exist or cannot be removed.
        """
        target = self._directory / name
        if Path(name).name != name or not target.is_file():
            msg = f"Default library not found: {name}"
            raise LibraryStoreError(msg)

        try:
            target.unlink()
        except OSError as e:
            msg = f"Failed to remove default library {name}: {e}"
            raise LibraryStoreError(msg) from e

        logger.info("Removed default library %s", name)

    def library_files(self, scratch: Path) -> list[Path]:
        """Materialize the .dylib files to inject.

        .dylib files are copied into scratch; .deb packages are unpacked
        there and their libraries collected. A package that cannot be
        unpacked is logged and skipped.

        Args:
            scratch: Directory to materialize files in (created if missing).

        Returns:
            Paths of .dylib files under scratch.
        """
        stored = self.list()
        if not stored:
            return []

        scratch.mkdir(parents=True, exist_ok=True)

        dylibs: list[Path] = []
        for library in stored:
            ext = library.suffix.lower()
            if ext == ".dylib":
                destination = scratch / library.name
                try:
                    shutil.copy2(library, destination)
                except OSError as e:
                    logger.error("Could not stage %s: %s", library.name, e)
                    continue
                dylibs.append(destination)
            elif ext == ".deb":
                try:
                    dylibs.extend(extract_dylibs_from_deb(library, scratch / uuid.uuid4().hex))
                except DebExtractionError as e:
                    logger.error("Could not unpack %s: %s", library.name, e)
            else:
                logger.warning("Unsupported default library type: %s", ext)

        return dylibs
