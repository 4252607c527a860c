"""Archive extraction for application imports.

Unpacks an application archive into a work area and augments the
extracted bundle with default libraries:

    <work_area>/
        Payload/
            <Name>.app/
                Info.plist
                Frameworks/     -- default libraries are copied here
"""

import logging
import os
import shutil
import stat
import threading
import zipfile
import zlib
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol

from appvault.importer.errors import ExtractionFailed, ImportCancelled
from appvault.importer.injector import InjectionReport, LibraryInjector
from appvault.importer.progress import clamp
from appvault.importer.workarea import WorkArea
from appvault.models.bundle import find_bundle

logger = logging.getLogger(__name__)

PAYLOAD_DIRNAME = "Payload"
RECOGNIZED_EXTENSIONS = ("ipa", "tipa")
LIBRARY_SCRATCH_DIRNAME = ".libraries"

_CHUNK_SIZE = 1024 * 1024

# Extensions accepted as zip containers
_zip_extensions: set[str] = {"zip"}
_registry_lock = threading.Lock()


def register_extension(extension: str) -> None:
    """Accept files with this extension as zip containers.

    Args:
        extension: Extension without the leading dot (case-insensitive).
    """
    with _registry_lock:
        _zip_extensions.add(extension.lower().lstrip("."))


def is_registered(extension: str) -> bool:
    """Check whether an extension is accepted as a zip container."""
    with _registry_lock:
        return extension.lower().lstrip(".") in _zip_extensions


class LibrarySource(Protocol):
    """Source of default library files to inject after extraction."""

    def library_files(self, scratch: Path) -> list[Path]:
        """Return library files ready to copy, materialized under scratch if needed."""
        ...


@dataclass(frozen=True, slots=True)
class ExtractionResult:
    """Outcome of a successful extraction.

    Attributes:
        payload: The Payload directory inside the work area.
        bundle: The application bundle found in the payload, if any.
        injection: Report of default libraries copied into the bundle.
    """

    payload: Path
    bundle: Path | None = None
    injection: InjectionReport = field(default_factory=InjectionReport)


class ArchiveExtractor:
    """Unpacks application archives into a work area.

    Attributes:
        libraries: Source of default libraries, or None to skip injection.
        injector: Injector used to copy libraries into the bundle.
    """

    def __init__(
        self,
        libraries: LibrarySource | None = None,
        injector: LibraryInjector | None = None,
    ) -> None:
        self.libraries = libraries
        self.injector = injector or LibraryInjector()

    def extract(
        self,
        archive: Path,
        work_area: WorkArea,
        progress: Callable[[float], None] | None = None,
        cancel: threading.Event | None = None,
    ) -> ExtractionResult:
        """Extract an archive and inject default libraries.

        This call blocks; the orchestrator runs it on its worker thread.
        The work area is never cleaned up here, even on failure.

        Args:
            archive: Archive to unpack (inside or outside the work area).
            work_area: Destination work area.
            progress: Receives fractional progress between 0.0 and 1.0.
            cancel: Checked between archive members.

        Returns:
            ExtractionResult with the Payload path.

        Raises:
            ExtractionFailed: If the archive is corrupt, unsupported, or
                cannot be written out.
            ImportCancelled: If cancel was set during extraction.
        """
        extension = archive.suffix.lower().lstrip(".")
        if extension in RECOGNIZED_EXTENSIONS:
            register_extension(extension)

        if not is_registered(extension):
            msg = f"Unsupported archive type: {archive.name}"
            raise ExtractionFailed(msg)

        self._unpack(archive, work_area.path, progress, cancel)

        payload = work_area.path / PAYLOAD_DIRNAME
        bundle, injection = self._augment(payload, work_area.path / LIBRARY_SCRATCH_DIRNAME)
        return ExtractionResult(payload=payload, bundle=bundle, injection=injection)

    def _unpack(
        self,
        archive: Path,
        destination: Path,
        progress: Callable[[float], None] | None,
        cancel: threading.Event | None,
    ) -> None:
        root = destination.resolve()
        try:
            with zipfile.ZipFile(archive, "r") as zf:
                members = zf.infolist()
                total_bytes = sum(m.file_size for m in members)
                done = 0
                _report(progress, 0.0)

                for index, member in enumerate(members, start=1):
                    if cancel is not None and cancel.is_set():
                        msg = f"Extraction of {archive.name} cancelled"
                        raise ImportCancelled(msg)

                    self._extract_member(zf, member, root)

                    # Weight by size; archives of empty files fall back to member count
                    if total_bytes:
                        done += member.file_size
                        _report(progress, done / total_bytes)
                    else:
                        _report(progress, index / len(members))

        except ImportCancelled:
            raise
        except (zipfile.BadZipFile, zlib.error, EOFError) as e:
            msg = f"Corrupt archive {archive.name}: {e}"
            raise ExtractionFailed(msg) from e
        except NotImplementedError as e:
            msg = f"Unsupported archive encoding in {archive.name}: {e}"
            raise ExtractionFailed(msg) from e
        except RuntimeError as e:
            # zipfile raises RuntimeError for encrypted members
            msg = f"Cannot extract {archive.name}: {e}"
            raise ExtractionFailed(msg) from e
        except OSError as e:
            msg = f"I/O error extracting {archive.name}: {e}"
            raise ExtractionFailed(msg) from e

        _report(progress, 1.0)
        logger.info("Extracted %s into %s", archive.name, destination)

    def _extract_member(self, zf: zipfile.ZipFile, member: zipfile.ZipInfo, root: Path) -> None:
        name = member.filename.replace("\\", "/")
        entry = root / name
        # Resolve the parent only so an existing link at the final component is not followed
        target = entry.parent.resolve() / entry.name

        # Prevent zip-slip: everything must stay under root
        if entry.name == ".." or not (target == root or target.parent.is_relative_to(root)):
            logger.warning("Skipping unsafe archive member %s", member.filename)
            return

        mode = (member.external_attr >> 16) & 0xFFFF

        if member.is_dir():
            target.mkdir(parents=True, exist_ok=True)
            return

        target.parent.mkdir(parents=True, exist_ok=True)

        if stat.S_ISLNK(mode):
            link_target = zf.read(member).decode("utf-8")
            resolved = (target.parent / link_target).resolve()
            if not resolved.is_relative_to(root):
                logger.warning("Skipping symlink %s pointing outside the archive", name)
                return
            if os.path.lexists(target):
                target.unlink()
            os.symlink(link_target, target)
            return

        if target.is_symlink():
            target.unlink()

        with zf.open(member, "r") as src, open(target, "wb") as dst:
            shutil.copyfileobj(src, dst, _CHUNK_SIZE)

        permissions = stat.S_IMODE(mode)
        if permissions:
            os.chmod(target, permissions)

    def _augment(self, payload: Path, scratch: Path) -> tuple[Path | None, InjectionReport]:
        """Inject default libraries into the bundle. Never raises."""
        bundle = find_bundle(payload)
        if bundle is None:
            logger.warning(
                "Could not find an .app bundle in %s, skipping default libraries", payload
            )
            return None, InjectionReport()

        if self.libraries is None:
            return bundle, InjectionReport()

        try:
            library_files = self.libraries.library_files(scratch)
        except (OSError, RuntimeError, ValueError) as e:
            logger.error("Could not load default libraries: %s", e)
            return bundle, InjectionReport()

        if not library_files:
            logger.info("No default libraries to load")
            return bundle, InjectionReport()

        logger.info("Loading %d default library file(s) into %s", len(library_files), bundle.name)
        try:
            report = self.injector.inject(library_files, bundle)
        except OSError as e:
            logger.error("Could not prepare %s for default libraries: %s", bundle.name, e)
            return bundle, InjectionReport()

        return bundle, report


def _report(progress: Callable[[float], None] | None, fraction: float) -> None:
    if progress is not None:
        progress(clamp(fraction))
