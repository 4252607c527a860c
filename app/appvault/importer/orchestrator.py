"""Import orchestration.

Runs one import session through its stages:

    CREATED -> COPIED -> EXTRACTED -> RELOCATED -> CATALOGED -> CLEANED

Copy, extraction and relocation failures halt the session with an
ImportPipelineError tagged with the failed stage. A catalog write failure
is only logged: the payload has already been moved. The work area is
removed when the session ends, whatever the outcome.
"""

from __future__ import annotations

import logging
import shutil
import threading
import uuid
from collections.abc import Callable, Iterator
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from appvault.importer.errors import CopyFailed, ImportPipelineError, ImportStage
from appvault.importer.extractor import ArchiveExtractor
from appvault.importer.injector import InjectionReport
from appvault.importer.progress import FanOut
from appvault.importer.relocator import PayloadRelocator
from appvault.importer.workarea import WorkArea
from appvault.models.bundle import BundleMetadata, find_bundle, read_bundle_metadata
from appvault.models.catalog import CatalogEntry, CatalogKind, create_catalog_entry

if TYPE_CHECKING:
    from appvault.core.catalog import CatalogRepository
    from appvault.core.storage import StorageLayout

logger = logging.getLogger(__name__)


@dataclass
class ImportSession:
    """Transient state of one import.

    Attributes:
        session_id: Unique identifier, also the storage directory name.
        source: Archive the import was started from.
        work_area: Scratch directory owned by this session.
        install: Whether the caller intends to install after import.
        progress: Sink receiving extraction progress, if any.
        stage: Last stage reached.
        failed_stage: Stage the session failed in, None on success.
        archive_path: Copy of the archive inside the work area.
        payload_path: Extracted payload directory.
        storage_path: Final storage directory.
    """

    session_id: str
    source: Path
    work_area: WorkArea
    install: bool = False
    progress: Callable[[float], None] | None = None
    stage: ImportStage = ImportStage.CREATED
    failed_stage: ImportStage | None = None
    archive_path: Path | None = None
    payload_path: Path | None = None
    storage_path: Path | None = None


@dataclass(frozen=True, slots=True)
class ImportResult:
    """Outcome of a completed import.

    Attributes:
        session_id: Identifier of the stored application.
        storage_path: Directory holding the application bundle.
        metadata: Bundle metadata; fields may be None.
        entry: Catalog entry, or None if the catalog write failed.
        injection: Default libraries copied into the bundle.
        install: Install intent carried over from the session.
    """

    session_id: str
    storage_path: Path
    metadata: BundleMetadata
    entry: CatalogEntry | None
    injection: InjectionReport = field(default_factory=InjectionReport)
    install: bool = False

    @property
    def cataloged(self) -> bool:
        """Whether the catalog entry was written."""
        return self.entry is not None


class ImportOrchestrator:
    """Imports a single archive into managed storage.

    Each orchestrator is single-shot: a new attempt needs a new
    orchestrator, and therefore a new session identifier.
    """

    def __init__(
        self,
        archive: Path,
        *,
        catalog: CatalogRepository,
        storage: StorageLayout,
        extractor: ArchiveExtractor | None = None,
        relocator: PayloadRelocator | None = None,
        install: bool = False,
        progress: Callable[[float], None] | None = None,
        download: Callable[[float], None] | None = None,
        work_root: Path | None = None,
        source: str | None = None,
    ) -> None:
        """Initialize the orchestrator without touching the filesystem.

        Args:
            archive: Archive to import.
            catalog: Repository receiving the catalog entry.
            storage: Storage layout computing the destination directory.
            extractor: Archive extractor (default: no library injection).
            relocator: Payload relocator.
            install: Install intent, carried into the result.
            progress: Sink for extraction progress.
            download: Download task progress sink, fanned out alongside progress.
            work_root: Parent directory for the work area.
            source: Origin recorded in the catalog (defaults to the archive path).
        """
        session_id = str(uuid.uuid4())
        sinks = [s for s in (progress, download) if s is not None]
        self.session = ImportSession(
            session_id=session_id,
            source=archive,
            work_area=WorkArea(root=work_root, token=session_id),
            install=install,
            progress=FanOut(*sinks) if len(sinks) > 1 else (sinks[0] if sinks else None),
        )
        self._catalog = catalog
        self._storage = storage
        self._extractor = extractor or ArchiveExtractor()
        self._relocator = relocator or PayloadRelocator()
        self._origin = source if source is not None else str(archive)
        self._cancel = threading.Event()
        self._started = False
        self._injection = InjectionReport()

        logger.debug("Import initiated for %s with ID %s", archive.name, session_id)

    @property
    def session_id(self) -> str:
        """Identifier of this import session."""
        return self.session.session_id

    def cancel(self) -> None:
        """Request cancellation.

        Honoured between archive members while extracting. Once extraction
        has finished the import runs to completion.
        """
        self._cancel.set()

    def start(self, executor: Executor | None = None) -> Future[ImportResult]:
        """Run the import on a background worker.

        Args:
            executor: Executor to submit to. A private single-worker pool is
                used when None.

        Returns:
            Future resolving to the ImportResult or raising the stage error.
        """
        if executor is not None:
            return executor.submit(self.run)

        pool = ThreadPoolExecutor(max_workers=1, thread_name_prefix=f"import-{self.session_id[:8]}")
        try:
            return pool.submit(self.run)
        finally:
            pool.shutdown(wait=False)

    def run(self) -> ImportResult:
        """Run every stage synchronously.

        Returns:
            ImportResult of the completed import.

        Raises:
            ImportPipelineError: Stage-tagged failure, raised after cleanup.
            RuntimeError: If the orchestrator has already been run.
        """
        if self._started:
            msg = f"Import session {self.session_id} has already run"
            raise RuntimeError(msg)
        self._started = True

        session = self.session
        try:
            with self._work_area_scope():
                archive = self._copy()
                self._extract(archive)
                storage_path = self._relocate()
                return self._record(storage_path)
        except ImportPipelineError as e:
            e.session_id = session.session_id
            session.failed_stage = e.stage
            logger.error("[%s] Import failed at %s: %s", session.session_id, e.stage.value, e)
            raise
        finally:
            session.stage = ImportStage.CLEANED

    @contextmanager
    def _work_area_scope(self) -> Iterator[WorkArea]:
        area = self.session.work_area
        try:
            area.create()
        except OSError as e:
            msg = f"Cannot create work area {area.path}: {e}"
            raise CopyFailed(msg) from e

        try:
            yield area
        finally:
            try:
                area.destroy()
            except OSError as e:
                logger.warning("[%s] Could not remove work area: %s", self.session_id, e)

    def _copy(self) -> Path:
        session = self.session
        destination = session.work_area.path / session.source.name
        try:
            if destination.exists() or destination.is_symlink():
                destination.unlink()
            shutil.copyfile(session.source, destination)
        except OSError as e:
            msg = f"Cannot copy {session.source} into work area: {e}"
            raise CopyFailed(msg) from e

        session.archive_path = destination
        session.stage = ImportStage.COPIED
        logger.info("[%s] File copied to %s", session.session_id, destination)
        return destination

    def _extract(self, archive: Path) -> None:
        session = self.session
        result = self._extractor.extract(
            archive,
            session.work_area,
            progress=session.progress,
            cancel=self._cancel,
        )
        session.payload_path = result.payload
        session.stage = ImportStage.EXTRACTED
        self._injection = result.injection

    def _relocate(self) -> Path:
        session = self.session
        destination = self._storage.unsigned(session.session_id)
        self._relocator.relocate(
            session.payload_path or session.work_area.path / "Payload",
            destination,
            remnant=session.work_area.path,
        )
        session.storage_path = destination
        session.stage = ImportStage.RELOCATED
        return destination

    def _record(self, storage_path: Path) -> ImportResult:
        session = self.session
        bundle = find_bundle(storage_path)
        metadata = read_bundle_metadata(bundle) if bundle is not None else BundleMetadata()

        entry: CatalogEntry | None = create_catalog_entry(
            uuid=session.session_id,
            kind=CatalogKind.IMPORTED,
            source=self._origin,
            name=metadata.name,
            identifier=metadata.identifier,
            version=metadata.version,
            icon=metadata.icon,
        )
        try:
            self._catalog.add(entry)
            session.stage = ImportStage.CATALOGED
            logger.info("[%s] Added to catalog", session.session_id)
        except Exception as e:
            # best effort once the payload is stored
            logger.warning(
                "[%s] Could not write catalog entry: %s", session.session_id, e, exc_info=True
            )
            entry = None

        return ImportResult(
            session_id=session.session_id,
            storage_path=storage_path,
            metadata=metadata,
            entry=entry,
            injection=self._injection,
            install=session.install,
        )
