"""Import pipeline errors.

Every error that halts an import carries the stage it failed in, so the
caller can report where the import stopped.
"""

from enum import Enum


class ImportStage(str, Enum):
    """Stages of an import session.

    The progress states are CREATED through CLEANED. COPY, EXTRACT and
    RELOCATE tag the stage an import failed in.
    """

    CREATED = "created"
    COPIED = "copied"
    EXTRACTED = "extracted"
    RELOCATED = "relocated"
    CATALOGED = "cataloged"
    CLEANED = "cleaned"

    COPY = "copy"
    EXTRACT = "extract"
    RELOCATE = "relocate"


class ImportPipelineError(Exception):
    """Base exception for import failures.

    Attributes:
        stage: Stage the import failed in.
        session_id: Session identifier, once known to the orchestrator.
    """

    stage: ImportStage = ImportStage.CREATED

    def __init__(self, message: str, session_id: str | None = None) -> None:
        super().__init__(message)
        self.session_id = session_id


class CopyFailed(ImportPipelineError):
    """Raised when the source archive cannot be copied into the work area."""

    stage = ImportStage.COPY


class ExtractionFailed(ImportPipelineError):
    """Raised when the archive is corrupt, unsupported, or cannot be written out."""

    stage = ImportStage.EXTRACT


class ImportCancelled(ExtractionFailed):
    """Raised when extraction is cancelled by the caller."""


class PayloadNotFound(ImportPipelineError):
    """Raised when the expected payload directory does not exist."""

    stage = ImportStage.RELOCATE


class RelocationFailed(ImportPipelineError):
    """Raised when the payload cannot be moved into managed storage."""

    stage = ImportStage.RELOCATE
