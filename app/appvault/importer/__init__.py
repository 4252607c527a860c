"""Application archive import pipeline.

This module provides the work area, archive extraction, library injection,
payload relocation and the orchestrator that sequences them.
"""

from appvault.importer.errors import (
    CopyFailed,
    ExtractionFailed,
    ImportCancelled,
    ImportPipelineError,
    ImportStage,
    PayloadNotFound,
    RelocationFailed,
)
from appvault.importer.extractor import (
    PAYLOAD_DIRNAME,
    RECOGNIZED_EXTENSIONS,
    ArchiveExtractor,
    ExtractionResult,
    LibrarySource,
    register_extension,
)
from appvault.importer.injector import InjectionOutcome, InjectionReport, LibraryInjector
from appvault.importer.orchestrator import ImportOrchestrator, ImportResult, ImportSession
from appvault.importer.progress import FanOut, ProgressChannel, ProgressSink
from appvault.importer.relocator import PayloadRelocator
from appvault.importer.workarea import WorkArea

__all__ = [
    "PAYLOAD_DIRNAME",
    "RECOGNIZED_EXTENSIONS",
    "ArchiveExtractor",
    "CopyFailed",
    "ExtractionFailed",
    "ExtractionResult",
    "FanOut",
    "ImportCancelled",
    "ImportOrchestrator",
    "ImportPipelineError",
    "ImportResult",
    "ImportSession",
    "ImportStage",
    "InjectionOutcome",
    "InjectionReport",
    "LibraryInjector",
    "LibrarySource",
    "PayloadNotFound",
    "PayloadRelocator",
    "ProgressChannel",
    "ProgressSink",
    "RelocationFailed",
    "WorkArea",
    "register_extension",
]
