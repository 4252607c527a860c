"""Shared library injection.

Copies library files into an application bundle's Frameworks directory.
Each file is handled independently: a failed copy is recorded and the
remaining libraries are still processed.
"""

import logging
import shutil
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

FRAMEWORKS_DIRNAME = "Frameworks"


@dataclass(frozen=True, slots=True)
class InjectionOutcome:
    """Result of copying one library into a bundle.

    Attributes:
        source: Library file that was copied.
        destination: Target path inside the bundle.
        success: Whether the copy completed.
        error: Error message if the copy failed, None otherwise.
    """

    source: Path
    destination: Path
    success: bool
    error: str | None = None


@dataclass(frozen=True, slots=True)
class InjectionReport:
    """All per-library outcomes of one injection run."""

    outcomes: tuple[InjectionOutcome, ...] = ()

    @property
    def success_count(self) -> int:
        """Number of libraries copied."""
        return sum(1 for o in self.outcomes if o.success)

    @property
    def failure_count(self) -> int:
        """Number of libraries that could not be copied."""
        return sum(1 for o in self.outcomes if not o.success)

    @property
    def failed(self) -> list[InjectionOutcome]:
        """Outcomes of the failed copies."""
        return [o for o in self.outcomes if not o.success]


class LibraryInjector:
    """Copies shared libraries into an application bundle.

    Attributes:
        frameworks_dirname: Name of the library directory inside the bundle.
    """

    def __init__(self, frameworks_dirname: str = FRAMEWORKS_DIRNAME) -> None:
        self.frameworks_dirname = frameworks_dirname

    def inject(self, libraries: Iterable[Path], bundle: Path) -> InjectionReport:
        """Copy each library into <bundle>/Frameworks.

        An empty library list is a no-op and does not create the directory.
        An existing file with the same name is replaced.

        Args:
            libraries: Library files to copy. Sources are never moved.
            bundle: Path to the .app directory.

        Returns:
            InjectionReport with one outcome per library.

        Raises:
            OSError: If the Frameworks directory cannot be created.
        """
        sources = list(libraries)
        if not sources:
            return InjectionReport()

        frameworks_dir = bundle / self.frameworks_dirname
        frameworks_dir.mkdir(parents=True, exist_ok=True)

        outcomes: list[InjectionOutcome] = []
        for source in sources:
            outcomes.append(self._copy_single(source, frameworks_dir / source.name))

        report = InjectionReport(outcomes=tuple(outcomes))
        if report.success_count:
            logger.info("Injected %d library file(s) into %s", report.success_count, bundle.name)
        return report

    def _copy_single(self, source: Path, destination: Path) -> InjectionOutcome:
        try:
            destination.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.debug("Could not remove existing %s: %s", destination, e)

        try:
            shutil.copy2(source, destination)
        except OSError as e:
            logger.error("Failed to inject library %s: %s", source.name, e)
            return InjectionOutcome(
                source=source,
                destination=destination,
                success=False,
                error=str(e),
            )

        logger.debug("Injected library %s", source.name)
        return InjectionOutcome(source=source, destination=destination, success=True)
