"""Per-import scratch directories.

Each import owns exactly one work area, named with a fresh token so that
no two sessions can share a directory:

    <temp_root>/appvault-import-<token>/
        <archive>.ipa       -- copy of the source archive
        Payload/            -- extracted payload
"""

import logging
import shutil
import uuid
from pathlib import Path
from types import TracebackType

from appvault.core.paths import get_temp_root

logger = logging.getLogger(__name__)

WORK_AREA_PREFIX = "appvault-import-"


class WorkArea:
    """Single-use scratch directory for one import.

    Use as a context manager to guarantee removal:

        with WorkArea() as area:
            ...
    """

    def __init__(self, root: Path | None = None, token: str | None = None) -> None:
        """Initialize the work area without touching the filesystem.

        Args:
            root: Parent directory. Defaults to the system temp directory.
            token: Unique token embedded in the directory name. Defaults to
                a fresh UUID.
        """
        self.token = token or str(uuid.uuid4())
        self._root = root if root is not None else get_temp_root()
        self._path = self._root / f"{WORK_AREA_PREFIX}{self.token}"

    @property
    def path(self) -> Path:
        """The work area directory."""
        return self._path

    def create(self) -> Path:
        """Create the directory. An already existing directory is not an error.

        Raises:
            OSError: If the directory cannot be created.
        """
        self._path.mkdir(parents=True, exist_ok=True)
        logger.debug("Created work area %s", self._path)
        return self._path

    def destroy(self) -> None:
        """Remove the directory tree. A missing directory is a no-op.

        Raises:
            OSError: If an existing tree cannot be removed.
        """
        if not self._path.exists():
            return
        shutil.rmtree(self._path)
        logger.debug("Removed work area %s", self._path)

    def __enter__(self) -> "WorkArea":
        self.create()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        try:
            self.destroy()
        except OSError as e:
            logger.warning("Could not remove work area %s: %s", self._path, e)
