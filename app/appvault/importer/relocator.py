"""Payload relocation into managed storage."""

import logging
import shutil
from pathlib import Path

from appvault.importer.errors import PayloadNotFound, RelocationFailed

logger = logging.getLogger(__name__)


class PayloadRelocator:
    """Moves an extracted payload into its storage directory."""

    def relocate(self, payload: Path, destination: Path, remnant: Path | None = None) -> Path:
        """Move the payload directory to destination.

        The destination must not already hold anything; its parent
        directories are created. After the move, the remnant directory
        (usually the work area) is removed on a best-effort basis.

        Args:
            payload: Extracted payload directory.
            destination: Storage directory for this import.
            remnant: Directory to remove after a successful move.

        Returns:
            The destination path.

        Raises:
            PayloadNotFound: If payload does not exist. Nothing is created.
            RelocationFailed: If the destination is occupied or the move fails.
        """
        if not payload.is_dir():
            msg = f"Payload not found: {payload}"
            raise PayloadNotFound(msg)

        if destination.exists() and (not destination.is_dir() or any(destination.iterdir())):
            msg = f"Destination already occupied: {destination}"
            raise RelocationFailed(msg)

        try:
            destination.parent.mkdir(parents=True, exist_ok=True)
            if destination.is_dir():
                # empty placeholder left by a previous attempt
                destination.rmdir()
            shutil.move(str(payload), str(destination))
        except OSError as e:
            msg = f"Could not move payload to {destination}: {e}"
            raise RelocationFailed(msg) from e

        logger.info("Moved payload to %s", destination)

        if remnant is not None:
            shutil.rmtree(remnant, ignore_errors=True)
            logger.debug("Removed remnant %s", remnant)

        return destination
