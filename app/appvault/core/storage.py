"""Managed storage layout.

Imported payloads are kept one directory per identifier:

    <data_dir>/
        Unsigned/<uuid>/<Name>.app
        Signed/<uuid>/<Name>.app
"""

from pathlib import Path

from appvault.core.paths import SIGNED_DIRNAME, UNSIGNED_DIRNAME, get_data_dir


class StorageLayout:
    """Computes storage locations for imported and signed applications.

    Attributes:
        root: Base data directory holding the Unsigned and Signed trees.
    """

    def __init__(self, root: Path | None = None) -> None:
        self._root = root if root is not None else get_data_dir()

    @property
    def root(self) -> Path:
        """Base data directory."""
        return self._root

    @property
    def unsigned_root(self) -> Path:
        """Directory holding every imported (unsigned) application."""
        return self._root / UNSIGNED_DIRNAME

    @property
    def signed_root(self) -> Path:
        """Directory holding every signed application."""
        return self._root / SIGNED_DIRNAME

    def unsigned(self, uuid: str) -> Path:
        """Storage directory for an imported application.

        Args:
            uuid: Session identifier of the import.

        Returns:
            Path to <root>/Unsigned/<uuid>. The directory is not created.
        """
        if not uuid or "/" in uuid or uuid in (".", ".."):
            msg = f"Invalid storage identifier: {uuid!r}"
            raise ValueError(msg)
        return self.unsigned_root / uuid

    def signed(self, uuid: str) -> Path:
        """Storage directory for a signed application."""
        if not uuid or "/" in uuid or uuid in (".", ".."):
            msg = f"Invalid storage identifier: {uuid!r}"
            raise ValueError(msg)
        return self.signed_root / uuid
