"""Catalog entry model for imported and signed applications.

This module defines the record written to the catalog once an import
has been moved into managed storage.
"""

import json
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import Any


class CatalogKind(str, Enum):
    """Kind of application recorded in the catalog.

    Attributes:
        IMPORTED: Unsigned application imported from an archive.
        SIGNED: Application produced by a signing run.
    """

    IMPORTED = "imported"
    SIGNED = "signed"


@dataclass(frozen=True, slots=True)
class CatalogEntry:
    """Record of a single stored application.

    Every descriptive field may be None: an application whose bundle
    metadata could not be read is still importable.

    Attributes:
        uuid: Identifier of the storage directory (the import session id).
        kind: Whether the application is imported or signed.
        date: When the record was written (ISO 8601 with timezone).
        source: Where the archive came from (path or URL), if known.
        name: Display name of the application.
        identifier: Reverse-domain bundle identifier.
        version: Bundle version string.
        icon: Icon file name inside the bundle.
        credential: Link to the signing credential used, if any.
    """

    uuid: str
    kind: CatalogKind
    date: str
    source: str | None = None
    name: str | None = None
    identifier: str | None = None
    version: str | None = None
    icon: str | None = None
    credential: str | None = None

    def __post_init__(self) -> None:
        """Validate entry data after initialization."""
        if not self.uuid:
            msg = "Catalog entry UUID cannot be empty"
            raise ValueError(msg)
        if not self.date:
            msg = "Catalog entry date cannot be empty"
            raise ValueError(msg)

    @property
    def display_name(self) -> str:
        """Name for display, falling back to the identifier or UUID."""
        return self.name or self.identifier or self.uuid

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for JSON storage.

        Absent optional fields are omitted.
        """
        result: dict[str, Any] = {
            "uuid": self.uuid,
            "kind": self.kind.value,
            "date": self.date,
        }
        for key in ("source", "name", "identifier", "version", "icon", "credential"):
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        return result

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CatalogEntry":
        """Deserialize from dictionary.

        Raises:
            KeyError: If required fields are missing.
            ValueError: If kind is invalid.
        """
        return cls(
            uuid=data["uuid"],
            kind=CatalogKind(data.get("kind", CatalogKind.IMPORTED.value)),
            date=data["date"],
            source=data.get("source"),
            name=data.get("name"),
            identifier=data.get("identifier"),
            version=data.get("version"),
            icon=data.get("icon"),
            credential=data.get("credential"),
        )

    def to_json_line(self) -> str:
        """Serialize to a single JSON line (no trailing newline)."""
        return json.dumps(self.to_dict(), separators=(",", ":"))

    @classmethod
    def from_json_line(cls, line: str) -> "CatalogEntry":
        """Deserialize from a JSON line.

        Raises:
            json.JSONDecodeError: If line is not valid JSON.
            KeyError: If required fields are missing.
            ValueError: If data is invalid.
        """
        data = json.loads(line.strip())
        return cls.from_dict(data)


def create_catalog_entry(
    uuid: str,
    kind: CatalogKind = CatalogKind.IMPORTED,
    source: str | None = None,
    name: str | None = None,
    identifier: str | None = None,
    version: str | None = None,
    icon: str | None = None,
    credential: str | None = None,
) -> CatalogEntry:
    """Factory function to create a new CatalogEntry stamped with the current time.

    Args:
        uuid: Storage identifier of the application.
        kind: Imported or signed.
        source: Origin of the archive.
        name: Application name.
        identifier: Bundle identifier.
        version: Bundle version.
        icon: Icon file name.
        credential: Optional signing credential link.

    Returns:
        New CatalogEntry with the current UTC timestamp.
    """
    return CatalogEntry(
        uuid=uuid,
        kind=kind,
        date=datetime.now(UTC).isoformat(),
        source=source,
        name=name,
        identifier=identifier,
        version=version,
        icon=icon,
        credential=credential,
    )
