"""Signing credential (provisioning profile) model.

Field names follow the property-list keys of the embedded document so
that the decoded dictionary validates directly. Keys not modelled here
are kept as extra fields.
"""

from datetime import UTC, datetime
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field


def _as_utc(value: datetime) -> datetime:
    # plistlib returns naive datetimes in UTC
    return value if value.tzinfo is not None else value.replace(tzinfo=UTC)


class SigningCredential(BaseModel):
    """Structured view of a signing credential file.

    Attributes:
        name: Profile name.
        team_name: Owning team display name.
        creation_date: When the profile was issued.
        expiration_date: When the profile stops being valid.
        app_id_name: Name of the App ID the profile is bound to.
        uuid: Profile UUID.
        team_identifier: Team identifiers.
        platform: Platforms the profile covers.
        version: Profile format version.
        is_xcode_managed: Whether Xcode manages the profile.
        provisions_all_devices: Enterprise-style profile without a device list.
        provisioned_devices: Device UDIDs the profile is limited to.
        entitlements: Entitlements dictionary.
        developer_certificates: DER-encoded signing certificates.
        ppq_check: Heuristic flag; taken from the document when present,
            otherwise derived from a raw scan of the file.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="allow")

    name: Annotated[str, Field(alias="Name")]
    team_name: Annotated[str, Field(alias="TeamName")]
    creation_date: Annotated[datetime, Field(alias="CreationDate")]
    expiration_date: Annotated[datetime, Field(alias="ExpirationDate")]
    app_id_name: Annotated[str | None, Field(alias="AppIDName")] = None
    uuid: Annotated[str | None, Field(alias="UUID")] = None
    team_identifier: Annotated[list[str], Field(alias="TeamIdentifier")] = []
    platform: Annotated[list[str], Field(alias="Platform")] = []
    version: Annotated[int | None, Field(alias="Version")] = None
    is_xcode_managed: Annotated[bool | None, Field(alias="IsXcodeManaged")] = None
    provisions_all_devices: Annotated[bool | None, Field(alias="ProvisionsAllDevices")] = None
    provisioned_devices: Annotated[list[str] | None, Field(alias="ProvisionedDevices")] = None
    entitlements: Annotated[dict[str, Any] | None, Field(alias="Entitlements")] = None
    developer_certificates: Annotated[list[bytes], Field(alias="DeveloperCertificates")] = []
    ppq_check: Annotated[bool | None, Field(alias="PPQCheck")] = None

    @property
    def application_identifier(self) -> str | None:
        """The application-identifier entitlement, if present."""
        if not self.entitlements:
            return None
        value = self.entitlements.get("application-identifier")
        return value if isinstance(value, str) else None

    def is_expired(self, now: datetime | None = None) -> bool:
        """Check whether the credential has expired.

        Args:
            now: Reference time. Defaults to the current UTC time.
        """
        reference = _as_utc(now) if now is not None else datetime.now(UTC)
        return _as_utc(self.expiration_date) <= reference

    def days_remaining(self, now: datetime | None = None) -> int:
        """Whole days until expiration (negative once expired)."""
        reference = _as_utc(now) if now is not None else datetime.now(UTC)
        return (_as_utc(self.expiration_date) - reference).days

    def summary(self) -> dict[str, Any]:
        """JSON-friendly summary without certificate blobs."""
        return {
            "name": self.name,
            "app_id_name": self.app_id_name,
            "uuid": self.uuid,
            "team_name": self.team_name,
            "team_identifier": self.team_identifier,
            "platform": self.platform,
            "creation_date": _as_utc(self.creation_date).isoformat(),
            "expiration_date": _as_utc(self.expiration_date).isoformat(),
            "expired": self.is_expired(),
            "provisioned_devices": len(self.provisioned_devices or []),
            "provisions_all_devices": bool(self.provisions_all_devices),
            "application_identifier": self.application_identifier,
            "ppq_check": self.ppq_check,
        }
