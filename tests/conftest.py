"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import logging
import plistlib
import zipfile
from collections.abc import Callable, Iterator
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any

import pytest
from appvault.models.catalog import CatalogEntry, CatalogKind

INFO_PLIST: dict[str, Any] = {
    "CFBundleDisplayName": "Demo",
    "CFBundleIdentifier": "com.example.demo",
    "CFBundleShortVersionString": "1.2.0",
    "CFBundleVersion": "42",
    "CFBundleIcons": {
        "CFBundlePrimaryIcon": {"CFBundleIconFiles": ["AppIcon60x60", "AppIcon76x76"]},
    },
}


class InMemoryCatalog:
    """Catalog fake keeping entries in a list."""

    def __init__(self, fail: bool = False) -> None:
        self.entries: list[CatalogEntry] = []
        self.fail = fail

    def add(self, entry: CatalogEntry) -> None:
        if self.fail:
            raise OSError("catalog is read-only")
        self.entries.append(entry)

    def all(self, kind: CatalogKind | None = None) -> list[CatalogEntry]:
        return [e for e in reversed(self.entries) if kind is None or e.kind == kind]

    def latest(self, kind: CatalogKind | None = None) -> CatalogEntry | None:
        entries = self.all(kind)
        return entries[0] if entries else None


@pytest.fixture(autouse=True)
def isolated_xdg(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point every XDG directory into the test's temporary directory."""
    home = tmp_path / "xdg"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(home / "config"))
    monkeypatch.setenv("XDG_STATE_HOME", str(home / "state"))
    monkeypatch.setenv("XDG_DATA_HOME", str(home / "data"))
    return home


@pytest.fixture(autouse=True)
def reset_package_logger() -> Iterator[None]:
    """Undo logging configuration applied by CLI invocations."""
    package_logger = logging.getLogger("appvault")
    handlers = list(package_logger.handlers)
    level = package_logger.level
    yield
    package_logger.handlers = handlers
    package_logger.setLevel(level)


@pytest.fixture
def make_archive(tmp_path: Path) -> Callable[..., Path]:
    """Factory building application archives.

    By default the archive holds Payload/Demo.app with an Info.plist and
    an executable.
    """

    def _make(
        name: str = "Demo.ipa",
        files: dict[str, bytes] | None = None,
        info: dict[str, Any] | None = None,
    ) -> Path:
        archive = tmp_path / "archives" / name
        archive.parent.mkdir(parents=True, exist_ok=True)
        if files is None:
            files = {
                "Payload/Demo.app/Info.plist": plistlib.dumps(info or INFO_PLIST),
                "Payload/Demo.app/Demo": b"\xcf\xfa\xed\xfe" + b"\x00" * 256,
            }
        with zipfile.ZipFile(archive, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            for member, content in files.items():
                zf.writestr(member, content)
        return archive

    return _make


@pytest.fixture
def credential_dict() -> dict[str, Any]:
    """Property list content of a valid signing credential."""
    now = datetime.now(UTC).replace(microsecond=0, tzinfo=None)
    return {
        "AppIDName": "Demo App",
        "CreationDate": now - timedelta(days=10),
        "ExpirationDate": now + timedelta(days=355),
        "Name": "Demo Distribution",
        "TeamName": "Example Corp",
        "TeamIdentifier": ["ABCDE12345"],
        "Platform": ["iOS"],
        "UUID": "0f6c2a8e-0000-4000-8000-000000000001",
        "Version": 1,
        "ProvisionsAllDevices": True,
        "Entitlements": {"application-identifier": "ABCDE12345.com.example.demo"},
        "DeveloperCertificates": [b"\x30\x82\x01\x0a"],
    }


@pytest.fixture
def make_credential_file(tmp_path: Path) -> Callable[..., Path]:
    """Factory wrapping a property list in a binary envelope, like a signed profile."""

    def _make(
        content: dict[str, Any],
        prefix: bytes = b"\x30\x80\x06\x09\x2a\x86\x48\x86\xf7\x0d\x01\x07\x02\xa0\x80",
        suffix: bytes = b"\x00\x00\xa0\x82\x0b\x11signature-bytes",
        name: str = "embedded.mobileprovision",
    ) -> Path:
        path = tmp_path / "credentials" / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(prefix + plistlib.dumps(content, fmt=plistlib.FMT_XML) + suffix)
        return path

    return _make


@pytest.fixture
def memory_catalog() -> InMemoryCatalog:
    """Empty in-memory catalog."""
    return InMemoryCatalog()
