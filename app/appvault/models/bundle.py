"""Application bundle discovery and metadata.

An application bundle is a directory ending in ``.app`` carrying an
``Info.plist`` property list with its name, identifier, version and icons.
"""

import logging
import plistlib
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from xml.parsers.expat import ExpatError

logger = logging.getLogger(__name__)

BUNDLE_SUFFIX = ".app"
INFO_PLIST = "Info.plist"


@dataclass(frozen=True, slots=True)
class BundleMetadata:
    """Descriptive metadata read from a bundle's Info.plist.

    Every field is independently optional.

    Attributes:
        name: Display name (CFBundleDisplayName, CFBundleName, CFBundleExecutable).
        identifier: Bundle identifier (CFBundleIdentifier).
        version: Short version string, falling back to the build version.
        icon: Primary icon file name.
    """

    name: str | None = None
    identifier: str | None = None
    version: str | None = None
    icon: str | None = None

    @property
    def is_empty(self) -> bool:
        """True when nothing could be read."""
        return all(v is None for v in (self.name, self.identifier, self.version, self.icon))


def find_bundle(directory: Path, suffix: str = BUNDLE_SUFFIX) -> Path | None:
    """Find the first directory with the given suffix directly inside a directory.

    Args:
        directory: Directory to search (not recursive).
        suffix: Bundle suffix including the dot.

    Returns:
        Path to the bundle, or None if there is none.
    """
    if not directory.is_dir():
        return None

    candidates = sorted(
        child for child in directory.iterdir() if child.is_dir() and child.name.endswith(suffix)
    )
    return candidates[0] if candidates else None


def read_bundle_metadata(bundle: Path) -> BundleMetadata:
    """Read bundle metadata from <bundle>/Info.plist.

    A missing or unreadable property list yields an empty record rather
    than an error.

    Args:
        bundle: Path to the .app directory.

    Returns:
        BundleMetadata with whatever fields could be read.
    """
    info_path = bundle / INFO_PLIST
    try:
        with info_path.open("rb") as f:
            info = plistlib.load(f)
    except FileNotFoundError:
        logger.debug("No Info.plist in %s", bundle)
        return BundleMetadata()
    except (OSError, plistlib.InvalidFileException, ExpatError, ValueError) as e:
        logger.warning("Could not read %s: %s", info_path, e)
        return BundleMetadata()

    if not isinstance(info, dict):
        logger.warning("Info.plist in %s is not a dictionary", bundle)
        return BundleMetadata()

    return BundleMetadata(
        name=_first_string(info, "CFBundleDisplayName", "CFBundleName", "CFBundleExecutable"),
        identifier=_first_string(info, "CFBundleIdentifier"),
        version=_first_string(info, "CFBundleShortVersionString", "CFBundleVersion"),
        icon=_icon_file_name(info),
    )


def _first_string(info: dict[str, Any], *keys: str) -> str | None:
    for key in keys:
        value = info.get(key)
        if isinstance(value, str) and value:
            return value
    return None


def _last_string(values: object) -> str | None:
    if isinstance(values, list):
        strings = [v for v in values if isinstance(v, str) and v]
        if strings:
            return strings[-1]
    return None


def _icon_file_name(info: dict[str, Any]) -> str | None:
    """Pick the primary icon, preferring the largest (last) listed file."""
    icons = info.get("CFBundleIcons")
    if isinstance(icons, dict):
        primary = icons.get("CFBundlePrimaryIcon")
        if isinstance(primary, dict):
            name = _last_string(primary.get("CFBundleIconFiles"))
            if name:
                return name
            if isinstance(primary.get("CFBundleIconName"), str):
                return primary["CFBundleIconName"]

    return _first_string(info, "CFBundleIconFile") or _last_string(info.get("CFBundleIconFiles"))
