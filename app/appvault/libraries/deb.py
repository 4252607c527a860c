"""Dynamic library extraction from Debian packages.

A .deb is an ar archive holding ``debian-binary``, ``control.tar.*`` and
``data.tar.*``. Libraries are collected from the data tarball at the
locations tweak packages install them to.
"""

import logging
import lzma
import shutil
import tarfile
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

AR_MAGIC = b"!<arch>\n"
AR_HEADER_SIZE = 60
AR_FILE_MAGIC = b"`\n"

DATA_TARBALLS = ("data.tar.lzma", "data.tar.gz", "data.tar.xz", "data.tar.bz2", "data.tar")

LIBRARY_SEARCH_PATHS = (
    "Library/Frameworks",
    "var/jb/Library/Frameworks",
    "Library/MobileSubstrate/DynamicLibraries",
    "var/jb/Library/MobileSubstrate/DynamicLibraries",
)


class DebExtractionError(RuntimeError):
    """Raised when a Debian package cannot be unpacked."""


@dataclass(frozen=True, slots=True)
class ArMember:
    """One file stored in an ar archive."""

    name: str
    content: bytes


def read_ar(path: Path) -> list[ArMember]:
    """Read every member of an ar archive.

    Args:
        path: Archive to read.

    Returns:
        Members in archive order.

    Raises:
        DebExtractionError: If the file is not a well-formed ar archive.
    """
    try:
        data = path.read_bytes()
    except OSError as e:
        msg = f"Cannot read {path.name}: {e}"
        raise DebExtractionError(msg) from e

    if not data.startswith(AR_MAGIC):
        msg = f"{path.name} is not an ar archive"
        raise DebExtractionError(msg)

    members: list[ArMember] = []
    offset = len(AR_MAGIC)
    while offset < len(data):
        header = data[offset : offset + AR_HEADER_SIZE]
        if len(header) < AR_HEADER_SIZE or header[58:60] != AR_FILE_MAGIC:
            msg = f"Malformed ar header at offset {offset} in {path.name}"
            raise DebExtractionError(msg)

        name = header[0:16].decode("ascii", errors="replace").strip()
        if name.endswith("/") and name != "/":
            name = name[:-1]
        try:
            size = int(header[48:58].decode("ascii").strip())
        except ValueError as e:
            msg = f"Invalid member size in {path.name}"
            raise DebExtractionError(msg) from e

        start = offset + AR_HEADER_SIZE
        end = start + size
        if end > len(data):
            msg = f"Truncated member {name} in {path.name}"
            raise DebExtractionError(msg)

        members.append(ArMember(name=name, content=data[start:end]))
        # members are aligned to even offsets
        offset = end + (size % 2)

    return members


def extract_dylibs_from_deb(deb: Path, output_dir: Path) -> list[Path]:
    """Unpack a Debian package and collect the dynamic libraries it installs.

    Args:
        deb: Debian package file.
        output_dir: Scratch directory to unpack into (created if missing).

    Returns:
        Paths of the .dylib files found, under output_dir.

    Raises:
        DebExtractionError: If the package or its data tarball is unreadable.
    """
    output_dir.mkdir(parents=True, exist_ok=True)

    dylibs: list[Path] = []
    for member in read_ar(deb):
        if member.name not in DATA_TARBALLS:
            continue

        tarball = output_dir / member.name
        tarball.write_bytes(member.content)
        root = output_dir / "data"
        _extract_tarball(tarball, root)
        dylibs.extend(find_dylibs(root))

    if dylibs:
        logger.info("Extracted %d .dylib file(s) from %s", len(dylibs), deb.name)
    else:
        logger.warning("No .dylib files found in deb: %s", deb.name)
    return dylibs


def find_dylibs(root: Path) -> list[Path]:
    """Collect regular .dylib files from the known library locations under root.

    Symlinks are skipped and the search is not recursive.
    """
    found: list[Path] = []
    for search_path in LIBRARY_SEARCH_PATHS:
        directory = root / search_path
        if not directory.is_dir():
            continue
        for candidate in sorted(directory.iterdir()):
            if candidate.suffix.lower() != ".dylib" or candidate.is_symlink():
                continue
            if candidate.is_file():
                found.append(candidate)
    return found


def _extract_tarball(tarball: Path, out_dir: Path) -> None:
    out_dir.mkdir(parents=True, exist_ok=True)

    # tarfile cannot read legacy .lzma streams; decompress them first
    if tarball.name.endswith(".lzma"):
        plain = tarball.with_suffix("")
        try:
            with lzma.open(tarball, "rb") as src, plain.open("wb") as dst:
                shutil.copyfileobj(src, dst)
        except (lzma.LZMAError, EOFError, OSError) as e:
            msg = f"Cannot decompress {tarball.name}: {e}"
            raise DebExtractionError(msg) from e
        tarball = plain

    try:
        with tarfile.open(tarball, mode="r:*") as tf:
            out_resolved = out_dir.resolve()
            safe_members: list[tarfile.TarInfo] = []
            skipped = 0
            for member in tf.getmembers():
                resolved = (out_dir / member.name).resolve()
                if not resolved.is_relative_to(out_resolved):
                    skipped += 1
                    continue
                safe_members.append(member)

            tf.extractall(path=out_dir, members=safe_members, filter="tar")
            if skipped:
                logger.warning("Skipped %d unsafe path(s) in %s", skipped, tarball.name)
    except (tarfile.TarError, OSError, EOFError) as e:
        msg = f"Cannot extract {tarball.name}: {e}"
        raise DebExtractionError(msg) from e
