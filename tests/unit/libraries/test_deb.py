"""Unit tests for Debian package library extraction."""

import io
import logging
import tarfile
from pathlib import Path

import pytest
from appvault.libraries.deb import (
    AR_MAGIC,
    DebExtractionError,
    extract_dylibs_from_deb,
    find_dylibs,
    read_ar,
)


def _ar_member(name: str, content: bytes) -> bytes:
    header = (
        f"{name + '/':<16}"
        f"{0:<12}"
        f"{0:<6}"
        f"{0:<6}"
        f"{'100644':<8}"
        f"{len(content):<10}"
    ).encode("ascii") + b"`\n"
    padding = b"\n" if len(content) % 2 else b""
    return header + content + padding


def _tarball(files: dict[str, bytes], mode: str = "w:gz") -> bytes:
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode=mode) as tf:
        for name, content in files.items():
            info = tarfile.TarInfo(name)
            info.size = len(content)
            tf.addfile(info, io.BytesIO(content))
    return buffer.getvalue()


def build_deb(path: Path, data_files: dict[str, bytes], data_name: str = "data.tar.gz") -> Path:
    """Write a minimal Debian package to path."""
    mode = "w:xz" if data_name.endswith(".xz") else "w:gz"
    path.write_bytes(
        AR_MAGIC
        + _ar_member("debian-binary", b"2.0\n")
        + _ar_member("control.tar.gz", _tarball({"./control": b"Package: tweak\n"}))
        + _ar_member(data_name, _tarball(data_files, mode))
    )
    return path


class TestReadAr:
    """Tests for read_ar."""

    def test_reads_members(self, tmp_path: Path) -> None:
        """Members are returned in order with trailing slashes removed."""
        deb = build_deb(tmp_path / "t.deb", {"./readme": b"x"})

        members = read_ar(deb)

        assert [m.name for m in members] == ["debian-binary", "control.tar.gz", "data.tar.gz"]
        assert members[0].content == b"2.0\n"

    def test_not_ar(self, tmp_path: Path) -> None:
        """Files without the ar magic are rejected."""
        path = tmp_path / "fake.deb"
        path.write_bytes(b"PK\x03\x04")

        with pytest.raises(DebExtractionError, match="not an ar archive"):
            read_ar(path)

    def test_truncated(self, tmp_path: Path) -> None:
        """A member running past the end of the file is rejected."""
        path = tmp_path / "cut.deb"
        path.write_bytes(AR_MAGIC + _ar_member("debian-binary", b"2.0\n")[:-2])

        with pytest.raises(DebExtractionError, match="Truncated"):
            read_ar(path)


class TestExtractDylibs:
    """Tests for extract_dylibs_from_deb."""

    def test_collects_from_known_locations(self, tmp_path: Path) -> None:
        """Libraries under the known install paths are collected."""
        deb = build_deb(
            tmp_path / "tweak.deb",
            {
                "./Library/MobileSubstrate/DynamicLibraries/Tweak.dylib": b"tweak",
                "./Library/MobileSubstrate/DynamicLibraries/Tweak.plist": b"filter",
                "./var/jb/Library/Frameworks/Helper.dylib": b"helper",
                "./usr/lib/Elsewhere.dylib": b"ignored",
            },
        )

        dylibs = extract_dylibs_from_deb(deb, tmp_path / "out")

        assert sorted(p.name for p in dylibs) == ["Helper.dylib", "Tweak.dylib"]
        assert all(p.is_relative_to(tmp_path / "out") for p in dylibs)

    def test_xz_data(self, tmp_path: Path) -> None:
        """xz-compressed data tarballs are supported."""
        deb = build_deb(
            tmp_path / "tweak.deb",
            {"./Library/Frameworks/X.dylib": b"x"},
            data_name="data.tar.xz",
        )

        assert [p.name for p in extract_dylibs_from_deb(deb, tmp_path / "out")] == ["X.dylib"]

    def test_no_libraries(self, tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
        """A package without libraries yields an empty list and a warning."""
        deb = build_deb(tmp_path / "empty.deb", {"./readme": b"x"})

        with caplog.at_level(logging.WARNING):
            assert extract_dylibs_from_deb(deb, tmp_path / "out") == []

        assert "No .dylib files found" in caplog.text

    def test_unsafe_paths_skipped(self, tmp_path: Path) -> None:
        """Tar members escaping the output directory are not written."""
        deb = build_deb(
            tmp_path / "evil.deb",
            {
                "../../escaped.dylib": b"owned",
                "./Library/Frameworks/Good.dylib": b"good",
            },
        )

        dylibs = extract_dylibs_from_deb(deb, tmp_path / "out")

        assert [p.name for p in dylibs] == ["Good.dylib"]
        assert not (tmp_path / "escaped.dylib").exists()

    def test_corrupt_data_tarball(self, tmp_path: Path) -> None:
        """A corrupt data tarball raises DebExtractionError."""
        path = tmp_path / "bad.deb"
        path.write_bytes(AR_MAGIC + _ar_member("data.tar.gz", b"not gzip"))

        with pytest.raises(DebExtractionError):
            extract_dylibs_from_deb(path, tmp_path / "out")


class TestFindDylibs:
    """Tests for find_dylibs."""

    def test_skips_symlinks_and_subdirectories(self, tmp_path: Path) -> None:
        """Only regular files directly in a search path are returned."""
        directory = tmp_path / "Library" / "Frameworks"
        (directory / "Nested").mkdir(parents=True)
        (directory / "Real.dylib").write_bytes(b"x")
        (directory / "Nested" / "Deep.dylib").write_bytes(b"x")
        (directory / "Link.dylib").symlink_to(directory / "Real.dylib")

        assert find_dylibs(tmp_path) == [directory / "Real.dylib"]
