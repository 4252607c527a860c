"""Unit tests for the default library store."""

from pathlib import Path

import pytest
from appvault.libraries.store import LibraryStore, LibraryStoreError


@pytest.fixture
def store(tmp_path: Path) -> LibraryStore:
    """Store in a directory that does not exist yet."""
    return LibraryStore(tmp_path / "DefaultLibraries")


@pytest.fixture
def dylib(tmp_path: Path) -> Path:
    """A library file outside the store."""
    path = tmp_path / "incoming" / "tweak.dylib"
    path.parent.mkdir()
    path.write_bytes(b"dylib")
    return path


class TestLibraryStore:
    """Tests for LibraryStore."""

    def test_default_directory(self, isolated_xdg: Path) -> None:
        """The default store lives in the data directory."""
        assert LibraryStore().directory == isolated_xdg / "data" / "appvault" / "DefaultLibraries"

    def test_list_missing_directory(self, store: LibraryStore) -> None:
        """A missing directory lists as empty."""
        assert store.list() == []

    def test_add_and_list(self, store: LibraryStore, dylib: Path) -> None:
        """Added files are listed and the source is kept."""
        stored = store.add(dylib)

        assert stored == store.directory / "tweak.dylib"
        assert store.list() == [stored]
        assert dylib.exists()

    def test_add_unique_names(self, store: LibraryStore, dylib: Path) -> None:
        """Name clashes get a numeric suffix."""
        names = [store.add(dylib).name for _ in range(3)]

        assert names == ["tweak.dylib", "tweak_1.dylib", "tweak_2.dylib"]

    def test_add_unsupported(self, store: LibraryStore, tmp_path: Path) -> None:
        """Unsupported file types are rejected."""
        path = tmp_path / "notes.txt"
        path.write_text("x")

        with pytest.raises(LibraryStoreError, match="Unsupported library type"):
            store.add(path)

    def test_list_ignores_hidden_and_unsupported(self, store: LibraryStore) -> None:
        """Hidden files and other types are not listed."""
        store.directory.mkdir(parents=True)
        for name in (".hidden.dylib", "readme.txt", "b.deb", "a.dylib"):
            (store.directory / name).write_bytes(b"x")

        assert [p.name for p in store.list()] == ["a.dylib", "b.deb"]

    def test_remove(self, store: LibraryStore, dylib: Path) -> None:
        """remove deletes the stored file."""
        store.add(dylib)

        store.remove("tweak.dylib")

        assert store.list() == []

    @pytest.mark.parametrize("name", ["missing.dylib", "../incoming/tweak.dylib"])
    def test_remove_unknown(self, store: LibraryStore, dylib: Path, name: str) -> None:
        """Unknown names and paths outside the store are rejected."""
        store.add(dylib)

        with pytest.raises(LibraryStoreError, match="not found"):
            store.remove(name)

        assert dylib.exists()


class TestLibraryFiles:
    """Tests for LibraryStore.library_files."""

    def test_empty_store(self, store: LibraryStore, tmp_path: Path) -> None:
        """An empty store materializes nothing."""
        scratch = tmp_path / "scratch"

        assert store.library_files(scratch) == []
        assert not scratch.exists()

    def test_copies_dylibs(self, store: LibraryStore, dylib: Path, tmp_path: Path) -> None:
        """Stored dylibs are copied into scratch."""
        store.add(dylib)

        files = store.library_files(tmp_path / "scratch")

        assert files == [tmp_path / "scratch" / "tweak.dylib"]
        assert files[0].read_bytes() == b"dylib"

    def test_broken_deb_skipped(self, store: LibraryStore, dylib: Path, tmp_path: Path) -> None:
        """A package that cannot be unpacked is skipped."""
        store.add(dylib)
        store.directory.joinpath("broken.deb").write_bytes(b"not an ar archive")

        files = store.library_files(tmp_path / "scratch")

        assert [p.name for p in files] == ["tweak.dylib"]
