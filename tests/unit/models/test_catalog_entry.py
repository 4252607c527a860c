"""Unit tests for the catalog entry model."""

import json
from datetime import datetime

import pytest
from appvault.models.catalog import CatalogEntry, CatalogKind, create_catalog_entry


class TestCatalogEntry:
    """Tests for CatalogEntry."""

    def test_empty_uuid_rejected(self) -> None:
        """An empty UUID is invalid."""
        with pytest.raises(ValueError, match="UUID cannot be empty"):
            CatalogEntry(uuid="", kind=CatalogKind.IMPORTED, date="2025-01-01T00:00:00+00:00")

    def test_empty_date_rejected(self) -> None:
        """An empty date is invalid."""
        with pytest.raises(ValueError, match="date cannot be empty"):
            CatalogEntry(uuid="a", kind=CatalogKind.IMPORTED, date="")

    def test_all_metadata_optional(self) -> None:
        """Entries without any metadata are valid and serialize compactly."""
        entry = create_catalog_entry(uuid="abc")

        assert entry.to_dict() == {"uuid": "abc", "kind": "imported", "date": entry.date}
        assert entry.display_name == "abc"

    def test_display_name_prefers_name(self) -> None:
        """display_name falls back from name to identifier."""
        assert create_catalog_entry(uuid="a", name="Demo").display_name == "Demo"
        assert create_catalog_entry(uuid="a", identifier="com.x").display_name == "com.x"

    def test_timestamp_is_timezone_aware(self) -> None:
        """create_catalog_entry stamps an aware ISO timestamp."""
        entry = create_catalog_entry(uuid="a")

        assert datetime.fromisoformat(entry.date).tzinfo is not None

    def test_json_line(self) -> None:
        """to_json_line emits compact JSON that reads back."""
        entry = create_catalog_entry(
            uuid="a",
            kind=CatalogKind.SIGNED,
            source="/tmp/Demo.ipa",
            name="Demo",
            identifier="com.example.demo",
            version="1.0",
            icon="AppIcon",
        )

        line = entry.to_json_line()

        assert "\n" not in line
        assert " " not in line.replace("/tmp/Demo.ipa", "")
        assert CatalogEntry.from_json_line(line) == entry

    def test_from_dict_defaults_kind(self) -> None:
        """Lines without a kind are imported entries."""
        entry = CatalogEntry.from_dict({"uuid": "a", "date": "2025-01-01T00:00:00+00:00"})

        assert entry.kind == CatalogKind.IMPORTED

    def test_from_dict_invalid_kind(self) -> None:
        """Unknown kinds are rejected."""
        with pytest.raises(ValueError):
            CatalogEntry.from_dict({"uuid": "a", "date": "x", "kind": "deleted"})

    def test_from_json_line_invalid(self) -> None:
        """Invalid JSON raises JSONDecodeError."""
        with pytest.raises(json.JSONDecodeError):
            CatalogEntry.from_json_line("{")
