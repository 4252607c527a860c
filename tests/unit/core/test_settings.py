"""Unit tests for settings loading and saving."""

import tomllib
from pathlib import Path

import pytest
from appvault.core.config import (
    ConfigError,
    ConfigNotFoundError,
    ConfigParseError,
    Settings,
    load_settings,
    save_settings,
    update_setting,
)
from appvault.core.paths import LIBRARIES_DIRNAME, get_data_dir


class TestSettingsDefaults:
    """Tests for effective settings values."""

    def test_defaults(self) -> None:
        """Unset paths fall back to the XDG locations."""
        settings = Settings()

        assert settings.effective_data_dir == get_data_dir()
        assert settings.effective_libraries_dir == get_data_dir() / LIBRARIES_DIRNAME
        assert settings.inject_default_libraries is True

    def test_libraries_follow_data_dir(self, tmp_path: Path) -> None:
        """Libraries directory defaults to a child of a custom data directory."""
        settings = Settings(data_dir=tmp_path)

        assert settings.effective_libraries_dir == tmp_path / LIBRARIES_DIRNAME

    def test_explicit_temp_dir(self, tmp_path: Path) -> None:
        """An explicit temp_dir is used as is."""
        assert Settings(temp_dir=tmp_path).effective_temp_dir == tmp_path

    def test_unknown_field_rejected(self) -> None:
        """Unknown keys are rejected."""
        with pytest.raises(ValueError):
            Settings.model_validate({"colour": "blue"})


class TestLoadSettings:
    """Tests for load_settings."""

    def test_missing_file_returns_defaults(self, tmp_path: Path) -> None:
        """A missing file yields default settings."""
        assert load_settings(tmp_path / "missing.toml") == Settings()

    def test_missing_file_raises_when_required(self, tmp_path: Path) -> None:
        """missing_ok=False raises ConfigNotFoundError."""
        with pytest.raises(ConfigNotFoundError):
            load_settings(tmp_path / "missing.toml", missing_ok=False)

    def test_invalid_toml(self, tmp_path: Path) -> None:
        """Broken TOML raises ConfigParseError."""
        path = tmp_path / "config.toml"
        path.write_text("data_dir = [unclosed")

        with pytest.raises(ConfigParseError):
            load_settings(path)

    def test_invalid_content(self, tmp_path: Path) -> None:
        """Schema violations raise ConfigError."""
        path = tmp_path / "config.toml"
        path.write_text('inject_default_libraries = "sometimes"\n')

        with pytest.raises(ConfigError):
            load_settings(path)


class TestSaveSettings:
    """Tests for save_settings and update_setting."""

    def test_save_omits_none(self, tmp_path: Path) -> None:
        """Unset paths are not written."""
        path = tmp_path / "config.toml"
        save_settings(Settings(data_dir=tmp_path / "data"), path)

        data = tomllib.loads(path.read_text())
        assert data == {"data_dir": str(tmp_path / "data"), "inject_default_libraries": True}

    def test_save_then_load(self, tmp_path: Path) -> None:
        """Saved settings load back unchanged."""
        path = tmp_path / "nested" / "config.toml"
        settings = Settings(temp_dir=tmp_path / "tmp", inject_default_libraries=False)

        save_settings(settings, path)

        assert load_settings(path) == settings
        assert not list(path.parent.glob("*.tmp"))

    def test_update_setting(self, tmp_path: Path) -> None:
        """update_setting parses and persists a value."""
        path = tmp_path / "config.toml"

        updated = update_setting("inject_default_libraries", "false", path)

        assert updated.inject_default_libraries is False
        assert load_settings(path).inject_default_libraries is False

    def test_update_setting_reset(self, tmp_path: Path) -> None:
        """'default' resets a key to its default value."""
        path = tmp_path / "config.toml"
        update_setting("data_dir", str(tmp_path), path)

        updated = update_setting("data_dir", "default", path)

        assert updated.data_dir is None

    def test_update_unknown_key(self, tmp_path: Path) -> None:
        """Unknown keys raise ConfigError."""
        with pytest.raises(ConfigError, match="Unknown setting"):
            update_setting("colour", "blue", tmp_path / "config.toml")
