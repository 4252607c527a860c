"""Settings model and TOML I/O.

Settings are stored in ~/.config/appvault/config.toml. Every key is
optional; a missing file means defaults.
"""

import logging
import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated, Any

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from appvault.core.paths import (
    LIBRARIES_DIRNAME,
    get_config_path,
    get_data_dir,
    get_temp_root,
)

logger = logging.getLogger(__name__)


class Settings(BaseModel):
    """User settings for appvault.

    Attributes:
        data_dir: Root of managed storage. None uses the XDG data directory.
        libraries_dir: Default libraries directory. None uses
            <data_dir>/DefaultLibraries.
        temp_dir: Root for import work areas. None uses the system temp dir.
        inject_default_libraries: Copy default libraries into imported bundles.
    """

    model_config = ConfigDict(extra="forbid")

    data_dir: Annotated[
        Path | None,
        Field(description="Managed storage root (None = XDG data dir)"),
    ] = None
    libraries_dir: Annotated[
        Path | None,
        Field(description="Default libraries directory"),
    ] = None
    temp_dir: Annotated[
        Path | None,
        Field(description="Work area root (None = system temp dir)"),
    ] = None
    inject_default_libraries: Annotated[
        bool,
        Field(description="Inject default libraries after extraction"),
    ] = True

    @property
    def effective_data_dir(self) -> Path:
        """Managed storage root after applying defaults."""
        return self.data_dir if self.data_dir is not None else get_data_dir()

    @property
    def effective_libraries_dir(self) -> Path:
        """Default libraries directory after applying defaults."""
        if self.libraries_dir is not None:
            return self.libraries_dir
        return self.effective_data_dir / LIBRARIES_DIRNAME

    @property
    def effective_temp_dir(self) -> Path:
        """Work area root after applying defaults."""
        return self.temp_dir if self.temp_dir is not None else get_temp_root()


class ConfigError(Exception):
    """Base exception for settings errors."""


class ConfigNotFoundError(ConfigError):
    """Raised when the settings file is not found."""


class ConfigParseError(ConfigError):
    """Raised when the settings file cannot be parsed."""


def load_settings(path: Path | None = None, *, missing_ok: bool = True) -> Settings:
    """Load settings from a TOML file.

    Args:
        path: Path to the settings file. If None, uses the default path.
        missing_ok: Return defaults instead of raising when the file is absent.

    Returns:
        Validated Settings object.

    Raises:
        ConfigNotFoundError: If the file doesn't exist and missing_ok is False.
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the content doesn't match the schema.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        if missing_ok:
            logger.debug("No settings file at %s, using defaults", config_path)
            return Settings()
        raise ConfigNotFoundError(f"Settings file not found: {config_path}")

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read settings: {e}") from e

    try:
        return Settings.model_validate(data)
    except (ValueError, ValidationError) as e:
        raise ConfigError(f"Invalid settings content: {e}") from e


def save_settings(settings: Settings, path: Path | None = None) -> Path:
    """Save settings to a TOML file.

    The file is written to a temporary sibling first and then moved into
    place with os.replace().

    Args:
        settings: The Settings object to save.
        path: Destination path. If None, uses the default path.

    Returns:
        Path where the settings were saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    data = _settings_to_dict(settings)

    tmp_path: Path | None = None
    try:
        with NamedTemporaryFile(
            mode="wb",
            dir=config_path.parent,
            delete=False,
            suffix=".tmp",
        ) as f:
            tmp_path = Path(f.name)
            tomli_w.dump(data, f)
        os.replace(str(tmp_path), str(config_path))
    except OSError as e:
        if tmp_path is not None and tmp_path.exists():
            tmp_path.unlink()
        raise ConfigError(f"Failed to write settings: {e}") from e

    return config_path


def update_setting(key: str, value: str, path: Path | None = None) -> Settings:
    """Set a single key from its string form and persist the result.

    Args:
        key: Settings field name.
        value: Raw string value from the command line.
        path: Settings file path. If None, uses the default path.

    Returns:
        The updated Settings.

    Raises:
        ConfigError: If the key is unknown or the value is invalid.
    """
    if key not in Settings.model_fields:
        raise ConfigError(f"Unknown setting: {key}")

    current = load_settings(path)
    data: dict[str, Any] = current.model_dump()
    if value.lower() in ("", "none", "default"):
        data.pop(key)
    else:
        data[key] = value

    try:
        updated = Settings.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid value for {key}: {e}") from e

    save_settings(updated, path)
    return updated


def _settings_to_dict(settings: Settings) -> dict[str, object]:
    """Convert Settings to a dictionary for TOML serialization.

    Only non-None values are included, since TOML has no null.
    """
    result: dict[str, object] = {}
    for key, value in settings.model_dump().items():
        if value is None:
            continue
        result[key] = str(value) if isinstance(value, Path) else value
    return result
