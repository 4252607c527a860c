"""XDG-compliant path management for appvault.

This module provides standardized paths following the XDG Base Directory
Specification for configuration, state and data storage.

XDG defaults:
- Config: ~/.config/appvault/
- State: ~/.local/state/appvault/
- Data: ~/.local/share/appvault/
"""

import os
import tempfile
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "appvault"

# Storage subdirectories under the data directory
UNSIGNED_DIRNAME = "Unsigned"
SIGNED_DIRNAME = "Signed"
LIBRARIES_DIRNAME = "DefaultLibraries"


def _get_xdg_dir(env_var: str, default_subdir: str) -> Path:
    """Get XDG directory respecting environment variable override.

    Args:
        env_var: XDG environment variable name (e.g., "XDG_CONFIG_HOME").
        default_subdir: Default subdirectory under home (e.g., ".config").

    Returns:
        Path to the application-specific directory.
    """
    base = os.environ.get(env_var)
    if base:
        return Path(base) / APP_NAME
    return Path.home() / default_subdir / APP_NAME


def get_config_dir() -> Path:
    """Get the configuration directory path.

    Returns:
        Path to ~/.config/appvault/ (or XDG_CONFIG_HOME/appvault/).
    """
    return _get_xdg_dir("XDG_CONFIG_HOME", ".config")


def get_state_dir() -> Path:
    """Get the state directory path.

    State data includes the import catalog, which must persist between
    runs but is not configuration.

    Returns:
        Path to ~/.local/state/appvault/ (or XDG_STATE_HOME/appvault/).
    """
    return _get_xdg_dir("XDG_STATE_HOME", ".local/state")


def get_data_dir() -> Path:
    """Get the data directory path.

    Imported application payloads and default libraries live here.

    Returns:
        Path to ~/.local/share/appvault/ (or XDG_DATA_HOME/appvault/).
    """
    return _get_xdg_dir("XDG_DATA_HOME", ".local/share")


def get_temp_root() -> Path:
    """Get the process-temporary root used for import work areas.

    Returns:
        Path to the system temporary directory.
    """
    return Path(tempfile.gettempdir())


def get_config_path() -> Path:
    """Get the settings file path.

    Returns:
        Path to ~/.config/appvault/config.toml.
    """
    return get_config_dir() / "config.toml"


def get_catalog_path() -> Path:
    """Get the catalog file path.

    Returns:
        Path to ~/.local/state/appvault/catalog.jsonl.
    """
    return get_state_dir() / "catalog.jsonl"


def get_libraries_dir() -> Path:
    """Get the default libraries directory path.

    Returns:
        Path to ~/.local/share/appvault/DefaultLibraries/.
    """
    return get_data_dir() / LIBRARIES_DIRNAME


def _ensure_dir(path: Path, name: str) -> Path:
    """Create directory if it doesn't exist.

    Args:
        path: Directory path to create.
        name: Human-readable name for error messages.

    Returns:
        The created/existing directory path.

    Raises:
        RuntimeError: If directory cannot be created.
    """
    try:
        path.mkdir(parents=True, exist_ok=True)
    except PermissionError as e:
        msg = f"Cannot create {name} directory {path}: Permission denied"
        raise RuntimeError(msg) from e
    except OSError as e:
        msg = f"Cannot create {name} directory {path}: {e}"
        raise RuntimeError(msg) from e
    return path


def ensure_state_dir() -> Path:
    """Create the state directory if it doesn't exist.

    Raises:
        RuntimeError: If the directory cannot be created.
    """
    return _ensure_dir(get_state_dir(), "state")

