"""XDG-compliant path management for locatedb.

This module provides standardized paths following the XDG Base Directory
Specification for configuration and index storage.

XDG defaults:
- Config: ~/.config/locatedb/
- State: ~/.local/state/locatedb/ (holds the index database)
"""

import os
from pathlib import Path

# Application identifier for directory naming
APP_NAME = "locatedb"

DATABASE_FILENAME = "index.db"


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
        Path to ~/.config/locatedb/ (or XDG_CONFIG_HOME/locatedb/).
    """
    return _get_xdg_dir("XDG_CONFIG_HOME", ".config")


def get_state_dir() -> Path:
    """Get the state directory path.

    The index database lives here: it persists between runs but can
    always be rebuilt with ``locatedb update``.

    Returns:
        Path to ~/.local/state/locatedb/ (or XDG_STATE_HOME/locatedb/).
    """
    return _get_xdg_dir("XDG_STATE_HOME", ".local/state")


def get_config_path() -> Path:
    """Get the default configuration file path.

    Returns:
        Path to ~/.config/locatedb/config.toml.
    """
    return get_config_dir() / "config.toml"


def get_database_path() -> Path:
    """Get the default index database path.

    Returns:
        Path to ~/.local/state/locatedb/index.db.
    """
    return get_state_dir() / DATABASE_FILENAME


def get_summary_path(database_path: Path) -> Path:
    """Get the last-update summary file stored beside a database.

    Args:
        database_path: Path of the index database.

    Returns:
        Path such as ~/.local/state/locatedb/index.last-update.json.
    """
    return database_path.with_name(f"{database_path.stem}.last-update.json")
