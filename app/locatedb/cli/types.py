"""Shared types and utilities for CLI commands.

This module provides common enums and helper functions used across
multiple CLI command modules to avoid code duplication.
"""

from enum import Enum
from pathlib import Path

import typer

from locatedb.core.config import LocateConfig, load_config
from locatedb.core.errors import ConfigError
from locatedb.index.store import IndexStore
from locatedb.utils.formatting import print_error


class OutputFormat(str, Enum):
    """Output format options."""

    PLAIN = "plain"
    JSON = "json"


def _options(ctx: typer.Context) -> dict[str, object]:
    """Global options stored by the main callback."""
    ctx.ensure_object(dict)
    return ctx.obj


def is_quiet(ctx: typer.Context) -> bool:
    """Check if --quiet was given."""
    return bool(_options(ctx).get("quiet", False))


def get_config(ctx: typer.Context) -> LocateConfig:
    """Load the configuration selected by the global options.

    Exits with status 1 if the configuration file is invalid.

    Args:
        ctx: Typer context carrying the global options.

    Returns:
        Validated configuration.
    """
    config_path = _options(ctx).get("config_path")
    try:
        return load_config(config_path if isinstance(config_path, Path) else None)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from None


def get_database_path(ctx: typer.Context, config: LocateConfig) -> Path:
    """Resolve the index database location.

    Priority: --database option, then config file, then XDG default.

    Args:
        ctx: Typer context carrying the global options.
        config: Loaded configuration.

    Returns:
        Path of the index database.
    """
    override = _options(ctx).get("database")
    if isinstance(override, Path):
        return override.expanduser()
    return config.effective_database_path


def create_store(ctx: typer.Context, config: LocateConfig, *, create: bool = True) -> IndexStore:
    """Create an (unopened) index store for the resolved database path.

    Args:
        ctx: Typer context carrying the global options.
        config: Loaded configuration.
        create: Allow opening the store to create the database. Read-only
            commands pass False so a missing index stays missing.

    Returns:
        IndexStore to be opened by the caller.
    """
    return IndexStore(
        get_database_path(ctx, config),
        timeout=config.lock_timeout_seconds,
        create=create,
    )
