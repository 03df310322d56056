"""User configuration for locatedb.

This module provides the configuration model and I/O functions for
index building and storage. Configuration is stored in
~/.config/locatedb/config.toml; every key is optional.
"""

import logging
import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Annotated

import tomli_w
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from locatedb.core.errors import ConfigError, ConfigParseError
from locatedb.core.paths import get_config_path, get_database_path
from locatedb.index.exclusion import DEFAULT_EXCLUDED_ROOTS
from locatedb.index.mounts import DEFAULT_FILESYSTEM_TYPES

logger = logging.getLogger(__name__)

DEFAULT_LOCK_TIMEOUT = 5.0


class LocateConfig(BaseModel):
    """Configuration for index building and storage.

    Attributes:
        database_path: Location of the index database (None = XDG state dir).
        filesystem_types: Filesystem types whose mounts are indexed.
        excluded_roots: Absolute path roots never indexed.
        workers: Number of mounts walked in parallel.
        lock_timeout_seconds: How long an update waits for the write lock.
    """

    model_config = ConfigDict(extra="forbid")

    database_path: Annotated[
        Path | None,
        Field(description="Index database location (None = default state path)"),
    ] = None
    filesystem_types: Annotated[
        list[str],
        Field(description="Filesystem types to index"),
    ] = Field(default_factory=lambda: list(DEFAULT_FILESYSTEM_TYPES))
    excluded_roots: Annotated[
        list[str],
        Field(description="Absolute path roots to skip"),
    ] = Field(default_factory=lambda: list(DEFAULT_EXCLUDED_ROOTS))
    workers: Annotated[
        int,
        Field(ge=1, le=64, description="Parallel mount walkers (1-64)"),
    ] = 1
    lock_timeout_seconds: Annotated[
        float,
        Field(ge=0, le=600, description="Write lock wait in seconds (0-600)"),
    ] = DEFAULT_LOCK_TIMEOUT

    @field_validator("excluded_roots")
    @classmethod
    def validate_roots(cls, v: list[str]) -> list[str]:
        """Require absolute roots other than / and strip trailing separators."""
        roots: list[str] = []
        for root in v:
            if not root.startswith("/"):
                msg = f"excluded root must be absolute: {root!r}"
                raise ValueError(msg)
            stripped = root.rstrip("/")
            if not stripped:
                msg = "excluded root cannot be '/': nothing would be indexed"
                raise ValueError(msg)
            roots.append(stripped)
        return roots

    @field_validator("filesystem_types")
    @classmethod
    def validate_types(cls, v: list[str]) -> list[str]:
        """Reject blank filesystem type names."""
        if any(not t.strip() for t in v):
            msg = "filesystem type names cannot be empty"
            raise ValueError(msg)
        return [t.strip() for t in v]

    @property
    def effective_database_path(self) -> Path:
        """Get the database path, falling back to the XDG default."""
        if self.database_path is not None:
            return self.database_path.expanduser()
        return get_database_path()


def load_config(path: Path | None = None) -> LocateConfig:
    """Load configuration from a TOML file.

    A missing file is not an error: defaults are returned.

    Args:
        path: Path to the config file. If None, uses the default config path.

    Returns:
        Validated LocateConfig object.

    Raises:
        ConfigParseError: If the TOML syntax is invalid.
        ConfigError: If the file cannot be read or doesn't match the schema.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        logger.debug("No config file at %s, using defaults", config_path)
        return LocateConfig()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax in {config_path}: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read config {config_path}: {e}") from e

    try:
        return LocateConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config content in {config_path}: {e}") from e


def save_config(config: LocateConfig, path: Path | None = None) -> Path:
    """Save configuration to a TOML file.

    The file is written atomically by first writing to a temporary file
    and then using os.replace() for atomic rename.

    Args:
        config: The LocateConfig object to save.
        path: Path to save the config. If None, uses the default config path.

    Returns:
        Path where the config was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()

    data = config_to_dict(config)

    tmp_path: Path | None = None
    try:
        config_path.parent.mkdir(parents=True, exist_ok=True)
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
        raise ConfigError(f"Failed to write config: {e}") from e

    return config_path


def config_to_dict(config: LocateConfig) -> dict[str, object]:
    """Convert LocateConfig to a dictionary for TOML serialization.

    TOML has no null, so an unset database path is omitted.

    Args:
        config: The LocateConfig to convert.

    Returns:
        Dictionary ready for TOML serialization.
    """
    result: dict[str, object] = {}

    if config.database_path is not None:
        result["database_path"] = str(config.database_path)

    result["filesystem_types"] = list(config.filesystem_types)
    result["excluded_roots"] = list(config.excluded_roots)
    result["workers"] = config.workers
    result["lock_timeout_seconds"] = config.lock_timeout_seconds

    return result
