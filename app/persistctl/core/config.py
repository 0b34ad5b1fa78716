"""Persistence configuration file I/O.

This module provides functions for loading and saving the persistence
configuration in TOML format with validation using Pydantic models.
"""

import os
import tomllib
from pathlib import Path
from tempfile import NamedTemporaryFile
from typing import Any

import tomli_w
from pydantic import ValidationError

from persistctl.core.paths import get_config_path
from persistctl.models.config import DirectoryEntry, FileEntry, PersistenceConfig


class ConfigError(Exception):
    """Base exception for configuration-related errors."""


class ConfigNotFoundError(ConfigError):
    """Raised when the configuration file is not found."""


class ConfigParseError(ConfigError):
    """Raised when the configuration file cannot be parsed."""


class ConfigValidationError(ConfigError):
    """Raised when the configuration content is invalid."""


def load_config(path: Path | None = None) -> PersistenceConfig:
    """Load and validate a persistence configuration from a TOML file.

    Args:
        path: Path to the configuration file. If None, uses the default path.

    Returns:
        Validated PersistenceConfig object.

    Raises:
        ConfigNotFoundError: If the configuration file doesn't exist.
        ConfigParseError: If the TOML syntax is invalid.
        ConfigValidationError: If the content doesn't match the schema.
    """
    config_path = path or get_config_path()

    if not config_path.exists():
        raise ConfigNotFoundError(f"Configuration not found: {config_path}")

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ConfigParseError(f"Invalid TOML syntax: {e}") from e
    except OSError as e:
        raise ConfigError(f"Failed to read configuration: {e}") from e

    try:
        return PersistenceConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigValidationError(f"Invalid configuration content: {e}") from e


def save_config(config: PersistenceConfig, path: Path | None = None) -> Path:
    """Save a persistence configuration to a TOML file.

    The file is written atomically by first writing to a temporary file
    in the same directory and then using os.replace() for atomic rename.
    The temporary file is cleaned up on failure.

    Args:
        config: The PersistenceConfig object to save.
        path: Path to save the configuration. If None, uses the default path.

    Returns:
        Path where the configuration was saved.

    Raises:
        ConfigError: If the file cannot be written.
    """
    config_path = path or get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    data = _config_to_dict(config)

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
        raise ConfigError(f"Failed to write configuration: {e}") from e

    return config_path


def require_config(config_path: Path | None = None) -> PersistenceConfig:
    """Load the configuration or exit with a helpful error message.

    Args:
        config_path: Optional custom configuration path.

    Returns:
        Loaded and validated PersistenceConfig.

    Raises:
        typer.Exit: If the configuration cannot be loaded.
    """
    import typer

    from persistctl.utils.formatting import print_error, print_info

    path = config_path or get_config_path()
    try:
        return load_config(path)
    except ConfigNotFoundError as e:
        print_error(f"Configuration not found: {path}")
        print_info("Run 'persistctl init' to create a starter configuration.")
        raise typer.Exit(code=1) from e
    except ConfigError as e:
        print_error(f"Failed to load configuration: {e}")
        raise typer.Exit(code=1) from e


def _config_to_dict(config: PersistenceConfig) -> dict[str, Any]:
    """Convert a PersistenceConfig to a dictionary for TOML serialization.

    Entries without overrides are written back as bare path strings.
    """
    persistence: dict[str, Any] = {}
    for storage_path, storage in config.persistence.items():
        section: dict[str, Any] = {
            "directories": [_directory_to_toml(e) for e in storage.directories],
            "files": [_file_to_toml(e) for e in storage.files],
        }
        if not storage.enable:
            section["enable"] = False
        if storage.users:
            section["users"] = {
                name: {
                    **({"home": user.home} if user.home else {}),
                    "directories": [_directory_to_toml(e) for e in user.directories],
                    "files": [_file_to_toml(e) for e in user.files],
                }
                for name, user in storage.users.items()
            }
        persistence[storage_path] = section
    return {"persistence": persistence}


def _directory_to_toml(entry: DirectoryEntry) -> str | dict[str, Any]:
    """Convert a DirectoryEntry to a bare string or a table."""
    data = entry.model_dump(exclude_none=True)
    return entry.directory if list(data) == ["directory"] else data


def _file_to_toml(entry: FileEntry) -> str | dict[str, Any]:
    """Convert a FileEntry to a bare string or a table."""
    data = entry.model_dump(exclude_none=True)
    if not data.get("parent_directory"):
        data.pop("parent_directory", None)
    return entry.file if list(data) == ["file"] else data
