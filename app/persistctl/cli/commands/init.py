"""Init command implementation.

Writes a starter persistence configuration.
"""

from pathlib import Path
from typing import Annotated

import typer

from persistctl.core.config import ConfigError, save_config
from persistctl.core.paths import get_config_path
from persistctl.models.config import DirectoryEntry, FileEntry, PersistenceConfig, PersistentStorage
from persistctl.utils.formatting import print_error, print_info, print_success

app = typer.Typer(
    help="Create a starter persistence configuration.",
    invoke_without_command=True,
)

# Directories most systems want to keep across reboots
DEFAULT_DIRECTORIES = (
    "/var/log",
    "/var/lib/nixos",
    "/var/lib/systemd/coredump",
)
DEFAULT_FILES = ("/etc/machine-id",)


def build_starter_config(storage_path: str) -> PersistenceConfig:
    """Build the starter configuration for a storage root.

    Args:
        storage_path: Absolute path of the persistent storage.

    Returns:
        Configuration persisting a few common system paths.
    """
    storage = PersistentStorage(
        directories=[DirectoryEntry(directory=path) for path in DEFAULT_DIRECTORIES],
        files=[FileEntry(file=path) for path in DEFAULT_FILES],
    )
    return PersistenceConfig(persistence={storage_path: storage})


@app.callback(invoke_without_command=True)
def init_config(
    output: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Output path for the configuration file.",
        ),
    ] = None,
    storage_path: Annotated[
        str,
        typer.Option(
            "--storage",
            "-s",
            help="Absolute path of the persistent storage.",
        ),
    ] = "/persistent",
    force: Annotated[
        bool,
        typer.Option(
            "--force",
            "-f",
            help="Overwrite an existing configuration.",
        ),
    ] = False,
) -> None:
    """Write a starter configuration persisting common system paths."""
    path = output or get_config_path()

    if path.exists() and not force:
        print_error(f"Configuration already exists: {path}")
        print_info("Use --force to overwrite it.")
        raise typer.Exit(code=1)

    if not storage_path.startswith("/"):
        print_error(f"Storage path must be absolute: {storage_path}")
        raise typer.Exit(code=1)

    try:
        saved = save_config(build_starter_config(storage_path), path)
    except ConfigError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    print_success(f"Configuration written to {saved}")
