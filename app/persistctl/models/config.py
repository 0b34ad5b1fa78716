"""Persistence configuration models.

This module defines the Pydantic models representing persistence.toml,
which declares, per persistent storage root, the directories and files
to keep across reboots.

Example:
    [persistence."/persistent"]
    directories = ["/var/log", { directory = "/var/lib/iwd", mode = "0700" }]
    files = ["/etc/machine-id"]

    [persistence."/persistent".users.alex]
    directories = ["Downloads", { directory = ".ssh", mode = "0700" }]
"""

import re
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

_MODE_PATTERN = re.compile(r"^[0-7]{3,4}$")


def _coerce_entries(value: Any, key: str) -> Any:
    """Turn bare path strings in a list into single-key tables."""
    if not isinstance(value, list):
        return value
    return [{key: item} if isinstance(item, str) else item for item in value]


class Permissions(BaseModel):
    """Ownership and mode for a directory.

    Unset fields fall back to the defaults of the scope the directory
    is declared in.

    Attributes:
        user: Owning user name or uid.
        group: Owning group name or gid.
        mode: Octal permission string such as "0755".
    """

    model_config = ConfigDict(extra="forbid")

    user: Annotated[str | None, Field(description="Owning user")] = None
    group: Annotated[str | None, Field(description="Owning group")] = None
    mode: Annotated[str | None, Field(description="Octal permissions")] = None

    @field_validator("mode")
    @classmethod
    def validate_mode(cls, v: str | None) -> str | None:
        """Validate that mode is a 3 or 4 digit octal string."""
        if v is not None and not _MODE_PATTERN.match(v):
            msg = f"mode must be an octal string such as '0755', got '{v}'"
            raise ValueError(msg)
        return v


class DirectoryEntry(Permissions):
    """A directory to persist.

    Attributes:
        directory: Path relative to the scope root ("/" or a home).
        root: Override for the destination root.
        persistent_storage_path: Override for the storage root.
    """

    directory: Annotated[str, Field(min_length=1, description="Directory path")]
    root: Annotated[str | None, Field(description="Destination root override")] = None
    persistent_storage_path: Annotated[
        str | None, Field(description="Storage root override")
    ] = None


class FileEntry(BaseModel):
    """A file to persist; only its parent directory is materialized.

    Attributes:
        file: Path relative to the scope root.
        persistent_storage_path: Override for the storage root.
        parent_directory: Permissions for the implicit parent directory.
    """

    model_config = ConfigDict(extra="forbid")

    file: Annotated[str, Field(min_length=1, description="File path")]
    persistent_storage_path: Annotated[
        str | None, Field(description="Storage root override")
    ] = None
    parent_directory: Annotated[
        Permissions,
        Field(default_factory=Permissions, description="Parent directory permissions"),
    ]


class UserPersistence(BaseModel):
    """Directories and files persisted for one user, relative to their home.

    Attributes:
        home: Home directory; defaults to the account database entry.
        directories: Directories below the home directory.
        files: Files below the home directory.
    """

    model_config = ConfigDict(extra="forbid")

    home: Annotated[str | None, Field(description="Home directory")] = None
    directories: Annotated[
        list[DirectoryEntry],
        Field(default_factory=list, description="Directories to persist"),
    ]
    files: Annotated[
        list[FileEntry],
        Field(default_factory=list, description="Files to persist"),
    ]

    @field_validator("directories", mode="before")
    @classmethod
    def coerce_directories(cls, v: Any) -> Any:
        """Accept bare strings as directory entries."""
        return _coerce_entries(v, "directory")

    @field_validator("files", mode="before")
    @classmethod
    def coerce_files(cls, v: Any) -> Any:
        """Accept bare strings as file entries."""
        return _coerce_entries(v, "file")


class PersistentStorage(BaseModel):
    """Everything persisted under a single storage root.

    Attributes:
        enable: Whether this storage root is active.
        directories: System directories, relative to "/".
        files: System files, relative to "/".
        users: Per-user directories and files, keyed by user name.
    """

    model_config = ConfigDict(extra="forbid")

    enable: Annotated[bool, Field(description="Whether the storage root is used")] = True
    directories: Annotated[
        list[DirectoryEntry],
        Field(default_factory=list, description="Directories to persist"),
    ]
    files: Annotated[
        list[FileEntry],
        Field(default_factory=list, description="Files to persist"),
    ]
    users: Annotated[
        dict[str, UserPersistence],
        Field(default_factory=dict, description="Per-user persistence"),
    ]

    @field_validator("directories", mode="before")
    @classmethod
    def coerce_directories(cls, v: Any) -> Any:
        """Accept bare strings as directory entries."""
        return _coerce_entries(v, "directory")

    @field_validator("files", mode="before")
    @classmethod
    def coerce_files(cls, v: Any) -> Any:
        """Accept bare strings as file entries."""
        return _coerce_entries(v, "file")


class PersistenceConfig(BaseModel):
    """Complete persistence configuration.

    Attributes:
        persistence: Storage roots keyed by their absolute path.
    """

    model_config = ConfigDict(extra="forbid")

    persistence: Annotated[
        dict[str, PersistentStorage],
        Field(default_factory=dict, description="Storage roots"),
    ]

    @field_validator("persistence")
    @classmethod
    def validate_storage_paths(
        cls, v: dict[str, PersistentStorage]
    ) -> dict[str, PersistentStorage]:
        """Validate that every storage root is an absolute path."""
        for path in v:
            if not path.startswith("/"):
                msg = f"Persistent storage path must be absolute, got '{path}'"
                raise ValueError(msg)
        return v

    def enabled_storage(self) -> list[tuple[str, PersistentStorage]]:
        """Enabled storage roots, sorted by path."""
        return sorted(
            ((path, storage) for path, storage in self.persistence.items() if storage.enable),
            key=lambda item: item[0],
        )
