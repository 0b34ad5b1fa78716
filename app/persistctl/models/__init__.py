"""Data models for persistctl.

This module exports the directory request types and the configuration schema.
"""

from persistctl.models.config import (
    DirectoryEntry,
    FileEntry,
    PersistenceConfig,
    PersistentStorage,
    Permissions,
    UserPersistence,
)
from persistctl.models.spec import DirectorySpec, FileSpec

__all__ = [
    "DirectoryEntry",
    "DirectorySpec",
    "FileEntry",
    "FileSpec",
    "Permissions",
    "PersistenceConfig",
    "PersistentStorage",
    "UserPersistence",
]
