"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import grp
import os
import pwd
from collections.abc import Callable
from pathlib import Path

import pytest
from persistctl.models.spec import DirectorySpec


@pytest.fixture
def storage(tmp_path: Path) -> Path:
    """Persistent storage root (not created)."""
    return tmp_path.resolve() / "persistent"


@pytest.fixture
def root(tmp_path: Path) -> Path:
    """Stand-in for the ephemeral root filesystem."""
    path = tmp_path.resolve() / "root"
    path.mkdir()
    return path


@pytest.fixture
def make_spec(storage: Path, root: Path) -> Callable[..., DirectorySpec]:
    """Factory for specs between the storage and root fixtures."""

    def _make(relative_path: str, **kwargs: object) -> DirectorySpec:
        return DirectorySpec.create(
            str(storage), str(root), relative_path, **kwargs  # type: ignore[arg-type]
        )

    return _make


@pytest.fixture
def current_user() -> str:
    """Name of the user running the tests."""
    return pwd.getpwuid(os.getuid()).pw_name


@pytest.fixture
def current_group() -> str:
    """Name of the primary group of the user running the tests."""
    return grp.getgrgid(os.getgid()).gr_name
