"""Consistency checks run before any directory is materialized.

Each ``check_*`` function raises a :class:`PersistctlError` subclass on
the first problem; each ``find_*`` function only reports.
"""

from __future__ import annotations

import logging
from collections.abc import Hashable, Iterable, Sequence
from typing import TYPE_CHECKING, TypeVar

from persistctl.core.errors import DuplicateSpecError, RecursivePersistentPathError
from persistctl.planner.normalize import strict_prefix, with_trailing_slash

if TYPE_CHECKING:
    from persistctl.models.spec import DirectorySpec, FileSpec

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Hashable)


def duplicates(items: Iterable[T]) -> list[T]:
    """Return every repeated occurrence of an item, in encounter order.

    An item seen three times is reported twice, once per repeat.

    Args:
        items: Items to scan.

    Returns:
        Repeated occurrences, empty when every item is unique.
    """
    seen: set[T] = set()
    repeats: list[T] = []
    for item in items:
        if item in seen:
            repeats.append(item)
        else:
            seen.add(item)
    return repeats


def check_duplicates(kind: str, paths: Iterable[str]) -> None:
    """Fail when any path is requested more than once.

    Args:
        kind: "directories" or "files", used in the error message.
        paths: Requested paths for one scope (system or a single user).

    Raises:
        DuplicateSpecError: If any path repeats.
    """
    repeats = duplicates(paths)
    if repeats:
        logger.debug("Duplicate %s: %s", kind, repeats)
        raise DuplicateSpecError(kind, repeats)


def find_recursive_persistent_paths(
    specs: Sequence[DirectorySpec | FileSpec],
    storage_paths: Iterable[str] | None = None,
) -> list[tuple[str, str]]:
    """Find destinations that lie inside a persistent storage path.

    A destination nested strictly inside a storage root makes the mount
    tree recursive: the storage root would receive a bind mount of a
    path that is itself served from storage.

    Args:
        specs: Directory and file specs to inspect. Their own storage
            paths, including per-entry overrides, are always tested.
        storage_paths: Further storage roots to test against, such as
            enabled roots that contribute no specs.

    Returns:
        Sorted, de-duplicated (destination, storage path) pairs.
    """
    roots = {with_trailing_slash(spec.persistent_storage_path) for spec in specs}
    roots.update(with_trailing_slash(path) for path in storage_paths or ())

    pairs: set[tuple[str, str]] = set()
    for spec in specs:
        destination = with_trailing_slash(spec.destination)
        for root in roots:
            if strict_prefix(root, destination):
                pairs.add((spec.destination, root.rstrip("/") or "/"))
    return sorted(pairs)


def check_recursive_persistent_paths(
    specs: Sequence[DirectorySpec | FileSpec],
    storage_paths: Iterable[str] | None = None,
) -> None:
    """Fail when any destination lies strictly inside a storage path.

    Raises:
        RecursivePersistentPathError: If a recursive pair is found.
    """
    pairs = find_recursive_persistent_paths(specs, storage_paths)
    if pairs:
        raise RecursivePersistentPathError(pairs)
