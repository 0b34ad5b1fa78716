"""Exception hierarchy for planning and materializing persistent directories.

Every error raised by the planner or the materializer derives from
:class:`PersistctlError` so the CLI can report any of them as a single
diagnostic line and abort.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from persistctl.models.spec import DirectorySpec


class PersistctlError(Exception):
    """Base exception for all persistctl failures."""


class PathTraversalError(PersistctlError):
    """Raised when a path would escape above its starting point."""

    def __init__(self, path: str) -> None:
        self.path = path
        super().__init__(f"illegal path traversal in '{path}'")


class DuplicateSpecError(PersistctlError):
    """Raised when the same directory or file is requested more than once.

    Attributes:
        kind: Either "directories" or "files".
        duplicates: Repeated paths, in encounter order.
    """

    def __init__(self, kind: str, duplicates: list[str]) -> None:
        self.kind = kind
        self.duplicates = duplicates
        listing = ", ".join(duplicates)
        super().__init__(f"The following {kind} were specified two or more times: {listing}")


class DependencyCycleError(PersistctlError):
    """Raised when directory specs cannot be topologically sorted.

    Attributes:
        cycle: The shortest cycle found, in dependency order.
        loops: Every spec left unsorted once the cycle was detected.
    """

    def __init__(self, cycle: list[DirectorySpec], loops: list[DirectorySpec]) -> None:
        self.cycle = cycle
        self.loops = loops
        members = " -> ".join(spec.describe() for spec in cycle)
        super().__init__(
            "Unable to topologically sort persistent storage source and destination "
            f"directories: conflicting entries {members}"
        )


class RecursivePersistentPathError(PersistctlError):
    """Raised when a bind mount destination lies inside a storage path.

    Attributes:
        pairs: (destination, persistent storage path) pairs where the
            destination lies inside the storage path.
    """

    def __init__(self, pairs: list[tuple[str, str]]) -> None:
        self.pairs = pairs
        listing = ", ".join(f"{dest} inside {storage}" for dest, storage in pairs)
        super().__init__(f"Recursive persistent storage paths are not supported: {listing}")


class HomeMismatchError(PersistctlError):
    """Raised when a user's declared home disagrees with the account database."""

    def __init__(self, user: str, declared: str, actual: str) -> None:
        self.user = user
        self.declared = declared
        self.actual = actual
        super().__init__(
            f"Users and home doesn't match: user '{user}' declares home '{declared}' "
            f"but the account home is '{actual}'"
        )


class InternalConsistencyError(PersistctlError):
    """Raised when a resolved real path differs from the path derived for it.

    This is an invariant violation (usually an unexpected symlink) and
    is never retried.
    """

    def __init__(self, path: str, expected: str, actual: str) -> None:
        self.path = path
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"inconsistent path '{path}': expected it to resolve to '{expected}', "
            f"but it resolves to '{actual}'"
        )


class MaterializationError(PersistctlError):
    """Raised when a filesystem operation fails while materializing a directory."""

    def __init__(self, path: str, cause: str) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"failed to materialize '{path}': {cause}")
