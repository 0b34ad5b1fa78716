"""Directory and file request models.

A :class:`DirectorySpec` is one flattened request to make a directory
exist both in persistent storage (its source) and on the ephemeral root
(its destination). Specs are immutable: they are built once from the
configuration, sorted once, and materialized once.
"""

import re
from dataclasses import dataclass

from persistctl.core.errors import InternalConsistencyError, PathTraversalError
from persistctl.planner.normalize import NormalizedView, normalize
from persistctl.planner.pathutil import clean_path, concat_paths

_MODE_PATTERN = re.compile(r"^[0-7]{3,4}$")


@dataclass(frozen=True, slots=True)
class DirectorySpec:
    """A single directory to materialize.

    Empty user, group or mode strings mean "unspecified": the directory
    keeps the filesystem default for that attribute.

    Attributes:
        persistent_storage_path: Absolute root of the durable storage.
        root: Absolute root the destination is relative to ("/" or a home).
        relative_path: Canonical path of the directory below both roots.
        source: Directory inside persistent storage.
        destination: Directory on the ephemeral root.
        user: Owning user name or uid.
        group: Owning group name or gid.
        mode: Octal permission string such as "0755".
        implicit: True when the directory is only needed as the parent
            of another request and was never declared on its own.
    """

    persistent_storage_path: str
    root: str
    relative_path: str
    source: str
    destination: str
    user: str = ""
    group: str = ""
    mode: str = ""
    implicit: bool = False

    def __post_init__(self) -> None:
        """Validate spec invariants after initialization."""
        for name in ("persistent_storage_path", "root"):
            value = getattr(self, name)
            if not value.startswith("/"):
                msg = f"{name} must be an absolute path, got '{value}'"
                raise ValueError(msg)
        if self.mode and not _MODE_PATTERN.match(self.mode):
            msg = f"Mode must be an octal string such as '0755', got '{self.mode}'"
            raise ValueError(msg)

        expected_source = concat_paths([self.persistent_storage_path, self.relative_path])
        if clean_path(self.source) != expected_source:
            raise InternalConsistencyError(self.source, expected_source, clean_path(self.source))

        expected_destination = concat_paths([self.root, self.relative_path])
        if clean_path(self.destination) != expected_destination:
            raise InternalConsistencyError(
                self.destination, expected_destination, clean_path(self.destination)
            )

        if clean_path(self.source) == clean_path(self.destination):
            msg = f"Source and destination must differ, both are '{self.source}'"
            raise ValueError(msg)

    @classmethod
    def create(
        cls,
        persistent_storage_path: str,
        root: str,
        relative_path: str,
        *,
        source: str | None = None,
        destination: str | None = None,
        user: str = "",
        group: str = "",
        mode: str = "",
        implicit: bool = False,
    ) -> "DirectorySpec":
        """Build a spec from raw strings, canonicalizing every path.

        Source and destination default to the storage path and root
        joined with the relative path. Overrides are accepted only when
        they canonicalize to those same values.

        Raises:
            PathTraversalError: If any raw path has a ".." component.
            InternalConsistencyError: If an override disagrees with the
                derived path.
            ValueError: If a root is relative, the mode is malformed, or
                source and destination coincide.
        """
        for raw in (relative_path, source, destination):
            if raw and ".." in raw.split("/"):
                raise PathTraversalError(raw)

        relative = clean_path(relative_path)
        storage = clean_path(persistent_storage_path)
        root_path = clean_path(root)
        return cls(
            persistent_storage_path=storage,
            root=root_path,
            relative_path=relative,
            source=clean_path(source) if source else concat_paths([storage, relative]),
            destination=(
                clean_path(destination) if destination else concat_paths([root_path, relative])
            ),
            user=user,
            group=group,
            mode=mode,
            implicit=implicit,
        )

    @property
    def normalized(self) -> NormalizedView:
        """Slash-terminated forms used for prefix comparisons."""
        return normalize(self)

    @property
    def attributes(self) -> tuple[str, str, str]:
        """The (user, group, mode) triple requested for the directory."""
        return (self.user, self.group, self.mode)

    @property
    def kind(self) -> str:
        """Human-readable request kind, "implicit" or "explicit"."""
        return "implicit" if self.implicit else "explicit"

    def describe(self) -> str:
        """Short description for diagnostics."""
        owner = f"{self.user or '-'}:{self.group or '-'}"
        mode = self.mode or "-"
        return f"{self.destination} ({self.kind}, {owner}, mode {mode}, from {self.source})"


@dataclass(frozen=True, slots=True)
class FileSpec:
    """A single file whose parent directory must be persisted.

    File contents are never touched; only the parent directory is
    materialized, through ``parent_directory``.

    Attributes:
        persistent_storage_path: Absolute root of the durable storage.
        root: Absolute root the destination is relative to.
        relative_path: Canonical path of the file below both roots.
        source: File path inside persistent storage.
        destination: File path on the ephemeral root.
        parent_directory: Implicit spec for the containing directory,
            or None when the file sits directly in the root.
    """

    persistent_storage_path: str
    root: str
    relative_path: str
    source: str
    destination: str
    parent_directory: DirectorySpec | None
