"""Sequential materialization of sorted directory specs.

Given a source directory in persistent storage, e.g. /persistent, and a
destination such as /var/lib/iwd, both /persistent/var/lib/iwd and
/var/lib/iwd must exist with matching owner, group and mode before the
bind mount happens. The relative path is walked one component at a time
(var, var/lib, var/lib/iwd) and, for every prefix:

1. The source and destination are resolved to their real paths and
   checked against the paths derived from the storage path and root.
2. A missing source is created, copying attributes from an existing
   destination that has not been finalized yet (or that is the target
   of an implicit request), otherwise using the spec's own attributes.
3. A destination finalized earlier in this run is left untouched.
4. An existing destination is synchronized from the source and marked.
5. A missing destination is created from the source and marked.

Any failure aborts the whole run. Every step is idempotent, so a failed
run can simply be repeated once the cause is fixed.
"""

import logging
import os
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from persistctl.core.errors import (
    InternalConsistencyError,
    MaterializationError,
    PathTraversalError,
)
from persistctl.materializer.atomic import atomic_dir
from persistctl.materializer.attributes import (
    apply_attributes,
    copy_attributes,
    describe_attributes,
)
from persistctl.materializer.state import ProcessedState
from persistctl.models.spec import DirectorySpec
from persistctl.planner.pathutil import concat_paths, split_path

logger = logging.getLogger(__name__)


class PathSide(str, Enum):
    """Which side of a bind mount a directory belongs to."""

    SOURCE = "source"
    DESTINATION = "destination"


class DirectoryAction(str, Enum):
    """What the materializer did with a directory.

    Attributes:
        EXISTING: Source directory already existed and was kept as is.
        CREATED: Created with the spec's own owner, group and mode.
        CREATED_FROM_DESTINATION: Source created with the attributes of
            the existing destination.
        CREATED_FROM_SOURCE: Destination created with the source's attributes.
        SYNCED: Existing destination synchronized from the source.
        SKIPPED: Destination already finalized earlier in this run.
    """

    EXISTING = "existing"
    CREATED = "created"
    CREATED_FROM_DESTINATION = "created_from_destination"
    CREATED_FROM_SOURCE = "created_from_source"
    SYNCED = "synced"
    SKIPPED = "skipped"


@dataclass(frozen=True, slots=True)
class MaterializedPath:
    """Outcome for one directory on one side of one prefix.

    Attributes:
        path: Resolved directory path.
        side: Source or destination.
        action: What was done.
        warning: Set when explicit attributes had to be assumed.
    """

    path: str
    side: PathSide
    action: DirectoryAction
    warning: str | None = None


class DirectoryMaterializer:
    """Creates and reconciles directories for sorted specs.

    Specs must be passed in the order produced by
    :func:`persistctl.planner.toposort.toposort_dirs`; the attributes a
    directory ends up with depend on which specs were processed before.

    Attributes:
        state: Destination paths finalized in this run.
    """

    def __init__(self, state: ProcessedState | None = None) -> None:
        """Initialize the materializer.

        Args:
            state: Processed-set for this run. A fresh one is created
                when omitted; never share one between runs.
        """
        self.state = state if state is not None else ProcessedState()

    def run(self, specs: Iterable[DirectorySpec]) -> list[MaterializedPath]:
        """Materialize specs one after another, stopping at the first failure.

        Args:
            specs: Specs in dependency order.

        Returns:
            Outcomes for every prefix of every spec.

        Raises:
            PersistctlError: On the first failure; nothing after it runs.
        """
        results: list[MaterializedPath] = []
        for spec in specs:
            results.extend(self.materialize(spec))
        return results

    def materialize(self, spec: DirectorySpec) -> list[MaterializedPath]:
        """Materialize every prefix of a single spec, shallowest first.

        Raises:
            PathTraversalError: If a path contains a ".." component.
            InternalConsistencyError: If a real path differs from the
                path derived for it.
            MaterializationError: If a filesystem operation fails.
        """
        if ".." in spec.relative_path.split("/"):
            raise PathTraversalError(spec.relative_path)

        logger.debug("Materializing %s", spec.describe())
        components = [part for part in split_path([spec.relative_path]) if part]
        results: list[MaterializedPath] = []

        for depth in range(1, len(components) + 1):
            prefix = "/".join(components[:depth])
            final = depth == len(components)
            source_path = (
                spec.source if final else concat_paths([spec.persistent_storage_path, prefix])
            )
            destination_path = spec.destination if final else concat_paths([spec.root, prefix])

            source = _resolve(source_path, spec.persistent_storage_path, prefix)
            destination = _resolve(destination_path, spec.root, prefix)
            results.append(self._ensure_source(spec, source, destination, final))

            # Re-resolve: creating the source may change what the paths mean
            source = _resolve(source_path, spec.persistent_storage_path, prefix)
            destination = _resolve(destination_path, spec.root, prefix)
            results.append(self._ensure_destination(source, destination))

        return results

    def _ensure_source(
        self,
        spec: DirectorySpec,
        source: str,
        destination: str,
        final: bool,
    ) -> MaterializedPath:
        """Create the source directory for one prefix if it is missing."""
        if os.path.isdir(source):
            logger.debug("Source %s exists", source)
            return MaterializedPath(source, PathSide.SOURCE, DirectoryAction.EXISTING)
        if os.path.lexists(source):
            raise MaterializationError(source, "exists but is not a directory")

        adopt_destination = os.path.isdir(destination) and (
            (final and spec.implicit) or not self.state.is_processed(destination)
        )
        try:
            if adopt_destination:
                logger.debug(
                    "Creating source %s from destination %s (%s)",
                    source,
                    destination,
                    describe_attributes(destination),
                )
                atomic_dir(source, lambda tmp: copy_attributes(tmp, destination))
                return MaterializedPath(
                    source, PathSide.SOURCE, DirectoryAction.CREATED_FROM_DESTINATION
                )

            warning = (
                f"Source directory '{source}' does not exist; it will be created for you "
                f"with the following permissions: owner: '{spec.user}:{spec.group}', "
                f"mode: '{spec.mode}'."
            )
            logger.warning("%s", warning)
            atomic_dir(source, lambda tmp: apply_attributes(tmp, spec.user, spec.group, spec.mode))
        except OSError as e:
            raise MaterializationError(source, e.strerror or str(e)) from e

        return MaterializedPath(source, PathSide.SOURCE, DirectoryAction.CREATED, warning)

    def _ensure_destination(self, source: str, destination: str) -> MaterializedPath:
        """Create or synchronize the destination directory for one prefix."""
        if os.path.isdir(destination) and self.state.is_processed(destination):
            logger.debug("Destination %s already processed, leaving it untouched", destination)
            return MaterializedPath(destination, PathSide.DESTINATION, DirectoryAction.SKIPPED)

        try:
            if os.path.isdir(destination):
                logger.debug(
                    "Synchronizing %s from %s (%s)",
                    destination,
                    source,
                    describe_attributes(source),
                )
                copy_attributes(destination, source)
                action = DirectoryAction.SYNCED
            elif os.path.lexists(destination):
                raise MaterializationError(destination, "exists but is not a directory")
            else:
                logger.debug("Creating destination %s from %s", destination, source)
                atomic_dir(destination, lambda tmp: copy_attributes(tmp, source))
                action = DirectoryAction.CREATED_FROM_SOURCE
        except OSError as e:
            raise MaterializationError(destination, e.strerror or str(e)) from e

        self.state.mark_processed(destination)
        return MaterializedPath(destination, PathSide.DESTINATION, action)


def _resolve(path: str, base: str, prefix: str) -> str:
    """Resolve path to its real form and check it against base + prefix.

    Raises:
        PathTraversalError: If the literal path contains "..".
        InternalConsistencyError: If the real path is not where the
            resolved base and the prefix say it should be.
    """
    if ".." in path.split("/"):
        raise PathTraversalError(path)

    actual = os.path.realpath(path)
    expected = concat_paths([os.path.realpath(base), prefix])
    if actual != expected:
        raise InternalConsistencyError(path, expected, actual)
    return actual
