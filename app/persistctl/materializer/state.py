"""Run-scoped record of finalized destination directories."""

from persistctl.core.errors import InternalConsistencyError


class ProcessedState:
    """Destination paths whose attributes were finalized in this run.

    One instance belongs to exactly one materializer run. A path is
    marked at most once; once marked, later and lower-precedence specs
    leave it alone.
    """

    def __init__(self) -> None:
        self._paths: set[str] = set()

    def is_processed(self, path: str) -> bool:
        """Check whether a resolved destination path was already finalized."""
        return path in self._paths

    def mark_processed(self, path: str) -> None:
        """Record a resolved destination path as finalized.

        Raises:
            InternalConsistencyError: If the path was already marked.
        """
        if path in self._paths:
            raise InternalConsistencyError(path, "an unprocessed destination", "already processed")
        self._paths.add(path)
