"""Atomic directory creation.

A directory is built completely, attributes included, inside a
temporary directory next to its final location and then renamed into
place. The final path is therefore either absent or fully attributed,
never half-built. The temporary directory lives in the same parent so
the rename never crosses a filesystem boundary.
"""

import logging
import os
import shutil
import tempfile
from collections.abc import Callable

logger = logging.getLogger(__name__)


def atomic_dir(path: str, build: Callable[[str], None]) -> None:
    """Create a directory atomically.

    Missing parents are created first with default permissions.

    Args:
        path: Final directory path.
        build: Called with the temporary directory to set it up, e.g.
            to apply owner, group and mode.

    Raises:
        OSError: If the directory cannot be built or renamed into place.
            The temporary directory is removed before the error propagates.
    """
    parent = os.path.dirname(path.rstrip("/")) or "/"
    if not os.path.isdir(parent):
        logger.debug("Creating missing parent %s", parent)
        os.makedirs(parent, exist_ok=True)

    name = os.path.basename(path.rstrip("/"))
    tmp = tempfile.mkdtemp(prefix=f".{name}.", dir=parent)
    try:
        build(tmp)
        # Replaces an empty directory created concurrently; never nests into it
        os.replace(tmp, path)
    except BaseException:
        shutil.rmtree(tmp, ignore_errors=True)
        raise
    logger.debug("Atomically created %s", path)
