"""Create-dir command implementation.

Materializes a single directory spec given as positional arguments.
This is the interface activation scripts call once per sorted spec;
its exit status and one-line diagnostic are the contract.
"""

from typing import Annotated

import typer

from persistctl.core.errors import PersistctlError
from persistctl.core.log import configure_logging
from persistctl.materializer.materializer import DirectoryMaterializer
from persistctl.models.spec import DirectorySpec
from persistctl.utils.formatting import print_error

_TRUE_VALUES = frozenset({"1", "true", "yes", "on"})
_FALSE_VALUES = frozenset({"", "0", "false", "no", "off"})


def parse_flag(value: str, name: str) -> bool:
    """Parse a positional boolean such as "true", "false", "1" or "0".

    Raises:
        typer.BadParameter: If the value is not a recognized boolean.
    """
    normalized = value.strip().lower()
    if normalized in _TRUE_VALUES:
        return True
    if normalized in _FALSE_VALUES:
        return False
    msg = f"{name} must be true/false or 1/0, got '{value}'"
    raise typer.BadParameter(msg)


def create_dir(
    persistent_storage_path: Annotated[
        str, typer.Argument(help="Root of the persistent storage, e.g. /persistent.")
    ],
    root: Annotated[str, typer.Argument(help="Destination root, '/' or a home directory.")],
    relative_path: Annotated[str, typer.Argument(help="Directory path below both roots.")],
    source: Annotated[str, typer.Argument(help="Source override, or '' for the default.")],
    destination: Annotated[
        str, typer.Argument(help="Destination override, or '' for the default.")
    ],
    user: Annotated[str, typer.Argument(help="Owning user, or '' for unspecified.")],
    group: Annotated[str, typer.Argument(help="Owning group, or '' for unspecified.")],
    mode: Annotated[str, typer.Argument(help="Octal mode, or '' for unspecified.")],
    implicit: Annotated[str, typer.Argument(help="Whether the directory is implicit.")],
    debug: Annotated[str, typer.Argument(help="Trace every step to stderr.")],
) -> None:
    """Create one persistent directory and its destination counterpart."""
    is_implicit = parse_flag(implicit, "IMPLICIT")
    if parse_flag(debug, "DEBUG"):
        configure_logging(debug=True)

    try:
        spec = DirectorySpec.create(
            persistent_storage_path,
            root,
            relative_path,
            source=source or None,
            destination=destination or None,
            user=user,
            group=group,
            mode=mode,
            implicit=is_implicit,
        )
        DirectoryMaterializer().materialize(spec)
    except (PersistctlError, ValueError) as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e
