"""Check command implementation.

Validates the persistence configuration without touching the filesystem.
"""

from pathlib import Path
from typing import Annotated

import typer
from rich.markup import escape

from persistctl.core.config import require_config
from persistctl.core.errors import DependencyCycleError, PersistctlError
from persistctl.planner.extract import plan_directories
from persistctl.utils.formatting import print_error, print_info, print_success

app = typer.Typer(
    help="Validate the persistence configuration.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def check_config(
    ctx: typer.Context,
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to the persistence configuration.",
        ),
    ] = None,
) -> None:
    """Check for duplicates, home mismatches, recursive paths and conflicts."""
    config = require_config(config_path)

    try:
        specs = plan_directories(config)
    except DependencyCycleError as e:
        print_error(str(e))
        print_info(f"{len(e.loops)} directory spec(s) could not be ordered:")
        for spec in e.loops:
            print_info(f"  {escape(spec.describe())}")
        raise typer.Exit(code=1) from e
    except (PersistctlError, ValueError) as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    quiet = bool(ctx.obj and ctx.obj.get("quiet"))
    if not quiet:
        print_success(
            f"Configuration is consistent: {len(specs)} directory spec(s) to materialize."
        )
