"""Apply command implementation.

Checks and sorts the persistence configuration, then materializes every
directory in a single run.
"""

from pathlib import Path
from typing import Annotated

import typer

from persistctl.core.config import require_config
from persistctl.core.errors import PersistctlError
from persistctl.core.log import configure_logging
from persistctl.materializer.materializer import DirectoryMaterializer
from persistctl.materializer.state import ProcessedState
from persistctl.planner.extract import plan_directories
from persistctl.utils.formatting import (
    console,
    create_plan_table,
    create_results_table,
    print_error,
    print_info,
    print_success,
)

app = typer.Typer(
    help="Create all persistent directories.",
    invoke_without_command=True,
)


@app.callback(invoke_without_command=True)
def apply_config(
    ctx: typer.Context,
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to the persistence configuration.",
        ),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option(
            "--dry-run",
            "-n",
            help="Show the plan without creating anything.",
        ),
    ] = False,
    debug: Annotated[
        bool,
        typer.Option(
            "--debug",
            help="Trace every materialization step to stderr.",
        ),
    ] = False,
) -> None:
    """Materialize every declared directory in dependency order."""
    verbose = bool(ctx.obj and ctx.obj.get("verbose"))
    quiet = bool(ctx.obj and ctx.obj.get("quiet"))
    if debug:
        configure_logging(verbose=verbose, debug=True)

    config = require_config(config_path)

    try:
        specs = plan_directories(config)
    except (PersistctlError, ValueError) as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if not specs:
        print_info("No directories declared.")
        return

    if dry_run:
        console.print(create_plan_table(specs, title="Materialization Plan (Dry Run)"))
        return

    materializer = DirectoryMaterializer(ProcessedState())
    try:
        results = materializer.run(specs)
    except PersistctlError as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if verbose:
        console.print(create_results_table(results))
    if not quiet:
        print_success(f"Materialized {len(specs)} directory spec(s).")
