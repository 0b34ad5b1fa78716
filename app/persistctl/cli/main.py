"""Main CLI application entry point.

Defines the Typer application and global options.
"""

from typing import Annotated

import typer

from persistctl import __version__
from persistctl.cli.commands import apply, check, create_dir, init, plan
from persistctl.core.log import configure_logging

# Create main Typer app
app = typer.Typer(
    name="persistctl",
    help="Prepare persistent storage directories for bind mounting.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"persistctl version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            callback=version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option(
            "--verbose",
            "-v",
            help="Enable verbose output.",
        ),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option(
            "--quiet",
            "-q",
            help="Suppress non-essential output.",
        ),
    ] = False,
) -> None:
    """persistctl - Prepare persistent storage directories for bind mounting.

    Declare which directories and files live on persistent storage, and
    persistctl creates every directory on both sides of the bind mounts
    with the right owner, group and mode.
    """
    # Store options in context for subcommands
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    configure_logging(verbose=verbose)


# Register commands
app.add_typer(init.app, name="init")
app.add_typer(check.app, name="check")
app.add_typer(plan.app, name="plan")
app.add_typer(apply.app, name="apply")
# Positional-only contract used by activation scripts
app.command(name="create-dir")(create_dir.create_dir)


if __name__ == "__main__":
    app()
