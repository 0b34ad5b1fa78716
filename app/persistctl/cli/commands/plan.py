"""Plan command implementation.

Shows directory specs in the order they would be materialized.
"""

import json
from enum import Enum
from pathlib import Path
from typing import Annotated

import typer

from persistctl.core.config import require_config
from persistctl.core.errors import PersistctlError
from persistctl.models.spec import DirectorySpec
from persistctl.planner.extract import plan_directories
from persistctl.planner.pathutil import sanitize_name
from persistctl.utils.formatting import console, create_plan_table, print_error, print_info

app = typer.Typer(
    help="Show the materialization order.",
    invoke_without_command=True,
)


class OutputFormat(str, Enum):
    """Output format options for the plan."""

    TABLE = "table"
    JSON = "json"


@app.callback(invoke_without_command=True)
def show_plan(
    config_path: Annotated[
        Path | None,
        typer.Option(
            "--config",
            "-c",
            help="Path to the persistence configuration.",
        ),
    ] = None,
    output_format: Annotated[
        OutputFormat,
        typer.Option(
            "--format",
            "-f",
            help="Output format.",
            case_sensitive=False,
        ),
    ] = OutputFormat.TABLE,
) -> None:
    """Print the sorted directory specs."""
    config = require_config(config_path)

    try:
        specs = plan_directories(config)
    except (PersistctlError, ValueError) as e:
        print_error(str(e))
        raise typer.Exit(code=1) from e

    if output_format == OutputFormat.JSON:
        console.print_json(json.dumps([_spec_to_dict(spec) for spec in specs]))
        return

    if not specs:
        print_info("No directories declared.")
        return

    console.print(create_plan_table(specs))


def _spec_to_dict(spec: DirectorySpec) -> dict[str, str | bool]:
    """Convert a spec to a JSON-serializable dictionary."""
    return {
        "persistent_storage_path": spec.persistent_storage_path,
        "root": spec.root,
        "relative_path": spec.relative_path,
        "source": spec.source,
        "destination": spec.destination,
        "user": spec.user,
        "group": spec.group,
        "mode": spec.mode,
        "implicit": spec.implicit,
        "name": sanitize_name(spec.destination),
    }
