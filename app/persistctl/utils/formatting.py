"""Rich console formatting utilities.

Provides consistent formatting for CLI output using Rich.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from persistctl.core.theme import get_theme

if TYPE_CHECKING:
    from persistctl.materializer.materializer import MaterializedPath
    from persistctl.models.spec import DirectorySpec


def _detect_color_system() -> str | None:
    """Detect the best color system for the current terminal.

    Returns "truecolor" for interactive terminals to enable full hex color support,
    None otherwise to let Rich auto-detect.
    """
    if sys.stdout.isatty():
        return "truecolor"
    return None


# Shared console instances (theme loaded once at import)
console = Console(theme=get_theme(), color_system=_detect_color_system())
err_console = Console(theme=get_theme(), stderr=True, color_system=_detect_color_system())


def create_plan_table(specs: list[DirectorySpec], title: str = "Materialization Plan") -> Table:
    """Create a table listing specs in materialization order.

    Args:
        specs: Sorted directory specs.
        title: Table title.

    Returns:
        Rich Table with one row per spec.
    """
    table = Table(
        title=title,
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("#", justify="right", style="muted")
    table.add_column("Kind", width=8)
    table.add_column("Destination", no_wrap=True)
    table.add_column("Source", style="muted", no_wrap=True)
    table.add_column("Owner")
    table.add_column("Mode", justify="right")

    for index, spec in enumerate(specs, start=1):
        table.add_row(
            str(index),
            f"[{spec.kind}]{spec.kind}[/]",
            spec.destination,
            spec.source,
            f"{spec.user or '-'}:{spec.group or '-'}",
            spec.mode or "-",
        )
    return table


def create_results_table(results: list[MaterializedPath]) -> Table:
    """Create a table listing what the materializer did per directory.

    Args:
        results: Outcomes in the order they happened.

    Returns:
        Rich Table with one row per outcome.
    """
    table = Table(
        title="Results",
        show_header=True,
        header_style="bold_header",
        border_style="border",
    )
    table.add_column("Side", width=11)
    table.add_column("Path", no_wrap=True)
    table.add_column("Action")

    for result in results:
        action = result.action.value
        if action.startswith("created"):
            style = "created"
        elif action == "synced":
            style = "synced"
        else:
            style = "skipped"
        table.add_row(result.side.value, result.path, f"[{style}]{action}[/]")
    return table


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[info]{message}[/]")


def print_error(message: str) -> None:
    """Print an error message."""
    err_console.print(f"[error]Error:[/] {escape(message)}", soft_wrap=True)


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[success]{message}[/]")
