"""Unit tests for Rich formatting helpers."""

from io import StringIO

from persistctl.core.theme import get_theme
from persistctl.materializer import DirectoryAction, MaterializedPath, PathSide
from persistctl.models.spec import DirectorySpec
from persistctl.utils.formatting import create_plan_table, create_results_table
from rich.console import Console


def _render(renderable: object) -> str:
    buffer = StringIO()
    Console(file=buffer, width=160, theme=get_theme(), color_system=None).print(renderable)
    return buffer.getvalue()


class TestCreatePlanTable:
    """Tests for create_plan_table function."""

    def test_one_row_per_spec(self) -> None:
        """Every spec is listed with its owner and mode."""
        specs = [
            DirectorySpec.create("/p", "/", "/var/log", user="root", group="root", mode="0755"),
            DirectorySpec.create("/p", "/", "/etc/ssh", implicit=True),
        ]
        table = create_plan_table(specs)

        assert table.row_count == 2
        output = _render(table)
        assert "/var/log" in output
        assert "root:root" in output
        assert "implicit" in output
        assert "-:-" in output

    def test_custom_title(self) -> None:
        """The title can be overridden."""
        assert create_plan_table([], title="Dry Run").title == "Dry Run"


class TestCreateResultsTable:
    """Tests for create_results_table function."""

    def test_actions_listed(self) -> None:
        """Each outcome becomes a row with its action."""
        results = [
            MaterializedPath("/p/srv", PathSide.SOURCE, DirectoryAction.CREATED, "warn"),
            MaterializedPath("/srv", PathSide.DESTINATION, DirectoryAction.SKIPPED),
        ]
        table = create_results_table(results)

        assert table.row_count == 2
        output = _render(table)
        assert "created" in output
        assert "skipped" in output
        assert "destination" in output
