"""Unit tests for the create-dir command."""

import stat
from pathlib import Path

import pytest
import typer
from persistctl.cli.commands.create_dir import parse_flag
from persistctl.cli.main import app
from typer.testing import CliRunner

runner = CliRunner()


def _args(storage: Path, root: Path, relative: str, **overrides: str) -> list[str]:
    values = {
        "source": "",
        "destination": "",
        "user": "",
        "group": "",
        "mode": "0755",
        "implicit": "false",
        "debug": "false",
    }
    values.update(overrides)
    return [
        "create-dir",
        str(storage),
        str(root),
        relative,
        values["source"],
        values["destination"],
        values["user"],
        values["group"],
        values["mode"],
        values["implicit"],
        values["debug"],
    ]


class TestParseFlag:
    """Tests for parse_flag function."""

    @pytest.mark.parametrize("value", ["true", "1", "YES", " on "])
    def test_true(self, value: str) -> None:
        """Common spellings of true are accepted."""
        assert parse_flag(value, "IMPLICIT") is True

    @pytest.mark.parametrize("value", ["false", "0", "", "off"])
    def test_false(self, value: str) -> None:
        """Common spellings of false and the empty string are false."""
        assert parse_flag(value, "IMPLICIT") is False

    def test_invalid(self) -> None:
        """Anything else is rejected."""
        with pytest.raises(typer.BadParameter, match="IMPLICIT"):
            parse_flag("maybe", "IMPLICIT")


class TestCreateDirCommand:
    """Tests for persistctl create-dir."""

    def test_creates_both_sides(self, storage: Path, root: Path) -> None:
        """Source and destination are created with the requested mode."""
        result = runner.invoke(app, _args(storage, root, "/var/lib/iwd", mode="0700"))

        assert result.exit_code == 0, result.output
        assert stat.S_IMODE((storage / "var" / "lib" / "iwd").stat().st_mode) == 0o700
        assert stat.S_IMODE((root / "var" / "lib" / "iwd").stat().st_mode) == 0o700

    def test_explicit_source_and_destination(self, storage: Path, root: Path) -> None:
        """Matching overrides are accepted."""
        args = _args(
            storage,
            root,
            "srv",
            source=f"{storage}/srv/",
            destination=f"{root}//srv",
        )

        result = runner.invoke(app, args)

        assert result.exit_code == 0, result.output
        assert (root / "srv").is_dir()

    def test_mismatched_source_fails(self, storage: Path, root: Path, tmp_path: Path) -> None:
        """A source that disagrees with storage + path is reported."""
        args = _args(storage, root, "srv", source=str(tmp_path / "other"))

        result = runner.invoke(app, args)

        assert result.exit_code == 1
        assert "inconsistent path" in result.output
        assert not (root / "srv").exists()

    def test_traversal_fails(self, storage: Path, root: Path) -> None:
        """A relative path escaping its roots is reported."""
        result = runner.invoke(app, _args(storage, root, "../etc"))

        assert result.exit_code == 1
        assert "illegal path traversal" in result.output

    def test_interior_traversal_fails(self, storage: Path, root: Path) -> None:
        """A ".." inside the relative path is reported even when it stays within the roots."""
        result = runner.invoke(app, _args(storage, root, "var/../etc"))

        assert result.exit_code == 1
        assert "illegal path traversal" in result.output
        assert not (storage / "etc").exists()
        assert not (root / "etc").exists()

    def test_override_traversal_fails(self, storage: Path, root: Path) -> None:
        """A ".." inside a source override is reported."""
        source = f"{storage}/srv/../srv"
        result = runner.invoke(app, _args(storage, root, "srv", source=source))

        assert result.exit_code == 1
        assert "illegal path traversal" in result.output
        assert not (root / "srv").exists()

    def test_unknown_user_fails(self, storage: Path, root: Path) -> None:
        """An unknown owner aborts with a diagnostic."""
        result = runner.invoke(app, _args(storage, root, "srv", user="no-such-user-persistctl"))

        assert result.exit_code == 1
        assert "unknown user" in result.output
        assert not (root / "srv").exists()

    def test_invalid_flag(self, storage: Path, root: Path) -> None:
        """A malformed boolean is a usage error."""
        result = runner.invoke(app, _args(storage, root, "srv", implicit="maybe"))

        assert result.exit_code == 2

    def test_missing_arguments(self) -> None:
        """All ten positional arguments are required."""
        result = runner.invoke(app, ["create-dir", "/persistent", "/"])

        assert result.exit_code == 2
