"""Unit tests for configuration I/O operations."""

import tomllib
from pathlib import Path

import pytest
import typer
from persistctl.core.config import (
    ConfigNotFoundError,
    ConfigParseError,
    ConfigValidationError,
    load_config,
    require_config,
    save_config,
)
from persistctl.models.config import PersistenceConfig

SAMPLE = """
[persistence."/persistent"]
directories = ["/var/log", { directory = "/var/lib/iwd", mode = "0700" }]
files = ["/etc/machine-id"]

[persistence."/persistent".users.alex]
directories = ["Downloads"]
files = [{ file = ".ssh/known_hosts", parent_directory = { mode = "0700" } }]
"""


@pytest.fixture
def sample_config(tmp_path: Path) -> Path:
    """Write a sample configuration file."""
    path = tmp_path / "persistence.toml"
    path.write_text(SAMPLE)
    return path


class TestLoadConfig:
    """Tests for load_config function."""

    def test_loads_sample(self, sample_config: Path) -> None:
        """A valid file is parsed into models."""
        config = load_config(sample_config)

        storage = config.persistence["/persistent"]
        assert [e.directory for e in storage.directories] == ["/var/log", "/var/lib/iwd"]
        assert storage.directories[1].mode == "0700"
        assert storage.users["alex"].files[0].parent_directory.mode == "0700"

    def test_missing_file(self, tmp_path: Path) -> None:
        """A missing file raises ConfigNotFoundError."""
        with pytest.raises(ConfigNotFoundError):
            load_config(tmp_path / "missing.toml")

    def test_invalid_toml(self, tmp_path: Path) -> None:
        """Broken TOML raises ConfigParseError."""
        path = tmp_path / "persistence.toml"
        path.write_text("[persistence\n")

        with pytest.raises(ConfigParseError, match="Invalid TOML syntax"):
            load_config(path)

    def test_invalid_content(self, tmp_path: Path) -> None:
        """Schema violations raise ConfigValidationError."""
        path = tmp_path / "persistence.toml"
        path.write_text('[persistence."/p"]\ndirectories = [{ directory = "/x", mode = "999" }]\n')

        with pytest.raises(ConfigValidationError, match="Invalid configuration content"):
            load_config(path)


class TestSaveConfig:
    """Tests for save_config function."""

    def test_round_trip(self, tmp_path: Path, sample_config: Path) -> None:
        """Saving and loading yields the same configuration."""
        original = load_config(sample_config)
        target = tmp_path / "nested" / "out.toml"

        result = save_config(original, target)

        assert result == target
        assert load_config(target) == original

    def test_bare_strings_written(self, tmp_path: Path, sample_config: Path) -> None:
        """Entries without overrides are written as plain strings."""
        target = tmp_path / "out.toml"
        save_config(load_config(sample_config), target)

        with open(target, "rb") as f:
            data = tomllib.load(f)

        storage = data["persistence"]["/persistent"]
        assert storage["directories"] == ["/var/log", {"directory": "/var/lib/iwd", "mode": "0700"}]
        assert storage["files"] == ["/etc/machine-id"]
        assert "enable" not in storage

    def test_no_temporary_left(self, tmp_path: Path) -> None:
        """Only the target file remains after saving."""
        save_config(PersistenceConfig(), tmp_path / "out.toml")

        assert [p.name for p in tmp_path.iterdir()] == ["out.toml"]


class TestRequireConfig:
    """Tests for require_config function."""

    def test_returns_config(self, sample_config: Path) -> None:
        """An existing configuration is returned."""
        assert "/persistent" in require_config(sample_config).persistence

    def test_missing_exits(self, tmp_path: Path) -> None:
        """A missing configuration exits with code 1."""
        with pytest.raises(typer.Exit) as exc_info:
            require_config(tmp_path / "missing.toml")

        assert exc_info.value.exit_code == 1
