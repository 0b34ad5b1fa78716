"""Unit tests for the persistence configuration models."""

import pytest
from persistctl.models.config import (
    DirectoryEntry,
    FileEntry,
    PersistenceConfig,
    PersistentStorage,
    Permissions,
    UserPersistence,
)
from pydantic import ValidationError


class TestPermissions:
    """Tests for Permissions model."""

    def test_all_optional(self) -> None:
        """Every field defaults to unset."""
        permissions = Permissions()

        assert (permissions.user, permissions.group, permissions.mode) == (None, None, None)

    @pytest.mark.parametrize("mode", ["755", "0700", "1777"])
    def test_valid_modes(self, mode: str) -> None:
        """Three and four digit octal modes are accepted."""
        assert Permissions(mode=mode).mode == mode

    @pytest.mark.parametrize("mode", ["0789", "75", "07555", "u+rwx"])
    def test_invalid_modes(self, mode: str) -> None:
        """Anything else is rejected."""
        with pytest.raises(ValidationError, match="octal"):
            Permissions(mode=mode)

    def test_extra_fields_forbidden(self) -> None:
        """Unknown keys are rejected."""
        with pytest.raises(ValidationError):
            Permissions.model_validate({"owner": "root"})


class TestEntries:
    """Tests for DirectoryEntry and FileEntry."""

    def test_directory_entry(self) -> None:
        """A directory entry carries overrides."""
        entry = DirectoryEntry(directory="/srv", root="/data", mode="0700")

        assert entry.directory == "/srv"
        assert entry.root == "/data"
        assert entry.persistent_storage_path is None

    def test_empty_directory_rejected(self) -> None:
        """The directory path must not be empty."""
        with pytest.raises(ValidationError):
            DirectoryEntry(directory="")

    def test_file_entry_parent_defaults(self) -> None:
        """Files get unset parent permissions by default."""
        entry = FileEntry(file="/etc/machine-id")

        assert entry.parent_directory == Permissions()


class TestStringCoercion:
    """Tests for bare string entries."""

    def test_storage_strings(self) -> None:
        """Bare strings become directory and file entries."""
        storage = PersistentStorage.model_validate(
            {"directories": ["/var/log", {"directory": "/srv", "mode": "0700"}], "files": ["/a"]}
        )

        assert [entry.directory for entry in storage.directories] == ["/var/log", "/srv"]
        assert storage.directories[1].mode == "0700"
        assert storage.files[0].file == "/a"
        assert storage.enable is True

    def test_user_strings(self) -> None:
        """User scopes accept bare strings too."""
        user = UserPersistence.model_validate({"directories": ["Downloads"], "files": [".zshrc"]})

        assert user.directories[0].directory == "Downloads"
        assert user.files[0].file == ".zshrc"
        assert user.home is None


class TestPersistenceConfig:
    """Tests for PersistenceConfig model."""

    def test_empty(self) -> None:
        """An empty configuration is valid."""
        assert PersistenceConfig().enabled_storage() == []

    def test_relative_storage_rejected(self) -> None:
        """Storage roots must be absolute."""
        with pytest.raises(ValidationError, match="must be absolute"):
            PersistenceConfig.model_validate({"persistence": {"persistent": {}}})

    def test_enabled_storage_sorted_and_filtered(self) -> None:
        """Disabled roots are skipped and the rest sorted by path."""
        config = PersistenceConfig.model_validate(
            {
                "persistence": {
                    "/z": {"directories": ["/b"]},
                    "/off": {"enable": False},
                    "/a": {"directories": ["/a"]},
                }
            }
        )

        assert [path for path, _ in config.enabled_storage()] == ["/a", "/z"]

    def test_nested_users(self) -> None:
        """Users are parsed into UserPersistence models."""
        config = PersistenceConfig.model_validate(
            {"persistence": {"/p": {"users": {"alex": {"home": "/home/alex"}}}}}
        )

        assert config.persistence["/p"].users["alex"].home == "/home/alex"
