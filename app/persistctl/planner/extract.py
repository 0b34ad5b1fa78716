"""Flattening of the persistence configuration into directory specs.

The configuration groups requests by storage root and by user. The
materializer only understands a flat, ordered list of
:class:`DirectorySpec` records, so this module expands every declared
directory, every file's parent directory and every persisted home into
specs, runs the consistency checks, and sorts the result.
"""

import grp
import logging
import posixpath
import pwd
from dataclasses import dataclass

from persistctl.core.errors import HomeMismatchError
from persistctl.models.config import (
    DirectoryEntry,
    FileEntry,
    PersistenceConfig,
    Permissions,
    UserPersistence,
)
from persistctl.models.spec import DirectorySpec, FileSpec
from persistctl.planner.checks import check_duplicates, check_recursive_persistent_paths
from persistctl.planner.pathutil import clean_path, concat_paths
from persistctl.planner.toposort import toposort_dirs

logger = logging.getLogger(__name__)

SYSTEM_DEFAULTS = Permissions(user="root", group="root", mode="0755")
FALLBACK_USER_GROUP = "users"
HOME_MODE = "0700"


@dataclass(frozen=True, slots=True)
class PersistentPaths:
    """Flattened requests from a persistence configuration.

    Attributes:
        directories: Explicit and implicit directory specs, unsorted.
        files: File requests; their parents are included in directories.
        storage_paths: Enabled storage roots, sorted.
    """

    directories: tuple[DirectorySpec, ...]
    files: tuple[FileSpec, ...]
    storage_paths: tuple[str, ...]


def account_home(user: str) -> str | None:
    """Look up a user's home directory in the account database."""
    try:
        return pwd.getpwnam(user).pw_dir
    except KeyError:
        return None


def account_group(user: str) -> str | None:
    """Look up the name of a user's primary group."""
    try:
        return grp.getgrgid(pwd.getpwnam(user).pw_gid).gr_name
    except KeyError:
        return None


def resolve_home(user: str, declared: str | None) -> str:
    """Determine the home directory persisted for a user.

    Args:
        user: User name.
        declared: Home declared in the configuration, if any.

    Returns:
        Canonical home directory.

    Raises:
        HomeMismatchError: If the declared home differs from the account's.
    """
    actual = account_home(user)
    if declared is None:
        return clean_path(actual) if actual else f"/home/{user}"

    home = clean_path(declared)
    if actual is not None and clean_path(actual) != home:
        raise HomeMismatchError(user, home, clean_path(actual))
    return home


def user_defaults(user: str) -> Permissions:
    """Default permissions for directories persisted on behalf of a user."""
    return Permissions(user=user, group=account_group(user) or FALLBACK_USER_GROUP, mode="0755")


def check_config(config: PersistenceConfig) -> None:
    """Run the checks that only need the declarative configuration.

    Directories and files are checked for duplicates separately, once for
    the system scope and once per user, keyed by destination path.
    Declared homes are checked against the account database.

    Raises:
        DuplicateSpecError: If a destination is requested twice in a scope.
        HomeMismatchError: If a declared home disagrees with the account.
    """
    storage = config.enabled_storage()

    system_dirs = [
        concat_paths([entry.root or "/", entry.directory])
        for _, root in storage
        for entry in root.directories
    ]
    system_files = [concat_paths(["/", entry.file]) for _, root in storage for entry in root.files]
    check_duplicates("directories", system_dirs)
    check_duplicates("files", system_files)

    user_names = sorted({name for _, root in storage for name in root.users})
    for name in user_names:
        scopes = [root.users[name] for _, root in storage if name in root.users]
        homes = [resolve_home(name, scope.home) for scope in scopes]
        check_duplicates(
            "directories",
            [
                concat_paths([entry.root or home, entry.directory])
                for scope, home in zip(scopes, homes, strict=True)
                for entry in scope.directories
            ],
        )
        check_duplicates(
            "files",
            [
                concat_paths([home, entry.file])
                for scope, home in zip(scopes, homes, strict=True)
                for entry in scope.files
            ],
        )


def extract_persistent_storage_paths(config: PersistenceConfig) -> PersistentPaths:
    """Flatten a configuration into directory and file specs.

    Storage roots are visited in sorted order and users in sorted name
    order, so the result is deterministic for a given configuration.

    Args:
        config: Validated persistence configuration.

    Returns:
        Flattened directory and file requests.
    """
    directories: list[DirectorySpec] = []
    files: list[FileSpec] = []
    storage = config.enabled_storage()

    for storage_path, root in storage:
        for entry in root.directories:
            directories.append(_directory_spec(storage_path, "/", entry, SYSTEM_DEFAULTS))
        for file_entry in root.files:
            file_spec = _file_spec(storage_path, "/", file_entry, SYSTEM_DEFAULTS)
            files.append(file_spec)
            if file_spec.parent_directory is not None:
                directories.append(file_spec.parent_directory)

        for user in sorted(root.users):
            directories_for_user, files_for_user = _user_specs(storage_path, user, root.users[user])
            directories.extend(directories_for_user)
            files.extend(files_for_user)

    logger.debug(
        "Extracted %d directory spec(s) and %d file spec(s)", len(directories), len(files)
    )
    return PersistentPaths(
        directories=tuple(directories),
        files=tuple(files),
        storage_paths=tuple(clean_path(path) for path, _ in storage),
    )


def plan_directories(config: PersistenceConfig) -> list[DirectorySpec]:
    """Check a configuration and return its directories in materialization order.

    Raises:
        DuplicateSpecError: If a path is requested twice in one scope.
        HomeMismatchError: If a declared home disagrees with the account.
        RecursivePersistentPathError: If a directory or file destination
            lies inside a storage root, per-entry overrides included.
        DependencyCycleError: If the directories cannot be ordered.
    """
    check_config(config)
    paths = extract_persistent_storage_paths(config)
    check_recursive_persistent_paths([*paths.directories, *paths.files], paths.storage_paths)
    return toposort_dirs(paths.directories)


def _user_specs(
    storage_path: str,
    user: str,
    scope: UserPersistence,
) -> tuple[list[DirectorySpec], list[FileSpec]]:
    """Expand one user's directories and files below their home."""
    home = resolve_home(user, scope.home)
    defaults = user_defaults(user)

    directories = [
        DirectorySpec.create(
            storage_path,
            "/",
            home,
            user=defaults.user or "",
            group=defaults.group or "",
            mode=HOME_MODE,
            implicit=True,
        )
    ]
    files: list[FileSpec] = []

    for entry in scope.directories:
        directories.append(_directory_spec(storage_path, home, entry, defaults, nested=True))
    for file_entry in scope.files:
        file_spec = _file_spec(storage_path, home, file_entry, defaults, nested=True)
        files.append(file_spec)
        if file_spec.parent_directory is not None:
            directories.append(file_spec.parent_directory)

    return directories, files


def _directory_spec(
    storage_path: str,
    default_root: str,
    entry: DirectoryEntry,
    defaults: Permissions,
    nested: bool = False,
) -> DirectorySpec:
    """Build the explicit spec for a declared directory.

    For nested (per-user) scopes the destination root is mirrored below
    the storage path, e.g. "/persistent/home/alex".
    """
    root = entry.root or default_root
    storage = entry.persistent_storage_path or storage_path
    return DirectorySpec.create(
        concat_paths([storage, root]) if nested else storage,
        root,
        entry.directory,
        user=_pick(entry.user, defaults.user),
        group=_pick(entry.group, defaults.group),
        mode=_pick(entry.mode, defaults.mode),
    )


def _file_spec(
    storage_path: str,
    root: str,
    entry: FileEntry,
    defaults: Permissions,
    nested: bool = False,
) -> FileSpec:
    """Build a file request and the implicit spec for its parent directory."""
    storage = entry.persistent_storage_path or storage_path
    if nested:
        storage = concat_paths([storage, root])

    relative = clean_path(entry.file)
    parent = posixpath.dirname(relative)
    parent_spec: DirectorySpec | None = None
    if parent not in ("", "/"):
        permissions = entry.parent_directory
        parent_spec = DirectorySpec.create(
            storage,
            root,
            parent,
            user=_pick(permissions.user, defaults.user),
            group=_pick(permissions.group, defaults.group),
            mode=_pick(permissions.mode, defaults.mode),
            implicit=True,
        )

    return FileSpec(
        persistent_storage_path=storage,
        root=clean_path(root),
        relative_path=relative,
        source=concat_paths([storage, relative]),
        destination=concat_paths([root, relative]),
        parent_directory=parent_spec,
    )


def _pick(value: str | None, default: str | None) -> str:
    """Return the first value that is set, or "" for unspecified."""
    if value is not None:
        return value
    return default or ""
