"""Ownership and permission helpers for materialized directories.

Equivalent to ``install -d --owner --group --mode`` for explicit
attributes and ``chown/chmod --reference`` for copied ones.
"""

import grp
import os
import pwd
import stat

from persistctl.core.errors import MaterializationError

# os.chown leaves an id unchanged when passed -1
UNCHANGED = -1


def resolve_uid(user: str) -> int:
    """Translate a user name or numeric uid; "" means unchanged.

    Raises:
        MaterializationError: If the user does not exist.
    """
    if not user:
        return UNCHANGED
    if user.isdigit():
        return int(user)
    try:
        return pwd.getpwnam(user).pw_uid
    except KeyError as e:
        raise MaterializationError(user, f"unknown user '{user}'") from e


def resolve_gid(group: str) -> int:
    """Translate a group name or numeric gid; "" means unchanged.

    Raises:
        MaterializationError: If the group does not exist.
    """
    if not group:
        return UNCHANGED
    if group.isdigit():
        return int(group)
    try:
        return grp.getgrnam(group).gr_gid
    except KeyError as e:
        raise MaterializationError(group, f"unknown group '{group}'") from e


def default_mode() -> int:
    """Permission bits a new directory gets under the current umask."""
    umask = os.umask(0)
    os.umask(umask)
    return 0o777 & ~umask


def apply_attributes(path: str, user: str, group: str, mode: str) -> None:
    """Set explicit owner, group and mode on a directory.

    Unspecified fields keep the filesystem default: the current owner
    and group, and the umask-derived mode.
    """
    uid = resolve_uid(user)
    gid = resolve_gid(group)
    if uid != UNCHANGED or gid != UNCHANGED:
        os.chown(path, uid, gid)
    os.chmod(path, int(mode, 8) if mode else default_mode())


def copy_attributes(path: str, reference: str) -> None:
    """Copy owner, group and mode from reference onto path."""
    ref = os.stat(reference)
    current = os.stat(path)
    if (current.st_uid, current.st_gid) != (ref.st_uid, ref.st_gid):
        os.chown(path, ref.st_uid, ref.st_gid)
    os.chmod(path, stat.S_IMODE(ref.st_mode))


def describe_attributes(path: str) -> str:
    """Format owner, group and mode of a path for log messages."""
    st = os.stat(path)
    return f"{st.st_uid}:{st.st_gid} {stat.S_IMODE(st.st_mode):04o}"
