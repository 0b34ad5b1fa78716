"""Lexical path canonicalization.

These helpers never touch the filesystem. They collapse repeated
slashes, "." and ".." components so that path strings can be compared
and concatenated safely.

Examples:
    >>> clean_path("a/./b/../c")
    'a/c'
    >>> split_path(["././foo/.", "/bar/bazz/./"])
    ['foo', 'bar', 'bazz']
    >>> concat_paths(["/home/user", "/.screenrc"])
    '/home/user/.screenrc'
"""

import re

from persistctl.core.errors import PathTraversalError

# Characters allowed in a derived unit/store name; everything else becomes "-"
_UNSAFE_NAME_CHARS = re.compile(r"[^A-Za-z0-9+\-._?=]+")
_MAX_NAME_LENGTH = 207


def clean_path(path: str) -> str:
    """Lexically resolve ".", ".." and repeated slashes in a path.

    Absolute paths are resolved directly; ".." at the root stays at the
    root. Relative paths are resolved against an implied starting point
    and must not climb above it.

    Args:
        path: Path string to canonicalize.

    Returns:
        Canonical path. An empty relative result is returned as ".".

    Raises:
        PathTraversalError: If a relative path escapes its starting point.
    """
    absolute = path.startswith("/")
    parts: list[str] = []

    for part in path.split("/"):
        if part in ("", "."):
            continue
        if part == "..":
            if parts:
                parts.pop()
            elif not absolute:
                raise PathTraversalError(path)
            continue
        parts.append(part)

    if absolute:
        return "/" + "/".join(parts)
    return "/".join(parts) or "."


def dir_list_to_path(components: list[str]) -> str:
    """Join path components with "/" and canonicalize the result.

    Only the first component decides whether the result is absolute; a
    later component with a leading slash is joined, not restarted.

    Args:
        components: Path fragments, e.g. ["/home/user", "/.screenrc"].

    Returns:
        Canonical joined path, e.g. "/home/user/.screenrc".
    """
    return clean_path("/".join(components))


# Alias kept for call sites that read better as a concatenation
concat_paths = dir_list_to_path


def split_path(fragments: list[str]) -> list[str]:
    """Concatenate fragments, canonicalize, and split into components.

    An absolute result keeps its leading empty component so that
    ``concat_paths(split_path(fragments)) == concat_paths(fragments)``
    holds for absolute and relative paths alike.

    Args:
        fragments: Path fragments, e.g. ["/home/user/", "/.screenrc"].

    Returns:
        Ordered path components, e.g. ["", "home", "user", ".screenrc"].
        The root itself splits into ["", ""] and "." into [].
    """
    cleaned = concat_paths(fragments)
    if cleaned == ".":
        return []
    return cleaned.split("/")


def sanitize_name(name: str) -> str:
    """Derive a name that is safe to use as a unit or store name for a path.

    Args:
        name: Path to derive the name from, e.g. "/var/lib/iwd".

    Returns:
        Sanitized name, e.g. "var-lib-iwd".
    """
    stripped = name.removeprefix("/")
    sanitized = _UNSAFE_NAME_CHARS.sub("-", stripped).lstrip(".")
    return sanitized[:_MAX_NAME_LENGTH].replace(".", "")
