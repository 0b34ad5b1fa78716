"""Trailing-slash normalization for prefix comparisons.

Plain string prefixes are wrong for paths: "/aaa" is a prefix of
"/aaaa" although neither directory contains the other. Comparing the
slash-terminated forms ("/aaa/" against "/aaaa/") fixes that. The
normalized strings are only ever compared, never used to access the
filesystem.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from persistctl.models.spec import DirectorySpec


@dataclass(frozen=True, slots=True)
class NormalizedView:
    """Slash-terminated forms of a spec's paths.

    Attributes:
        source: Normalized source directory.
        destination: Normalized destination directory.
        persistent_storage_path: Normalized storage root.
    """

    source: str
    destination: str
    persistent_storage_path: str


def with_trailing_slash(path: str) -> str:
    """Return path terminated by exactly one "/"."""
    return path if path.endswith("/") else path + "/"


def normalize(spec: DirectorySpec) -> NormalizedView:
    """Build the normalized view of a directory spec."""
    return NormalizedView(
        source=with_trailing_slash(spec.source),
        destination=with_trailing_slash(spec.destination),
        persistent_storage_path=with_trailing_slash(spec.persistent_storage_path),
    )


def strict_prefix(a: str, b: str) -> bool:
    """Check whether string a is a prefix of b without being equal to it.

    This is a raw string test; apply it to normalized forms when
    comparing paths.
    """
    return b.startswith(a) and a != b
