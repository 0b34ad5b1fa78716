"""Unit tests for lexical path canonicalization."""

from collections.abc import Callable

import pytest
from persistctl.core.errors import PathTraversalError
from persistctl.planner.pathutil import (
    clean_path,
    concat_paths,
    dir_list_to_path,
    sanitize_name,
    split_path,
)


class TestCleanPath:
    """Tests for clean_path."""

    def test_resolves_dot_and_dotdot(self) -> None:
        """Relative paths have "." and ".." resolved."""
        assert clean_path("a/./b/../c") == "a/c"
        assert clean_path("foo/../bar") == "bar"

    def test_absolute_paths(self) -> None:
        """Absolute paths collapse repeated slashes and trailing slashes."""
        assert clean_path("//var///lib/") == "/var/lib"
        assert clean_path("/var/./lib/../log") == "/var/log"

    def test_dotdot_at_root_stays_at_root(self) -> None:
        """".." above "/" is clamped to "/"."""
        assert clean_path("/../etc") == "/etc"
        assert clean_path("/..") == "/"

    def test_empty_relative_result(self) -> None:
        """A relative path that resolves to nothing becomes "."."""
        assert clean_path("") == "."
        assert clean_path("./") == "."
        assert clean_path("foo/..") == "."

    def test_traversal_rejected(self) -> None:
        """Relative paths may not climb above their starting point."""
        with pytest.raises(PathTraversalError, match="illegal path traversal"):
            clean_path("../foo/bar")

    def test_nested_traversal_rejected(self) -> None:
        """Traversal is detected after earlier components are consumed."""
        with pytest.raises(PathTraversalError):
            clean_path("a/../../b")

    @pytest.mark.parametrize(
        "path",
        ["a/./b/../c", "/var//lib/", "foo/..", "/", ".hidden/x", "/a/b/../../c/"],
    )
    def test_idempotent(self, path: str) -> None:
        """Cleaning a clean path changes nothing."""
        assert clean_path(clean_path(path)) == clean_path(path)


class TestSplitPath:
    """Tests for split_path."""

    def test_split_fragments(self) -> None:
        """Fragments are joined, cleaned and split into components."""
        assert split_path(["././foo/.", "/bar/bazz/./"]) == ["foo", "bar", "bazz"]

    def test_split_empty(self) -> None:
        """A relative path that resolves to nothing has no components."""
        assert split_path(["."]) == []
        assert split_path(["a/.."]) == []


class TestDirListToPath:
    """Tests for dir_list_to_path and its concat_paths alias."""

    @pytest.mark.parametrize("join", [dir_list_to_path, concat_paths])
    def test_join(self, join: Callable[[list[str]], str]) -> None:
        """Components are joined and cleaned."""
        assert join(["foo/./", "./bar/bazz/..", "/quux", ".."]) == "foo/bar"
        assert join(["home", "user", ".screenrc"]) == "home/user/.screenrc"
        assert join(["/home/user", "/.screenrc"]) == "/home/user/.screenrc"

    def test_later_leading_slash_does_not_restart(self) -> None:
        """Only the first component decides whether the result is absolute."""
        assert concat_paths(["/persistent", "/var/log"]) == "/persistent/var/log"
        assert concat_paths(["persistent", "/var/log"]) == "persistent/var/log"

    @pytest.mark.parametrize(
        "path",
        [
            "a/./b/../c",
            "foo/bar/",
            "x",
            ".",
            "a//b/./c/..",
            "/home/user/.screenrc",
            "//var/./lib/",
            "/../etc",
            "/",
        ],
    )
    def test_concat_of_split_is_clean(self, path: str) -> None:
        """Splitting then joining a path yields its clean form, absolute or not."""
        assert concat_paths(split_path([path])) == clean_path(path)


class TestSanitizeName:
    """Tests for sanitize_name."""

    def test_path_to_name(self) -> None:
        """Slashes become dashes and the leading slash is dropped."""
        assert sanitize_name("/var/lib/iwd") == "var-lib-iwd"

    def test_dots_removed(self) -> None:
        """Dots are removed from the derived name."""
        assert sanitize_name("/home/alex/.ssh") == "home-alex-ssh"
