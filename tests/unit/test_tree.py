"""Tests for the catalog path index."""

import pytest

from regskin.catalog.tree import PathIndex, PathNode, split_path

REPOSITORY_SETS = [
    ["a/b", "a/c", "a/b/d"],
    ["library/alpine", "library/busybox", "team/app", "team/tools/lint"],
    ["single"],
    ["x/y/z", "x/y", "x"],
    ["/leading/slash", "trailing/slash/", "double//slash"],
]


def prefixes(path):
    segments = split_path(path)
    return ["/".join(segments[:i]) for i in range(1, len(segments) + 1)]


class TestSplitPath:
    def test_split_simple(self):
        """Test splitting a simple path."""
        assert split_path("team/app") == ["team", "app"]

    def test_split_drops_empty_segments(self):
        """Test empty segments are dropped."""
        assert split_path("/team//app/") == ["team", "app"]

    def test_split_empty(self):
        """Test splitting the empty path."""
        assert split_path("") == []
        assert split_path("/") == []


class TestPathIndexInsert:
    def test_insert_creates_intermediate_nodes(self):
        """Test insert creates intermediate nodes."""
        index = PathIndex()
        index.insert("team/tools/lint")

        assert index.root.child_names() == ["team"]
        assert index.lookup("team").child_names() == ["tools"]
        assert index.lookup("team/tools").child_names() == ["lint"]
        assert index.lookup("team/tools/lint").child_names() == []

    def test_insert_is_idempotent(self):
        """Test inserting twice leaves the tree unchanged."""
        index = PathIndex.from_paths(["a/b", "a/c"])
        before = index.lookup("a").children.copy()

        index.insert("a/b")

        assert index.lookup("a").children == before
        assert index.lookup("a").child_names() == ["b", "c"]

    def test_leading_and_trailing_slashes_have_no_effect(self):
        """Test slashes at either end have no effect."""
        index = PathIndex.from_paths(["/team/app/"])
        assert index.root.child_names() == ["team"]
        assert index.lookup("team").child_names() == ["app"]


class TestPathIndexLookup:
    @pytest.mark.parametrize("repositories", REPOSITORY_SETS)
    def test_every_prefix_is_reachable(self, repositories):
        """Test every prefix of an inserted path is reachable."""
        index = PathIndex.from_paths(repositories)
        for repository in repositories:
            for prefix in prefixes(repository):
                assert index.lookup(prefix) is not None, prefix

    @pytest.mark.parametrize("repositories", REPOSITORY_SETS)
    def test_unknown_path_returns_none(self, repositories):
        """Test unknown path returns None."""
        index = PathIndex.from_paths(repositories)
        assert index.lookup("nope") is None
        assert index.lookup(f"{split_path(repositories[0])[0]}/nope") is None

    def test_partial_segment_is_not_a_prefix(self):
        """Test a partial segment does not match."""
        index = PathIndex.from_paths(["team/application"])
        assert index.lookup("team/app") is None
        assert index.lookup("tea") is None

    def test_empty_path_is_root(self):
        """Test the empty path resolves to the root."""
        index = PathIndex.from_paths(["a/b"])
        assert index.lookup("") is index.root
        assert index.lookup("/") is index.root

    def test_trailing_slash_lookup(self):
        """Test lookup with a trailing slash."""
        index = PathIndex.from_paths(["a/b"])
        assert index.lookup("a/") is index.lookup("a")

    def test_example_catalog(self):
        """Test lookup over a small example catalog."""
        index = PathIndex.from_paths(["a/b", "a/c", "a/b/d"])

        assert "d" in index.lookup("a/b").child_names()
        assert index.lookup("a").child_names() == ["b", "c"]


class TestChildNames:
    @pytest.mark.parametrize("repositories", REPOSITORY_SETS)
    def test_child_names_sorted_without_duplicates(self, repositories):
        """Test child names are sorted and unique."""
        index = PathIndex.from_paths(repositories + repositories)
        for repository in repositories:
            for prefix in [""] + prefixes(repository):
                names = index.child_names(index.lookup(prefix))
                assert names == sorted(names)
                assert len(names) == len(set(names))

    def test_child_names_lexicographic_not_insertion_order(self):
        """Test child names ignore insertion order."""
        index = PathIndex.from_paths(["z", "b", "a", "B"])
        assert index.root.child_names() == ["B", "a", "b", "z"]

    def test_leaf_has_no_children(self):
        """Test a leaf has no children."""
        assert PathNode().child_names() == []
