"""Tests for the tree relation -> range / pattern / set mapping."""

from __future__ import annotations

import pytest

from pathtree.core.exceptions import CorruptPathError
from pathtree.core.hierarchy.ranges import (
    SUBTREE_SENTINEL,
    ChildPattern,
    PathRange,
    ancestor_paths,
    ancestors_set,
    children_patterns,
    descendants_range,
    self_and_ancestors_set,
    self_and_descendants_range,
    siblings_patterns,
)


@pytest.mark.unit
class TestRanges:
    """Half-open subtree ranges."""

    def test_self_and_descendants_range(self):
        """Test the range starts at the node and ends at the sentinel."""
        assert self_and_descendants_range("ABC") == PathRange("ABC", "ABCZZ")
        assert SUBTREE_SENTINEL == "ZZ"

    def test_descendants_range_excludes_self(self):
        """Test the descendants range starts after the node itself."""
        rng = descendants_range("0A")
        assert rng == PathRange("0A0", "0AZZ")
        assert not rng.contains("0A")
        assert rng.contains("0A0")
        assert rng.contains("0AZVVVVVVVV")

    def test_root_ranges_cover_everything(self):
        """Test the root's ranges include every path."""
        assert self_and_descendants_range("").contains("")
        assert self_and_descendants_range("").contains("ZVVVVVVVVZVVVVVVVV")
        assert not descendants_range("").contains("")

    @pytest.mark.parametrize("outside", ["0", "0B", "1", "00", "0B0"])
    def test_range_excludes_non_descendants(self, outside: str):
        """Test siblings and ancestors fall outside the subtree range."""
        assert not self_and_descendants_range("0A").contains(outside)


@pytest.mark.unit
class TestAncestors:
    """Exact ancestor sets."""

    def test_ancestor_paths(self):
        """Test ancestors run from the root down to the parent."""
        assert ancestor_paths("0CW12") == ["", "0", "0C"]
        assert ancestor_paths("0CW12", include_self=True) == ["", "0", "0C", "0CW12"]

    def test_root_has_no_ancestors(self):
        """Test a root has an empty ancestor set."""
        assert ancestor_paths("") == []
        assert ancestor_paths("", include_self=True) == [""]

    def test_sets(self):
        """Test PathSet wrappers expose membership and size."""
        ancestors = ancestors_set("0CW12")
        assert "" in ancestors
        assert "0CW12" not in ancestors
        assert len(ancestors) == 3
        assert "0CW12" in self_and_ancestors_set("0CW12")

    def test_corrupt_path_raises(self):
        """Test ancestor computation refuses corrupt paths."""
        with pytest.raises(CorruptPathError):
            ancestor_paths("0CW1")


@pytest.mark.unit
class TestChildPatterns:
    """Prefix patterns for immediate children."""

    def test_one_pattern_per_width_class(self):
        """Test the five LIKE patterns."""
        patterns = children_patterns("AB")
        assert [p.like() for p in patterns] == [
            "AB_",
            "ABW__",
            "ABX____",
            "ABY______",
            "ABZ________",
        ]

    def test_root_children_patterns(self):
        """Test root children patterns have an empty prefix."""
        assert children_patterns("")[0] == ChildPattern("", 1)
        assert children_patterns("")[1].like() == "W__"

    @pytest.mark.parametrize("child", ["AB0", "ABV", "ABW10", "ABX0100", "ABY09H5K0", "ABZ01000000"])
    def test_patterns_match_children(self, child: str):
        """Test every child width is matched by exactly one pattern."""
        matches = [p for p in children_patterns("AB") if p.matches(child)]
        assert len(matches) == 1

    @pytest.mark.parametrize("other", ["AB", "AB00", "AC0", "ABW1", "ABW100"])
    def test_patterns_reject_non_children(self, other: str):
        """Test self, grandchildren and other prefixes are not matched."""
        assert not any(p.matches(other) for p in children_patterns("AB"))

    def test_pattern_length(self):
        """Test the matched length is prefix plus width."""
        assert ChildPattern("AB", 4).length == 6


@pytest.mark.unit
class TestSiblingPatterns:
    """Sibling patterns are the parent's children patterns."""

    def test_siblings_use_parent_prefix(self):
        """Test the patterns are anchored at the parent path."""
        assert siblings_patterns("0CW12") == children_patterns("0C")

    def test_root_has_no_siblings(self):
        """Test a root yields None rather than every other root."""
        assert siblings_patterns("") is None
