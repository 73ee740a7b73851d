"""Mapping of tree relations onto key ranges, prefix patterns and path sets.

All functions here are pure functions of a path string. Only prefix and
length arithmetic is needed, except for ancestors and siblings, which need
to drop trailing components.

Self and descendants of "ABC" are every path in ["ABC", "ABCZZ"): "Z" is the
largest marker and no component can start with "ZZ", so the upper bound lies
above every path with the prefix and below every path without it.

Immediate children need one pattern per width class:

    ABC_   ABCW__   ABCX____   ABCY______   ABCZ________
"""

from __future__ import annotations

from dataclasses import dataclass

from pathtree.core.hierarchy.codec import MARKERS, join_path, split_path

# Appended to a path to form the exclusive upper bound of its subtree
SUBTREE_SENTINEL = "ZZ"


@dataclass(slots=True, frozen=True)
class PathRange:
    """Half-open range of paths [lo, hi) in string order."""

    lo: str
    hi: str

    def contains(self, path: str) -> bool:
        """Whether path falls inside the range."""
        return self.lo <= path < self.hi


@dataclass(slots=True, frozen=True)
class ChildPattern:
    """Paths made of `prefix` followed by exactly `width` more symbols."""

    prefix: str
    width: int

    @property
    def length(self) -> int:
        """Total length of a matching path."""
        return len(self.prefix) + self.width

    def like(self) -> str:
        """Render as an SQL LIKE pattern.

        Paths contain no LIKE wildcards, so the prefix needs no escaping.
        """
        return self.prefix + "_" * self.width

    def matches(self, path: str) -> bool:
        """Evaluate the pattern the way LIKE would."""
        return len(path) == self.length and path.startswith(self.prefix)


@dataclass(slots=True, frozen=True)
class PathSet:
    """Explicit set of exact paths, kept in root-to-leaf order."""

    paths: tuple[str, ...]

    def __contains__(self, path: object) -> bool:
        return path in self.paths

    def __len__(self) -> int:
        return len(self.paths)


def self_and_descendants_range(path: str) -> PathRange:
    """Range covering a node and its whole subtree."""
    return PathRange(path, path + SUBTREE_SENTINEL)


def descendants_range(path: str) -> PathRange:
    """Range covering a node's subtree, excluding the node itself.

    Example:
        >>> descendants_range("0A")
        PathRange(lo='0A0', hi='0AZZ')
    """
    return PathRange(path + "0", path + SUBTREE_SENTINEL)


def ancestor_paths(path: str, *, include_self: bool = False) -> list[str]:
    """Paths of every ancestor, from the root downwards.

    Args:
        path: Node path
        include_self: Append the node's own path

    Returns:
        Ancestor paths; empty for the root unless include_self is set

    Example:
        >>> ancestor_paths("0CW12")
        ['', '0', '0C']
        >>> ancestor_paths("", include_self=True)
        ['']
    """
    components = split_path(path)
    if not include_self:
        if not components:
            return []
        components.pop()
    return [join_path(components[:i]) for i in range(len(components) + 1)]


def ancestors_set(path: str) -> PathSet:
    """Point set of a node's ancestors."""
    return PathSet(tuple(ancestor_paths(path)))


def self_and_ancestors_set(path: str) -> PathSet:
    """Point set of a node's ancestors and the node itself."""
    return PathSet(tuple(ancestor_paths(path, include_self=True)))


def children_patterns(path: str) -> tuple[ChildPattern, ...]:
    """One prefix pattern per width class, anchored at path."""
    return (ChildPattern(path, 1),) + tuple(
        ChildPattern(path + marker, width) for marker, width in MARKERS.items()
    )


def siblings_patterns(path: str) -> tuple[ChildPattern, ...] | None:
    """Children patterns of the parent; None for the root, which has no siblings."""
    components = split_path(path)
    if not components:
        return None
    return children_patterns(join_path(components[:-1]))


__all__ = [
    "SUBTREE_SENTINEL",
    "ChildPattern",
    "PathRange",
    "PathSet",
    "ancestor_paths",
    "ancestors_set",
    "children_patterns",
    "descendants_range",
    "self_and_ancestors_set",
    "self_and_descendants_range",
    "siblings_patterns",
]
