"""Ordered key-value store contract consumed by the tree.

Records are keyed by (partition, path). The tree needs point lookups,
ordered range scans, prefix-pattern and exact-set scans, one atomic
single-record compare-and-swap, and two bulk operations over a path range.
Coordination between concurrent writers relies entirely on the atomicity of
conditional_update() and bulk_rewrite_prefix().
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Collection, Sequence

    from pathtree.core.hierarchy.ranges import ChildPattern, PathRange


class TreeStore[N](Protocol):
    """Persistence operations the tree facade relies on.

    Scans are async iterators; nothing is read until iteration starts, and
    each call starts a fresh read. With ``ordered=True`` results come in
    ascending path order, which is pre-order tree traversal.
    """

    async def get(self, partition: Any, path: str) -> N | None:
        """Point lookup; None when absent."""
        ...

    def scan_range(
        self, partition: Any, path_range: PathRange, *, ordered: bool = True
    ) -> AsyncIterator[N]:
        """Nodes whose path lies in [lo, hi)."""
        ...

    def scan_prefix_union(
        self,
        partition: Any,
        patterns: Sequence[ChildPattern],
        *,
        ordered: bool = True,
    ) -> AsyncIterator[N]:
        """Nodes matching any of the prefix patterns."""
        ...

    def scan_set(
        self, partition: Any, paths: Collection[str], *, ordered: bool = True
    ) -> AsyncIterator[N]:
        """Nodes whose path is one of the given exact paths."""
        ...

    def scan_roots(self, *, ordered: bool = True) -> AsyncIterator[N]:
        """Root nodes of every partition."""
        ...

    async def insert(self, node: N) -> N:
        """Persist a new node; DuplicatePathError if its key is taken."""
        ...

    async def conditional_update(
        self, partition: Any, path: str, expected_seq: int, new_seq: int
    ) -> bool:
        """Set seq to new_seq only if it still equals expected_seq.

        Returns False when another writer got there first (or the node is
        gone). Exactly one concurrent caller may win per expected value.
        """
        ...

    async def bulk_rewrite_prefix(
        self, partition: Any, old_prefix: str, new_prefix: str, new_partition: Any
    ) -> int:
        """Relabel old_prefix's whole subtree under new_prefix, atomically.

        Every path p in the self-and-descendants range of old_prefix becomes
        new_prefix + p[len(old_prefix):] and moves to new_partition.
        Returns the number of rewritten records.
        """
        ...

    async def bulk_delete_range(self, partition: Any, path_range: PathRange) -> int:
        """Delete every node in the range; returns the count removed."""
        ...


__all__ = ["TreeStore"]
