"""In-process ordered store.

Keeps one dict per partition plus a sorted key list for range scans. Useful
for tests, prototyping and small embedded trees.

Every mutating method completes without awaiting between reading and
writing, so on a single event loop each one is atomic: concurrent
allocations see exactly one compare-and-swap winner, and a bulk rewrite is
never observed half-applied.
"""

from __future__ import annotations

from bisect import bisect_left, insort
import copy
from typing import TYPE_CHECKING, Any

from pathtree.core.exceptions import DuplicatePathError
from pathtree.core.hierarchy.ranges import self_and_descendants_range
from pathtree.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable, Collection, Iterable, Sequence

    from pathtree.core.hierarchy.node import Node
    from pathtree.core.hierarchy.ranges import ChildPattern, PathRange

lazy_logger = get_lazy_logger(__name__, store="memory")


class InMemoryTreeStore:
    """Dictionary-backed implementation of the TreeStore contract.

    Nodes are copied on the way in and on the way out, so mutating a
    returned node never changes stored state (as with a database).

    Example:
        >>> store = InMemoryTreeStore()
        >>> tree = PathTree(store)
        >>> root = await tree.create_root(Node(partition="docs"))
    """

    def __init__(self) -> None:
        self._records: dict[Any, dict[str, Node]] = {}
        self._sorted_paths: dict[Any, list[str]] = {}

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get(self, partition: Any, path: str) -> Node | None:
        node = self._records.get(partition, {}).get(path)
        return copy.deepcopy(node) if node is not None else None

    async def scan_range(
        self, partition: Any, path_range: PathRange, *, ordered: bool = True
    ) -> AsyncIterator[Node]:
        keys = self._sorted_paths.get(partition, [])
        start = bisect_left(keys, path_range.lo)
        stop = bisect_left(keys, path_range.hi)
        selected = set(keys[start:stop])
        for node in self._snapshot(partition, selected.__contains__, ordered=ordered):
            yield node

    async def scan_prefix_union(
        self,
        partition: Any,
        patterns: Sequence[ChildPattern],
        *,
        ordered: bool = True,
    ) -> AsyncIterator[Node]:
        def matches(path: str) -> bool:
            return any(pattern.matches(path) for pattern in patterns)

        for node in self._snapshot(partition, matches, ordered=ordered):
            yield node

    async def scan_set(
        self, partition: Any, paths: Collection[str], *, ordered: bool = True
    ) -> AsyncIterator[Node]:
        wanted = frozenset(paths)
        for node in self._snapshot(partition, wanted.__contains__, ordered=ordered):
            yield node

    async def scan_roots(self, *, ordered: bool = True) -> AsyncIterator[Node]:
        roots = [
            copy.deepcopy(records[""])
            for records in list(self._records.values())
            if "" in records
        ]
        for node in roots:
            yield node

    def _snapshot(
        self,
        partition: Any,
        predicate: Callable[[str], bool],
        *,
        ordered: bool,
    ) -> list[Node]:
        # Materialized before the first yield so that writes made while a
        # consumer iterates do not change what the scan returns.
        records = self._records.get(partition, {})
        paths: Iterable[str] = (
            self._sorted_paths.get(partition, []) if ordered else records.keys()
        )
        return [copy.deepcopy(records[p]) for p in paths if predicate(p)]

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def insert(self, node: Node) -> Node:
        if node.path is None:
            msg = "cannot store a node without a path"
            raise ValueError(msg)
        if node.path in self._records.get(node.partition, {}):
            raise DuplicatePathError(node.partition, node.path)
        self._put(copy.deepcopy(node))
        return copy.deepcopy(node)

    async def conditional_update(
        self, partition: Any, path: str, expected_seq: int, new_seq: int
    ) -> bool:
        node = self._records.get(partition, {}).get(path)
        if node is None or (node.seq or 0) != expected_seq:
            return False
        node.seq = new_seq
        return True

    async def bulk_rewrite_prefix(
        self, partition: Any, old_prefix: str, new_prefix: str, new_partition: Any
    ) -> int:
        moving = self._paths_in(partition, self_and_descendants_range(old_prefix))
        if not moving:
            return 0

        cut = len(old_prefix)
        renames = {path: new_prefix + path[cut:] for path in moving}

        # Reject collisions before touching anything so the rewrite is all or nothing
        target = self._records.get(new_partition, {})
        leaving = set(moving) if new_partition == partition else set()
        for new_path in renames.values():
            if new_path in target and new_path not in leaving:
                raise DuplicatePathError(new_partition, new_path)

        nodes = [self._remove(partition, path) for path in moving]
        for node in nodes:
            node.path = renames[node.path]
            node.partition = new_partition
            self._put(node)

        lazy_logger.debug(
            lambda: f"Rewrote {len(nodes)} paths {old_prefix!r} -> {new_prefix!r}"
        )
        return len(nodes)

    async def bulk_delete_range(self, partition: Any, path_range: PathRange) -> int:
        doomed = self._paths_in(partition, path_range)
        for path in doomed:
            self._remove(partition, path)
        return len(doomed)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _paths_in(self, partition: Any, path_range: PathRange) -> list[str]:
        keys = self._sorted_paths.get(partition, [])
        return keys[bisect_left(keys, path_range.lo) : bisect_left(keys, path_range.hi)]

    def _put(self, node: Node) -> None:
        self._records.setdefault(node.partition, {})[node.path] = node
        insort(self._sorted_paths.setdefault(node.partition, []), node.path)

    def _remove(self, partition: Any, path: str) -> Node:
        node = self._records[partition].pop(path)
        keys = self._sorted_paths[partition]
        del keys[bisect_left(keys, path)]
        if not keys:
            del self._records[partition]
            del self._sorted_paths[partition]
        return node

    def __len__(self) -> int:
        return sum(len(records) for records in self._records.values())

    def __repr__(self) -> str:
        return f"InMemoryTreeStore(partitions={len(self._records)}, nodes={len(self)})"


__all__ = ["InMemoryTreeStore"]
