"""Tree navigation and mutation over an ordered store.

PathTree turns tree relations into store scans:

    Relation               Store operation
    ---------------------  ------------------------------------------
    self_and_descendants   range [p, p + "ZZ")
    descendants            range [p + "0", p + "ZZ")
    ancestors              exact set {"", p[:1], ...} by dropping components
    children               five LIKE-style prefix patterns
    siblings               children of the parent path, minus p

Results come back in ascending path order unless a query opts out, and
ascending path order is pre-order traversal: each parent immediately
precedes its subtree.

Integrity beyond path uniqueness is not enforced. A node's parent may be
missing (orphaned descendants are allowed), and grafting a node under its
own descendant is not prevented.
"""

from __future__ import annotations

from collections.abc import Callable
import logging
from typing import TYPE_CHECKING, Any

from pathtree.core.exceptions import InvalidStateError
from pathtree.core.hierarchy import codec, ranges
from pathtree.core.hierarchy.allocator import SequenceAllocator
from pathtree.core.hierarchy.graft import GraftRewriter
from pathtree.core.hierarchy.query import NodeQuery
from pathtree.core.settings import get_tree_settings
from pathtree.infra.logging import get_lazy_logger

if TYPE_CHECKING:
    from collections.abc import Sequence

    from pathtree.core.hierarchy.node import TreeNode
    from pathtree.core.settings import TreeSettings
    from pathtree.infra.stores import TreeStore

logger = logging.getLogger(__name__)
lazy_logger = get_lazy_logger(__name__)

type PartitionDeriver = Callable[[Any], Any]


def inherit_partition(parent: TreeNode) -> Any:
    """Default partition rule: children live in their parent's partition."""
    return parent.partition


def _require_path(node: TreeNode) -> str:
    if node.path is None:
        msg = "Node has not been persisted and has no path"
        raise InvalidStateError(msg, details={"partition": node.partition})
    return node.path


class PathTree[N: TreeNode]:
    """Facade combining the codec, range algebra, allocator and graft rewriter.

    Args:
        store: Ordered key-value store holding the nodes
        settings: Tree settings; loaded from the environment if omitted
        derive_partition: Computes a child's partition from its parent at
            creation and graft time; defaults to the parent's partition
        allocator: Override the sequence allocator (e.g. custom retry policy)

    Example:
        >>> tree = PathTree(InMemoryTreeStore())
        >>> root = await tree.create_root(Node(partition="docs"))
        >>> a = await tree.add_child(root, Node())
        >>> a.path
        '0'
        >>> [n.path async for n in tree.self_and_descendants(root)]
        ['', '0']
    """

    def __init__(
        self,
        store: TreeStore[N],
        *,
        settings: TreeSettings | None = None,
        derive_partition: PartitionDeriver | None = None,
        allocator: SequenceAllocator | None = None,
    ) -> None:
        self.store = store
        self.settings = settings or get_tree_settings()
        self.derive_partition = derive_partition or inherit_partition
        self.allocator = allocator or SequenceAllocator.from_settings(store, self.settings)
        self.rewriter = GraftRewriter(store)

    # ------------------------------------------------------------------
    # Path helpers (no store access)
    # ------------------------------------------------------------------

    @staticmethod
    def path_components(node: TreeNode) -> list[str]:
        """The node's path split into components, e.g. "0CW124" -> ["0", "C", "W12", "4"]."""
        return codec.split_path(_require_path(node))

    @staticmethod
    def level(node: TreeNode) -> int:
        """Depth of the node (0 for a root)."""
        return codec.path_level(_require_path(node))

    @staticmethod
    def is_root(node: TreeNode) -> bool:
        return codec.is_root_path(_require_path(node))

    @staticmethod
    def parent_path(node: TreeNode) -> str | None:
        return codec.parent_path(_require_path(node))

    @staticmethod
    def ancestor_paths(node: TreeNode, *, include_self: bool = False) -> list[str]:
        return ranges.ancestor_paths(_require_path(node), include_self=include_self)

    @staticmethod
    def path_valid(node: TreeNode) -> bool:
        """Whether the stored path rebuilds byte for byte from its components.

        False signals a corrupt or tampered path. Never raises.
        """
        return node.path is not None and codec.is_valid_path(node.path)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def _ordered(self, ordered: bool | None) -> bool:
        return self.settings.ordered if ordered is None else ordered

    def _range_query(
        self, node: TreeNode, path_range: ranges.PathRange, label: str, ordered: bool | None
    ) -> NodeQuery[N]:
        partition = node.partition
        return NodeQuery(
            lambda o: self.store.scan_range(partition, path_range, ordered=o),
            ordered=self._ordered(ordered),
            description=f"{label} of {node.path!r}",
        )

    def _set_query(
        self, node: TreeNode, paths: Sequence[str], label: str, ordered: bool | None
    ) -> NodeQuery[N]:
        if not paths:
            return NodeQuery.empty(f"{label} of {node.path!r}")
        partition = node.partition
        path_set = ranges.PathSet(tuple(paths))
        return NodeQuery(
            lambda o: self.store.scan_set(partition, path_set.paths, ordered=o),
            ordered=self._ordered(ordered),
            description=f"{label} of {node.path!r}",
        )

    def _pattern_query(
        self,
        node: TreeNode,
        patterns: Sequence[ranges.ChildPattern],
        label: str,
        ordered: bool | None,
    ) -> NodeQuery[N]:
        partition = node.partition
        return NodeQuery(
            lambda o: self.store.scan_prefix_union(partition, patterns, ordered=o),
            ordered=self._ordered(ordered),
            description=f"{label} of {node.path!r}",
        )

    def ancestors(self, node: TreeNode, *, ordered: bool | None = None) -> NodeQuery[N]:
        """Ancestors from the root down to the parent; empty for a root."""
        return self._set_query(
            node, ranges.ancestor_paths(_require_path(node)), "ancestors", ordered
        )

    def self_and_ancestors(self, node: TreeNode, *, ordered: bool | None = None) -> NodeQuery[N]:
        return self._set_query(
            node,
            ranges.ancestor_paths(_require_path(node), include_self=True),
            "self_and_ancestors",
            ordered,
        )

    def descendants(self, node: TreeNode, *, ordered: bool | None = None) -> NodeQuery[N]:
        """Every node below this one, at any depth."""
        return self._range_query(
            node, ranges.descendants_range(_require_path(node)), "descendants", ordered
        )

    all_children = descendants

    def self_and_descendants(self, node: TreeNode, *, ordered: bool | None = None) -> NodeQuery[N]:
        """This node followed by its whole subtree, in pre-order by default."""
        return self._range_query(
            node,
            ranges.self_and_descendants_range(_require_path(node)),
            "self_and_descendants",
            ordered,
        )

    full_set = self_and_descendants

    def children(self, node: TreeNode, *, ordered: bool | None = None) -> NodeQuery[N]:
        """Immediate children only."""
        return self._pattern_query(
            node, ranges.children_patterns(_require_path(node)), "children", ordered
        )

    direct_children = children

    def siblings(self, node: TreeNode, *, ordered: bool | None = None) -> NodeQuery[N]:
        """Other children of this node's parent; empty for a root."""
        path = _require_path(node)
        patterns = ranges.siblings_patterns(path)
        if patterns is None:
            return NodeQuery.empty(f"siblings of {path!r}")
        return self._pattern_query(node, patterns, "siblings", ordered).excluding(path)

    def self_and_siblings(self, node: TreeNode, *, ordered: bool | None = None) -> NodeQuery[N]:
        """Children of this node's parent; just the node itself for a root."""
        path = _require_path(node)
        patterns = ranges.siblings_patterns(path)
        if patterns is None:
            return self._set_query(node, [path], "self_and_siblings", ordered)
        return self._pattern_query(node, patterns, "self_and_siblings", ordered)

    def tree(self, partition: Any, *, ordered: bool | None = None) -> NodeQuery[N]:
        """Every node of a partition, in pre-order by default."""
        everything = ranges.self_and_descendants_range("")
        return NodeQuery(
            lambda o: self.store.scan_range(partition, everything, ordered=o),
            ordered=self._ordered(ordered),
            description=f"tree {partition!r}",
        )

    def roots(self, *, ordered: bool | None = None) -> NodeQuery[N]:
        """Root nodes of every partition in the store."""
        return NodeQuery(
            lambda o: self.store.scan_roots(ordered=o),
            ordered=self._ordered(ordered),
            description="roots",
        )

    async def get(self, partition: Any, path: str) -> N | None:
        return await self.store.get(partition, path)

    async def parent(self, node: TreeNode) -> N | None:
        """The parent node; None for a root or when the parent is missing."""
        parent_path = codec.parent_path(_require_path(node))
        if parent_path is None:
            return None
        return await self.store.get(node.partition, parent_path)

    async def root(self, node: TreeNode) -> N | None:
        """Root of the node's partition; None if it was never created or was removed."""
        return await self.store.get(node.partition, "")

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    async def create_root(self, node: N) -> N:
        """Persist node as the root of its partition.

        Raises:
            DuplicatePathError: If the partition already has a root
        """
        node.path = ""
        node.seq = 0
        try:
            return await self.store.insert(node)
        except Exception:
            node.path = None
            raise

    async def add_child(self, parent: TreeNode, child: N) -> N | int:
        """Attach child as the last child of parent.

        A child that has never been persisted (no path) is numbered, placed
        in the parent's partition and inserted; the stored node is returned.

        A persisted child is grafted: it and its whole subtree are relabelled
        under parent with one bulk rewrite, and the number of rewritten
        records is returned. The child object is updated in place with its
        new path and partition; its descendants must be re-read.

        Raises:
            InvalidStateError: If parent has not been persisted
            AllocationExhaustedError: If parent's sequence stayed contended
            RangeError: If parent has exhausted its 2**40 child numbers
        """
        if parent.path is None:
            msg = "add_child not supported unless the parent is already stored"
            raise InvalidStateError(msg, details={"partition": parent.partition})

        if child.path is None:
            return await self._attach_new(parent, child)
        return await self.graft(parent, child)

    async def _attach_new(self, parent: TreeNode, child: N) -> N:
        seq = await self.allocator.allocate_next(parent)
        child.path = GraftRewriter.new_prefix(parent, seq)
        if child.seq is None:
            child.seq = 0
        child.partition = self.derive_partition(parent)
        try:
            stored = await self.store.insert(child)
        except Exception:
            child.path = None
            raise
        lazy_logger.debug(
            lambda: f"Added child {child.path!r} under {parent.path!r} in {child.partition!r}"
        )
        return stored

    async def graft(self, parent: TreeNode, child: N) -> int:
        """Move a persisted child and its subtree under parent.

        Returns:
            Number of records relabelled
        """
        if parent.path is None:
            msg = "Cannot graft under a parent that is not stored"
            raise InvalidStateError(msg, details={"partition": parent.partition})
        new_partition = self.derive_partition(parent)
        seq = await self.allocator.allocate_next(parent)
        result = await self.rewriter.graft(child, parent, seq, new_partition)
        child.path = result.new_prefix
        child.partition = result.new_partition
        return result.rewritten

    async def destroy(self, node: TreeNode) -> int:
        """Delete node and its whole subtree in one store operation.

        Returns:
            Number of records removed
        """
        path = _require_path(node)
        removed = await self.store.bulk_delete_range(
            node.partition, ranges.self_and_descendants_range(path)
        )
        logger.info(
            "Destroyed subtree",
            extra={"partition": node.partition, "path": path, "removed": removed},
        )
        return removed


__all__ = ["PartitionDeriver", "PathTree", "inherit_partition"]
