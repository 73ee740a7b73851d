"""Materialized-path trees over an ordered key-value store.

Each node stores its full ancestry as a compact, order-preserving path
string, so ancestors, descendants, children and siblings are all single
range, prefix or set lookups, and sorting by path lists a tree in pre-order.

Components:
    - codec: integer <-> path component encoding and path tokenizing
    - ranges: tree relation -> key range / prefix patterns / path set
    - SequenceAllocator: compare-and-swap allocation of child numbers
    - GraftRewriter: bulk relabelling of a moved subtree
    - NodeQuery: lazy, restartable query results
    - PathTree: the facade tying them together

Example:
    >>> from pathtree.core.hierarchy import Node, PathTree
    >>> from pathtree.infra.stores import InMemoryTreeStore
    >>>
    >>> tree = PathTree(InMemoryTreeStore())
    >>> root = await tree.create_root(Node(partition="catalog"))
    >>> books = await tree.add_child(root, Node(data={"name": "books"}))
    >>> books.path
    '0'
    >>> await tree.children(root).paths()
    ['0']
"""

from pathtree.core.hierarchy.codec import (
    ALPHABET,
    COMPONENT_PATTERN,
    MARKERS,
    MAX_COMPONENT,
    decode_component,
    decode_path,
    encode_component,
    encode_path,
    is_valid_path,
    join_path,
    parent_path,
    path_level,
    scan_components,
    split_path,
)
from pathtree.core.hierarchy.ranges import (
    ChildPattern,
    PathRange,
    PathSet,
    ancestor_paths,
    children_patterns,
    descendants_range,
    self_and_descendants_range,
    siblings_patterns,
)
from pathtree.core.hierarchy.node import Node, TreeNode
from pathtree.core.hierarchy.query import NodeQuery
from pathtree.core.hierarchy.allocator import SequenceAllocator, SequenceConflictError
from pathtree.core.hierarchy.graft import GraftResult, GraftRewriter
from pathtree.core.hierarchy.tree import PathTree, inherit_partition

__all__ = [
    "ALPHABET",
    "COMPONENT_PATTERN",
    "MARKERS",
    "MAX_COMPONENT",
    "ChildPattern",
    "GraftResult",
    "GraftRewriter",
    "Node",
    "NodeQuery",
    "PathRange",
    "PathSet",
    "PathTree",
    "SequenceAllocator",
    "SequenceConflictError",
    "TreeNode",
    "ancestor_paths",
    "children_patterns",
    "decode_component",
    "decode_path",
    "descendants_range",
    "encode_component",
    "encode_path",
    "inherit_partition",
    "is_valid_path",
    "join_path",
    "parent_path",
    "path_level",
    "scan_components",
    "self_and_descendants_range",
    "siblings_patterns",
    "split_path",
]
