"""Materialized-path trees for ordered key-value stores.

Store hierarchical records in a flat, range-queryable collection. Every node
carries an order-preserving encoded path, so ancestors, descendants,
children and siblings are single range, prefix or set lookups.

Example:
    >>> from pathtree import InMemoryTreeStore, Node, PathTree
    >>>
    >>> tree = PathTree(InMemoryTreeStore())
    >>> root = await tree.create_root(Node(partition="tenant-1"))
    >>> child = await tree.add_child(root, Node())
    >>> await tree.self_and_descendants(root).paths()
    ['', '0']
"""

from pathtree.core.exceptions import (
    AllocationExhaustedError,
    CorruptPathError,
    DuplicatePathError,
    InvalidStateError,
    NodeNotFoundError,
    PathTreeError,
    RangeError,
    StoreError,
)
from pathtree.core.hierarchy import (
    GraftResult,
    Node,
    NodeQuery,
    PathTree,
    SequenceAllocator,
    TreeNode,
    decode_component,
    encode_component,
    join_path,
    split_path,
)
from pathtree.core.settings import TreeSettings, get_tree_settings
from pathtree.infra.stores import InMemoryTreeStore, SQLAlchemyTreeStore, TreeStore

__version__ = "0.1.0"

__all__ = [
    "AllocationExhaustedError",
    "CorruptPathError",
    "DuplicatePathError",
    "GraftResult",
    "InMemoryTreeStore",
    "InvalidStateError",
    "Node",
    "NodeNotFoundError",
    "NodeQuery",
    "PathTree",
    "PathTreeError",
    "RangeError",
    "SQLAlchemyTreeStore",
    "SequenceAllocator",
    "StoreError",
    "TreeNode",
    "TreeSettings",
    "TreeStore",
    "__version__",
    "decode_component",
    "encode_component",
    "get_tree_settings",
    "join_path",
    "split_path",
]
