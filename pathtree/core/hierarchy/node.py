"""Node shape shared by the tree facade and the stores.

The tree only reads and writes four attributes, so any object providing them
works: the in-memory `Node` below, or a SQLAlchemy model using
`MaterializedPathMixin`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class TreeNode(Protocol):
    """Attributes every tree node exposes.

    Attributes:
        partition: Opaque scope value; nodes in different partitions are unrelated
        path: Encoded materialized path, "" for a root, None until persisted
        seq: Next unused child sequence number
        kind: Optional variant tag for nodes sharing one path space
    """

    partition: Any
    path: str | None
    seq: int | None
    kind: str | None


@dataclass(slots=True)
class Node:
    """Plain tree record used with the in-memory store.

    Example:
        >>> root = Node(partition="tenant-1", data={"name": "root"})
        >>> root.path is None
        True
    """

    partition: Any = ""
    path: str | None = None
    seq: int | None = None
    kind: str | None = None
    data: dict[str, Any] = field(default_factory=dict)

    @property
    def key(self) -> tuple[Any, str | None]:
        """Store key of this node."""
        return (self.partition, self.path)


__all__ = ["Node", "TreeNode"]
