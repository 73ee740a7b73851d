"""Relabelling of a whole subtree under a new parent.

Moving node "XBBBB" under "WAA" (whose next child number is 1) rewrites the
shared prefix of every record in the subtree:

    XBBBB   -> WAA1
    XBBBB0  -> WAA10
    XBBBB0C -> WAA10C

and moves them all to the parent's partition. The store applies this as one
bulk statement; readers must never see part of a subtree relabelled.

Grafting a node under one of its own descendants is not detected.
"""

from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import TYPE_CHECKING, Any

from pathtree.core.exceptions import InvalidStateError
from pathtree.core.hierarchy.codec import encode_component

if TYPE_CHECKING:
    from pathtree.core.hierarchy.node import TreeNode
    from pathtree.infra.stores import TreeStore

logger = logging.getLogger(__name__)


@dataclass(slots=True, frozen=True)
class GraftResult:
    """Outcome of a graft.

    Attributes:
        old_prefix: Path of the grafted node before the move
        new_prefix: Path of the grafted node after the move
        old_partition: Partition the subtree left
        new_partition: Partition the subtree joined
        rewritten: Number of records relabelled (node plus descendants)
    """

    old_prefix: str
    new_prefix: str
    old_partition: Any
    new_partition: Any
    rewritten: int


class GraftRewriter:
    """Issues the bulk prefix rewrite for a graft."""

    def __init__(self, store: TreeStore[Any]) -> None:
        self.store = store

    @staticmethod
    def new_prefix(parent: TreeNode, seq: int) -> str:
        """Path the grafted node receives under parent for child number seq."""
        if parent.path is None:
            msg = "Cannot graft under a node that has no path"
            raise InvalidStateError(msg)
        return parent.path + encode_component(seq)

    async def graft(
        self,
        node: TreeNode,
        parent: TreeNode,
        seq: int,
        new_partition: Any,
    ) -> GraftResult:
        """Relabel node and its descendants as child number seq of parent.

        Args:
            node: Persisted node to move
            parent: New parent
            seq: Child number already allocated from parent
            new_partition: Partition the subtree moves into

        Returns:
            GraftResult describing the rewrite
        """
        if node.path is None:
            msg = "Cannot graft a node that has not been persisted"
            raise InvalidStateError(msg)

        new_prefix = self.new_prefix(parent, seq)
        rewritten = await self.store.bulk_rewrite_prefix(
            node.partition, node.path, new_prefix, new_partition
        )
        result = GraftResult(
            old_prefix=node.path,
            new_prefix=new_prefix,
            old_partition=node.partition,
            new_partition=new_partition,
            rewritten=rewritten,
        )
        logger.info(
            "Grafted subtree",
            extra={
                "old_prefix": result.old_prefix,
                "new_prefix": result.new_prefix,
                "old_partition": result.old_partition,
                "new_partition": result.new_partition,
                "rewritten": rewritten,
            },
        )
        return result


__all__ = ["GraftResult", "GraftRewriter"]
