"""Atomic allocation of child sequence numbers.

Each node stores the next unused child number in its ``seq`` attribute.
Allocation is optimistic: read the current value, then ask the store to
bump it only if nobody else has in the meantime. A lost race is retried
with jittered backoff; no lock is held between the read and the write.

Sequence numbers are never reused. If a caller crashes after allocating but
before using the number, the number is simply skipped.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pathtree.core.exceptions import AllocationExhaustedError, NodeNotFoundError
from pathtree.utils.retry import RetryError, RetryStrategy, retry

if TYPE_CHECKING:
    from pathtree.core.hierarchy.node import TreeNode
    from pathtree.core.settings import TreeSettings
    from pathtree.infra.stores import TreeStore

logger = logging.getLogger(__name__)


class SequenceConflictError(Exception):
    """Another writer changed seq between our read and our update."""

    def __init__(self, partition: Any, path: str, expected_seq: int) -> None:
        self.partition = partition
        self.path = path
        self.expected_seq = expected_seq
        super().__init__(f"seq of {path!r} moved past {expected_seq}")


class SequenceAllocator:
    """Hands out child sequence numbers through compare-and-swap on the store.

    Args:
        store: Store providing get() and conditional_update()
        strategy: Retry policy for lost races; only SequenceConflictError
            is retried

    Example:
        >>> allocator = SequenceAllocator.from_settings(store, get_tree_settings())
        >>> index = await allocator.allocate_next(parent)
    """

    def __init__(self, store: TreeStore[Any], *, strategy: RetryStrategy | None = None) -> None:
        self.store = store
        self.strategy = strategy or RetryStrategy(
            max_attempts=20,
            initial_delay=0.01,
            max_delay=0.5,
            jitter_range=(0.0, 1.0),
            exceptions=(SequenceConflictError,),
        )
        self._attempt_with_retry = retry(self.strategy)(self._attempt)

    @classmethod
    def from_settings(cls, store: TreeStore[Any], settings: TreeSettings) -> SequenceAllocator:
        """Build an allocator whose retry policy comes from TreeSettings."""
        strategy = RetryStrategy(
            max_attempts=settings.allocation_max_attempts,
            initial_delay=settings.allocation_initial_delay,
            max_delay=settings.allocation_max_delay,
            exponential_base=settings.allocation_backoff_base,
            jitter=settings.allocation_jitter,
            jitter_range=settings.allocation_jitter_range,
            exceptions=(SequenceConflictError,),
        )
        return cls(store, strategy=strategy)

    async def allocate_next(self, node: TreeNode) -> int:
        """Reserve the next child number of node.

        Args:
            node: Persisted node whose ``seq`` is bumped

        Returns:
            The reserved number (the value of seq before the increment)

        Raises:
            NodeNotFoundError: If the node is no longer in the store
            AllocationExhaustedError: If every attempt lost its race
        """
        try:
            seq = await self._attempt_with_retry(node.partition, node.path)
        except RetryError as exc:
            raise AllocationExhaustedError(
                node.partition,
                node.path,
                attempts=exc.attempts,
                statistics=exc.statistics,
            ) from exc
        node.seq = seq + 1
        return seq

    async def _attempt(self, partition: Any, path: str) -> int:
        current = await self.store.get(partition, path)
        if current is None:
            raise NodeNotFoundError(partition, path)
        seq = current.seq or 0
        if not await self.store.conditional_update(partition, path, seq, seq + 1):
            raise SequenceConflictError(partition, path, seq)
        logger.debug(
            "Allocated child sequence",
            extra={"partition": partition, "path": path, "seq": seq},
        )
        return seq


__all__ = ["SequenceAllocator", "SequenceConflictError"]
