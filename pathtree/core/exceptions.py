"""Tree and store exceptions.

Custom exceptions for path encoding, allocation and store operations that
carry structured context instead of bare messages.
"""
from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from pathtree.utils.retry import RetryStatistics


class PathTreeError(Exception):
    """Base exception for materialized-path tree operations.

    Attributes:
        message: Error description
        details: Additional context rendered after the message
    """

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        """Initialize tree error.

        Args:
            message: Error description
            details: Additional context about the error
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Format error message with details."""
        if self.details:
            details_str = ", ".join(f"{k}={v!r}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class RangeError(PathTreeError, ValueError):
    """Number cannot be encoded as a path component.

    Raised for negative numbers and for values of 2**40 or more. Never
    retried: the calling operation fails.
    """

    def __init__(self, value: Any):
        """Initialize range error.

        Args:
            value: The rejected value
        """
        self.value = value
        super().__init__(
            "Path component out of range",
            details={"value": value, "min": 0, "max_exclusive": 1 << 40},
        )


class CorruptPathError(PathTreeError, ValueError):
    """Stored path does not match the component grammar.

    Indicates tampered or misused storage; not recoverable by this layer.
    """

    def __init__(self, path: str, reason: str = "path does not match component grammar"):
        """Initialize corrupt path error.

        Args:
            path: The offending path string
            reason: What was wrong with it
        """
        self.path = path
        super().__init__(f"Corrupt path: {reason}", details={"path": path})


class InvalidStateError(PathTreeError):
    """Operation invoked on a node in the wrong lifecycle state.

    Raised by add_child when the parent has not been persisted yet.
    """


class NodeNotFoundError(PathTreeError):
    """Node not present in the store.

    Attributes:
        partition: Partition that was searched
        path: Path that was searched
    """

    def __init__(self, partition: Any, path: str | None):
        """Initialize not found error.

        Args:
            partition: Partition of the missing node
            path: Path of the missing node
        """
        self.partition = partition
        self.path = path
        super().__init__(
            "Node not found",
            details={"partition": partition, "path": path},
        )

    def __repr__(self) -> str:
        """Repr for debugging."""
        return f"NodeNotFoundError(partition={self.partition!r}, path={self.path!r})"


class DuplicatePathError(PathTreeError):
    """Insert collided with an existing (partition, path) key."""

    def __init__(self, partition: Any, path: str):
        """Initialize duplicate path error.

        Args:
            partition: Partition of the colliding node
            path: Path already in use
        """
        self.partition = partition
        self.path = path
        super().__init__(
            "Path already exists in partition",
            details={"partition": partition, "path": path},
        )


class AllocationExhaustedError(PathTreeError):
    """Child sequence allocation lost every compare-and-swap race.

    The caller may retry the whole add_child operation.

    Attributes:
        attempts: Number of allocation attempts made
        statistics: Retry statistics captured while allocating
    """

    def __init__(
        self,
        partition: Any,
        path: str,
        attempts: int,
        statistics: RetryStatistics | None = None,
    ):
        """Initialize allocation exhausted error.

        Args:
            partition: Partition of the contended node
            path: Path of the contended node
            attempts: Attempts made before giving up
            statistics: Retry statistics, if captured
        """
        self.attempts = attempts
        self.statistics = statistics
        super().__init__(
            f"Unable to allocate child sequence after {attempts} attempts",
            details={"partition": partition, "path": path},
        )


class StoreError(PathTreeError):
    """Store returned a result that violates its contract.

    For example a conditional update that matched more than one row.
    """


__all__ = [
    "AllocationExhaustedError",
    "CorruptPathError",
    "DuplicatePathError",
    "InvalidStateError",
    "NodeNotFoundError",
    "PathTreeError",
    "RangeError",
    "StoreError",
]
