"""Backoff policy for retried operations."""

from __future__ import annotations

import random
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable


class RetryStrategy:
    """Bounded exponential backoff with optional multiplicative jitter.

    The delay before retry number ``attempt`` (0-based) is
    ``initial_delay * exponential_base ** attempt``, capped at ``max_delay``
    and then scaled by a factor drawn uniformly from ``jitter_range``.

    Example:
        >>> strategy = RetryStrategy(max_attempts=5, initial_delay=0.1, jitter=False)
        >>> [strategy.calculate_delay(a) for a in range(3)]
        [0.1, 0.2, 0.4]
    """

    def __init__(
        self,
        max_attempts: int = 3,
        initial_delay: float = 1.0,
        max_delay: float = 60.0,
        exponential_base: float = 2.0,
        jitter: bool = True,
        jitter_range: tuple[float, float] = (0.5, 1.5),
        exceptions: tuple[type[Exception], ...] = (Exception,),
        retry_if: Callable[[Exception], bool] | None = None,
        stop_after_delay: float | None = None,
    ) -> None:
        if max_attempts < 1:
            msg = f"max_attempts must be at least 1, got {max_attempts}"
            raise ValueError(msg)
        low, high = jitter_range
        if low < 0 or high < low:
            msg = f"invalid jitter_range {jitter_range!r}"
            raise ValueError(msg)
        self.max_attempts = max_attempts
        self.initial_delay = initial_delay
        self.max_delay = max_delay
        self.exponential_base = exponential_base
        self.jitter = jitter
        self.jitter_range = jitter_range
        self.exceptions = exceptions
        self.retry_if = retry_if
        self.stop_after_delay = stop_after_delay

    def should_retry(self, exception: Exception) -> bool:
        if self.retry_if is not None:
            return self.retry_if(exception)
        return isinstance(exception, self.exceptions)

    def calculate_delay(self, attempt: int) -> float:
        delay = self.initial_delay * (self.exponential_base**attempt)
        delay = min(delay, self.max_delay)
        if self.jitter:
            delay *= random.uniform(self.jitter_range[0], self.jitter_range[1])
        return delay

    def __repr__(self) -> str:
        return (
            f"RetryStrategy(max_attempts={self.max_attempts}, "
            f"initial_delay={self.initial_delay}, max_delay={self.max_delay}, "
            f"jitter={self.jitter})"
        )
