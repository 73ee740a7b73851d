"""Utility modules shared across the package.

This package provides reusable utilities for:
- Retry with bounded, jittered backoff
"""

from pathtree.utils.retry import RetryError, RetryStatistics, RetryStrategy, retry

__all__ = ["RetryError", "RetryStatistics", "RetryStrategy", "retry"]
