from __future__ import annotations

from pathtree.utils.retry.decorator import retry
from pathtree.utils.retry.exceptions import RetryError, RetryStatistics
from pathtree.utils.retry.strategies import RetryStrategy

__all__ = ["RetryError", "RetryStatistics", "RetryStrategy", "retry"]
