from __future__ import annotations

import asyncio
from functools import wraps
import logging
from typing import TYPE_CHECKING, Any, ParamSpec, TypeVar

from .exceptions import RetryError, RetryStatistics
from .strategies import RetryStrategy

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

logger = logging.getLogger(__name__)

P = ParamSpec("P")
R = TypeVar("R")


def retry(
    strategy: RetryStrategy | None = None,
    *,
    on_retry: Callable[[Exception, int], None] | None = None,
    **strategy_options: Any,
) -> Callable[[Callable[P, Awaitable[R]]], Callable[P, Awaitable[R]]]:
    """Retry a coroutine function according to a backoff strategy.

    Either pass a ready ``RetryStrategy`` or the keyword options to build
    one. Exceptions the strategy does not retry propagate untouched; running
    out of attempts (or of ``stop_after_delay``) raises ``RetryError`` chained
    to the last failure.
    """
    if strategy is None:
        strategy = RetryStrategy(**strategy_options)
    elif strategy_options:
        msg = "pass either a strategy or strategy options, not both"
        raise TypeError(msg)
    policy = strategy

    def decorator(func: Callable[P, Awaitable[R]]) -> Callable[P, Awaitable[R]]:
        @wraps(func)
        async def async_wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            statistics = RetryStatistics()

            for attempt in range(policy.max_attempts):
                try:
                    return await func(*args, **kwargs)
                except Exception as e:
                    if not policy.should_retry(e):
                        raise

                    if (
                        policy.stop_after_delay is not None
                        and statistics.elapsed >= policy.stop_after_delay
                    ):
                        raise RetryError(e, attempt + 1, statistics.finish()) from e

                    if attempt >= policy.max_attempts - 1:
                        statistics.finish()
                        logger.error(
                            f"All retry attempts exhausted for {func.__name__}",
                            extra={
                                "function": func.__name__,
                                "attempts": attempt + 1,
                                "last_exception": str(e),
                                "total_delay": statistics.total_delay,
                                "duration": statistics.duration,
                            },
                        )
                        raise RetryError(e, attempt + 1, statistics) from e

                    delay = policy.calculate_delay(attempt)
                    statistics.record_failure(e, delay)

                    logger.warning(
                        f"Retrying {func.__name__} after {delay:.3f}s (attempt {attempt + 1}/{policy.max_attempts})",
                        extra={
                            "function": func.__name__,
                            "attempt": attempt + 1,
                            "max_attempts": policy.max_attempts,
                            "delay": delay,
                            "exception": str(e),
                        },
                    )

                    if on_retry:
                        on_retry(e, attempt + 1)

                    await asyncio.sleep(delay)

            msg = "Retry logic error: exhausted all attempts"
            raise RuntimeError(msg)

        return async_wrapper

    return decorator
