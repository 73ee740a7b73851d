"""Retry bookkeeping and the error raised when retries run out."""

from __future__ import annotations

from dataclasses import dataclass, field
import time


@dataclass
class RetryStatistics:
    """Statistics captured during one retried call.

    Attributes:
        attempts: Failed attempts that were followed by a retry
        total_delay: Seconds spent sleeping between attempts
        exceptions: Exception type names, one per failed attempt
    """

    attempts: int = 0
    total_delay: float = 0.0
    start_time: float = field(default_factory=time.monotonic)
    end_time: float = 0.0
    exceptions: list[str] = field(default_factory=list)

    @property
    def duration(self) -> float:
        """Total time spent in the call, retries included."""
        end = self.end_time or time.monotonic()
        return end - self.start_time

    @property
    def elapsed(self) -> float:
        """Seconds since the first attempt started."""
        return time.monotonic() - self.start_time

    def record_failure(self, exc: Exception, delay: float) -> None:
        """Account for a failed attempt that will be retried after delay."""
        self.attempts += 1
        self.total_delay += delay
        self.exceptions.append(type(exc).__name__)

    def finish(self) -> RetryStatistics:
        """Stamp the end time and return self."""
        self.end_time = time.monotonic()
        return self


class RetryError(Exception):
    """Error raised after exhausting retry attempts."""

    def __init__(
        self,
        last_exception: Exception,
        attempts: int,
        statistics: RetryStatistics | None = None,
    ) -> None:
        """Initialize the error with context.

        Args:
            last_exception: Exception raised by the final attempt
            attempts: Total attempts made
            statistics: Bookkeeping for the whole call
        """
        self.last_exception = last_exception
        self.attempts = attempts
        self.statistics = statistics
        super().__init__(f"Failed after {attempts} attempts. Last error: {last_exception}")
