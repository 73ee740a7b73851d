"""Unit tests for the retry decorator and backoff strategy."""
from __future__ import annotations

import pytest

from pathtree.core.hierarchy.allocator import SequenceConflictError
from pathtree.utils.retry import RetryError, RetryStatistics, RetryStrategy, retry


class FlakyCounter:
    """Counter whose swap loses the race a fixed number of times."""

    def __init__(self, losses: int) -> None:
        self.value = 0
        self.losses = losses
        self.calls = 0

    async def swap(self) -> int:
        self.calls += 1
        if self.calls <= self.losses:
            raise SequenceConflictError("t", "", self.value)
        self.value += 1
        return self.value


@pytest.mark.unit
class TestRetryDecorator:
    """Retrying coroutines that lose compare-and-swap races."""

    async def test_no_retry_without_conflict(self):
        counter = FlakyCounter(losses=0)

        result = await retry(max_attempts=3, jitter=False)(counter.swap)()

        assert result == 1
        assert counter.calls == 1

    async def test_conflicts_are_retried_until_the_swap_wins(self):
        counter = FlakyCounter(losses=2)
        swap = retry(max_attempts=3, initial_delay=0.0, jitter=False)(counter.swap)

        assert await swap() == 1
        assert counter.calls == 3

    async def test_budget_exhausted(self):
        """Test RetryError carries the last conflict and the statistics."""
        counter = FlakyCounter(losses=10)
        swap = retry(max_attempts=3, initial_delay=0.0, jitter=False)(counter.swap)

        with pytest.raises(RetryError) as exc_info:
            await swap()

        err = exc_info.value
        assert counter.calls == 3
        assert err.attempts == 3
        assert "after 3 attempts" in str(err)
        assert isinstance(err.last_exception, SequenceConflictError)
        assert err.statistics.attempts == 2
        assert err.statistics.exceptions == ["SequenceConflictError"] * 2

    async def test_unlisted_exceptions_propagate(self):
        calls = 0

        @retry(max_attempts=3, initial_delay=0.0, exceptions=(SequenceConflictError,))
        async def vanished():
            nonlocal calls
            calls += 1
            raise LookupError("node is gone")

        with pytest.raises(LookupError):
            await vanished()

        assert calls == 1

    @pytest.mark.asyncio
    async def test_retry_if_predicate(self):
        """Test a retry_if predicate overrides the exception types."""
        call_count = 0

        @retry(max_attempts=5, initial_delay=0.0, retry_if=lambda e: "again" in str(e))
        async def flaky():
            nonlocal call_count
            call_count += 1
            raise ValueError("again" if call_count < 2 else "stop")

        with pytest.raises(ValueError, match="stop"):
            await flaky()

        assert call_count == 2

    @pytest.mark.asyncio
    async def test_on_retry_callback(self):
        """Test the callback sees each retried failure."""
        seen: list[int] = []

        @retry(
            max_attempts=3,
            initial_delay=0.0,
            jitter=False,
            on_retry=lambda exc, attempt: seen.append(attempt),
        )
        async def always_fails():
            raise ValueError("Fail")

        with pytest.raises(RetryError):
            await always_fails()

        assert seen == [1, 2]

    @pytest.mark.asyncio
    async def test_stop_after_delay(self):
        """Test the time budget ends retries before max_attempts."""
        call_count = 0

        @retry(max_attempts=100, initial_delay=0.0, jitter=False, stop_after_delay=0.0)
        async def always_fails():
            nonlocal call_count
            call_count += 1
            raise ValueError("Fail")

        with pytest.raises(RetryError):
            await always_fails()

        assert call_count == 1

    def test_strategy_and_options_are_exclusive(self):
        """Test passing both a strategy and options is an error."""
        with pytest.raises(TypeError):
            retry(RetryStrategy(), max_attempts=2)


@pytest.mark.unit
class TestRetryStrategy:
    """Test suite for backoff computation."""

    def test_exponential_backoff(self):
        """Test delays double and are capped."""
        strategy = RetryStrategy(initial_delay=0.1, max_delay=0.3, jitter=False)

        assert [strategy.calculate_delay(a) for a in range(3)] == pytest.approx([0.1, 0.2, 0.3])

    def test_jitter_stays_in_range(self):
        """Test jittered delays are scaled within jitter_range."""
        strategy = RetryStrategy(initial_delay=1.0, max_delay=1.0, jitter_range=(0.0, 1.0))

        delays = [strategy.calculate_delay(0) for _ in range(50)]

        assert all(0.0 <= d <= 1.0 for d in delays)

    @pytest.mark.parametrize(
        "kwargs",
        [{"max_attempts": 0}, {"jitter_range": (1.0, 0.5)}, {"jitter_range": (-1.0, 1.0)}],
    )
    def test_invalid_configuration(self, kwargs):
        """Test nonsensical policies are rejected."""
        with pytest.raises(ValueError):
            RetryStrategy(**kwargs)

    def test_should_retry(self):
        """Test exception type matching."""
        strategy = RetryStrategy(exceptions=(KeyError,))

        assert strategy.should_retry(KeyError("x"))
        assert not strategy.should_retry(ValueError("x"))


@pytest.mark.unit
def test_statistics_duration():
    """Test statistics track failures and finish time."""
    stats = RetryStatistics()
    stats.record_failure(ValueError("x"), 0.25)

    assert stats.attempts == 1
    assert stats.total_delay == 0.25
    assert stats.finish().duration >= 0.0
