"""Tree behaviour settings.

Environment variables use PATHTREE_ prefix.
Example: PATHTREE_ALLOCATION_MAX_ATTEMPTS=40, PATHTREE_ORDERED=false
"""

from __future__ import annotations

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class TreeSettings(BaseSettings):
    """Child allocation retry policy and query defaults.

    Sequence allocation is optimistic: a lost compare-and-swap race is
    retried after a jittered, exponentially growing delay. The defaults
    give up after 20 attempts.

    Attributes:
        allocation_max_attempts: Compare-and-swap attempts before giving up.
        allocation_initial_delay: Backoff before the first retry, in seconds.
        allocation_max_delay: Cap on any single backoff, in seconds.
        allocation_backoff_base: Growth factor of the backoff per attempt.
        allocation_jitter: Scale each backoff by a random factor.
        allocation_jitter_range: Bounds of that random factor.
        ordered: Return query results in path (pre-order) order by default.
    """

    # ─────────────────────────────────────────────────────
    # Sequence allocation
    # ─────────────────────────────────────────────────────
    allocation_max_attempts: int = Field(
        default=20,
        ge=1,
        le=1000,
        description="Maximum compare-and-swap attempts when allocating a child sequence.",
    )
    allocation_initial_delay: float = Field(
        default=0.01,
        ge=0.0,
        le=10.0,
        description="Delay (seconds) before the first allocation retry.",
    )
    allocation_max_delay: float = Field(
        default=0.5,
        ge=0.0,
        le=60.0,
        description="Maximum delay (seconds) between allocation retries.",
    )
    allocation_backoff_base: float = Field(
        default=2.0,
        ge=1.0,
        le=10.0,
        description="Exponential growth factor of the allocation backoff.",
    )
    allocation_jitter: bool = Field(
        default=True,
        description="Randomize allocation backoff so contending writers spread out.",
    )
    allocation_jitter_range: tuple[float, float] = Field(
        default=(0.0, 1.0),
        description="Bounds of the random factor applied to each backoff.",
    )

    # ─────────────────────────────────────────────────────
    # Queries
    # ─────────────────────────────────────────────────────
    ordered: bool = Field(
        default=True,
        description="Order query results by path unless a query opts out.",
    )

    model_config = SettingsConfigDict(
        env_prefix="PATHTREE_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        frozen=True,
        extra="ignore",
        env_ignore_empty=True,
    )

    @model_validator(mode="after")
    def _check_delays(self) -> TreeSettings:
        low, high = self.allocation_jitter_range
        if low < 0 or high < low:
            msg = "allocation_jitter_range must satisfy 0 <= low <= high"
            raise ValueError(msg)
        if self.allocation_initial_delay > self.allocation_max_delay:
            msg = "allocation_initial_delay cannot exceed allocation_max_delay"
            raise ValueError(msg)
        return self
