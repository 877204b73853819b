"""
Retry backoff for remote metadata requests.

Hosting APIs (GitHub, GitLab, Bitbucket) rate limit anonymous callers
aggressively. Retries use exponential backoff with jitter and honour
Retry-After. A seeded RNG makes delays deterministic in tests.
"""

from __future__ import annotations

import random
from dataclasses import dataclass


@dataclass
class BackoffConfig:
    """Configuration for exponential backoff."""

    base_delay_ms: int = 500
    max_delay_ms: int = 10000
    multiplier: float = 2.0
    jitter_factor: float = 0.5  # 0.5 = ±50% jitter
    max_retries: int = 2

    def __post_init__(self) -> None:
        if self.base_delay_ms < 0:
            raise ValueError(f"base_delay_ms must be >= 0, got {self.base_delay_ms}")
        if self.max_retries < 0:
            raise ValueError(f"max_retries must be >= 0, got {self.max_retries}")
        if not 0 <= self.jitter_factor <= 1:
            raise ValueError(f"jitter_factor must be in [0, 1], got {self.jitter_factor}")


@dataclass
class BackoffState:
    """Mutable retry state for one logical request."""

    attempt: int = 0

    def record_error(self) -> None:
        self.attempt += 1

    def exhausted(self, config: BackoffConfig) -> bool:
        """True once more errors were recorded than retries allowed."""
        return self.attempt > config.max_retries


def compute_backoff_delay(
    config: BackoffConfig,
    state: BackoffState,
    retry_after_ms: int | None = None,
    *,
    rng: random.Random | None = None,
) -> int:
    """
    Compute the delay before the next attempt.

    Args:
        config: Backoff configuration.
        state: Current retry state.
        retry_after_ms: Server-provided delay (Retry-After header).
        rng: Optional seeded Random instance for deterministic jitter.

    Returns:
        Delay in milliseconds; 0 before the first error.
    """
    if state.attempt == 0:
        return 0

    delay = config.base_delay_ms * (config.multiplier ** (state.attempt - 1))

    jitter_min = 1.0 - config.jitter_factor
    jitter_max = 1.0 + config.jitter_factor
    if rng is not None:
        delay *= rng.uniform(jitter_min, jitter_max)
    else:
        delay *= random.uniform(jitter_min, jitter_max)

    delay = min(delay, config.max_delay_ms)

    if retry_after_ms is not None and retry_after_ms > 0:
        delay = max(delay, min(retry_after_ms, config.max_delay_ms))

    return int(delay)
