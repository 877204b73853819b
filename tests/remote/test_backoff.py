"""Tests for retry backoff."""

from __future__ import annotations

import random

import pytest

from caskaudit.remote import BackoffConfig, BackoffState, compute_backoff_delay


class TestBackoffConfig:
    """Tests for BackoffConfig."""

    def test_default_values(self) -> None:
        config = BackoffConfig()
        assert config.base_delay_ms == 500
        assert config.max_delay_ms == 10000
        assert config.multiplier == 2.0
        assert config.jitter_factor == 0.5
        assert config.max_retries == 2

    @pytest.mark.parametrize(
        "kwargs",
        [{"base_delay_ms": -1}, {"max_retries": -1}, {"jitter_factor": 1.5}],
    )
    def test_validation(self, kwargs: dict[str, float]) -> None:
        with pytest.raises(ValueError):
            BackoffConfig(**kwargs)  # type: ignore[arg-type]


class TestBackoffState:
    """Tests for BackoffState."""

    def test_exhausted(self) -> None:
        config = BackoffConfig(max_retries=1)
        state = BackoffState()
        state.record_error()
        assert not state.exhausted(config)
        state.record_error()
        assert state.exhausted(config)


class TestComputeBackoffDelay:
    """Tests for compute_backoff_delay."""

    def test_no_delay_before_first_error(self) -> None:
        assert compute_backoff_delay(BackoffConfig(), BackoffState()) == 0

    def test_exponential_growth_without_jitter(self) -> None:
        config = BackoffConfig(base_delay_ms=100, jitter_factor=0.0)
        state = BackoffState()
        delays = []
        for _ in range(3):
            state.record_error()
            delays.append(compute_backoff_delay(config, state))
        assert delays == [100, 200, 400]

    def test_capped_at_max(self) -> None:
        config = BackoffConfig(base_delay_ms=1000, max_delay_ms=1500, jitter_factor=0.0)
        state = BackoffState(attempt=5)
        assert compute_backoff_delay(config, state) == 1500

    def test_retry_after_respected(self) -> None:
        config = BackoffConfig(base_delay_ms=100, jitter_factor=0.0)
        state = BackoffState(attempt=1)
        assert compute_backoff_delay(config, state, retry_after_ms=3000) == 3000

    def test_seeded_jitter_deterministic(self) -> None:
        config = BackoffConfig()
        state = BackoffState(attempt=2)
        first = compute_backoff_delay(config, state, rng=random.Random(42))
        second = compute_backoff_delay(config, state, rng=random.Random(42))
        assert first == second
        assert 500 <= first <= 1500
