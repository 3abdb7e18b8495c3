"""Tests for channel line pacing."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from hookrelay.irc.throttle import TokenBucket


class FakeClock:
    """Monotonic clock that only moves when told to (or when the bucket sleeps)."""

    def __init__(self) -> None:
        self.now = 100.0
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class TestTokenBucket:
    def test_starts_full(self):
        bucket = TokenBucket(limit=10, refill_rate=10.0, clock=FakeClock())

        assert bucket.tokens == 10
        assert bucket.delay() == 0.0

    def test_try_take_fails_when_empty(self):
        bucket = TokenBucket(limit=1, refill_rate=1.0, clock=FakeClock())

        assert bucket.try_take() is True
        assert bucket.try_take() is False

    def test_refills_over_time(self):
        clock = FakeClock()
        bucket = TokenBucket(limit=2, refill_rate=2.0, clock=clock)
        bucket.try_take()
        bucket.try_take()

        clock.now += 0.25

        assert bucket.delay() == pytest.approx(0.25)
        clock.now += 10
        assert bucket.tokens == 2

    def test_limit_is_at_least_one(self):
        bucket = TokenBucket(limit=0, clock=FakeClock())

        assert bucket.limit == 1
        assert bucket.try_take() is True

    def test_rate_must_be_positive(self):
        with pytest.raises(ValueError):
            TokenBucket(limit=1, refill_rate=0)

    @pytest.mark.asyncio
    async def test_wait_does_not_sleep_within_burst(self):
        # Arrange
        clock = FakeClock()
        bucket = TokenBucket(limit=3, refill_rate=1.0, clock=clock)

        # Act
        with patch("hookrelay.irc.throttle.asyncio.sleep", clock.sleep):
            slept = [await bucket.wait() for _ in range(3)]

        # Assert
        assert slept == [0.0, 0.0, 0.0]
        assert clock.sleeps == []

    @pytest.mark.asyncio
    async def test_wait_sleeps_once_burst_is_used(self):
        # Arrange
        clock = FakeClock()
        bucket = TokenBucket(limit=2, refill_rate=4.0, clock=clock)

        # Act
        with patch("hookrelay.irc.throttle.asyncio.sleep", clock.sleep):
            for _ in range(4):
                await bucket.wait()

        # Assert
        assert clock.sleeps == [pytest.approx(0.25), pytest.approx(0.25)]
        assert clock.now == pytest.approx(100.5)
