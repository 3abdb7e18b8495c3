"""Basic line pacing for channel messages."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable

from loguru import logger


class TokenBucket:
    """A burst of ``limit`` lines, then ``refill_rate`` lines per second."""

    def __init__(
        self,
        limit: int,
        refill_rate: float = 1.0,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if refill_rate <= 0:
            raise ValueError(f"refill_rate must be positive, got {refill_rate}")
        self.limit = max(1, limit)
        self.refill_rate = refill_rate
        self._clock = clock
        self._tokens = float(self.limit)
        self._stamp = clock()

    @property
    def tokens(self) -> float:
        self._top_up()
        return self._tokens

    def try_take(self) -> bool:
        """Take one line's worth if available."""
        self._top_up()
        if self._tokens < 1:
            return False
        self._tokens -= 1
        return True

    def delay(self) -> float:
        """Seconds until the next line may go out."""
        missing = 1 - self.tokens
        return missing / self.refill_rate if missing > 0 else 0.0

    async def wait(self) -> float:
        """Block until a line may go out and take it. Returns the seconds slept."""
        slept = 0.0
        while not self.try_take():
            pause = self.delay()
            logger.debug("Pacing channel lines, sleeping {:.2f}s", pause)
            await asyncio.sleep(pause)
            slept += pause
        return slept

    def _top_up(self) -> None:
        now = self._clock()
        self._tokens = min(float(self.limit), self._tokens + (now - self._stamp) * self.refill_rate)
        self._stamp = now
