"""
RateLimiter - Minimum-interval pacing for remote ledger calls.

Calls are spaced out one after another, never fired in parallel. Delays of
0 disable pacing.
"""

import asyncio
import time
from typing import Awaitable, Callable, Optional


class RateLimiter:
    """
    Enforces `min_interval` seconds between consecutive acquire() calls.

    Not a lock: concurrent requests each own their limiter, only the calls
    within one fetch loop are paced.
    """

    def __init__(
        self,
        min_interval: float,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    ):
        if min_interval < 0:
            raise ValueError("min_interval must be >= 0")
        self.min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._last: Optional[float] = None

    async def acquire(self) -> None:
        """Wait until at least min_interval has passed since the previous call."""
        if self._last is not None and self.min_interval > 0:
            elapsed = self._clock() - self._last
            remaining = self.min_interval - elapsed
            if remaining > 0:
                await self._sleep(remaining)
        self._last = self._clock()

    async def pause(self, seconds: float) -> None:
        """Explicit extra pause (between chunks) that also resets the interval."""
        if seconds > 0:
            await self._sleep(seconds)
        self._last = self._clock()
