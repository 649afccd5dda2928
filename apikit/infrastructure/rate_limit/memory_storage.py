"""In-memory storage for rate limit counters.

Suitable for single-process deployments and tests. Counters live in a dict
keyed by throttle key. Expired windows are swept on the next hit after the
earliest one closes.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from time import time

from apikit.core.result import Result, Success
from apikit.domain.errors import RateLimitError
from apikit.domain.value_objects.rate_limit_window import RateLimitWindow


@dataclass(slots=True)
class _Counter:
    attempts: int
    reset_at: float


class MemoryStorage:
    """Process-local fixed-window counters.

    Args:
        clock: Time source returning Unix seconds (overridable in tests).
    """

    def __init__(self, *, clock: Callable[[], float] = time) -> None:
        self._clock = clock
        self._counters: dict[str, _Counter] = {}
        self._lock = asyncio.Lock()
        self._next_expiry = float("inf")

    def __len__(self) -> int:
        """Number of tracked counters, expired ones included until the next sweep."""
        return len(self._counters)

    async def hit(
        self,
        *,
        key: str,
        expires: int,
    ) -> Result[RateLimitWindow, RateLimitError]:
        """Record one request for key inside a window of ``expires`` minutes."""
        async with self._lock:
            now = self._clock()
            if now >= self._next_expiry:
                self._sweep(now)
            counter = self._live_counter(key, now)
            if counter is None:
                counter = _Counter(attempts=0, reset_at=now + max(expires, 0) * 60)
                self._counters[key] = counter
                self._next_expiry = min(self._next_expiry, counter.reset_at)
            counter.attempts += 1
            return Success(value=self._window(counter))

    async def attempts(self, *, key: str) -> Result[RateLimitWindow, RateLimitError]:
        """Current window for key without recording a request."""
        counter = self._live_counter(key, self._clock())
        if counter is None:
            return Success(value=RateLimitWindow.empty())
        return Success(value=self._window(counter))

    async def reset(self, *, key: str) -> Result[None, RateLimitError]:
        """Drop the counter for key."""
        async with self._lock:
            self._counters.pop(key, None)
        return Success(value=None)

    def _sweep(self, now: float) -> None:
        self._counters = {
            key: counter for key, counter in self._counters.items() if counter.reset_at > now
        }
        self._next_expiry = min(
            (counter.reset_at for counter in self._counters.values()), default=float("inf")
        )

    def _live_counter(self, key: str, now: float) -> _Counter | None:
        counter = self._counters.get(key)
        if counter is not None and counter.reset_at <= now:
            del self._counters[key]
            return None
        return counter

    @staticmethod
    def _window(counter: _Counter) -> RateLimitWindow:
        return RateLimitWindow(attempts=counter.attempts, reset_at=int(counter.reset_at))
