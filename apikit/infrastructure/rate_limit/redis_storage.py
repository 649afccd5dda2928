"""Redis-backed storage for rate limit counters.

Implements fixed-window counters with ``SET NX EX`` (open window) followed by
``INCR`` and ``TTL`` in one MULTI/EXEC pipeline, so concurrent workers share
the same window.

Fail-open policy:
    ``hit`` and ``attempts`` return Success with an empty window on Redis
    failures, so an outage never blocks requests. ``reset`` reports real
    errors as Failure(RateLimitError).
"""

from __future__ import annotations

from collections.abc import Callable
from time import time
from typing import Any

from redis.exceptions import RedisError

from apikit.core.enums import ErrorCode
from apikit.core.result import Failure, Result, Success
from apikit.domain.errors import RateLimitError
from apikit.domain.value_objects.rate_limit_window import RateLimitWindow


class RedisStorage:
    """Redis storage for fixed-window counters.

    Args:
        redis_client: An async Redis client (redis.asyncio.Redis compatible).
        key_prefix: Namespace prepended to every counter key.
        clock: Time source returning Unix seconds (overridable in tests).
    """

    def __init__(
        self,
        *,
        redis_client: Any,
        key_prefix: str = "apikit:ratelimit:",
        clock: Callable[[], float] = time,
    ) -> None:
        self.redis = redis_client
        self._prefix = key_prefix
        self._clock = clock

    # ---------------------------------------------------------------------
    # Public API
    # ---------------------------------------------------------------------
    async def hit(
        self,
        *,
        key: str,
        expires: int,
    ) -> Result[RateLimitWindow, RateLimitError]:
        """Atomically open the window if needed, then count this request.

        Fail-open:
            On Redis errors, returns Success(RateLimitWindow.empty()).
        """
        ttl_seconds = max(expires, 0) * 60 or 1
        full_key = self._prefix + key
        try:
            pipe = self.redis.pipeline(transaction=True)
            pipe.set(full_key, 0, ex=ttl_seconds, nx=True)
            pipe.incr(full_key)
            pipe.ttl(full_key)
            _, attempts, ttl = await pipe.execute()
            return Success(value=self._window(int(attempts), int(ttl)))
        except RedisError:
            return Success(value=RateLimitWindow.empty())

    async def attempts(self, *, key: str) -> Result[RateLimitWindow, RateLimitError]:
        """Current window without counting a request.

        Fail-open:
            On Redis errors, returns Success(RateLimitWindow.empty()).
        """
        full_key = self._prefix + key
        try:
            pipe = self.redis.pipeline(transaction=True)
            pipe.get(full_key)
            pipe.ttl(full_key)
            raw, ttl = await pipe.execute()
        except RedisError:
            return Success(value=RateLimitWindow.empty())

        if raw is None:
            return Success(value=RateLimitWindow.empty())
        return Success(value=self._window(int(raw), int(ttl)))

    async def reset(self, *, key: str) -> Result[None, RateLimitError]:
        """Delete the counter.

        Unlike hits, resets report real errors to callers.
        """
        try:
            await self.redis.delete(self._prefix + key)
            return Success(value=None)
        except RedisError as exc:
            return Failure(
                error=RateLimitError(
                    code=ErrorCode.RATE_LIMIT_RESET_FAILED,
                    message=f"Failed to reset rate limit for '{key}': {exc}",
                    details={"key": key},
                )
            )

    # ---------------------------------------------------------------------
    # Internal helpers
    # ---------------------------------------------------------------------
    def _window(self, attempts: int, ttl: int) -> RateLimitWindow:
        # TTL is -1 (no expiry) or -2 (missing) in edge cases; report no reset then
        reset_at = int(self._clock()) + ttl if ttl > 0 else 0
        return RateLimitWindow(attempts=max(attempts, 0), reset_at=reset_at)
