"""Rate limit storage protocol (port) for fixed-window request counters.

Throttles count requests per client inside a window of ``expires`` minutes.
Storage adapters keep those counters (in-memory for single-process apps and
tests, Redis for shared deployments).

Usage:
    from apikit.domain.protocols import RateLimitStorageProtocol

    result = await storage.hit(key="api:throttle:127.0.0.1", expires=1)
    match result:
        case Success(value=window):
            exceeded = window.attempts > limit
"""

from typing import Protocol

from apikit.core.result import Result
from apikit.domain.errors import RateLimitError
from apikit.domain.value_objects.rate_limit_window import RateLimitWindow


class RateLimitStorageProtocol(Protocol):
    """Protocol for fixed-window counter storage.

    Fail-Open Design:
        On infrastructure errors ``hit`` MUST return Success with an empty
        window (zero attempts) so that storage outages never block requests.
        Failure is reserved for operations whose outcome callers must know
        (reset).
    """

    async def hit(
        self,
        *,
        key: str,
        expires: int,
    ) -> Result[RateLimitWindow, RateLimitError]:
        """Record one request and return the window state.

        Creates the counter with a TTL of ``expires`` minutes when absent,
        then increments it.

        Args:
            key: Counter key (throttle key plus client identifier).
            expires: Window length in minutes.

        Returns:
            Success(RateLimitWindow) with attempts after this hit.
        """
        ...

    async def attempts(self, *, key: str) -> Result[RateLimitWindow, RateLimitError]:
        """Return the current window without recording a request."""
        ...

    async def reset(self, *, key: str) -> Result[None, RateLimitError]:
        """Drop the counter for a key.

        Returns:
            Success(None) or Failure(RateLimitError) when storage fails.
        """
        ...
