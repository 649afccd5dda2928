"""Rate limit handler.

Selects the throttle for a request, counts the request in a fixed window and
reports the limit state used for the ``X-RateLimit-*`` headers.

Throttle selection:
    1. a throttle set for the route (``set_throttle``)
    2. a route-specific limit/expires, as a RouteThrottle keyed by path
    3. the matching configured throttle with the highest limit

A selected throttle with a limit of 0 or less disables limiting.

State is tracked per request context, so one handler serves concurrent
requests.
"""

import hashlib
from collections.abc import Callable, Sequence
from contextvars import ContextVar
from dataclasses import dataclass, field
from time import time
from typing import Any

from starlette.requests import Request

from apikit.core.container import Container
from apikit.core.result import Success
from apikit.domain.protocols.rate_limit_storage_protocol import (
    RateLimitStorageProtocol,
)
from apikit.domain.value_objects.rate_limit_window import RateLimitWindow
from apikit.presentation.rate_limit.throttles import RouteThrottle, Throttle

RateLimiter = Callable[[Container, Request], str]


@dataclass(slots=True)
class _RequestLimit:
    throttle: Throttle | None = None
    key: str = ""
    window: RateLimitWindow = field(default_factory=RateLimitWindow.empty)


def client_ip(container: Container, request: Request) -> str:
    """Default rate limiter: the client address."""
    return request.client.host if request.client else "unknown"


class RateLimitHandler:
    """Apply throttles to requests.

    Args:
        container: Service container (throttle matching, throttle paths).
        storage: Counter storage.
        throttles: Configured throttles.
    """

    def __init__(
        self,
        container: Container,
        storage: RateLimitStorageProtocol,
        throttles: Sequence[Throttle] = (),
        *,
        clock: Callable[[], float] = time,
    ) -> None:
        self.container = container
        self.storage = storage
        self.throttles: list[Throttle] = list(throttles)
        self.limiter: RateLimiter = client_ip
        self._clock = clock
        self._state: ContextVar[_RequestLimit | None] = ContextVar(
            f"rate_limit_{id(self)}", default=None
        )
        self._route_throttle: ContextVar[Throttle | None] = ContextVar(
            f"route_throttle_{id(self)}", default=None
        )

    async def rate_limit_request(self, request: Request, limit: int = 0, expires: int = 0) -> None:
        """Select a throttle for the request and count the request.

        Args:
            request: Incoming request.
            limit: Route-specific limit (0 when none).
            expires: Route-specific window in minutes (0 when none).
        """
        key_prefix = ""
        throttle = self._route_throttle.get()
        self._route_throttle.set(None)

        if throttle is None and (limit > 0 or expires > 0):
            throttle = RouteThrottle(limit=limit, expires=expires)
            key_prefix = hashlib.sha1(request.url.path.encode("utf-8")).hexdigest() + ":"
        elif throttle is None:
            throttle = self.get_matching_throttle(request)

        if throttle is None or throttle.get_limit() <= 0:
            self._state.set(_RequestLimit())
            return

        key = f"api:{throttle.key}:{key_prefix}{self.limiter(self.container, request)}"
        match await self.storage.hit(key=key, expires=throttle.get_expires()):
            case Success(value=hit):
                window = hit
            case _:
                # Fail-open
                window = RateLimitWindow.empty()

        self._state.set(_RequestLimit(throttle=throttle, key=key, window=window))

    async def get_attempts(self) -> int:
        """Attempts stored for the current request's counter, without counting."""
        state = self._state.get()
        if state is None or state.throttle is None:
            return 0
        match await self.storage.attempts(key=state.key):
            case Success(value=window):
                return window.attempts
            case _:
                return 0

    async def clear(self) -> None:
        """Forget the counter used for the current request.

        Lets an endpoint give the client a fresh window, for example after
        a successful login that was throttled per client address.
        """
        state = self._state.get()
        if state is None or state.throttle is None:
            return
        await self.storage.reset(key=state.key)

    def get_matching_throttle(self, request: Request) -> Throttle | None:
        """Matching configured throttle with the highest limit."""
        matching = [t for t in self.throttles if t.match(self.container, request)]
        matching.sort(key=lambda t: t.get_limit(), reverse=True)
        return matching[0] if matching else None

    def request_was_rate_limited(self) -> bool:
        """Whether a throttle was applied to the current request."""
        state = self._state.get()
        return state is not None and state.throttle is not None

    def exceeded_rate_limit(self) -> bool:
        """Whether the current request exceeded its throttle."""
        state = self._state.get()
        if state is None or state.throttle is None:
            return False
        return state.window.attempts > state.throttle.get_limit()

    def get_throttle(self) -> Throttle | None:
        state = self._state.get()
        return state.throttle if state is not None else None

    def get_throttle_limit(self) -> int:
        throttle = self.get_throttle()
        return throttle.get_limit() if throttle is not None else 0

    def get_remaining_limit(self) -> int:
        state = self._state.get()
        if state is None or state.throttle is None:
            return 0
        return max(state.throttle.get_limit() - state.window.attempts, 0)

    def get_rate_limit_reset(self) -> int:
        """Unix timestamp when the current window resets."""
        state = self._state.get()
        if state is None or state.throttle is None:
            return 0
        return state.window.reset_at or int(self._clock()) + state.throttle.get_expires() * 60

    def get_retry_after(self) -> int:
        """Seconds until the current window resets."""
        return max(self.get_rate_limit_reset() - int(self._clock()), 0)

    def set_throttle(self, throttle: Any) -> None:
        """Use a throttle (instance, class or container path) for the current request."""
        if isinstance(throttle, (str, type)):
            throttle = self.container.make(throttle)
        self._route_throttle.set(throttle)

    def set_rate_limiter(self, limiter: RateLimiter) -> None:
        """Replace the client identifier used in counter keys."""
        self.limiter = limiter

    def extend(self, throttle: Throttle | Callable[[Container], Throttle]) -> None:
        """Add a throttle (or a factory receiving the container)."""
        if not isinstance(throttle, Throttle):
            throttle = throttle(self.container)
        self.throttles.append(throttle)

    def get_throttles(self) -> list[Throttle]:
        return list(self.throttles)
