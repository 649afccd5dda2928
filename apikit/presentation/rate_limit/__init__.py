"""Rate limiting: throttles, handler and route middleware.

Usage:
    from apikit.presentation.rate_limit import RateLimitHandler, Throttle
"""

from apikit.presentation.rate_limit.handler import RateLimitHandler
from apikit.presentation.rate_limit.middleware import RateLimitMiddleware
from apikit.presentation.rate_limit.throttles import (
    AuthenticatedThrottle,
    RouteThrottle,
    Throttle,
    UnauthenticatedThrottle,
)

__all__ = [
    "AuthenticatedThrottle",
    "RateLimitHandler",
    "RateLimitMiddleware",
    "RouteThrottle",
    "Throttle",
    "UnauthenticatedThrottle",
]
