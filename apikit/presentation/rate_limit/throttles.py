"""Rate limit throttles.

A throttle decides whether it applies to a request and how many requests it
allows per window of ``expires`` minutes.

Usage:
    class PartnerThrottle(Throttle):
        key = "partner"

        def match(self, container, request):
            return request.headers.get("X-Partner-Id") is not None

    container.make("api.limiting").extend(PartnerThrottle(limit=1000, expires=1))
"""

from starlette.requests import Request

from apikit.core.container import Container


class Throttle:
    """Base throttle.

    Args:
        limit: Requests allowed per window.
        expires: Window length in minutes.
    """

    key = "throttle"

    def __init__(self, limit: int = 60, expires: int = 60) -> None:
        self.limit = limit
        self.expires = expires

    def match(self, container: Container, request: Request) -> bool:
        """Whether the throttle applies to the request."""
        return True

    def get_limit(self) -> int:
        return self.limit

    def get_expires(self) -> int:
        return self.expires

    def __repr__(self) -> str:
        return f"{type(self).__name__}(limit={self.limit}, expires={self.expires})"


class AuthenticatedThrottle(Throttle):
    """Applies to authenticated requests."""

    key = "authenticated"

    def match(self, container: Container, request: Request) -> bool:
        return container.make("api.auth").check(request)


class UnauthenticatedThrottle(Throttle):
    """Applies to unauthenticated requests."""

    key = "unauthenticated"

    def match(self, container: Container, request: Request) -> bool:
        return not container.make("api.auth").check(request)


class RouteThrottle(Throttle):
    """Route-specific limit declared on the route or its controller."""

    key = "route"
