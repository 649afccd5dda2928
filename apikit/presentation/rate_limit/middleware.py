"""Rate limit route middleware (``api.limiting``).

Runs as a FastAPI route dependency on every API route, after authentication
so that authenticated throttles can match.

Response Headers:
    - X-RateLimit-Limit: Requests allowed per window
    - X-RateLimit-Remaining: Requests left in the window
    - X-RateLimit-Reset: Unix timestamp when the window resets
    - Retry-After: Seconds until the window resets (on 429)
"""

from starlette.requests import Request

from apikit.core.container import Container, get_logger
from apikit.presentation.errors.exceptions import RateLimitExceededException
from apikit.presentation.http.context import queue_response_headers


class RateLimitMiddleware:
    """Throttle requests to API routes.

    Args:
        container: Service container providing "api.router" and "api.limiting".
    """

    def __init__(self, container: Container) -> None:
        self.container = container

    async def __call__(self, request: Request) -> None:
        router = self.container.make("api.router")
        handler = self.container.make("api.limiting")

        route = router.get_current_route(request)
        if route is None:
            return

        if route.has_throttle():
            handler.set_throttle(route.get_throttle())

        await handler.rate_limit_request(
            request, route.get_rate_limit(), route.get_rate_expiration()
        )

        if not handler.request_was_rate_limited():
            return

        headers = {
            "X-RateLimit-Limit": str(handler.get_throttle_limit()),
            "X-RateLimit-Remaining": str(handler.get_remaining_limit()),
            "X-RateLimit-Reset": str(handler.get_rate_limit_reset()),
        }
        queue_response_headers(request, headers)

        if handler.exceeded_rate_limit():
            get_logger().warning(
                "Rate limit exceeded",
                path=request.url.path,
                throttle=repr(handler.get_throttle()),
                limit=handler.get_throttle_limit(),
            )
            raise RateLimitExceededException(handler.get_retry_after(), headers=headers)
