"""Authentication route middleware (``api.auth``).

Runs as a FastAPI route dependency on every API route and authenticates
protected routes with the route's auth providers.
"""

from starlette.requests import Request

from apikit.core.container import Container


class AuthMiddleware:
    """Authenticate requests to protected routes.

    Args:
        container: Service container providing "api.router" and "api.auth".
    """

    def __init__(self, container: Container) -> None:
        self.container = container

    async def __call__(self, request: Request) -> None:
        router = self.container.make("api.router")
        auth = self.container.make("api.auth")

        route = router.get_current_route(request)
        if route is None or not route.is_protected() or auth.check(request):
            return

        await auth.authenticate(request, route.get_auth_providers())
