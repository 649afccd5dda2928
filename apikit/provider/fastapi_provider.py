"""FastAPI service provider.

Integrates the toolkit with a FastAPI application:
- registers the request middleware as the outermost user middleware
- registers the core API services
- registers the FastAPI router adapter
- on boot, registers the ``api.auth`` and ``api.limiting`` route middleware

Usage:
    app = FastAPI()
    container = Container()
    provider = container.register(FastAPIServiceProvider(app, container))
    container.boot()
"""

from fastapi import FastAPI
from starlette.middleware import Middleware

from apikit.core.config import Settings, get_settings
from apikit.core.container import Container, get_logger
from apikit.presentation.auth import AuthMiddleware
from apikit.presentation.http import RequestMiddleware
from apikit.presentation.rate_limit import RateLimitMiddleware
from apikit.presentation.routing import FastAPIAdapter
from apikit.provider.api_provider import ApiServiceProvider


class FastAPIServiceProvider:
    """Register the toolkit on a FastAPI application.

    Args:
        app: FastAPI application.
        container: Service container.
        settings: Toolkit settings (defaults to the cached settings).
    """

    def __init__(
        self, app: FastAPI, container: Container, settings: Settings | None = None
    ) -> None:
        self.app = app
        self.container = container
        self.settings = settings or get_settings()

    def register(self) -> None:
        self.container.instance("app", self.app)
        self.container.instance("app.middleware", self.gather_app_middleware())

        self.app.user_middleware.insert(
            0, Middleware(RequestMiddleware, settings=self.settings)
        )
        # Rebuilt on the next request with the request middleware in place
        self.app.middleware_stack = None

        self.container.register(ApiServiceProvider(self.container, self.app, self.settings))

        self.container.singleton("api.router.adapter", lambda c: FastAPIAdapter(self.app))

    def boot(self) -> None:
        self.container.route_middleware(
            {
                "api.auth": AuthMiddleware,
                "api.limiting": RateLimitMiddleware,
            }
        )

        get_logger().info(
            "API service provider booted",
            prefix=self.settings.prefix,
            domain=self.settings.domain,
            default_version=self.settings.version,
            strict=self.settings.strict,
        )

    def gather_app_middleware(self) -> list[Middleware]:
        """The application's user middleware registered so far."""
        return list(self.app.user_middleware)
