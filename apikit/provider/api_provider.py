"""Core API service provider.

Registers the toolkit services in the container:

    config            Settings
    api.router        Router
    api.auth          Auth (JWT provider when a secret is configured)
    api.limiting      RateLimitHandler (Redis storage when a URL is configured)
    api.transformer   TransformerFactory with the pydantic adapter
    api.exception     Exception handlers installed on the application
"""

from fastapi import FastAPI

from apikit.core.config import Settings
from apikit.core.container import Container, get_redis
from apikit.domain.protocols.rate_limit_storage_protocol import (
    RateLimitStorageProtocol,
)
from apikit.infrastructure.auth import JWTProvider
from apikit.infrastructure.rate_limit import MemoryStorage, RedisStorage
from apikit.infrastructure.transformer import Manager, PydanticAdapter
from apikit.presentation.auth import Auth
from apikit.presentation.errors import register_exception_handlers
from apikit.presentation.rate_limit import (
    AuthenticatedThrottle,
    RateLimitHandler,
    UnauthenticatedThrottle,
)
from apikit.presentation.routing import Router
from apikit.presentation.transformer import TransformerFactory


class ApiServiceProvider:
    """Register the core API services.

    Args:
        container: Service container.
        app: FastAPI application (exception handlers).
        settings: Toolkit settings.
    """

    def __init__(self, container: Container, app: FastAPI, settings: Settings) -> None:
        self.container = container
        self.app = app
        self.settings = settings

    def register(self) -> None:
        self.container.instance("config", self.settings)

        self.container.singleton(
            "api.router",
            lambda c: Router(c.make("api.router.adapter"), c, c.make("config")),
        )
        self.container.singleton("api.auth", self._make_auth)
        self.container.singleton("api.limiting", self._make_rate_limit_handler)
        self.container.singleton("api.transformer", self._make_transformer_factory)

        self.container.instance(
            "api.exception", register_exception_handlers(self.app, self.settings)
        )

    def _make_auth(self, container: Container) -> Auth:
        providers = {}
        if self.settings.jwt_secret:
            providers["jwt"] = JWTProvider(
                self.settings.jwt_secret, algorithm=self.settings.jwt_algorithm
            )
        return Auth(container.make("api.router"), container, providers)

    def _make_rate_limit_handler(self, container: Container) -> RateLimitHandler:
        storage: RateLimitStorageProtocol
        if self.settings.redis_url:
            storage = RedisStorage(redis_client=get_redis(self.settings.redis_url))
        else:
            storage = MemoryStorage()

        throttles = [
            AuthenticatedThrottle(
                limit=self.settings.throttle_authenticated_limit,
                expires=self.settings.throttle_authenticated_expires,
            ),
            UnauthenticatedThrottle(
                limit=self.settings.throttle_unauthenticated_limit,
                expires=self.settings.throttle_unauthenticated_expires,
            ),
        ]
        return RateLimitHandler(container, storage, throttles)

    def _make_transformer_factory(self, container: Container) -> TransformerFactory:
        adapter = PydanticAdapter(
            Manager(),
            include_key=self.settings.include_key,
            include_separator=self.settings.include_separator,
            eager_loading=self.settings.eager_loading,
        )
        return TransformerFactory(container, adapter)
