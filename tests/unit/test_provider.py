"""Unit tests for the service providers and install()."""

import pytest
from fastapi import FastAPI
from starlette.middleware import Middleware
from starlette.middleware.gzip import GZipMiddleware

from apikit import install
from apikit.infrastructure.rate_limit import MemoryStorage, RedisStorage
from apikit.presentation.auth import Auth, AuthMiddleware
from apikit.presentation.errors import ExceptionHandlers
from apikit.presentation.http import RequestMiddleware
from apikit.presentation.rate_limit import RateLimitHandler, RateLimitMiddleware
from apikit.presentation.routing import FastAPIAdapter, Router
from apikit.presentation.transformer import TransformerFactory
from tests.conftest import make_settings


@pytest.mark.unit
class TestInstall:
    def test_registers_services(self, settings):
        """Should bind every toolkit service."""
        app = FastAPI()
        container = install(app, settings)

        assert container.make("config") is settings
        assert container.make("app") is app
        assert isinstance(container.make("api.router"), Router)
        assert isinstance(container.make("api.router.adapter"), FastAPIAdapter)
        assert isinstance(container.make("api.auth"), Auth)
        assert isinstance(container.make("api.limiting"), RateLimitHandler)
        assert isinstance(container.make("api.transformer"), TransformerFactory)
        assert isinstance(container.make("api.exception"), ExceptionHandlers)
        assert container.make("api.router") is container.make("api.router")
        assert app.state.api_container is container
        assert container.is_booted

    def test_request_middleware_is_outermost(self, settings):
        """Should prepend the request middleware and keep the earlier list."""
        app = FastAPI()
        app.add_middleware(GZipMiddleware)

        container = install(app, settings)

        assert app.user_middleware[0].cls is RequestMiddleware
        assert [m.cls for m in container.make("app.middleware")] == [GZipMiddleware]
        assert all(isinstance(m, Middleware) for m in container.make("app.middleware"))

    def test_route_middleware(self, container):
        """Should register the auth and limiting route middleware on boot."""
        assert sorted(container.get_route_middleware_names()) == ["api.auth", "api.limiting"]
        assert isinstance(container.get_route_middleware("api.auth"), AuthMiddleware)
        assert isinstance(container.get_route_middleware("api.limiting"), RateLimitMiddleware)

    def test_jwt_provider_from_settings(self, container):
        """Should configure the JWT provider when a secret is set."""
        assert list(container.make("api.auth").get_providers()) == ["jwt"]

    def test_no_providers_without_secret(self):
        """Should start without providers when no secret is set."""
        container = install(FastAPI(), make_settings(jwt_secret=None))

        assert container.make("api.auth").get_providers() == {}

    def test_memory_storage_by_default(self, container):
        """Should count in memory without a Redis URL."""
        assert isinstance(container.make("api.limiting").storage, MemoryStorage)

    def test_redis_storage_with_url(self):
        """Should count in Redis when a URL is configured."""
        container = install(FastAPI(), make_settings(redis_url="redis://localhost:6379/15"))

        assert isinstance(container.make("api.limiting").storage, RedisStorage)

    def test_configured_throttles(self):
        """Should build the authenticated and unauthenticated throttles."""
        container = install(
            FastAPI(),
            make_settings(throttle_authenticated_limit=100, throttle_unauthenticated_limit=10),
        )

        limits = [t.get_limit() for t in container.make("api.limiting").get_throttles()]
        assert limits == [100, 10]
