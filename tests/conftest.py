"""Pytest configuration and shared fixtures.

Fixtures build a FastAPI application with the toolkit installed:

    app        FastAPI app with install() applied (fresh per test)
    container  the booted service container
    api        the versioned API router
    client     TestClient that renders server errors as 500 responses
"""

import asyncio

import jwt
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from apikit import install
from apikit.core.config import Settings
from apikit.core.container import Container

JWT_SECRET = "test-secret-key-that-is-long-enough-for-hs256"


def accept(version: str = "v1", fmt: str = "json") -> dict[str, str]:
    """Accept header for the test API."""
    return {"Accept": f"application/vnd.acme.{version}+{fmt}"}


def bearer(claims: dict | None = None, secret: str = JWT_SECRET) -> dict[str, str]:
    """Authorization header carrying a signed JWT."""
    token = jwt.encode({"sub": "1", **(claims or {})}, secret, algorithm="HS256")
    return {"Authorization": f"Bearer {token}"}


def make_settings(**overrides) -> Settings:
    """Settings for the test API (vnd.acme, v1, /api prefix)."""
    values = {
        "environment": "testing",
        "standards_tree": "vnd",
        "subtype": "acme",
        "version": "v1",
        "prefix": "/api",
        "jwt_secret": JWT_SECRET,
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def app(settings: Settings) -> FastAPI:
    app = FastAPI()
    install(app, settings)
    return app


@pytest.fixture
def container(app: FastAPI) -> Container:
    return app.state.api_container


@pytest.fixture
def api(container: Container):
    return container.make("api.router")


@pytest.fixture
def client(app: FastAPI) -> TestClient:
    return TestClient(app, raise_server_exceptions=False)


# Pytest markers for different test types
def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Unit tests with mocked dependencies")
    config.addinivalue_line(
        "markers", "integration: Integration tests exercising several components together"
    )
    config.addinivalue_line("markers", "asyncio: Async test that requires event loop")


def pytest_collection_modifyitems(config, items):
    """Automatically add asyncio marker to async test functions."""
    for item in items:
        if asyncio.iscoroutinefunction(getattr(item, "function", None)):
            item.add_marker(pytest.mark.asyncio)
