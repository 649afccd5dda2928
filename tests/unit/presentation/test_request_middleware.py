"""Unit tests for the API request middleware."""

import pytest
import structlog
from starlette.applications import Starlette
from starlette.middleware import Middleware
from starlette.responses import JSONResponse
from starlette.routing import Route
from starlette.testclient import TestClient

from apikit.presentation.http import (
    RequestMiddleware,
    get_accept,
    get_current_request,
    queue_response_headers,
)
from tests.conftest import accept, make_settings


async def echo(request):
    negotiated = get_accept(request.scope)
    queue_response_headers(request, {"X-Echo": "yes"})
    return JSONResponse(
        {
            "version": negotiated.version if negotiated else None,
            "format": negotiated.format if negotiated else None,
            "bound": get_current_request() is not None,
        }
    )


async def log_context(request):
    return JSONResponse(structlog.contextvars.get_contextvars())


def make_client(**overrides) -> TestClient:
    app = Starlette(
        routes=[
            Route("/api/echo", echo),
            Route("/web/echo", echo),
            Route("/api/log-context", log_context),
        ],
        middleware=[Middleware(RequestMiddleware, settings=make_settings(**overrides))],
    )
    return TestClient(app)


@pytest.mark.unit
class TestNegotiation:
    def test_negotiates_api_requests(self):
        """Should expose the negotiated Accept value to the application."""
        response = make_client().get("/api/echo", headers=accept("v2"))

        assert response.status_code == 200
        assert response.json() == {"version": "v2", "format": "json", "bound": True}

    def test_defaults_without_header(self):
        """Should fall back to the default version."""
        response = make_client().get("/api/echo")

        assert response.json()["version"] == "v1"

    def test_passes_through_non_api_requests(self):
        """Should leave non-API requests untouched."""
        response = make_client().get("/web/echo", headers=accept("v2"))

        assert response.json() == {"version": None, "format": None, "bound": False}

    def test_unsupported_format(self):
        """Should answer 406 for formats the API cannot produce."""
        response = make_client().get("/api/echo", headers=accept("v1", "xml"))

        assert response.status_code == 406
        assert response.headers["content-type"] == "application/problem+json"
        assert response.json()["instance"] == "/api/echo"

    def test_strict_mode(self):
        """Should answer 400 to unparsable headers in strict mode."""
        response = make_client(strict=True).get("/api/echo", headers={"Accept": "application/json"})

        assert response.status_code == 400
        assert "strict matching" in response.json()["detail"]

    def test_strict_mode_ignores_non_api_requests(self):
        """Should not apply strict parsing outside the API."""
        response = make_client(strict=True).get("/web/echo")

        assert response.status_code == 200


@pytest.mark.unit
class TestQueuedHeaders:
    def test_adds_queued_headers(self):
        """Should add headers queued during the request."""
        response = make_client().get("/api/echo")

        assert response.headers["X-Echo"] == "yes"

    def test_non_api_requests_keep_headers_unchanged(self):
        """Should not add queued headers to non-API responses."""
        response = make_client().get("/web/echo")

        assert "X-Echo" not in response.headers


@pytest.mark.unit
class TestLogContext:
    def test_binds_negotiated_version(self):
        """Should bind the negotiated version and format for log records."""
        response = make_client().get("/api/log-context", headers=accept("v2"))

        assert response.json()["api_version"] == "v2"
        assert response.json()["api_format"] == "json"

    def test_unbinds_after_request(self):
        """Should not leak the bound context past the request."""
        make_client().get("/api/log-context", headers=accept("v2"))

        assert "api_version" not in structlog.contextvars.get_contextvars()
