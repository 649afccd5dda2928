"""Per-request API context.

- ``scope["api"]`` holds the negotiated Accept value for API requests
- ``request_context`` exposes the current Request to endpoint wrappers
- Route middleware queue response headers (rate limit headers) on the request
  state; the request middleware adds them to whatever response is sent
"""

from __future__ import annotations

from collections.abc import Mapping
from contextvars import ContextVar
from typing import Any

from starlette.requests import Request

from apikit.domain.value_objects.accept import Accept

API_SCOPE_KEY = "api"
HEADERS_STATE_KEY = "api_headers"

request_context: ContextVar[Request | None] = ContextVar("api_request", default=None)


def get_current_request() -> Request | None:
    """Return the current API request.

    Returns None when called outside of an API request.
    """
    return request_context.get()


def get_accept(scope: Mapping[str, Any]) -> Accept | None:
    """Negotiated Accept value, or None for non-API requests."""
    accept = scope.get(API_SCOPE_KEY)
    return accept if isinstance(accept, Accept) else None


def queue_response_headers(request: Request, headers: Mapping[str, str]) -> None:
    """Queue headers to be added to the response for this request."""
    queued: dict[str, str] = request.scope.setdefault("state", {}).setdefault(
        HEADERS_STATE_KEY, {}
    )
    queued.update(headers)


def get_queued_headers(scope: Mapping[str, Any]) -> dict[str, str]:
    """Headers queued for the response of this request."""
    return dict(scope.get("state", {}).get(HEADERS_STATE_KEY, {}))
