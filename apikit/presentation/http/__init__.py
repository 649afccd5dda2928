"""HTTP layer: API request detection, Accept negotiation and request context.

Exports:
    AcceptParser: Parse vendor media types
    ApiRequestValidator: Decide whether a request targets the API
    RequestMiddleware: Outermost ASGI middleware for API requests
    get_accept, get_current_request, queue_response_headers: Request context helpers
"""

from apikit.presentation.http.accept_parser import AcceptParser
from apikit.presentation.http.context import (
    get_accept,
    get_current_request,
    queue_response_headers,
)
from apikit.presentation.http.request_middleware import RequestMiddleware
from apikit.presentation.http.validation import ApiRequestValidator

__all__ = [
    "AcceptParser",
    "ApiRequestValidator",
    "RequestMiddleware",
    "get_accept",
    "get_current_request",
    "queue_response_headers",
]
