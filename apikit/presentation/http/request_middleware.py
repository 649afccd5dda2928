"""Request middleware: API request detection and content negotiation.

Runs as the outermost user middleware. For API requests it:
- parses the Accept header into the negotiated version and format
- rejects unsupported formats (406) and, in strict mode, unparsable headers (400)
- marks the scope so versioned routes can match
- binds the request to a context variable for endpoint wrappers
- binds the negotiated version and format to the structlog context
- adds headers queued by route middleware to the response

Non-API requests pass through untouched.

Usage:
    from starlette.middleware import Middleware

    app.user_middleware.insert(0, Middleware(RequestMiddleware, settings=settings))
"""

import structlog
from starlette.datastructures import MutableHeaders
from starlette.requests import Request
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from apikit.core.config import Settings, get_settings
from apikit.core.container import get_logger
from apikit.presentation.errors.error_response_builder import ErrorResponseBuilder
from apikit.presentation.errors.exceptions import (
    BadRequestHttpException,
    NotAcceptableHttpException,
)
from apikit.presentation.http.accept_parser import AcceptParser
from apikit.presentation.http.context import (
    API_SCOPE_KEY,
    get_queued_headers,
    request_context,
)
from apikit.presentation.http.validation import ApiRequestValidator


class RequestMiddleware:
    """Pure ASGI middleware negotiating API requests.

    Args:
        app: The ASGI application to wrap.
        settings: Toolkit settings (defaults to the cached settings).
    """

    def __init__(self, app: ASGIApp, settings: Settings | None = None) -> None:
        self.app = app
        self.settings = settings or get_settings()
        self.validator = ApiRequestValidator(
            prefix=self.settings.prefix, domain=self.settings.domain
        )
        self.parser = AcceptParser(
            standards_tree=self.settings.standards_tree,
            subtype=self.settings.subtype,
            version=self.settings.version,
            format=self.settings.default_format,
        )
        self.builder = ErrorResponseBuilder(self.settings.errors_base_url)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http" or not self.validator.validate(scope):
            await self.app(scope, receive, send)
            return

        request = Request(scope, receive)

        try:
            accept = self.parser.parse(
                request.headers.get("accept"), strict=self.settings.strict
            )
            if accept.format not in self.settings.formats:
                raise NotAcceptableHttpException()
        except (BadRequestHttpException, NotAcceptableHttpException) as exc:
            get_logger().info(
                "API request rejected during negotiation",
                path=request.url.path,
                status_code=exc.status_code,
                accept=request.headers.get("accept"),
            )
            response = self.builder.build(
                status_code=exc.status_code,
                detail=str(exc.detail),
                instance=request.url.path,
            )
            await response(scope, receive, send)
            return

        scope[API_SCOPE_KEY] = accept

        async def send_with_queued_headers(message: Message) -> None:
            if message["type"] == "http.response.start":
                queued = get_queued_headers(scope)
                if queued:
                    headers = MutableHeaders(scope=message)
                    for name, value in queued.items():
                        headers[name] = value
            await send(message)

        token = request_context.set(request)
        try:
            with structlog.contextvars.bound_contextvars(
                api_version=accept.version, api_format=accept.format
            ):
                await self.app(scope, receive, send_with_queued_headers)
        finally:
            request_context.reset(token)
