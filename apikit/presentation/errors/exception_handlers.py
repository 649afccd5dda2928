"""Global exception handlers for FastAPI applications using the toolkit.

Handlers:
    http_exception_handler: HTTPException (Starlette and FastAPI) to RFC 9457
    validation_exception_handler: RequestValidationError to RFC 9457 with field errors
    generic_exception_handler: Unhandled exceptions to RFC 9457 500

Exports:
    register_exception_handlers: Register all handlers with a FastAPI app
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from apikit.core.config import Settings
from apikit.core.container import get_logger
from apikit.presentation.errors.error_response_builder import ErrorResponseBuilder
from apikit.presentation.errors.problem_details import ErrorDetail
from apikit.presentation.http.context import get_accept, get_queued_headers


def _version(request: Request) -> str | None:
    accept = get_accept(request.scope)
    return accept.version if accept is not None else None


class ExceptionHandlers:
    """Exception handlers bound to toolkit settings.

    Args:
        settings: Toolkit settings (error type base URL, debug flag).
    """

    def __init__(self, settings: Settings) -> None:
        self.settings = settings
        self.builder = ErrorResponseBuilder(settings.errors_base_url)

    async def http_exception_handler(self, request: Request, exc: Exception) -> JSONResponse:
        """Convert HTTPException to RFC 9457 Problem Details response.

        Headers on the exception (WWW-Authenticate, Retry-After,
        X-RateLimit-*) are preserved.
        """
        assert isinstance(exc, StarletteHTTPException)

        return self.builder.build(
            status_code=exc.status_code,
            detail=exc.detail if isinstance(exc.detail, str) else str(exc.detail),
            instance=str(request.url.path),
            headers=getattr(exc, "headers", None),
            version=_version(request),
        )

    async def validation_exception_handler(
        self, request: Request, exc: Exception
    ) -> JSONResponse:
        """Convert RequestValidationError to RFC 9457 with field-level errors."""
        assert isinstance(exc, RequestValidationError)

        field_errors: list[ErrorDetail] = []
        for error in exc.errors():
            loc = error.get("loc", [])
            field_parts = [str(p) for p in loc if p != "body"]
            field_errors.append(
                ErrorDetail(
                    field=".".join(field_parts) if field_parts else "unknown",
                    code=error.get("type", "validation_error"),
                    message=error.get("msg", "Validation failed"),
                )
            )

        return self.builder.build(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="Request validation failed. Check 'errors' for details.",
            instance=str(request.url.path),
            errors=field_errors,
            version=_version(request),
        )

    async def generic_exception_handler(self, request: Request, exc: Exception) -> JSONResponse:
        """Handle unexpected exceptions without leaking internals (unless debug).

        Sent from outside the request middleware, so headers queued by route
        middleware (X-RateLimit-*) are added here.
        """
        get_logger().error(
            "Unhandled exception",
            error=exc,
            request_path=request.url.path,
            request_method=request.method,
        )

        detail = "An unexpected error occurred."
        if self.settings.debug:
            detail = f"{type(exc).__name__}: {exc}"

        return self.builder.build(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
            instance=str(request.url.path),
            headers=get_queued_headers(request.scope) or None,
            version=_version(request),
        )


def register_exception_handlers(app: FastAPI, settings: Settings) -> ExceptionHandlers:
    """Register all exception handlers with a FastAPI application.

    Args:
        app: FastAPI application instance.
        settings: Toolkit settings.

    Returns:
        The handler set (registered in the container as "api.exception").
    """
    handlers = ExceptionHandlers(settings)

    app.add_exception_handler(StarletteHTTPException, handlers.http_exception_handler)
    app.add_exception_handler(RequestValidationError, handlers.validation_exception_handler)
    app.add_exception_handler(Exception, handlers.generic_exception_handler)

    return handlers
