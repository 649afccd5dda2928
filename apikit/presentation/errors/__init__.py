"""RFC 9457 error responses, HTTP exceptions and exception handlers.

Exports:
    BadRequestHttpException, UnauthorizedHttpException, AccessDeniedHttpException,
    NotAcceptableHttpException, RateLimitExceededException: HTTP exceptions
    ErrorDetail, ProblemDetails: RFC 9457 schemas
    ErrorResponseBuilder: Utility for building RFC 9457 responses
    register_exception_handlers: Register global exception handlers with FastAPI
"""

from apikit.presentation.errors.error_response_builder import ErrorResponseBuilder
from apikit.presentation.errors.exception_handlers import (
    ExceptionHandlers,
    register_exception_handlers,
)
from apikit.presentation.errors.exceptions import (
    AccessDeniedHttpException,
    BadRequestHttpException,
    NotAcceptableHttpException,
    RateLimitExceededException,
    UnauthorizedHttpException,
)
from apikit.presentation.errors.problem_details import ErrorDetail, ProblemDetails

__all__ = [
    "AccessDeniedHttpException",
    "BadRequestHttpException",
    "ErrorDetail",
    "ErrorResponseBuilder",
    "ExceptionHandlers",
    "NotAcceptableHttpException",
    "ProblemDetails",
    "RateLimitExceededException",
    "UnauthorizedHttpException",
    "register_exception_handlers",
]
