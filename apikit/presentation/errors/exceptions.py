"""HTTP exceptions raised by the toolkit.

All exceptions subclass FastAPI's HTTPException, so the global handlers in
``exception_handlers`` render them as RFC 9457 problem details, and host
applications that already handle HTTPException keep working.

Usage:
    from apikit.presentation.errors import UnauthorizedHttpException

    raise UnauthorizedHttpException("Bearer", "Token has expired")
"""

from collections.abc import Mapping

from fastapi import HTTPException, status


class BadRequestHttpException(HTTPException):
    """400 - malformed request (e.g. unparsable Accept header in strict mode).

    Auth providers also raise it to signal that the request carries no
    credentials they understand, letting the next provider try.
    """

    def __init__(
        self, detail: str = "Bad request", headers: Mapping[str, str] | None = None
    ) -> None:
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
            headers=dict(headers) if headers else None,
        )


class UnauthorizedHttpException(HTTPException):
    """401 - credentials missing or invalid.

    Args:
        challenge: WWW-Authenticate challenge (e.g. "Basic", "Bearer").
        detail: Human-readable explanation.
    """

    def __init__(
        self,
        challenge: str = "Bearer",
        detail: str = "Failed to authenticate because of bad credentials or an invalid authorization header.",
    ) -> None:
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": challenge},
        )
        self.challenge = challenge


class AccessDeniedHttpException(HTTPException):
    """403 - authenticated but not allowed (e.g. missing scopes)."""

    def __init__(self, detail: str = "Access denied") -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class NotAcceptableHttpException(HTTPException):
    """406 - the negotiated response format cannot be produced."""

    def __init__(
        self,
        detail: str = "Unable to format response according to Accept header.",
    ) -> None:
        super().__init__(status_code=status.HTTP_406_NOT_ACCEPTABLE, detail=detail)


class RateLimitExceededException(HTTPException):
    """429 - throttle limit exceeded.

    Args:
        retry_after: Seconds until the window resets.
        headers: Rate limit headers to send with the error.
    """

    def __init__(
        self,
        retry_after: int,
        detail: str = "You have exceeded your rate limit.",
        headers: Mapping[str, str] | None = None,
    ) -> None:
        merged = dict(headers or {})
        merged["Retry-After"] = str(max(retry_after, 0))
        super().__init__(
            status_code=status.HTTP_429_TOO_MANY_REQUESTS,
            detail=detail,
            headers=merged,
        )
        self.retry_after = max(retry_after, 0)
