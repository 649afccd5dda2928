"""Error response builder for RFC 9457 Problem Details.

Shared by the global exception handlers and by the request middleware,
which must answer before routing (strict Accept parsing, unsupported format)
where exception handlers do not run.

Exports:
    ErrorResponseBuilder: Utility class for building RFC 9457 responses
"""

from collections.abc import Mapping

from fastapi.responses import JSONResponse

from apikit.presentation.errors.problem_details import ErrorDetail, ProblemDetails

PROBLEM_MEDIA_TYPE = "application/problem+json"

# HTTP status code to (title, slug) mapping for RFC 9457
_HTTP_STATUS_INFO: dict[int, tuple[str, str]] = {
    400: ("Bad Request", "bad-request"),
    401: ("Authentication Required", "unauthorized"),
    403: ("Access Denied", "forbidden"),
    404: ("Resource Not Found", "not-found"),
    405: ("Method Not Allowed", "method-not-allowed"),
    406: ("Not Acceptable", "not-acceptable"),
    409: ("Resource Conflict", "conflict"),
    415: ("Unsupported Media Type", "unsupported-media-type"),
    422: ("Validation Failed", "validation-failed"),
    429: ("Too Many Requests", "rate-limit-exceeded"),
    500: ("Internal Server Error", "internal-server-error"),
    503: ("Service Unavailable", "service-unavailable"),
}


class ErrorResponseBuilder:
    """Build RFC 9457 Problem Details error responses.

    Args:
        base_url: Base URL for problem type URIs.

    Example:
        >>> builder = ErrorResponseBuilder("https://errors.apikit.local")
        >>> response = builder.build(
        ...     status_code=401,
        ...     detail="Invalid token",
        ...     instance="/api/users",
        ...     headers={"WWW-Authenticate": "Bearer"},
        ... )
    """

    def __init__(self, base_url: str) -> None:
        self.base_url = base_url.rstrip("/")

    def build(
        self,
        *,
        status_code: int,
        detail: str,
        instance: str,
        headers: Mapping[str, str] | None = None,
        errors: list[ErrorDetail] | None = None,
        version: str | None = None,
    ) -> JSONResponse:
        """Build a problem details JSON response.

        Args:
            status_code: HTTP status.
            detail: Occurrence-specific explanation.
            instance: Request path.
            headers: Extra response headers (WWW-Authenticate, Retry-After).
            errors: Field errors for validation failures.
            version: Negotiated API version, if any.

        Returns:
            JSONResponse with application/problem+json content.
        """
        title, slug = self.status_info(status_code)
        problem = ProblemDetails(
            type=f"{self.base_url}/{slug}",
            title=title,
            status=status_code,
            detail=detail,
            instance=instance,
            errors=errors or None,
            version=version,
        )
        return JSONResponse(
            status_code=status_code,
            content=problem.model_dump(exclude_none=True),
            headers=dict(headers) if headers else None,
            media_type=PROBLEM_MEDIA_TYPE,
        )

    @staticmethod
    def status_info(status_code: int) -> tuple[str, str]:
        """Title and type slug for a status code."""
        return _HTTP_STATUS_INFO.get(status_code, ("Error", "error"))
