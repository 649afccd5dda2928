"""RFC 9457 Problem Details for HTTP APIs.

Pydantic models for structured error responses.

Exports:
    ErrorDetail: Individual field-specific error
    ProblemDetails: RFC 9457 compliant error response schema
"""

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """Individual field-specific error.

    Attributes:
        field: Name of the field with error
        code: Machine-readable error code
        message: Human-readable error message
    """

    field: str = Field(..., description="Field name")
    code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")


class ProblemDetails(BaseModel):
    """RFC 9457 Problem Details for HTTP APIs.

    Attributes:
        type: URI reference identifying the problem type
        title: Short, human-readable summary of the problem type
        status: HTTP status code for this occurrence
        detail: Human-readable explanation specific to this occurrence
        instance: URI reference identifying the specific occurrence
        errors: Optional list of field-specific errors (validation failures)
        version: API version negotiated for the request, when known

    Examples:
        >>> ProblemDetails(
        ...     type="https://errors.apikit.local/rate-limit-exceeded",
        ...     title="Too Many Requests",
        ...     status=429,
        ...     detail="You have exceeded your rate limit.",
        ...     instance="/api/users",
        ...     version="v1",
        ... )
    """

    type: str = Field(
        ...,
        description="URI reference identifying the problem type",
        examples=["https://errors.apikit.local/unauthorized"],
    )
    title: str = Field(..., description="Short, human-readable summary", examples=["Authentication Required"])
    status: int = Field(..., description="HTTP status code", examples=[401])
    detail: str = Field(..., description="Human-readable explanation")
    instance: str = Field(..., description="URI reference identifying this occurrence", examples=["/api/users"])
    errors: list[ErrorDetail] | None = Field(None, description="List of field-specific errors")
    version: str | None = Field(None, description="Negotiated API version")
