"""Rate limit error types.

Used when rate limit storage operations fail (Redis errors, connection loss).

Usage:
    from apikit.domain.errors import RateLimitError
    from apikit.core.enums import ErrorCode
    from apikit.core.result import Failure

    return Failure(error=RateLimitError(
        code=ErrorCode.RATE_LIMIT_RESET_FAILED,
        message="Failed to reset counter: Redis connection lost",
    ))
"""

from dataclasses import dataclass

from apikit.core.errors import DomainError


@dataclass(frozen=True, slots=True, kw_only=True)
class RateLimitError(DomainError):
    """Rate limit storage failure.

    Exceeding a limit is NOT an error: it is a successful hit whose attempts
    exceed the throttle limit. This type is for storage failures only.
    """

    pass
