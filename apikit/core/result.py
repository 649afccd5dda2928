"""Result types for railway-oriented programming.

Infrastructure calls that may fail (rate limit storage, eager loading) return
a Result instead of raising, so callers decide between failing open and
surfacing the error.

Usage:
    async def hit(key: str) -> Result[int, RateLimitError]:
        try:
            return Success(value=await redis.incr(key))
        except RedisError as exc:
            return Failure(error=RateLimitError(...))

    match await hit("api:throttle:127.0.0.1"):
        case Success(value=attempts):
            ...
        case Failure(error=error):
            ...
"""

from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")  # Success type
E = TypeVar("E")  # Error type


@dataclass(frozen=True, slots=True, kw_only=True)
class Success(Generic[T]):
    """Successful operation result.

    Attributes:
        value: The successful result value.
    """

    value: T


@dataclass(frozen=True, slots=True, kw_only=True)
class Failure(Generic[E]):
    """Failed operation result.

    Attributes:
        error: The error that occurred.
    """

    error: E


Result = Success[T] | Failure[E]
