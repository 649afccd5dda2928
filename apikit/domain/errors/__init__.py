"""Domain errors package.

Usage:
    from apikit.domain.errors import EagerLoadError, RateLimitError
"""

from apikit.domain.errors.eager_load_error import EagerLoadError
from apikit.domain.errors.rate_limit_error import RateLimitError

__all__ = ["EagerLoadError", "RateLimitError"]
