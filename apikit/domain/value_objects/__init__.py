"""Domain value objects.

Usage:
    from apikit.domain.value_objects import Accept, RateLimitWindow
"""

from apikit.domain.value_objects.accept import Accept
from apikit.domain.value_objects.rate_limit_window import RateLimitWindow

__all__ = ["Accept", "RateLimitWindow"]
