"""Core enums package.

Usage:
    from apikit.core.enums import ErrorCode, Environment
"""

from apikit.core.enums.environment import Environment
from apikit.core.enums.error_code import ErrorCode

__all__ = ["ErrorCode", "Environment"]
