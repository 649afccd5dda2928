"""Core shared kernel.

This module provides foundational utilities used across all layers:
- Result types for railway-oriented programming
- Base error classes
- Settings and the service container

The core module has NO dependencies on the presentation layer.
"""

from apikit.core.enums import ErrorCode
from apikit.core.errors import DomainError, ToolkitError
from apikit.core.result import Failure, Result, Success

__all__ = [
    "DomainError",
    "ErrorCode",
    "Failure",
    "Result",
    "Success",
    "ToolkitError",
]
