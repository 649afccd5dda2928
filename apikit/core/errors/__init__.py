"""Core errors package.

Usage:
    from apikit.core.errors import DomainError, BindingResolutionError
"""

from apikit.core.errors.common_errors import (
    BindingResolutionError,
    RouteDefinitionError,
    RouteMiddlewareNotFoundError,
    ToolkitError,
    TransformerNotBoundError,
)
from apikit.core.errors.domain_error import DomainError

__all__ = [
    "BindingResolutionError",
    "DomainError",
    "RouteDefinitionError",
    "RouteMiddlewareNotFoundError",
    "ToolkitError",
    "TransformerNotBoundError",
]
