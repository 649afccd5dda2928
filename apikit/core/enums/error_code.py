"""Toolkit error codes (machine-readable).

Error codes follow ENTITY_ACTION_REASON naming convention.
Used with Result types for railway-oriented programming.
"""

from enum import Enum


class ErrorCode(Enum):
    """Toolkit error codes (machine-readable)."""

    # Rate limit errors
    RATE_LIMIT_CHECK_FAILED = "rate_limit_check_failed"
    RATE_LIMIT_RESET_FAILED = "rate_limit_reset_failed"

    # Container errors
    BINDING_NOT_FOUND = "binding_not_found"
    ROUTE_MIDDLEWARE_NOT_FOUND = "route_middleware_not_found"

    # Routing errors
    ROUTE_DEFINITION_INVALID = "route_definition_invalid"

    # Transformer errors
    TRANSFORMER_NOT_BOUND = "transformer_not_bound"
    EAGER_LOAD_FAILED = "eager_load_failed"
