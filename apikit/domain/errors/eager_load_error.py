"""Eager loading error types.

Returned (never raised) when a collection fails to load the relations named
by requested includes. The response is still transformed; relations then
load lazily or not at all.
"""

from dataclasses import dataclass

from apikit.core.errors import DomainError


@dataclass(frozen=True, slots=True, kw_only=True)
class EagerLoadError(DomainError):
    """Relation eager loading failure (database error, unknown relation)."""

    pass
