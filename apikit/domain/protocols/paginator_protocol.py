"""Paginator and eager-loading protocols.

The transformer adapter recognises paginated results and eager-loadable
collections structurally, so any object exposing these members works.
"""

from collections.abc import Sequence
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class PaginatorProtocol(Protocol):
    """A page of results with length-aware pagination.

    Attributes:
        items: Items on the current page.
        total: Total number of items across all pages.
        per_page: Page size.
        current_page: 1-based page number.
    """

    items: Sequence[Any]
    total: int
    per_page: int
    current_page: int


@runtime_checkable
class EagerLoadableProtocol(Protocol):
    """A collection that can load relations for all of its items at once."""

    def load(self, *relations: str) -> Any:
        """Load relations; may return an awaitable."""
        ...
