"""Pagination value and adapter.

``Page`` is the value endpoints return for paginated listings; the
transformer adapter wraps it in a ``PaginatorAdapter`` that renders the
``meta.pagination`` block with previous/next links built from the request
URL.

Usage:
    @router.get("/users")
    async def index(page: int = 1) -> Page:
        items, total = await users.page(page, per_page=15)
        return Page(items=items, total=total, per_page=15, current_page=page)
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from starlette.datastructures import URL


@dataclass(slots=True, kw_only=True)
class Page:
    """A length-aware page of results.

    Attributes:
        items: Items on this page.
        total: Total items across all pages.
        per_page: Page size.
        current_page: 1-based page number.
        page_name: Query parameter carrying the page number.
    """

    items: Sequence[Any] = field(default_factory=list)
    total: int = 0
    per_page: int = 15
    current_page: int = 1
    page_name: str = "page"

    def __post_init__(self) -> None:
        if self.per_page < 1:
            raise ValueError("per_page must be at least 1")
        if self.current_page < 1:
            raise ValueError("current_page must be at least 1")
        if self.total < 0:
            raise ValueError("total must not be negative")

    @property
    def last_page(self) -> int:
        return max(math.ceil(self.total / self.per_page), 1)


class PaginatorAdapter:
    """Expose a paginator to the transformer manager.

    Args:
        paginator: Any object with items, total, per_page and current_page.
        url: Request URL used to build page links.
    """

    def __init__(self, paginator: Any, url: str | URL) -> None:
        self.paginator = paginator
        self.url = URL(str(url))
        self.page_name: str = getattr(paginator, "page_name", "page")

    def get_total(self) -> int:
        return int(self.paginator.total)

    def get_count(self) -> int:
        return len(self.paginator.items)

    def get_per_page(self) -> int:
        return int(self.paginator.per_page)

    def get_current_page(self) -> int:
        return int(self.paginator.current_page)

    def get_last_page(self) -> int:
        return max(math.ceil(self.get_total() / self.get_per_page()), 1)

    def get_url(self, page: int) -> str:
        """URL of a given page, keeping the other query parameters."""
        return str(self.url.include_query_params(**{self.page_name: page}))

    def to_dict(self) -> dict[str, Any]:
        """Render the ``pagination`` meta block."""
        current = self.get_current_page()
        last = self.get_last_page()

        links: dict[str, str] = {}
        if current > 1:
            links["previous"] = self.get_url(current - 1)
        if current < last:
            links["next"] = self.get_url(current + 1)

        return {
            "total": self.get_total(),
            "count": self.get_count(),
            "per_page": self.get_per_page(),
            "current_page": current,
            "total_pages": last,
            "links": links,
        }
