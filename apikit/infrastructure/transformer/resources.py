"""Transformable resources.

A resource pairs data with the transformer that renders it. Items hold one
object, collections hold a sequence and optionally a paginator adapter.
"""

from collections.abc import Iterable
from typing import Any

from apikit.infrastructure.transformer.pagination import PaginatorAdapter
from apikit.infrastructure.transformer.transformer import Transformer


class Resource:
    """Base resource.

    Args:
        data: Object(s) to transform.
        transformer: Transformer class.
        resource_key: Key wrapping the rendered data (default "data").
    """

    def __init__(
        self,
        data: Any,
        transformer: type[Transformer],
        resource_key: str | None = None,
    ) -> None:
        self.data = data
        self.transformer = transformer
        self.resource_key = resource_key
        self.meta: dict[str, Any] = {}

    def get_resource_key(self) -> str:
        return self.resource_key or "data"

    def set_meta_value(self, key: str, value: Any) -> "Resource":
        self.meta[key] = value
        return self

    def get_meta(self) -> dict[str, Any]:
        return dict(self.meta)


class Item(Resource):
    """A single object."""


class Collection(Resource):
    """A sequence of objects, optionally paginated."""

    def __init__(
        self,
        data: Iterable[Any],
        transformer: type[Transformer],
        resource_key: str | None = None,
    ) -> None:
        super().__init__(list(data), transformer, resource_key)
        self.paginator: PaginatorAdapter | None = None

    def set_paginator(self, paginator: PaginatorAdapter) -> "Collection":
        self.paginator = paginator
        return self

    def get_paginator(self) -> PaginatorAdapter | None:
        return self.paginator
