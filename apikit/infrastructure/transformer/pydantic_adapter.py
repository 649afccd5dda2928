"""Pydantic transformer adapter.

Drives the transformer ``Manager`` for one response:

1. parse requested includes from the query string
2. wrap the response in an ``Item`` or ``Collection`` resource
3. attach a paginator adapter for paginated responses
4. eager load requested relations on eager-loadable collections
5. copy binding meta and fire the binding callback
6. render ``{"data": ..., "meta": {...}}``

Usage:
    adapter = PydanticAdapter(Manager(), include_key="include", include_separator=",")
    data = await adapter.transform(users, UserTransformer, binding, request)
"""

import inspect
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from starlette.concurrency import run_in_threadpool
from starlette.requests import Request

from apikit.core.container import get_logger
from apikit.core.result import Failure
from apikit.domain.protocols.paginator_protocol import (
    EagerLoadableProtocol,
    PaginatorProtocol,
)
from apikit.infrastructure.transformer.manager import Manager
from apikit.infrastructure.transformer.pagination import PaginatorAdapter
from apikit.infrastructure.transformer.resources import Collection, Item, Resource
from apikit.infrastructure.transformer.transformer import Transformer

if TYPE_CHECKING:
    from apikit.presentation.transformer.binding import Binding


class PydanticAdapter:
    """Transformer adapter rendering responses with pydantic transformers.

    Args:
        manager: Transformer manager.
        include_key: Query parameter carrying requested includes.
        include_separator: Separator between includes in a single value.
        eager_loading: Load requested relations on eager-loadable collections.
    """

    def __init__(
        self,
        manager: Manager,
        include_key: str = "include",
        include_separator: str = ",",
        eager_loading: bool = True,
    ) -> None:
        self.manager = manager
        self.include_key = include_key
        self.include_separator = include_separator
        self.eager_loading = eager_loading

    async def transform(
        self,
        response: Any,
        transformer: type[Transformer],
        binding: "Binding",
        request: Request,
    ) -> dict[str, Any]:
        """Transform a response into ``{"data": ..., "meta": ...}``."""
        self.parse_includes(request)

        resource = self.create_resource(response, transformer, binding.get_parameters())

        if isinstance(response, PaginatorProtocol) and isinstance(resource, Collection):
            resource.set_paginator(self.create_paginator_adapter(response, request))

        loadable = response.items if isinstance(response, PaginatorProtocol) else response
        if self.eager_loading and isinstance(loadable, EagerLoadableProtocol):
            await self._eager_load(loadable, transformer)

        for key, value in binding.get_meta().items():
            resource.set_meta_value(key, value)

        binding.fire_callback(resource)

        return self.manager.create_data(resource).to_dict()

    def parse_includes(self, request: Request) -> None:
        """Read requested includes from the query string into the manager.

        Repeated parameters (``?include=a&include=b``) are used as a list;
        a single value is split on the separator and empty entries dropped.
        """
        values = request.query_params.getlist(self.include_key)
        if len(values) > 1:
            includes = values
        else:
            raw = values[0] if values else ""
            includes = [value for value in raw.split(self.include_separator) if value]
        self.manager.parse_includes(includes)

    def create_resource(
        self, response: Any, transformer: type[Transformer], parameters: dict[str, Any]
    ) -> Resource:
        """Collection for paginators and sequences, Item otherwise."""
        key = parameters.get("key")

        if isinstance(response, PaginatorProtocol):
            return Collection(response.items, transformer, key)
        if isinstance(response, Sequence) and not isinstance(response, (str, bytes)):
            return Collection(response, transformer, key)
        return Item(response, transformer, key)

    def create_paginator_adapter(self, paginator: Any, request: Request) -> PaginatorAdapter:
        return PaginatorAdapter(paginator, request.url)

    def merge_eager_loads(
        self, transformer: type[Transformer], requested_includes: Sequence[str]
    ) -> list[str]:
        """Relations to load: requested available includes plus defaults."""
        available = [
            name for name in transformer.get_available_includes() if name in requested_includes
        ]
        loads: list[str] = []
        for name in [*available, *transformer.get_default_includes()]:
            if name not in loads:
                loads.append(name)
        return loads

    def get_manager(self) -> Manager:
        return self.manager

    async def _eager_load(self, response: EagerLoadableProtocol, transformer: type[Transformer]) -> None:
        relations = self.merge_eager_loads(transformer, self.manager.get_requested_includes())
        if not relations:
            return

        if inspect.iscoroutinefunction(response.load):
            result = await response.load(*relations)
        else:
            # Sync sessions query inside load(); async ones hand back an awaitable.
            result = await run_in_threadpool(response.load, *relations)
            if inspect.isawaitable(result):
                result = await result

        if isinstance(result, Failure):
            get_logger().warning(
                "Eager loading failed",
                transformer=transformer.__name__,
                relations=relations,
                error_code=result.error.code.value,
                error_message=result.error.message,
            )
