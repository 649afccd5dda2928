"""Transformer factory.

Keeps the response class to transformer bindings and hands transformable
responses to the configured transformer adapter.

Usage:
    factory = container.make("api.transformer")
    factory.register(User, UserTransformer, parameters={"key": "users"})

    if factory.transformable(result):
        payload = await factory.transform(result, request)
"""

from collections.abc import Callable, Sequence
from typing import Any

from starlette.requests import Request

from apikit.core.container import Container, get_logger
from apikit.core.errors import TransformerNotBoundError
from apikit.domain.protocols.paginator_protocol import PaginatorProtocol
from apikit.domain.protocols.transformer_adapter_protocol import (
    TransformerAdapterProtocol,
)
from apikit.presentation.transformer.binding import Binding


class TransformerFactory:
    """Registry of transformer bindings.

    Args:
        container: Service container.
        adapter: Transformer adapter rendering bound responses.
    """

    def __init__(self, container: Container, adapter: TransformerAdapterProtocol) -> None:
        self.container = container
        self.adapter = adapter
        self.bindings: dict[type, Binding] = {}

    def register(
        self,
        cls: type | str,
        resolver: Any,
        parameters: dict[str, Any] | None = None,
        callback: Callable[[Any], Any] | None = None,
    ) -> Binding:
        """Bind a class to a transformer.

        Args:
            cls: Response class, or its "module:Class" path.
            resolver: Transformer class, path, or factory callable.
            parameters: Adapter parameters.
            callback: Called with the resource before rendering.

        Returns:
            Binding: The new binding (add meta through it).
        """
        if isinstance(cls, str):
            cls = self.container.resolve_class(cls)

        binding = Binding(self.container, resolver, parameters, callback)
        self.bindings[cls] = binding
        return binding

    def transformable(self, response: Any) -> bool:
        """Whether a binding exists for the response (or its first item)."""
        return self._find_binding(response) is not None

    async def transform(self, response: Any, request: Request) -> dict[str, Any]:
        """Transform a response with its bound transformer.

        Raises:
            TransformerNotBoundError: If no binding matches.
        """
        binding = self.get_binding(response)
        transformer = binding.resolve_transformer()

        get_logger().debug(
            "Transforming response",
            response_type=type(response).__name__,
            transformer=getattr(transformer, "__name__", repr(transformer)),
        )

        return await self.adapter.transform(response, transformer, binding, request)

    def get_binding(self, response: Any) -> Binding:
        """Binding for a response.

        Raises:
            TransformerNotBoundError: If no binding matches.
        """
        binding = self._find_binding(response)
        if binding is None:
            raise TransformerNotBoundError(type(self._subject(response)).__name__)
        return binding

    def get_adapter(self) -> TransformerAdapterProtocol:
        return self.adapter

    def set_adapter(self, adapter: TransformerAdapterProtocol) -> None:
        self.adapter = adapter

    def _find_binding(self, response: Any) -> Binding | None:
        subject = self._subject(response)
        if subject is None:
            return None
        for cls in type(subject).__mro__:
            if cls in self.bindings:
                return self.bindings[cls]
        return None

    @staticmethod
    def _subject(response: Any) -> Any:
        """The object whose class selects the binding.

        Collections and paginators are keyed by their first item; empty ones
        have no subject.
        """
        if isinstance(response, PaginatorProtocol):
            response = response.items
        if isinstance(response, Sequence) and not isinstance(response, (str, bytes)):
            return response[0] if len(response) else None
        return response
