"""Transformer adapter protocol (port).

A transformer adapter drives a presentation library to turn a response value
(model, collection, paginator) into a serializable structure.

Usage:
    adapter: TransformerAdapterProtocol = PydanticAdapter(Manager())
    data = await adapter.transform(users, UserTransformer, binding, request)
"""

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from starlette.requests import Request

    from apikit.presentation.transformer.binding import Binding


class TransformerAdapterProtocol(Protocol):
    """Protocol for transformer adapters."""

    async def transform(
        self,
        response: Any,
        transformer: Any,
        binding: "Binding",
        request: "Request",
    ) -> dict[str, Any]:
        """Transform a response with a transformer.

        Args:
            response: Value returned by the endpoint.
            transformer: Transformer resolved from the binding.
            binding: Transformer binding (parameters, meta, callback).
            request: Current request (requested includes).

        Returns:
            Serializable structure.
        """
        ...
