"""Transformer binding.

A binding ties a response class to the transformer that renders it, with
optional parameters (``key``), meta data and a callback fired with the
resource before rendering.
"""

from collections.abc import Callable
from typing import Any

from apikit.core.container import Container


class Binding:
    """A response class to transformer binding.

    Args:
        container: Service container used to resolve transformer paths.
        resolver: Transformer class, "module:Class" path, or a callable
            receiving the container and returning a transformer class.
        parameters: Adapter parameters (e.g. ``{"key": "users"}``).
        callback: Called with the resource before it is rendered.
        meta: Meta data added to the rendered response.
    """

    def __init__(
        self,
        container: Container,
        resolver: Any,
        parameters: dict[str, Any] | None = None,
        callback: Callable[[Any], Any] | None = None,
        meta: dict[str, Any] | None = None,
    ) -> None:
        self.container = container
        self.resolver = resolver
        self.parameters = dict(parameters or {})
        self.callback = callback
        self.meta = dict(meta or {})

    def resolve_transformer(self) -> Any:
        """Resolve the transformer class.

        Raises:
            TypeError: If the resolver is none of the supported forms.
        """
        if isinstance(self.resolver, type):
            return self.resolver
        if isinstance(self.resolver, str):
            if self.container.bound(self.resolver):
                return self.container.make(self.resolver)
            return self.container.resolve_class(self.resolver)
        if callable(self.resolver):
            return self.resolver(self.container)
        raise TypeError("Unable to resolve transformer binding.")

    def fire_callback(self, resource: Any) -> None:
        """Call the binding callback with the resource, if any."""
        if self.callback is not None:
            self.callback(resource)

    def get_parameters(self) -> dict[str, Any]:
        return self.parameters

    def set_meta(self, meta: dict[str, Any]) -> "Binding":
        self.meta = dict(meta)
        return self

    def add_meta(self, key: str, value: Any) -> "Binding":
        self.meta[key] = value
        return self

    def get_meta(self) -> dict[str, Any]:
        return self.meta
