"""Router adapter protocol (port).

The router adapter is the seam between the toolkit's route records and the
host framework's router. It reads route properties and registers versioned
routes on the host application.
"""

from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from apikit.presentation.routing.route import Route


class RouterAdapterProtocol(Protocol):
    """Protocol for host framework router adapters."""

    def get_route_properties(self, route: Any) -> tuple[str, list[str], dict[str, Any]]:
        """Return (uri, methods, action) for a route.

        Args:
            route: Route definition mapping or a registered host route.

        Returns:
            Tuple of URI, HTTP methods and a copy of the action mapping.
        """
        ...

    def add_route(
        self,
        route: "Route",
        endpoint: Callable[..., Any],
        dependencies: Sequence[Any],
    ) -> Any:
        """Register a route record on the host router."""
        ...

    def get_routes(self, version: str | None = None) -> list[Any]:
        """Registered host routes, optionally filtered by version."""
        ...
