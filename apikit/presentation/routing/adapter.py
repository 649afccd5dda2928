"""FastAPI router adapter.

Reads route properties from definitions and registered routes, and adds
versioned routes to a FastAPI application.
"""

from collections.abc import Callable, Mapping, Sequence
from typing import TYPE_CHECKING, Any

from fastapi import FastAPI

from apikit.presentation.routing.versioned_route import VersionedRoute

if TYPE_CHECKING:
    from apikit.presentation.routing.route import Route


class FastAPIAdapter:
    """Router adapter for FastAPI applications.

    Args:
        app: Application receiving the versioned routes.
    """

    def __init__(self, app: FastAPI) -> None:
        self.app = app

    def get_route_properties(self, route: Any) -> tuple[str, list[str], dict[str, Any]]:
        """Return (uri, methods, action copy) for a definition or a registered route.

        Raises:
            TypeError: For anything else.
        """
        if isinstance(route, VersionedRoute):
            return route.path, sorted(route.methods), dict(route.action)

        if isinstance(route, Mapping):
            methods = [method.upper() for method in route.get("methods", [])]
            return route["uri"], methods, dict(route.get("action", {}))

        raise TypeError(f"Unsupported route type: {type(route).__name__}")

    def add_route(
        self,
        route: "Route",
        endpoint: Callable[..., Any],
        dependencies: Sequence[Any],
        **options: Any,
    ) -> VersionedRoute:
        """Register a versioned route on the application router.

        Args:
            route: Route record.
            endpoint: Wrapped endpoint.
            dependencies: Route middleware as FastAPI dependencies.
            **options: Extra APIRoute options (tags, response_class, ...).
        """
        versioned = VersionedRoute(
            route.get_uri(),
            endpoint,
            api_route=route,
            methods=route.get_methods(),
            name=route.get_name(),
            dependencies=list(dependencies),
            response_model=None,
            **options,
        )
        self.app.router.routes.append(versioned)
        self.app.openapi_schema = None
        return versioned

    def get_routes(self, version: str | None = None) -> list[VersionedRoute]:
        """Registered versioned routes, optionally only those serving a version."""
        return [
            route
            for route in self.app.router.routes
            if isinstance(route, VersionedRoute)
            and (version is None or version in route.versions)
        ]
