"""API router.

Declares versioned API routes on a FastAPI application. Routes are declared
inside version groups; the request's Accept header selects which version's
route serves a request.

Usage:
    api = container.make("api.router")

    with api.version("v1"):
        api.get("/users", "app.controllers:UserController@index")

        with api.group(prefix="admin", protected=True, scopes=["admin"]):
            api.delete("/users/{id}", "app.controllers:UserController@destroy")

    with api.version(["v1", "v2"], providers=["jwt"]):
        @api.get("/me", protected=True)
        async def me(request: Request):
            return api_auth.get_user(request)

Group attributes:
    prefix                          joined with outer prefixes
    scopes, providers, middleware   unioned with outer groups and the route action
    anything else                   replaced by inner groups and the route action
"""

from collections.abc import Callable, Iterator, Mapping, Sequence
from contextlib import contextmanager
from typing import Any

from fastapi import Depends
from starlette.requests import Request

from apikit.core.config import Settings
from apikit.core.container import Container, get_logger
from apikit.core.errors import RouteDefinitionError
from apikit.domain.protocols.router_adapter_protocol import RouterAdapterProtocol
from apikit.presentation.routing.endpoint import wrap_endpoint
from apikit.presentation.routing.route import Route
from apikit.presentation.routing.versioned_route import VersionedRoute

UNION_KEYS = ("scopes", "providers", "middleware")
API_ROUTE_MIDDLEWARE = ("api.auth", "api.limiting")
ANY_METHODS = ("GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS")

RESOURCE_METHODS: dict[str, tuple[tuple[str, ...], bool]] = {
    "index": (("GET", "HEAD"), False),
    "store": (("POST",), False),
    "show": (("GET", "HEAD"), True),
    "update": (("PUT", "PATCH"), True),
    "destroy": (("DELETE",), True),
}

Action = Callable[..., Any] | str | Mapping[str, Any]


class Router:
    """Versioned API route registrar.

    Args:
        adapter: Router adapter for the host application.
        container: Service container (controllers, route middleware).
        settings: Toolkit settings (prefix, conditional requests).
    """

    def __init__(
        self, adapter: RouterAdapterProtocol, container: Container, settings: Settings
    ) -> None:
        self.adapter = adapter
        self.container = container
        self.settings = settings
        self._groups: list[dict[str, Any]] = []
        self._routes: list[Route] = []

    # -------------------------------------------------------------------------
    # Groups
    # -------------------------------------------------------------------------

    @contextmanager
    def version(self, versions: str | Sequence[str], **attributes: Any) -> Iterator["Router"]:
        """Open a version group."""
        attributes["version"] = [versions] if isinstance(versions, str) else list(versions)
        with self.group(**attributes):
            yield self

    @contextmanager
    def group(self, **attributes: Any) -> Iterator["Router"]:
        """Open a nested group sharing attributes with its routes."""
        self._groups.append(self.merge_group(attributes, self._groups[-1] if self._groups else {}))
        try:
            yield self
        finally:
            self._groups.pop()

    @staticmethod
    def merge_group(new: Mapping[str, Any], old: Mapping[str, Any]) -> dict[str, Any]:
        """Merge group attributes over the enclosing group's."""
        merged = dict(old)
        for key, value in new.items():
            if key == "prefix":
                merged["prefix"] = _join(old.get("prefix"), value)
            elif key in UNION_KEYS:
                merged[key] = _union(old.get(key), value)
            else:
                merged[key] = value
        return merged

    # -------------------------------------------------------------------------
    # Route declaration
    # -------------------------------------------------------------------------

    def get(self, uri: str, action: Action | None = None, **options: Any) -> Any:
        return self._declare(["GET", "HEAD"], uri, action, options)

    def post(self, uri: str, action: Action | None = None, **options: Any) -> Any:
        return self._declare(["POST"], uri, action, options)

    def put(self, uri: str, action: Action | None = None, **options: Any) -> Any:
        return self._declare(["PUT"], uri, action, options)

    def patch(self, uri: str, action: Action | None = None, **options: Any) -> Any:
        return self._declare(["PATCH"], uri, action, options)

    def delete(self, uri: str, action: Action | None = None, **options: Any) -> Any:
        return self._declare(["DELETE"], uri, action, options)

    def options(self, uri: str, action: Action | None = None, **options: Any) -> Any:
        return self._declare(["OPTIONS"], uri, action, options)

    def match(
        self, methods: str | Sequence[str], uri: str, action: Action | None = None, **options: Any
    ) -> Any:
        """Declare a route for several HTTP methods."""
        methods = [methods] if isinstance(methods, str) else list(methods)
        return self._declare([method.upper() for method in methods], uri, action, options)

    def any(self, uri: str, action: Action | None = None, **options: Any) -> Any:
        """Declare a route for every HTTP method."""
        return self._declare(list(ANY_METHODS), uri, action, options)

    def resource(
        self,
        name: str,
        controller: str,
        only: Sequence[str] | None = None,
        except_: Sequence[str] | None = None,
        **options: Any,
    ) -> list[Route]:
        """Declare index/store/show/update/destroy routes for a controller.

        Args:
            name: Resource URI segment (e.g. "users").
            controller: Controller path ("module:Class").
            only: Declare only these actions.
            except_: Skip these actions.

        Returns:
            The declared route records.
        """
        base = "/" + name.strip("/")
        routes: list[Route] = []
        for method, (http_methods, member) in RESOURCE_METHODS.items():
            if only is not None and method not in only:
                continue
            if except_ is not None and method in except_:
                continue
            uri = f"{base}/{{id}}" if member else base
            action = {"uses": f"{controller}@{method}", "as": f"{name.strip('/')}.{method}", **options}
            routes.append(self.add_route(list(http_methods), uri, action))
        return routes

    def _declare(
        self, methods: list[str], uri: str, action: Action | None, options: dict[str, Any]
    ) -> Any:
        if action is not None:
            return self.add_route(methods, uri, _action_mapping(action, options))

        def decorator(endpoint: Callable[..., Any]) -> Callable[..., Any]:
            self.add_route(methods, uri, _action_mapping(endpoint, options))
            return endpoint

        return decorator

    def add_route(self, methods: list[str], uri: str, action: Mapping[str, Any]) -> Route:
        """Register a route on the host application.

        Raises:
            RouteDefinitionError: Outside a version group, or without a callable.
            RouteMiddlewareNotFoundError: If the action names an unknown middleware.
        """
        action = self.merge_action(action)
        if not action.get("version"):
            raise RouteDefinitionError(
                f"Route [{uri}] must be declared inside a version group"
            )

        route = Route(
            self.adapter,
            self.container,
            {"uri": self.full_uri(uri), "methods": methods, "action": action},
        )

        endpoint = wrap_endpoint(route.get_endpoint(), route, self.container)
        middleware = [*API_ROUTE_MIDDLEWARE, *route.get_action().get("middleware", [])]
        dependencies = [
            Depends(self.container.get_route_middleware(name)) for name in _union([], middleware)
        ]

        self.adapter.add_route(route, endpoint, dependencies, tags=[self.settings.name])
        self._routes.append(route)

        get_logger().debug(
            "API route registered",
            uri=route.get_uri(),
            methods=route.get_methods(),
            versions=route.get_versions(),
            protected=route.is_protected(),
        )
        return route

    def merge_action(self, action: Mapping[str, Any]) -> dict[str, Any]:
        """Merge the current group attributes into a route action."""
        group = self._groups[-1] if self._groups else {}
        merged = {key: value for key, value in group.items() if key != "prefix"}
        for key, value in action.items():
            if key in UNION_KEYS:
                merged[key] = _union(merged.get(key), value)
            else:
                merged[key] = value
        merged.setdefault("conditional_request", self.settings.conditional_request)
        if isinstance(merged.get("version"), str):
            merged["version"] = [merged["version"]]
        return merged

    def full_uri(self, uri: str) -> str:
        """URI with the API prefix and the group prefixes."""
        group_prefix = self._groups[-1].get("prefix") if self._groups else None
        return _join(_join(self.settings.prefix, group_prefix), uri) or "/"

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def get_current_route(self, request: Request) -> Route | None:
        """Route record of the API route matched for a request."""
        route = request.scope.get("route")
        if isinstance(route, VersionedRoute):
            return route.api_route
        return None

    def get_routes(self, version: str | None = None) -> list[Route]:
        """Declared route records, optionally only those serving a version."""
        return [
            route.api_route
            for route in self.adapter.get_routes(version)
            if isinstance(route, VersionedRoute)
        ]

    def has_version(self, version: str) -> bool:
        return bool(self.adapter.get_routes(version))


def _action_mapping(action: Action, options: Mapping[str, Any]) -> dict[str, Any]:
    if isinstance(action, Mapping):
        return {**action, **options}
    return {"uses": action, **options}


def _join(*parts: str | None) -> str:
    segments = [part.strip("/") for part in parts if part and part.strip("/")]
    return "/" + "/".join(segments) if segments else ""


def _union(current: Any, extra: Any) -> list[Any]:
    merged: list[Any] = []
    for value in (current, extra):
        if value is None:
            continue
        for item in [value] if isinstance(value, str) else value:
            if item not in merged:
                merged.append(item)
    return merged
