"""Versioned FastAPI route.

A ``VersionedRoute`` matches only API requests (marked by the request
middleware) whose negotiated version is one of the route's versions, so the
same URI can be served by different endpoints per version while FastAPI's
router keeps dispatching.
"""

from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from fastapi.routing import APIRoute
from starlette.routing import Match
from starlette.types import Scope

from apikit.presentation.http.context import get_accept

if TYPE_CHECKING:
    from apikit.presentation.routing.route import Route


class VersionedRoute(APIRoute):
    """APIRoute bound to an API route record.

    Args:
        path: Full URI (API prefix included).
        endpoint: Wrapped endpoint.
        api_route: Route record holding versions and options.
        **kwargs: Passed to APIRoute (methods, name, dependencies, ...).
    """

    def __init__(
        self,
        path: str,
        endpoint: Callable[..., Any],
        *,
        api_route: "Route",
        **kwargs: Any,
    ) -> None:
        super().__init__(path, endpoint, **kwargs)
        self.api_route = api_route
        self.versions = api_route.get_versions()
        self.action = api_route.get_definition()["action"]

    def matches(self, scope: Scope) -> tuple[Match, Scope]:
        match, child_scope = super().matches(scope)
        if match == Match.NONE:
            return match, child_scope

        accept = get_accept(scope)
        if accept is None or accept.version not in self.versions:
            return Match.NONE, {}

        child_scope["route"] = self
        return match, child_scope
