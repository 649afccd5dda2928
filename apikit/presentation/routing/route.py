"""Route option record.

Collects the API options of one route (versions, scopes, protection, auth
providers, rate limit, throttle, conditional requests) from the route action,
then merges the options declared on the route's controller.

Merge precedence:
    scopes       action value, unioned with matching controller scopes
    protection   action value, then controller "protected" (True), then
                 controller "unprotected" (False)
    providers    action value, unioned with matching controller providers
    rate limit   action limit/expires, replaced by a matching controller rate limit
    throttle     action value, replaced by a matching controller throttle

Usage:
    route = Route(adapter, container, {
        "uri": "/api/users",
        "methods": ["GET"],
        "action": {"uses": "app.controllers:UserController@index", "version": ["v1"]},
    })
    route.is_protected()
"""

from collections.abc import Callable
from typing import Any

from apikit.core.container import Container
from apikit.core.errors import RouteDefinitionError
from apikit.domain.protocols.router_adapter_protocol import RouterAdapterProtocol
from apikit.presentation.routing.controller import PROPERTY_KEYS

PROPERTIES_METHOD = "get_method_properties"


class Route:
    """Options of a single API route.

    Args:
        adapter: Router adapter reading the route properties.
        container: Service container used to make controllers.
        route: Route definition mapping or a registered host route.
    """

    def __init__(self, adapter: RouterAdapterProtocol, container: Container, route: Any) -> None:
        self.adapter = adapter
        self.container = container

        self._scopes: list[str] = []
        self._protected = False
        self._auth_providers: list[str] = []
        self._rate_limit = 0
        self._rate_expiration = 0
        self._throttle: Any = None
        self._controller: Any = None
        self._method: str | None = None
        self._versions: list[str] = []
        self._conditional_request = True

        self._setup_route(route)

    def _setup_route(self, route: Any) -> None:
        self._uri, self._methods, self._action = self.adapter.get_route_properties(route)
        self._definition = {
            "uri": self._uri,
            "methods": list(self._methods),
            "action": dict(self._action),
        }

        self._make_controller()

        self._setup_scopes()
        self._setup_protection()
        self._setup_auth_providers()
        self._setup_rate_limiting()
        self._setup_throttle()

        versions = self._action.pop("version", None)
        if isinstance(versions, str):
            versions = [versions]
        self._versions = list(versions or [])
        self._conditional_request = self._action.pop("conditional_request", True)

    # -------------------------------------------------------------------------
    # Option setup
    # -------------------------------------------------------------------------

    def _setup_scopes(self) -> None:
        self._scopes = _as_list(self._action.pop("scopes", []))
        for value in self._controller_options("scopes"):
            self._scopes = _union(self._scopes, value["scopes"])

    def _setup_protection(self) -> None:
        self._protected = self._action.pop("protected", False)
        for _ in self._controller_options("protected"):
            self._protected = True
        for _ in self._controller_options("unprotected"):
            self._protected = False

    def _setup_auth_providers(self) -> None:
        self._auth_providers = _as_list(self._action.pop("providers", []))
        for value in self._controller_options("providers"):
            self._auth_providers = _union(self._auth_providers, value["providers"])

    def _setup_rate_limiting(self) -> None:
        self._rate_limit = self._action.pop("limit", 0)
        self._rate_expiration = self._action.pop("expires", 0)
        for value in self._controller_options("rate_limit"):
            self._rate_limit = value["limit"]
            self._rate_expiration = value["expires"]

    def _setup_throttle(self) -> None:
        self._throttle = self._action.pop("throttle", None)
        for value in self._controller_options("throttles"):
            self._throttle = value["throttle"]

    # -------------------------------------------------------------------------
    # Controller options
    # -------------------------------------------------------------------------

    def _make_controller(self) -> None:
        """Make the controller for "module:Class@method" actions."""
        uses = self._action.get("uses")
        if not isinstance(uses, str) or "@" not in uses:
            return

        controller, _, method = uses.rpartition("@")
        self._controller = self.container.make(controller)
        self._method = method

    def _controller_options(self, option: str) -> list[dict[str, Any]]:
        """Controller declarations for an option that apply to this route's method."""
        if not self.uses_controller():
            return []
        properties = self._controller_properties()
        return [
            value
            for value in properties.get(option, [])
            if self.options_apply_to_controller_method(value.get("options", []))
        ]

    def _controller_properties(self) -> dict[str, list[dict[str, Any]]]:
        defaults: dict[str, list[dict[str, Any]]] = {key: [] for key in PROPERTY_KEYS}
        return {**defaults, **getattr(self._controller, PROPERTIES_METHOD)()}

    def options_apply_to_controller_method(self, options: Any) -> bool:
        """Whether a declaration's methods filter covers this route's method."""
        if not options:
            return True
        if isinstance(options, dict):
            if "only" in options:
                return self._method in options["only"]
            # Every method not listed is covered.
            if "except" in options:
                return self._method not in options["except"]
            return False
        return self._method in options

    def uses_controller(self) -> bool:
        """Whether the route uses a controller that declares method options."""
        return self._controller is not None and callable(
            getattr(self._controller, PROPERTIES_METHOD, None)
        )

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    def has_throttle(self) -> bool:
        return self._throttle is not None

    def get_throttle(self) -> Any:
        return self._throttle

    def is_protected(self) -> bool:
        return self._protected is True

    def get_name(self) -> str | None:
        return self._action.get("as")

    def scopes(self) -> list[str]:
        return self.get_scopes()

    def get_scopes(self) -> list[str]:
        return list(self._scopes)

    def get_auth_providers(self) -> list[str]:
        return list(self._auth_providers)

    def get_rate_limit(self) -> int:
        return self._rate_limit

    def get_rate_expiration(self) -> int:
        return self._rate_expiration

    def request_is_conditional(self) -> bool:
        return self._conditional_request is True

    def get_action(self) -> dict[str, Any]:
        return self._action

    def get_definition(self) -> dict[str, Any]:
        """The route definition this record was built from (before options were pulled)."""
        return {**self._definition, "action": dict(self._definition["action"])}

    def get_versions(self) -> list[str]:
        return list(self._versions)

    def get_uri(self) -> str:
        return self._uri

    def get_methods(self) -> list[str]:
        return list(self._methods)

    def get_controller(self) -> Any:
        return self._controller

    def get_method(self) -> str | None:
        return self._method

    def get_endpoint(self) -> Callable[..., Any]:
        """The callable handling the route.

        Raises:
            RouteDefinitionError: If the action names no callable.
        """
        uses = self._action.get("uses")

        if self._controller is not None and self._method is not None:
            endpoint = getattr(self._controller, self._method, None)
            if not callable(endpoint):
                raise RouteDefinitionError(
                    f"Controller [{type(self._controller).__name__}] has no method [{self._method}]"
                )
            return endpoint

        if callable(uses):
            return uses

        raise RouteDefinitionError(f"Route [{self._uri}] action does not name a callable")

    def __repr__(self) -> str:
        return f"Route(methods={self._methods!r}, uri={self._uri!r}, versions={self._versions!r})"


def _as_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return list(value)


def _union(current: list[str], extra: Any) -> list[str]:
    merged = list(current)
    for item in _as_list(extra):
        if item not in merged:
            merged.append(item)
    return merged
