"""Controller base class with per-method route options.

Controllers declare authentication, scopes and rate limits for their
methods; route records merge these declarations over the route action when
the route is registered.

``methods`` narrows a declaration:
    None                        every method
    ["index", "show"]           only the listed methods
    {"only": ["store"]}         only the listed methods
    {"except": ["index"]}       every method except the listed ones

Usage:
    class UserController(Controller):
        def __init__(self) -> None:
            super().__init__()
            self.protect(methods={"except": ["index"]})
            self.scopes(["users:write"], methods=["store", "destroy"])
            self.rate_limit(10, 1, methods={"only": ["store"]})

        async def index(self) -> list[User]: ...

    router.get("/users", "app.controllers:UserController@index")
"""

from collections.abc import Mapping, Sequence
from typing import Any

PROPERTY_KEYS = ("scopes", "protected", "unprotected", "providers", "rate_limit", "throttles")

MethodOptions = Sequence[str] | Mapping[str, Sequence[str]] | None


class Controller:
    """Base class for API controllers."""

    def __init__(self) -> None:
        self._method_properties: dict[str, list[dict[str, Any]]] = {
            key: [] for key in PROPERTY_KEYS
        }

    def scopes(self, scopes: str | Sequence[str], methods: MethodOptions = None) -> "Controller":
        """Require OAuth scopes for methods."""
        self._add("scopes", methods, scopes=_as_list(scopes))
        return self

    def protect(self, methods: MethodOptions = None) -> "Controller":
        """Require authentication for methods."""
        self._add("protected", methods)
        return self

    def unprotect(self, methods: MethodOptions = None) -> "Controller":
        """Allow unauthenticated access to methods (wins over protect)."""
        self._add("unprotected", methods)
        return self

    def auth_providers(
        self, providers: str | Sequence[str], methods: MethodOptions = None
    ) -> "Controller":
        """Restrict authentication to the named providers for methods."""
        self._add("providers", methods, providers=_as_list(providers))
        return self

    def rate_limit(self, limit: int, expires: int, methods: MethodOptions = None) -> "Controller":
        """Limit methods to ``limit`` requests per ``expires`` minutes."""
        self._add("rate_limit", methods, limit=limit, expires=expires)
        return self

    def throttle(self, throttle: Any, methods: MethodOptions = None) -> "Controller":
        """Use a throttle (instance, class or path) for methods."""
        self._add("throttles", methods, throttle=throttle)
        return self

    def get_method_properties(self) -> dict[str, list[dict[str, Any]]]:
        """Declared options by property key.

        Each entry holds ``options`` (the normalized methods filter) plus the
        declared values.
        """
        properties = self._properties()
        return {key: list(values) for key, values in properties.items()}

    def _add(self, key: str, methods: MethodOptions, **values: Any) -> None:
        self._properties()[key].append({"options": _normalize_methods(methods), **values})

    def _properties(self) -> dict[str, list[dict[str, Any]]]:
        # Subclasses that skip super().__init__() still get a property map
        if not hasattr(self, "_method_properties"):
            self._method_properties = {key: [] for key in PROPERTY_KEYS}
        return self._method_properties


def _as_list(value: str | Sequence[str]) -> list[str]:
    if isinstance(value, str):
        return [value]
    return list(value)


def _normalize_methods(methods: MethodOptions) -> list[str] | dict[str, list[str]]:
    if methods is None:
        return []
    if isinstance(methods, str):
        return [methods]
    if isinstance(methods, Mapping):
        return {key: _as_list(value) for key, value in methods.items() if key in ("only", "except")}
    return list(methods)
