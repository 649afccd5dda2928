"""Service container.

A small registry of named services that the toolkit and the host application
share. Service providers register bindings here; the router, middleware and
transformer factory resolve them by name at request time.

Bindings:
    bind:      factory called on every make()
    singleton: factory called once, result cached
    instance:  pre-built object
    make:      resolve a binding, or import and instantiate "module:Class"

Usage:
    from apikit.core.container import Container

    container = Container()
    container.singleton("api.auth", lambda c: Auth(c.make("api.router"), c, providers={}))
    auth = container.make("api.auth")

    # Controllers are resolved from import paths
    controller = container.make("app.controllers:UserController")
"""

import importlib
import inspect
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

from apikit.core.errors import BindingResolutionError, RouteMiddlewareNotFoundError

Factory = Callable[["Container"], Any]


@dataclass(slots=True)
class _Binding:
    factory: Factory
    shared: bool


class Container:
    """Named service registry with lazy singletons and provider bootstrapping.

    Attributes:
        _bindings: Registered factories by abstract name.
        _instances: Resolved shared services and explicit instances.
        _route_middleware: Route middleware aliases (e.g. "api.auth").
        _providers: Registered service providers, booted in order.
    """

    def __init__(self) -> None:
        self._bindings: dict[str, _Binding] = {}
        self._instances: dict[str, Any] = {}
        self._route_middleware: dict[str, Any] = {}
        self._providers: list[Any] = []
        self._booted = False

    # -------------------------------------------------------------------------
    # Bindings
    # -------------------------------------------------------------------------

    def bind(self, abstract: str, factory: Factory, *, shared: bool = False) -> None:
        """Register a factory for an abstract name.

        Re-binding drops any cached instance.

        Args:
            abstract: Service name (e.g. "api.router").
            factory: Callable receiving the container and returning the service.
            shared: Cache the first resolved instance.
        """
        self._instances.pop(abstract, None)
        self._bindings[abstract] = _Binding(factory=factory, shared=shared)

    def singleton(self, abstract: str, factory: Factory) -> None:
        """Register a shared factory (resolved once)."""
        self.bind(abstract, factory, shared=True)

    def instance(self, abstract: str, value: Any) -> Any:
        """Register an existing object.

        Returns:
            The registered object.
        """
        self._instances[abstract] = value
        return value

    def bound(self, abstract: str) -> bool:
        """Whether the abstract has a binding or instance."""
        return abstract in self._instances or abstract in self._bindings

    def make(self, abstract: str | type) -> Any:
        """Resolve a service.

        Resolution order: explicit instance, binding, importable class path.
        Classes (given directly or by path) are instantiated without
        arguments, or with the container when their constructor declares a
        ``container`` parameter.

        Args:
            abstract: Service name, "module:Class" / "module.Class" path, or a class.

        Returns:
            Resolved service.

        Raises:
            BindingResolutionError: If nothing can be resolved.
        """
        if isinstance(abstract, type):
            return self._build(abstract)

        if abstract in self._instances:
            return self._instances[abstract]

        binding = self._bindings.get(abstract)
        if binding is not None:
            resolved = binding.factory(self)
            if binding.shared:
                self._instances[abstract] = resolved
            return resolved

        return self._build(self.resolve_class(abstract))

    def resolve_class(self, path: str) -> type:
        """Import a class from "module:Class" or "module.Class" without instantiating it.

        Raises:
            BindingResolutionError: If the path does not name an importable class.
        """
        module_name, sep, attr = path.partition(":")
        if not sep:
            module_name, _, attr = path.rpartition(".")
        if not module_name or not attr:
            raise BindingResolutionError(path)
        try:
            module = importlib.import_module(module_name)
            target = getattr(module, attr)
        except (ImportError, AttributeError) as exc:
            raise BindingResolutionError(path) from exc
        if not isinstance(target, type):
            raise BindingResolutionError(path)
        return target

    def _build(self, cls: type) -> Any:
        """Instantiate a class, injecting the container when requested."""
        try:
            parameters = inspect.signature(cls).parameters
        except (TypeError, ValueError):
            return cls()
        if "container" in parameters:
            return cls(container=self)
        return cls()

    # -------------------------------------------------------------------------
    # Route middleware
    # -------------------------------------------------------------------------

    def route_middleware(self, middleware: Mapping[str, Any]) -> None:
        """Register route middleware aliases.

        Values are middleware classes, import paths, or ready instances;
        classes and paths are resolved through make() on first use.

        Args:
            middleware: Mapping of alias to middleware.
        """
        self._route_middleware.update(middleware)

    def get_route_middleware(self, name: str) -> Any:
        """Resolve a route middleware alias to a callable.

        Raises:
            RouteMiddlewareNotFoundError: If the alias is unknown.
        """
        if name not in self._route_middleware:
            raise RouteMiddlewareNotFoundError(name)

        middleware = self._route_middleware[name]
        if isinstance(middleware, (str, type)):
            middleware = self.make(middleware)
            self._route_middleware[name] = middleware
        return middleware

    def get_route_middleware_names(self) -> list[str]:
        """Registered route middleware aliases."""
        return list(self._route_middleware)

    # -------------------------------------------------------------------------
    # Service providers
    # -------------------------------------------------------------------------

    def register(self, provider: Any) -> Any:
        """Register a service provider and run its register() hook.

        A provider registered after boot is booted immediately.

        Returns:
            The provider.
        """
        provider.register()
        self._providers.append(provider)
        if self._booted and hasattr(provider, "boot"):
            provider.boot()
        return provider

    def boot(self) -> None:
        """Boot every registered provider once."""
        if self._booted:
            return
        for provider in self._providers:
            if hasattr(provider, "boot"):
                provider.boot()
        self._booted = True

    @property
    def is_booted(self) -> bool:
        """Whether boot() has run."""
        return self._booted
