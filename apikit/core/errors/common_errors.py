"""Programmer errors raised while wiring the toolkit.

Unlike DomainError these ARE exceptions: they signal configuration mistakes
(unknown container binding, unknown route middleware alias, unbound
transformer) that must fail loudly at startup or first use.

Usage:
    from apikit.core.errors import BindingResolutionError

    raise BindingResolutionError("api.router")
"""

from apikit.core.enums import ErrorCode


class ToolkitError(Exception):
    """Base class for toolkit configuration errors.

    Attributes:
        code: Machine-readable error code.
    """

    code: ErrorCode

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class BindingResolutionError(ToolkitError, LookupError):
    """Raised when the container cannot resolve an abstract."""

    code = ErrorCode.BINDING_NOT_FOUND

    def __init__(self, abstract: str) -> None:
        super().__init__(f"Unable to resolve [{abstract}] from the container")
        self.abstract = abstract


class RouteMiddlewareNotFoundError(ToolkitError, LookupError):
    """Raised when a route names a middleware alias that was never registered."""

    code = ErrorCode.ROUTE_MIDDLEWARE_NOT_FOUND

    def __init__(self, name: str) -> None:
        super().__init__(f"Route middleware [{name}] is not registered")
        self.name = name


class TransformerNotBoundError(ToolkitError, LookupError):
    """Raised when a response class has no transformer binding."""

    code = ErrorCode.TRANSFORMER_NOT_BOUND

    def __init__(self, class_name: str) -> None:
        super().__init__(f"Unable to find bound transformer for [{class_name}] class")
        self.class_name = class_name


class RouteDefinitionError(ToolkitError, ValueError):
    """Raised when a route cannot be registered as defined.

    Examples: a route declared outside any version group, or an action
    whose ``uses`` names neither a callable nor a controller method.
    """

    code = ErrorCode.ROUTE_DEFINITION_INVALID
