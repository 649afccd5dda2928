"""Authentication service.

Tries the configured authentication providers in order until one
authenticates the request. The authenticated user and the provider that
authenticated it are kept on the request state.

Usage:
    auth = container.make("api.auth")
    auth.extend("jwt", JWTProvider(settings.jwt_secret))

    user = await auth.authenticate(request, ["jwt"])
    auth.check(request)          # True
    auth.get_user(request)       # user
"""

from collections.abc import Callable, Mapping, Sequence
from typing import TYPE_CHECKING, Any

from starlette.requests import Request

from apikit.core.container import Container, get_logger
from apikit.domain.protocols.auth_provider_protocol import AuthProviderProtocol
from apikit.presentation.errors.exceptions import (
    BadRequestHttpException,
    UnauthorizedHttpException,
)

if TYPE_CHECKING:
    from apikit.presentation.routing.router import Router

USER_STATE_KEY = "api_user"
PROVIDER_STATE_KEY = "api_auth_provider"

ProviderFactory = Callable[[Container], AuthProviderProtocol]


class Auth:
    """Authenticate requests against named providers.

    Args:
        router: API router (current route lookup).
        container: Service container passed to provider factories.
        providers: Providers by name, tried in order.
    """

    def __init__(
        self,
        router: "Router",
        container: Container,
        providers: Mapping[str, AuthProviderProtocol] | None = None,
    ) -> None:
        self.router = router
        self.container = container
        self.providers: dict[str, AuthProviderProtocol] = dict(providers or {})

    async def authenticate(self, request: Request, providers: Sequence[str] | None = None) -> Any:
        """Authenticate a request.

        Args:
            request: Incoming request.
            providers: Names of the providers to try (all when empty).

        Returns:
            The authenticated user.

        Raises:
            UnauthorizedHttpException: No provider authenticated the request.
            AccessDeniedHttpException: A provider rejected the route scopes.
        """
        route = self.router.get_current_route(request)
        unauthorized: list[UnauthorizedHttpException] = []

        for name, provider in self.filter_providers(providers).items():
            try:
                user = await provider.authenticate(request, route)
            except UnauthorizedHttpException as exc:
                unauthorized.append(exc)
                continue
            except BadRequestHttpException:
                # Credentials for this provider are absent
                continue

            setattr(request.state, USER_STATE_KEY, user)
            setattr(request.state, PROVIDER_STATE_KEY, name)
            return user

        get_logger().info(
            "API authentication failed",
            path=request.url.path,
            providers=list(self.filter_providers(providers)),
        )

        if unauthorized:
            raise unauthorized[-1]
        raise UnauthorizedHttpException(
            "api",
            "Failed to authenticate because of bad credentials or an invalid authorization header.",
        )

    def filter_providers(self, providers: Sequence[str] | None) -> dict[str, AuthProviderProtocol]:
        """Providers restricted to the given names, in configured order."""
        if not providers:
            return dict(self.providers)
        return {name: provider for name, provider in self.providers.items() if name in providers}

    def check(self, request: Request) -> bool:
        """Whether the request has been authenticated."""
        return getattr(request.state, USER_STATE_KEY, None) is not None

    def get_user(self, request: Request) -> Any:
        """The authenticated user, or None."""
        return getattr(request.state, USER_STATE_KEY, None)

    def user(self, request: Request) -> Any:
        return self.get_user(request)

    def get_provider_used(self, request: Request) -> AuthProviderProtocol | None:
        """The provider that authenticated the request, or None."""
        name = getattr(request.state, PROVIDER_STATE_KEY, None)
        return self.providers.get(name) if name is not None else None

    def set_user(self, request: Request, user: Any) -> None:
        """Mark a request as authenticated by the application itself."""
        setattr(request.state, USER_STATE_KEY, user)

    def extend(self, name: str, provider: AuthProviderProtocol | ProviderFactory) -> None:
        """Add a provider (or a factory receiving the container)."""
        if not hasattr(provider, "authenticate") and callable(provider):
            provider = provider(self.container)
        self.providers[name] = provider  # type: ignore[assignment]

    def get_providers(self) -> dict[str, AuthProviderProtocol]:
        return dict(self.providers)
