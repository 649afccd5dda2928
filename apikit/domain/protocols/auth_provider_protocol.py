"""Authentication provider protocol (port).

Providers turn request credentials into a user object. The Auth service tries
providers in order; a provider signals "these credentials are not mine" by
raising BadRequestHttpException (the next provider is tried) and "these
credentials are mine but invalid" by raising UnauthorizedHttpException.

Usage:
    class ApiKeyProvider:
        async def authenticate(self, request, route):
            key = request.headers.get("X-Api-Key")
            if key is None:
                raise BadRequestHttpException("X-Api-Key header missing")
            user = await users.by_api_key(key)
            if user is None:
                raise UnauthorizedHttpException("Invalid API key")
            return user
"""

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from starlette.requests import Request

    from apikit.presentation.routing.route import Route


class AuthProviderProtocol(Protocol):
    """Protocol for authentication providers."""

    async def authenticate(self, request: "Request", route: "Route") -> Any:
        """Authenticate the request.

        Args:
            request: Incoming request.
            route: Option record of the matched API route (scopes, providers).

        Returns:
            Authenticated user object.

        Raises:
            BadRequestHttpException: Credentials not applicable to this provider.
            UnauthorizedHttpException: Credentials invalid.
            AccessDeniedHttpException: Authenticated but missing route scopes.
        """
        ...
