"""JWT bearer token authentication provider.

Validates ``Authorization: Bearer <token>`` headers with PyJWT and enforces
route scopes against the token's ``scope`` (space-separated string) or
``scopes`` (list) claim.

Scope check:
    A route declaring scopes accepts a token carrying at least one of them.
    Routes without scopes accept any valid token.

Usage:
    provider = JWTProvider(secret=settings.jwt_secret, algorithm="HS256")
    container.make("api.auth").extend("jwt", provider)

    # Resolve claims to an application user
    provider = JWTProvider(secret, user_resolver=lambda claims: users.get(claims["sub"]))
"""

import inspect
from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any

import jwt
from jwt.exceptions import ExpiredSignatureError, InvalidTokenError
from starlette.requests import Request

from apikit.presentation.errors.exceptions import (
    AccessDeniedHttpException,
    BadRequestHttpException,
    UnauthorizedHttpException,
)

if TYPE_CHECKING:
    from apikit.presentation.routing.route import Route

ClaimsResolver = Callable[[dict[str, Any]], Any | Awaitable[Any]]


class JWTProvider:
    """Authenticate requests with signed JWT bearer tokens.

    Args:
        secret: Signing secret (HMAC) or public key.
        algorithm: Signing algorithm (default: HS256).
        user_resolver: Optional callable turning verified claims into a user.
            When omitted the claims themselves are the user.
        audience: Expected ``aud`` claim, if any.
    """

    challenge = "Bearer"

    def __init__(
        self,
        secret: str,
        algorithm: str = "HS256",
        user_resolver: ClaimsResolver | None = None,
        audience: str | None = None,
    ) -> None:
        self.secret = secret
        self.algorithm = algorithm
        self.user_resolver = user_resolver
        self.audience = audience

    async def authenticate(self, request: Request, route: "Route | None") -> Any:
        """Authenticate the request.

        Raises:
            BadRequestHttpException: No Bearer authorization header.
            UnauthorizedHttpException: Invalid or expired token, unknown user.
            AccessDeniedHttpException: Token lacks every route scope.
        """
        claims = self.decode(self._token(request))

        if route is not None:
            self._validate_scopes(claims, route.get_scopes())

        if self.user_resolver is None:
            return claims

        user = self.user_resolver(claims)
        if inspect.isawaitable(user):
            user = await user
        if user is None:
            raise UnauthorizedHttpException(self.challenge, "Unable to authenticate with invalid token.")
        return user

    def decode(self, token: str) -> dict[str, Any]:
        """Verify a token and return its claims.

        Raises:
            UnauthorizedHttpException: Signature, expiry or format invalid.
        """
        try:
            return jwt.decode(
                token,
                self.secret,
                algorithms=[self.algorithm],
                audience=self.audience,
                options={"verify_aud": self.audience is not None},
            )
        except ExpiredSignatureError as exc:
            raise UnauthorizedHttpException(self.challenge, "Token has expired.") from exc
        except InvalidTokenError as exc:
            raise UnauthorizedHttpException(
                self.challenge, "Unable to authenticate with invalid token."
            ) from exc

    @staticmethod
    def token_scopes(claims: dict[str, Any]) -> set[str]:
        """Scopes granted by a token's ``scope`` or ``scopes`` claim."""
        granted = claims.get("scopes", claims.get("scope", []))
        if isinstance(granted, str):
            granted = granted.split()
        return {str(scope) for scope in granted}

    def _validate_scopes(self, claims: dict[str, Any], scopes: list[str]) -> None:
        if not scopes:
            return
        if self.token_scopes(claims).isdisjoint(scopes):
            raise AccessDeniedHttpException("Insufficient scopes.")

    def _token(self, request: Request) -> str:
        header = request.headers.get("authorization", "")
        scheme, _, token = header.partition(" ")
        if scheme.lower() != "bearer" or not token.strip():
            raise BadRequestHttpException("Bearer authorization header not present.")
        return token.strip()
