"""HTTP Basic authentication provider.

Authenticates ``Authorization: Basic base64(identifier:password)`` headers
against users returned by an application-supplied resolver, verifying the
stored bcrypt hash.

Usage:
    async def find_user(email: str) -> User | None:
        return await users.by_email(email)

    provider = BasicProvider(find_user, identifier="email")
    container.make("api.auth").extend("basic", provider)
"""

import base64
import binascii
import inspect
from collections.abc import Awaitable, Callable, Mapping
from typing import TYPE_CHECKING, Any

import bcrypt
from starlette.requests import Request

from apikit.presentation.errors.exceptions import (
    BadRequestHttpException,
    UnauthorizedHttpException,
)

if TYPE_CHECKING:
    from apikit.presentation.routing.route import Route

UserResolver = Callable[[str], Any | Awaitable[Any]]


class BasicProvider:
    """Authenticate requests with HTTP Basic credentials.

    Args:
        user_resolver: Callable returning the user for an identifier (or None).
            May be sync or async.
        identifier: Name of the identifier field, used in error messages.
        password_field: Attribute (or mapping key) holding the bcrypt hash.
    """

    challenge = "Basic"

    def __init__(
        self,
        user_resolver: UserResolver,
        identifier: str = "email",
        password_field: str = "password",
    ) -> None:
        self.user_resolver = user_resolver
        self.identifier = identifier
        self.password_field = password_field

    async def authenticate(self, request: Request, route: "Route | None") -> Any:
        """Authenticate the request.

        Raises:
            BadRequestHttpException: No Basic authorization header.
            UnauthorizedHttpException: Malformed header or invalid credentials.
        """
        identifier, password = self._credentials(request)

        user = self.user_resolver(identifier)
        if inspect.isawaitable(user):
            user = await user

        if user is None or not self._verify(password, self._password_hash(user)):
            raise UnauthorizedHttpException(self.challenge, "Invalid credentials.")

        return user

    def _credentials(self, request: Request) -> tuple[str, str]:
        header = request.headers.get("authorization", "")
        scheme, _, encoded = header.partition(" ")
        if scheme.lower() != "basic":
            raise BadRequestHttpException("Basic authorization header not present.")

        try:
            decoded = base64.b64decode(encoded.strip(), validate=True).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as exc:
            raise UnauthorizedHttpException(
                self.challenge, "Malformed Basic authorization header."
            ) from exc

        identifier, sep, password = decoded.partition(":")
        if not sep or not identifier:
            raise UnauthorizedHttpException(
                self.challenge, f"Basic credentials must contain {self.identifier} and password."
            )
        return identifier, password

    def _password_hash(self, user: Any) -> str | None:
        if isinstance(user, Mapping):
            return user.get(self.password_field)
        return getattr(user, self.password_field, None)

    @staticmethod
    def _verify(password: str, password_hash: str | bytes | None) -> bool:
        if not password_hash:
            return False
        if isinstance(password_hash, str):
            password_hash = password_hash.encode("utf-8")
        try:
            # bcrypt.checkpw does constant-time comparison
            return bcrypt.checkpw(password.encode("utf-8"), password_hash)
        except ValueError:
            # Not a bcrypt hash
            return False
