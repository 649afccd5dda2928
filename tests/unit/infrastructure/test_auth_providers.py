"""Unit tests for the Basic and JWT authentication providers."""

import base64
import time
from types import SimpleNamespace
from unittest.mock import MagicMock

import bcrypt
import jwt
import pytest
from starlette.requests import Request

from apikit.infrastructure.auth import BasicProvider, JWTProvider
from apikit.presentation.errors import (
    AccessDeniedHttpException,
    BadRequestHttpException,
    UnauthorizedHttpException,
)

SECRET = "unit-test-secret-key-with-enough-length"


def make_request(authorization: str | None = None) -> Request:
    headers = []
    if authorization is not None:
        headers.append((b"authorization", authorization.encode()))
    return Request({"type": "http", "method": "GET", "path": "/", "headers": headers})


def basic(identifier: str, password: str) -> str:
    return "Basic " + base64.b64encode(f"{identifier}:{password}".encode()).decode()


def route_with_scopes(*scopes: str) -> MagicMock:
    route = MagicMock()
    route.get_scopes.return_value = list(scopes)
    return route


@pytest.fixture(scope="module")
def password_hash() -> str:
    return bcrypt.hashpw(b"secret", bcrypt.gensalt(rounds=4)).decode()


# ============================================================================
# BasicProvider
# ============================================================================


@pytest.mark.unit
class TestBasicProvider:
    async def test_authenticates_valid_credentials(self, password_hash):
        """Should return the resolved user for a matching password."""
        user = SimpleNamespace(email="ada@example.com", password=password_hash)
        provider = BasicProvider(lambda email: user if email == user.email else None)

        result = await provider.authenticate(make_request(basic("ada@example.com", "secret")), None)

        assert result is user

    async def test_supports_async_resolver_and_mappings(self, password_hash):
        """Should await async resolvers and read hashes from mappings."""
        user = {"email": "ada@example.com", "password": password_hash}

        async def resolve(email):
            return user

        provider = BasicProvider(resolve)

        result = await provider.authenticate(make_request(basic("ada@example.com", "secret")), None)

        assert result is user

    async def test_wrong_password_is_unauthorized(self, password_hash):
        """Should reject a non-matching password with a Basic challenge."""
        user = SimpleNamespace(password=password_hash)
        provider = BasicProvider(lambda email: user)

        with pytest.raises(UnauthorizedHttpException) as exc_info:
            await provider.authenticate(make_request(basic("ada@example.com", "wrong")), None)

        assert exc_info.value.headers == {"WWW-Authenticate": "Basic"}

    async def test_unknown_user_is_unauthorized(self):
        """Should reject identifiers the resolver does not know."""
        provider = BasicProvider(lambda email: None)

        with pytest.raises(UnauthorizedHttpException):
            await provider.authenticate(make_request(basic("nobody@example.com", "x")), None)

    async def test_non_bcrypt_hash_is_unauthorized(self):
        """Should treat malformed stored hashes as a failed check."""
        provider = BasicProvider(lambda email: SimpleNamespace(password="plain"))

        with pytest.raises(UnauthorizedHttpException):
            await provider.authenticate(make_request(basic("a@example.com", "plain")), None)

    @pytest.mark.parametrize("header", [None, "Bearer token"])
    async def test_missing_basic_header_is_not_applicable(self, header):
        """Should signal that the credentials are not for this provider."""
        provider = BasicProvider(lambda email: None)

        with pytest.raises(BadRequestHttpException):
            await provider.authenticate(make_request(header), None)

    async def test_malformed_header_is_unauthorized(self):
        """Should reject undecodable Basic credentials."""
        provider = BasicProvider(lambda email: None)

        with pytest.raises(UnauthorizedHttpException):
            await provider.authenticate(make_request("Basic !!!not-base64"), None)


# ============================================================================
# JWTProvider
# ============================================================================


def token(claims: dict, secret: str = SECRET) -> str:
    return "Bearer " + jwt.encode(claims, secret, algorithm="HS256")


@pytest.mark.unit
class TestJWTProvider:
    async def test_returns_claims_without_resolver(self):
        """Should use the verified claims as the user."""
        provider = JWTProvider(SECRET)

        user = await provider.authenticate(make_request(token({"sub": "42"})), None)

        assert user == {"sub": "42"}

    async def test_resolves_user_from_claims(self):
        """Should pass claims to the user resolver."""

        async def resolve(claims):
            return {"id": int(claims["sub"])}

        provider = JWTProvider(SECRET, user_resolver=resolve)

        user = await provider.authenticate(make_request(token({"sub": "42"})), None)

        assert user == {"id": 42}

    async def test_resolver_returning_none_is_unauthorized(self):
        """Should reject tokens whose subject no longer exists."""
        provider = JWTProvider(SECRET, user_resolver=lambda claims: None)

        with pytest.raises(UnauthorizedHttpException):
            await provider.authenticate(make_request(token({"sub": "42"})), None)

    async def test_bad_signature_is_unauthorized(self):
        """Should reject tokens signed with another secret."""
        provider = JWTProvider(SECRET)

        with pytest.raises(UnauthorizedHttpException) as exc_info:
            await provider.authenticate(
                make_request(token({"sub": "1"}, secret="another-secret-key-of-enough-length")), None
            )

        assert exc_info.value.headers == {"WWW-Authenticate": "Bearer"}

    async def test_expired_token_is_unauthorized(self):
        """Should reject expired tokens."""
        provider = JWTProvider(SECRET)

        with pytest.raises(UnauthorizedHttpException) as exc_info:
            await provider.authenticate(
                make_request(token({"sub": "1", "exp": int(time.time()) - 10})), None
            )

        assert exc_info.value.detail == "Token has expired."

    @pytest.mark.parametrize("header", [None, "Basic abc", "Bearer "])
    async def test_missing_bearer_is_not_applicable(self, header):
        """Should signal that the credentials are not for this provider."""
        with pytest.raises(BadRequestHttpException):
            await JWTProvider(SECRET).authenticate(make_request(header), None)

    @pytest.mark.parametrize(
        "claims",
        [{"scope": "users:read users:write"}, {"scopes": ["users:write"]}],
    )
    async def test_any_route_scope_grants_access(self, claims):
        """Should accept tokens carrying at least one route scope."""
        provider = JWTProvider(SECRET)
        route = route_with_scopes("users:write", "admin")

        user = await provider.authenticate(make_request(token({"sub": "1", **claims})), route)

        assert user["sub"] == "1"

    async def test_missing_scopes_is_access_denied(self):
        """Should reject tokens without any route scope."""
        provider = JWTProvider(SECRET)
        route = route_with_scopes("admin")

        with pytest.raises(AccessDeniedHttpException):
            await provider.authenticate(
                make_request(token({"sub": "1", "scope": "users:read"})), route
            )

    async def test_route_without_scopes_accepts_any_token(self):
        """Should skip the scope check for routes without scopes."""
        provider = JWTProvider(SECRET)

        user = await provider.authenticate(make_request(token({"sub": "1"})), route_with_scopes())

        assert user == {"sub": "1"}

    def test_token_scopes_parses_both_claims(self):
        """Should read space-separated scope and list scopes claims."""
        assert JWTProvider.token_scopes({"scope": "a b"}) == {"a", "b"}
        assert JWTProvider.token_scopes({"scopes": ["c"]}) == {"c"}
        assert JWTProvider.token_scopes({}) == set()
