"""Unit tests for the authentication service."""

import pytest
from starlette.requests import Request

from apikit.core.container import Container
from apikit.presentation.auth import Auth, AuthMiddleware
from apikit.presentation.errors import (
    AccessDeniedHttpException,
    BadRequestHttpException,
    UnauthorizedHttpException,
)


class StubRouter:
    def __init__(self, route=None) -> None:
        self.route = route

    def get_current_route(self, request):
        return self.route


class StubRoute:
    def __init__(self, protected: bool, providers=()) -> None:
        self.protected = protected
        self.providers = list(providers)

    def is_protected(self) -> bool:
        return self.protected

    def get_auth_providers(self) -> list[str]:
        return self.providers


class StubProvider:
    def __init__(self, user=None, error: Exception | None = None) -> None:
        self.user = user
        self.error = error
        self.calls = 0

    async def authenticate(self, request, route):
        self.calls += 1
        if self.error is not None:
            raise self.error
        return self.user


def make_request() -> Request:
    return Request(
        {
            "type": "http",
            "method": "GET",
            "scheme": "http",
            "server": ("testserver", 80),
            "path": "/api/me",
            "query_string": b"",
            "headers": [],
        }
    )


def make_auth(**providers) -> Auth:
    return Auth(StubRouter(), Container(), providers)


@pytest.mark.unit
class TestAuthenticate:
    async def test_first_provider(self):
        """Should authenticate with the first successful provider."""
        auth = make_auth(jwt=StubProvider(user="ada"), basic=StubProvider(user="grace"))
        request = make_request()

        user = await auth.authenticate(request)

        assert user == "ada"
        assert auth.check(request) is True
        assert auth.get_user(request) == "ada"
        assert auth.user(request) == "ada"
        assert auth.get_provider_used(request) is auth.get_providers()["jwt"]

    async def test_skips_provider_without_credentials(self):
        """Should move on when a provider finds no credentials."""
        basic = StubProvider(user="grace")
        auth = make_auth(jwt=StubProvider(error=BadRequestHttpException()), basic=basic)

        assert await auth.authenticate(make_request()) == "grace"
        assert basic.calls == 1

    async def test_raises_last_unauthorized(self):
        """Should raise the last provider rejection."""
        auth = make_auth(
            jwt=StubProvider(error=UnauthorizedHttpException("Bearer", "expired")),
            basic=StubProvider(error=UnauthorizedHttpException("Basic", "wrong password")),
        )

        with pytest.raises(UnauthorizedHttpException) as exc_info:
            await auth.authenticate(make_request())

        assert exc_info.value.detail == "wrong password"
        assert exc_info.value.headers == {"WWW-Authenticate": "Basic"}

    async def test_generic_unauthorized(self):
        """Should raise a generic 401 when no provider had credentials."""
        auth = make_auth(jwt=StubProvider(error=BadRequestHttpException()))

        with pytest.raises(UnauthorizedHttpException) as exc_info:
            await auth.authenticate(make_request())

        assert exc_info.value.status_code == 401
        assert exc_info.value.challenge == "api"

    async def test_access_denied_propagates(self):
        """Should let scope rejections through."""
        auth = make_auth(jwt=StubProvider(error=AccessDeniedHttpException("Insufficient scopes.")))

        with pytest.raises(AccessDeniedHttpException):
            await auth.authenticate(make_request())

    async def test_restricted_providers(self):
        """Should only try the named providers."""
        jwt = StubProvider(user="ada")
        auth = make_auth(jwt=jwt, basic=StubProvider(user="grace"))

        assert await auth.authenticate(make_request(), ["basic"]) == "grace"
        assert jwt.calls == 0


@pytest.mark.unit
class TestProviders:
    def test_filter_keeps_configured_order(self):
        """Should keep configured order when filtering."""
        auth = make_auth(jwt=StubProvider(), basic=StubProvider(), oauth=StubProvider())

        assert list(auth.filter_providers(["oauth", "jwt"])) == ["jwt", "oauth"]
        assert list(auth.filter_providers(None)) == ["jwt", "basic", "oauth"]

    def test_extend_with_factory(self):
        """Should call provider factories with the container."""
        auth = make_auth()
        seen = []

        def factory(container):
            seen.append(container)
            return StubProvider(user="ada")

        auth.extend("custom", factory)

        assert isinstance(auth.get_providers()["custom"], StubProvider)
        assert seen == [auth.container]

    def test_set_user(self):
        """Should mark requests as authenticated."""
        auth = make_auth()
        request = make_request()

        assert auth.check(request) is False
        auth.set_user(request, "ada")

        assert auth.check(request) is True
        assert auth.get_provider_used(request) is None


@pytest.mark.unit
class TestAuthMiddleware:
    @pytest.fixture
    def container(self) -> Container:
        return Container()

    def install(self, container, route, provider):
        router = StubRouter(route)
        container.instance("api.router", router)
        container.instance("api.auth", Auth(router, container, {"jwt": provider}))

    async def test_authenticates_protected_routes(self, container):
        """Should authenticate protected routes with their providers."""
        provider = StubProvider(user="ada")
        self.install(container, StubRoute(protected=True, providers=["jwt"]), provider)
        request = make_request()

        await AuthMiddleware(container)(request)

        assert container.make("api.auth").get_user(request) == "ada"

    async def test_skips_unprotected_routes(self, container):
        """Should not authenticate unprotected routes."""
        provider = StubProvider(user="ada")
        self.install(container, StubRoute(protected=False), provider)

        await AuthMiddleware(container)(make_request())

        assert provider.calls == 0

    async def test_skips_authenticated_requests(self, container):
        """Should not authenticate twice."""
        provider = StubProvider(user="ada")
        self.install(container, StubRoute(protected=True), provider)
        request = make_request()
        container.make("api.auth").set_user(request, "grace")

        await AuthMiddleware(container)(request)

        assert provider.calls == 0
