"""API tests for transformed and conditional responses."""

import pytest
from starlette.responses import PlainTextResponse

from apikit.infrastructure.transformer import Page
from tests.conftest import accept
from tests.support.models import User, UserTransformer, ada, grace


@pytest.fixture
def transformer(container):
    factory = container.make("api.transformer")
    factory.register(User, UserTransformer)
    return factory


@pytest.mark.integration
class TestTransformedResponses:
    def test_item(self, api, transformer, client):
        """Should wrap transformed items in data."""
        with api.version("v1"):
            api.get("/users/{id}", lambda id: ada())

        response = client.get("/api/users/1", headers=accept())

        assert response.json() == {"data": {"id": 1, "name": "Ada"}}

    def test_includes(self, api, transformer, client):
        """Should render nested includes requested in the query string."""
        with api.version("v1"):
            api.get("/users", lambda: [ada(), grace()])

        response = client.get("/api/users?include=posts.comments")

        first = response.json()["data"][0]
        assert first["posts"][0]["comments"] == [{"id": 100, "body": "Nice"}]

    def test_pagination(self, api, transformer, client):
        """Should add pagination meta for pages."""
        def index(page: int = 1):
            return Page(items=[grace()], total=3, per_page=1, current_page=page)

        with api.version("v1"):
            api.get("/users", index)

        response = client.get("/api/users?page=2")

        pagination = response.json()["meta"]["pagination"]
        assert pagination["current_page"] == 2
        assert pagination["total_pages"] == 3
        assert pagination["links"]["previous"].endswith("page=1")
        assert pagination["links"]["next"].endswith("page=3")

    def test_resource_key(self, api, container, client):
        """Should render under the binding key."""
        container.make("api.transformer").register(User, UserTransformer, parameters={"key": "user"})
        with api.version("v1"):
            api.get("/me", lambda: ada())

        assert client.get("/api/me").json() == {"user": {"id": 1, "name": "Ada"}}

    def test_plain_results(self, api, client):
        """Should encode unbound results as JSON."""
        with api.version("v1"):
            api.get("/status", lambda: {"ok": True})

        assert client.get("/api/status").json() == {"ok": True}

    def test_response_passthrough(self, api, client):
        """Should return Response objects untouched."""
        with api.version("v1"):
            api.get("/text", lambda: PlainTextResponse("hello"))

        response = client.get("/api/text")

        assert response.text == "hello"
        assert "ETag" not in response.headers


@pytest.mark.integration
class TestConditionalRequests:
    @pytest.fixture
    def routes(self, api):
        with api.version("v1"):
            api.get("/users", lambda: {"users": ["ada"]})
            api.get("/fresh", lambda: {"users": ["ada"]}, conditional_request=False)
            api.post("/users", lambda: {"created": True})
        return api

    def test_etag(self, routes, client):
        """Should add an ETag to GET responses."""
        response = client.get("/api/users")

        assert response.headers["ETag"].startswith('"')

    @pytest.mark.parametrize("template", ["{etag}", "W/{etag}", '"other", {etag}', "*"])
    def test_not_modified(self, routes, client, template):
        """Should answer 304 when If-None-Match matches."""
        etag = client.get("/api/users").headers["ETag"]

        response = client.get("/api/users", headers={"If-None-Match": template.format(etag=etag)})

        assert response.status_code == 304
        assert response.content == b""
        assert response.headers["ETag"] == etag

    def test_modified(self, routes, client):
        """Should answer 200 when If-None-Match does not match."""
        response = client.get("/api/users", headers={"If-None-Match": '"stale"'})

        assert response.status_code == 200

    def test_disabled(self, routes, client):
        """Should skip ETags for routes opting out."""
        assert "ETag" not in client.get("/api/fresh").headers

    def test_unsafe_methods(self, routes, client):
        """Should skip ETags for non-GET requests."""
        assert "ETag" not in client.post("/api/users").headers


@pytest.mark.integration
class TestErrorResponses:
    def test_unhandled_exception(self, api, client):
        """Should answer 500 problem details without internals."""

        def broken():
            raise RuntimeError("database password is hunter2")

        with api.version("v1"):
            api.get("/broken", broken)

        response = client.get("/api/broken")

        assert response.status_code == 500
        assert "hunter2" not in response.text
        assert response.json()["type"].endswith("/internal-server-error")
