"""Unit tests for transformer bindings and the factory."""

import pytest

from apikit.core.container import Container
from apikit.core.errors import BindingResolutionError, TransformerNotBoundError
from apikit.infrastructure.transformer import Page
from apikit.presentation.transformer import Binding, TransformerFactory
from tests.support.models import Post, User, UserTransformer, ada

TRANSFORMER_PATH = "tests.support.models:UserTransformer"


class Admin(User):
    pass


class RecordingAdapter:
    def __init__(self) -> None:
        self.calls = []

    async def transform(self, response, transformer, binding, request):
        self.calls.append((response, transformer, binding, request))
        return {"data": "transformed"}


@pytest.fixture
def container() -> Container:
    return Container()


@pytest.fixture
def adapter() -> RecordingAdapter:
    return RecordingAdapter()


@pytest.fixture
def factory(container, adapter) -> TransformerFactory:
    return TransformerFactory(container, adapter)


@pytest.mark.unit
class TestBinding:
    def test_class_resolver(self, container):
        """Should return transformer classes as-is."""
        assert Binding(container, UserTransformer).resolve_transformer() is UserTransformer

    def test_path_resolver(self, container):
        """Should import transformer paths."""
        assert Binding(container, TRANSFORMER_PATH).resolve_transformer() is UserTransformer

    def test_container_binding_resolver(self, container):
        """Should prefer container bindings for string resolvers."""
        container.instance("transformers.user", UserTransformer)

        assert Binding(container, "transformers.user").resolve_transformer() is UserTransformer

    def test_callable_resolver(self, container):
        """Should call factories with the container."""
        binding = Binding(container, lambda c: UserTransformer if c is container else None)

        assert binding.resolve_transformer() is UserTransformer

    def test_unresolvable(self, container):
        """Should reject unsupported resolvers."""
        with pytest.raises(TypeError):
            Binding(container, 42).resolve_transformer()

        with pytest.raises(BindingResolutionError):
            Binding(container, "tests.support.models:Missing").resolve_transformer()

    def test_meta(self, container):
        """Should collect meta data."""
        binding = Binding(container, UserTransformer, meta={"a": 1})

        binding.add_meta("b", 2)
        assert binding.get_meta() == {"a": 1, "b": 2}

        binding.set_meta({"c": 3})
        assert binding.get_meta() == {"c": 3}


@pytest.mark.unit
class TestTransformable:
    def test_item(self, factory):
        """Should find bindings for instances."""
        factory.register(User, UserTransformer)

        assert factory.transformable(ada()) is True
        assert factory.transformable(Post(id=1, title="x")) is False
        assert factory.transformable({"id": 1}) is False

    def test_subclass(self, factory):
        """Should find bindings registered for a base class."""
        factory.register(User, UserTransformer)

        assert factory.transformable(Admin(id=3, name="Root")) is True

    def test_collections_by_first_item(self, factory):
        """Should key sequences and pages by their first item."""
        factory.register(User, UserTransformer)

        assert factory.transformable([ada()]) is True
        assert factory.transformable(Page(items=[ada()], total=1)) is True
        assert factory.transformable([]) is False
        assert factory.transformable(Page(items=[])) is False

    def test_register_by_path(self, factory):
        """Should import classes registered by path."""
        factory.register("tests.support.models:User", TRANSFORMER_PATH)

        assert factory.get_binding(ada()).resolve_transformer() is UserTransformer


@pytest.mark.unit
class TestTransform:
    async def test_delegates_to_adapter(self, factory, adapter):
        """Should hand the response and resolved transformer to the adapter."""
        binding = factory.register(User, TRANSFORMER_PATH, parameters={"key": "user"})
        user = ada()

        result = await factory.transform(user, request="request")

        assert result == {"data": "transformed"}
        assert adapter.calls == [(user, UserTransformer, binding, "request")]
        assert binding.get_parameters() == {"key": "user"}

    async def test_unbound(self, factory):
        """Should raise for unbound responses."""
        with pytest.raises(TransformerNotBoundError, match="Post"):
            await factory.transform(Post(id=1, title="x"), request=None)

    def test_set_adapter(self, factory):
        """Should replace the adapter."""
        replacement = RecordingAdapter()

        factory.set_adapter(replacement)

        assert factory.get_adapter() is replacement
