"""Transformer manager: include parsing and resource rendering.

The manager turns a resource into a serializable structure:

    {"data": {...}, "meta": {"pagination": {...}}}

Requested includes are tracked per request context, so one manager can
serve concurrent requests. Nested includes use dot notation
(``posts.comments``); requesting a nested include also requests its parents.

Usage:
    manager = Manager()
    manager.parse_includes(["posts.comments"])
    manager.get_requested_includes()  # ["posts", "posts.comments"]
    manager.create_data(Item(user, UserTransformer)).to_dict()
"""

from collections.abc import Iterable, Mapping
from contextvars import ContextVar
from typing import Any

from apikit.infrastructure.transformer.resources import Collection, Item, Resource
from apikit.infrastructure.transformer.transformer import Transformer, nested_transformer

IncludeTree = dict[str, "IncludeTree"]
Exclusions = dict[str, Any]


class Manager:
    """Parse includes and render resources with pydantic.

    Args:
        recursion_limit: Maximum include nesting depth.
    """

    def __init__(self, recursion_limit: int = 10) -> None:
        self.recursion_limit = recursion_limit
        self._requested: ContextVar[tuple[str, ...]] = ContextVar(
            f"requested_includes_{id(self)}", default=()
        )

    def parse_includes(self, includes: str | Iterable[str]) -> "Manager":
        """Record the includes requested for the current request.

        Args:
            includes: Comma-separated string or list of dotted include names.

        Returns:
            Manager: self, for chaining.
        """
        if isinstance(includes, str):
            includes = includes.split(",")

        requested: list[str] = []
        for include in includes:
            parts = [part for part in include.strip().split(".") if part]
            for depth in range(1, min(len(parts), self.recursion_limit) + 1):
                name = ".".join(parts[:depth])
                if name not in requested:
                    requested.append(name)

        self._requested.set(tuple(requested))
        return self

    def get_requested_includes(self) -> list[str]:
        """Includes requested for the current request, parents included."""
        return list(self._requested.get())

    def create_data(self, resource: Resource) -> "Scope":
        """Bind a resource to the current includes."""
        return Scope(self, resource, self._include_tree())

    def _include_tree(self) -> IncludeTree:
        tree: IncludeTree = {}
        for include in self._requested.get():
            node = tree
            for part in include.split("."):
                node = node.setdefault(part, {})
        return tree

    def exclusions(
        self, transformer: type[Transformer], tree: IncludeTree, depth: int = 0
    ) -> Exclusions:
        """Build a pydantic ``exclude`` mapping for a transformer and include tree.

        Includable fields that are neither requested nor default are
        excluded. Beyond the recursion limit every includable field is.
        """
        included = set(tree) | set(transformer.get_default_includes())
        if depth >= self.recursion_limit:
            included = set()

        includable = set(transformer.get_available_includes()) | set(
            transformer.get_default_includes()
        )

        exclude: Exclusions = {}
        for name, field in transformer.model_fields.items():
            if name in includable and name not in included:
                exclude[name] = True
                continue

            nested, many = nested_transformer(field.annotation)
            if nested is None:
                continue
            nested_exclude = self.exclusions(nested, tree.get(name, {}), depth + 1)
            if nested_exclude:
                exclude[name] = {"__all__": nested_exclude} if many else nested_exclude

        return exclude

    def build(self, transformer: type[Transformer], source: Any, exclude: Exclusions) -> Transformer:
        """Validate a transformer from a source object, skipping excluded relations.

        Excluded relations are never read from the source, so lazy ORM
        relationships are not triggered for them.
        """
        if isinstance(source, transformer):
            return source

        data: dict[str, Any] = {}
        for name, field in transformer.model_fields.items():
            if exclude.get(name) is True:
                continue

            found, value = _read(source, name)
            if not found:
                continue

            nested, many = nested_transformer(field.annotation)
            if nested is not None and value is not None:
                nested_exclude = exclude.get(name, {})
                if many:
                    nested_exclude = nested_exclude.get("__all__", {})
                    value = [self.build(nested, item, nested_exclude) for item in value]
                else:
                    value = self.build(nested, value, nested_exclude)

            data[name] = value

        return transformer.model_validate(data)


class Scope:
    """A resource bound to the includes of the current request."""

    def __init__(self, manager: Manager, resource: Resource, includes: IncludeTree) -> None:
        self.manager = manager
        self.resource = resource
        self.includes = includes

    def to_dict(self) -> dict[str, Any]:
        """Render the resource.

        Returns:
            ``{key: data}`` plus ``meta`` when the resource carries meta or
            pagination.
        """
        resource = self.resource
        transformer = resource.transformer
        exclude = self.manager.exclusions(transformer, self.includes)

        if isinstance(resource, Collection):
            data: Any = [self._dump(transformer, item, exclude) for item in resource.data]
        elif isinstance(resource, Item):
            data = None if resource.data is None else self._dump(transformer, resource.data, exclude)
        else:
            raise TypeError(f"Unsupported resource type: {type(resource).__name__}")

        output: dict[str, Any] = {resource.get_resource_key(): data}

        meta = resource.get_meta()
        if isinstance(resource, Collection) and resource.get_paginator() is not None:
            meta["pagination"] = resource.get_paginator().to_dict()
        if meta:
            output["meta"] = meta

        return output

    def _dump(self, transformer: type[Transformer], source: Any, exclude: Exclusions) -> dict[str, Any]:
        model = self.manager.build(transformer, source, exclude)
        return model.model_dump(mode="json", exclude=exclude or None)


def _read(source: Any, name: str) -> tuple[bool, Any]:
    if isinstance(source, Mapping):
        if name in source:
            return True, source[name]
        return False, None
    if hasattr(source, name):
        return True, getattr(source, name)
    return False, None
