"""Transformer base class.

A transformer is a pydantic model describing the public shape of a resource.
Fields listed in ``available_includes`` are only rendered when the client
requests them (``?include=posts``) or when they are listed in
``default_includes``. Includable fields must declare a default.

Usage:
    class PostTransformer(Transformer):
        id: int
        title: str


    class UserTransformer(Transformer):
        available_includes = ["posts"]

        id: int
        name: str
        posts: list[PostTransformer] | None = None
"""

import types
from collections.abc import Mapping, Sequence
from typing import Any, ClassVar, Union, get_args, get_origin

from pydantic import BaseModel, ConfigDict

_SEQUENCE_ORIGINS = (list, tuple, set, frozenset, Sequence)


class Transformer(BaseModel):
    """Base transformer validated from ORM objects, mappings or plain objects.

    Attributes:
        available_includes: Relations a client may request. Entries are
            names, or mappings whose keys are names.
        default_includes: Relations always rendered.
    """

    model_config = ConfigDict(from_attributes=True)

    available_includes: ClassVar[Sequence[str | Mapping[str, Any]]] = ()
    default_includes: ClassVar[Sequence[str]] = ()

    @classmethod
    def get_available_includes(cls) -> list[str]:
        """Names of the relations a client may request."""
        return include_names(cls.available_includes)

    @classmethod
    def get_default_includes(cls) -> list[str]:
        """Names of the relations always rendered."""
        return include_names(cls.default_includes)


def include_names(entries: Sequence[str | Mapping[str, Any]]) -> list[str]:
    """Flatten include declarations to relation names (mapping entries give their keys)."""
    names: list[str] = []
    for entry in entries:
        if isinstance(entry, Mapping):
            names.extend(str(key) for key in entry)
        else:
            names.append(entry)
    return names


def nested_transformer(annotation: Any) -> tuple[type[Transformer] | None, bool]:
    """Find the transformer class behind a field annotation.

    Handles ``T``, ``T | None``, ``list[T]`` and ``list[T] | None``.

    Returns:
        (transformer class or None, whether the field holds many items)
    """
    origin = get_origin(annotation)
    if origin is Union or origin is types.UnionType:
        args = [arg for arg in get_args(annotation) if arg is not type(None)]
        if len(args) != 1:
            return None, False
        return nested_transformer(args[0])

    if origin in _SEQUENCE_ORIGINS:
        args = get_args(annotation)
        if args and isinstance(args[0], type) and issubclass(args[0], Transformer):
            return args[0], True
        return None, False

    if isinstance(annotation, type) and issubclass(annotation, Transformer):
        return annotation, False

    return None, False
