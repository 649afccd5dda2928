"""Pydantic transformer adapter and its rendering machinery.

Usage:
    from apikit.infrastructure.transformer import Manager, PydanticAdapter, Transformer
"""

from apikit.infrastructure.transformer.eager_loading import ModelCollection
from apikit.infrastructure.transformer.manager import Manager, Scope
from apikit.infrastructure.transformer.pagination import Page, PaginatorAdapter
from apikit.infrastructure.transformer.pydantic_adapter import PydanticAdapter
from apikit.infrastructure.transformer.resources import Collection, Item, Resource
from apikit.infrastructure.transformer.transformer import Transformer

__all__ = [
    "Collection",
    "Item",
    "Manager",
    "ModelCollection",
    "Page",
    "PaginatorAdapter",
    "PydanticAdapter",
    "Resource",
    "Scope",
    "Transformer",
]
