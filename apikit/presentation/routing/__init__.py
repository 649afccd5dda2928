"""Versioned routing.

Exports:
    Controller: Base class with per-method route options
    FastAPIAdapter: Router adapter for FastAPI applications
    Route: Route option record
    Router: Versioned route registrar
    VersionedRoute: APIRoute matching the negotiated API version
"""

from apikit.presentation.routing.adapter import FastAPIAdapter
from apikit.presentation.routing.controller import Controller
from apikit.presentation.routing.route import Route
from apikit.presentation.routing.router import Router
from apikit.presentation.routing.versioned_route import VersionedRoute

__all__ = ["Controller", "FastAPIAdapter", "Route", "Router", "VersionedRoute"]
