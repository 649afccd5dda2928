"""Service providers and the ``install`` entry point.

Usage:
    from fastapi import FastAPI
    from apikit.provider import install

    app = FastAPI()
    container = install(app)
    api = container.make("api.router")
"""

from fastapi import FastAPI

from apikit.core.config import Settings
from apikit.core.container import Container
from apikit.provider.api_provider import ApiServiceProvider
from apikit.provider.fastapi_provider import FastAPIServiceProvider


def install(
    app: FastAPI, settings: Settings | None = None, container: Container | None = None
) -> Container:
    """Register and boot the toolkit on an application.

    Args:
        app: FastAPI application.
        settings: Toolkit settings (defaults to environment settings).
        container: Existing container to register into.

    Returns:
        Container: The booted container (also on ``app.state.api_container``).
    """
    container = container or Container()
    container.register(FastAPIServiceProvider(app, container, settings))
    container.boot()
    app.state.api_container = container
    return container


__all__ = ["ApiServiceProvider", "FastAPIServiceProvider", "install"]
