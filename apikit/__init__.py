"""apikit - versioned routing, route policies and response transformers for FastAPI.

Usage:
    from fastapi import FastAPI
    from apikit import install

    app = FastAPI()
    container = install(app)

    api = container.make("api.router")
    with api.version("v1"):
        api.get("/users", "app.controllers:UserController@index")
"""

from apikit.provider import install

__all__ = ["install"]
