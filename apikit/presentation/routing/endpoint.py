"""Endpoint wrapper for API routes.

Wraps route endpoints so that:
- sync endpoints run in the threadpool, async endpoints are awaited
- returned Response objects pass through untouched
- results bound in the transformer factory are transformed
- conditional GET/HEAD responses carry an ETag, answering 304 when the
  client's If-None-Match matches

The wrapper keeps the endpoint's signature, so FastAPI resolves parameters
and dependencies exactly as for the original endpoint.
"""

import functools
import hashlib
import inspect
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

from fastapi.encoders import jsonable_encoder
from starlette.concurrency import run_in_threadpool
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from apikit.core.container import Container
from apikit.presentation.http.context import get_current_request

if TYPE_CHECKING:
    from apikit.presentation.routing.route import Route

CONDITIONAL_METHODS = ("GET", "HEAD")


def wrap_endpoint(
    endpoint: Callable[..., Any], route: "Route", container: Container
) -> Callable[..., Any]:
    """Wrap an endpoint with transformation and conditional responses.

    Args:
        endpoint: Original endpoint (function or bound controller method).
        route: Route record (conditional request option).
        container: Service container providing "api.transformer".

    Returns:
        Async endpoint with the original signature.
    """
    try:
        signature = inspect.signature(endpoint, eval_str=True)
    except NameError:
        signature = inspect.signature(endpoint)
    # The wrapper renders its own response; the return annotation is not a response model
    signature = signature.replace(return_annotation=inspect.Signature.empty)
    is_async = inspect.iscoroutinefunction(endpoint)

    @functools.wraps(endpoint)
    async def api_endpoint(*args: Any, **kwargs: Any) -> Any:
        if is_async:
            result = await endpoint(*args, **kwargs)
        else:
            result = await run_in_threadpool(endpoint, *args, **kwargs)

        request = get_current_request()
        if request is None:
            raise RuntimeError("API endpoint called outside of an API request")

        return await build_response(result, route, request, container)

    api_endpoint.__signature__ = signature  # type: ignore[attr-defined]
    return api_endpoint


async def build_response(
    result: Any, route: "Route", request: Request, container: Container
) -> Response:
    """Turn an endpoint result into a response."""
    if isinstance(result, Response):
        return result

    factory = container.make("api.transformer")
    if factory.transformable(result):
        result = await factory.transform(result, request)

    response = JSONResponse(content=jsonable_encoder(result))

    if route.request_is_conditional() and request.method in CONDITIONAL_METHODS:
        return conditional_response(response, request)

    return response


def conditional_response(response: Response, request: Request) -> Response:
    """Add an ETag and answer 304 when If-None-Match matches it."""
    etag = f'"{hashlib.md5(response.body).hexdigest()}"'

    if _etag_matches(etag, request.headers.get("if-none-match")):
        return Response(status_code=304, headers={"ETag": etag})

    response.headers["ETag"] = etag
    return response


def _etag_matches(etag: str, header: str | None) -> bool:
    if not header:
        return False
    candidates = [value.strip() for value in header.split(",")]
    if "*" in candidates:
        return True
    return any(candidate.removeprefix("W/") == etag for candidate in candidates)
