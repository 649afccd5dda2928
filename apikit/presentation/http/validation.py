"""API request detection.

Only requests addressed to the API (by host or by URI prefix) are negotiated
and dispatched to versioned routes; everything else reaches the host
application untouched.
"""

from starlette.datastructures import Headers
from starlette.types import Scope


class ApiRequestValidator:
    """Decide whether a request targets the API.

    A configured domain takes precedence over the prefix. With neither
    configured every request is an API request.

    Args:
        prefix: Normalized URI prefix (e.g. "/api") or None.
        domain: API host (e.g. "api.example.com") or None.
    """

    def __init__(self, *, prefix: str | None, domain: str | None) -> None:
        self.prefix = prefix
        self.domain = domain.lower() if domain else None

    def validate(self, scope: Scope) -> bool:
        """Whether the ASGI scope is an API request."""
        if self.domain is not None:
            host = Headers(scope=scope).get("host", "")
            return host.split(":", 1)[0].lower() == self.domain

        if self.prefix is not None:
            path: str = scope.get("path", "")
            return path == self.prefix or path.startswith(self.prefix + "/")

        return True
