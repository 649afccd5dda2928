"""Container module - centralized dependency resolution.

Re-exports the service container and infrastructure factories:

    from apikit.core.container import Container, get_logger
"""

from apikit.core.container.application import Container
from apikit.core.container.infrastructure import get_logger, get_redis

__all__ = [
    "Container",
    "get_logger",
    "get_redis",
]
