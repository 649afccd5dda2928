"""Infrastructure dependency factories.

Application-scoped singletons for infrastructure services:
- Logging (console, structlog)
- Redis client for rate limit counters

Usage:
    from apikit.core.container import get_logger

    logger = get_logger()
    logger.info("API route registered", uri="/api/users", versions=["v1"])
"""

from functools import lru_cache
from typing import TYPE_CHECKING

from apikit.core.config import get_settings

if TYPE_CHECKING:
    from redis.asyncio import Redis

    from apikit.domain.protocols.logger_protocol import LoggerProtocol


@lru_cache()
def get_logger() -> "LoggerProtocol":
    """Return the application-scoped logger singleton.

    Adapter selection is centralized here:
    - development/production: ConsoleAdapter (human-readable)
    - testing/ci: ConsoleAdapter (JSON)

    Returns:
        LoggerProtocol: Logger instance implementing the protocol.
    """
    from apikit.infrastructure.logging.console_adapter import ConsoleAdapter

    settings = get_settings()
    env = (
        settings.environment.value
        if hasattr(settings.environment, "value")
        else str(settings.environment)
    )
    use_json = env in {"testing", "ci"}
    return ConsoleAdapter(use_json=use_json, level=settings.log_level)


@lru_cache()
def get_redis(url: str) -> "Redis":
    """Get a Redis client for the given URL (one pool per URL).

    Args:
        url: Redis connection URL (e.g. redis://localhost:6379/0).

    Returns:
        Async Redis client.
    """
    from redis.asyncio import ConnectionPool, Redis

    pool = ConnectionPool.from_url(
        url,
        max_connections=50,
        decode_responses=True,
        socket_connect_timeout=5,
        socket_timeout=5,
        retry_on_timeout=True,
    )
    return Redis(connection_pool=pool)
