"""Rate limit counter storage adapters.

Usage:
    from apikit.infrastructure.rate_limit import MemoryStorage, RedisStorage
"""

from apikit.infrastructure.rate_limit.memory_storage import MemoryStorage
from apikit.infrastructure.rate_limit.redis_storage import RedisStorage

__all__ = ["MemoryStorage", "RedisStorage"]
