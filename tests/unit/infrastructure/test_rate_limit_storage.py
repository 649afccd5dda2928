"""Unit tests for rate limit counter storage (in-memory and Redis via fakeredis)."""

from unittest.mock import AsyncMock, MagicMock

import fakeredis.aioredis
import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from apikit.core.enums import ErrorCode
from apikit.core.result import Failure, Success
from apikit.domain.value_objects.rate_limit_window import RateLimitWindow
from apikit.infrastructure.rate_limit import MemoryStorage, RedisStorage


class FakeClock:
    def __init__(self, now: float = 1_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


# ============================================================================
# MemoryStorage
# ============================================================================


@pytest.mark.unit
class TestMemoryStorage:
    async def test_hits_count_within_window(self):
        """Should count hits and report the window reset time."""
        clock = FakeClock()
        storage = MemoryStorage(clock=clock)

        await storage.hit(key="k", expires=1)
        result = await storage.hit(key="k", expires=1)

        assert result == Success(value=RateLimitWindow(attempts=2, reset_at=1_060))

    async def test_window_expires(self):
        """Should open a new window once the previous one expired."""
        clock = FakeClock()
        storage = MemoryStorage(clock=clock)
        await storage.hit(key="k", expires=1)

        clock.now += 61
        result = await storage.hit(key="k", expires=1)

        assert result.value.attempts == 1
        assert result.value.reset_at == 1_121

    async def test_expired_windows_are_swept(self):
        """Should drop counters of every closed window on the next hit."""
        clock = FakeClock()
        storage = MemoryStorage(clock=clock)
        for index in range(1_000):
            await storage.hit(key=f"client-{index}", expires=1)
        await storage.hit(key="late", expires=5)

        clock.now += 120
        await storage.hit(key="fresh", expires=1)

        assert len(storage) == 2
        assert (await storage.attempts(key="late")).value.attempts == 1
        assert (await storage.attempts(key="client-0")).value.attempts == 0

    async def test_attempts_does_not_count(self):
        """Should read the window without recording a hit."""
        storage = MemoryStorage(clock=FakeClock())
        await storage.hit(key="k", expires=1)

        first = await storage.attempts(key="k")
        second = await storage.attempts(key="k")

        assert first.value.attempts == 1
        assert second.value.attempts == 1

    async def test_attempts_for_unknown_key_is_empty(self):
        """Should report an empty window for unknown keys."""
        result = await MemoryStorage().attempts(key="missing")

        assert result == Success(value=RateLimitWindow.empty())

    async def test_reset_drops_counter(self):
        """Should forget the counter."""
        storage = MemoryStorage(clock=FakeClock())
        await storage.hit(key="k", expires=1)

        assert await storage.reset(key="k") == Success(value=None)
        assert (await storage.attempts(key="k")).value.attempts == 0

    async def test_keys_are_independent(self):
        """Should keep separate counters per key."""
        storage = MemoryStorage(clock=FakeClock())
        await storage.hit(key="a", expires=1)
        await storage.hit(key="a", expires=1)

        result = await storage.hit(key="b", expires=1)

        assert result.value.attempts == 1


# ============================================================================
# RedisStorage
# ============================================================================


@pytest.fixture
def redis_client():
    """fakeredis client emulating Redis in memory."""
    return fakeredis.aioredis.FakeRedis(decode_responses=True)


@pytest.fixture
def storage(redis_client):
    return RedisStorage(redis_client=redis_client, clock=FakeClock())


@pytest.mark.unit
class TestRedisStorage:
    async def test_hits_count_within_window(self, storage):
        """Should increment the counter inside one window."""
        await storage.hit(key="k", expires=1)
        result = await storage.hit(key="k", expires=1)

        assert isinstance(result, Success)
        assert result.value.attempts == 2
        assert 1_000 < result.value.reset_at <= 1_060

    async def test_counter_has_ttl(self, storage, redis_client):
        """Should expire the counter after the window length."""
        await storage.hit(key="k", expires=2)

        ttl = await redis_client.ttl("apikit:ratelimit:k")

        assert 0 < ttl <= 120

    async def test_attempts_reads_without_counting(self, storage):
        """Should return the current window without recording a hit."""
        await storage.hit(key="k", expires=1)

        result = await storage.attempts(key="k")

        assert result.value.attempts == 1

    async def test_attempts_for_unknown_key_is_empty(self, storage):
        """Should report an empty window for unknown keys."""
        result = await storage.attempts(key="missing")

        assert result == Success(value=RateLimitWindow.empty())

    async def test_reset_deletes_counter(self, storage, redis_client):
        """Should delete the key."""
        await storage.hit(key="k", expires=1)

        result = await storage.reset(key="k")

        assert result == Success(value=None)
        assert await redis_client.exists("apikit:ratelimit:k") == 0

    async def test_custom_key_prefix(self, redis_client):
        """Should namespace keys with the configured prefix."""
        storage = RedisStorage(redis_client=redis_client, key_prefix="test:")

        await storage.hit(key="k", expires=1)

        assert await redis_client.get("test:k") == "1"


def _broken_client() -> MagicMock:
    client = MagicMock()
    pipeline = MagicMock()
    pipeline.execute = AsyncMock(side_effect=RedisConnectionError("down"))
    client.pipeline.return_value = pipeline
    client.delete = AsyncMock(side_effect=RedisConnectionError("down"))
    return client


@pytest.mark.unit
class TestRedisStorageFailOpen:
    async def test_hit_fails_open(self):
        """Should report an empty window when Redis is down."""
        storage = RedisStorage(redis_client=_broken_client())

        result = await storage.hit(key="k", expires=1)

        assert result == Success(value=RateLimitWindow.empty())

    async def test_attempts_fails_open(self):
        """Should report an empty window when Redis is down."""
        storage = RedisStorage(redis_client=_broken_client())

        result = await storage.attempts(key="k")

        assert result == Success(value=RateLimitWindow.empty())

    async def test_reset_reports_failure(self):
        """Should surface reset errors as Failure."""
        storage = RedisStorage(redis_client=_broken_client())

        result = await storage.reset(key="k")

        assert isinstance(result, Failure)
        assert result.error.code == ErrorCode.RATE_LIMIT_RESET_FAILED
        assert result.error.details == {"key": "k"}
