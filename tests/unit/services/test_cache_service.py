"""
Unit tests for CacheService and the in-process cache client
"""
import pytest
import redis

from hostel_lifecycle.services.base import CacheService, MemoryCacheClient


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


class BrokenClient:
    def get(self, key):
        raise redis.ConnectionError("redis down")

    def set(self, key, value, ex=None):
        raise redis.ConnectionError("redis down")

    def delete(self, *keys):
        raise redis.ConnectionError("redis down")


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache_service(clock):
    return CacheService(MemoryCacheClient(clock=clock), namespace="payments", default_ttl=10)


class TestMemoryCacheClient:
    """Test expiry in the in-process client"""

    def test_value_expires_after_ttl(self, clock):
        client = MemoryCacheClient(clock=clock)
        client.set("k", "v", ex=10)

        clock.now += 9.9
        assert client.get("k") == "v"

        clock.now += 0.1
        assert client.get("k") is None

    def test_without_ttl_never_expires(self, clock):
        client = MemoryCacheClient(clock=clock)
        client.set("k", "v")
        clock.now += 10 ** 6
        assert client.get("k") == "v"

    def test_delete_counts_removed_keys(self):
        client = MemoryCacheClient()
        client.set("a", "1")
        assert client.delete("a", "b") == 1


class TestCacheService:
    """Test the JSON cache wrapper"""

    def test_round_trip_and_namespace(self, cache_service):
        cache_service.set("summary:1", {"total": 10.5, "students": []})

        assert cache_service.get("summary:1") == {"total": 10.5, "students": []}
        assert cache_service.client.get("payments:summary:1") is not None

    def test_default_ttl(self, cache_service, clock):
        cache_service.set("summary:1", {"total": 1})
        clock.now += 10
        assert cache_service.get("summary:1") is None

    def test_custom_ttl(self, cache_service, clock):
        cache_service.set("summary:1", {"total": 1}, ttl_seconds=60)
        clock.now += 30
        assert cache_service.get("summary:1") == {"total": 1}

    def test_delete(self, cache_service):
        cache_service.set("summary:1", 1)
        assert cache_service.delete("summary:1") is True
        assert cache_service.get("summary:1", default="miss") == "miss"

    def test_backend_errors_are_misses(self):
        broken = CacheService(BrokenClient(), namespace="payments")

        assert broken.get("summary:1") is None
        assert broken.set("summary:1", {"a": 1}) is False
        assert broken.delete("summary:1") is False

    def test_corrupt_value_is_a_miss(self, cache_service):
        cache_service.client.set("payments:summary:1", "{not json")
        assert cache_service.get("summary:1") is None
