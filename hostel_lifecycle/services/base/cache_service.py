"""
Cache service for short-lived derived data.

Backed by Redis when ``CACHE_BACKEND=redis``; otherwise by an
in-process store exposing the subset of the Redis client API the
service uses.
"""

import json
import threading
import time
from functools import lru_cache
from typing import Any, Dict, Optional, Tuple

import redis

from hostel_lifecycle.config.logging import get_logger
from hostel_lifecycle.config.settings import Settings, settings as default_settings


class MemoryCacheClient:
    """Thread-safe in-process key/value store with per-key expiry."""

    def __init__(self, clock=time.monotonic) -> None:
        self._data: Dict[str, Tuple[Optional[float], str]] = {}
        self._lock = threading.Lock()
        self._clock = clock

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            entry = self._data.get(key)
            if entry is None:
                return None
            expires_at, value = entry
            if expires_at is not None and expires_at <= self._clock():
                del self._data[key]
                return None
            return value

    def set(self, key: str, value: str, ex: Optional[int] = None) -> bool:
        expires_at = self._clock() + ex if ex else None
        with self._lock:
            self._data[key] = (expires_at, value)
        return True

    def delete(self, *keys: str) -> int:
        with self._lock:
            return sum(1 for key in keys if self._data.pop(key, None) is not None)


def build_cache_client(app_settings: Settings):
    if app_settings.CACHE_BACKEND == "redis":
        return redis.Redis.from_url(app_settings.REDIS_URL, decode_responses=True)
    return MemoryCacheClient()


@lru_cache()
def get_cache_client():
    """Process-wide cache client shared by every service instance"""
    return build_cache_client(default_settings)


class CacheService:
    """
    JSON-based cache service with namespaced keys and TTL support.

    Cache failures are logged and treated as misses.
    """

    def __init__(self, client, namespace: str = "svc", default_ttl: int = 300):
        self.client = client
        self.namespace = namespace
        self.default_ttl = default_ttl
        self._logger = get_logger(self.__class__.__name__)

    def _key(self, key: str) -> str:
        return f"{self.namespace}:{key}"

    def get(self, key: str, default: Optional[Any] = None) -> Optional[Any]:
        """
        Get value from cache.

        Args:
            key: Cache key
            default: Default value if not found

        Returns:
            Cached value or default
        """
        try:
            raw = self.client.get(self._key(key))
        except redis.RedisError as e:
            self._logger.error(f"Cache get error for {key}: {e}")
            return default

        if raw is None:
            self._logger.debug(f"Cache miss: {key}")
            return default

        try:
            value = json.loads(raw)
        except json.JSONDecodeError as e:
            self._logger.warning(f"Failed to decode cached value for {key}: {e}")
            return default
        self._logger.debug(f"Cache hit: {key}")
        return value

    def set(self, key: str, value: Any, ttl_seconds: Optional[int] = None) -> bool:
        """
        Set value in cache.

        Args:
            key: Cache key
            value: Value to cache (must be JSON serializable)
            ttl_seconds: Time-to-live in seconds

        Returns:
            True if successful, False otherwise
        """
        ttl = ttl_seconds if ttl_seconds is not None else self.default_ttl
        try:
            payload = json.dumps(value, default=str)
            self.client.set(self._key(key), payload, ex=ttl)
        except (TypeError, ValueError) as e:
            self._logger.error(f"Failed to serialize value for {key}: {e}")
            return False
        except redis.RedisError as e:
            self._logger.error(f"Cache set error for {key}: {e}")
            return False

        self._logger.debug(f"Cache set: {key} (TTL: {ttl}s)")
        return True

    def delete(self, key: str) -> bool:
        try:
            result = self.client.delete(self._key(key))
        except redis.RedisError as e:
            self._logger.error(f"Cache delete error for {key}: {e}")
            return False
        self._logger.debug(f"Cache delete: {key}")
        return bool(result)
