"""Optional Redis cache for TMDB responses.

When REDIS_URL is unset or the server is unreachable the cache stays
disconnected: lookups miss and writes are dropped, so every call goes to
TMDB.
"""

import hashlib
import json
from collections.abc import Callable
from datetime import timedelta
from functools import wraps
from typing import Any, TypeVar

import redis.asyncio as redis

from cinepick.config import get_settings
from cinepick.utils.logging import get_logger

logger = get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

# Cache TTL
CACHE_TTL_DETAILS = timedelta(hours=6)  # Item details (volatile: ratings, providers)


class RedisCache:
    """Async Redis cache client with JSON serialization."""

    def __init__(self) -> None:
        self._client: redis.Redis | None = None
        self._connected = False

    @property
    def connected(self) -> bool:
        return self._connected

    async def connect(self, url: str | None = None) -> bool:
        """Connect to Redis if a URL is configured.

        Returns:
            True if the server answered a ping
        """
        redis_url = get_settings().redis_url
        if url is None and redis_url is not None:
            url = str(redis_url)
        if not url:
            logger.debug("REDIS_URL not set, response cache disabled")
            return False

        try:
            self._client = redis.from_url(url, encoding="utf-8", decode_responses=True)
            await self._client.ping()
            self._connected = True
            logger.info("Redis response cache connected")
        except (redis.RedisError, OSError) as e:
            logger.warning(f"Redis cache unavailable: {e}")
            self._connected = False
        return self._connected

    async def close(self) -> None:
        """Close Redis connection."""
        if self._client:
            await self._client.aclose()
            self._client = None
        self._connected = False

    async def get(self, key: str) -> Any | None:
        """Get a value, or None if missing, expired or the cache is down."""
        if not self._connected or self._client is None:
            return None

        try:
            data = await self._client.get(key)
        except redis.RedisError as e:
            logger.debug(f"Cache get error for {key}: {e}")
            return None
        return json.loads(data) if data else None

    async def set(self, key: str, value: Any, ttl: timedelta | None = None) -> bool:
        """Store a JSON-serializable value with a TTL (default: 6 hours)."""
        if not self._connected or self._client is None:
            return False

        try:
            expire_seconds = int((ttl or CACHE_TTL_DETAILS).total_seconds())
            await self._client.setex(key, expire_seconds, json.dumps(value, default=str))
            return True
        except redis.RedisError as e:
            logger.debug(f"Cache set error for {key}: {e}")
            return False


# Global cache instance
cache = RedisCache()


def make_cache_key(namespace: str, *args: Any, **kwargs: Any) -> str:
    """Build a cache key such as ``tmdb:details:movie:550:language=en-US``."""
    parts = [namespace]
    parts.extend(str(arg) for arg in args if arg is not None)
    parts.extend(f"{key}={value}" for key, value in sorted(kwargs.items()) if value is not None)

    key_str = ":".join(parts)

    if len(key_str) > 200:
        hash_suffix = hashlib.md5(key_str.encode()).hexdigest()[:12]
        key_str = f"{namespace}:{hash_suffix}"

    return key_str


def cached(namespace: str, ttl: timedelta | None = None) -> Callable[[F], F]:
    """Decorator caching the JSON result of an async method in Redis.

    The first positional argument (``self``) is left out of the key. None
    results are never cached so failed fetches are retried next time.

    Example:
        @cached("tmdb:details", ttl=CACHE_TTL_DETAILS)
        async def _cached_details_json(self, remote_id: int, kind: str) -> dict | None:
            ...
    """

    def decorator(func: F) -> F:
        @wraps(func)
        async def wrapper(self: Any, *args: Any, **kwargs: Any) -> Any:
            cache_key = make_cache_key(namespace, *args, **kwargs)

            cached_value = await cache.get(cache_key)
            if cached_value is not None:
                logger.debug(f"Cache HIT: {cache_key}")
                return cached_value

            logger.debug(f"Cache MISS: {cache_key}")
            result = await func(self, *args, **kwargs)

            if result is not None:
                await cache.set(cache_key, result, ttl or CACHE_TTL_DETAILS)

            return result

        return wrapper  # type: ignore[return-value]

    return decorator
