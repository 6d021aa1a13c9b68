"""
Caching utilities for read-mostly catalog data
"""
import json
import hashlib
import logging
from functools import wraps
from typing import Any, Optional, Callable
import redis
from config.settings import settings

logger = logging.getLogger(__name__)

# Redis client (lazy initialization)
_redis_client: Optional[redis.Redis] = None


def get_redis_client() -> redis.Redis:
    """Get Redis client with lazy initialization"""
    global _redis_client
    if _redis_client is None:
        _redis_client = redis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
            socket_connect_timeout=1,
            socket_timeout=1,
        )
    return _redis_client


class CacheManager:
    """Cache management utilities. Every Redis failure is a cache miss."""

    def __init__(self, enabled: bool = True):
        self.enabled = enabled

    @property
    def redis_client(self) -> redis.Redis:
        return get_redis_client()

    def _generate_cache_key(self, prefix: str, *args, **kwargs) -> str:
        """Generate a cache key from function arguments"""
        key_data = f"{prefix}:{str(args)}:{str(sorted(kwargs.items()))}"
        return f"cache:{prefix}:{hashlib.md5(key_data.encode()).hexdigest()}"

    def get(self, key: str) -> Optional[Any]:
        """Get value from cache"""
        if not self.enabled:
            return None
        try:
            cached_value = self.redis_client.get(key)
            if cached_value:
                return json.loads(cached_value)
        except (redis.RedisError, json.JSONDecodeError) as exc:
            logger.debug("cache get failed for %s: %s", key, exc)
        return None

    def set(self, key: str, value: Any, expiry_seconds: int = 300) -> bool:
        """Set value in cache"""
        if not self.enabled:
            return False
        try:
            serialized_value = json.dumps(value, default=str)
            return bool(self.redis_client.setex(key, expiry_seconds, serialized_value))
        except (redis.RedisError, TypeError) as exc:
            logger.debug("cache set failed for %s: %s", key, exc)
            return False

    def delete_pattern(self, pattern: str) -> int:
        """Delete all keys matching pattern"""
        if not self.enabled:
            return 0
        try:
            keys = list(self.redis_client.scan_iter(match=pattern))
            if keys:
                return self.redis_client.delete(*keys)
            return 0
        except redis.RedisError as exc:
            logger.debug("cache invalidation failed for %s: %s", pattern, exc)
            return 0


# Global cache manager instance
cache_manager = CacheManager(enabled=settings.CACHE_ENABLED)


def cache_result(
    expiry_seconds: Optional[int] = None,
    key_prefix: Optional[str] = None,
    skip_args: int = 0,
):
    """
    Decorator to cache JSON-serialisable function results

    Args:
        expiry_seconds: Cache expiry time in seconds
        key_prefix: Optional prefix for cache key
        skip_args: Leading positional args left out of the key (sessions, self)
    """
    def decorator(func: Callable) -> Callable:
        prefix = key_prefix or func.__name__

        @wraps(func)
        def wrapper(*args, **kwargs):
            cache_key = cache_manager._generate_cache_key(prefix, *args[skip_args:], **kwargs)

            cached_result = cache_manager.get(cache_key)
            if cached_result is not None:
                return cached_result

            result = func(*args, **kwargs)
            cache_manager.set(cache_key, result, expiry_seconds or settings.CACHE_DEFAULT_TTL)
            return result

        wrapper.cache_clear = lambda: cache_manager.delete_pattern(f"cache:{prefix}:*")
        return wrapper
    return decorator
