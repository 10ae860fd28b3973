"""Redis caching utilities.

Caches results of remote lookups (the subscription plan list) so each
wizard session does not re-query the GraphQL API. Redis failures never
break a request: the wrapped function is called uncached instead.
"""

import functools
import hashlib
import json
import logging
from datetime import date, datetime
from typing import Callable, Optional

import redis.asyncio as redis

from church_onboarding.config import settings

logger = logging.getLogger(__name__)

# Global Redis connection pool
_redis_client: Optional[redis.Redis] = None


async def get_redis() -> redis.Redis:
    """Get or create Redis client connection."""
    global _redis_client
    if _redis_client is None:
        _redis_client = redis.from_url(
            settings.redis_url,
            encoding="utf-8",
            decode_responses=True,
            max_connections=50,
        )
    return _redis_client


async def close_redis():
    """Close Redis connection (call on app shutdown)."""
    global _redis_client
    if _redis_client:
        await _redis_client.aclose()
        _redis_client = None


def cache_key(*args, **kwargs) -> str:
    """Deterministic hash of the call arguments."""
    if not args and not kwargs:
        return "default"

    key_data = json.dumps({"args": args, "kwargs": kwargs}, sort_keys=True)
    return hashlib.md5(key_data.encode()).hexdigest()


def _serialize(result):
    if hasattr(result, "model_dump"):
        return result.model_dump(mode="json")
    if isinstance(result, list):
        return [_serialize(item) for item in result]
    return result


def _key_kwargs(kwargs: dict) -> dict:
    """Keep only keyword args with a stable JSON form."""
    keyed = {}
    for name, value in kwargs.items():
        if isinstance(value, (date, datetime)):
            keyed[name] = value.isoformat()
        elif value is None or isinstance(value, (str, int, float, bool)):
            keyed[name] = value
    return keyed


def cached(ttl: int = 300, prefix: str = "cache"):
    """Cache an async function's JSON-able result in Redis.

    Positional args are injected collaborators (e.g. the remote executor)
    and are left out of the key. Keys: {prefix}:{function_name}:{kwargs_hash}
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            if not settings.cache_enabled:
                return await func(*args, **kwargs)

            key = f"{prefix}:{func.__name__}:{cache_key(**_key_kwargs(kwargs))}"
            try:
                redis_client = await get_redis()
                hit = await redis_client.get(key)
            except redis.RedisError as e:
                logger.warning("Redis unavailable, calling %s uncached: %s", func.__name__, e)
                return await func(*args, **kwargs)

            if hit:
                logger.debug("Cache HIT: %s", key)
                return json.loads(hit)

            logger.debug("Cache MISS: %s", key)
            result = await func(*args, **kwargs)
            try:
                await redis_client.setex(key, ttl, json.dumps(_serialize(result)))
            except redis.RedisError as e:
                logger.warning("Could not store %s: %s", key, e)
            return result

        return wrapper

    return decorator


async def invalidate_cache(pattern: str) -> int:
    """Delete keys matching `pattern` (e.g. "plans:*"). Returns the count."""
    try:
        redis_client = await get_redis()
        keys = [key async for key in redis_client.scan_iter(match=pattern)]
        if keys:
            await redis_client.delete(*keys)
            logger.info("Invalidated %d cache key(s) matching %s", len(keys), pattern)
        return len(keys)
    except redis.RedisError as e:
        logger.warning("Failed to invalidate %s: %s", pattern, e)
        return 0
