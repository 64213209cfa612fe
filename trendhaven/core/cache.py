"""Redis JSON cache shared by the ranking cache and the token revocation list.

With ``CACHE_ENABLED`` off every read is a miss and every write is dropped.
Callers handle ``RedisError`` themselves since each decides how to degrade.
"""
import json
from typing import Any, Optional

from redis.asyncio import Redis

from trendhaven.core.config import settings

_redis: Optional[Redis] = None


def get_redis() -> Redis:
    global _redis
    if _redis is None:
        _redis = Redis.from_url(
            settings.REDIS_URL,
            decode_responses=True,
            socket_timeout=settings.REDIS_SOCKET_TIMEOUT_S,
            socket_connect_timeout=settings.REDIS_SOCKET_TIMEOUT_S,
        )
    return _redis


async def cache_json_get(key: str) -> Optional[Any]:
    if not settings.CACHE_ENABLED:
        return None
    raw = await get_redis().get(key)
    return json.loads(raw) if raw else None


async def cache_json_set(key: str, data: Any, ttl_s: int) -> None:
    if not settings.CACHE_ENABLED:
        return
    # redis rejects non-positive expiries
    await get_redis().set(key, json.dumps(data), ex=max(int(ttl_s), 1))


async def close_redis() -> None:
    global _redis
    if _redis is not None:
        await _redis.aclose()
    _redis = None
