"""Optional Redis connection.

Redis backs rate limiting and short-lived response caches. It is not
required: with ``TUTOW_REDIS_URL`` empty no pool is created, the rate
limiter lets every request through and cached endpoints compute fresh
results.
"""

import json
from typing import Any

import redis.asyncio as redis

_pool: redis.Redis | None = None


async def init_redis(url: str) -> None:
    """Create the connection pool. An empty URL leaves Redis disabled."""
    global _pool  # noqa: PLW0603
    if not url:
        return
    _pool = redis.from_url(  # type: ignore[no-untyped-call]
        url,
        encoding="utf-8",
        decode_responses=True,
        max_connections=20,
    )


async def close_redis() -> None:
    global _pool  # noqa: PLW0603
    if _pool:
        await _pool.aclose()
        _pool = None


def redis_enabled() -> bool:
    return _pool is not None


def get_redis() -> redis.Redis:
    """Get the Redis client. Raises RuntimeError when Redis is disabled."""
    if _pool is None:
        msg = "Redis not initialized. Call init_redis() first."
        raise RuntimeError(msg)
    return _pool


async def get_cached_json(key: str) -> Any | None:  # noqa: ANN401
    """Decoded JSON stored under ``key``, or None on a miss."""
    raw = await get_redis().get(key)
    return json.loads(raw) if raw else None


async def set_cached_json(key: str, ttl_seconds: int, value: Any) -> None:  # noqa: ANN401
    await get_redis().setex(key, ttl_seconds, json.dumps(value))
