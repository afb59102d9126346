"""Optional Redis connection.

Redis backs rate limiting, cross-process XP grant locks and level-up
notifications. With no ``redis_url`` the pool stays unset and each of those
falls back (no limiting, in-process locks, no publish).
"""

import redis.asyncio as redis

_pool: redis.Redis | None = None


async def init_redis(url: str, max_connections: int = 50) -> None:
    global _pool  # noqa: PLW0603
    _pool = redis.from_url(  # type: ignore[no-untyped-call]
        url,
        encoding="utf-8",
        decode_responses=True,
        max_connections=max_connections,
    )


async def close_redis() -> None:
    global _pool  # noqa: PLW0603
    if _pool is not None:
        await _pool.aclose()
    _pool = None


def get_redis() -> redis.Redis:
    """The shared client. Raises RuntimeError when Redis is not configured."""
    if _pool is None:
        msg = "Redis not initialized. Call init_redis() first."
        raise RuntimeError(msg)
    return _pool


async def get_optional_redis() -> redis.Redis | None:
    """FastAPI dependency: the shared client, or None when Redis is disabled."""
    return _pool
