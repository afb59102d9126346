"""Per-key locks serializing XP grant decisions (keyed per user)."""

from __future__ import annotations

import asyncio
import weakref
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import redis.asyncio as aioredis

# Entries disappear once no coroutine holds or waits on the lock.
_local_locks: weakref.WeakValueDictionary[str, asyncio.Lock] = weakref.WeakValueDictionary()


def _local_lock(key: str) -> asyncio.Lock:
    lock = _local_locks.get(key)
    if lock is None:
        lock = asyncio.Lock()
        _local_locks[key] = lock
    return lock


@asynccontextmanager
async def grant_lock(
    key: str,
    redis: aioredis.Redis | None = None,
    timeout: float = 5.0,
) -> AsyncIterator[None]:
    """Hold an exclusive lock on ``key``.

    Uses a Redis lock when a client is given so that every API process shares
    it; otherwise falls back to an in-process ``asyncio.Lock``.

    Raises:
        redis.exceptions.LockError: the Redis lock could not be acquired
            within ``timeout`` seconds.
    """
    if redis is not None:
        async with redis.lock(f"lock:{key}", timeout=timeout, blocking_timeout=timeout):
            yield
        return

    async with _local_lock(key):
        yield
