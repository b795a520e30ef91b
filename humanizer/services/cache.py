"""Memoization of humanization results.

Both backends are last-writer-wins: concurrent requests with the same key may
each compute and write, and either value is a valid fill.
"""

from __future__ import annotations

import asyncio
import json
import time
from collections import OrderedDict
from collections.abc import Callable
from typing import Protocol

from redis.asyncio import Redis

from humanizer.core.logging import get_logger
from humanizer.services.types import CacheEntry, HumanizationRequest
from humanizer.utils.hashing import sha256_json

logger = get_logger(__name__)

CACHE_KEY_PREFIX = "humanize:"


def cache_key(request: HumanizationRequest) -> str:
    return f"{CACHE_KEY_PREFIX}{sha256_json(request.cache_key_fields())}"


class ResultCache(Protocol):
    async def get(self, key: str) -> CacheEntry | None: ...

    async def set(self, key: str, entry: CacheEntry) -> None: ...

    async def clear(self) -> None: ...

    async def size(self) -> int: ...


class MemoryResultCache:
    """In-process LRU cache with an optional per-entry TTL.

    ``ttl_seconds=0`` disables expiry; eviction is then purely by capacity.
    """

    def __init__(
        self,
        max_entries: int = 1024,
        ttl_seconds: float = 0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be positive")
        self.max_entries = max_entries
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: OrderedDict[str, tuple[float | None, CacheEntry]] = OrderedDict()
        self._lock = asyncio.Lock()

    def _expires_at(self) -> float | None:
        if self.ttl_seconds <= 0:
            return None
        return self._clock() + self.ttl_seconds

    async def get(self, key: str) -> CacheEntry | None:
        async with self._lock:
            item = self._entries.get(key)
            if item is None:
                return None
            expires_at, entry = item
            if expires_at is not None and self._clock() >= expires_at:
                del self._entries[key]
                return None
            self._entries.move_to_end(key)
            return entry

    async def set(self, key: str, entry: CacheEntry) -> None:
        async with self._lock:
            if key in self._entries:
                self._entries.pop(key)
            elif len(self._entries) >= self.max_entries:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("result_cache_evicted", key=evicted[-12:])
            self._entries[key] = (self._expires_at(), entry)

    async def clear(self) -> None:
        async with self._lock:
            self._entries.clear()

    async def size(self) -> int:
        async with self._lock:
            return len(self._entries)


class RedisResultCache:
    """Shared cache for multi-process deployments; expiry is delegated to Redis."""

    def __init__(self, redis: Redis, ttl_seconds: int = 600) -> None:
        self.redis = redis
        self.ttl_seconds = ttl_seconds

    async def get(self, key: str) -> CacheEntry | None:
        raw = await self.redis.get(key)
        if not raw:
            return None
        try:
            return CacheEntry.from_dict(json.loads(raw))
        except (ValueError, KeyError, TypeError):
            logger.warning("result_cache_corrupt_entry", key=key[-12:])
            return None

    async def set(self, key: str, entry: CacheEntry) -> None:
        payload = json.dumps(entry.to_dict(), ensure_ascii=True)
        if self.ttl_seconds > 0:
            await self.redis.setex(key, self.ttl_seconds, payload)
        else:
            await self.redis.set(key, payload)

    async def clear(self) -> None:
        keys = [key async for key in self.redis.scan_iter(match=f"{CACHE_KEY_PREFIX}*")]
        if keys:
            await self.redis.delete(*keys)

    async def size(self) -> int:
        return len([key async for key in self.redis.scan_iter(match=f"{CACHE_KEY_PREFIX}*")])
