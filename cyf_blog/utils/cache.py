"""
Short-lived key/value cache.

Used for email-verification request deduplication and response caching.
Values are strings; TTLs are in seconds. An in-process store is used unless
REDIS_URL is configured.
"""

import logging
import time
from typing import Dict, Optional, Tuple

from redis.asyncio import Redis

from cyf_blog.core.config import settings

logger = logging.getLogger(__name__)


class MemoryCache:
    """In-process cache. Only suitable for a single worker."""

    def __init__(self) -> None:
        self._store: Dict[str, Tuple[str, Optional[float]]] = {}

    async def get(self, key: str) -> Optional[str]:
        entry = self._store.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and expires_at <= time.monotonic():
            self._store.pop(key, None)
            return None
        return value

    async def set(self, key: str, value: str, ttl: Optional[int] = None) -> None:
        now = time.monotonic()
        self._evict_expired(now)
        expires_at = now + ttl if ttl else None
        self._store[key] = (value, expires_at)

    def _evict_expired(self, now: float) -> None:
        expired = [
            key for key, (_, expires_at) in self._store.items()
            if expires_at is not None and expires_at <= now
        ]
        for key in expired:
            del self._store[key]

    async def delete(self, key: str) -> None:
        self._store.pop(key, None)

    async def clear(self) -> None:
        self._store.clear()


class RedisCache:
    """Redis-backed cache shared between workers."""

    def __init__(self, url: str, key_prefix: str = "cyf_blog:cache:") -> None:
        self.client = Redis.from_url(url, decode_responses=True)
        self.key_prefix = key_prefix
        logger.info("Redis cache initialized")

    def _get_key(self, key: str) -> str:
        return f"{self.key_prefix}{key}"

    async def get(self, key: str) -> Optional[str]:
        return await self.client.get(self._get_key(key))

    async def set(self, key: str, value: str, ttl: Optional[int] = None) -> None:
        await self.client.set(self._get_key(key), value, ex=ttl)

    async def delete(self, key: str) -> None:
        await self.client.delete(self._get_key(key))

    async def clear(self) -> None:
        keys = [key async for key in self.client.scan_iter(match=f"{self.key_prefix}*")]
        if keys:
            await self.client.delete(*keys)


def build_cache() -> MemoryCache | RedisCache:
    if settings.REDIS_URL:
        return RedisCache(settings.REDIS_URL)
    logger.info("REDIS_URL not set, using in-process cache")
    return MemoryCache()


cache = build_cache()


def get_cache() -> MemoryCache | RedisCache:
    """FastAPI dependency returning the shared cache."""
    return cache


def email_verify_key(user_id: str) -> str:
    return f"email_verify__{user_id}"
