"""Redis-backed cache used by the services for cache-aside reads.

The cache is an optimisation only. Every failure (connection refused, timeout,
corrupt payload) is logged and degrades to a miss on reads or a no-op on
writes so that a broken Redis never fails a request.
"""

from __future__ import annotations

import asyncio
import json
import logging
from typing import Any, Awaitable, TypeVar

from redis.asyncio import Redis
from redis.exceptions import RedisError

from listing_api.config import Settings

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_TTL_SECONDS = 3600
DEFAULT_TIMEOUT_SECONDS = 0.5

_CACHE_FAILURES = (RedisError, OSError, asyncio.TimeoutError)


class CacheClient:
    def __init__(
        self,
        redis: Redis | None,
        *,
        ttl: int = DEFAULT_TTL_SECONDS,
        timeout: float | None = DEFAULT_TIMEOUT_SECONDS,
    ) -> None:
        self._redis = redis
        self.ttl = ttl
        self._timeout = timeout

    @property
    def enabled(self) -> bool:
        return self._redis is not None

    async def _call(self, operation: Awaitable[T]) -> T:
        if self._timeout is None:
            return await operation
        return await asyncio.wait_for(operation, timeout=self._timeout)

    async def get(self, key: str) -> bytes | None:
        if self._redis is None:
            return None
        try:
            return await self._call(self._redis.get(key))
        except _CACHE_FAILURES as exc:
            logger.warning("Cache get failed for key %s: %s", key, exc)
            return None

    async def set(self, key: str, value: bytes | str, ttl: int | None = None) -> None:
        if self._redis is None:
            return
        try:
            await self._call(self._redis.set(key, value, ex=ttl or self.ttl))
        except _CACHE_FAILURES as exc:
            logger.warning("Cache set failed for key %s: %s", key, exc)

    async def delete(self, *keys: str) -> None:
        if self._redis is None or not keys:
            return
        try:
            await self._call(self._redis.delete(*keys))
            logger.debug("Invalidated cache keys %s", ", ".join(keys))
        except _CACHE_FAILURES as exc:
            logger.warning("Cache delete failed for keys %s: %s", ", ".join(keys), exc)

    async def get_json(self, key: str) -> Any:
        payload = await self.get(key)
        if payload is None:
            logger.debug("Cache miss for %s", key)
            return None
        try:
            value = json.loads(payload)
        except (json.JSONDecodeError, UnicodeDecodeError):
            logger.warning("Discarding undecodable cache payload for key %s", key)
            return None
        logger.debug("Cache hit for %s", key)
        return value

    async def set_json(self, key: str, value: Any, ttl: int | None = None) -> None:
        encoded = json.dumps(value, default=str).encode("utf-8")
        await self.set(key, encoded, ttl=ttl)

    async def close(self) -> None:
        if self._redis is None:
            return
        try:
            await self._redis.aclose()
        except _CACHE_FAILURES as exc:
            logger.warning("Error while closing Redis connection: %s", exc)


def create_cache_client(config: Settings) -> CacheClient:
    """Build the application cache from settings; an empty REDIS_URL disables it."""

    if not config.REDIS_URL:
        logger.info("REDIS_URL is empty; caching is disabled.")
        return CacheClient(None, ttl=config.CACHE_TTL_SECONDS)

    redis = Redis.from_url(
        config.REDIS_URL,
        socket_connect_timeout=config.CACHE_TIMEOUT_SECONDS,
        socket_timeout=config.CACHE_TIMEOUT_SECONDS,
    )
    return CacheClient(
        redis,
        ttl=config.CACHE_TTL_SECONDS,
        timeout=config.CACHE_TIMEOUT_SECONDS,
    )


__all__ = [
    "CacheClient",
    "DEFAULT_TTL_SECONDS",
    "create_cache_client",
]
