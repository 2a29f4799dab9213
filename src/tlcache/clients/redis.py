"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Redis-backed cache client for multi-process deployments.
"""

from __future__ import annotations

import logging
from typing import Any

logger = logging.getLogger("tlcache.clients.redis")


class RedisCacheClient:
    """
    Cache client storing encoded entries as plain Redis strings.

    Requires ``redis.asyncio`` (``pip install redis``). The client must return
    raw bytes, so do not configure it with ``decode_responses=True``.

    Args:
        redis: An ``redis.asyncio.Redis`` client instance.
    """

    def __init__(self, redis: Any) -> None:
        self._redis = redis

    async def get(self, key: str) -> bytes | None:
        return await self._redis.get(key)

    async def set(self, key: str, ttl_s: int, value: bytes) -> None:
        await self._redis.setex(key, int(max(1, ttl_s)), value)

    def error(self, exc: BaseException, *, key: str | None = None) -> None:
        logger.error("cache error key=%s: %s", key, exc, exc_info=exc)

    async def aclose(self) -> None:
        """Close the underlying Redis connection pool."""
        await self._redis.aclose()
