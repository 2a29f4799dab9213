"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Factory helpers for selecting cache clients from environment variables.
"""

from __future__ import annotations

import os
from typing import Any

from .base import CacheClient
from .inmemory import InMemoryCacheClient


def create_cache_client_from_env(*, redis_client: Any | None = None) -> CacheClient:
    """
    Create a cache client from `TLCACHE_*` environment variables.

    Backends:
    - `inmemory` (default)
    - `redis`

    Redis resolution:
    - Uses the provided `redis_client` when supplied.
    - Otherwise builds a client from `TLCACHE_REDIS_URL` (or `REDIS_URL`).
    - If no URL is set, falls back to host/port/db/password variables.
    """
    backend = os.getenv("TLCACHE_BACKEND", "inmemory").strip().lower()

    if backend in ("mem", "memory", "inmemory", "in_memory"):
        return InMemoryCacheClient()

    if backend in ("redis",):
        from .redis import RedisCacheClient

        client = redis_client
        if client is None:
            try:
                import redis.asyncio as redis
            except ModuleNotFoundError as exc:  # pragma: no cover
                raise RuntimeError(
                    "Redis cache backend requires `redis` to be installed."
                ) from exc

            client = redis.Redis.from_url(_redis_url_from_env())

        return RedisCacheClient(client)

    raise ValueError(f"Unknown TLCACHE_BACKEND: {backend}")


def _redis_url_from_env() -> str:
    """`TLCACHE_REDIS_URL` or `REDIS_URL`, else a URL built from host/port/db/password."""
    for name in ("TLCACHE_REDIS_URL", "REDIS_URL"):
        url = os.getenv(name, "").strip()
        if url:
            return url
    host = os.getenv("TLCACHE_REDIS_HOST", "").strip() or "localhost"
    port = os.getenv("TLCACHE_REDIS_PORT", "").strip() or "6379"
    db = os.getenv("TLCACHE_REDIS_DB", "").strip() or "0"
    password = os.getenv("TLCACHE_REDIS_PASSWORD", "").strip()
    auth = f":{password}@" if password else ""
    return f"redis://{auth}{host}:{port}/{db}"
