"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Stale-while-revalidate caching for async sources.

Quick start::

    from tlcache import InMemoryCacheClient, cached

    tiles = cached(TileSource(), client=InMemoryCacheClient(), ttl_s=60)
    response = await tiles.get("/0/0/0.png")
"""

from .caching import CachingSource, RequestContext, cached, caching_get
from .clients import CacheClient, InMemoryCacheClient, create_cache_client_from_env
from .codec import HEADER_SIZE, CacheEntry, ErrorClass, decode, encode, error_class
from .errors import (
    CacheConfigError,
    CacheDecodeError,
    CachedSourceError,
    CacheEncodeError,
    ContentLengthMismatchError,
    SourceError,
    TLCacheError,
)
from .freshness import Expiry, compute_expiry, format_http_date, is_fresh, parse_http_date
from .metrics import CacheMetrics, NoOpCacheMetrics, PrometheusCacheMetrics
from .settings import CacheSettings
from .types import (
    CACHE_HEADER,
    EXPIRES_HEADER,
    JSON_HEADER,
    RESERVED_HEADERS,
    Source,
    SourceResponse,
)

__all__ = [
    "cached",
    "caching_get",
    "CachingSource",
    "RequestContext",
    "CacheSettings",
    "CacheClient",
    "InMemoryCacheClient",
    "create_cache_client_from_env",
    "HEADER_SIZE",
    "CacheEntry",
    "ErrorClass",
    "encode",
    "decode",
    "error_class",
    "Expiry",
    "compute_expiry",
    "is_fresh",
    "format_http_date",
    "parse_http_date",
    "CacheMetrics",
    "NoOpCacheMetrics",
    "PrometheusCacheMetrics",
    "Source",
    "SourceResponse",
    "CACHE_HEADER",
    "EXPIRES_HEADER",
    "JSON_HEADER",
    "RESERVED_HEADERS",
    "TLCacheError",
    "CacheConfigError",
    "CacheEncodeError",
    "CacheDecodeError",
    "ContentLengthMismatchError",
    "SourceError",
    "CachedSourceError",
]


def __getattr__(name: str):
    """Lazily expose the Redis client, which requires the `redis` extra."""
    if name == "RedisCacheClient":
        from .clients.redis import RedisCacheClient

        return RedisCacheClient
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
