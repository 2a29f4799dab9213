"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Key/value store clients for the caching layer.
"""

from .base import CacheClient
from .factory import create_cache_client_from_env
from .inmemory import InMemoryCacheClient

__all__ = [
    "CacheClient",
    "InMemoryCacheClient",
    "create_cache_client_from_env",
]


# Lazy import for Redis client
def __getattr__(name: str):
    """Lazily expose optional clients that require extra dependencies."""
    if name == "RedisCacheClient":
        from .redis import RedisCacheClient

        return RedisCacheClient
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
