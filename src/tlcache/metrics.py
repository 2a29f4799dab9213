"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Metrics adapters for cache observability.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol


class CacheMetrics(Protocol):
    """Minimal metrics interface for cache instrumentation."""

    def incr(
        self, name: str, value: int = 1, *, tags: Mapping[str, str] | None = None
    ) -> None:
        """Increment a counter metric."""


class NoOpCacheMetrics:
    """Default metrics sink when no metrics backend is provided."""

    def incr(
        self, name: str, value: int = 1, *, tags: Mapping[str, str] | None = None
    ) -> None:
        _ = name
        _ = value
        _ = tags


CACHE_COUNTERS: dict[str, str] = {
    "cache_hit": "Lookups answered from the store",
    "cache_miss": "Lookups that fell through to the source",
    "cache_stale": "Hits served past their expiry",
    "cache_refresh": "Background revalidations started",
    "cache_write": "Entries written to the store",
    "cache_error": "Store, decode and refresh failures reported",
}


class PrometheusCacheMetrics(CacheMetrics):
    """
    One Prometheus counter per cache event, labelled by cache namespace.

    Requires `prometheus_client` package.
    """

    def __init__(self, *, prefix: str = "tlcache", registry=None) -> None:
        try:
            from prometheus_client import REGISTRY, Counter
        except ModuleNotFoundError as exc:  # pragma: no cover
            raise RuntimeError(
                "PrometheusCacheMetrics requires `prometheus_client` to be installed."
            ) from exc

        registry = registry if registry is not None else REGISTRY
        self._counters = {
            name: Counter(
                name=name,
                documentation=doc,
                namespace=prefix,
                labelnames=("namespace",),
                registry=registry,
            )
            for name, doc in CACHE_COUNTERS.items()
        }

    def incr(self, name: str, value: int = 1, *, tags: Mapping[str, str] | None = None) -> None:
        counter = self._counters.get(name)
        if counter is None:
            raise ValueError(f"Unknown cache metric: {name}")
        counter.labels((tags or {}).get("namespace", "")).inc(value)
