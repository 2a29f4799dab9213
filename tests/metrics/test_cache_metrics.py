from __future__ import annotations

import asyncio

import pytest

from tlcache import InMemoryCacheClient, NoOpCacheMetrics, SourceResponse, cached


class _Source:
    async def get(self, identifier: str) -> SourceResponse:
        return SourceResponse("hello", {})


def test_noop_metrics_accepts_anything():
    NoOpCacheMetrics().incr("cache_hit", 3, tags={"namespace": "TL4"})


def test_prometheus_metrics_count_cache_traffic():
    prometheus_client = pytest.importorskip("prometheus_client")
    from tlcache import PrometheusCacheMetrics

    registry = prometheus_client.CollectorRegistry()
    metrics = PrometheusCacheMetrics(prefix="itest", registry=registry)
    tiles = cached(_Source(), client=InMemoryCacheClient(), metrics=metrics)

    async def scenario() -> None:
        await tiles.get("/x")
        await tiles.get("/x")

    asyncio.run(scenario())

    labels = {"namespace": "TL4"}
    assert registry.get_sample_value("itest_cache_miss_total", labels) == 1.0
    assert registry.get_sample_value("itest_cache_hit_total", labels) == 1.0
    assert registry.get_sample_value("itest_cache_write_total", labels) == 1.0


def test_prometheus_metrics_rejects_unknown_counter():
    prometheus_client = pytest.importorskip("prometheus_client")
    from tlcache import PrometheusCacheMetrics

    metrics = PrometheusCacheMetrics(registry=prometheus_client.CollectorRegistry())
    with pytest.raises(ValueError, match="Unknown cache metric"):
        metrics.incr("cache_evicted", tags={"namespace": "TL4"})
