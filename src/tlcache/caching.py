"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Stale-while-revalidate caching in front of any source with an async `get`.

Cached values are served as soon as they are decoded. Expired entries are
still served while the store keeps them, and a background task refreshes
them for later callers. 404/403 results are cached like responses.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any

from .clients.base import CacheClient
from .codec import CacheEntry, decode, encode, error_class, is_structured
from .errors import CacheConfigError, CacheDecodeError, CachedSourceError
from .freshness import compute_expiry, is_fresh
from .metrics import CacheMetrics, NoOpCacheMetrics
from .settings import DEFAULT_NAMESPACE, DEFAULT_STALE_S, DEFAULT_TTL_S, CacheSettings
from .types import JSON_HEADER, Clock, GetFunc, SourceResponse

logger = logging.getLogger("tlcache.caching")


@dataclass(frozen=True, slots=True)
class RequestContext:
    """State one lookup carries into its background revalidation."""

    identifier: str
    key: str
    ttl_s: float
    stale_s: float


class CachingSource:
    """
    Wraps a source so that `get` reads through a key/value store.

    Args:
        source: Object with ``async def get(identifier) -> SourceResponse``.
        client: Store implementing :class:`CacheClient`.
        settings: Namespace and freshness window; defaults to
            :class:`CacheSettings` defaults.
        metrics: Optional counter sink.
        clock: Returns the current unix time; defaults to ``time.time``.

    Attributes not defined here are looked up on the wrapped source, so a
    caching source can stand in wherever the original is used.
    """

    def __init__(
        self,
        source: Any,
        *,
        client: CacheClient | None,
        settings: CacheSettings | None = None,
        metrics: CacheMetrics | None = None,
        clock: Clock | None = None,
    ) -> None:
        if source is None:
            raise CacheConfigError("No source provided")
        if not callable(getattr(source, "get", None)):
            raise CacheConfigError("No get method found on source")
        if client is None:
            raise CacheConfigError("No cache client")
        self._source = source
        self._fetch: GetFunc = source.get
        self._client = client
        self._settings = settings or CacheSettings()
        self._metrics = metrics or NoOpCacheMetrics()
        self._clock = clock or time.time
        self._refreshes: set[asyncio.Task[None]] = set()

    @property
    def source(self) -> Any:
        return self._source

    @property
    def client(self) -> CacheClient:
        return self._client

    @property
    def settings(self) -> CacheSettings:
        return self._settings

    @property
    def pending_refreshes(self) -> int:
        """Number of background revalidations still running."""
        return len(self._refreshes)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        return getattr(self._source, name)

    def cache_key(self, identifier: str) -> str:
        return f"{self._settings.namespace}-{identifier}"

    async def get(self, identifier: str) -> SourceResponse:
        """
        Return the response for `identifier`, from the store when possible.

        Raises:
            CachedSourceError: A 404/403 replayed from the store.
            CacheEncodeError: The fetched response's headers do not fit the
                wire format.
            Exception: Whatever the source raises on a miss.
        """
        ctx = RequestContext(
            identifier=identifier,
            key=self.cache_key(identifier),
            ttl_s=self._settings.ttl_s,
            stale_s=self._settings.stale_s,
        )

        try:
            stored = await self._client.get(ctx.key)
        except Exception as exc:
            # The store itself is failing; skip it for this request.
            self._report(exc, ctx)
            return await self._fetch(identifier)

        entry = self._decode(stored, ctx) if stored else None
        if entry is None:
            self._incr("cache_miss")
            return await self._fetch_and_store(ctx)

        self._incr("cache_hit")
        if not is_fresh(entry.headers, now=self._clock()):
            self._incr("cache_stale")
            self._schedule_refresh(ctx)
        return _replay(entry)

    async def drain(self) -> None:
        """Wait for every background revalidation scheduled so far."""
        while self._refreshes:
            await asyncio.gather(*list(self._refreshes), return_exceptions=True)

    def _decode(self, stored: Any, ctx: RequestContext) -> CacheEntry | None:
        try:
            return decode(stored)
        except CacheDecodeError as exc:
            self._report(exc, ctx)
            return None

    async def _fetch_and_store(self, ctx: RequestContext) -> SourceResponse:
        try:
            response = await self._fetch(ctx.identifier)
        except Exception as exc:
            if error_class(exc) is None:
                raise
            await self._store(ctx, exc, None, {})
            raise

        headers = await self._store(ctx, None, response.payload, response.headers)
        return SourceResponse(payload=response.payload, headers=headers)

    def _schedule_refresh(self, ctx: RequestContext) -> None:
        task = asyncio.create_task(self.revalidate(ctx))
        self._refreshes.add(task)
        task.add_done_callback(self._refreshes.discard)

    async def revalidate(self, ctx: RequestContext) -> None:
        """Fetch `ctx.identifier` again and rewrite its entry; never raises."""
        self._incr("cache_refresh")
        try:
            try:
                response = await self._fetch(ctx.identifier)
            except Exception as exc:
                if error_class(exc) is None:
                    self._report(exc, ctx)
                    return
                await self._store(ctx, exc, None, {})
                return
            await self._store(ctx, None, response.payload, response.headers)
        except Exception as exc:
            self._report(exc, ctx)

    async def _store(
        self,
        ctx: RequestContext,
        error: BaseException | None,
        payload: Any,
        headers: dict | None,
    ) -> dict:
        """Stamp expiry on `headers`, write the encoded entry, return the headers."""
        headers, expiry = compute_expiry(
            headers, ttl_s=ctx.ttl_s, stale_s=ctx.stale_s, now=self._clock()
        )
        if error is None and is_structured(payload):
            headers[JSON_HEADER] = True
        if not expiry.storable:
            logger.debug("skipping cache write for expired entry key=%s", ctx.key)
            return headers
        value = encode(error, payload, headers)
        if value is None:
            return headers

        try:
            await self._client.set(ctx.key, expiry.ttl_s, value)
        except Exception as exc:
            self._report(exc, ctx)
        else:
            self._incr("cache_write")
        return headers

    def _report(self, exc: BaseException, ctx: RequestContext) -> None:
        self._incr("cache_error")
        try:
            self._client.error(exc, key=ctx.key)
        except Exception:
            logger.exception("cache client error sink failed key=%s", ctx.key)

    def _incr(self, name: str) -> None:
        self._metrics.incr(name, tags={"namespace": self._settings.namespace})


def _replay(entry: CacheEntry) -> SourceResponse:
    if entry.error is not None:
        raise CachedSourceError(int(entry.error), entry.error.name.replace("_", " ").title())
    return SourceResponse(payload=entry.payload, headers=dict(entry.headers or {}))


class _FunctionSource:
    """Adapts a bare `get` coroutine function to the source interface."""

    def __init__(self, get: GetFunc) -> None:
        self.get = get


def cached(
    source: Any,
    *,
    client: CacheClient | None,
    namespace: str | None = None,
    ttl_s: float | None = None,
    stale_s: float | None = None,
    metrics: CacheMetrics | None = None,
    clock: Clock | None = None,
) -> CachingSource:
    """
    Put a read-through, stale-while-revalidate cache in front of `source`.

    Usage::

        tiles = cached(TileSource(), client=InMemoryCacheClient())
        response = await tiles.get("/0/0/0.png")
    """
    settings = CacheSettings(
        namespace=namespace if namespace is not None else DEFAULT_NAMESPACE,
        ttl_s=ttl_s if ttl_s is not None else DEFAULT_TTL_S,
        stale_s=stale_s if stale_s is not None else DEFAULT_STALE_S,
    )
    return CachingSource(source, client=client, settings=settings, metrics=metrics, clock=clock)


def caching_get(
    get: GetFunc | None,
    *,
    namespace: str,
    client: CacheClient | None,
    ttl_s: float | None = None,
    stale_s: float | None = None,
    metrics: CacheMetrics | None = None,
    clock: Clock | None = None,
) -> GetFunc:
    """Wrap a bare `get` coroutine function; returns the caching `get`."""
    if get is None:
        raise CacheConfigError("No get function provided")
    if not namespace:
        raise CacheConfigError("No namespace provided")
    return cached(
        _FunctionSource(get),
        client=client,
        namespace=namespace,
        ttl_s=ttl_s,
        stale_s=stale_s,
        metrics=metrics,
        clock=clock,
    ).get
