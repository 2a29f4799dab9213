"""
basic_cache.py — Minimal tlcache example.

Wraps a slow source with an in-memory cache and shows a miss, a fresh hit,
and a stale hit that is refreshed in the background.

Usage:
    python examples/basic_cache.py
"""

import asyncio
import logging

from tlcache import InMemoryCacheClient, SourceResponse, cached


class SlowSource:
    def __init__(self) -> None:
        self.version = 0

    async def get(self, identifier: str) -> SourceResponse:
        await asyncio.sleep(0.2)
        self.version += 1
        return SourceResponse({"id": identifier, "version": self.version})


async def main() -> None:
    logging.basicConfig(level=logging.INFO)
    tiles = cached(SlowSource(), client=InMemoryCacheClient(), ttl_s=1, stale_s=30)

    print("miss :", (await tiles.get("/0/0/0")).payload)
    print("fresh:", (await tiles.get("/0/0/0")).payload)

    await asyncio.sleep(1.5)
    print("stale:", (await tiles.get("/0/0/0")).payload)
    await tiles.drain()
    print("fresh:", (await tiles.get("/0/0/0")).payload)


if __name__ == "__main__":
    asyncio.run(main())
