"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: clients/inmemory.py.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field

from ..types import Clock

logger = logging.getLogger("tlcache.clients.inmemory")


@dataclass(slots=True)
class _Row:
    value: bytes
    expires_at_s: float


@dataclass(slots=True)
class InMemoryCacheClient:
    """Process-local cache client suitable for development/test workloads."""

    clock: Clock = time.time
    errors: list[tuple[str | None, BaseException]] = field(default_factory=list)
    _rows: dict[str, _Row] = field(default_factory=dict, init=False, repr=False)

    async def get(self, key: str) -> bytes | None:
        row = self._rows.get(key)
        if row is None:
            return None
        if row.expires_at_s <= self.clock():
            self._rows.pop(key, None)
            return None
        return row.value

    async def set(self, key: str, ttl_s: int, value: bytes) -> None:
        if ttl_s <= 0:
            raise ValueError("ttl_s must be > 0")
        self._rows[key] = _Row(value=bytes(value), expires_at_s=self.clock() + ttl_s)

    def error(self, exc: BaseException, *, key: str | None = None) -> None:
        self.errors.append((key, exc))
        logger.warning("cache error key=%s: %s", key, exc)

    def ttl(self, key: str) -> float | None:
        """Seconds left before `key` is evicted, or None when absent."""
        row = self._rows.get(key)
        if row is None:
            return None
        return row.expires_at_s - self.clock()
