"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Module: clients/base.py.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class CacheClient(Protocol):
    """Key/value store used by the caching layer."""

    async def get(self, key: str) -> bytes | None: ...

    async def set(self, key: str, ttl_s: int, value: bytes) -> None: ...

    def error(self, exc: BaseException, *, key: str | None = None) -> None:
        """Report a non-fatal failure. Must never raise."""
