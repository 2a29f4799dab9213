"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Caching settings and explicit config loading.
"""

from __future__ import annotations

import math
import os
from dataclasses import dataclass

from .errors import CacheConfigError

DEFAULT_NAMESPACE = "TL4"
DEFAULT_TTL_S = 300.0
DEFAULT_STALE_S = 300.0


@dataclass(frozen=True, slots=True)
class CacheSettings:
    """
    Explicit settings for one caching source.

    Attributes:
        namespace: Prefix joined to each identifier to form the store key.
        ttl_s: Freshness lifetime for responses without an upstream `Expires`.
        stale_s: Extra seconds an expired entry stays in the store, during
            which it is still served while being revalidated.
    """

    namespace: str = DEFAULT_NAMESPACE
    ttl_s: float = DEFAULT_TTL_S
    stale_s: float = DEFAULT_STALE_S

    def __post_init__(self) -> None:
        if not isinstance(self.namespace, str) or not self.namespace:
            raise CacheConfigError("No namespace provided")
        _require_positive("ttl_s", self.ttl_s)
        _require_positive("stale_s", self.stale_s)

    @staticmethod
    def from_env() -> "CacheSettings":
        """Load settings from `TLCACHE_*` environment variables."""
        return CacheSettings(
            namespace=os.getenv("TLCACHE_NAMESPACE", DEFAULT_NAMESPACE),
            ttl_s=_env_float("TLCACHE_TTL_S", DEFAULT_TTL_S),
            stale_s=_env_float("TLCACHE_STALE_S", DEFAULT_STALE_S),
        )


def _require_positive(name: str, value: object) -> None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise CacheConfigError(f"{name} must be a number, got {value!r}")
    if not math.isfinite(value) or value <= 0:
        raise CacheConfigError(f"{name} must be > 0, got {value!r}")


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError as exc:
        raise CacheConfigError(f"{name} must be a number, got {raw!r}") from exc
