"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Error types raised by the caching layer and by cached sources.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


class TLCacheError(RuntimeError):
    """Base class for caching layer failures."""


class CacheConfigError(TLCacheError, ValueError):
    """Raised when a caching source is constructed with invalid options."""


class CacheEncodeError(TLCacheError):
    """Raised when a response cannot be packed into the cache wire format."""


class CacheDecodeError(TLCacheError):
    """Raised when a stored value is not a valid cache entry."""


class ContentLengthMismatchError(CacheDecodeError):
    """Raised when the stored payload length disagrees with `content-length`."""

    def __init__(self, expected: Any, actual: int) -> None:
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Content length does not match: declared {expected!r}, got {actual}"
        )


class SourceError(Exception):
    """
    Conventional failure raised by a source's `get`.

    Any exception exposing a `status_code` attribute is understood by the
    caching layer; this class is a convenient concrete type for sources that
    have none of their own.
    """

    def __init__(
        self,
        status_code: int | None = None,
        message: str | None = None,
        *,
        headers: Mapping[str, Any] | None = None,
    ) -> None:
        self.status_code = status_code
        self.headers = dict(headers or {})
        super().__init__(message or f"Source error (status {status_code})")


class CachedSourceError(SourceError):
    """A 403/404 replayed from the cache instead of fetched from the source."""

    from_cache = True
