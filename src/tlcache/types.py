"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Shared types for sources and cached responses.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import Any, Protocol, TypeAlias, runtime_checkable

JSONPrimitive: TypeAlias = str | int | float | bool | None
JSONValue: TypeAlias = JSONPrimitive | list["JSONValue"] | dict[str, "JSONValue"]
Headers: TypeAlias = dict[str, JSONValue]

# Header names owned by the caching layer. Sources must not use them.
CACHE_HEADER = "x-tl-cache"
EXPIRES_HEADER = "x-tl-expires"
JSON_HEADER = "x-tl-json"
RESERVED_HEADERS = frozenset({CACHE_HEADER, EXPIRES_HEADER, JSON_HEADER})


@dataclass(slots=True)
class SourceResponse:
    """
    One successful response from a source.

    `payload` is raw bytes, text, or any JSON-serializable value. Structured
    values survive the cache round trip as parsed JSON; text comes back as
    UTF-8 bytes.
    """

    payload: bytes | str | JSONValue = b""
    headers: Headers = field(default_factory=dict)


@runtime_checkable
class Source(Protocol):
    """Anything with an async `get(identifier)` can sit behind the cache."""

    async def get(self, identifier: str) -> SourceResponse: ...


GetFunc: TypeAlias = Callable[[str], Awaitable[SourceResponse]]
Clock: TypeAlias = Callable[[], float]


def status_code_of(exc: BaseException | None) -> Any:
    """Read a status code from `exc.status_code` or `exc.response.status_code`."""
    if exc is None:
        return None
    code = getattr(exc, "status_code", None)
    if code is None:
        response = getattr(exc, "response", None)
        code = getattr(response, "status_code", None)
    return code
