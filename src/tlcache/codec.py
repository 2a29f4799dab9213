"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Binary wire format for cached responses.

A stored value is either a 3-byte ASCII sentinel (``b"404"`` or ``b"403"``)
for a cacheable upstream error, or ``HEADER_SIZE`` bytes of compact JSON
headers right-padded with spaces, followed by the raw payload bytes.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import IntEnum
from typing import Any

from .errors import CacheDecodeError, CacheEncodeError, ContentLengthMismatchError
from .types import CACHE_HEADER, JSON_HEADER, Headers, JSONValue, status_code_of

HEADER_SIZE = 1024


class ErrorClass(IntEnum):
    """Upstream failures that are cached and replayed like responses."""

    NOT_FOUND = 404
    FORBIDDEN = 403

    @property
    def sentinel(self) -> bytes:
        return str(self.value).encode("ascii")


_SENTINELS = {member.sentinel: member for member in ErrorClass}


@dataclass(frozen=True, slots=True)
class CacheEntry:
    """One decoded cache value."""

    error: ErrorClass | None = None
    payload: bytes | JSONValue = None
    headers: Headers | None = None
    from_cache: bool = False


def error_class(error: BaseException | None) -> ErrorClass | None:
    """Return the cacheable class of `error`, or None when it is not cacheable."""
    code = status_code_of(error)
    if code is None or isinstance(code, bool):
        return None
    try:
        return ErrorClass(int(code))
    except (TypeError, ValueError):
        return None


def is_structured(payload: Any) -> bool:
    """True when `payload` is stored as JSON and flagged with `x-tl-json`."""
    return payload is not None and not isinstance(payload, (bytes, bytearray, memoryview, str))


def encode(
    error: BaseException | None,
    payload: Any = None,
    headers: Headers | None = None,
) -> bytes | None:
    """
    Pack one source result into a cache value.

    Returns None for errors that must not be cached.

    Raises:
        CacheEncodeError: If the serialized headers exceed ``HEADER_SIZE``.
    """
    cls = error_class(error)
    if cls is not None:
        return cls.sentinel
    if error is not None:
        return None

    headers = dict(headers or {})
    if payload is None:
        body = b""
    elif not is_structured(payload):
        body = payload.encode("utf-8") if isinstance(payload, str) else bytes(payload)
    else:
        headers[JSON_HEADER] = True
        body = _dump_json(payload)

    head = _dump_json(headers)
    if len(head) > HEADER_SIZE:
        raise CacheEncodeError(
            f"Invalid cache value - headers exceed {HEADER_SIZE} bytes: "
            f"{head.decode('utf-8')}"
        )
    return head.ljust(HEADER_SIZE, b" ") + body


def decode(value: bytes | bytearray | memoryview | str) -> CacheEntry:
    """
    Unpack one cache value.

    Raises:
        CacheDecodeError: If the value is truncated or its headers are not a
            JSON object.
        ContentLengthMismatchError: If a declared `content-length` disagrees
            with the stored payload.
    """
    raw = value.encode("utf-8") if isinstance(value, str) else bytes(value)

    if len(raw) == 3 and raw in _SENTINELS:
        return CacheEntry(error=_SENTINELS[raw], from_cache=True)

    if len(raw) < HEADER_SIZE:
        raise CacheDecodeError(
            f"Invalid cache value - expected at least {HEADER_SIZE} bytes, got {len(raw)}"
        )

    try:
        headers = json.loads(raw[:HEADER_SIZE].decode("utf-8").strip())
    except (UnicodeDecodeError, json.JSONDecodeError, RecursionError) as exc:
        raise CacheDecodeError("Invalid cache value") from exc
    if not isinstance(headers, dict):
        raise CacheDecodeError("Invalid cache value - headers are not an object")

    headers[CACHE_HEADER] = "hit"
    body = raw[HEADER_SIZE:]
    _check_content_length(headers, len(body))

    payload: bytes | JSONValue = body
    if headers.get(JSON_HEADER):
        try:
            payload = json.loads(body.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError, RecursionError) as exc:
            raise CacheDecodeError("Invalid cache value - payload is not JSON") from exc

    return CacheEntry(payload=payload, headers=headers, from_cache=True)


def _dump_json(value: Any) -> bytes:
    # Compact separators keep the layout identical to JSON.stringify output.
    try:
        text = json.dumps(value, separators=(",", ":"), ensure_ascii=False)
    except (TypeError, ValueError, RecursionError) as exc:
        raise CacheEncodeError(f"Invalid cache value - not JSON serializable: {exc}") from exc
    return text.encode("utf-8")


def _check_content_length(headers: Headers, actual: int) -> None:
    declared = None
    for name, value in headers.items():
        if name.lower() == "content-length":
            declared = value
            break
    if declared is None or declared == "":
        return
    try:
        expected = int(declared)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise ContentLengthMismatchError(declared, actual) from exc
    if expected != actual:
        raise ContentLengthMismatchError(declared, actual)
