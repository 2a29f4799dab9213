"""
MIT License
Copyright (c) 2026 arpan404
See LICENSE file for full license text.

Expiration bookkeeping for cached responses.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timezone
from email.utils import format_datetime, parsedate_to_datetime

from .types import EXPIRES_HEADER, Headers


@dataclass(frozen=True, slots=True)
class Expiry:
    """
    Where a freshly fetched response expires and how long the store keeps it.

    Attributes:
        expires: HTTP date written to the `x-tl-expires` header.
        ttl_s: Store-level TTL in seconds, stale padding included. A value
            <= 0 means the response is already expired and must not be stored.
        upstream: True when the source supplied its own `Expires` header.
    """

    expires: str
    ttl_s: int
    upstream: bool

    @property
    def storable(self) -> bool:
        return self.ttl_s > 0


def format_http_date(ts: float) -> str:
    """Format a unix timestamp as an RFC 7231 date (``Sun, 18 Oct 2026 12:00:00 GMT``)."""
    return format_datetime(datetime.fromtimestamp(int(ts), tz=timezone.utc), usegmt=True)


def parse_http_date(value: object) -> float | None:
    """Parse an HTTP date into a unix timestamp; None when unparseable."""
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError):
        return None
    if parsed is None:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.timestamp()


def compute_expiry(
    headers: Headers | None,
    *,
    ttl_s: float,
    stale_s: float,
    now: float,
) -> tuple[Headers, Expiry]:
    """
    Stamp `x-tl-expires` onto a copy of `headers` and derive the store TTL.

    An upstream `Expires`/`expires` header is honored exactly, with no stale
    padding. Otherwise the response expires `ttl_s` from `now` and is kept
    in the store for `stale_s` more seconds.
    """
    out = dict(headers or {})
    upstream = out.pop("Expires", None)
    lower = out.pop("expires", None)
    upstream = upstream or lower

    if upstream:
        out["expires"] = upstream
        out[EXPIRES_HEADER] = upstream
        pad = 0.0
    else:
        out[EXPIRES_HEADER] = format_http_date(now + ttl_s)
        pad = stale_s

    expires_at = parse_http_date(out[EXPIRES_HEADER])
    if expires_at is None:
        return out, Expiry(expires=str(out[EXPIRES_HEADER]), ttl_s=0, upstream=bool(upstream))

    remaining = math.ceil(expires_at - now)
    ttl = int(remaining + pad) if remaining > 0 else remaining
    return out, Expiry(expires=str(out[EXPIRES_HEADER]), ttl_s=ttl, upstream=bool(upstream))


def is_fresh(headers: Headers | None, *, now: float) -> bool:
    """True iff `headers` carry an `x-tl-expires` strictly after `now`."""
    if not headers:
        return False
    expires_at = parse_http_date(headers.get(EXPIRES_HEADER))
    if expires_at is None:
        return False
    return expires_at > now
