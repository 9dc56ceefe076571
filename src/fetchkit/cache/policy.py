"""HTTP caching rules for a private (single-user) response cache.

Decides whether a response may be stored and how long a stored entry stays
fresh, following the parts of RFC 9111 that matter for a client-side cache:

* Only ``GET`` requests with a 2xx answer are stored.
* ``Cache-Control: no-store`` on either the request or the response
  prevents storage.
* Freshness comes from ``max-age``, otherwise from ``Expires`` minus
  ``Date``. ``no-cache`` makes an entry stale immediately.
* Age is the larger of the ``Age`` header and the apparent age derived from
  ``Date``, plus the time the entry has been resident.

Staleness never prevents the entry from being used as a fallback after a
transport failure; it only matters when the transport is configured to
answer fresh entries without going to the network.
"""

from __future__ import annotations

from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Optional

import httpx

from fetchkit.models import CacheEntry, FetchRequest, HTTPMethod


def parse_cache_control(value: Optional[str]) -> dict[str, Optional[str]]:
    """Parse a ``Cache-Control`` header into a directive mapping.

    Directive names are lower-cased; valueless directives map to ``None``
    and quoted values are unquoted.

    Example::

        >>> parse_cache_control('max-age=60, no-cache, private="x"')
        {'max-age': '60', 'no-cache': None, 'private': 'x'}
    """
    directives: dict[str, Optional[str]] = {}
    if not value:
        return directives
    for part in value.split(","):
        part = part.strip()
        if not part:
            continue
        name, sep, arg = part.partition("=")
        name = name.strip().lower()
        if sep:
            directives[name] = arg.strip().strip('"')
        else:
            directives[name] = None
    return directives


def _parse_http_date(value: Optional[str]) -> Optional[datetime]:
    if not value:
        return None
    try:
        parsed = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _seconds(value: Optional[str]) -> Optional[int]:
    if value is None:
        return None
    try:
        return max(0, int(value))
    except ValueError:
        return None


def is_storable(request: FetchRequest, response: httpx.Response) -> bool:
    """Return whether *response* to *request* may be written to the cache."""
    if request.method != HTTPMethod.GET:
        return False
    if not (200 <= response.status_code < 300):
        return False
    request_cc = parse_cache_control(
        next((v for k, v in request.headers.items() if k.lower() == "cache-control"), None)
    )
    if "no-store" in request_cc:
        return False
    response_cc = parse_cache_control(response.headers.get("cache-control"))
    return "no-store" not in response_cc


def freshness_lifetime(headers: httpx.Headers) -> Optional[float]:
    """Seconds a response stays fresh, or ``None`` when the headers say nothing.

    Args:
        headers: Response headers (case-insensitive).
    """
    directives = parse_cache_control(headers.get("cache-control"))
    if "no-cache" in directives:
        return 0.0
    max_age = _seconds(directives.get("max-age"))
    if max_age is not None:
        return float(max_age)
    expires = _parse_http_date(headers.get("expires"))
    if expires is None:
        # An unparseable Expires means "already expired".
        return 0.0 if "expires" in headers else None
    date = _parse_http_date(headers.get("date"))
    if date is None:
        return None
    return max(0.0, (expires - date).total_seconds())


def current_age(entry: CacheEntry, now: Optional[datetime] = None) -> float:
    """Age of *entry* in seconds at *now* (default: current UTC time)."""
    now = now or datetime.now(timezone.utc)
    headers = httpx.Headers(entry.headers)
    age_header = float(_seconds(headers.get("age")) or 0)
    date = _parse_http_date(headers.get("date"))
    apparent = 0.0
    if date is not None:
        apparent = max(0.0, (entry.received_at - date).total_seconds())
    resident = max(0.0, (now - entry.received_at).total_seconds())
    return max(apparent, age_header) + resident


def is_fresh(entry: CacheEntry, now: Optional[datetime] = None) -> bool:
    """Return whether *entry* may be served without contacting the origin."""
    lifetime = freshness_lifetime(httpx.Headers(entry.headers))
    if lifetime is None:
        return False
    return current_age(entry, now) < lifetime
