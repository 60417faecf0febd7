"""Header codec -- request composition and response metadata extraction.

Outgoing, this module turns a :class:`RequestDescriptor` into a canonical
query string and a set of wire-ready request headers.  Incoming, it reads
the rate-limit, trace and caching headers of a response.

Extraction helpers never raise: a missing or malformed header simply
yields ``None``.
"""
from __future__ import annotations

from collections.abc import Mapping
from urllib.parse import urlencode

import httpx

from inheritage.core.types import (
    QueryValue,
    RateLimitInfo,
    RequestDescriptor,
    SystemHeaders,
)

# ---------------------------------------------------------------------------
# Header names
# ---------------------------------------------------------------------------

JSON_CONTENT_TYPE: str = "application/json"

HEADER_TRACE_ID = "X-Trace-Id"
HEADER_RATE_LIMIT = "X-RateLimit-Limit"
HEADER_RATE_REMAINING = "X-RateLimit-Remaining"
HEADER_RATE_RESET = "X-RateLimit-Reset"
HEADER_RETRY_AFTER = "Retry-After"
HEADER_ETAG = "ETag"
HEADER_LAST_MODIFIED = "Last-Modified"
HEADER_IF_NONE_MATCH = "If-None-Match"
HEADER_IF_MODIFIED_SINCE = "If-Modified-Since"

HeaderSource = httpx.Headers | Mapping[str, str]


# ---------------------------------------------------------------------------
# Outgoing
# ---------------------------------------------------------------------------

def _format_scalar(value: object) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def encode_query(query: Mapping[str, QueryValue] | None) -> list[tuple[str, str]]:
    """Flatten *query* into ordered ``(key, value)`` pairs.

    ``None`` values are dropped, lists and tuples are comma-joined and
    every other scalar is stringified.  Insertion order is preserved.
    """
    pairs: list[tuple[str, str]] = []
    for key, value in (query or {}).items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            text = ",".join(_format_scalar(item) for item in value if item is not None)
        else:
            text = _format_scalar(value)
        pairs.append((key, text))
    return pairs


def build_query_string(query: Mapping[str, QueryValue] | None) -> str:
    """Return the percent-encoded query string (without the leading ``?``)."""
    return urlencode(encode_query(query))


def build_url(api_root: str, descriptor: RequestDescriptor) -> str:
    """Join *api_root*, the descriptor path and its query string."""
    path = descriptor.path if descriptor.path.startswith("/") else f"/{descriptor.path}"
    url = f"{api_root.rstrip('/')}{path}"
    query = build_query_string(descriptor.query)
    return f"{url}?{query}" if query else url


def build_request_headers(
    descriptor: RequestDescriptor,
    *,
    default_headers: Mapping[str, str] | None = None,
) -> httpx.Headers:
    """Compose the request headers for *descriptor*.

    Precedence, lowest first: *default_headers*, the headers derived from
    the descriptor (``Accept``, ``Content-Type``, conditional headers),
    then the descriptor's own header overrides.
    """
    headers = httpx.Headers(default_headers or {})
    headers["Accept"] = descriptor.response_format.value
    if descriptor.has_body:
        headers["Content-Type"] = JSON_CONTENT_TYPE
    if descriptor.if_none_match:
        headers[HEADER_IF_NONE_MATCH] = descriptor.if_none_match
    if descriptor.if_modified_since:
        headers[HEADER_IF_MODIFIED_SINCE] = descriptor.if_modified_since
    if descriptor.headers:
        headers.update(descriptor.headers)
    return headers


# ---------------------------------------------------------------------------
# Incoming
# ---------------------------------------------------------------------------

def _as_headers(headers: HeaderSource) -> httpx.Headers:
    return headers if isinstance(headers, httpx.Headers) else httpx.Headers(headers)


def _parse_int(value: str | None) -> int | None:
    if value is None:
        return None
    text = value.strip()
    # int() would also accept "1_000", "+5" and non-ASCII digits.
    if not (text.isascii() and text.removeprefix("-").isdigit()):
        return None
    try:
        return int(text)
    except ValueError:
        return None


def parse_rate_limit(headers: HeaderSource) -> RateLimitInfo | None:
    """Return the rate-limit snapshot, or ``None`` unless all three headers are valid.

    A partial or malformed set never produces a partially-filled snapshot.
    """
    headers = _as_headers(headers)
    limit = _parse_int(headers.get(HEADER_RATE_LIMIT))
    remaining = _parse_int(headers.get(HEADER_RATE_REMAINING))
    reset = _parse_int(headers.get(HEADER_RATE_RESET))
    if limit is None or remaining is None or reset is None:
        return None
    if limit < 0 or remaining < 0:
        return None
    return RateLimitInfo(limit=limit, remaining=remaining, reset=reset)


def parse_trace_id(headers: HeaderSource) -> str | None:
    """Return ``X-Trace-Id`` verbatim, if present."""
    return _as_headers(headers).get(HEADER_TRACE_ID)


def parse_retry_after(headers: HeaderSource) -> int | None:
    """Return ``Retry-After`` as whole seconds.

    Absent, non-numeric (including the HTTP-date form) or negative values
    yield ``None``, never ``0``.
    """
    seconds = _parse_int(_as_headers(headers).get(HEADER_RETRY_AFTER))
    if seconds is None or seconds < 0:
        return None
    return seconds


def parse_system_headers(headers: HeaderSource) -> SystemHeaders:
    """Extract every recognised metadata header in one pass."""
    headers = _as_headers(headers)
    return SystemHeaders(
        trace_id=parse_trace_id(headers),
        rate_limit=parse_rate_limit(headers),
        etag=headers.get(HEADER_ETAG),
        last_modified=headers.get(HEADER_LAST_MODIFIED),
        retry_after=parse_retry_after(headers),
    )
