"""Inheritage SDK shared types.

This module defines the value types exchanged between the endpoint
surface, the transport and the wire codecs.

Key design decisions:
* ``ResponseFormat`` is a *closed* string enum: every endpoint declares
  exactly one member and the body codec dispatches on it.
* ``RateLimitInfo`` is a frozen Pydantic model so that its invariants
  (non-negative counters) are enforced at construction time.
* ``ApiResponse``, ``RequestOptions`` and ``RequestDescriptor`` are plain
  dataclasses; they carry live objects (``httpx.Headers``,
  :class:`~inheritage.core.cancellation.CancellationToken`) that are not
  meant to be serialised.
* Response payloads are returned as decoded JSON values; no entity
  models are imposed on them.
"""
from __future__ import annotations

import enum
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field

if TYPE_CHECKING:
    import httpx

    from inheritage.core.cancellation import CancellationToken

T = TypeVar("T")

JsonValue = Any
"""Any value produced by :func:`json.loads`."""

QueryScalar = str | int | float | bool
QueryValue = QueryScalar | Sequence[QueryScalar] | None
"""A query-string value.  ``None`` means *omit the key*."""


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class ResponseFormat(enum.StrEnum):
    """Declared response body shape of an endpoint.

    The member value doubles as the ``Accept`` header sent on the wire.
    """

    JSON = "application/json"
    NDJSON = "application/x-ndjson"


# ---------------------------------------------------------------------------
# Response metadata
# ---------------------------------------------------------------------------

class RateLimitInfo(BaseModel):
    """Decoded ``X-RateLimit-*`` triple.

    Only ever built when all three headers parse as integers.
    """

    model_config = ConfigDict(strict=True, frozen=True)

    limit: int = Field(ge=0, description="Request quota for the window.")
    remaining: int = Field(ge=0, description="Requests left in the window.")
    reset: int = Field(description="Window reset time, epoch seconds.")


@dataclass(frozen=True)
class SystemHeaders:
    """All metadata the pipeline extracts from response headers."""

    trace_id: str | None = None
    rate_limit: RateLimitInfo | None = None
    etag: str | None = None
    last_modified: str | None = None
    retry_after: int | None = None


@dataclass(frozen=True)
class ApiResponse(Generic[T]):
    """Uniform success envelope returned by every call.

    ``not_modified`` is ``True`` exactly when ``status == 304``, in which
    case ``data`` is ``None``.  ``etag`` and ``last_modified`` echo the
    caching validators so that callers can issue conditional requests.
    """

    status: int
    data: T | None
    headers: httpx.Headers
    trace_id: str | None = None
    rate_limit: RateLimitInfo | None = None
    not_modified: bool = False
    etag: str | None = None
    last_modified: str | None = None


# ---------------------------------------------------------------------------
# Request side
# ---------------------------------------------------------------------------

@dataclass(frozen=True, kw_only=True)
class RequestOptions:
    """Per-call options recognised by every endpoint method.

    Attributes
    ----------
    query:
        Extra query parameters, merged over the endpoint's own parameters.
        Keys whose value is ``None`` are dropped from the wire.
    headers:
        Header overrides applied last (case-insensitive).
    signal:
        Cancellation token for the call.  ``None`` means not cancellable
        beyond native ``asyncio`` task cancellation.
    if_none_match:
        ETag of a cached representation; sent as ``If-None-Match``.
    if_modified_since:
        HTTP date of a cached representation; sent as
        ``If-Modified-Since``.
    """

    query: Mapping[str, QueryValue] | None = None
    headers: Mapping[str, str] | None = None
    signal: CancellationToken | None = None
    if_none_match: str | None = None
    if_modified_since: str | None = None


@dataclass(frozen=True, kw_only=True)
class RequestDescriptor:
    """Everything the transport needs to perform one call."""

    method: str
    path: str
    response_format: ResponseFormat = ResponseFormat.JSON
    query: Mapping[str, QueryValue] = field(default_factory=dict)
    body: JsonValue = None
    headers: Mapping[str, str] | None = None
    signal: CancellationToken | None = None
    if_none_match: str | None = None
    if_modified_since: str | None = None
    max_records: int | None = None

    @property
    def has_body(self) -> bool:
        return self.body is not None
