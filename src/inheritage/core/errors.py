"""Inheritage SDK error hierarchy.

Every failure the request pipeline can surface is one of the classes
below.  Each carries an explicit :class:`ErrorKind` discriminant so that
callers can branch exhaustively on ``error.kind`` instead of on the
concrete exception type.

Hierarchy
---------
::

    InheritageError
    +-- ValidationError      (kind=validation)  required input missing, pre-dispatch
    +-- RequestCancelled     (kind=cancelled)   cancellation token triggered
    +-- DecodeError          (kind=decode)      2xx response with unparsable body
    +-- TransportFailure     (kind=transport)   no response received
    +-- InheritageApiError   (kind=api)         non-2xx, non-304 response

Usage
-----
Catch everything raised by the client::

    try:
        response = await client.get_heritage("hampi")
    except InheritageError as exc:
        match exc.kind:
            case ErrorKind.API:
                ...
            case ErrorKind.CANCELLED:
                ...
"""
from __future__ import annotations

import enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from inheritage.core.types import RateLimitInfo

UNKNOWN_ERROR_CODE: str = "UNKNOWN_ERROR"
"""Fallback machine code for error responses without a usable envelope."""


class ErrorKind(enum.StrEnum):
    """Discriminant shared by every :class:`InheritageError`."""

    VALIDATION = "validation"
    CANCELLED = "cancelled"
    DECODE = "decode"
    TRANSPORT = "transport"
    API = "api"


# ---------------------------------------------------------------------------
# Base
# ---------------------------------------------------------------------------

class InheritageError(Exception):
    """Base exception for all Inheritage SDK errors.

    Attributes
    ----------
    kind : ErrorKind
        Discriminant identifying the failure category.
    message : str
        Human-readable description.
    details : dict[str, Any]
        Machine-readable context specific to the error instance.
    """

    kind: ErrorKind
    message: str = "Inheritage SDK error"

    def __init__(
        self,
        message: str | None = None,
        *,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.details: dict[str, Any] = details or {}
        if message is not None:
            self.message = message
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialise the error for logs and diagnostics."""
        payload: dict[str, Any] = {
            "kind": str(self.kind),
            "message": self.message,
        }
        if self.details:
            payload["details"] = self.details
        return payload

    def __repr__(self) -> str:
        return f"{type(self).__name__}(kind={self.kind!r}, message={self.message!r})"


# ===================================================================
# Local failures (no response was interpreted)
# ===================================================================

class ValidationError(InheritageError):
    """A required input was missing; raised before any network dispatch."""

    kind = ErrorKind.VALIDATION
    message = "Invalid request input"


class RequestCancelled(InheritageError):
    """The caller's cancellation token fired before the call resolved."""

    kind = ErrorKind.CANCELLED
    message = "Request was cancelled"


class TransportFailure(InheritageError):
    """The request could not be delivered or the response could not be read."""

    kind = ErrorKind.TRANSPORT
    message = "HTTP request failed"


# ===================================================================
# Protocol faults
# ===================================================================

class DecodeError(InheritageError):
    """The server answered with a success status but an unparsable body.

    ``line`` is the 1-based line of the offending document (always set
    for NDJSON bodies) and ``position`` the character offset reported by
    the JSON parser.
    """

    kind = ErrorKind.DECODE
    message = "Response body could not be decoded"

    def __init__(
        self,
        message: str | None = None,
        *,
        line: int | None = None,
        position: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.line = line
        self.position = position
        merged = dict(details or {})
        if line is not None:
            merged.setdefault("line", line)
        if position is not None:
            merged.setdefault("position", position)
        super().__init__(message, details=merged)


# ===================================================================
# API errors
# ===================================================================

class InheritageApiError(InheritageError):
    """Normalised error for any non-success, non-not-modified response.

    Carries the same trace and rate-limit metadata as a success envelope,
    plus the server's retry guidance.  ``payload`` retains the raw error
    body whenever it decoded as JSON.
    """

    kind = ErrorKind.API
    message = "Inheritage API request failed"

    def __init__(
        self,
        *,
        status: int,
        code: str,
        message: str,
        hint: str | None = None,
        doc: str | None = None,
        trace_id: str | None = None,
        retry_after: int | None = None,
        rate_limit: RateLimitInfo | None = None,
        payload: Any = None,
    ) -> None:
        self.status = int(status)
        self.code = code
        self.hint = hint
        self.doc = doc
        self.trace_id = trace_id
        self.retry_after = retry_after
        self.rate_limit = rate_limit
        self.payload = payload
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """Return the error in the server's ``{"error": {...}}`` shape."""
        error: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
            "hint": self.hint,
            "doc": self.doc,
        }
        if self.trace_id is not None:
            error["trace_id"] = self.trace_id
        return {"status": self.status, "error": error}

    def __str__(self) -> str:
        return f"{self.message} (status={self.status}, code={self.code})"

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(status={self.status!r}, code={self.code!r}, "
            f"message={self.message!r})"
        )
