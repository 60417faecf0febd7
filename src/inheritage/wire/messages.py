"""Error envelope models and the error normaliser.

The API reports failures as::

    {"error": {"code": "...", "message": "...", "hint": "...", "doc": "...", "trace_id": "..."}}

but any non-success response may carry a body of a different shape (an
HTML error page from a proxy, an empty body, truncated JSON).
:func:`normalize_error` folds all of these into one
:class:`~inheritage.core.errors.InheritageApiError` and never raises.
"""
from __future__ import annotations

import json
import logging
from typing import Any

from pydantic import BaseModel, ConfigDict, StrictStr
from pydantic import ValidationError as PydanticValidationError

from inheritage.core.errors import UNKNOWN_ERROR_CODE, InheritageApiError
from inheritage.wire.headers import HeaderSource, parse_system_headers

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Pydantic models
# ---------------------------------------------------------------------------

class ErrorPayload(BaseModel):
    """Machine-readable error object inside the envelope."""

    model_config = ConfigDict(extra="allow")

    code: StrictStr
    message: StrictStr
    hint: StrictStr | None = None
    doc: StrictStr | None = None
    trace_id: StrictStr | None = None


class ErrorResponse(BaseModel):
    """Top-level error response wrapper."""

    model_config = ConfigDict(extra="allow")

    error: ErrorPayload


# ---------------------------------------------------------------------------
# Parsing helpers
# ---------------------------------------------------------------------------

def _try_decode(raw: str | bytes) -> Any:
    """Decode *raw* as JSON, returning ``None`` when it is not JSON at all."""
    try:
        text = raw.decode("utf-8") if isinstance(raw, bytes) else raw
        if not text.strip():
            return None
        return json.loads(text)
    except (ValueError, RecursionError):
        return None


def parse_error_envelope(payload: Any) -> ErrorPayload | None:
    """Return the ``error`` object of *payload*, or ``None`` if it is malformed."""
    if not isinstance(payload, dict):
        return None
    try:
        return ErrorResponse.model_validate(payload).error
    except PydanticValidationError as exc:
        logger.debug("Discarding malformed error envelope: %s", exc.errors(include_url=False))
        return None


def fallback_message(status: int) -> str:
    return f"Request failed with status {status}"


# ---------------------------------------------------------------------------
# Normaliser
# ---------------------------------------------------------------------------

def normalize_error(
    status: int,
    raw: str | bytes,
    headers: HeaderSource,
) -> InheritageApiError:
    """Build the typed error for a non-success, non-not-modified response.

    Parameters
    ----------
    status:
        HTTP status code of the response.
    raw:
        Raw response body.
    headers:
        Response headers; supply ``Retry-After``, ``X-Trace-Id`` and the
        rate-limit snapshot.

    Returns
    -------
    InheritageApiError
        Built from the envelope when it is well-formed, otherwise an
        ``UNKNOWN_ERROR`` fallback.  ``payload`` holds the decoded body
        whenever the body was JSON.
    """
    meta = parse_system_headers(headers)
    payload = _try_decode(raw)
    envelope = parse_error_envelope(payload)

    if envelope is None:
        return InheritageApiError(
            status=status,
            code=UNKNOWN_ERROR_CODE,
            message=fallback_message(status),
            trace_id=meta.trace_id,
            retry_after=meta.retry_after,
            rate_limit=meta.rate_limit,
            payload=payload,
        )

    return InheritageApiError(
        status=status,
        code=envelope.code,
        message=envelope.message,
        hint=envelope.hint,
        doc=envelope.doc,
        trace_id=envelope.trace_id or meta.trace_id,
        retry_after=meta.retry_after,
        rate_limit=meta.rate_limit,
        payload=payload,
    )
