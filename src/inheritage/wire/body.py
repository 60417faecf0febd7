"""Body codec -- JSON request serialisation and response decoding.

Decoding is selected by the endpoint's declared
:class:`~inheritage.core.types.ResponseFormat`, never by the response
``Content-Type``.  The transport streams NDJSON bodies through
:class:`~inheritage.wire.ndjson.NDJSONReader` and hands buffered JSON
bodies to :func:`decode_body`.
"""
from __future__ import annotations

import json
from typing import Any

from inheritage.core.errors import DecodeError
from inheritage.core.types import ResponseFormat
from inheritage.wire.ndjson import decode_ndjson


def serialize_body(value: Any) -> bytes:
    """Serialise *value* to compact UTF-8 JSON."""
    return json.dumps(value, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def decode_json(raw: str | bytes) -> Any:
    """Decode a single JSON document.

    An empty or whitespace-only body yields ``None``.

    Raises
    ------
    DecodeError
        If the body is not valid UTF-8 JSON.
    """
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecodeError(
                f"JSON body is not valid UTF-8: {exc.reason}",
                position=exc.start,
            ) from exc
    if not raw.strip():
        return None
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise DecodeError(
            f"Invalid JSON response: {exc.msg}",
            line=exc.lineno,
            position=exc.pos,
        ) from exc
    except (ValueError, RecursionError) as exc:
        # Oversized integer literals and excessive nesting.
        raise DecodeError(f"Invalid JSON response: {exc}") from exc


def decode_body(
    response_format: ResponseFormat,
    raw: str | bytes,
    *,
    max_records: int | None = None,
) -> Any:
    """Decode *raw* according to *response_format*.

    ``max_records`` only applies to NDJSON bodies.
    """
    if response_format is ResponseFormat.NDJSON:
        return decode_ndjson(raw, max_records=max_records)
    return decode_json(raw)
