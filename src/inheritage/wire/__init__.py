"""Inheritage wire subpackage -- request/response pipeline.

This subpackage implements everything between an endpoint declaration
and the value handed back to the caller.  It provides:

* **Header codec** -- query strings, request headers and response
  metadata (:mod:`~inheritage.wire.headers`).
* **Body codec** -- JSON serialisation and JSON / NDJSON decoding
  (:mod:`~inheritage.wire.body`, :mod:`~inheritage.wire.ndjson`).
* **Error normaliser** -- error envelope models and
  :func:`normalize_error` (:mod:`~inheritage.wire.messages`).
* **HTTP transport** -- the per-call request lifecycle
  (:mod:`~inheritage.wire.http`).
"""
from __future__ import annotations

# -- Body codec -------------------------------------------------------------
from inheritage.wire.body import decode_body, decode_json, serialize_body

# -- Header codec -----------------------------------------------------------
from inheritage.wire.headers import (
    build_query_string,
    build_request_headers,
    build_url,
    encode_query,
    parse_rate_limit,
    parse_retry_after,
    parse_system_headers,
    parse_trace_id,
)

# -- HTTP transport ---------------------------------------------------------
from inheritage.wire.http import HTTPTransport

# -- Error normaliser -------------------------------------------------------
from inheritage.wire.messages import (
    ErrorPayload,
    ErrorResponse,
    normalize_error,
    parse_error_envelope,
)

# -- NDJSON -----------------------------------------------------------------
from inheritage.wire.ndjson import NDJSONReader, decode_ndjson

__all__ = [
    # Header codec
    "encode_query",
    "build_query_string",
    "build_url",
    "build_request_headers",
    "parse_rate_limit",
    "parse_trace_id",
    "parse_retry_after",
    "parse_system_headers",
    # Body codec
    "serialize_body",
    "decode_json",
    "decode_body",
    "decode_ndjson",
    "NDJSONReader",
    # Error normaliser
    "ErrorPayload",
    "ErrorResponse",
    "normalize_error",
    "parse_error_envelope",
    # HTTP
    "HTTPTransport",
]
