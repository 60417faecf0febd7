"""Inheritage SDK -- Python client for the Inheritage heritage-data API.

Turns the remote HTTP API into typed, cancellable calls that return one
uniform envelope or raise one uniform error.

Layers
------
1. Core types, errors, config, cancellation (:mod:`inheritage.core`)
2. Wire pipeline -- header/body codecs, error normaliser, transport
   (:mod:`inheritage.wire`)
3. Endpoint declarations (:mod:`inheritage.endpoints`)
4. Client surface (:mod:`inheritage.client`)
"""
from __future__ import annotations

__version__ = "0.1.0"

# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------
from inheritage.client import InheritageClient

# ---------------------------------------------------------------------------
# Core types, errors, config
# ---------------------------------------------------------------------------
from inheritage.core.cancellation import CancellationToken
from inheritage.core.config import DEFAULT_BASE_URL, ClientConfig
from inheritage.core.errors import (
    UNKNOWN_ERROR_CODE,
    DecodeError,
    ErrorKind,
    InheritageApiError,
    InheritageError,
    RequestCancelled,
    TransportFailure,
    ValidationError,
)
from inheritage.core.types import (
    ApiResponse,
    RateLimitInfo,
    RequestDescriptor,
    RequestOptions,
    ResponseFormat,
    SystemHeaders,
)

# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------
from inheritage.endpoints import ENDPOINTS, Endpoint

# ---------------------------------------------------------------------------
# Wire pipeline
# ---------------------------------------------------------------------------
from inheritage.wire import (
    HTTPTransport,
    decode_ndjson,
    normalize_error,
    parse_system_headers,
)

__all__ = [
    # Meta
    "__version__",
    # Core types
    "ApiResponse",
    "RateLimitInfo",
    "RequestDescriptor",
    "RequestOptions",
    "ResponseFormat",
    "SystemHeaders",
    "CancellationToken",
    # Config
    "ClientConfig",
    "DEFAULT_BASE_URL",
    # Error hierarchy
    "ErrorKind",
    "InheritageError",
    "ValidationError",
    "RequestCancelled",
    "DecodeError",
    "TransportFailure",
    "InheritageApiError",
    "UNKNOWN_ERROR_CODE",
    # Endpoints
    "Endpoint",
    "ENDPOINTS",
    # Wire
    "HTTPTransport",
    "decode_ndjson",
    "normalize_error",
    "parse_system_headers",
    # Client
    "InheritageClient",
]
