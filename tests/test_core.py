"""Tests for the core layer: errors, configuration, cancellation tokens
and the endpoint registry.
"""
from __future__ import annotations

import asyncio

import pydantic
import pytest

from inheritage.core.cancellation import CancellationToken
from inheritage.core.config import DEFAULT_BASE_URL, DEFAULT_USER_AGENT, ClientConfig
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
from inheritage.core.types import RateLimitInfo, ResponseFormat
from inheritage.endpoints import AI_VECTOR_INDEX, ENDPOINTS, HERITAGE_DETAIL, Endpoint

# =========================================================================
# Errors
# =========================================================================


class TestErrorHierarchy:
    @pytest.mark.parametrize(
        ("cls", "kind"),
        [
            (ValidationError, ErrorKind.VALIDATION),
            (RequestCancelled, ErrorKind.CANCELLED),
            (DecodeError, ErrorKind.DECODE),
            (TransportFailure, ErrorKind.TRANSPORT),
        ],
    )
    def test_kind_discriminant(self, cls: type[InheritageError], kind: ErrorKind) -> None:
        error = cls()
        assert error.kind is kind
        assert isinstance(error, InheritageError)
        assert str(error) == cls.message

    def test_custom_message_and_details(self) -> None:
        error = ValidationError("slug is required", details={"field": "slug"})
        assert error.message == "slug is required"
        assert error.to_dict() == {
            "kind": "validation",
            "message": "slug is required",
            "details": {"field": "slug"},
        }

    def test_decode_error_position(self) -> None:
        error = DecodeError("bad line", line=4, position=2)
        assert error.line == 4
        assert error.position == 2
        assert error.details == {"line": 4, "position": 2}

    def test_api_error_fields(self) -> None:
        rate = RateLimitInfo(limit=10, remaining=0, reset=99)
        error = InheritageApiError(
            status=429,
            code="RATE_LIMITED",
            message="Slow down",
            trace_id="t-1",
            retry_after=12,
            rate_limit=rate,
        )
        assert error.kind is ErrorKind.API
        assert error.rate_limit is rate
        assert str(error) == "Slow down (status=429, code=RATE_LIMITED)"
        assert error.to_dict() == {
            "status": 429,
            "error": {
                "code": "RATE_LIMITED",
                "message": "Slow down",
                "hint": None,
                "doc": None,
                "trace_id": "t-1",
            },
        }

    def test_api_error_without_trace_omits_key(self) -> None:
        error = InheritageApiError(status=500, code=UNKNOWN_ERROR_CODE, message="x")
        assert "trace_id" not in error.to_dict()["error"]


# =========================================================================
# Configuration
# =========================================================================


class TestClientConfig:
    def test_defaults(self) -> None:
        config = ClientConfig()
        assert config.base_url == DEFAULT_BASE_URL
        assert config.timeout_seconds is None
        assert config.follow_redirects is True
        assert config.base_headers() == {"User-Agent": DEFAULT_USER_AGENT}

    def test_api_root_strips_trailing_slash(self) -> None:
        assert ClientConfig(base_url="https://x.test/api/").api_root == "https://x.test/api"

    def test_default_headers_extend_user_agent(self) -> None:
        config = ClientConfig(user_agent="a/1", default_headers={"X-Key": "k"})
        assert config.base_headers() == {"User-Agent": "a/1", "X-Key": "k"}

    def test_rejects_negative_timeout(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            ClientConfig(timeout_seconds=-1.0)

    def test_rejects_wrong_types(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            ClientConfig(follow_redirects="yes")  # type: ignore[arg-type]

    def test_is_frozen(self) -> None:
        config = ClientConfig()
        with pytest.raises(pydantic.ValidationError):
            config.base_url = "https://elsewhere.test"  # type: ignore[misc]


class TestRateLimitInfo:
    def test_rejects_negative_counters(self) -> None:
        with pytest.raises(pydantic.ValidationError):
            RateLimitInfo(limit=-1, remaining=0, reset=0)


# =========================================================================
# Cancellation
# =========================================================================


class TestCancellationToken:
    async def test_cancel_is_idempotent(self) -> None:
        token = CancellationToken()
        assert not token.cancelled
        token.cancel("first")
        token.cancel("second")
        assert token.cancelled
        assert token.reason == "first"
        assert repr(token) == "CancellationToken(cancelled)"

    async def test_wait_returns_once_cancelled(self) -> None:
        token = CancellationToken()
        waiter = asyncio.create_task(token.wait())
        await asyncio.sleep(0)
        assert not waiter.done()
        token.cancel()
        await asyncio.wait_for(waiter, timeout=1)

    async def test_after_cancels_itself(self) -> None:
        token = CancellationToken.after(0.01)
        await asyncio.wait_for(token.wait(), timeout=1)
        assert token.reason == "Timed out after 0.01s"

    async def test_manual_cancel_disarms_timer(self) -> None:
        token = CancellationToken.after(0.01)
        token.cancel("manual")
        await asyncio.sleep(0.05)
        assert token.reason == "manual"


# =========================================================================
# Endpoint registry
# =========================================================================


class TestEndpoints:
    def test_every_endpoint_declares_one_format(self) -> None:
        for endpoint in ENDPOINTS.values():
            assert isinstance(endpoint.response_format, ResponseFormat)

    def test_only_vector_index_streams_ndjson(self) -> None:
        ndjson = [e.name for e in ENDPOINTS.values() if e.response_format is ResponseFormat.NDJSON]
        assert ndjson == [AI_VECTOR_INDEX.name]

    def test_registry_is_read_only(self) -> None:
        with pytest.raises(TypeError):
            ENDPOINTS["extra"] = Endpoint("extra", "GET", "/extra")  # type: ignore[index]

    def test_names_are_unique_keys(self) -> None:
        assert all(name == endpoint.name for name, endpoint in ENDPOINTS.items())
        assert len(ENDPOINTS) == 20

    def test_path_params_and_rendering(self) -> None:
        assert HERITAGE_DETAIL.path_params == ("slug",)
        assert HERITAGE_DETAIL.render_path(slug="taj mahal") == "/heritage/taj%20mahal"
        assert ENDPOINTS["stats"].path_params == ()

    def test_confirmed_paths(self) -> None:
        assert ENDPOINTS["dataset_manifest"].path == "/"
        assert ENDPOINTS["ai_metadata"].path == "/ai/meta/{slug}"
        assert ENDPOINTS["ai_license"].path == "/license/ai"
        assert ENDPOINTS["ai_vision_context"].method == "POST"
