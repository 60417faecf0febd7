"""Tests for InheritageClient endpoint methods.

Each test routes the client through an ``httpx.MockTransport`` that
records outgoing requests, then asserts on the wire shape: method, path,
query string, headers and JSON body.  Validation failures must not
reach the transport at all.
"""
from __future__ import annotations

import json
from typing import Any

import httpx
import pytest

from inheritage import (
    ClientConfig,
    ErrorKind,
    InheritageClient,
    RequestOptions,
    ValidationError,
)

API_ROOT = "https://inheritage.foundation/api/v1"


class _Recorder:
    """Mock handler returning a fixed response and remembering requests."""

    def __init__(self, response: httpx.Response | None = None) -> None:
        self.requests: list[httpx.Request] = []
        self._response = response

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self._response is not None:
            return self._response
        return httpx.Response(200, json={"ok": True})

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]


def _make_client(
    response: httpx.Response | None = None,
    config: ClientConfig | None = None,
) -> tuple[InheritageClient, _Recorder]:
    recorder = _Recorder(response)
    return InheritageClient(config, transport=httpx.MockTransport(recorder)), recorder


def _body(request: httpx.Request) -> Any:
    return json.loads(request.content)


# =========================================================================
# Dataset / heritage
# =========================================================================


class TestDatasetAndHeritage:
    async def test_dataset_manifest_hits_api_root(self) -> None:
        client, recorder = _make_client()
        response = await client.get_dataset_manifest()
        assert str(recorder.last.url) == f"{API_ROOT}/"
        assert recorder.last.method == "GET"
        assert response.data == {"ok": True}

    async def test_stats(self) -> None:
        client, recorder = _make_client()
        await client.get_stats()
        assert recorder.last.url.path == "/api/v1/stats"

    async def test_list_heritage_omits_unset_filters(self) -> None:
        client, recorder = _make_client()
        await client.list_heritage(
            state="Karnataka",
            limit=20,
            fields=["slug", "name"],
            sort="-year",
        )
        assert recorder.last.url.path == "/api/v1/heritage"
        params = recorder.last.url.params
        assert params["state"] == "Karnataka"
        assert params["limit"] == "20"
        assert params["fields"] == "slug,name"
        assert params["sort"] == "-year"
        assert "dynasty" not in params
        assert "offset" not in params
        assert "null" not in str(recorder.last.url)

    async def test_search_heritage_requires_query(self) -> None:
        client, recorder = _make_client()
        with pytest.raises(ValidationError, match="q is required"):
            await client.search_heritage("   ")
        assert recorder.requests == []

    async def test_search_heritage(self) -> None:
        client, recorder = _make_client()
        await client.search_heritage("stepwell", state="Gujarat")
        assert recorder.last.url.path == "/api/v1/heritage/search"
        assert recorder.last.url.params["q"] == "stepwell"

    async def test_heritage_detail_encodes_slug(self) -> None:
        client, recorder = _make_client()
        await client.get_heritage("a/b c")
        assert recorder.last.url.raw_path == b"/api/v1/heritage/a%2Fb%20c"

    async def test_heritage_detail_rejects_blank_slug(self) -> None:
        client, recorder = _make_client()
        with pytest.raises(ValidationError) as excinfo:
            await client.get_heritage("")
        assert excinfo.value.kind is ErrorKind.VALIDATION
        assert excinfo.value.message == "slug is required"
        assert recorder.requests == []

    async def test_random_and_featured(self) -> None:
        client, recorder = _make_client()
        await client.get_random_heritage()
        assert recorder.last.url.path == "/api/v1/heritage/random"
        await client.get_featured_heritage(limit=3)
        assert recorder.last.url.path == "/api/v1/heritage/featured"
        assert recorder.last.url.params["limit"] == "3"


# =========================================================================
# Geo / media / citations
# =========================================================================


class TestGeoMediaCitations:
    async def test_geo_heritage_bbox_and_boolean(self) -> None:
        client, recorder = _make_client()
        await client.get_geo_heritage(featured=True, bbox=[68.1, 6.5, 97.4, 35.5])
        params = recorder.last.url.params
        assert params["featured"] == "true"
        assert params["bbox"] == "68.1,6.5,97.4,35.5"

    async def test_geo_nearby_requires_coordinates(self) -> None:
        client, recorder = _make_client()
        with pytest.raises(ValidationError, match="lat and lon are required"):
            await client.get_geo_nearby(lat=15.3, lon=None)  # type: ignore[arg-type]
        assert recorder.requests == []

    async def test_geo_nearby_accepts_zero(self) -> None:
        client, recorder = _make_client()
        await client.get_geo_nearby(lat=0.0, lon=0.0, radius_km=5)
        assert recorder.last.url.params["lat"] == "0.0"
        assert recorder.last.url.params["radius_km"] == "5"

    async def test_media_and_media_search(self) -> None:
        client, recorder = _make_client()
        await client.get_media("hampi")
        assert recorder.last.url.path == "/api/v1/media/hampi"
        await client.search_media(type="panorama", limit=2)
        assert recorder.last.url.path == "/api/v1/media/search"
        assert recorder.last.url.params["type"] == "panorama"

    async def test_citation(self) -> None:
        client, recorder = _make_client()
        await client.get_citation("hampi")
        assert recorder.last.url.path == "/api/v1/citation/hampi"

    async def test_report_citation_validates_required_fields(self) -> None:
        client, recorder = _make_client()
        with pytest.raises(ValidationError, match="domain is required"):
            await client.report_citation(entity="hampi", app_name="Atlas", domain="")
        assert recorder.requests == []

    async def test_report_citation_posts_compact_body(self) -> None:
        client, recorder = _make_client()
        await client.report_citation(entity="hampi", app_name="Atlas", domain="atlas.example")
        assert recorder.last.method == "POST"
        assert recorder.last.url.path == "/api/v1/citation/report"
        assert _body(recorder.last) == {
            "entity": "hampi",
            "app_name": "Atlas",
            "domain": "atlas.example",
        }


# =========================================================================
# AI endpoints
# =========================================================================


class TestAI:
    async def test_ai_context_and_embedding(self) -> None:
        client, recorder = _make_client()
        await client.get_ai_context("hampi")
        assert recorder.last.url.path == "/api/v1/ai/context/hampi"
        await client.get_ai_embedding("hampi")
        assert recorder.last.url.path == "/api/v1/ai/embedding/hampi"

    async def test_ai_metadata_path(self) -> None:
        client, recorder = _make_client()
        await client.get_ai_metadata("hampi")
        assert str(recorder.last.url) == f"{API_ROOT}/ai/meta/hampi"
        assert recorder.last.headers["Accept"] == "application/json"

    async def test_ai_license_path(self) -> None:
        client, recorder = _make_client()
        await client.get_ai_license()
        assert str(recorder.last.url) == f"{API_ROOT}/license/ai"

    async def test_find_similar_requires_slug_or_embedding(self) -> None:
        client, recorder = _make_client()
        with pytest.raises(ValidationError, match="Provide either a slug or an embedding array"):
            await client.find_similar()
        with pytest.raises(ValidationError):
            await client.find_similar(slug="", embedding=[])
        assert recorder.requests == []

    async def test_find_similar_by_embedding(self) -> None:
        client, recorder = _make_client()
        await client.find_similar(embedding=(0.1, 0.2), limit=5)
        assert recorder.last.method == "POST"
        assert recorder.last.url.path == "/api/v1/ai/similar"
        assert _body(recorder.last) == {"embedding": [0.1, 0.2], "limit": 5}

    async def test_vector_index_is_ndjson_and_capped(self) -> None:
        lines = "\n".join(json.dumps({"slug": f"s{i}", "vector": [i]}) for i in range(4))
        client, recorder = _make_client(httpx.Response(200, content=lines.encode()))

        response = await client.get_ai_vector_index(limit=2)

        assert recorder.last.headers["Accept"] == "application/x-ndjson"
        assert recorder.last.url.params["limit"] == "2"
        assert response.data == [{"slug": "s0", "vector": [0]}, {"slug": "s1", "vector": [1]}]

    async def test_vector_index_without_limit_reads_everything(self) -> None:
        lines = '{"a":1}\n\n{"a":2}\n'
        client, _ = _make_client(httpx.Response(200, content=lines.encode()))
        response = await client.get_ai_vector_index()
        assert response.data == [{"a": 1}, {"a": 2}]

    async def test_vision_context_requires_an_image(self) -> None:
        client, recorder = _make_client()
        with pytest.raises(ValidationError, match="Provide either image_url or image_base64"):
            await client.get_ai_vision_context()
        assert recorder.requests == []

    async def test_vision_context_posts_image_url(self) -> None:
        client, recorder = _make_client()
        await client.get_ai_vision_context(image_url="https://example.org/gopuram.jpg")
        assert recorder.last.method == "POST"
        assert str(recorder.last.url) == f"{API_ROOT}/ai/vision/context"
        assert recorder.last.headers["Content-Type"] == "application/json"
        assert _body(recorder.last) == {"image_url": "https://example.org/gopuram.jpg"}


# =========================================================================
# Request options
# =========================================================================


class TestRequestOptions:
    async def test_options_query_overrides_method_query(self) -> None:
        client, recorder = _make_client()
        await client.list_heritage(
            limit=10,
            options=RequestOptions(query={"limit": 50, "lang": "hi", "drop": None}),
        )
        params = recorder.last.url.params
        assert params["limit"] == "50"
        assert params["lang"] == "hi"
        assert "drop" not in params

    async def test_header_overrides_and_defaults(self) -> None:
        client, recorder = _make_client(
            config=ClientConfig(default_headers={"X-Client": "atlas"}),
        )
        await client.get_stats(options=RequestOptions(headers={"accept": "text/csv"}))
        headers = recorder.last.headers
        assert headers.get_list("Accept") == ["text/csv"]
        assert headers["X-Client"] == "atlas"
        assert headers["User-Agent"].startswith("inheritage-sdk-python/")

    async def test_conditional_revalidation(self) -> None:
        client, recorder = _make_client(httpx.Response(304, headers={"ETag": '"v7"'}))
        response = await client.get_heritage(
            "hampi",
            options=RequestOptions(if_none_match='"v7"'),
        )
        assert recorder.last.headers["If-None-Match"] == '"v7"'
        assert response.not_modified is True
        assert response.data is None
        assert response.etag == '"v7"'
