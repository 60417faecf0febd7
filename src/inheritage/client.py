"""Inheritage API client -- the typed endpoint surface.

Each public coroutine validates its own required inputs, then hands a
:class:`RequestDescriptor` built from its :class:`Endpoint` declaration
to :class:`~inheritage.wire.http.HTTPTransport`.  No method decodes
anything itself.

Usage
-----
::

    from inheritage import InheritageClient, RequestOptions

    client = InheritageClient()
    response = await client.get_heritage("hampi")
    print(response.data["name"], response.rate_limit)

    # Conditional revalidation
    again = await client.get_heritage(
        "hampi",
        options=RequestOptions(if_none_match=response.etag),
    )
    if again.not_modified:
        ...
"""
from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import TYPE_CHECKING, Any

from inheritage import endpoints as ep
from inheritage.core.config import ClientConfig
from inheritage.core.errors import ValidationError
from inheritage.core.types import (
    ApiResponse,
    JsonValue,
    QueryValue,
    RequestDescriptor,
    RequestOptions,
)
from inheritage.wire.http import HTTPTransport

if TYPE_CHECKING:
    import httpx

    from inheritage.endpoints import Endpoint


def _is_blank(value: object) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _compact(values: Mapping[str, Any]) -> dict[str, Any]:
    """Drop ``None`` entries from a JSON request body."""
    return {key: value for key, value in values.items() if value is not None}


class InheritageClient:
    """Async client for the Inheritage heritage-data API.

    Every method returns an :class:`ApiResponse` whose ``data`` is the
    decoded JSON body, and accepts an optional :class:`RequestOptions`
    for extra query parameters, header overrides, conditional-request
    validators and a cancellation token.

    Parameters
    ----------
    config:
        Client configuration.  Defaults target the public API.
    transport:
        Optional ``httpx`` transport, e.g. ``httpx.MockTransport`` in tests.
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config or ClientConfig()
        self._http = HTTPTransport(self.config, transport=transport)

    # ------------------------------------------------------------------
    # Generic call
    # ------------------------------------------------------------------

    async def request(
        self,
        endpoint: Endpoint,
        *,
        path_params: Mapping[str, str] | None = None,
        query: Mapping[str, QueryValue] | None = None,
        body: JsonValue = None,
        options: RequestOptions | None = None,
        max_records: int | None = None,
    ) -> ApiResponse[Any]:
        """Call *endpoint* and return its envelope.

        ``options.query`` is merged over *query*; keys present in both
        take the value from ``options``.

        Raises
        ------
        ValidationError
            If a path parameter of *endpoint* is missing or blank.
        """
        path_params = dict(path_params or {})
        for name in endpoint.path_params:
            if _is_blank(path_params.get(name)):
                raise ValidationError(
                    f"{name} is required",
                    details={"endpoint": endpoint.name, "field": name},
                )

        options = options or RequestOptions()
        merged_query: dict[str, QueryValue] = dict(query or {})
        merged_query.update(options.query or {})

        descriptor = RequestDescriptor(
            method=endpoint.method,
            path=endpoint.render_path(**path_params),
            response_format=endpoint.response_format,
            query=merged_query,
            body=body,
            headers=options.headers,
            signal=options.signal,
            if_none_match=options.if_none_match,
            if_modified_since=options.if_modified_since,
            max_records=max_records,
        )
        return await self._http.send(descriptor)

    # ------------------------------------------------------------------
    # Dataset
    # ------------------------------------------------------------------

    async def get_dataset_manifest(
        self, *, options: RequestOptions | None = None
    ) -> ApiResponse[Any]:
        """Fetch the dataset manifest served at the API root."""
        return await self.request(ep.DATASET_MANIFEST, options=options)

    async def get_stats(self, *, options: RequestOptions | None = None) -> ApiResponse[Any]:
        return await self.request(ep.STATS, options=options)

    # ------------------------------------------------------------------
    # Heritage sites
    # ------------------------------------------------------------------

    async def list_heritage(
        self,
        *,
        state: str | None = None,
        dynasty: str | None = None,
        style: str | None = None,
        material: str | None = None,
        period: str | None = None,
        country: str | None = None,
        sort: str | None = None,
        limit: int | None = None,
        offset: int | None = None,
        fields: Sequence[str] | None = None,
        options: RequestOptions | None = None,
    ) -> ApiResponse[Any]:
        """List heritage sites, filtered and paginated by the server.

        ``sort`` accepts a field name optionally prefixed with ``-`` for
        descending order; ``fields`` selects a sparse field set.
        """
        query = {
            "state": state,
            "dynasty": dynasty,
            "style": style,
            "material": material,
            "period": period,
            "country": country,
            "sort": sort,
            "limit": limit,
            "offset": offset,
            "fields": fields,
        }
        return await self.request(ep.HERITAGE_LIST, query=query, options=options)

    async def search_heritage(
        self,
        q: str,
        *,
        state: str | None = None,
        style: str | None = None,
        country: str | None = None,
        limit: int | None = None,
        fields: Sequence[str] | None = None,
        options: RequestOptions | None = None,
    ) -> ApiResponse[Any]:
        """Full-text search across heritage sites.

        Raises
        ------
        ValidationError
            If *q* is empty.
        """
        if _is_blank(q):
            raise ValidationError("q is required", details={"field": "q"})
        query = {
            "q": q,
            "state": state,
            "style": style,
            "country": country,
            "limit": limit,
            "fields": fields,
        }
        return await self.request(ep.HERITAGE_SEARCH, query=query, options=options)

    async def get_heritage(
        self,
        slug: str,
        *,
        fields: Sequence[str] | None = None,
        options: RequestOptions | None = None,
    ) -> ApiResponse[Any]:
        """Fetch one heritage site by slug."""
        return await self.request(
            ep.HERITAGE_DETAIL,
            path_params={"slug": slug},
            query={"fields": fields},
            options=options,
        )

    async def get_random_heritage(
        self, *, options: RequestOptions | None = None
    ) -> ApiResponse[Any]:
        return await self.request(ep.HERITAGE_RANDOM, options=options)

    async def get_featured_heritage(
        self,
        *,
        limit: int | None = None,
        options: RequestOptions | None = None,
    ) -> ApiResponse[Any]:
        return await self.request(
            ep.HERITAGE_FEATURED, query={"limit": limit}, options=options
        )

    # ------------------------------------------------------------------
    # Geo
    # ------------------------------------------------------------------

    async def get_geo_heritage(
        self,
        *,
        state: str | None = None,
        country: str | None = None,
        category: str | None = None,
        featured: bool | None = None,
        limit: int | None = None,
        bbox: str | Sequence[float] | None = None,
        options: RequestOptions | None = None,
    ) -> ApiResponse[Any]:
        """Return heritage sites as a GeoJSON ``FeatureCollection``.

        ``bbox`` is ``minLon,minLat,maxLon,maxLat``, as a string or a
        sequence of four numbers.
        """
        query = {
            "state": state,
            "country": country,
            "category": category,
            "featured": featured,
            "limit": limit,
            "bbox": bbox,
        }
        return await self.request(ep.GEO_HERITAGE, query=query, options=options)

    async def get_geo_nearby(
        self,
        *,
        lat: float,
        lon: float,
        radius_km: float | None = None,
        options: RequestOptions | None = None,
    ) -> ApiResponse[Any]:
        """Return heritage sites around a coordinate as GeoJSON.

        Raises
        ------
        ValidationError
            If *lat* or *lon* is missing.
        """
        if lat is None or lon is None:
            raise ValidationError(
                "lat and lon are required",
                details={"lat": lat, "lon": lon},
            )
        query = {"lat": lat, "lon": lon, "radius_km": radius_km}
        return await self.request(ep.GEO_NEARBY, query=query, options=options)

    # ------------------------------------------------------------------
    # Media
    # ------------------------------------------------------------------

    async def get_media(
        self, slug: str, *, options: RequestOptions | None = None
    ) -> ApiResponse[Any]:
        """Return the media bundle (images, models, tours) of a site."""
        return await self.request(ep.MEDIA, path_params={"slug": slug}, options=options)

    async def search_media(
        self,
        *,
        type: str | None = None,
        state: str | None = None,
        style: str | None = None,
        country: str | None = None,
        limit: int | None = None,
        offset: int | None = None,
        options: RequestOptions | None = None,
    ) -> ApiResponse[Any]:
        query = {
            "type": type,
            "state": state,
            "style": style,
            "country": country,
            "limit": limit,
            "offset": offset,
        }
        return await self.request(ep.MEDIA_SEARCH, query=query, options=options)

    # ------------------------------------------------------------------
    # Citations
    # ------------------------------------------------------------------

    async def get_citation(
        self, entity: str, *, options: RequestOptions | None = None
    ) -> ApiResponse[Any]:
        """Return ready-to-render attribution for *entity*."""
        return await self.request(
            ep.CITATION, path_params={"entity": entity}, options=options
        )

    async def report_citation(
        self,
        *,
        entity: str,
        app_name: str,
        domain: str,
        api_key: str | None = None,
        display_count: int | None = None,
        options: RequestOptions | None = None,
    ) -> ApiResponse[Any]:
        """Report where and how often an attribution was displayed.

        Raises
        ------
        ValidationError
            If *entity*, *app_name* or *domain* is empty.
        """
        for name, value in (("entity", entity), ("app_name", app_name), ("domain", domain)):
            if _is_blank(value):
                raise ValidationError(f"{name} is required", details={"field": name})
        body = _compact(
            {
                "entity": entity,
                "app_name": app_name,
                "domain": domain,
                "api_key": api_key,
                "display_count": display_count,
            }
        )
        return await self.request(ep.CITATION_REPORT, body=body, options=options)

    # ------------------------------------------------------------------
    # AI
    # ------------------------------------------------------------------

    async def get_ai_context(
        self, slug: str, *, options: RequestOptions | None = None
    ) -> ApiResponse[Any]:
        """Fetch deterministic context text, embedding and citation for a site."""
        return await self.request(ep.AI_CONTEXT, path_params={"slug": slug}, options=options)

    async def get_ai_embedding(
        self, slug: str, *, options: RequestOptions | None = None
    ) -> ApiResponse[Any]:
        return await self.request(
            ep.AI_EMBEDDING, path_params={"slug": slug}, options=options
        )

    async def find_similar(
        self,
        *,
        slug: str | None = None,
        embedding: Sequence[float] | None = None,
        limit: int | None = None,
        options: RequestOptions | None = None,
    ) -> ApiResponse[Any]:
        """Similarity search by reference slug or by an explicit vector.

        Raises
        ------
        ValidationError
            If neither *slug* nor *embedding* is given.
        """
        if _is_blank(slug) and not embedding:
            raise ValidationError(
                "Provide either a slug or an embedding array",
                details={"fields": ["slug", "embedding"]},
            )
        body = _compact(
            {
                "slug": slug or None,
                "embedding": list(embedding) if embedding else None,
                "limit": limit,
            }
        )
        return await self.request(ep.AI_SIMILAR, body=body, options=options)

    async def get_ai_metadata(
        self, slug: str, *, options: RequestOptions | None = None
    ) -> ApiResponse[Any]:
        """Fetch the machine-readable AI metadata bundle (model, checksum, license)."""
        return await self.request(
            ep.AI_METADATA, path_params={"slug": slug}, options=options
        )

    async def get_ai_vector_index(
        self,
        *,
        limit: int | None = None,
        offset: int | None = None,
        options: RequestOptions | None = None,
    ) -> ApiResponse[list[Any]]:
        """Read the NDJSON vector feed.

        *limit* is sent to the server and also caps how many records are
        decoded locally; any further lines are left unread.
        """
        return await self.request(
            ep.AI_VECTOR_INDEX,
            query={"limit": limit, "offset": offset},
            options=options,
            max_records=limit,
        )

    async def get_ai_vision_context(
        self,
        *,
        image_url: str | None = None,
        image_base64: str | None = None,
        options: RequestOptions | None = None,
    ) -> ApiResponse[Any]:
        """Match an image against heritage sites.

        Raises
        ------
        ValidationError
            If neither *image_url* nor *image_base64* is given; no request
            is sent in that case.
        """
        if _is_blank(image_url) and _is_blank(image_base64):
            raise ValidationError(
                "Provide either image_url or image_base64",
                details={"fields": ["image_url", "image_base64"]},
            )
        body = _compact({"image_url": image_url or None, "image_base64": image_base64 or None})
        return await self.request(ep.AI_VISION_CONTEXT, body=body, options=options)

    async def get_ai_license(
        self, *, options: RequestOptions | None = None
    ) -> ApiResponse[Any]:
        """Return the AI license addendum (obligations, allowances, reporting)."""
        return await self.request(ep.AI_LICENSE, options=options)
