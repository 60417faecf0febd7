"""Endpoint declarations for the Inheritage API.

Each :class:`Endpoint` statically fixes the HTTP method, the path
template and the declared :class:`ResponseFormat` of one call site.
:data:`ENDPOINTS` is the closed registry of every declaration.
"""
from __future__ import annotations

import string
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType
from urllib.parse import quote

from inheritage.core.types import ResponseFormat

# ---------------------------------------------------------------------------
# Data structures
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Endpoint:
    """Static description of one API call site.

    Attributes
    ----------
    name:
        Registry key, e.g. ``"ai_metadata"``.
    method:
        HTTP method.
    path:
        Path template relative to the API root, with ``{placeholders}``.
    response_format:
        Declared body shape; also selects the ``Accept`` header.
    """

    name: str
    method: str
    path: str
    response_format: ResponseFormat = ResponseFormat.JSON

    @property
    def path_params(self) -> tuple[str, ...]:
        return tuple(
            field
            for _, field, _, _ in string.Formatter().parse(self.path)
            if field
        )

    def render_path(self, **params: str) -> str:
        """Fill the path template, percent-encoding each value.

        Raises
        ------
        KeyError
            If a placeholder has no value.
        """
        encoded = {key: quote(str(value), safe="") for key, value in params.items()}
        return self.path.format_map(encoded)


# ---------------------------------------------------------------------------
# Declarations
# ---------------------------------------------------------------------------

DATASET_MANIFEST = Endpoint("dataset_manifest", "GET", "/")
STATS = Endpoint("stats", "GET", "/stats")

HERITAGE_LIST = Endpoint("heritage_list", "GET", "/heritage")
HERITAGE_SEARCH = Endpoint("heritage_search", "GET", "/heritage/search")
HERITAGE_RANDOM = Endpoint("heritage_random", "GET", "/heritage/random")
HERITAGE_FEATURED = Endpoint("heritage_featured", "GET", "/heritage/featured")
HERITAGE_DETAIL = Endpoint("heritage_detail", "GET", "/heritage/{slug}")

GEO_HERITAGE = Endpoint("geo_heritage", "GET", "/geo/heritage")
GEO_NEARBY = Endpoint("geo_nearby", "GET", "/geo/nearby")

MEDIA = Endpoint("media", "GET", "/media/{slug}")
MEDIA_SEARCH = Endpoint("media_search", "GET", "/media/search")

CITATION = Endpoint("citation", "GET", "/citation/{entity}")
CITATION_REPORT = Endpoint("citation_report", "POST", "/citation/report")

AI_CONTEXT = Endpoint("ai_context", "GET", "/ai/context/{slug}")
AI_EMBEDDING = Endpoint("ai_embedding", "GET", "/ai/embedding/{slug}")
AI_SIMILAR = Endpoint("ai_similar", "POST", "/ai/similar")
AI_METADATA = Endpoint("ai_metadata", "GET", "/ai/meta/{slug}")
AI_VECTOR_INDEX = Endpoint(
    "ai_vector_index",
    "GET",
    "/ai/vector-index",
    ResponseFormat.NDJSON,
)
AI_VISION_CONTEXT = Endpoint("ai_vision_context", "POST", "/ai/vision/context")
AI_LICENSE = Endpoint("ai_license", "GET", "/license/ai")


ENDPOINTS: Mapping[str, Endpoint] = MappingProxyType(
    {
        endpoint.name: endpoint
        for endpoint in (
            DATASET_MANIFEST,
            STATS,
            HERITAGE_LIST,
            HERITAGE_SEARCH,
            HERITAGE_RANDOM,
            HERITAGE_FEATURED,
            HERITAGE_DETAIL,
            GEO_HERITAGE,
            GEO_NEARBY,
            MEDIA,
            MEDIA_SEARCH,
            CITATION,
            CITATION_REPORT,
            AI_CONTEXT,
            AI_EMBEDDING,
            AI_SIMILAR,
            AI_METADATA,
            AI_VECTOR_INDEX,
            AI_VISION_CONTEXT,
            AI_LICENSE,
        )
    }
)
