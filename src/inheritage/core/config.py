"""Inheritage client configuration.

Defines the validated configuration model consumed by
:class:`~inheritage.client.InheritageClient` and
:class:`~inheritage.wire.http.HTTPTransport`.  A default instance targets
the public API and is sufficient for most callers.
"""
from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_BASE_URL: str = "https://inheritage.foundation/api/v1"
DEFAULT_USER_AGENT: str = "inheritage-sdk-python/0.1.0"


class ClientConfig(BaseModel):
    """Configuration for an Inheritage API client.

    The pipeline itself imposes no timeout: ``timeout_seconds`` is
    ``None`` by default, and callers wanting a deadline should prefer a
    time-bounded :class:`~inheritage.core.cancellation.CancellationToken`.
    """

    model_config = ConfigDict(strict=True, frozen=True)

    base_url: str = Field(
        default=DEFAULT_BASE_URL,
        min_length=1,
        description="API root; endpoint paths are appended to it.",
    )
    user_agent: str = Field(
        default=DEFAULT_USER_AGENT,
        description="Value of the User-Agent header sent with every request.",
    )
    default_headers: dict[str, str] = Field(
        default_factory=dict,
        description=(
            "Headers sent with every request.  Per-call overrides in "
            "RequestOptions.headers take precedence."
        ),
    )
    timeout_seconds: float | None = Field(
        default=None,
        ge=0,
        description="Transport-level timeout.  None disables it.",
    )
    follow_redirects: bool = Field(
        default=True,
        description="Whether the HTTP client follows 3xx redirects.",
    )

    @property
    def api_root(self) -> str:
        """``base_url`` without a trailing slash."""
        return self.base_url.rstrip("/")

    def base_headers(self) -> dict[str, str]:
        """Headers applied to every request before per-call overrides."""
        headers = {"User-Agent": self.user_agent}
        headers.update(self.default_headers)
        return headers
