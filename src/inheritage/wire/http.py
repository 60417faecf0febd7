"""HTTP transport -- one request lifecycle per call.

:class:`HTTPTransport` drives a :class:`RequestDescriptor` through the
pipeline::

    Building -> Dispatched -> Classifying -> {Decoding | ErrorHandling} -> Resolved

* **Building** -- the header codec composes headers and query string;
  the body, if any, is serialised to JSON.
* **Dispatched** -- the request is issued.  When the descriptor carries
  a cancellation token, the exchange is raced against it.
* **Classifying** -- ``304`` resolves as *not modified*, ``2xx`` is
  decoded, everything else is normalised into an
  :class:`InheritageApiError`.
* **Resolved** -- trace, rate-limit and caching metadata are attached to
  the :class:`ApiResponse`.

The transport keeps no state between calls: a short-lived
``httpx.AsyncClient`` is opened per request and nothing is retried.
"""
from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

import httpx

from inheritage.core.config import ClientConfig
from inheritage.core.errors import DecodeError, RequestCancelled, TransportFailure
from inheritage.core.types import ApiResponse, RequestDescriptor, ResponseFormat
from inheritage.wire.body import decode_body, serialize_body
from inheritage.wire.headers import build_request_headers, build_url, parse_system_headers
from inheritage.wire.messages import normalize_error
from inheritage.wire.ndjson import NDJSONReader

if TYPE_CHECKING:
    from inheritage.core.cancellation import CancellationToken

logger = logging.getLogger(__name__)

NOT_MODIFIED: int = 304


def _cancelled(signal: CancellationToken) -> RequestCancelled:
    reason = signal.reason or "Request was cancelled"
    return RequestCancelled(reason, details={"reason": signal.reason})


class HTTPTransport:
    """Async HTTP transport for Inheritage API requests.

    Parameters
    ----------
    config:
        Client configuration (base URL, default headers, timeout).
        Defaults to :class:`ClientConfig` with its built-in values.
    transport:
        Optional ``httpx`` transport handed to every short-lived client,
        mainly so tests can substitute ``httpx.MockTransport`` for the
        network.
    """

    def __init__(
        self,
        config: ClientConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config = config or ClientConfig()
        self._transport = transport

    def _build_client(self) -> httpx.AsyncClient:
        kwargs: dict[str, Any] = {
            "timeout": self.config.timeout_seconds,
            "follow_redirects": self.config.follow_redirects,
        }
        if self._transport is not None:
            kwargs["transport"] = self._transport
        return httpx.AsyncClient(**kwargs)

    # -- Building --------------------------------------------------------

    def build_request(
        self,
        descriptor: RequestDescriptor,
        client: httpx.AsyncClient | None = None,
    ) -> httpx.Request:
        """Compose the wire request for *descriptor* without sending it.

        When *client* is given the request picks up its timeout settings.
        """
        method = descriptor.method.upper()
        url = build_url(self.config.api_root, descriptor)
        headers = build_request_headers(
            descriptor,
            default_headers=self.config.base_headers(),
        )
        content = serialize_body(descriptor.body) if descriptor.has_body else None
        if client is None:
            return httpx.Request(method, url, headers=headers, content=content)
        return client.build_request(method, url, headers=headers, content=content)

    # -- Dispatch --------------------------------------------------------

    async def send(self, descriptor: RequestDescriptor) -> ApiResponse[Any]:
        """Perform one request and return its envelope.

        Raises
        ------
        RequestCancelled
            If the descriptor's token fires before the call resolves.
        InheritageApiError
            If the server answers with a non-2xx, non-304 status.
        DecodeError
            If a success response body cannot be decoded, including a
            corrupt ``Content-Encoding``.
        TransportFailure
            If no response could be obtained (network errors, redirect
            loops).
        """
        signal = descriptor.signal
        if signal is not None and signal.cancelled:
            raise _cancelled(signal)

        if signal is None:
            return await self._exchange(descriptor)
        return await self._race(self._exchange(descriptor), signal)

    async def _race(self, exchange_coro: Any, signal: CancellationToken) -> ApiResponse[Any]:
        exchange = asyncio.ensure_future(exchange_coro)
        waiter = asyncio.ensure_future(signal.wait())
        try:
            await asyncio.wait({exchange, waiter}, return_when=asyncio.FIRST_COMPLETED)
        finally:
            waiter.cancel()
            if not exchange.done():
                exchange.cancel()
                # Let the in-flight client close before reporting.
                await asyncio.wait({exchange})

        if exchange.cancelled():
            logger.debug("Request cancelled: %s", signal.reason)
            raise _cancelled(signal)
        return exchange.result()

    async def _exchange(self, descriptor: RequestDescriptor) -> ApiResponse[Any]:
        async with self._build_client() as client:
            request = self.build_request(descriptor, client)
            logger.debug("Dispatching %s %s", request.method, request.url)
            return await self._roundtrip(client, request, descriptor)

    async def _roundtrip(
        self,
        client: httpx.AsyncClient,
        request: httpx.Request,
        descriptor: RequestDescriptor,
    ) -> ApiResponse[Any]:
        try:
            response = await client.send(request, stream=True)
            try:
                return await self._interpret(response, descriptor)
            finally:
                await response.aclose()
        except httpx.DecodingError as exc:
            raise DecodeError(
                f"Response content could not be decoded: {exc}",
                details={"method": request.method, "url": str(request.url)},
            ) from exc
        except httpx.RequestError as exc:
            raise TransportFailure(
                f"HTTP request failed: {exc}",
                details={"method": request.method, "url": str(request.url)},
            ) from exc

    # -- Classifying / Decoding / ErrorHandling --------------------------

    async def _interpret(
        self,
        response: httpx.Response,
        descriptor: RequestDescriptor,
    ) -> ApiResponse[Any]:
        status = response.status_code
        meta = parse_system_headers(response.headers)

        if status == NOT_MODIFIED:
            data = None
        elif 200 <= status < 300:
            data = await self._decode(response, descriptor)
        else:
            try:
                raw = await response.aread()
            except httpx.DecodingError as exc:
                logger.debug("Discarding undecodable error body: %s", exc)
                raw = b""
            error = normalize_error(status, raw, response.headers)
            logger.debug(
                "Request failed: status=%s code=%s trace_id=%s",
                status,
                error.code,
                error.trace_id,
            )
            raise error

        logger.debug("Resolved status=%s trace_id=%s", status, meta.trace_id)
        return ApiResponse(
            status=status,
            data=data,
            headers=response.headers,
            trace_id=meta.trace_id,
            rate_limit=meta.rate_limit,
            not_modified=status == NOT_MODIFIED,
            etag=meta.etag,
            last_modified=meta.last_modified,
        )

    async def _decode(self, response: httpx.Response, descriptor: RequestDescriptor) -> Any:
        if descriptor.response_format is ResponseFormat.NDJSON:
            reader = NDJSONReader(response.aiter_bytes())
            return await reader.read_records(max_records=descriptor.max_records)
        return decode_body(descriptor.response_format, await response.aread())
