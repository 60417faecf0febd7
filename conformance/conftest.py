"""Shared fixtures for Inheritage pipeline conformance tests.

Provides a scriptable in-process server built on ``httpx.MockTransport``
and a client wired to it, so every property can be checked end-to-end
without touching the network.
"""
from __future__ import annotations

from collections.abc import Callable

import httpx
import pytest

from inheritage import InheritageClient


class FakeServer:
    """Answers every request through a replaceable responder and records it."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.responder: Callable[[httpx.Request], httpx.Response] = (
            lambda request: httpx.Response(200, json={})
        )

    def reply(self, response: httpx.Response) -> None:
        self.responder = lambda request: response

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        return self.responder(request)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def server() -> FakeServer:
    return FakeServer()


@pytest.fixture()
def client(server: FakeServer) -> InheritageClient:
    return InheritageClient(transport=httpx.MockTransport(server))
