"""
tests/relay/test_httpx_client.py

Tests for HttpxWebhookClient against an ``httpx.MockTransport``.
"""

import json

import httpx
import pytest

from app.core.exceptions import (
    DownstreamError,
    DownstreamTimeoutError,
    DownstreamUnavailableError,
)
from app.relay.httpx_client import HttpxWebhookClient

URL = "https://downstream.example/hook"


def _client(handler) -> HttpxWebhookClient:
    return HttpxWebhookClient(timeout=1.0, transport=httpx.MockTransport(handler))


class TestHttpxWebhookClient:

    @pytest.mark.asyncio
    async def test_post_json_sends_json_and_returns_text(self) -> None:
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, text="accepted")

        body = await _client(handler).post_json(URL, {"fileName": "a.pdf"})

        assert body == "accepted"
        assert seen[0].method == "POST"
        assert json.loads(seen[0].content) == {"fileName": "a.pdf"}

    @pytest.mark.asyncio
    async def test_probe_issues_get(self) -> None:
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.method)
            return httpx.Response(200, text="")

        assert await _client(handler).probe(URL) == ""
        assert seen == ["GET"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", [400, 404, 500, 504])
    async def test_non_2xx_raises_downstream_error(self, status: int) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(status, text="nope")

        with pytest.raises(DownstreamError) as info:
            await _client(handler).post_json(URL, {})

        assert info.value.status_code == status
        assert info.value.body == "nope"

    @pytest.mark.asyncio
    async def test_transport_timeout_raises_timeout_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("too slow", request=request)

        with pytest.raises(DownstreamTimeoutError):
            await _client(handler).post_json(URL, {})

    @pytest.mark.asyncio
    async def test_connection_failure_raises_unavailable(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(DownstreamUnavailableError):
            await _client(handler).probe(URL)
