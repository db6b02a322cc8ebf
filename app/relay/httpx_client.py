"""
app/relay/httpx_client.py

httpx implementation of the WebhookClient interface.

A fresh AsyncClient is opened per call so a forward that outlives the
request which started it still owns (and eventually closes) its connection.
"""

from __future__ import annotations

from typing import Optional

import httpx

from app.core.config import settings
from app.core.exceptions import (
    DownstreamError,
    DownstreamTimeoutError,
    DownstreamUnavailableError,
)
from app.core.logger import get_logger
from app.relay.base import WebhookClient

logger = get_logger(__name__)


class HttpxWebhookClient(WebhookClient):
    """WebhookClient backed by ``httpx.AsyncClient``."""

    def __init__(
        self,
        timeout: float | None = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Args:
            timeout   : Transport-level timeout in seconds.
                        Defaults to ``settings.downstream_http_timeout_seconds``.
            transport : Optional httpx transport; tests pass ``httpx.MockTransport``.
        """
        self._timeout = timeout or settings.downstream_http_timeout_seconds
        self._transport = transport

    # ── WebhookClient interface ────────────────────────────────────────────────

    async def probe(self, url: str) -> str:
        return await self._send("GET", url)

    async def post_json(self, url: str, payload: dict) -> str:
        return await self._send("POST", url, json=payload)

    # ── Internals ──────────────────────────────────────────────────────────────

    async def _send(self, method: str, url: str, **kwargs) -> str:
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.request(method, url, **kwargs)
        except httpx.TimeoutException as exc:
            raise DownstreamTimeoutError(f"{method} {url} timed out: {exc}") from exc
        except httpx.HTTPError as exc:
            raise DownstreamUnavailableError(f"{method} {url} failed: {exc}") from exc

        if not response.is_success:
            logger.warning(
                "Downstream %s %s answered %d.", method, url, response.status_code
            )
            raise DownstreamError(response.status_code, response.text)

        logger.debug("Downstream %s %s answered %d.", method, url, response.status_code)
        return response.text
