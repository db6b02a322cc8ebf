"""
app/relay/base.py

Abstract interface for talking to the downstream workflow webhook.

Design goals:
  - RelayService depends only on this interface, never on httpx.
  - Both calls return the downstream body as text; every failure mode is a
    typed exception so the service can decide what the caller sees.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class WebhookClient(ABC):
    """
    Contract every downstream transport must fulfil.

    Concrete implementations (e.g. HttpxWebhookClient) wrap a specific HTTP
    library and translate its errors to the app exception hierarchy.
    """

    @abstractmethod
    async def probe(self, url: str) -> str:
        """
        GET ``url`` with no body.

        Returns:
            The response body as text (2xx only).

        Raises:
            DownstreamError:            Non-2xx status.
            DownstreamTimeoutError:     The HTTP client timed out.
            DownstreamUnavailableError: Connection or protocol failure.
        """

    @abstractmethod
    async def post_json(self, url: str, payload: dict) -> str:
        """
        POST ``payload`` as JSON to ``url``.

        Returns:
            The response body as text (2xx only).

        Raises:
            DownstreamError:            Non-2xx status, 504 included.
            DownstreamTimeoutError:     The HTTP client timed out.
            DownstreamUnavailableError: Connection or protocol failure.
        """
