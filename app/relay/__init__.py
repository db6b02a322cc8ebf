"""app/relay/__init__.py — public API of the relay package."""

from app.relay.base import WebhookClient
from app.relay.httpx_client import HttpxWebhookClient

__all__ = [
    "WebhookClient",
    "HttpxWebhookClient",
]
