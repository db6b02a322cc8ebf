"""
app/services/relay_service.py

Relays an uploaded document to the downstream workflow webhook:

    UploadFile + documentType + environment?
      └─ resolve downstream URL        environment table / default URL
           └─ build RelayPayload       bytes → base64, UTC timestamp
                └─ WebhookClient.post_json()   raced against forward_timeout
                     └─ Map → RelayResponse     (timeout / 504 → soft success)

and answers the connectivity probe with a plain GET to the mapped URL.

The endpoint table, default URL, client and timeout are constructor-injected
so tests can point the service at stubs; the module-level singleton wires in
the values from settings.
"""

from __future__ import annotations

import asyncio
import base64
from typing import Dict, FrozenSet, Mapping, Optional, Set

from fastapi import UploadFile

from app.core.config import settings
from app.core.constants import (
    MSG_PROBE_OK,
    MSG_TIMEOUT_ACCEPTED,
    WARNING_TIMEOUT_BUT_PROCESSING,
)
from app.core.exceptions import (
    DownstreamError,
    DownstreamTimeoutError,
    InvalidEnvironmentError,
    MissingFileError,
)
from app.core.logger import get_logger
from app.models.upload_models import DocumentCategory, RelayPayload, RelayResponse
from app.relay.base import WebhookClient
from app.relay.httpx_client import HttpxWebhookClient

logger = get_logger(__name__)

GATEWAY_TIMEOUT = 504


class RelayService:
    """
    Stateless HTTP-to-HTTP relay with response normalisation.

    Design choices:
    - **Soft timeout**: the forward runs as its own task and the service
      waits on it for at most ``forward_timeout`` seconds. On expiry the
      task is left running (never cancelled) and the caller gets a 200 with
      ``warning="timeout_but_processing"``. A downstream 504 is treated the
      same way.
    - **No retries**: every failure is reported once.
    """

    def __init__(
        self,
        endpoints: Mapping[str, str] | None = None,
        default_url: str | None = None,
        client: WebhookClient | None = None,
        forward_timeout: float | None = None,
    ) -> None:
        self._endpoints: Dict[str, str] = dict(
            endpoints if endpoints is not None else settings.webhook_endpoints()
        )
        self._default_url: str = default_url or settings.webhook_url
        self._client: WebhookClient = client or HttpxWebhookClient()
        self._forward_timeout: float = (
            forward_timeout if forward_timeout is not None else settings.forward_timeout_seconds
        )
        # Forwards whose wait was abandoned; held so they are not collected.
        self._abandoned: Set[asyncio.Task] = set()

    @property
    def abandoned_forwards(self) -> FrozenSet[asyncio.Task]:
        return frozenset(self._abandoned)

    # ── Public API ─────────────────────────────────────────────────────────────

    def resolve_url(self, environment: Optional[str], required: bool = True) -> str:
        """
        Map an environment name to its downstream URL.

        Args:
            environment : Name from the request, or None when absent.
            required    : When False an absent environment resolves to the
                          default webhook URL instead of failing.

        Raises:
            InvalidEnvironmentError: Absent (and required) or not in the table.
        """
        if environment is None and not required:
            return self._default_url
        if not environment or environment not in self._endpoints:
            raise InvalidEnvironmentError(f"Unknown environment: {environment!r}")
        return self._endpoints[environment]

    async def probe(self, environment: Optional[str]) -> RelayResponse:
        """
        GET the downstream URL for ``environment`` and wrap its body.

        Raises:
            InvalidEnvironmentError    : Environment absent or unknown.
            DownstreamError            : Downstream answered non-2xx.
            DownstreamTimeoutError     : The HTTP client timed out.
            DownstreamUnavailableError : Downstream could not be reached.
        """
        url = self.resolve_url(environment)
        logger.info("Probing '%s' downstream at %s", environment, url)
        body = await self._client.probe(url)
        return RelayResponse(data=body, message=MSG_PROBE_OK)

    async def relay(
        self,
        upload: Optional[UploadFile],
        document_type: Optional[str] = None,
        environment: Optional[str] = None,
    ) -> RelayResponse:
        """
        Forward one uploaded file downstream as a base64 JSON payload.

        Args:
            upload        : File part from the multipart form, None if missing.
            document_type : Category string sent by the widget. When absent
                            the extension-derived category is used.
            environment   : Optional environment name; None selects the
                            default webhook URL.

        Returns:
            RelayResponse with the downstream body, or the soft-success
            warning when the forward timed out or got a 504.

        Raises:
            InvalidEnvironmentError    : Environment given but unknown.
            MissingFileError           : No file part.
            DownstreamError            : Downstream answered non-2xx, non-504.
            DownstreamUnavailableError : Downstream could not be reached.
        """
        url = self.resolve_url(environment, required=False)

        if upload is None:
            raise MissingFileError("Relay request carried no file part.")

        content = await upload.read()
        payload = self.build_payload(
            content=content,
            filename=upload.filename or "",
            content_type=upload.content_type or "",
            document_type=document_type,
        )

        logger.info(
            "Forwarding '%s' (%d bytes, %s) to %s",
            payload.file_name,
            payload.file_size,
            payload.document_type,
            url,
        )
        return await self._forward(url, payload)

    @staticmethod
    def build_payload(
        content: bytes,
        filename: str,
        content_type: str = "",
        document_type: Optional[str] = None,
    ) -> RelayPayload:
        """Build the downstream JSON body for one file."""
        if not document_type:
            category = DocumentCategory.from_filename(filename)
            document_type = category.value if category else None

        return RelayPayload(
            file_name=filename,
            file_type=content_type,
            file_size=len(content),
            document_type=document_type,
            file_data=base64.b64encode(content).decode("ascii"),
        )

    # ── Internals ──────────────────────────────────────────────────────────────

    async def _forward(self, url: str, payload: RelayPayload) -> RelayResponse:
        """
        Race the downstream POST against ``forward_timeout``.

        ``asyncio.wait`` drops its timer as soon as either side finishes; the
        POST itself is never cancelled.
        """
        task = asyncio.create_task(self._client.post_json(url, payload.to_wire()))
        done, _ = await asyncio.wait({task}, timeout=self._forward_timeout)

        if task not in done:
            self._abandoned.add(task)
            task.add_done_callback(self._on_abandoned_forward_done)
            logger.warning(
                "'%s' — no downstream answer after %.1fs; reporting accepted.",
                payload.file_name,
                self._forward_timeout,
            )
            return self._accepted_while_processing()

        try:
            body = task.result()
        except DownstreamTimeoutError as exc:
            logger.warning("'%s' — downstream client timed out: %s", payload.file_name, exc)
            return self._accepted_while_processing()
        except DownstreamError as exc:
            if exc.status_code == GATEWAY_TIMEOUT:
                logger.warning("'%s' — downstream reported 504.", payload.file_name)
                return self._accepted_while_processing()
            raise

        logger.info("'%s' — forwarded.", payload.file_name)
        return RelayResponse(data=body)

    def _on_abandoned_forward_done(self, task: asyncio.Task) -> None:
        self._abandoned.discard(task)
        if task.cancelled():
            logger.warning("Abandoned forward was cancelled before completing.")
            return
        exc = task.exception()
        if exc is not None:
            logger.warning("Abandoned forward finished with an error: %s", exc)
        else:
            logger.info("Abandoned forward eventually completed.")

    @staticmethod
    def _accepted_while_processing() -> RelayResponse:
        return RelayResponse(
            message=MSG_TIMEOUT_ACCEPTED,
            warning=WARNING_TIMEOUT_BUT_PROCESSING,
        )


# ── Module-level singleton ─────────────────────────────────────────────────────
# The controller resolves this through get_relay_service(). Tests override
# that dependency or construct RelayService directly with stubs.

relay_service = RelayService()


def get_relay_service() -> RelayService:
    return relay_service
