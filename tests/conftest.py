"""
tests/conftest.py

Shared pytest fixtures available to all test modules.

Fixtures defined here are auto-discovered by pytest — no import needed.
"""

from __future__ import annotations

import asyncio
import io
from typing import List, Optional

import httpx
import pytest
from fastapi.testclient import TestClient

from app.main import app
from app.relay.httpx_client import HttpxWebhookClient
from app.services.relay_service import RelayService, get_relay_service

STUB_ENDPOINTS = {
    "test": "https://downstream.example/webhook-test/intake",
    "production": "https://downstream.example/webhook/intake",
}
STUB_DEFAULT_URL = "https://downstream.example/webhook/default"


# ── Downstream stub ────────────────────────────────────────────────────────────

class DownstreamStub:
    """
    Async handler for ``httpx.MockTransport`` standing in for the workflow
    webhook. Tweak the attributes in a test before making the request.
    """

    def __init__(self) -> None:
        self.status_code: int = 200
        self.body: str = "ok"
        self.delay: float = 0.0
        self.error: Optional[Exception] = None
        self.forward_timeout: float = 5.0
        self.requests: List[httpx.Request] = []

    async def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code, text=self.body)

    def service(self) -> RelayService:
        return RelayService(
            endpoints=STUB_ENDPOINTS,
            default_url=STUB_DEFAULT_URL,
            client=HttpxWebhookClient(transport=httpx.MockTransport(self)),
            forward_timeout=self.forward_timeout,
        )


# ── Core client fixtures ───────────────────────────────────────────────────────

@pytest.fixture(scope="session")
def client() -> TestClient:
    """
    A synchronous TestClient wrapping the FastAPI app.

    session-scoped so the app is instantiated once per test run.
    The lifespan context (startup/shutdown events) is entered automatically.
    """
    with TestClient(app, raise_server_exceptions=False) as c:
        yield c


@pytest.fixture
def downstream() -> DownstreamStub:
    return DownstreamStub()


@pytest.fixture
def stub_client(client: TestClient, downstream: DownstreamStub) -> TestClient:
    """
    The TestClient with RelayService pointed at ``downstream``.

    The service is built per request, so attribute changes made on the stub
    inside a test take effect on the next call.
    """
    app.dependency_overrides[get_relay_service] = downstream.service
    yield client
    app.dependency_overrides.pop(get_relay_service, None)


# ── Sample file fixtures ───────────────────────────────────────────────────────

@pytest.fixture
def sample_pdf_bytes() -> bytes:
    """Minimal PDF header bytes. The relay never parses the content."""
    return b"%PDF-1.4\n%%EOF"


@pytest.fixture
def sample_pdf_file(sample_pdf_bytes) -> tuple:
    """
    A (field_name, (filename, file_obj, content_type)) tuple ready for
    use with TestClient's `files=` parameter.

    Usage:
        response = client.post("/upload", files=[sample_pdf_file])
    """
    return ("file", ("invoice.pdf", io.BytesIO(sample_pdf_bytes), "application/pdf"))


@pytest.fixture
def sample_xlsx_file() -> tuple:
    return (
        "file",
        (
            "receipt.xlsx",
            io.BytesIO(b"PK\x03\x04fake-xlsx"),
            "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        ),
    )
