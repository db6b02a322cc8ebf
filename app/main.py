"""
app/main.py

FastAPI application entry point for the upload relay.

Responsibilities:
  - Create the FastAPI app with metadata from config
  - Register the /upload router
  - Add a global exception handler for uncaught AppBaseException
  - Expose a /health endpoint for liveness probes

Run with ``uvicorn app.main:app``.
"""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.api.upload_controller import router as upload_router
from app.core.config import settings
from app.core.constants import MSG_INTERNAL_ERROR
from app.core.exceptions import AppBaseException
from app.core.logger import get_logger

logger = get_logger(__name__)

# ── App instance ───────────────────────────────────────────────────────────────

app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    description=(
        "Receives a single invoice (PDF) or receipt note (XLSX) and relays it "
        "as base64 JSON to the document-matching workflow webhook."
    ),
)

# ── Routers ────────────────────────────────────────────────────────────────────

app.include_router(upload_router)

# ── Global exception handler ───────────────────────────────────────────────────

@app.exception_handler(AppBaseException)
async def app_exception_handler(request: Request, exc: AppBaseException) -> JSONResponse:
    """
    Safety-net for any AppBaseException that escapes controller-level handling.
    Internals stay in the log; the caller only sees { "error": "internal server error" }.
    """
    logger.exception("Unhandled application error on %s: %s", request.url.path, exc)
    return JSONResponse(status_code=500, content={"error": MSG_INTERNAL_ERROR})


# ── Health endpoint ────────────────────────────────────────────────────────────

@app.get("/health", tags=["Health"], summary="Liveness probe")
async def health() -> dict:
    """Returns 200 OK when the service is running."""
    return {"status": "ok", "version": settings.app_version}
