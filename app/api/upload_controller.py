"""
app/api/upload_controller.py

Handles GET and POST /upload.

This layer is responsible only for HTTP concerns:
  - Reading the environment query value (GET) or the multipart form (POST).
  - Delegating the probe / relay to RelayService.
  - Translating service-level errors into the uniform JSON error shape.

Responses:
  200  Probe or relay succeeded. A relay whose downstream call timed out
       (or answered 504) is also a 200, flagged with
       ``"warning": "timeout_but_processing"``.
  400  Unknown environment, or no file part in the upload.
  4xx/5xx
       Any other non-2xx status from the downstream webhook is passed
       through along with its body text.
  500  Any other failure, such as a malformed form or an unreachable downstream.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from starlette.datastructures import UploadFile as StarletteUploadFile

from app.core.constants import (
    MSG_DOWNSTREAM_ERROR_PREFIX,
    MSG_INTERNAL_ERROR,
    MSG_INVALID_ENVIRONMENT,
    MSG_NO_FILE,
)
from app.core.exceptions import (
    AppBaseException,
    DownstreamError,
    InvalidEnvironmentError,
    MissingFileError,
)
from app.core.logger import get_logger
from app.models.upload_models import RelayResponse
from app.services.relay_service import RelayService, get_relay_service

logger = get_logger(__name__)

router = APIRouter(prefix="/upload", tags=["Upload"])


# ── Helpers ────────────────────────────────────────────────────────────────────

def _err(message: str, status: int = 400) -> JSONResponse:
    """Return a JSON error response with the standard error shape."""
    return JSONResponse(status_code=status, content={"error": message})


def _downstream_err(exc: DownstreamError) -> JSONResponse:
    return _err(
        f"{MSG_DOWNSTREAM_ERROR_PREFIX}: {exc.status_code} - {exc.body}",
        status=exc.status_code,
    )


def _form_text(value) -> Optional[str]:
    """Return a form value only when it is a plain string field."""
    return value if isinstance(value, str) else None


# ── Endpoints ──────────────────────────────────────────────────────────────────

@router.get("", response_model=RelayResponse, summary="Check downstream connectivity")
async def probe(
    environment: Optional[str] = None,
    service: RelayService = Depends(get_relay_service),
) -> JSONResponse:
    """
    Issue a bodiless GET to the downstream webhook for ``environment``
    (``test`` or ``production``) and report whether it answered 2xx.
    """
    logger.info("Connectivity probe received — environment: %s", environment)

    try:
        result = await service.probe(environment)

    except InvalidEnvironmentError as exc:
        logger.warning("Probe rejected: %s", exc)
        return _err(MSG_INVALID_ENVIRONMENT)

    except DownstreamError as exc:
        logger.warning("Probe failed downstream: %s", exc)
        return _downstream_err(exc)

    except AppBaseException as exc:
        logger.exception("Probe error: %s", exc)
        return _err(MSG_INTERNAL_ERROR, status=500)

    except Exception as exc:  # noqa: BLE001
        logger.exception("Unexpected error during probe: %s", exc)
        return _err(MSG_INTERNAL_ERROR, status=500)

    return JSONResponse(status_code=200, content=result.to_body())


@router.post("", response_model=RelayResponse, summary="Relay one document downstream")
async def upload(
    request: Request,
    service: RelayService = Depends(get_relay_service),
) -> JSONResponse:
    """
    Accepts multipart/form-data with:

      file          (required) — the PDF or XLSX document.
      documentType  (optional) — ``invoice`` or ``receipt-note``; derived from
                                 the file extension when omitted.
      environment   (optional) — ``test`` or ``production``. When omitted the
                                 default webhook URL is used.
    """
    try:
        form = await request.form()
        upload_file = form.get("file")
        if not isinstance(upload_file, StarletteUploadFile):
            upload_file = None

        logger.info(
            "Relay request received — file: %s",
            upload_file.filename if upload_file is not None else None,
        )

        result = await service.relay(
            upload_file,
            document_type=_form_text(form.get("documentType")),
            environment=_form_text(form.get("environment")),
        )

    except InvalidEnvironmentError as exc:
        logger.warning("Relay rejected: %s", exc)
        return _err(MSG_INVALID_ENVIRONMENT)

    except MissingFileError as exc:
        logger.warning("Relay rejected: %s", exc)
        return _err(MSG_NO_FILE)

    except DownstreamError as exc:
        logger.warning("Relay failed downstream: %s", exc)
        return _downstream_err(exc)

    except AppBaseException as exc:
        logger.exception("Relay pipeline error: %s", exc)
        return _err(MSG_INTERNAL_ERROR, status=500)

    except Exception as exc:  # noqa: BLE001
        logger.exception("Unexpected error during relay: %s", exc)
        return _err(MSG_INTERNAL_ERROR, status=500)

    if result.warning:
        logger.info("Relay accepted with warning '%s'.", result.warning)
    return JSONResponse(status_code=200, content=result.to_body())
