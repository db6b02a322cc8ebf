"""
app/models/upload_models.py

Pydantic DTOs and enums for the upload relay.

The multipart request has no DTO — the controller reads the form directly;
what is modelled here is the JSON forwarded downstream and the JSON returned
to the widget.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from app.core.constants import EXTENSION_CATEGORIES


class DocumentCategory(str, Enum):
    """What a file is taken to be, judged by its extension alone."""

    INVOICE = "invoice"
    RECEIPT_NOTE = "receipt-note"

    @classmethod
    def from_filename(cls, filename: str) -> Optional["DocumentCategory"]:
        """
        Return the category for ``filename`` or None when the extension is
        not accepted.

        Only the last dot-separated segment counts and case is ignored, so
        ``"Scan.2024.PDF"`` is an invoice and ``"notes"`` is nothing.
        """
        if "." not in filename:
            return None
        extension = filename.rsplit(".", 1)[1].lower()
        value = EXTENSION_CATEGORIES.get(extension)
        return cls(value) if value else None


class Environment(str, Enum):
    """Named downstream deployment target."""

    TEST = "test"
    PRODUCTION = "production"


def utc_timestamp(now: Optional[datetime] = None) -> str:
    """ISO-8601 UTC timestamp with millisecond precision and a ``Z`` suffix."""
    moment = (now or datetime.now(timezone.utc)).astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class RelayPayload(BaseModel):
    """
    JSON body POSTed to the downstream webhook.

        {
            "fileName": "invoice.pdf",
            "fileType": "application/pdf",
            "fileSize": 2097152,
            "documentType": "invoice",
            "fileData": "JVBERi0xLjQK...",
            "timestamp": "2025-03-01T09:30:00.000Z"
        }
    """

    model_config = ConfigDict(populate_by_name=True)

    file_name: str = Field(alias="fileName")
    file_type: str = Field(alias="fileType")
    file_size: int = Field(alias="fileSize")
    document_type: Optional[str] = Field(default=None, alias="documentType")
    file_data: str = Field(alias="fileData", repr=False)
    timestamp: str = Field(default_factory=utc_timestamp)

    def to_wire(self) -> dict:
        return self.model_dump(by_alias=True)


class RelayResponse(BaseModel):
    """
    Success body for GET and POST /upload.

        { "success": true, "data": "...", "message": "connectivity check succeeded" }
        { "success": true, "data": "..." }
        { "success": true, "message": "...", "warning": "timeout_but_processing" }

    Unset fields are left out of the serialised body.
    """

    success: bool = True
    data: Optional[str] = None
    message: Optional[str] = None
    warning: Optional[str] = None

    def to_body(self) -> dict:
        return self.model_dump(exclude_none=True)


class ErrorResponse(BaseModel):
    """Failure body for every /upload error: ``{ "error": "..." }``."""

    error: str
