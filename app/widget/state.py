"""
app/widget/state.py

Value types held by the upload widget.

Upload and connectivity each get their own small frozen state record; the
widget replaces a record on every transition instead of flipping flags, and
the two never read each other.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from app.models.upload_models import DocumentCategory


class UploadStatus(str, Enum):
    IDLE = "idle"
    UPLOADING = "uploading"
    SUCCESS = "success"
    ERROR = "error"


class ConnectivityStatus(str, Enum):
    IDLE = "idle"
    TESTING = "testing"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class CandidateFile:
    """
    A file as handed over by the picker or a drop, before validation.

    Attributes:
        name      : Original filename (e.g. "invoice.pdf").
        content   : Raw bytes.
        mime_type : MIME type declared by the browser; may be empty.
    """

    name: str
    content: bytes = field(repr=False)
    mime_type: str = ""

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class SelectedFile:
    """A file that passed validation and is waiting to be submitted."""

    name: str
    content: bytes = field(repr=False)
    size: int
    mime_type: str
    category: DocumentCategory


@dataclass(frozen=True)
class UploadState:
    status: UploadStatus = UploadStatus.IDLE
    message: str = ""
    # Relay marker such as "timeout_but_processing"; only set on success.
    warning: Optional[str] = None
    # Readable text the relay sent with a soft success.
    relay_message: Optional[str] = None


@dataclass(frozen=True)
class ConnectivityState:
    status: ConnectivityStatus = ConnectivityStatus.IDLE
    message: str = ""
