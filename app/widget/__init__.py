"""app/widget/__init__.py — public API of the widget package."""

from app.widget.state import (
    CandidateFile,
    ConnectivityState,
    ConnectivityStatus,
    SelectedFile,
    UploadState,
    UploadStatus,
)
from app.widget.upload_widget import UploadWidget
from app.widget.validation import format_file_size, validate_file

__all__ = [
    "UploadWidget",
    "CandidateFile",
    "SelectedFile",
    "UploadState",
    "UploadStatus",
    "ConnectivityState",
    "ConnectivityStatus",
    "validate_file",
    "format_file_size",
]
