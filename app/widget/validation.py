"""
app/widget/validation.py

Client-side checks run before a file is accepted by the widget, plus the
size formatter used when rendering the selected file.
"""

from __future__ import annotations

import mimetypes

from app.core.constants import MAX_FILE_SIZE_BYTES, MSG_DISALLOWED_TYPE, MSG_TOO_LARGE
from app.core.exceptions import FileValidationError
from app.models.upload_models import DocumentCategory
from app.widget.state import CandidateFile, SelectedFile

_SIZE_UNITS = ("Bytes", "KB", "MB", "GB")


def validate_file(candidate: CandidateFile) -> SelectedFile:
    """
    Classify ``candidate`` and enforce the size ceiling.

    The type check runs first, so an oversized ``.docx`` reports the type
    problem.

    Raises:
        FileValidationError: Extension not pdf/xlsx, or size above 15 MiB.
    """
    category = DocumentCategory.from_filename(candidate.name)
    if category is None:
        raise FileValidationError(MSG_DISALLOWED_TYPE)
    if candidate.size > MAX_FILE_SIZE_BYTES:
        raise FileValidationError(MSG_TOO_LARGE)

    mime_type = (
        candidate.mime_type
        or mimetypes.guess_type(candidate.name)[0]
        or "application/octet-stream"
    )
    return SelectedFile(
        name=candidate.name,
        content=candidate.content,
        size=candidate.size,
        mime_type=mime_type,
        category=category,
    )


def format_file_size(num_bytes: int) -> str:
    """
    Human-readable size with at most two decimals.

    >>> format_file_size(0)
    '0 Bytes'
    >>> format_file_size(1536)
    '1.5 KB'
    """
    if num_bytes <= 0:
        return "0 Bytes"
    exponent = 0
    while exponent < len(_SIZE_UNITS) - 1 and num_bytes >= 1024 ** (exponent + 1):
        exponent += 1
    value = round(num_bytes / 1024 ** exponent, 2)
    return f"{value:g} {_SIZE_UNITS[exponent]}"
