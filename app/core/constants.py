"""
app/core/constants.py

Application-wide fixed constants.

These are business rules that are part of the system's contract and are
NOT configurable via environment variables.
"""

# ── Accepted documents ─────────────────────────────────────────────────────────

#: Lower-cased file extension (without the dot) → document category wire value.
EXTENSION_CATEGORIES: dict = {
    "pdf": "invoice",
    "xlsx": "receipt-note",
}

#: Client-side size ceiling. The relay does not re-enforce it.
MAX_FILE_SIZE_BYTES: int = 15 * 1024 * 1024

#: Default environment selected by the widget.
DEFAULT_ENVIRONMENT: str = "test"

# ── Relay responses ────────────────────────────────────────────────────────────

MSG_INVALID_ENVIRONMENT: str = "invalid environment"
MSG_NO_FILE: str = "no file provided"
MSG_INTERNAL_ERROR: str = "internal server error"
MSG_PROBE_OK: str = "connectivity check succeeded"
MSG_TIMEOUT_ACCEPTED: str = "file sent, large-PDF processing may take a few minutes"
MSG_DOWNSTREAM_ERROR_PREFIX: str = "downstream error"

#: Marker on a 200 response whose forward timed out (or got a 504).
WARNING_TIMEOUT_BUT_PROCESSING: str = "timeout_but_processing"

# ── Widget messages ────────────────────────────────────────────────────────────

MSG_SINGLE_FILE: str = "single file at a time"
MSG_DISALLOWED_TYPE: str = "disallowed file type, only PDF and XLSX accepted"
MSG_TOO_LARGE: str = "file too large, 15 MB max"
MSG_UPLOADING: str = "upload in progress..."
MSG_UPLOAD_FAILED_PREFIX: str = "could not send the file"
MSG_UNKNOWN_ERROR: str = "unknown error"
MSG_CONNECTIVITY_FAILED_PREFIX: str = "connectivity test failed"

#: Canned success messages. Which one is shown is a random placeholder,
#: see UploadWidget.simulated_match_message.
MSG_MATCH_PENDING: str = (
    "Processing. If the matching document is already on file you will "
    "receive an email shortly."
)
MSG_AWAITING_COUNTERPART: str = (
    "Document recorded. Upload the matching document (invoice or receipt "
    "note) to receive the reconciliation email."
)
