"""
app/core/exceptions.py

Custom exception hierarchy for the application.

Raising typed exceptions from services lets controllers catch specific
cases and return the correct HTTP status code without leaking internals.
"""


class AppBaseException(Exception):
    """Root exception — catch-all for any application-level error."""


# ── Widget exceptions ──────────────────────────────────────────────────────────

class FileValidationError(AppBaseException):
    """Raised when a selected file fails the type or size check."""


# ── Relay request exceptions ───────────────────────────────────────────────────

class InvalidEnvironmentError(AppBaseException):
    """Raised when the environment is absent or not in the endpoint table."""


class MissingFileError(AppBaseException):
    """Raised when a relay request carries no file part."""


# ── Downstream exceptions ──────────────────────────────────────────────────────

class DownstreamError(AppBaseException):
    """Raised when the downstream webhook answers with a non-2xx status."""

    def __init__(self, status_code: int, body: str) -> None:
        self.status_code = status_code
        self.body = body
        super().__init__(f"{status_code} - {body}")


class DownstreamUnavailableError(AppBaseException):
    """Raised when the downstream webhook cannot be reached at all."""


class DownstreamTimeoutError(AppBaseException):
    """Raised when the HTTP client gives up waiting on the downstream webhook."""
