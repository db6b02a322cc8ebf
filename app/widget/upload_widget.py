"""
app/widget/upload_widget.py

UI-agnostic state machine behind the document drop form.

The widget holds at most one validated file, tracks the drag flag, and owns
two independent lifecycles:

    upload        idle → uploading → success | error      (reset → idle)
    connectivity  idle → testing   → success | error

It talks to the relay over a synchronous ``httpx.Client`` that is passed in,
so the Streamlit page hands it a real client and tests hand it either an
``httpx.MockTransport`` client or FastAPI's ``TestClient``.
"""

from __future__ import annotations

import random
from typing import Optional, Sequence

import httpx

from app.core.constants import (
    DEFAULT_ENVIRONMENT,
    MSG_AWAITING_COUNTERPART,
    MSG_CONNECTIVITY_FAILED_PREFIX,
    MSG_MATCH_PENDING,
    MSG_SINGLE_FILE,
    MSG_UNKNOWN_ERROR,
    MSG_UPLOAD_FAILED_PREFIX,
    MSG_UPLOADING,
)
from app.core.exceptions import FileValidationError
from app.core.logger import get_logger
from app.models.upload_models import Environment
from app.widget.state import (
    CandidateFile,
    ConnectivityState,
    ConnectivityStatus,
    SelectedFile,
    UploadState,
    UploadStatus,
)
from app.widget.validation import validate_file

logger = get_logger(__name__)

UPLOAD_PATH = "/upload"


def _json_body(response: httpx.Response) -> dict:
    """Decode a relay response, treating anything but a JSON object as empty."""
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


class UploadWidget:
    """
    Single-file upload form state.

    Args:
        client            : HTTP client whose base URL points at the relay.
        environment_aware : Adds the test/production toggle, sends the
                            ``environment`` field and enables the
                            connectivity test.
        rng               : Random source for the placeholder success
                            message; tests pass a seeded ``random.Random``.
    """

    def __init__(
        self,
        client: httpx.Client,
        environment_aware: bool = False,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._client = client
        self.environment_aware = environment_aware
        self._rng = rng or random.Random()

        self.selected_file: Optional[SelectedFile] = None
        self.drag_active: bool = False
        self.upload: UploadState = UploadState()
        self.connectivity: ConnectivityState = ConnectivityState()
        self.environment: str = DEFAULT_ENVIRONMENT

    # ── Read-only views ────────────────────────────────────────────────────────

    @property
    def upload_status(self) -> UploadStatus:
        return self.upload.status

    @property
    def status_message(self) -> str:
        return self.upload.message

    @property
    def can_submit(self) -> bool:
        return self.selected_file is not None and self.upload.status is not UploadStatus.UPLOADING

    @property
    def can_reset(self) -> bool:
        return self.upload.status is UploadStatus.SUCCESS

    @property
    def can_test_connectivity(self) -> bool:
        return self.environment_aware and self.connectivity.status is not ConnectivityStatus.TESTING

    # ── File selection ─────────────────────────────────────────────────────────

    def drag_over(self) -> None:
        self.drag_active = True

    def drag_leave(self) -> None:
        self.drag_active = False

    def drop(self, files: Sequence[CandidateFile]) -> None:
        """Handle a drop. More than one file is refused and nothing is kept."""
        self.drag_active = False
        if len(files) > 1:
            logger.info("Rejected drop of %d files.", len(files))
            self._fail_selection(MSG_SINGLE_FILE)
            return
        if files:
            self.select(files[0])

    def choose(self, files: Sequence[CandidateFile]) -> None:
        """Handle the native picker; only the first file is considered."""
        if files:
            self.select(files[0])

    def select(self, candidate: CandidateFile) -> None:
        """Validate ``candidate`` and make it the selected file."""
        try:
            selected = validate_file(candidate)
        except FileValidationError as exc:
            logger.info("Rejected '%s': %s", candidate.name, exc)
            self._fail_selection(str(exc))
            return

        self.selected_file = selected
        self.upload = UploadState()
        logger.debug("Selected '%s' as %s.", selected.name, selected.category.value)

    # ── Environment ────────────────────────────────────────────────────────────

    def select_environment(self, environment: str) -> None:
        """
        Switch the downstream target.

        Raises:
            RuntimeError : The widget is not environment-aware.
            ValueError   : ``environment`` is neither "test" nor "production".
        """
        self._require_environment_aware()
        self.environment = Environment(environment).value
        self.connectivity = ConnectivityState()

    # ── Network operations ─────────────────────────────────────────────────────

    def submit(self) -> UploadState:
        """
        Send the selected file to the relay.

        Does nothing unless ``can_submit``. Never retries.
        """
        if not self.can_submit:
            return self.upload

        selected = self.selected_file
        self.upload = UploadState(UploadStatus.UPLOADING, MSG_UPLOADING)

        data = {"documentType": selected.category.value}
        if self.environment_aware:
            data["environment"] = self.environment

        try:
            response = self._client.post(
                UPLOAD_PATH,
                files={"file": (selected.name, selected.content, selected.mime_type)},
                data=data,
            )
        except httpx.HTTPError as exc:
            logger.warning("Upload of '%s' failed: %s", selected.name, exc)
            self.upload = UploadState(
                UploadStatus.ERROR,
                f"{MSG_UPLOAD_FAILED_PREFIX}: {str(exc) or MSG_UNKNOWN_ERROR}",
            )
            return self.upload

        body = _json_body(response)
        if response.is_success and body.get("success"):
            self.upload = UploadState(
                UploadStatus.SUCCESS,
                self.simulated_match_message(),
                warning=body.get("warning"),
                relay_message=body.get("message"),
            )
            logger.info("Uploaded '%s'.", selected.name)
        else:
            detail = body.get("error") or MSG_UNKNOWN_ERROR
            logger.warning(
                "Upload of '%s' refused (%d): %s", selected.name, response.status_code, detail
            )
            self.upload = UploadState(
                UploadStatus.ERROR, f"{MSG_UPLOAD_FAILED_PREFIX}: {detail}"
            )
        return self.upload

    def test_connectivity(self) -> ConnectivityState:
        """
        Ask the relay to probe the downstream URL of the current environment.

        Raises:
            RuntimeError: The widget is not environment-aware.
        """
        self._require_environment_aware()
        if not self.can_test_connectivity:
            return self.connectivity

        self.connectivity = ConnectivityState(ConnectivityStatus.TESTING)
        try:
            response = self._client.get(UPLOAD_PATH, params={"environment": self.environment})
        except httpx.HTTPError as exc:
            self.connectivity = self._connectivity_failed(str(exc))
            return self.connectivity

        body = _json_body(response)
        if response.is_success and body.get("success"):
            self.connectivity = ConnectivityState(
                ConnectivityStatus.SUCCESS, f"connectivity OK for {self.environment}"
            )
        else:
            self.connectivity = self._connectivity_failed(body.get("error"))
        return self.connectivity

    def reset(self) -> None:
        """Return file and upload state to their initial values."""
        self.selected_file = None
        self.upload = UploadState()

    # ── Placeholder ────────────────────────────────────────────────────────────

    def simulated_match_message(self) -> str:
        """
        Pick one of the two canned success messages at random.

        NOT a match result: the relay does not know whether the counterpart
        document exists. The coin flip only varies the wording until the
        downstream service reports real matches.
        """
        return MSG_MATCH_PENDING if self._rng.random() > 0.5 else MSG_AWAITING_COUNTERPART

    # ── Internals ──────────────────────────────────────────────────────────────

    def _fail_selection(self, message: str) -> None:
        self.selected_file = None
        self.upload = UploadState(UploadStatus.ERROR, message)

    def _connectivity_failed(self, detail: Optional[str]) -> ConnectivityState:
        logger.warning("Connectivity test for '%s' failed: %s", self.environment, detail)
        return ConnectivityState(
            ConnectivityStatus.ERROR,
            f"{MSG_CONNECTIVITY_FAILED_PREFIX}: {detail or MSG_UNKNOWN_ERROR}",
        )

    def _require_environment_aware(self) -> None:
        if not self.environment_aware:
            raise RuntimeError("This widget has no environment selection.")
