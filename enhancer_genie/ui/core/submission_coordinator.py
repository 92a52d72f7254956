"""Submission workflow controller for the upload and check forms.

Phases::

    IDLE -> VALIDATING -> (CONFIRMING) -> SUBMITTING -> SUCCEEDED | FAILED -> IDLE

Only one request is in flight per coordinator. ``submit_*`` while a request
is being confirmed or sent is ignored, whatever the UI does with its
buttons. The in-flight request is tracked as a ``SubmissionHandle``; once a
handle is cancelled its response is dropped when it arrives.

Observers of the StateManager receive:

* ``submission_phase_changed`` ``{"phase", "workflow"}``
* ``confirmation_required`` ``{"message"}``
* ``submission_succeeded`` ``{"workflow", "result", "route"}``
* ``submission_failed`` ``{"workflow", "message", "error"}``
* ``session_expired`` ``{"workflow"}``
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Optional

from ...core.errors import RemoteFailure, SessionExpired, ValidationError
from ...data.models import CheckRequest, CheckResult, UploadRequest, UploadResult
from ..utils.thread_pool import run_in_background

if TYPE_CHECKING:  # pragma: no cover - import hints only
    from ...services.api_client import EnhancerApiClient
    from ...services.auth import AuthState
    from ...services.history_cache import HistoryCache
    from .state_manager import StateManager

logger = logging.getLogger(__name__)

LOGIN_ROUTE = "/login"


class SubmissionPhase(Enum):
    IDLE = "idle"
    VALIDATING = "validating"
    CONFIRMING = "confirming"
    SUBMITTING = "submitting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class Workflow(Enum):
    UPLOAD = "upload"
    CHECK = "check"


BUSY_PHASES = (SubmissionPhase.VALIDATING, SubmissionPhase.CONFIRMING, SubmissionPhase.SUBMITTING)


def tissue_mismatch(tissue: str, file_name: Optional[str]) -> bool:
    """True when the file name does not mention the selected tissue."""
    if not tissue or not file_name:
        return False
    return tissue.lower() not in file_name.lower()


class SubmissionHandle:
    """One in-flight request."""

    def __init__(self, workflow: Workflow):
        self.workflow = workflow
        self.cancelled = False
        self.future: Optional[Future] = None

    def cancel(self) -> None:
        self.cancelled = True
        if self.future is not None:
            self.future.cancel()


def _background_runner(call: Callable[[], Any]) -> Future:
    return run_in_background(call)


class SubmissionCoordinator:
    """Validate, confirm, send and record upload/check submissions."""

    def __init__(
        self,
        state_manager: "StateManager",
        api_client: "EnhancerApiClient",
        history: "HistoryCache",
        auth: "AuthState",
        *,
        runner: Optional[Callable[[Callable[[], Any]], Future]] = None,
        navigate: Optional[Callable[[str], None]] = None,
    ) -> None:
        self.state_manager = state_manager
        self.api_client = api_client
        self.history = history
        self.auth = auth
        self._runner = runner or _background_runner
        self._navigate = navigate or (lambda route: None)
        self._lock = threading.RLock()
        self.phase = SubmissionPhase.IDLE
        self.workflow: Optional[Workflow] = None
        self._handle: Optional[SubmissionHandle] = None
        self._pending_upload: Optional[UploadRequest] = None
        self.last_error: Optional[Exception] = None
        self.last_result: Any = None

    # ------------------------------------------------------------------
    # Phase bookkeeping

    def _set_phase(self, phase: SubmissionPhase) -> None:
        self.phase = phase
        logger.debug("Submission phase -> %s (%s)", phase.value, self.workflow.value if self.workflow else "-")
        self.state_manager.notify_observers(
            "submission_phase_changed",
            {"phase": phase, "workflow": self.workflow},
        )

    def _begin(self, workflow: Workflow) -> bool:
        with self._lock:
            if self.phase in BUSY_PHASES:
                logger.warning("Ignoring %s submission while %s", workflow.value, self.phase.value)
                return False
            self.workflow = workflow
            self.last_error = None
            self.last_result = None
            self._set_phase(SubmissionPhase.VALIDATING)
            return True

    def _fail(self, error: Exception) -> None:
        self.last_error = error
        self._set_phase(SubmissionPhase.FAILED)
        message = getattr(error, "message", None) or str(error)
        self.state_manager.notify_observers(
            "submission_failed",
            {"workflow": self.workflow, "message": message, "error": error},
        )
        self._set_phase(SubmissionPhase.IDLE)

    @property
    def is_busy(self) -> bool:
        return self.phase in BUSY_PHASES

    # ------------------------------------------------------------------
    # Upload workflow

    def submit_upload(self) -> SubmissionPhase:
        """Validate the upload form and send it, asking for confirmation if needed."""
        if not self._begin(Workflow.UPLOAD):
            return self.phase

        sm = self.state_manager
        selection = sm.selection.state
        missing = []
        if not selection.tissue:
            missing.append("tissue")
        if not sm.state.file_name:
            missing.append("file")
        if missing:
            logger.info("Upload blocked, missing: %s", missing)
            self._fail(ValidationError(f"Please provide: {', '.join(missing)}", missing))
            return self.phase

        request = UploadRequest(
            organ=selection.tissue,
            assembly=selection.assembly,
            algorithms=tuple(sm.selected_algorithm_options()),
            email=sm.state.email,
            file_name=sm.state.file_name,
            file_bytes=sm.state.file_bytes,
        )

        if tissue_mismatch(selection.tissue, request.file_name):
            with self._lock:
                self._pending_upload = request
                self._set_phase(SubmissionPhase.CONFIRMING)
            sm.notify_observers("confirmation_required", {
                "message": f"Are you sure this enhancer file matches the selected tissue: {selection.tissue}?",
            })
            return self.phase

        self._dispatch(Workflow.UPLOAD, lambda: self.api_client.upload(request))
        return self.phase

    def confirm(self) -> SubmissionPhase:
        """User accepted the tissue/file mismatch."""
        with self._lock:
            if self.phase is not SubmissionPhase.CONFIRMING or self._pending_upload is None:
                logger.debug("confirm() outside of confirmation, ignored")
                return self.phase
            request = self._pending_upload
            self._pending_upload = None
        self._dispatch(Workflow.UPLOAD, lambda: self.api_client.upload(request))
        return self.phase

    def decline(self) -> SubmissionPhase:
        """User rejected the mismatch; nothing is sent."""
        with self._lock:
            if self.phase is not SubmissionPhase.CONFIRMING:
                return self.phase
            self._pending_upload = None
            logger.info("Upload cancelled at tissue confirmation")
            self._set_phase(SubmissionPhase.IDLE)
        return self.phase

    # ------------------------------------------------------------------
    # Check workflow

    def submit_check(self) -> SubmissionPhase:
        """Validate the three coordinates and ask the API about the pair."""
        if not self._begin(Workflow.CHECK):
            return self.phase

        check = self.state_manager.state.check
        request = CheckRequest(
            enhancer_start=(check.enhancer_start or "").strip(),
            enhancer_stop=(check.enhancer_stop or "").strip(),
            gene_position=(check.gene_position or "").strip(),
        )
        missing = [name for name, value in vars(request).items() if not value]
        if missing:
            self._fail(ValidationError("Please fill in all the fields.", missing))
            return self.phase

        self._dispatch(Workflow.CHECK, lambda: self.api_client.check(request))
        return self.phase

    # ------------------------------------------------------------------
    # Dispatch and completion

    def _dispatch(self, workflow: Workflow, call: Callable[[], Any]) -> None:
        handle = SubmissionHandle(workflow)
        with self._lock:
            self._handle = handle
            self._set_phase(SubmissionPhase.SUBMITTING)
        self.state_manager.start_operation(workflow.value)

        future = self._runner(call)
        handle.future = future
        # Runs immediately if the future is already done
        future.add_done_callback(lambda f: self._on_complete(handle, f))

    def cancel(self) -> None:
        """Abandon the current submission; a late response is discarded."""
        with self._lock:
            if self.phase is SubmissionPhase.CONFIRMING:
                self.decline()
                return
            if self.phase is not SubmissionPhase.SUBMITTING or self._handle is None:
                return
            self._handle.cancel()
            self._handle = None
            logger.info("Submission cancelled")
            self._set_phase(SubmissionPhase.IDLE)
        self.state_manager.end_operation()

    def _on_complete(self, handle: SubmissionHandle, future: Future) -> None:
        with self._lock:
            if handle.cancelled or handle is not self._handle:
                logger.info("Discarding response of superseded %s submission", handle.workflow.value)
                return
            self._handle = None

        try:
            result = future.result()
        except SessionExpired as exc:
            self._handle_session_expired(exc)
        except RemoteFailure as exc:
            logger.warning("%s failed: %s", handle.workflow.value, exc.message)
            self._fail(exc)
        except Exception as exc:
            logger.exception("Unexpected error during %s", handle.workflow.value)
            self._fail(RemoteFailure(str(exc)))
        else:
            self._handle_success(handle.workflow, result)
        finally:
            self.state_manager.end_operation()

    def _handle_success(self, workflow: Workflow, result: Any) -> None:
        self.last_result = result
        self._set_phase(SubmissionPhase.SUCCEEDED)
        route = None
        if workflow is Workflow.UPLOAD and isinstance(result, UploadResult):
            self.history.record(result.fingerprint)
            route = result.route
            logger.info("Analysis complete: %s", result.fingerprint)
        elif isinstance(result, CheckResult):
            logger.info("Check complete: interacts=%s", result.interacts)

        self.state_manager.notify_observers(
            "submission_succeeded",
            {"workflow": workflow, "result": result, "route": route},
        )
        self._set_phase(SubmissionPhase.IDLE)
        if route:
            self._navigate(route)

    def _handle_session_expired(self, error: SessionExpired) -> None:
        logger.warning("Session expired during %s, logging out", self.workflow.value if self.workflow else "-")
        self.last_error = error
        self.auth.clear()
        self._set_phase(SubmissionPhase.FAILED)
        self.state_manager.notify_observers("session_expired", {"workflow": self.workflow})
        self._set_phase(SubmissionPhase.IDLE)
        self._navigate(LOGIN_ROUTE)
