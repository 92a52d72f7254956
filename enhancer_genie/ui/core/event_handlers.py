"""
Event handlers for the Enhancer Genie GUI
Translates Flet control events into StateManager / SubmissionCoordinator calls
and renders state notifications back onto the page.
"""
import flet as ft
import logging
from pathlib import Path
from typing import TYPE_CHECKING

from ...core.errors import InvalidSelection, RegistrationError, ValidationError
from ..components.dialogs import ConfirmDialog, MessageDialog
from ..tabs.upload_tab import ACCEPTED_EXTENSIONS
from ..utils.error_boundary import with_error_boundary
from ..utils.thread_pool import run_in_background
from .submission_coordinator import SubmissionPhase, Workflow

if TYPE_CHECKING:
    from ..main_gui import EnhancerGenieGUI

logger = logging.getLogger(__name__)

UPLOAD_URL_EXPIRY_SECONDS = 600


class EventHandlers:
    """Handles all GUI events for Enhancer Genie"""

    def __init__(self, gui: 'EnhancerGenieGUI'):
        self.gui = gui

    @property
    def state(self):
        """Get state manager from GUI"""
        return self.gui.state_manager

    @property
    def status_manager(self):
        return getattr(self.gui, 'status_manager', None)

    def _safe_status_update(self, message: str, color: str = "black") -> bool:
        """Safely update status message with error handling"""
        try:
            if self.status_manager:
                self.status_manager.update_status(message, color)
                return True
            logger.warning(f"Status manager not available: {message}")
            return False
        except Exception as e:
            logger.error(f"Error updating status: {e}")
            return False

    def _refresh_upload_tab(self):
        upload_tab = getattr(self.gui, 'upload_tab', None)
        if upload_tab is not None:
            upload_tab.refresh()

    # ------------------------------------------------------------------
    # Upload form

    @with_error_boundary(fallback_ui_message="Could not change the assembly")
    def on_assembly_changed(self, e):
        try:
            self.state.select_assembly(e.control.value or "")
        except InvalidSelection as ex:
            self._safe_status_update(str(ex), "orange")
            self._refresh_upload_tab()

    @with_error_boundary(fallback_ui_message="Could not change the tissue")
    def on_tissue_changed(self, e):
        try:
            self.state.select_tissue(e.control.value or "")
        except InvalidSelection as ex:
            self._safe_status_update(str(ex), "orange")
            self._refresh_upload_tab()

    @with_error_boundary(fallback_ui_message="Could not change the algorithms")
    def on_algorithm_toggled(self, e):
        try:
            self.state.select_algorithms(self.gui.upload_tab.checked_algorithms())
        except InvalidSelection as ex:
            self._safe_status_update(str(ex), "orange")
            self._refresh_upload_tab()

    @with_error_boundary()
    def on_email_changed(self, e):
        self.state.set_email((e.control.value or "").strip())

    @with_error_boundary(fallback_ui_message="Could not open the file picker")
    def on_pick_file_clicked(self, e):
        self.gui.file_picker.pick_files(
            dialog_title="Select enhancer file",
            allowed_extensions=ACCEPTED_EXTENSIONS,
            allow_multiple=False,
        )

    @with_error_boundary(fallback_ui_message="Could not read the selected file")
    def on_file_picked(self, e: ft.FilePickerResultEvent):
        if not e.files:
            logger.info("File selection cancelled")
            return
        picked = e.files[0]
        if picked.path:
            # Desktop mode: the file is local already
            data = Path(picked.path).read_bytes()
            self.state.set_file(picked.name, data)
            self._safe_status_update(f"Selected {picked.name}", "blue")
            return

        # Web mode: push the file to the server, bytes are read in on_file_uploaded
        logger.info(f"Uploading picked file to server: {picked.name}")
        self.gui.file_picker.upload([
            ft.FilePickerUploadFile(
                picked.name,
                upload_url=self.gui.page.get_upload_url(picked.name, UPLOAD_URL_EXPIRY_SECONDS),
            )
        ])
        self._safe_status_update(f"Receiving {picked.name}...", "blue")

    @with_error_boundary(fallback_ui_message="Could not receive the selected file")
    def on_file_uploaded(self, e: ft.FilePickerUploadEvent):
        if e.error:
            logger.error(f"File transfer failed for {e.file_name}: {e.error}")
            self._safe_status_update(f"Could not receive {e.file_name}: {e.error}", "red")
            return
        if e.progress is None or e.progress < 1:
            return
        path = Path(self.gui.config.upload_dir) / e.file_name
        try:
            data = path.read_bytes()
        finally:
            try:
                path.unlink()
            except OSError as ex:
                logger.debug(f"Could not remove uploaded temp file {path}: {ex}")
        self.state.set_file(e.file_name, data)
        self._safe_status_update(f"Selected {e.file_name}", "blue")

    @with_error_boundary(fallback_ui_message="Upload failed")
    def on_upload_clicked(self, e):
        self.gui.coordinator.submit_upload()

    # ------------------------------------------------------------------
    # Check form

    def on_check_field_changed(self, name: str):
        """Build the on_change handler for one of the check fields."""
        @with_error_boundary()
        def handler(e):
            self.state.set_check_field(name, (e.control.value or "").strip())
        return handler

    @with_error_boundary(fallback_ui_message="Check failed")
    def on_check_clicked(self, e):
        self.gui.coordinator.submit_check()

    # ------------------------------------------------------------------
    # Registration

    @with_error_boundary(fallback_ui_message="Registration failed")
    def on_register_clicked(self, e):
        view = self.gui.register_view
        username = (view.username_field.value or "").strip()
        password = view.password_field.value or ""
        view.show_error("")
        view.set_busy(True)

        def do_register():
            try:
                self.gui.registration.register(username, password)
            except RegistrationError as ex:
                logger.info(f"Registration rejected: {ex.message}")
                view.show_error(ex.message)
            else:
                view.clear()
                self._safe_status_update("Registration successful. Please log in.", "green")
            finally:
                view.set_busy(False)

        run_in_background(do_register)

    @with_error_boundary()
    def on_password_changed(self, e):
        self.gui.register_view.update_criteria(e.control.value or "")

    # ------------------------------------------------------------------
    # State notifications

    def on_state_event(self, event_type: str, data: dict):
        """StateManager observer; renders every notification on the page."""
        handler = getattr(self, f"_on_{event_type}", None)
        if handler is None:
            return
        handler(data)

    def _on_catalog_loaded(self, data):
        self._refresh_upload_tab()
        self._safe_status_update(f"Loaded {len(data.get('assemblies', []))} assemblies", "green")

    def _on_catalog_failed(self, data):
        self._safe_status_update(f"Could not load tissues: {data.get('message')}", "red")

    def _on_selection_changed(self, data):
        self._refresh_upload_tab()

    def _on_email_changed(self, data):
        self._refresh_upload_tab()

    def _on_file_changed(self, data):
        self._refresh_upload_tab()

    def _on_submission_phase_changed(self, data):
        phase = data.get("phase")
        workflow = data.get("workflow")
        busy = phase in (SubmissionPhase.CONFIRMING, SubmissionPhase.SUBMITTING)
        self.gui.upload_tab.set_busy(busy and workflow is Workflow.UPLOAD)
        self.gui.check_tab.set_busy(busy and workflow is Workflow.CHECK)

        if phase is SubmissionPhase.SUBMITTING and self.status_manager:
            label = "Uploading and analysing, this can take a few minutes..." if workflow is Workflow.UPLOAD else "Checking..."
            self.status_manager.show_progress(label)
        elif phase is SubmissionPhase.IDLE and self.status_manager:
            self.status_manager.hide_progress()
        self.gui._safe_page_update()

    def _on_confirmation_required(self, data):
        coordinator = self.gui.coordinator
        ConfirmDialog(
            self.gui,
            title="Tissue check",
            message=data.get("message", ""),
            on_confirm=coordinator.confirm,
            on_cancel=coordinator.decline,
            confirm_text="Upload anyway",
        ).show()

    def _on_submission_succeeded(self, data):
        workflow = data.get("workflow")
        if workflow is Workflow.UPLOAD:
            self._safe_status_update("Analysis complete", "green")
            self.gui.history_tab.refresh()
        else:
            self.gui.check_tab.show_result(data["result"])
            self._safe_status_update("Check complete", "green")

    def _on_submission_failed(self, data):
        message = data.get("message", "Request failed")
        if isinstance(data.get("error"), ValidationError):
            self._safe_status_update(message, "orange")
            return
        self._safe_status_update(message, "red")
        MessageDialog(self.gui, title="Error", message=message).show()

    def _on_session_expired(self, data):
        self._safe_status_update("Your session has expired. Please log in again.", "orange")
        self.gui.history_tab.refresh()
