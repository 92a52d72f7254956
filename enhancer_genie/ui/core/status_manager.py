"""
Status Manager - status text and progress display for the Enhancer Genie GUI.
"""

import flet as ft
import logging
from typing import Optional, Callable

logger = logging.getLogger(__name__)


class StatusManager:
    """
    Manages the status bar: a colored message plus an indeterminate
    progress bar shown while a request is in flight.
    """

    def __init__(
        self,
        status_text: ft.Text,
        progress_bar: ft.ProgressBar,
        update_callback: Optional[Callable] = None,
    ):
        """
        Args:
            status_text: Flet Text control for status messages
            progress_bar: Flet ProgressBar control for progress indication
            update_callback: Optional callback to trigger page updates (typically _safe_page_update)
        """
        self.status_text = status_text
        self.progress_bar = progress_bar
        self.update_callback = update_callback or (lambda: None)

    def _refresh(self, what: str):
        try:
            self.update_callback()
        except (RuntimeError, AttributeError) as e:
            if "shutdown" in str(e).lower() or "session" in str(e).lower():
                logger.debug(f"{what} callback skipped due to shutdown: {e}")
            else:
                logger.warning(f"{what} callback failed: {e}")

    def update_status(self, message: str, color: str = 'black'):
        """
        Update the status text with a message and color.

        Common colors: 'green' (success), 'red' (error), 'blue' (info),
        'orange' (warning).
        """
        self.status_text.value = message
        self.status_text.color = color
        logger.info(f"GUI Status Update: {message}")
        self._refresh("Status update")

    def show_progress(self, message: str = ""):
        self.progress_bar.visible = True
        if message:
            self.status_text.value = message
            self.status_text.color = "blue"
        self._refresh("Progress show")

    def hide_progress(self):
        self.progress_bar.visible = False
        self._refresh("Progress hide")
