"""
Dialog components for the GUI
"""
import flet as ft
import logging
from typing import Callable, Optional
from .base import BaseComponent

logger = logging.getLogger(__name__)


class _OverlayDialog(BaseComponent):
    """Shows/closes an AlertDialog through the page overlay."""

    def _close_dialog(self):
        if self.parent_gui and hasattr(self.parent_gui, 'page'):
            for overlay in self.parent_gui.page.overlay[:]:
                if isinstance(overlay, ft.AlertDialog):
                    overlay.open = False
                    self.parent_gui.page.overlay.remove(overlay)
            self.safe_update()

    def show(self):
        if self.parent_gui and hasattr(self.parent_gui, 'page'):
            dialog = self.build()
            self.parent_gui.page.overlay.append(dialog)
            dialog.open = True
            self.safe_update()


class ConfirmDialog(_OverlayDialog):
    """Yes/no question; exactly one of the callbacks runs."""

    def __init__(self, parent_gui=None, title: str = "Please confirm", message: str = "",
                 on_confirm: Optional[Callable[[], None]] = None,
                 on_cancel: Optional[Callable[[], None]] = None,
                 confirm_text: str = "Continue"):
        super().__init__(parent_gui)
        self.title = title
        self.message = message
        self.on_confirm = on_confirm
        self.on_cancel = on_cancel
        self.confirm_text = confirm_text

    def build(self) -> ft.AlertDialog:
        return ft.AlertDialog(
            modal=True,
            title=ft.Text(self.title),
            content=ft.Text(self.message),
            actions=[
                ft.TextButton("Cancel", on_click=self._on_cancel),
                ft.ElevatedButton(self.confirm_text, on_click=self._on_confirm),
            ],
            actions_alignment=ft.MainAxisAlignment.END,
        )

    def _on_confirm(self, e):
        logger.info("User confirmed: %s", self.message)
        self._close_dialog()
        if self.on_confirm:
            self.on_confirm()

    def _on_cancel(self, e):
        logger.info("User declined: %s", self.message)
        self._close_dialog()
        if self.on_cancel:
            self.on_cancel()


class MessageDialog(_OverlayDialog):
    """Informational dialog with a single Close button."""

    def __init__(self, parent_gui=None, title: str = "", message: str = ""):
        super().__init__(parent_gui)
        self.title = title
        self.message = message

    def build(self) -> ft.AlertDialog:
        return ft.AlertDialog(
            title=ft.Text(self.title),
            content=ft.Text(self.message, selectable=True),
            actions=[ft.ElevatedButton("Close", on_click=lambda e: self._close_dialog())],
            actions_alignment=ft.MainAxisAlignment.END,
        )
