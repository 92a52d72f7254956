"""
Check Tab - does a single enhancer interact with a gene?
"""
import flet as ft

from ..components.base import BaseTab
from ...data.models import CheckResult

CHECK_FIELDS = (
    ("enhancer_start", "Enhancer Start"),
    ("enhancer_stop", "Enhancer Stop"),
    ("gene_position", "Gene Position"),
)


class CheckTab(BaseTab):
    def __init__(self, parent_gui=None):
        super().__init__(parent_gui)
        self.tab_name = "Check"
        self.tab_icon = ft.Icons.COMPARE_ARROWS
        handlers = parent_gui.event_handlers

        self.fields = {
            name: ft.TextField(label=label, width=400, on_change=handlers.on_check_field_changed(name))
            for name, label in CHECK_FIELDS
        }
        self.check_button = ft.ElevatedButton(
            "Check", icon=ft.Icons.SEARCH, width=400, on_click=handlers.on_check_clicked,
        )
        self.interacts_text = ft.Text("Interacts: ", size=16)
        self.where_text = ft.Text("", size=16, visible=False)

    def get_tab_content(self) -> ft.Control:
        return ft.Container(
            content=ft.Column([
                ft.Text("Check a single enhancer/gene pair", size=20, weight=ft.FontWeight.BOLD),
                *self.fields.values(),
                self.check_button,
                self.interacts_text,
                self.where_text,
            ], spacing=12),
            padding=ft.padding.all(20),
        )

    def show_result(self, result: CheckResult):
        self.interacts_text.value = f"Interacts: {result.interacts}"
        self.where_text.value = f"Where interacts: {result.where}" if result.where else ""
        self.where_text.visible = bool(result.where)
        self.safe_update()

    def set_busy(self, busy: bool):
        self.check_button.disabled = busy
