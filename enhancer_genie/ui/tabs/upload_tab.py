"""
Upload Tab - enhancer region file upload with assembly/tissue/algorithm selectors
"""
import flet as ft
from typing import List

from ..components.base import BaseTab

ACCEPTED_EXTENSIONS = ["bed", "gz"]


class UploadTab(BaseTab):
    """Tab for uploading an enhancer file for analysis"""

    def __init__(self, parent_gui=None):
        super().__init__(parent_gui)
        self.tab_name = "Upload"
        self.tab_icon = ft.Icons.UPLOAD_FILE
        handlers = parent_gui.event_handlers

        self.assembly_dropdown = ft.Dropdown(
            label="Select assembly", width=400, options=[],
            on_change=handlers.on_assembly_changed,
        )
        self.tissue_dropdown = ft.Dropdown(
            label="Select tissue", width=400, options=[], disabled=True,
            on_change=handlers.on_tissue_changed,
        )
        self.algorithm_checkboxes: List[ft.Checkbox] = []
        self.algorithm_column = ft.Column([], spacing=2)
        self.algorithm_hint = ft.Text("Select a tissue to see the supported algorithms.", italic=True, color="grey")
        self.email_field = ft.TextField(
            label="Email address (optional)", width=400,
            keyboard_type=ft.KeyboardType.EMAIL,
            on_change=handlers.on_email_changed,
        )
        self.file_name_text = ft.Text("No file selected.", italic=True, max_lines=2)
        self.file_button = ft.ElevatedButton(
            "Choose file", icon=ft.Icons.ATTACH_FILE, on_click=handlers.on_pick_file_clicked,
        )
        self.submit_button = ft.ElevatedButton(
            "Upload", icon=ft.Icons.CLOUD_UPLOAD, width=400, on_click=handlers.on_upload_clicked,
        )

    def get_tab_content(self) -> ft.Control:
        return ft.Container(
            content=ft.Column([
                ft.Text("Analyse enhancer regions", size=20, weight=ft.FontWeight.BOLD),
                self.assembly_dropdown,
                self.tissue_dropdown,
                ft.Text("Select algorithm(s):", weight=ft.FontWeight.BOLD),
                ft.Text("Some are only supported when using specific tissues/assemblies", size=12, color="grey"),
                self.algorithm_hint,
                self.algorithm_column,
                ft.Text("Results will be sent to the email if provided", size=12, color="grey"),
                self.email_field,
                ft.Text("Accepted file types: bed, bed.gz", size=12, color="grey"),
                ft.Row([self.file_button, self.file_name_text]),
                self.submit_button,
            ], spacing=12),
            padding=ft.padding.all(20),
        )

    def refresh(self):
        """Rebuild selector options and values from the selection cascade."""
        sm = self.parent_gui.state_manager
        selection = sm.selection

        self.assembly_dropdown.options = [
            ft.dropdown.Option(key=option.assembly, text=option.label) for option in sm.catalog.assemblies
        ]
        self.assembly_dropdown.value = selection.assembly or None

        self.tissue_dropdown.options = [
            ft.dropdown.Option(key=tissue.value, text=tissue.label) for tissue in selection.available_tissues()
        ]
        self.tissue_dropdown.value = selection.tissue or None
        self.tissue_dropdown.disabled = selection.tissue_selector_disabled

        handlers = self.parent_gui.event_handlers
        self.algorithm_checkboxes = [
            ft.Checkbox(
                label=algo.label,
                data=algo.value,
                value=algo.value in selection.algorithms,
                disabled=selection.algorithm_selector_disabled,
                on_change=handlers.on_algorithm_toggled,
            )
            for algo in selection.available_algorithms()
        ]
        self.algorithm_column.controls = self.algorithm_checkboxes
        self.algorithm_hint.visible = selection.algorithm_selector_disabled

        if (self.email_field.value or "") != sm.state.email:
            self.email_field.value = sm.state.email
        self.file_name_text.value = sm.state.file_name or "No file selected."
        self.safe_update()

    def checked_algorithms(self) -> List[str]:
        return [cb.data for cb in self.algorithm_checkboxes if cb.value]

    def set_busy(self, busy: bool):
        self.submit_button.disabled = busy
        self.submit_button.text = "Processing..." if busy else "Upload"
        self.file_button.disabled = busy
