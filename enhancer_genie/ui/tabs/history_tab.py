"""
History Tab - analyses previously run from this browser
"""
import flet as ft

from ..components.base import BaseTab


class HistoryTab(BaseTab):
    """Lists the local history for anonymous users, newest first."""

    def __init__(self, parent_gui=None):
        super().__init__(parent_gui)
        self.tab_name = "History"
        self.tab_icon = ft.Icons.HISTORY
        self.entries_column = ft.Column([], spacing=6, scroll=ft.ScrollMode.AUTO)
        self.note_text = ft.Text(
            "Results are only accessible when using the same browser on the same device.",
            size=12, color="grey",
        )

    def get_tab_content(self) -> ft.Control:
        return ft.Container(
            content=ft.Column([
                ft.Text("Previous analyses", size=20, weight=ft.FontWeight.BOLD),
                self.note_text,
                ft.Divider(),
                self.entries_column,
            ], spacing=10),
            padding=ft.padding.all(20),
        )

    def refresh(self):
        gui = self.parent_gui
        if gui.auth.is_authenticated:
            self.note_text.value = "Your analyses are stored with your account."
            self.entries_column.controls = []
            self.safe_update()
            return

        entries = list(gui.history.list())
        if not entries:
            self.entries_column.controls = [ft.Text("No analyses yet.", italic=True)]
        else:
            self.entries_column.controls = [
                ft.Row([
                    ft.Text(entry.timestamp, width=170),
                    ft.Text(entry.fingerprint, selectable=True, expand=True),
                    ft.TextButton(
                        "Open",
                        icon=ft.Icons.OPEN_IN_NEW,
                        on_click=lambda e, fp=entry.fingerprint: gui.navigate(f"/chart_results/{fp}"),
                    ),
                ])
                for entry in reversed(entries)
            ]
        self.safe_update()
