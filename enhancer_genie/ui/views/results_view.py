"""
Results view - shown at /chart_results/<fingerprint>
"""
import json
import flet as ft

from ..components.base import BaseComponent
from ...data.models import UploadResult

ROUTE_PREFIX = "/chart_results/"


def fingerprint_from_route(route: str):
    """The fingerprint in a results route, or None for any other route."""
    if not route or not route.startswith(ROUTE_PREFIX):
        return None
    fingerprint = route[len(ROUTE_PREFIX):].strip("/")
    return fingerprint or None


class ResultsView(BaseComponent):
    def __init__(self, parent_gui=None, fingerprint: str = ""):
        super().__init__(parent_gui)
        self.fingerprint = fingerprint

    def _result_body(self) -> ft.Control:
        last = getattr(self.parent_gui.coordinator, "last_result", None)
        if isinstance(last, UploadResult) and last.fingerprint == self.fingerprint and last.result is not None:
            if isinstance(last.result, (dict, list)):
                text = json.dumps(last.result, indent=2, sort_keys=True)
            else:
                text = str(last.result)
            return ft.Text(text, selectable=True, font_family="monospace")
        return ft.Text(
            "Results for this analysis are kept by the analysis server. "
            "Keep this identifier to find them again.",
            italic=True,
        )

    def build(self) -> ft.View:
        return ft.View(
            f"{ROUTE_PREFIX}{self.fingerprint}",
            [
                ft.AppBar(title=ft.Text("Analysis results")),
                ft.Row([ft.Text("Identifier:", weight=ft.FontWeight.BOLD), ft.Text(self.fingerprint, selectable=True)]),
                ft.Divider(),
                self._result_body(),
                ft.TextButton("Back", icon=ft.Icons.ARROW_BACK, on_click=lambda e: self.parent_gui.navigate("/")),
            ],
            padding=ft.padding.all(20),
            scroll=ft.ScrollMode.AUTO,
        )
