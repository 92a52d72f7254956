"""
Login view - landing route after registration or an expired session.

Credentials are checked by the external login provider, which stores the
token under the durable ``user`` key; this view only explains where to go.
"""
import flet as ft

from ..components.base import BaseComponent

ROUTE = "/login"


class LoginView(BaseComponent):
    def build(self) -> ft.View:
        gui = self.parent_gui
        if gui.auth.is_authenticated:
            message = f"Logged in as {gui.auth.username}."
        else:
            message = "You are not logged in. Log in through your account provider to keep results across devices."
        return ft.View(
            ROUTE,
            [
                ft.AppBar(title=ft.Text("Log in")),
                ft.Text(message),
                ft.Row([
                    ft.ElevatedButton("Continue without an account", on_click=lambda e: gui.navigate("/")),
                    ft.TextButton("Create an account", on_click=lambda e: gui.navigate("/register")),
                ]),
            ],
            padding=ft.padding.all(20),
            spacing=12,
        )
