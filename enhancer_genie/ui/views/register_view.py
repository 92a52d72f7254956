"""
Register view - account creation with live password criteria
"""
import flet as ft

from ..components.base import BaseComponent
from ..core.registration_controller import PASSWORD_CRITERIA, validate_password

ROUTE = "/register"


class RegisterView(BaseComponent):
    def __init__(self, parent_gui=None):
        super().__init__(parent_gui)
        handlers = parent_gui.event_handlers
        self.username_field = ft.TextField(label="Username", width=400, autofocus=True)
        self.password_field = ft.TextField(
            label="Password", width=400, password=True, can_reveal_password=True,
            on_change=handlers.on_password_changed,
        )
        self.criteria_texts = {
            key: ft.Text(f"✗ {label}", size=12, color="red") for key, label in PASSWORD_CRITERIA.items()
        }
        self.error_text = ft.Text("", color="red", visible=False)
        self.submit_button = ft.ElevatedButton("Register", width=400, on_click=handlers.on_register_clicked)

    def build(self) -> ft.View:
        return ft.View(
            ROUTE,
            [
                ft.AppBar(title=ft.Text("Create an account")),
                ft.Text(
                    "If you create an account and log in, all results will be stored in the cloud, "
                    "accessible on any browser or any device upon login.",
                    size=12, color="grey",
                ),
                self.error_text,
                self.username_field,
                self.password_field,
                ft.Column(list(self.criteria_texts.values()), spacing=2),
                self.submit_button,
                ft.TextButton("Already registered? Log in", on_click=lambda e: self.parent_gui.navigate("/login")),
            ],
            padding=ft.padding.all(20),
            spacing=12,
        )

    def update_criteria(self, password: str):
        for key, met in validate_password(password).items():
            text = self.criteria_texts[key]
            text.value = f"{'✓' if met else '✗'} {PASSWORD_CRITERIA[key]}"
            text.color = "green" if met else "red"
        self.safe_update()

    def show_error(self, message: str):
        self.error_text.value = message
        self.error_text.visible = bool(message)
        self.safe_update()

    def set_busy(self, busy: bool):
        self.submit_button.disabled = busy
        self.submit_button.text = "Registering..." if busy else "Register"
        self.safe_update()

    def clear(self):
        self.username_field.value = ""
        self.password_field.value = ""
        self.update_criteria("")
