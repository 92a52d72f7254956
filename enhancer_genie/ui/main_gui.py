"""
Main GUI for Enhancer Genie.

This module acts as the central coordinator: it builds the stores, services
and managers for one browser session, wires them to the Flet page, and lays
out the tabbed interface plus the routed views (register, login, results).
All selection, persistence and submission logic lives in ``ui.core`` and
``services``; this class only connects them.
"""
import flet as ft
import logging
from typing import Optional

from .core.state_manager import StateManager
from .core.event_handlers import EventHandlers
from .core.session_persistence import SessionPersistenceAdapter
from .core.submission_coordinator import SubmissionCoordinator
from .core.registration_controller import RegistrationController
from .core.status_manager import StatusManager

from .tabs.upload_tab import UploadTab
from .tabs.check_tab import CheckTab
from .tabs.history_tab import HistoryTab
from .views.register_view import RegisterView, ROUTE as REGISTER_ROUTE
from .views.login_view import LoginView, ROUTE as LOGIN_ROUTE
from .views.results_view import ResultsView, fingerprint_from_route

from .utils.thread_pool import run_in_background, shutdown_thread_pool

from ..config.app_config import AppConfig
from ..core.errors import CatalogError, RemoteFailure
from ..core.telemetry import log_duration
from ..data.catalog import OptionCatalog
from ..services.api_client import EnhancerApiClient
from ..services.auth import AuthState
from ..services.history_cache import HistoryCache
from ..services.storage import FletClientStore, FletSessionStore
from .._version import VERSION

logger = logging.getLogger(__name__)

HOME_ROUTE = "/"


class EnhancerGenieGUI:
    """
    The main GUI class, responsible for building the UI and coordinating managers.
    """
    def __init__(self, page: ft.Page, config: Optional[AppConfig] = None):
        self.page = page
        self.config = config or AppConfig.from_env()

        logger.info("Initializing Enhancer Genie GUI...")

        # Stores: per-session for the form snapshot, durable for history and user
        self.session_store = FletSessionStore(page)
        self.client_store = FletClientStore(page, prefix=self.config.storage_prefix)

        self.auth = AuthState(self.client_store, key=self.config.user_key)
        self.history = HistoryCache(self.client_store, key=self.config.history_key)
        self.api_client = EnhancerApiClient(
            self.config.api_base_url,
            timeout=self.config.request_timeout,
            catalog_timeout=self.config.catalog_timeout,
            auth_headers=self.auth.headers,
        )

        with log_duration(logger, "StateManager initialization", level=logging.DEBUG):
            self.state_manager = StateManager()

        self.event_handlers = EventHandlers(self)
        self.persistence = SessionPersistenceAdapter(self.state_manager, self.session_store)
        self.coordinator = SubmissionCoordinator(
            self.state_manager,
            self.api_client,
            self.history,
            self.auth,
            navigate=self.navigate,
        )
        self.registration = RegistrationController(self.api_client, navigate=self.navigate)

        self._setup_page_settings()
        self._initialize_ui_components()
        self._setup_file_pickers()
        self.build_layout()

        self.state_manager.add_observer(self.event_handlers.on_state_event)
        self.persistence.attach()

        self._on_route_change()
        run_in_background(self._load_catalog)
        run_in_background(self.api_client.ping)

    def _setup_page_settings(self):
        """Configures the main Flet page settings."""
        self.page.title = "Enhancer Genie"
        self.page.vertical_alignment = ft.MainAxisAlignment.START
        self.page.horizontal_alignment = ft.CrossAxisAlignment.STRETCH
        self.page.on_route_change = self._on_route_change
        self.page.on_view_pop = self._on_view_pop
        self.page.on_disconnect = self._handle_disconnect
        self.page.on_close = self._handle_close

    def _initialize_ui_components(self):
        """Initializes the shared status bar controls."""
        self.status_text = ft.Text("Loading tissues...", color="blue")
        self.progress_bar = ft.ProgressBar(width=400, visible=False)
        self.status_manager = StatusManager(self.status_text, self.progress_bar, self._safe_page_update)
        self.status_bar = ft.Column([self.progress_bar, self.status_text], spacing=4)

    def _setup_file_pickers(self):
        """Sets up the enhancer file picker."""
        self.file_picker = ft.FilePicker(
            on_result=self.event_handlers.on_file_picked,
            on_upload=self.event_handlers.on_file_uploaded,
        )
        self.page.overlay.append(self.file_picker)

    def build_layout(self):
        """Constructs the tabbed home view and the routed views."""
        logger.debug("Building main UI layout...")

        self.upload_tab = UploadTab(self)
        self.check_tab = CheckTab(self)
        self.history_tab = HistoryTab(self)
        self.register_view = RegisterView(self)

        self.tabs = ft.Tabs(
            selected_index=0,
            on_change=self._on_tab_change,
            tabs=[self.upload_tab.component, self.check_tab.component, self.history_tab.component],
            expand=True,
        )

        account_button = (
            ft.TextButton(f"Logged in as {self.auth.username}", disabled=True)
            if self.auth.is_authenticated
            else ft.TextButton("Register", on_click=lambda e: self.navigate(REGISTER_ROUTE))
        )
        header_row = ft.Row([
            ft.Text(f"Enhancer Genie v{VERSION}", size=32, weight=ft.FontWeight.BOLD),
            ft.Container(expand=True),
            account_button,
        ], vertical_alignment=ft.CrossAxisAlignment.CENTER)

        self.home_view = ft.View(
            HOME_ROUTE,
            [
                ft.Column(
                    [header_row, ft.Divider(), self.tabs, ft.Divider(), self.status_bar],
                    expand=True, spacing=10,
                )
            ],
            padding=ft.padding.all(20),
            scroll=ft.ScrollMode.ADAPTIVE,
        )

    # ------------------------------------------------------------------
    # Routing

    def navigate(self, route: str):
        """Route change that may be requested from a worker thread."""
        logger.info(f"Navigating to {route}")
        try:
            self.page.go(route)
        except (RuntimeError, AttributeError) as e:
            logger.debug(f"Navigation to {route} skipped: {e}")

    def _on_route_change(self, e=None):
        route = self.page.route or HOME_ROUTE
        logger.debug(f"Route changed: {route}")
        self.page.views.clear()
        self.page.views.append(self.home_view)

        fingerprint = fingerprint_from_route(route)
        if fingerprint:
            self.page.views.append(ResultsView(self, fingerprint).build())
        elif route == REGISTER_ROUTE:
            self.page.views.append(self.register_view.component)
        elif route == LOGIN_ROUTE:
            self.page.views.append(LoginView(self).build())
        elif route != HOME_ROUTE:
            logger.info(f"Unknown route {route}, showing home")
        self._safe_page_update()

    def _on_view_pop(self, e=None):
        if len(self.page.views) > 1:
            self.page.views.pop()
        self.navigate(self.page.views[-1].route or HOME_ROUTE)

    def _on_tab_change(self, e=None):
        if self.tabs.selected_index == 2:
            self.history_tab.refresh()

    # ------------------------------------------------------------------
    # Startup

    def _load_catalog(self):
        """Load the option catalog, then replay the saved session over it."""
        try:
            with log_duration(logger, "Catalog load"):
                if self.config.catalog_file:
                    catalog = OptionCatalog.from_table(self.config.catalog_file)
                else:
                    catalog = self.api_client.fetch_catalog()
        except (RemoteFailure, CatalogError) as e:
            logger.error(f"Catalog load failed: {e}")
            self.state_manager.set_catalog_error(str(e))
            return

        self.state_manager.set_catalog(catalog)
        self.persistence.restore()
        self.upload_tab.refresh()
        self.history_tab.refresh()

    # ------------------------------------------------------------------
    # Page lifecycle

    def _safe_page_update(self):
        """Page update that tolerates a closed session."""
        try:
            if not self._has_valid_page_session():
                return False
            self.page.update()
            return True
        except (RuntimeError, AttributeError, Exception) as e:
            error_msg = str(e).lower()
            if "shutdown" in error_msg or "session" in error_msg:
                logger.debug(f"Page update skipped due to shutdown: {e}")
            elif "must be added to the page" in error_msg or "control must be" in error_msg:
                logger.debug(f"Page update skipped - controls not yet added: {e}")
            else:
                logger.debug(f"Page update error: {e}")
        return False

    def _has_valid_page_session(self):
        """Helper to check if page and session are valid"""
        return (self.page and
                hasattr(self.page, 'session_id') and
                self.page.session_id)

    def _handle_disconnect(self, e=None):
        # A reload reconnects to the same session; keep its values
        logger.info("Page disconnected")

    def _handle_close(self, e=None):
        """Browser session ended: drop the session snapshot."""
        logger.info("Session closed, cleaning up...")
        self.state_manager.state.shutting_down = True
        self.coordinator.cancel()
        self.persistence.end_session()


def shutdown():
    shutdown_thread_pool(wait=False)
    logger.info("Thread pool shutdown complete")
