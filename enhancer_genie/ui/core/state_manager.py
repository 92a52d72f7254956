"""
Application State Manager for the Enhancer Genie GUI
Holds the selection cascade, the free-text form fields and the operation flag,
and notifies observers synchronously on every change.
"""
import logging
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional

from ...core.errors import InvalidSelection
from ...core.selection import SelectionStateMachine
from ...data.catalog import OptionCatalog
from ...data.models import AlgorithmOption, CheckRequest, SelectionState

logger = logging.getLogger(__name__)


@dataclass
class AppState:
    """Central application state"""
    # Upload form
    email: str = ""
    file_name: Optional[str] = None
    file_bytes: Optional[bytes] = None

    # Check form
    check: CheckRequest = field(default_factory=CheckRequest)

    catalog_loaded: bool = False
    catalog_error: str = ""

    # Internal flags
    shutting_down: bool = False
    operation_in_progress: bool = False
    current_operation: str = ""


class StateManager:
    """Manages application state and provides state change notifications"""

    def __init__(self, catalog: Optional[OptionCatalog] = None):
        self.state = AppState()
        self._observers: List[Callable] = []
        self.selection = SelectionStateMachine(catalog or OptionCatalog([]))
        if catalog is not None:
            self.state.catalog_loaded = True

    def add_observer(self, callback):
        """Add a callback to be notified when state changes"""
        self._observers.append(callback)

    def notify_observers(self, event_type: str, data: Optional[dict] = None):
        """Notify all observers of a state change"""
        for callback in self._observers:
            try:
                callback(event_type, data or {})
            except Exception as e:
                logger.warning(f"Observer callback failed: {e}")

    # ------------------------------------------------------------------
    # Catalog

    @property
    def catalog(self) -> OptionCatalog:
        return self.selection.catalog

    def set_catalog(self, catalog: OptionCatalog):
        """Install a freshly loaded catalog. Selections start from scratch."""
        self.selection = SelectionStateMachine(catalog)
        self.state.catalog_loaded = True
        self.state.catalog_error = ""
        self.notify_observers("catalog_loaded", {"assemblies": catalog.assembly_ids()})

    def set_catalog_error(self, message: str):
        self.state.catalog_error = message
        self.notify_observers("catalog_failed", {"message": message})

    # ------------------------------------------------------------------
    # Selection cascade

    def _apply(self, field_name: str, transition: Callable[[], SelectionState]) -> SelectionState:
        before = self.selection.state
        try:
            after = transition()
        except InvalidSelection as e:
            logger.error(f"Rejected {field_name} selection: {e}")
            raise
        if after != before:
            self.notify_observers("selection_changed", {"field": field_name, "state": after, "previous": before})
        return after

    def select_assembly(self, assembly_id: str) -> SelectionState:
        return self._apply("assembly", lambda: self.selection.select_assembly(assembly_id))

    def select_tissue(self, tissue_id: str) -> SelectionState:
        return self._apply("tissue", lambda: self.selection.select_tissue(tissue_id))

    def select_algorithms(self, algorithm_ids: Iterable[str]) -> SelectionState:
        ids = list(algorithm_ids)
        return self._apply("algorithms", lambda: self.selection.select_algorithms(ids))

    def ordered_algorithms(self) -> List[str]:
        """Selected algorithm ids in catalog order."""
        return [algo.value for algo in self.selected_algorithm_options()]

    def selected_algorithm_options(self) -> List[AlgorithmOption]:
        chosen = self.selection.algorithms
        return [algo for algo in self.selection.available_algorithms() if algo.value in chosen]

    # ------------------------------------------------------------------
    # Form fields

    def set_email(self, email: str):
        email = email or ""
        if email == self.state.email:
            return
        self.state.email = email
        self.notify_observers("email_changed", {"email": email})

    def set_file(self, file_name: Optional[str], file_bytes: Optional[bytes] = None):
        self.state.file_name = file_name
        self.state.file_bytes = file_bytes
        self.notify_observers("file_changed", {"file_name": file_name})

    def clear_file(self):
        self.set_file(None, None)

    def set_check_field(self, name: str, value: str):
        if not hasattr(self.state.check, name):
            raise AttributeError(f"Unknown check field: {name}")
        setattr(self.state.check, name, value or "")
        self.notify_observers("check_field_changed", {"field": name, "value": value})

    # ------------------------------------------------------------------
    # Operation guard

    def start_operation(self, operation_name: str) -> bool:
        """
        Start an operation if no other operation is in progress.

        Returns:
            True if operation started successfully, False if another operation is in progress
        """
        if self.state.operation_in_progress:
            logger.warning(f"Cannot start '{operation_name}' - '{self.state.current_operation}' is already in progress")
            return False

        self.state.operation_in_progress = True
        self.state.current_operation = operation_name
        self.notify_observers("operation_started", {"operation": operation_name})
        logger.info(f"Started operation: {operation_name}")
        return True

    def end_operation(self):
        """End the current operation"""
        if self.state.operation_in_progress:
            operation_name = self.state.current_operation
            self.state.operation_in_progress = False
            self.state.current_operation = ""
            self.notify_observers("operation_ended", {"operation": operation_name})
            logger.info(f"Ended operation: {operation_name}")

    def is_operation_in_progress(self) -> bool:
        return self.state.operation_in_progress

    def get_current_operation(self) -> str:
        return self.state.current_operation
