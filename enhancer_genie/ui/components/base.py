"""
Base classes for GUI components
"""
import flet as ft
import logging
from abc import ABC, abstractmethod

logger = logging.getLogger(__name__)


class BaseComponent(ABC):
    """Base class for all GUI components"""

    def __init__(self, parent_gui=None):
        self.parent_gui = parent_gui
        self._component = None

    @abstractmethod
    def build(self) -> ft.Control:
        """Build and return the Flet control for this component"""
        pass

    @property
    def component(self) -> ft.Control:
        """Get the built component, building it if necessary"""
        if self._component is None:
            self._component = self.build()
        return self._component

    def safe_update(self):
        """Safely update the component if parent GUI allows it"""
        if self.parent_gui and hasattr(self.parent_gui, '_safe_page_update'):
            self.parent_gui._safe_page_update()
        elif self.parent_gui and hasattr(self.parent_gui, 'page'):
            try:
                self.parent_gui.page.update()
            except Exception as e:
                logger.warning(f"Failed to update page: {e}")


class BaseTab(BaseComponent):
    """Base class for tab implementations"""

    def __init__(self, parent_gui=None):
        super().__init__(parent_gui)
        self.tab_name = "Base Tab"
        self.tab_icon = ft.Icons.TAB

    @abstractmethod
    def get_tab_content(self) -> ft.Control:
        """Get the content for this tab"""
        pass

    def refresh(self):
        """Re-sync controls with application state."""

    def build(self) -> ft.Tab:
        """Build the tab with content"""
        return ft.Tab(
            text=self.tab_name,
            icon=self.tab_icon,
            content=self.get_tab_content()
        )
