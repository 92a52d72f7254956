"""
Component modules for the GUI
"""
from .base import BaseComponent, BaseTab
from .dialogs import ConfirmDialog, MessageDialog

__all__ = ['BaseComponent', 'BaseTab', 'ConfirmDialog', 'MessageDialog']
