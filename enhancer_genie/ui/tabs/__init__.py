"""
Tab modules for the Enhancer Genie GUI
"""

from .upload_tab import UploadTab
from .check_tab import CheckTab
from .history_tab import HistoryTab

__all__ = ['UploadTab', 'CheckTab', 'HistoryTab']
