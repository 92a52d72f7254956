"""
Utility modules for the GUI
"""
from .thread_pool import run_in_background, shutdown_thread_pool
from .error_boundary import with_error_boundary

__all__ = ['run_in_background', 'shutdown_thread_pool', 'with_error_boundary']
