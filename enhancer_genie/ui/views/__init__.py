"""
Routed views (pages other than the main tabs)
"""

from .register_view import RegisterView
from .results_view import ResultsView, fingerprint_from_route
from .login_view import LoginView

__all__ = ['RegisterView', 'ResultsView', 'LoginView', 'fingerprint_from_route']
