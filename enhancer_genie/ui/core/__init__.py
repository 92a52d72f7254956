"""
Core GUI modules for Enhancer Genie
"""

from .state_manager import StateManager, AppState
from .session_persistence import SessionPersistenceAdapter
from .submission_coordinator import SubmissionCoordinator, SubmissionPhase, Workflow
from .registration_controller import RegistrationController

__all__ = [
    'StateManager',
    'AppState',
    'SessionPersistenceAdapter',
    'SubmissionCoordinator',
    'SubmissionPhase',
    'Workflow',
    'RegistrationController',
]
