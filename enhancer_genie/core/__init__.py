"""Core, UI independent logic for Enhancer Genie.

The selection cascade lives in ``core.selection``; it depends on the data
layer, so it is not imported here.
"""

from .errors import (
    EnhancerGenieError,
    ValidationError,
    SelectionInvariantError,
    InvalidSelection,
    SessionExpired,
    RemoteFailure,
    PersistenceUnavailable,
    CatalogError,
    RegistrationError,
)

__all__ = [
    "EnhancerGenieError",
    "ValidationError",
    "SelectionInvariantError",
    "InvalidSelection",
    "SessionExpired",
    "RemoteFailure",
    "PersistenceUnavailable",
    "CatalogError",
    "RegistrationError",
]
