"""Exception taxonomy shared by the selection, persistence and submission layers."""

from __future__ import annotations

from typing import Optional


class EnhancerGenieError(Exception):
    """Base class for all application errors."""


class ValidationError(EnhancerGenieError):
    """A required field is missing; the request never leaves the client."""

    def __init__(self, message: str, missing: Optional[list] = None):
        super().__init__(message)
        self.missing = list(missing or [])


class SelectionInvariantError(EnhancerGenieError):
    """A selection transition would break the assembly/tissue/algorithm cascade."""


# Name used by the selection API
InvalidSelection = SelectionInvariantError


class SessionExpired(EnhancerGenieError):
    """The API rejected the bearer token."""


class RemoteFailure(EnhancerGenieError):
    """Any other API failure. ``message`` is shown to the user verbatim."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class PersistenceUnavailable(EnhancerGenieError):
    """The session or durable store could not be read or written."""


class CatalogError(EnhancerGenieError):
    """The option catalog payload or table is malformed."""


class RegistrationError(EnhancerGenieError):
    """Registration was refused locally or by the API."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
