"""Account registration: local password rules, then ``POST register``."""

from __future__ import annotations

import logging
import re
from typing import TYPE_CHECKING, Callable, Dict, Optional

from ...core.errors import RegistrationError

if TYPE_CHECKING:  # pragma: no cover - import hints only
    from ...services.api_client import EnhancerApiClient

logger = logging.getLogger(__name__)

PASSWORD_CRITERIA = {
    "number": "Contains one number",
    "lowercase": "Contains one lowercase letter",
    "uppercase": "Contains one uppercase letter",
    "length": "At least 8 characters",
}


def validate_password(password: str) -> Dict[str, bool]:
    password = password or ""
    return {
        "length": len(password) >= 8,
        "lowercase": bool(re.search(r"[a-z]", password)),
        "uppercase": bool(re.search(r"[A-Z]", password)),
        "number": bool(re.search(r"[0-9]", password)),
    }


class RegistrationController:
    def __init__(self, api_client: "EnhancerApiClient", navigate: Optional[Callable[[str], None]] = None):
        self.api_client = api_client
        self._navigate = navigate or (lambda route: None)
        self.in_progress = False

    def register(self, username: str, password: str) -> None:
        """Raise ``RegistrationError`` with the message to show, or route to login."""
        if not all(validate_password(password).values()):
            raise RegistrationError("Password does not meet all requirements.")
        if self.in_progress:
            logger.debug("Registration already in progress")
            return

        self.in_progress = True
        try:
            self.api_client.register(username, password)
        finally:
            self.in_progress = False
        self._navigate("/login")
