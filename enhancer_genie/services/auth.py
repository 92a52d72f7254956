"""Authentication state handed over by the login provider."""
import json
import logging
from typing import Optional

from ..core.errors import PersistenceUnavailable
from .storage import KeyValueStore

logger = logging.getLogger(__name__)


class AuthState:
    """Bearer token and username, mirrored in the durable ``user`` key.

    The login flow itself lives outside this client; it stores
    ``{"username": ..., "accessToken": ...}`` under the key and this class
    picks it up.
    """

    def __init__(self, store: KeyValueStore, key: str = "user"):
        self.store = store
        self.key = key
        self.username: Optional[str] = None
        self.token: Optional[str] = None
        self.load()

    def load(self) -> None:
        try:
            raw = self.store.get(self.key)
        except PersistenceUnavailable as exc:
            logger.warning(f"Could not read stored user: {exc}")
            return
        if not raw:
            return
        try:
            data = json.loads(raw)
            self.username = data.get("username")
            self.token = data.get("accessToken")
        except (ValueError, AttributeError):
            logger.warning("Ignoring unreadable stored user entry")

    def set(self, username: str, token: str) -> None:
        self.username = username
        self.token = token
        try:
            self.store.set(self.key, json.dumps({"username": username, "accessToken": token}))
        except PersistenceUnavailable as exc:
            logger.warning(f"Could not persist user: {exc}")

    def clear(self) -> None:
        self.username = None
        self.token = None
        try:
            self.store.remove(self.key)
        except PersistenceUnavailable as exc:
            logger.warning(f"Could not remove stored user: {exc}")
        logger.info("Authentication state cleared")

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    def headers(self) -> dict:
        """Authorization header when a token is held, else nothing."""
        if self.token:
            return {"Authorization": f"Bearer {self.token}"}
        return {}
