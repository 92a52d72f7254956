"""
Key/value stores backing session persistence and the result history.

Every backend stores strings, like browser storage does; callers own the
encoding. Any backend failure is raised as ``PersistenceUnavailable`` so
the adapters above can degrade without knowing which backend is in use.

Backends:
- MemoryStore: plain dict, used in tests
- FletSessionStore: ``page.session``, lives as long as the browser session
- FletClientStore: ``page.client_storage``, the browser's durable storage
"""
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from ..core.errors import PersistenceUnavailable


class KeyValueStore(ABC):
    """Minimal string store interface."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the stored value or None when the key is absent."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        pass

    def contains(self, key: str) -> bool:
        return self.get(key) is not None


class MemoryStore(KeyValueStore):
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def contains(self, key: str) -> bool:
        return key in self._data

    def keys(self) -> List[str]:
        return list(self._data)


class _PrefixedFletStore(KeyValueStore):
    """Shared plumbing for the two Flet page stores."""

    backend_name = ""

    def __init__(self, page, prefix: str = ""):
        self.page = page
        self.prefix = prefix

    @abstractmethod
    def _backend(self):
        """The page object holding the keys."""

    def _key(self, key: str) -> str:
        return f"{self.prefix}{key}"

    def get(self, key: str) -> Optional[str]:
        try:
            value = self._backend().get(self._key(key))
        except Exception as exc:
            raise PersistenceUnavailable(f"{self.backend_name} read failed for {key!r}: {exc}") from exc
        return None if value is None else str(value)

    def set(self, key: str, value: str) -> None:
        try:
            self._backend().set(self._key(key), value)
        except Exception as exc:
            raise PersistenceUnavailable(f"{self.backend_name} write failed for {key!r}: {exc}") from exc

    def remove(self, key: str) -> None:
        try:
            backend = self._backend()
            if backend.contains_key(self._key(key)):
                backend.remove(self._key(key))
        except Exception as exc:
            raise PersistenceUnavailable(f"{self.backend_name} remove failed for {key!r}: {exc}") from exc

    def contains(self, key: str) -> bool:
        try:
            return bool(self._backend().contains_key(self._key(key)))
        except Exception as exc:
            raise PersistenceUnavailable(f"{self.backend_name} lookup failed for {key!r}: {exc}") from exc


class FletSessionStore(_PrefixedFletStore):
    """Per browser session store (``page.session``)."""

    backend_name = "session"

    def _backend(self):
        session = getattr(self.page, "session", None)
        if session is None:
            raise PersistenceUnavailable("page.session is not available")
        return session


class FletClientStore(_PrefixedFletStore):
    """Durable per browser store (``page.client_storage``)."""

    backend_name = "client_storage"

    def _backend(self):
        storage = getattr(self.page, "client_storage", None)
        if storage is None:
            raise PersistenceUnavailable("page.client_storage is not available")
        return storage

