"""Services: remote API, storage backends, history and authentication."""

from .api_client import EnhancerApiClient
from .auth import AuthState
from .history_cache import HistoryCache, HistoryView
from .storage import (
    KeyValueStore,
    MemoryStore,
    FletSessionStore,
    FletClientStore,
)

__all__ = [
    "EnhancerApiClient",
    "AuthState",
    "HistoryCache",
    "HistoryView",
    "KeyValueStore",
    "MemoryStore",
    "FletSessionStore",
    "FletClientStore",
]
