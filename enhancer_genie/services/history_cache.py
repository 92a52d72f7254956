"""
Local history of completed analyses for anonymous users.

Stored under a single durable key as ``<fingerprint>_<YYYY-MM-DD HH:MM:SS>``
items joined by ``,`` (timestamps in UTC). This is the format earlier
versions of the client wrote to browser storage, so existing histories keep
loading.

At most one entry exists per fingerprint; recording a fingerprint again moves
it to the end with a fresh timestamp. Storage problems are logged and never
reach the caller.
"""
import logging
from datetime import datetime, timezone
from typing import Callable, Iterator, List, Optional

from ..core.errors import PersistenceUnavailable
from ..data.models import HistoryEntry
from .storage import KeyValueStore

logger = logging.getLogger(__name__)

ENTRY_SEPARATOR = ","
FIELD_SEPARATOR = "_"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_history(raw: Optional[str]) -> Iterator[HistoryEntry]:
    """Yield entries from the stored string, skipping unreadable items."""
    if not raw:
        return
    for item in raw.split(ENTRY_SEPARATOR):
        item = item.strip()
        if not item:
            continue
        # Timestamps never contain the field separator, fingerprints might
        fingerprint, sep, timestamp = item.rpartition(FIELD_SEPARATOR)
        if not sep or not fingerprint:
            logger.warning("Skipping unreadable history item: %r", item)
            continue
        yield HistoryEntry(fingerprint=fingerprint, timestamp=timestamp)


def serialize_history(entries: List[HistoryEntry]) -> str:
    return ENTRY_SEPARATOR.join(f"{e.fingerprint}{FIELD_SEPARATOR}{e.timestamp}" for e in entries)


class HistoryView:
    """Restartable view over the stored history, oldest first.

    Each iteration re-reads the store, so the view always reflects the
    latest recorded entries.
    """

    def __init__(self, cache: "HistoryCache"):
        self._cache = cache

    def __iter__(self) -> Iterator[HistoryEntry]:
        return parse_history(self._cache._read_raw())

    def __len__(self) -> int:
        return sum(1 for _ in self)

    def __bool__(self) -> bool:
        return any(True for _ in self)


class HistoryCache:
    """Ordered, deduplicated log of (fingerprint, timestamp) pairs."""

    def __init__(self, store: KeyValueStore, key: str = "history",
                 clock: Optional[Callable[[], datetime]] = None):
        self.store = store
        self.key = key
        self._clock = clock or _utc_now

    def _read_raw(self) -> Optional[str]:
        try:
            return self.store.get(self.key)
        except PersistenceUnavailable as exc:
            logger.warning(f"History unavailable: {exc}")
            return None

    def record(self, fingerprint: str) -> Optional[HistoryEntry]:
        """Upsert ``fingerprint`` at the end of the history.

        Returns the new entry, or None when nothing could be recorded.
        """
        fingerprint = (fingerprint or "").strip()
        if not fingerprint or ENTRY_SEPARATOR in fingerprint:
            logger.warning("Not recording invalid fingerprint: %r", fingerprint)
            return None

        entry = HistoryEntry(fingerprint=fingerprint, timestamp=self._clock().strftime(TIMESTAMP_FORMAT))
        try:
            entries = [e for e in parse_history(self.store.get(self.key)) if e.fingerprint != fingerprint]
            entries.append(entry)
            self.store.set(self.key, serialize_history(entries))
        except PersistenceUnavailable as exc:
            logger.warning(f"Could not record {fingerprint} in history: {exc}")
            return None

        logger.info("History updated with %s (%d entries)", fingerprint, len(entries))
        return entry

    def list(self) -> HistoryView:
        return HistoryView(self)
