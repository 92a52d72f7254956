"""Mirror of the upload form into the per-browser-session store.

Every selection or email change is written through immediately, one
JSON-encoded key per field. On page load ``restore`` replays the saved
values through the selection cascade, so a stale snapshot can never put
the cascade into an invalid state. ``end_session`` drops all keys when the
browser session ends.
"""
from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any, Dict, Optional

from ...core.errors import InvalidSelection, PersistenceUnavailable
from ...services.storage import KeyValueStore

if TYPE_CHECKING:  # pragma: no cover - import hints only
    from .state_manager import StateManager

logger = logging.getLogger(__name__)

ASSEMBLY_KEY = "assembly"
TISSUE_KEY = "tissue"
ALGORITHMS_KEY = "algorithms"
EMAIL_KEY = "email"
SESSION_KEYS = (ASSEMBLY_KEY, TISSUE_KEY, ALGORITHMS_KEY, EMAIL_KEY)


def _option_value(value: Any) -> Optional[str]:
    """Accept both plain ids and ``{"label", "value"}`` option objects."""
    if isinstance(value, dict):
        value = value.get("value")
    if isinstance(value, str) and value:
        return value
    return None


class SessionPersistenceAdapter:
    """Write-through persistence of assembly, tissue, algorithms and email."""

    def __init__(self, state_manager: "StateManager", store: KeyValueStore):
        self.state_manager = state_manager
        self.store = store
        # Last encoded value known to be in the store per key (None = absent)
        self._written: Dict[str, Optional[str]] = {}
        self._restoring = False
        self._attached = False

    def attach(self) -> None:
        if not self._attached:
            self.state_manager.add_observer(self._on_state_event)
            self._attached = True

    # ------------------------------------------------------------------
    # Writes

    def _on_state_event(self, event_type: str, data: dict) -> None:
        if self._restoring:
            return
        if event_type == "selection_changed":
            self._write_selection()
        elif event_type == "email_changed":
            self._write(EMAIL_KEY, data.get("email") or None)

    def _write_selection(self) -> None:
        selection = self.state_manager.selection.state
        self._write(ASSEMBLY_KEY, selection.assembly or None)
        self._write(TISSUE_KEY, selection.tissue or None)
        self._write(ALGORITHMS_KEY, self.state_manager.ordered_algorithms() or None)

    def _write(self, key: str, value: Any) -> None:
        encoded = None if value is None else json.dumps(value)
        if key in self._written and self._written[key] == encoded:
            return
        try:
            if encoded is None:
                self.store.remove(key)
            else:
                self.store.set(key, encoded)
            self._written[key] = encoded
        except PersistenceUnavailable as exc:
            logger.warning(f"Session value {key!r} not saved: {exc}")

    # ------------------------------------------------------------------
    # Restore

    def _read(self, key: str) -> Any:
        try:
            raw = self.store.get(key)
        except PersistenceUnavailable as exc:
            logger.warning(f"Session value {key!r} not restored: {exc}")
            return None
        self._written[key] = raw
        if raw is None:
            return None
        try:
            return json.loads(raw)
        except ValueError:
            # Older clients wrote the email unencoded
            return raw

    def restore(self) -> None:
        """Replay the saved snapshot through the selection cascade."""
        sm = self.state_manager
        self._restoring = True
        try:
            assembly_ok = tissue_ok = False

            assembly = _option_value(self._read(ASSEMBLY_KEY))
            if assembly and sm.catalog.has_assembly(assembly):
                try:
                    sm.select_assembly(assembly)
                    assembly_ok = True
                except InvalidSelection as exc:
                    logger.info(f"Saved assembly not restored: {exc}")
            elif assembly:
                logger.info("Saved assembly %s no longer offered", assembly)

            tissue = _option_value(self._read(TISSUE_KEY)) if assembly_ok else None
            if tissue:
                try:
                    sm.select_tissue(tissue)
                    tissue_ok = True
                except InvalidSelection as exc:
                    logger.info(f"Saved tissue not restored: {exc}")

            saved_algorithms = self._read(ALGORITHMS_KEY) if tissue_ok else None
            if tissue_ok and isinstance(saved_algorithms, list):
                supported = {algo.value for algo in sm.selection.available_algorithms()}
                requested = [_option_value(item) for item in saved_algorithms]
                valid = [algo for algo in requested if algo in supported]
                if len(valid) != len(saved_algorithms):
                    logger.info("Dropped stale saved algorithms: %s",
                                [a for a in requested if a not in supported])
                sm.select_algorithms(valid)

            email = self._read(EMAIL_KEY)
            if isinstance(email, str):
                sm.set_email(email)
        finally:
            self._restoring = False

        # Bring the store in line with whatever survived validation
        self._write_selection()
        self._write(EMAIL_KEY, sm.state.email or None)
        logger.info("Session restored: %s", sm.selection.state)

    # ------------------------------------------------------------------
    # Teardown

    def end_session(self) -> None:
        """Drop every persisted key. Called on the browser-session end signal."""
        for key in SESSION_KEYS:
            try:
                self.store.remove(key)
            except PersistenceUnavailable as exc:
                logger.warning(f"Session value {key!r} not cleared: {exc}")
        self._written.clear()
        logger.info("Session storage cleared")

    def snapshot(self) -> Dict[str, Any]:
        """Decoded view of what is currently persisted."""
        result: Dict[str, Any] = {}
        for key in SESSION_KEYS:
            try:
                raw = self.store.get(key)
            except PersistenceUnavailable:
                raw = None
            if raw is None:
                result[key] = None
                continue
            try:
                result[key] = json.loads(raw)
            except ValueError:
                result[key] = raw
        return result
