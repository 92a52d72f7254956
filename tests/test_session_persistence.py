"""Tests for the write-through session persistence adapter."""

from __future__ import annotations

import json

import pytest

from enhancer_genie.core.errors import PersistenceUnavailable
from enhancer_genie.data.catalog import OptionCatalog
from enhancer_genie.services.storage import MemoryStore
from enhancer_genie.ui.core.session_persistence import SESSION_KEYS, SessionPersistenceAdapter
from enhancer_genie.ui.core.state_manager import StateManager


class CountingStore(MemoryStore):
    """MemoryStore that records every mutating call."""

    def __init__(self, initial=None):
        super().__init__(initial)
        self.writes = []

    def set(self, key, value):
        self.writes.append(("set", key, value))
        super().set(key, value)

    def remove(self, key):
        self.writes.append(("remove", key))
        super().remove(key)


class BrokenStore(MemoryStore):
    def get(self, key):
        raise PersistenceUnavailable("quota exceeded")

    def set(self, key, value):
        raise PersistenceUnavailable("quota exceeded")

    def remove(self, key):
        raise PersistenceUnavailable("quota exceeded")


def _snapshot(**values) -> dict:
    return {key: json.dumps(value) for key, value in values.items()}


def _adapter(catalog: OptionCatalog, store) -> SessionPersistenceAdapter:
    adapter = SessionPersistenceAdapter(StateManager(catalog), store)
    adapter.attach()
    return adapter


class TestWriteThrough:
    def test_each_change_is_written_immediately(self, catalog, session_store):
        adapter = _adapter(catalog, session_store)
        sm = adapter.state_manager

        sm.select_assembly("GRCh38")
        assert json.loads(session_store.get("assembly")) == "GRCh38"

        sm.select_tissue("liver")
        sm.select_algorithms(["eQTL", "Distance"])
        assert json.loads(session_store.get("tissue")) == "liver"
        # Catalog order, not click order
        assert json.loads(session_store.get("algorithms")) == ["Distance", "eQTL"]

        sm.set_email("me@example.org")
        assert json.loads(session_store.get("email")) == "me@example.org"

    def test_cleared_fields_are_removed(self, catalog, session_store):
        adapter = _adapter(catalog, session_store)
        sm = adapter.state_manager
        sm.select_assembly("GRCh38")
        sm.select_tissue("heart")
        sm.select_algorithms(["Distance"])

        sm.select_assembly("GRCh37")

        assert not session_store.contains("tissue")
        assert not session_store.contains("algorithms")
        assert json.loads(session_store.get("assembly")) == "GRCh37"

    def test_storage_failure_does_not_block_selection(self, catalog):
        adapter = _adapter(catalog, BrokenStore())

        adapter.state_manager.select_assembly("GRCh38")

        assert adapter.state_manager.selection.assembly == "GRCh38"


class TestRestore:
    def test_restores_full_snapshot(self, catalog):
        store = MemoryStore(_snapshot(assembly="GRCh38", tissue="liver",
                                      algorithms=["Distance"], email="a@b.c"))
        adapter = _adapter(catalog, store)

        adapter.restore()

        selection = adapter.state_manager.selection
        assert selection.assembly == "GRCh38"
        assert selection.tissue == "liver"
        assert selection.algorithms == frozenset({"Distance"})
        assert adapter.state_manager.state.email == "a@b.c"

    def test_unknown_tissue_restores_empty_children(self, catalog):
        store = MemoryStore(_snapshot(assembly="GRCh37", tissue="heart", algorithms=["Distance"]))
        adapter = _adapter(catalog, store)

        adapter.restore()

        selection = adapter.state_manager.selection
        assert selection.assembly == "GRCh37"
        assert selection.tissue == ""
        assert selection.algorithms == frozenset()
        # Stale values are dropped from the store as well
        assert not store.contains("tissue")
        assert not store.contains("algorithms")

    def test_stale_algorithms_are_filtered(self, catalog):
        store = MemoryStore(_snapshot(assembly="GRCh37", tissue="liver", algorithms=["HiC", "eQTL"]))
        adapter = _adapter(catalog, store)

        adapter.restore()

        assert adapter.state_manager.selection.algorithms == frozenset({"eQTL"})
        assert json.loads(store.get("algorithms")) == ["eQTL"]

    def test_unknown_assembly_skips_selection_but_restores_email(self, catalog):
        store = MemoryStore(_snapshot(assembly="hg99", tissue="liver", email="x@y.z"))
        adapter = _adapter(catalog, store)

        adapter.restore()

        assert adapter.state_manager.selection.state.is_empty
        assert adapter.state_manager.state.email == "x@y.z"

    def test_legacy_option_objects_and_raw_email(self, catalog):
        store = MemoryStore({
            "assembly": json.dumps({"label": "Human GRCh38/hg38", "value": "GRCh38"}),
            "tissue": json.dumps({"label": "Liver", "value": "liver"}),
            "algorithms": json.dumps([{"label": "eQTL", "value": "eQTL"}]),
            "email": "plain@example.org",
        })
        adapter = _adapter(catalog, store)

        adapter.restore()

        selection = adapter.state_manager.selection
        assert (selection.assembly, selection.tissue) == ("GRCh38", "liver")
        assert selection.algorithms == frozenset({"eQTL"})
        assert adapter.state_manager.state.email == "plain@example.org"

    def test_restore_is_idempotent(self, catalog):
        store = CountingStore()
        adapter = _adapter(catalog, store)
        sm = adapter.state_manager
        sm.select_assembly("GRCh38")
        sm.select_tissue("liver")
        sm.select_algorithms(["Distance"])
        sm.set_email("a@b.c")
        before = dict(store._data)
        store.writes.clear()
        events = []
        sm.add_observer(lambda event, data: events.append(event))

        adapter.restore()

        assert dict(store._data) == before
        assert store.writes == []
        assert "selection_changed" not in events

    def test_unavailable_store_restores_nothing_without_raising(self, catalog):
        adapter = _adapter(catalog, BrokenStore())

        adapter.restore()

        assert adapter.state_manager.selection.state.is_empty


class TestEndSession:
    def test_end_session_clears_every_key(self, catalog, session_store):
        adapter = _adapter(catalog, session_store)
        sm = adapter.state_manager
        sm.select_assembly("GRCh38")
        sm.select_tissue("liver")
        sm.select_algorithms(["Distance"])
        sm.set_email("a@b.c")

        adapter.end_session()

        assert all(not session_store.contains(key) for key in SESSION_KEYS)
        assert adapter.snapshot() == {key: None for key in SESSION_KEYS}

    def test_end_session_tolerates_broken_store(self, catalog):
        adapter = _adapter(catalog, BrokenStore())
        adapter.end_session()

    @pytest.mark.parametrize("email", ["", "someone@example.org"])
    def test_snapshot_reflects_store(self, catalog, session_store, email):
        adapter = _adapter(catalog, session_store)
        adapter.state_manager.select_assembly("GRCh38")
        adapter.state_manager.set_email(email)

        snapshot = adapter.snapshot()

        assert snapshot["assembly"] == "GRCh38"
        assert (snapshot["email"] or "") == email
