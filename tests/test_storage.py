"""Tests for the key/value stores and the stored authentication state."""

from __future__ import annotations

import json
from unittest.mock import MagicMock

import pytest

from enhancer_genie.core.errors import PersistenceUnavailable
from enhancer_genie.services.auth import AuthState
from enhancer_genie.services.storage import FletClientStore, FletSessionStore, MemoryStore, _PrefixedFletStore


class TestMemoryStore:
    def test_roundtrip_and_remove(self):
        store = MemoryStore()
        store.set("a", "1")
        assert store.get("a") == "1"
        assert store.contains("a")
        store.remove("a")
        store.remove("a")
        assert store.get("a") is None
        assert store.keys() == []


class TestFletStores:
    @pytest.fixture
    def page(self) -> MagicMock:
        page = MagicMock()
        data = {}
        page.client_storage.get.side_effect = data.get
        page.client_storage.set.side_effect = data.__setitem__
        page.client_storage.contains_key.side_effect = lambda key: key in data
        page.client_storage.remove.side_effect = data.pop
        page._data = data
        return page

    def test_client_store_prefixes_keys(self, page):
        store = FletClientStore(page, prefix="enhancer_genie.")
        store.set("history", "abc_2024-01-01 00:00:00")

        assert page._data == {"enhancer_genie.history": "abc_2024-01-01 00:00:00"}
        assert store.get("history") == "abc_2024-01-01 00:00:00"
        assert store.contains("history")

        store.remove("history")
        store.remove("history")
        assert page._data == {}

    def test_session_store_uses_page_session(self):
        page = MagicMock()
        page.session.get.return_value = '"GRCh38"'
        store = FletSessionStore(page)

        assert store.get("assembly") == '"GRCh38"'
        page.session.get.assert_called_once_with("assembly")

    def test_backend_errors_become_persistence_unavailable(self, page):
        page.client_storage.set.side_effect = RuntimeError("quota exceeded")
        store = FletClientStore(page)

        with pytest.raises(PersistenceUnavailable):
            store.set("history", "x")

    def test_missing_backend(self):
        page = MagicMock()
        page.session = None
        with pytest.raises(PersistenceUnavailable):
            FletSessionStore(page).get("email")

    def test_page_store_needs_a_backend(self):
        class NoBackend(_PrefixedFletStore):
            pass

        with pytest.raises(TypeError):
            NoBackend(MagicMock())


class TestAuthState:
    def test_loads_stored_user(self):
        store = MemoryStore({"user": json.dumps({"username": "alice", "accessToken": "t0k"})})

        auth = AuthState(store)

        assert auth.is_authenticated
        assert auth.username == "alice"
        assert auth.headers() == {"Authorization": "Bearer t0k"}

    def test_anonymous_has_no_header(self):
        auth = AuthState(MemoryStore())
        assert not auth.is_authenticated
        assert auth.headers() == {}

    def test_set_and_clear(self):
        store = MemoryStore()
        auth = AuthState(store)

        auth.set("bob", "abc")
        assert json.loads(store.get("user")) == {"username": "bob", "accessToken": "abc"}

        auth.clear()
        assert not auth.is_authenticated
        assert store.get("user") is None

    def test_unreadable_entry_is_ignored(self):
        auth = AuthState(MemoryStore({"user": "not json"}))
        assert not auth.is_authenticated
