from __future__ import annotations

from concurrent.futures import Future
from datetime import datetime, timedelta, timezone
from typing import Callable

import pytest

from enhancer_genie.data.catalog import OptionCatalog
from enhancer_genie.services.storage import MemoryStore
from enhancer_genie.ui.core.state_manager import StateManager


CATALOG_PAYLOAD = [
    {
        "assembly": "GRCh38",
        "tissues": [
            {
                "value": "liver",
                "label": "Liver",
                "supportedAlgorithms": [
                    {"value": "Distance", "label": "Distance"},
                    {"value": "eQTL", "label": "eQTL"},
                    {"value": "HiC", "label": "Hi-C"},
                ],
            },
            {
                "value": "heart",
                "label": "Heart",
                "supportedAlgorithms": [{"value": "Distance", "label": "Distance"}],
            },
        ],
    },
    {
        "assembly": "GRCh37",
        "tissues": [
            {
                "value": "liver",
                "label": "Liver",
                "supportedAlgorithms": [
                    {"value": "Distance", "label": "Distance"},
                    {"value": "eQTL", "label": "eQTL"},
                ],
            },
            {
                "value": "lung",
                "label": "Lung",
                "supportedAlgorithms": [{"value": "eQTL", "label": "eQTL"}],
            },
        ],
    },
]


@pytest.fixture
def catalog() -> OptionCatalog:
    """Two assemblies sharing the ``liver`` tissue id with different algorithm sets."""
    return OptionCatalog.from_payload(CATALOG_PAYLOAD)


@pytest.fixture
def state_manager(catalog: OptionCatalog) -> StateManager:
    return StateManager(catalog)


@pytest.fixture
def session_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def durable_store() -> MemoryStore:
    return MemoryStore()


class FakeClock:
    """Clock for the history cache that advances one second per call."""

    def __init__(self, start: datetime = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)):
        self.current = start

    def __call__(self) -> datetime:
        value = self.current
        self.current = value + timedelta(seconds=1)
        return value


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


def run_now(call: Callable) -> Future:
    """Runner that executes the call inline and returns a finished Future."""
    future: Future = Future()
    try:
        future.set_result(call())
    except Exception as exc:
        future.set_exception(exc)
    return future


class DeferredRunner:
    """Runner that keeps calls pending until ``finish`` is called."""

    def __init__(self):
        self.pending = []

    def __call__(self, call: Callable) -> Future:
        future: Future = Future()
        self.pending.append((call, future))
        return future

    def finish(self, index: int = 0):
        call, future = self.pending.pop(index)
        if future.cancelled():
            return future
        try:
            future.set_result(call())
        except Exception as exc:
            future.set_exception(exc)
        return future


@pytest.fixture
def deferred_runner() -> DeferredRunner:
    return DeferredRunner()
