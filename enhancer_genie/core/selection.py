"""Assembly -> tissue -> algorithm selection cascade.

Each transition is a pure function from (catalog, state, change) to a new
``SelectionState``. ``SelectionStateMachine`` wraps them with the current
state so callers see a single object, and only replaces its state once a
transition has fully succeeded.

Invariants after every transition:

* ``tissue`` is empty or belongs to the selected assembly.
* ``algorithms`` is a subset of the selected tissue's supported algorithms.
"""
from __future__ import annotations

import logging
from typing import Iterable, Tuple

from ..data.catalog import OptionCatalog
from ..data.models import AlgorithmOption, SelectionState, TissueOption
from .errors import InvalidSelection

logger = logging.getLogger(__name__)


def apply_assembly(catalog: OptionCatalog, state: SelectionState, assembly_id: str) -> SelectionState:
    option = catalog.get_assembly(assembly_id)
    if option is None:
        raise InvalidSelection(f"Unknown assembly: {assembly_id!r}")

    tissue = option.get_tissue(state.tissue) if state.tissue else None
    if tissue is None:
        return SelectionState(assembly=assembly_id)

    # Same tissue id may carry a different algorithm set under another assembly
    if not all(tissue.supports(algo) for algo in state.algorithms):
        return state.replace(assembly=assembly_id, algorithms=frozenset())
    return state.replace(assembly=assembly_id)


def apply_tissue(catalog: OptionCatalog, state: SelectionState, tissue_id: str) -> SelectionState:
    if not state.assembly:
        raise InvalidSelection("Select an assembly before choosing a tissue")
    tissue = catalog.get_tissue(state.assembly, tissue_id)
    if tissue is None:
        raise InvalidSelection(f"Tissue {tissue_id!r} is not available for {state.assembly}")

    if all(tissue.supports(algo) for algo in state.algorithms):
        return state.replace(tissue=tissue_id)
    return state.replace(tissue=tissue_id, algorithms=frozenset())


def apply_algorithms(catalog: OptionCatalog, state: SelectionState, algorithm_ids: Iterable[str]) -> SelectionState:
    if not state.tissue:
        raise InvalidSelection("Select a tissue before choosing algorithms")
    tissue = catalog.get_tissue(state.assembly, state.tissue)
    if tissue is None:
        raise InvalidSelection(f"Tissue {state.tissue!r} is not available for {state.assembly}")

    requested = frozenset(algorithm_ids)
    unsupported = sorted(algo for algo in requested if not tissue.supports(algo))
    if unsupported:
        raise InvalidSelection(
            f"Algorithm(s) {', '.join(unsupported)} not supported for tissue {state.tissue!r}"
        )
    return state.replace(algorithms=requested)


class SelectionStateMachine:
    """Holds the current selection and enforces the cascade."""

    def __init__(self, catalog: OptionCatalog, state: SelectionState = SelectionState()):
        self.catalog = catalog
        self._state = state

    @property
    def state(self) -> SelectionState:
        return self._state

    @property
    def assembly(self) -> str:
        return self._state.assembly

    @property
    def tissue(self) -> str:
        return self._state.tissue

    @property
    def algorithms(self) -> frozenset:
        return self._state.algorithms

    def select_assembly(self, assembly_id: str) -> SelectionState:
        self._state = apply_assembly(self.catalog, self._state, assembly_id)
        logger.debug("Assembly selected: %s -> %s", assembly_id, self._state)
        return self._state

    def select_tissue(self, tissue_id: str) -> SelectionState:
        self._state = apply_tissue(self.catalog, self._state, tissue_id)
        logger.debug("Tissue selected: %s -> %s", tissue_id, self._state)
        return self._state

    def select_algorithms(self, algorithm_ids: Iterable[str]) -> SelectionState:
        self._state = apply_algorithms(self.catalog, self._state, algorithm_ids)
        logger.debug("Algorithms selected: %s", sorted(self._state.algorithms))
        return self._state

    def reset(self) -> SelectionState:
        self._state = SelectionState()
        return self._state

    def available_tissues(self) -> Tuple[TissueOption, ...]:
        if not self._state.assembly:
            return ()
        return self.catalog.tissues_for(self._state.assembly)

    def available_algorithms(self) -> Tuple[AlgorithmOption, ...]:
        if not self._state.tissue:
            return ()
        return self.catalog.algorithms_for(self._state.assembly, self._state.tissue)

    # UI-disable rule
    @property
    def tissue_selector_disabled(self) -> bool:
        return not self._state.assembly

    @property
    def algorithm_selector_disabled(self) -> bool:
        return not self._state.tissue
