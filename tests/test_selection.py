"""Tests for the assembly -> tissue -> algorithms selection cascade."""

from __future__ import annotations

import random

import pytest

from enhancer_genie.core.errors import InvalidSelection, SelectionInvariantError
from enhancer_genie.core.selection import (
    SelectionStateMachine,
    apply_algorithms,
    apply_assembly,
    apply_tissue,
)
from enhancer_genie.data.catalog import OptionCatalog
from enhancer_genie.data.models import SelectionState


def _assert_consistent(machine: SelectionStateMachine):
    state = machine.state
    if state.tissue:
        assert state.tissue in machine.catalog.get_assembly(state.assembly).tissue_ids
    else:
        assert not state.algorithms
    available = {algo.value for algo in machine.available_algorithms()}
    assert state.algorithms <= available


class TestSelectionStateMachine:
    """Transitions, errors and the UI-disable rule."""

    @pytest.fixture
    def machine(self, catalog: OptionCatalog) -> SelectionStateMachine:
        return SelectionStateMachine(catalog)

    def test_initial_state_is_empty(self, machine: SelectionStateMachine):
        assert machine.state == SelectionState()
        assert machine.state.is_empty
        assert machine.available_tissues() == ()
        assert machine.available_algorithms() == ()

    def test_disable_rule_follows_parent_levels(self, machine: SelectionStateMachine):
        assert machine.tissue_selector_disabled
        assert machine.algorithm_selector_disabled

        machine.select_assembly("GRCh38")
        assert not machine.tissue_selector_disabled
        assert machine.algorithm_selector_disabled

        machine.select_tissue("liver")
        assert not machine.algorithm_selector_disabled

    def test_full_cascade(self, machine: SelectionStateMachine):
        machine.select_assembly("GRCh38")
        machine.select_tissue("liver")
        machine.select_algorithms(["Distance", "eQTL"])

        assert machine.assembly == "GRCh38"
        assert machine.tissue == "liver"
        assert machine.algorithms == frozenset({"Distance", "eQTL"})
        assert [t.value for t in machine.available_tissues()] == ["liver", "heart"]

    def test_switching_to_assembly_without_tissue_clears_children(self, machine: SelectionStateMachine):
        machine.select_assembly("GRCh38")
        machine.select_tissue("heart")
        machine.select_algorithms(["Distance"])

        state = machine.select_assembly("GRCh37")

        assert state == SelectionState(assembly="GRCh37")

    def test_switching_assembly_keeps_tissue_present_in_both(self, machine: SelectionStateMachine):
        machine.select_assembly("GRCh38")
        machine.select_tissue("liver")
        machine.select_algorithms(["Distance"])

        state = machine.select_assembly("GRCh37")

        assert state.tissue == "liver"
        assert state.algorithms == frozenset({"Distance"})

    def test_switching_assembly_drops_algorithms_the_new_tissue_lacks(self, machine: SelectionStateMachine):
        machine.select_assembly("GRCh38")
        machine.select_tissue("liver")
        machine.select_algorithms(["HiC", "Distance"])

        state = machine.select_assembly("GRCh37")

        assert state.tissue == "liver"
        assert state.algorithms == frozenset()
        _assert_consistent(machine)

    def test_tissue_change_clears_unsupported_algorithms(self, machine: SelectionStateMachine):
        machine.select_assembly("GRCh38")
        machine.select_tissue("liver")
        machine.select_algorithms(["eQTL"])

        state = machine.select_tissue("heart")

        assert state.tissue == "heart"
        assert state.algorithms == frozenset()

    def test_tissue_change_keeps_supported_algorithms(self, machine: SelectionStateMachine):
        machine.select_assembly("GRCh38")
        machine.select_tissue("liver")
        machine.select_algorithms(["Distance"])

        state = machine.select_tissue("heart")

        assert state.algorithms == frozenset({"Distance"})

    def test_empty_algorithm_set_is_allowed(self, machine: SelectionStateMachine):
        machine.select_assembly("GRCh38")
        machine.select_tissue("liver")
        machine.select_algorithms(["Distance"])

        assert machine.select_algorithms([]).algorithms == frozenset()

    @pytest.mark.parametrize("call", [
        lambda m: m.select_assembly("hg99"),
        lambda m: m.select_tissue("liver"),
        lambda m: m.select_algorithms(["Distance"]),
    ])
    def test_invalid_transitions_from_empty_state(self, machine: SelectionStateMachine, call):
        with pytest.raises(InvalidSelection):
            call(machine)
        assert machine.state == SelectionState()

    def test_failed_transition_leaves_state_unchanged(self, machine: SelectionStateMachine):
        machine.select_assembly("GRCh37")
        machine.select_tissue("lung")
        machine.select_algorithms(["eQTL"])
        before = machine.state

        with pytest.raises(SelectionInvariantError):
            machine.select_tissue("heart")
        with pytest.raises(SelectionInvariantError):
            machine.select_algorithms(["eQTL", "Distance"])

        assert machine.state == before

    def test_reset(self, machine: SelectionStateMachine):
        machine.select_assembly("GRCh38")
        assert machine.reset() == SelectionState()


class TestPureTransitions:
    def test_transitions_do_not_mutate_input(self, catalog: OptionCatalog):
        start = SelectionState(assembly="GRCh38", tissue="liver", algorithms=frozenset({"HiC"}))

        after = apply_assembly(catalog, start, "GRCh37")

        assert start.algorithms == frozenset({"HiC"})
        assert after is not start

    def test_scenario_grch38_liver_to_assembly_without_liver(self):
        catalog = OptionCatalog.from_payload([
            {"assembly": "GRCh38", "tissues": [
                {"value": "liver", "supportedAlgorithms": [{"value": "Distance"}, {"value": "eQTL"}]},
            ]},
            {"assembly": "GRCh37", "tissues": [
                {"value": "lung", "supportedAlgorithms": [{"value": "eQTL"}]},
            ]},
        ])
        state = apply_assembly(catalog, SelectionState(), "GRCh38")
        state = apply_tissue(catalog, state, "liver")
        state = apply_algorithms(catalog, state, ["Distance"])

        state = apply_assembly(catalog, state, "GRCh37")

        assert state.tissue == ""
        assert state.algorithms == frozenset()


def test_random_sequences_keep_cascade_consistent(catalog: OptionCatalog):
    """Any mix of valid and invalid calls leaves a consistent selection."""
    rng = random.Random(1234)
    machine = SelectionStateMachine(catalog)
    assemblies = ["GRCh38", "GRCh37", "hg99"]
    tissues = ["liver", "heart", "lung", "brain"]
    algorithms = ["Distance", "eQTL", "HiC", "ABC"]

    for _ in range(500):
        choice = rng.randrange(3)
        try:
            if choice == 0:
                machine.select_assembly(rng.choice(assemblies))
            elif choice == 1:
                machine.select_tissue(rng.choice(tissues))
            else:
                machine.select_algorithms(rng.sample(algorithms, rng.randrange(3)))
        except InvalidSelection:
            pass
        _assert_consistent(machine)
