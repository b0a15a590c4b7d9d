# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""Tests for the generic phase StateMachine: edges, guards, callbacks, history."""

import pytest

from stealth.simulation.state_machine import InvalidTransitionError, State, StateMachine


def make_machine():
    sm = StateMachine("setup")
    for name in ("setup", "playing", "paused", "won"):
        sm.add_state(State(name))
    sm.add_transition("setup", "playing")
    sm.add_transition("playing", "paused")
    sm.add_transition("paused", "playing")
    sm.add_transition("playing", "won")
    return sm


class TestTransitions:

    @pytest.mark.unit
    def test_initial_state(self):
        sm = make_machine()
        assert sm.current_state == "setup"
        assert sm.history == []

    @pytest.mark.unit
    def test_allowed_transition(self):
        sm = make_machine()
        sm.transition("playing")
        assert sm.current_state == "playing"

    @pytest.mark.unit
    def test_missing_edge_raises(self):
        sm = make_machine()
        with pytest.raises(InvalidTransitionError) as exc:
            sm.transition("won")
        assert exc.value.from_state == "setup"
        assert exc.value.to_state == "won"
        assert sm.current_state == "setup"

    @pytest.mark.unit
    def test_end_state_has_no_way_out(self):
        sm = make_machine()
        sm.transition("playing")
        sm.transition("won")
        assert not sm.can_transition("playing")
        assert not sm.can_transition("paused")

    @pytest.mark.unit
    def test_force_state_ignores_edges(self):
        sm = make_machine()
        sm.transition("playing")
        sm.transition("won")
        sm.force_state("playing")
        assert sm.current_state == "playing"

    @pytest.mark.unit
    def test_force_unknown_state(self):
        with pytest.raises(ValueError):
            make_machine().force_state("nowhere")

    @pytest.mark.unit
    def test_multiple_sources(self):
        sm = StateMachine("a")
        for name in "abc":
            sm.add_state(State(name))
        sm.add_transition(["a", "b"], "c")
        assert sm.can_transition("c")
        sm.force_state("b")
        assert sm.can_transition("c")


class TestGuardsAndCallbacks:

    @pytest.mark.unit
    def test_guard_blocks_transition(self):
        sm = StateMachine("a")
        sm.add_state(State("a"))
        sm.add_state(State("b"))
        sm.add_transition("a", "b", guard=lambda ctx: ctx.get("ready", False))
        assert not sm.can_transition("b")
        with pytest.raises(InvalidTransitionError):
            sm.transition("b")
        sm.transition("b", {"ready": True})
        assert sm.current_state == "b"

    @pytest.mark.unit
    def test_enter_and_exit_called_in_order(self):
        calls = []
        sm = StateMachine("a")
        sm.add_state(State("a", on_exit=lambda ctx: calls.append("exit a")))
        sm.add_state(State("b", on_enter=lambda ctx: calls.append("enter b")))
        sm.add_transition("a", "b")
        sm.transition("b")
        assert calls == ["exit a", "enter b"]

    @pytest.mark.unit
    def test_subclass_hooks(self):
        entered = []

        class Tracked(State):
            def on_enter(self, ctx):
                entered.append(self.name)

        sm = StateMachine("a")
        sm.add_state(State("a"))
        sm.add_state(Tracked("b"))
        sm.add_transition("a", "b")
        sm.transition("b")
        assert entered == ["b"]


class TestHistory:

    @pytest.mark.unit
    def test_history_records_pairs(self):
        sm = make_machine()
        sm.transition("playing")
        sm.transition("paused")
        assert [(f, t) for _, f, t in sm.history] == [("setup", "playing"), ("playing", "paused")]

    @pytest.mark.unit
    def test_history_is_bounded(self):
        sm = StateMachine("playing", history_limit=3)
        sm.add_state(State("playing"))
        sm.add_state(State("paused"))
        sm.add_transition("playing", "paused")
        sm.add_transition("paused", "playing")
        for _ in range(5):
            sm.transition("paused")
            sm.transition("playing")
        assert len(sm.history) == 3

    @pytest.mark.unit
    def test_history_is_a_copy(self):
        sm = make_machine()
        sm.transition("playing")
        sm.history.clear()
        assert len(sm.history) == 1