# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""State machine infrastructure for game phases.

Provides generic State and StateMachine classes.  Unlike a tick-driven
behaviour FSM, phase changes here are *commanded*: the owner asks for a
transition and the machine either performs it or refuses it.

Architecture:
  - State: named state with on_enter/on_exit callbacks (subclassable)
  - StateMachine: builder-pattern FSM with add_state/add_transition

Each transition request:
  1. Look up the edge (from current state to target); refuse if missing
  2. Evaluate the edge's optional guard with the caller's ctx
  3. Call on_exit on the old state -> set new state -> call on_enter
  4. Record (timestamp, from, to) in a bounded history

Usage::

    sm = StateMachine("setup")
    sm.add_state(State("setup"))
    sm.add_state(State("playing"))
    sm.add_transition("setup", "playing")
    sm.transition("playing")
"""

from __future__ import annotations

import time as _time
from typing import Callable


class InvalidTransitionError(Exception):
    """A transition was requested that the machine does not allow."""

    def __init__(self, from_state: str, to_state: str):
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(f"No transition from '{from_state}' to '{to_state}'")


class State:
    """A named state.

    Args:
        name: Unique state identifier.
        on_enter: Callback when entering this state. Signature: (ctx: dict) -> None.
        on_exit: Callback when leaving this state. Signature: (ctx: dict) -> None.
    """

    def __init__(
        self,
        name: str,
        on_enter: Callable[[dict], None] | None = None,
        on_exit: Callable[[dict], None] | None = None,
    ) -> None:
        self.name = name
        self._on_enter_cb = on_enter
        self._on_exit_cb = on_exit

    def on_enter(self, ctx: dict) -> None:
        """Called when entering this state. Override in subclasses."""
        if self._on_enter_cb is not None:
            self._on_enter_cb(ctx)

    def on_exit(self, ctx: dict) -> None:
        """Called when leaving this state. Override in subclasses."""
        if self._on_exit_cb is not None:
            self._on_exit_cb(ctx)


class _Edge:
    __slots__ = ("from_state", "to_state", "guard")

    def __init__(
        self,
        from_state: str,
        to_state: str,
        guard: Callable[[dict], bool] | None = None,
    ) -> None:
        self.from_state = from_state
        self.to_state = to_state
        self.guard = guard


class StateMachine:
    """Finite state machine with explicit, guarded transitions."""

    def __init__(self, initial_state: str, history_limit: int = 20) -> None:
        self._states: dict[str, State] = {}
        self._edges: dict[tuple[str, str], _Edge] = {}
        self._current_name = initial_state
        self._history_limit = history_limit
        self._history: list[tuple[float, str, str]] = []

    def add_state(self, state: State) -> None:
        """Register a state object."""
        self._states[state.name] = state

    def add_transition(
        self,
        from_state: str | list[str],
        to_state: str,
        guard: Callable[[dict], bool] | None = None,
    ) -> None:
        """Allow a transition.

        Args:
            from_state: Source state name, or a list of names sharing the edge.
            to_state: Target state name.
            guard: Optional predicate on ctx; the transition is refused
                   when it returns False.
        """
        sources = [from_state] if isinstance(from_state, str) else from_state
        for source in sources:
            self._edges[(source, to_state)] = _Edge(source, to_state, guard)

    @property
    def current_state(self) -> str:
        """Return the current state NAME (string)."""
        return self._current_name

    @property
    def history(self) -> list[tuple[float, str, str]]:
        """Return a copy of transition history: [(timestamp, from_state, to_state), ...]."""
        return list(self._history)

    def can_transition(self, to_state: str, ctx: dict | None = None) -> bool:
        edge = self._edges.get((self._current_name, to_state))
        if edge is None:
            return False
        return edge.guard is None or bool(edge.guard(ctx or {}))

    def transition(self, to_state: str, ctx: dict | None = None) -> None:
        """Move to *to_state* or raise InvalidTransitionError."""
        if ctx is None:
            ctx = {}
        if not self.can_transition(to_state, ctx):
            raise InvalidTransitionError(self._current_name, to_state)
        self._do_transition(to_state, ctx)

    def force_state(self, state_name: str, ctx: dict | None = None) -> None:
        """Jump to *state_name* regardless of edges (used for resets)."""
        if state_name not in self._states:
            raise ValueError(f"State '{state_name}' not found")
        self._do_transition(state_name, ctx or {})

    def _do_transition(self, target_state: str, ctx: dict) -> None:
        old_name = self._current_name
        old_state = self._states.get(old_name)
        if old_state is not None:
            old_state.on_exit(ctx)
        self._current_name = target_state
        self._record_history(old_name, target_state)
        new_state = self._states.get(target_state)
        if new_state is not None:
            new_state.on_enter(ctx)

    def _record_history(self, from_state: str, to_state: str) -> None:
        self._history.append((_time.time(), from_state, to_state))
        if len(self._history) > self._history_limit:
            self._history = self._history[-self._history_limit:]
