# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""Patrol policies -- which way a guard wants to step this tick.

A policy *plans*: it returns the direction the guard intends to travel
(or None to stand still) and may update its own bookkeeping on the guard
(``waypoint_index``), but never the guard's position.  Whether the step is actually taken (bounds,
walls, other guards, the player) is decided by GuardMovementController, so
policies can be swapped without touching constraint enforcement.

Built-in policies:
  bounce: walk straight ahead, turn around at a wall or the table edge
  loop:   follow ``guard.waypoints`` in order, wrapping around
  wander: seeded random walk that prefers to keep its heading

Additional policies can be registered at runtime with ``register_policy``.
"""

from __future__ import annotations

import random
from typing import Protocol

from .grid import Direction
from .table import GameTable, GuardState

# Probability that a wandering guard keeps its heading when it can
_WANDER_KEEP_HEADING = 0.75


class PatrolPolicy(Protocol):
    name: str

    def plan(self, guard: GuardState, table: GameTable, rng: random.Random) -> Direction | None:
        ...

    def on_moved(self, guard: GuardState) -> None:
        ...


class BouncePatrol:
    """Straight-line patrol that reverses at walls and table edges."""

    name = "bounce"

    def plan(self, guard: GuardState, table: GameTable, rng: random.Random) -> Direction | None:
        if table.is_passable(guard.facing.step(guard.position)):
            return guard.facing
        back = guard.facing.opposite
        if table.is_passable(back.step(guard.position)):
            return back
        return None

    def on_moved(self, guard: GuardState) -> None:
        pass


class LoopPatrol:
    """Cycles through the guard's waypoints, one cardinal step at a time."""

    name = "loop"

    def plan(self, guard: GuardState, table: GameTable, rng: random.Random) -> Direction | None:
        if not guard.waypoints:
            return None
        self._advance_if_reached(guard)
        target = guard.waypoints[guard.waypoint_index]
        if target == guard.position:
            return None
        dr = target[0] - guard.position[0]
        dc = target[1] - guard.position[1]
        # Larger axis first, then the other one
        vertical = Direction.SOUTH if dr > 0 else Direction.NORTH
        horizontal = Direction.EAST if dc > 0 else Direction.WEST
        if abs(dr) >= abs(dc):
            options = [vertical] + ([horizontal] if dc else [])
        else:
            options = [horizontal] + ([vertical] if dr else [])
        for d in options:
            if table.is_passable(d.step(guard.position)):
                return d
        return options[0]

    def on_moved(self, guard: GuardState) -> None:
        if guard.waypoints:
            self._advance_if_reached(guard)

    @staticmethod
    def _advance_if_reached(guard: GuardState) -> None:
        """Point waypoint_index at the next waypoint once the current one is reached."""
        guard.waypoint_index %= len(guard.waypoints)
        if guard.waypoints[guard.waypoint_index] == guard.position:
            guard.waypoint_index = (guard.waypoint_index + 1) % len(guard.waypoints)


class WanderPatrol:
    """Random walk.  Deterministic for a given RNG state."""

    name = "wander"

    def plan(self, guard: GuardState, table: GameTable, rng: random.Random) -> Direction | None:
        open_dirs = [d for d in Direction if table.is_passable(d.step(guard.position))]
        if not open_dirs:
            return None
        if guard.facing in open_dirs and rng.random() < _WANDER_KEEP_HEADING:
            return guard.facing
        return rng.choice(open_dirs)

    def on_moved(self, guard: GuardState) -> None:
        pass


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------

_registry: dict[str, PatrolPolicy] = {}


def register_policy(policy: PatrolPolicy) -> None:
    """Register or replace a patrol policy under ``policy.name``."""
    _registry[policy.name] = policy


def get_policy(name: str) -> PatrolPolicy:
    try:
        return _registry[name]
    except KeyError:
        raise KeyError(f"Unknown patrol policy: {name!r}") from None


def policy_names() -> list[str]:
    return sorted(_registry)


for _policy in (BouncePatrol(), LoopPatrol(), WanderPatrol()):
    register_policy(_policy)
