# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""GuardMovementController -- advances every guard by at most one cell per tick.

Guards are processed in table order.  For each guard the patrol policy plans
a direction; the step is taken only if the target cell is

  - inside the table and not a wall
  - not the player's current cell
  - not held by another guard (guards earlier in the order have already
    moved, so their *new* cells count)

Otherwise the guard holds its position for this tick.  Either way its facing
is turned to the planned direction, so the cone computed afterwards looks
where the guard is heading.
"""

from __future__ import annotations

import random
from dataclasses import dataclass

from loguru import logger

from .grid import Cell, Direction
from .patrol import get_policy
from .table import GameTable, GuardState


@dataclass
class GuardMove:
    """Outcome of one guard's step in a tick."""
    guard_index: int
    old_position: Cell
    new_position: Cell
    direction: Direction | None

    @property
    def moved(self) -> bool:
        return self.old_position != self.new_position


class GuardMovementController:
    """Applies patrol plans under the table's movement constraints."""

    def move_guards(self, table: GameTable, rng: random.Random | None = None) -> list[GuardMove]:
        if rng is None:
            rng = random.Random(0)
        moves: list[GuardMove] = []
        for index, guard in enumerate(table.guards):
            moves.append(self._move_one(index, guard, table, rng))
        return moves

    def _move_one(
        self, index: int, guard: GuardState, table: GameTable, rng: random.Random,
    ) -> GuardMove:
        policy = get_policy(guard.patrol)
        old = guard.position
        direction = policy.plan(guard, table, rng)
        if direction is None:
            return GuardMove(index, old, old, None)

        guard.facing = direction
        target = direction.step(old)
        if not table.open_for_guard(target, guard):
            logger.debug(f"Guard {index} holds at {old}: {target} is blocked")
            return GuardMove(index, old, old, direction)

        guard.position = target
        policy.on_moved(guard)
        return GuardMove(index, old, target, direction)
