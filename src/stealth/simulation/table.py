# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""GameTable -- the square grid, its static layout and the mobile entities.

Architecture
------------
The static layout lives in a fixed-size arena: a row-major numpy boolean
array of walls plus a single exit cell.  Nothing mutates the arena after
construction.  The player and the guards are NOT baked into the arena;
they are a position and an ordered list of ``GuardState`` composited onto
the grid when queried.

Cell kinds:
  wall:  blocks movement and vision
  exit:  the single goal cell (never a wall)
  floor: every other in-bounds cell

Invariants (checked by ``validate()``):
  - the exit, the player and every guard are in bounds and not on a wall
  - no two guards share a cell and no guard stands on the player
  - there is exactly one exit

``move_player`` relocates the player unconditionally.  Callers (the game
state machine) must check ``is_valid_field`` / ``is_wall`` / ``is_guard``
first; the table does not reject invalid moves itself.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

import numpy as np

from .grid import Cell, Direction


class TableInvariantError(ValueError):
    """A table was built (or loaded) in a state that breaks its invariants."""

    def __init__(self, message: str, cell: Cell | None = None):
        self.cell = cell
        super().__init__(message if cell is None else f"{message} at {cell}")


@dataclass
class GuardState:
    """A patrolling guard.

    Attributes:
        position: Current cell.
        facing: Direction the guard looks (and last travelled).
        vision_range: How many cells ahead the cone reaches.
        patrol: Name of the patrol policy driving this guard.
        waypoints: Cells visited in order by the "loop" policy.
        waypoint_index: Index of the waypoint currently being approached.
    """

    position: Cell
    facing: Direction
    vision_range: int = 4
    patrol: str = "bounce"
    waypoints: list[Cell] = field(default_factory=list)
    waypoint_index: int = 0

    def copy(self) -> GuardState:
        return GuardState(
            position=self.position,
            facing=self.facing,
            vision_range=self.vision_range,
            patrol=self.patrol,
            waypoints=list(self.waypoints),
            waypoint_index=self.waypoint_index,
        )


class GameTable:
    """Square table of side ``size`` with walls, one exit, a player and guards."""

    def __init__(
        self,
        size: int,
        walls: Iterable[Cell],
        exit: Cell,
        player: Cell,
        guards: Iterable[GuardState] = (),
    ) -> None:
        if size <= 0:
            raise TableInvariantError(f"Table size must be positive, got {size}")
        self._size = size
        self._walls = np.zeros((size, size), dtype=bool)
        for r, c in walls:
            if not (0 <= r < size and 0 <= c < size):
                raise TableInvariantError("Wall out of bounds", (r, c))
            self._walls[r, c] = True
        self._walls.setflags(write=False)
        self._exit: Cell = (int(exit[0]), int(exit[1]))
        self._player: Cell = (int(player[0]), int(player[1]))
        self.guards: list[GuardState] = list(guards)
        self.validate()

    # -- Properties ------------------------------------------------------------

    @property
    def size(self) -> int:
        return self._size

    @property
    def exit(self) -> Cell:
        return self._exit

    @property
    def player(self) -> Cell:
        return self._player

    @property
    def walls(self) -> np.ndarray:
        """Read-only boolean wall arena, shape ``(size, size)``."""
        return self._walls

    def wall_cells(self) -> list[Cell]:
        """All wall cells in row-major order."""
        return [(int(r), int(c)) for r, c in np.argwhere(self._walls)]

    # -- Predicates --------------------------------------------------------------

    def is_valid_field(self, row: int, col: int) -> bool:
        return 0 <= row < self._size and 0 <= col < self._size

    def is_wall(self, row: int, col: int) -> bool:
        return self.is_valid_field(row, col) and bool(self._walls[row, col])

    def is_exit(self, row: int, col: int) -> bool:
        return (row, col) == self._exit

    def is_floor(self, row: int, col: int) -> bool:
        return (
            self.is_valid_field(row, col)
            and not self._walls[row, col]
            and not self.is_exit(row, col)
        )

    def is_player(self, row: int, col: int) -> bool:
        return (row, col) == self._player

    def is_guard(self, row: int, col: int) -> bool:
        return self.guard_at((row, col)) is not None

    def guard_at(self, cell: Cell) -> GuardState | None:
        for guard in self.guards:
            if guard.position == cell:
                return guard
        return None

    def is_passable(self, cell: Cell) -> bool:
        """In bounds and not a wall (ignores mobile entities)."""
        return self.is_valid_field(*cell) and not self._walls[cell[0], cell[1]]

    def open_for_guard(self, cell: Cell, guard: GuardState | None = None) -> bool:
        """True if a guard may step onto *cell* right now.

        The cell must be passable, not the player's cell and not held by any
        guard other than *guard*.
        """
        if not self.is_passable(cell) or cell == self._player:
            return False
        occupant = self.guard_at(cell)
        return occupant is None or occupant is guard

    # -- Player ------------------------------------------------------------------

    def get_player_coords(self) -> Cell:
        return self._player

    def move_player(self, row: int, col: int) -> None:
        """Relocate the player marker.  No validation; see module docstring."""
        self._player = (row, col)

    # -- Invariants ----------------------------------------------------------------

    def validate(self) -> None:
        """Raise ``TableInvariantError`` if the table is inconsistent."""
        if not self.is_passable(self._exit):
            raise TableInvariantError("Exit must be an in-bounds non-wall cell", self._exit)
        if not self.is_passable(self._player):
            raise TableInvariantError("Player must be on an in-bounds non-wall cell", self._player)
        seen: set[Cell] = set()
        for guard in self.guards:
            pos = guard.position
            if not self.is_passable(pos):
                raise TableInvariantError("Guard must be on an in-bounds non-wall cell", pos)
            if pos in seen:
                raise TableInvariantError("Two guards share a cell", pos)
            if pos == self._player:
                raise TableInvariantError("Guard stands on the player", pos)
            if guard.vision_range < 0:
                raise TableInvariantError("Guard vision range must be non-negative", pos)
            seen.add(pos)

    # -- Copy ----------------------------------------------------------------------

    def copy(self) -> GameTable:
        """Deep copy: shares the read-only wall arena, copies mobile entities."""
        clone = GameTable.__new__(GameTable)
        clone._size = self._size
        clone._walls = self._walls
        clone._exit = self._exit
        clone._player = self._player
        clone.guards = [g.copy() for g in self.guards]
        return clone

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GameTable):
            return NotImplemented
        return (
            self._size == other._size
            and self._exit == other._exit
            and self._player == other._player
            and self.guards == other.guards
            and bool(np.array_equal(self._walls, other._walls))
        )

    def __repr__(self) -> str:
        return (
            f"GameTable(size={self._size}, walls={int(self._walls.sum())}, "
            f"exit={self._exit}, player={self._player}, guards={len(self.guards)})"
        )
