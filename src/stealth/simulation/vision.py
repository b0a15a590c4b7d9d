# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""VisionConeCalculator -- which cells a guard can currently see.

Architecture
------------
A guard at (r, c) facing d with vision range R looks into a 90 degree fan.
For a cell at forward distance f (measured along d) and lateral offset l:

    in the fan  <=>  1 <= f <= R  and  |l| <= f

Each cell in the fan is tested with a Bresenham ray from the guard's cell.
The cell is visible iff it is not a wall and no wall lies on the ray
strictly between the guard and the cell.  Cones never see through walls.
Other guards and the player do not block sight.

The shared ``VisibilityOverlay`` is a numpy int8 grid parallel to the table:

  NOT_VISIBLE    (0)  no guard sees the cell
  VISIBLE        (1)  at least one guard sees the cell
  PLAYER_VISIBLE (2)  a guard sees the cell and the player stands on it

The overlay is derived state.  It is cleared and rebuilt from every guard's
cone once per tick and is never persisted.
"""

from __future__ import annotations

from collections.abc import Iterable
from enum import IntEnum

import numpy as np

from .grid import Cell, Direction, bresenham
from .table import GameTable, GuardState


class VisibilityKind(IntEnum):
    NOT_VISIBLE = 0
    VISIBLE = 1
    PLAYER_VISIBLE = 2


class VisibilityOverlay:
    """Per-cell visibility grid, aggregated over all guards."""

    def __init__(self, size: int) -> None:
        self._grid = np.zeros((size, size), dtype=np.int8)

    @property
    def size(self) -> int:
        return self._grid.shape[0]

    @property
    def grid(self) -> np.ndarray:
        """Read-only view of the underlying array (for rendering)."""
        view = self._grid.view()
        view.setflags(write=False)
        return view

    def clear(self) -> None:
        self._grid.fill(VisibilityKind.NOT_VISIBLE)

    def kind_at(self, row: int, col: int) -> VisibilityKind:
        return VisibilityKind(int(self._grid[row, col]))

    def is_visible(self, row: int, col: int) -> bool:
        return self._grid[row, col] != VisibilityKind.NOT_VISIBLE

    def merge(self, cells: Iterable[tuple[Cell, VisibilityKind]]) -> None:
        """Fold one guard's cone into the overlay.  Stronger kinds win."""
        for (r, c), kind in cells:
            if kind > self._grid[r, c]:
                self._grid[r, c] = kind

    def relocate_player(self, old: Cell, new: Cell) -> None:
        """Move the player mark after a player move, keeping the cones."""
        if self._grid[old] == VisibilityKind.PLAYER_VISIBLE:
            self._grid[old] = VisibilityKind.VISIBLE
        if self._grid[new] == VisibilityKind.VISIBLE:
            self._grid[new] = VisibilityKind.PLAYER_VISIBLE

    def visible_cells(self) -> list[Cell]:
        return [(int(r), int(c)) for r, c in np.argwhere(self._grid != VisibilityKind.NOT_VISIBLE)]

    def tobytes(self) -> bytes:
        return self._grid.tobytes()

    def copy(self) -> VisibilityOverlay:
        clone = VisibilityOverlay(self.size)
        clone._grid[:] = self._grid
        return clone

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, VisibilityOverlay):
            return NotImplemented
        return bool(np.array_equal(self._grid, other._grid))


class VisionConeCalculator:
    """Pure cone computation; never mutates the guard or the table."""

    def compute(self, guard: GuardState, table: GameTable) -> set[tuple[Cell, VisibilityKind]]:
        player = table.get_player_coords()
        result: set[tuple[Cell, VisibilityKind]] = set()
        for cell in cone_cells(guard.position, guard.facing, guard.vision_range, table.size):
            if not self._line_of_sight(guard.position, cell, table):
                continue
            kind = VisibilityKind.PLAYER_VISIBLE if cell == player else VisibilityKind.VISIBLE
            result.add((cell, kind))
        return result

    def compute_overlay(self, table: GameTable, overlay: VisibilityOverlay | None = None) -> VisibilityOverlay:
        """Clear *overlay* (or a new one) and fill it from every guard's cone."""
        if overlay is None:
            overlay = VisibilityOverlay(table.size)
        overlay.clear()
        for guard in table.guards:
            overlay.merge(self.compute(guard, table))
        return overlay

    @staticmethod
    def _line_of_sight(origin: Cell, target: Cell, table: GameTable) -> bool:
        if table.is_wall(*target):
            return False
        # Skip the guard's own cell and the target itself
        for r, c in bresenham(origin, target)[1:-1]:
            if table.is_wall(r, c):
                return False
        return True


def cone_cells(origin: Cell, facing: Direction, vision_range: int, size: int) -> list[Cell]:
    """In-bounds cells of the fan in front of *origin*, ignoring walls."""
    fr, fc = facing.delta
    # Lateral axis is perpendicular to the facing
    lr, lc = fc, -fr
    cells: list[Cell] = []
    # Rows or columns past the table edge are never in bounds
    for forward in range(1, min(vision_range, size) + 1):
        for lateral in range(-forward, forward + 1):
            r = origin[0] + fr * forward + lr * lateral
            c = origin[1] + fc * forward + lc * lateral
            if 0 <= r < size and 0 <= c < size:
                cells.append((r, c))
    return cells
