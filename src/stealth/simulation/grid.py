# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""Grid primitives shared by the table, vision and movement code.

Cells are ``(row, col)`` tuples.  Row 0 is the top of the table, so NORTH
decreases the row index and EAST increases the column index.
"""

from __future__ import annotations

from enum import Enum

Cell = tuple[int, int]


class Direction(Enum):
    """Cardinal facing / travel direction.  Value is the (drow, dcol) delta."""

    NORTH = (-1, 0)
    EAST = (0, 1)
    SOUTH = (1, 0)
    WEST = (0, -1)

    @property
    def delta(self) -> Cell:
        return self.value

    @property
    def opposite(self) -> Direction:
        return _OPPOSITES[self]

    @property
    def code(self) -> str:
        """Single-letter code used in snapshots: N, E, S or W."""
        return self.name[0]

    def step(self, cell: Cell) -> Cell:
        """Return the neighbour of *cell* one step in this direction."""
        return (cell[0] + self.value[0], cell[1] + self.value[1])

    @classmethod
    def from_code(cls, code: str) -> Direction:
        for d in cls:
            if d.code == code.upper():
                return d
        raise ValueError(f"Unknown direction code: {code!r}")

    @classmethod
    def from_key(cls, key: str) -> Direction | None:
        """Map a W/A/S/D movement key to a direction (None for other keys)."""
        return _KEY_BINDINGS.get(key.lower())

    @classmethod
    def between(cls, a: Cell, b: Cell) -> Direction | None:
        """Direction of the single cardinal step from *a* to *b*, if any."""
        delta = (b[0] - a[0], b[1] - a[1])
        for d in cls:
            if d.value == delta:
                return d
        return None


_OPPOSITES = {
    Direction.NORTH: Direction.SOUTH,
    Direction.SOUTH: Direction.NORTH,
    Direction.EAST: Direction.WEST,
    Direction.WEST: Direction.EAST,
}

_KEY_BINDINGS = {
    "w": Direction.NORTH,
    "a": Direction.WEST,
    "s": Direction.SOUTH,
    "d": Direction.EAST,
}


def chebyshev(a: Cell, b: Cell) -> int:
    return max(abs(a[0] - b[0]), abs(a[1] - b[1]))


def bresenham(start: Cell, end: Cell) -> list[Cell]:
    """Bresenham's line algorithm.  Returns every cell from *start* to *end*.

    Handles all octants (steep, shallow, negative directions).  Both
    endpoints are included.
    """
    r0, c0 = start
    r1, c1 = end
    cells: list[Cell] = []
    dr = abs(r1 - r0)
    dc = abs(c1 - c0)
    sr = 1 if r0 < r1 else -1
    sc = 1 if c0 < c1 else -1
    err = dc - dr

    while True:
        cells.append((r0, c0))
        if r0 == r1 and c0 == c1:
            break
        e2 = 2 * err
        if e2 > -dr:
            err -= dr
            c0 += sc
        if e2 < dc:
            err += dc
            r0 += sr

    return cells
