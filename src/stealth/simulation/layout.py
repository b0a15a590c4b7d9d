# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""Seeded table generation for a difficulty profile.

Steps:
  1. Scatter straight wall segments (horizontal or vertical) with a seeded RNG.
  2. Build a 4-connected grid graph of the non-wall cells and keep only the
     component containing the player start; every other floor cell is walled
     in, so everything left is reachable by cardinal moves.
  3. Put the exit on the reachable cell farthest (in steps) from the start.
  4. Place guards on reachable cells out of vision reach of the start,
     cycling through the profile's patrol policies.

The same (profile, seed) pair always yields the same table.
"""

from __future__ import annotations

import random

import networkx as nx
import numpy as np
from loguru import logger

from .difficulty import DifficultyProfile
from .grid import Cell, Direction, chebyshev
from .table import GameTable, GuardState

# Player always starts in the top-left corner
PLAYER_START: Cell = (0, 0)

# Cells around the start kept free of walls
_START_CLEARANCE = 2

# Rectangular circuits for "loop" guards
_LOOP_MAX_SIDE = 4
_LOOP_ATTEMPTS = 8


def reachable_cells(walls: np.ndarray, start: Cell) -> set[Cell]:
    """All cells reachable from *start* by cardinal moves through non-walls."""
    graph = _floor_graph(walls)
    if start not in graph:
        return set()
    return set(nx.node_connected_component(graph, start))


def step_distances(walls: np.ndarray, start: Cell) -> dict[Cell, int]:
    """Shortest cardinal-step distance from *start* to every reachable cell."""
    graph = _floor_graph(walls)
    if start not in graph:
        return {}
    return dict(nx.single_source_shortest_path_length(graph, start))


def generate_table(profile: DifficultyProfile, seed: int | None = None) -> GameTable:
    """Generate the table for *profile*.  ``seed`` defaults to the profile's."""
    if seed is None:
        seed = profile.layout_seed
    rng = random.Random(seed)
    size = profile.size

    walls = np.zeros((size, size), dtype=bool)
    for _ in range(profile.wall_segments):
        _place_segment(walls, rng, profile.max_segment_length)
    walls[:_START_CLEARANCE + 1, :_START_CLEARANCE + 1] = False

    distances = step_distances(walls, PLAYER_START)
    walled_in = 0
    for r in range(size):
        for c in range(size):
            if not walls[r, c] and (r, c) not in distances:
                walls[r, c] = True
                walled_in += 1

    # Farthest reachable cell; ties broken by row-major order
    exit_cell = max(sorted(distances), key=lambda cell: distances[cell])

    guards = _place_guards(profile, rng, distances, exit_cell)

    wall_cells = [(int(r), int(c)) for r, c in np.argwhere(walls)]
    table = GameTable(
        size=size,
        walls=wall_cells,
        exit=exit_cell,
        player=PLAYER_START,
        guards=guards,
    )
    logger.debug(
        f"Generated {profile.difficulty.value} table (seed={seed}): "
        f"{len(wall_cells)} walls ({walled_in} sealed), exit={exit_cell}, "
        f"{len(guards)} guards"
    )
    return table


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _floor_graph(walls: np.ndarray) -> nx.Graph:
    """4-connected grid graph over the non-wall cells."""
    size = walls.shape[0]
    graph = nx.grid_2d_graph(size, size)
    graph.remove_nodes_from([(int(r), int(c)) for r, c in np.argwhere(walls)])
    return graph


def _place_segment(walls: np.ndarray, rng: random.Random, max_length: int) -> None:
    size = walls.shape[0]
    length = rng.randint(2, max(2, max_length))
    r = rng.randrange(size)
    c = rng.randrange(size)
    if rng.random() < 0.5:
        walls[r, c:min(size, c + length)] = True
    else:
        walls[r:min(size, r + length), c] = True


def _place_guards(
    profile: DifficultyProfile,
    rng: random.Random,
    distances: dict[Cell, int],
    exit_cell: Cell,
) -> list[GuardState]:
    # Chebyshev distance > range keeps the start out of every possible cone
    candidates = [
        cell for cell in sorted(distances)
        if cell != exit_cell
        and chebyshev(cell, PLAYER_START) > profile.vision_range + 1
    ]
    rng.shuffle(candidates)
    if len(candidates) < profile.guard_count:
        logger.warning(
            f"Only {len(candidates)} guard spots available for "
            f"{profile.difficulty.value} (wanted {profile.guard_count})"
        )

    guards: list[GuardState] = []
    for i, position in enumerate(candidates[:profile.guard_count]):
        patrol = profile.patrols[i % len(profile.patrols)]
        waypoints: list[Cell] = []
        if patrol == "loop":
            waypoints = _loop_route(position, rng, distances)
            if not waypoints:
                patrol = "bounce"
        guards.append(GuardState(
            position=position,
            facing=rng.choice(list(Direction)),
            vision_range=profile.vision_range,
            patrol=patrol,
            waypoints=waypoints,
        ))
    return guards


def _loop_route(
    corner: Cell,
    rng: random.Random,
    distances: dict[Cell, int],
) -> list[Cell]:
    """Clockwise rectangular circuit starting at *corner*, or [] if none fits.

    Consecutive waypoints are cardinal neighbours, so a loop guard advances
    exactly one waypoint per step.
    """
    for _ in range(_LOOP_ATTEMPTS):
        height = rng.randint(2, _LOOP_MAX_SIDE)
        width = rng.randint(2, _LOOP_MAX_SIDE)
        r0, c0 = corner
        route: list[Cell] = []
        route += [(r0, c0 + k) for k in range(width)]
        route += [(r0 + k, c0 + width) for k in range(height)]
        route += [(r0 + height, c0 + width - k) for k in range(width)]
        route += [(r0 + height - k, c0) for k in range(height)]
        if all(cell in distances for cell in route):
            return route
    return []
