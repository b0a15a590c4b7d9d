# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""Root conftest -- shared table builders for the stealth tests."""

import pytest

from stealth.comms.event_bus import EventBus
from stealth.simulation.grid import Direction
from stealth.simulation.table import GameTable, GuardState


def build_table(
    size=20,
    walls=(),
    exit=(19, 19),
    player=(5, 5),
    guards=(),
):
    return GameTable(size=size, walls=walls, exit=exit, player=player, guards=guards)


@pytest.fixture
def make_table():
    """Factory for hand-built tables (easy-sized by default)."""
    return build_table


@pytest.fixture
def west_guard():
    """Guard at (5,8) facing west with range 4 on a bounce patrol."""
    return GuardState(position=(5, 8), facing=Direction.WEST, vision_range=4)


@pytest.fixture
def walled_table(west_guard):
    """Player at (5,5), guard at (5,8) looking west, wall at (5,6) in between."""
    return build_table(walls=[(5, 6)], guards=[west_guard])


@pytest.fixture
def open_table(west_guard):
    """Same as walled_table without the wall at (5,6)."""
    return build_table(guards=[west_guard])


@pytest.fixture
def bus():
    return EventBus()

