# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""Stealth -- turn-paced grid stealth simulation engine.

This package contains the table model, guard patrols, vision cones,
detection, the game state machine with its tick driver, session
persistence and the event bus used to notify the presentation layer.

Rendering, menus and keyboard wiring live outside this package and talk to
it through ``GameStateMachine`` commands and EventBus topics.
"""

from .comms.event_bus import EventBus
from .simulation.difficulty import Difficulty
from .simulation.driver import TickDriver
from .simulation.game import (
    GAME_LOADED,
    GAME_PAUSED,
    GAME_RESUMED,
    GAME_STARTED,
    PLAYER_DETECTED,
    PLAYER_REACHED_EXIT,
    GamePhase,
    GameSession,
    GameStateMachine,
)

__version__ = "0.1.0"

__all__ = [
    "Difficulty",
    "EventBus",
    "GAME_LOADED",
    "GAME_PAUSED",
    "GAME_RESUMED",
    "GAME_STARTED",
    "GamePhase",
    "GameSession",
    "GameStateMachine",
    "PLAYER_DETECTED",
    "PLAYER_REACHED_EXIT",
    "TickDriver",
]
