# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""Simulation module -- table model, guards, vision and detection.

The game state machine and the tick driver live in ``stealth.simulation.game``
and ``stealth.simulation.driver``; they are re-exported from ``stealth``.
"""

from .detection import DetectionEngine, DetectionResult
from .difficulty import PROFILES, Difficulty, DifficultyProfile, get_profile
from .grid import Cell, Direction
from .movement import GuardMove, GuardMovementController
from .table import GameTable, GuardState, TableInvariantError
from .vision import VisibilityKind, VisibilityOverlay, VisionConeCalculator

__all__ = [
    "Cell",
    "DetectionEngine",
    "DetectionResult",
    "Difficulty",
    "DifficultyProfile",
    "Direction",
    "GameTable",
    "GuardMove",
    "GuardMovementController",
    "GuardState",
    "PROFILES",
    "TableInvariantError",
    "VisibilityKind",
    "VisibilityOverlay",
    "VisionConeCalculator",
    "get_profile",
]
