"""DetectionEngine -- decides whether the player has been spotted.

The player is detected iff the overlay cell under the player is
PLAYER_VISIBLE.  The check runs after every tick (guards moved) and after
every player move, since either can bring the player into a cone.

The engine latches: ``newly_detected`` is True only on the first
not-detected -> detected transition, so the game over event is raised once
per session.  ``reset()`` clears the latch for a new session.
"""

from __future__ import annotations

from dataclasses import dataclass

from .table import GameTable
from .vision import VisibilityKind, VisibilityOverlay


@dataclass(frozen=True)
class DetectionResult:
    detected: bool
    newly_detected: bool = False


class DetectionEngine:

    def __init__(self) -> None:
        self._detected = False

    @property
    def detected(self) -> bool:
        return self._detected

    def reset(self) -> None:
        self._detected = False

    def evaluate(self, table: GameTable, overlay: VisibilityOverlay) -> DetectionResult:
        row, col = table.get_player_coords()
        seen = overlay.kind_at(row, col) == VisibilityKind.PLAYER_VISIBLE
        newly = seen and not self._detected
        if seen:
            self._detected = True
        return DetectionResult(detected=seen, newly_detected=newly)
