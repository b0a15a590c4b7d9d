# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""GameStateMachine -- owns the session and arbitrates win/loss.

Architecture
------------
The state machine is the only mutator of the active ``GameSession``.  Every
operation (tick, player move, new game, load) runs under one re-entrant
lock, so a tick and a player move never interleave partially.

Phases::

    setup --new_game/load--> playing <--pause/resume--> paused
                             playing --detected--> lost
                             playing --exit--> won
    (new_game / load reset any phase back to playing)

A new or loaded session starts with a cleared overlay; cones appear with
the first tick.

Tick order (only while playing):
  1. GuardMovementController.move_guards(table, rng)
  2. VisionConeCalculator rebuilds the overlay from every guard's cone
  3. DetectionEngine.evaluate(table, overlay)
  4. On the first detection: phase -> lost, publish ``player_detected``

Player moves are validated here (cardinal neighbour, in bounds, not a wall,
not a guard) and silently ignored when invalid.  A valid move relocates the
player, moves the player mark in the current overlay and re-runs detection.
Detection takes precedence over reaching the exit.

Events are published to the EventBus with dict payloads.  Subscribers drain
their own queues, so no handler runs inside the lock.

The patrol RNG for tick *n* is ``Random(seed * 1_000_003 + n)``: replaying a
session from the same snapshot yields the same guard moves.
"""

from __future__ import annotations

import random
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from loguru import logger

from ..comms.event_bus import EventBus
from ..config import settings
from ..persistence.data_access import DataAccess, FileDataAccess
from ..persistence.snapshot import (
    PersistenceFormatError,
    decode_snapshot,
    encode_session,
)
from .detection import DetectionEngine
from .difficulty import Difficulty, get_profile
from .grid import Cell, Direction
from .layout import generate_table
from .movement import GuardMovementController
from .state_machine import State, StateMachine
from .table import GameTable
from .vision import VisibilityOverlay, VisionConeCalculator

# Event topics
PLAYER_DETECTED = "player_detected"
PLAYER_REACHED_EXIT = "player_reached_exit"
GAME_STARTED = "game_started"
GAME_LOADED = "game_loaded"
GAME_PAUSED = "game_paused"
GAME_RESUMED = "game_resumed"

_TICK_SEED_STRIDE = 1_000_003


class GamePhase(str, Enum):
    SETUP = "setup"
    PLAYING = "playing"
    PAUSED = "paused"
    WON = "won"
    LOST = "lost"


@dataclass
class GameSession:
    """Complete state of one playthrough."""
    difficulty: Difficulty
    table: GameTable
    overlay: VisibilityOverlay
    seed: int = 0
    tick_count: int = 0
    exit_reached: bool = False
    detected: bool = False


class GameStateMachine:
    """Drives one stealth game at a time and publishes its outcome events."""

    def __init__(
        self,
        event_bus: EventBus | None = None,
        *,
        difficulty: Difficulty | str | None = None,
        seed: int | None = None,
        layout_seed: int | None = None,
        data_access: DataAccess | None = None,
    ) -> None:
        self._event_bus = event_bus if event_bus is not None else EventBus()
        self._difficulty = Difficulty.parse(
            difficulty if difficulty is not None else settings.default_difficulty
        )
        self._seed = seed if seed is not None else settings.seed
        self._layout_seed = layout_seed if layout_seed is not None else settings.layout_seed
        self._data_access = data_access if data_access is not None else FileDataAccess(settings.save_dir)

        self._lock = threading.RLock()
        self._io_pending = 0
        self._session: GameSession | None = None

        self._vision = VisionConeCalculator()
        self._movement = GuardMovementController()
        self._detection = DetectionEngine()
        self._fsm = self._build_fsm()

    # -- Read-only queries -----------------------------------------------------

    @property
    def event_bus(self) -> EventBus:
        return self._event_bus

    @property
    def phase(self) -> GamePhase:
        return GamePhase(self._fsm.current_state)

    @property
    def difficulty(self) -> Difficulty:
        """Difficulty the next ``new_game`` will use."""
        return self._difficulty

    @property
    def session(self) -> GameSession | None:
        return self._session

    @property
    def table(self) -> GameTable | None:
        return self._session.table if self._session is not None else None

    @property
    def overlay(self) -> VisibilityOverlay | None:
        return self._session.overlay if self._session is not None else None

    @property
    def io_pending(self) -> bool:
        return self._io_pending > 0

    def is_vision(self, row: int, col: int) -> bool:
        s = self._session
        if s is None or not s.table.is_valid_field(row, col):
            return False
        return s.overlay.is_visible(row, col)

    def phase_history(self) -> list[tuple[float, str, str]]:
        return self._fsm.history

    # -- Lifecycle commands ------------------------------------------------------

    def set_difficulty(self, difficulty: Difficulty | str) -> None:
        """Record the difficulty for the next new game.  The running one is untouched."""
        with self._lock:
            self._difficulty = Difficulty.parse(difficulty)
        logger.info(f"Difficulty set to {self._difficulty.value} (applies to next game)")

    def new_game(
        self,
        difficulty: Difficulty | str | None = None,
        *,
        table: GameTable | None = None,
    ) -> GameSession:
        """Start a fresh session.

        Args:
            difficulty: Overrides (and records) the difficulty; defaults to the
                        one chosen with ``set_difficulty``.
            table: A prepared table to play on instead of the generated
                   layout.  Its size must match the difficulty.
        """
        with self._lock:
            if difficulty is not None:
                self._difficulty = Difficulty.parse(difficulty)
            profile = get_profile(self._difficulty)
            if table is None:
                table = generate_table(profile, self._layout_seed)
            elif table.size != profile.size:
                raise ValueError(
                    f"{profile.difficulty.value} tables are {profile.size}x{profile.size}, "
                    f"got {table.size}"
                )
            else:
                table = table.copy()
                table.validate()

            session = GameSession(
                difficulty=self._difficulty,
                table=table,
                overlay=VisibilityOverlay(table.size),
                seed=self._seed,
            )
            self._install(session)
            logger.info(
                f"New {session.difficulty.value} game: {table.size}x{table.size}, "
                f"{len(table.guards)} guards, exit at {table.exit}"
            )
            self._event_bus.publish(GAME_STARTED, {
                "difficulty": session.difficulty.value,
                "size": table.size,
            })
            return session

    def pause(self) -> bool:
        with self._lock:
            if self.phase != GamePhase.PLAYING:
                return False
            self._fsm.transition(GamePhase.PAUSED.value)
            self._event_bus.publish(GAME_PAUSED, {"tick": self._session.tick_count})
            return True

    def resume(self) -> bool:
        with self._lock:
            if self.phase != GamePhase.PAUSED:
                return False
            self._fsm.transition(GamePhase.PLAYING.value)
            self._event_bus.publish(GAME_RESUMED, {"tick": self._session.tick_count})
            return True

    # -- Simulation ----------------------------------------------------------------

    def tick(self) -> bool:
        """Advance one simulation step.  Returns False when it was a no-op."""
        with self._lock:
            if self.phase != GamePhase.PLAYING or self._io_pending:
                return False
            s = self._session
            s.tick_count += 1
            rng = random.Random(s.seed * _TICK_SEED_STRIDE + s.tick_count)
            self._movement.move_guards(s.table, rng)
            self._vision.compute_overlay(s.table, s.overlay)
            result = self._detection.evaluate(s.table, s.overlay)
            if result.newly_detected:
                self._player_detected()
            return True

    def move_player(self, row: int, col: int) -> bool:
        """Move the player one cell.  Invalid requests are ignored (returns False)."""
        with self._lock:
            if self.phase != GamePhase.PLAYING or self._io_pending:
                return False
            s = self._session
            table = s.table
            current = table.get_player_coords()
            target = (row, col)
            if (
                Direction.between(current, target) is None
                or not table.is_valid_field(row, col)
                or table.is_wall(row, col)
                or table.is_guard(row, col)
            ):
                logger.debug(f"Ignored player move {current} -> {target}")
                return False

            table.move_player(row, col)
            s.overlay.relocate_player(current, target)
            s.exit_reached = table.is_exit(row, col)
            result = self._detection.evaluate(table, s.overlay)
            if result.newly_detected:
                self._player_detected()
            elif s.exit_reached:
                self._player_reached_exit()
            return True

    def move_player_direction(self, direction: Direction | str) -> bool:
        """Move one step in *direction* (a Direction or a W/A/S/D key)."""
        if isinstance(direction, str):
            resolved = Direction.from_key(direction)
            if resolved is None:
                return False
            direction = resolved
        with self._lock:
            if self._session is None:
                return False
            row, col = direction.step(self._session.table.get_player_coords())
            return self.move_player(row, col)

    # -- Persistence ---------------------------------------------------------------

    def save(self) -> bytes:
        """Export the active session as snapshot bytes.

        Only a game in progress (playing or paused) can be saved; a finished
        game has nothing left to resume.
        """
        with self._lock:
            if self._session is None:
                raise PersistenceFormatError("No active session to save")
            if self.phase not in (GamePhase.PLAYING, GamePhase.PAUSED):
                raise PersistenceFormatError(f"Cannot save a finished game ({self.phase.value})")
            return encode_session(self._session)

    def load(self, data: bytes | str) -> GameSession:
        """Replace the active session from snapshot bytes.

        On any error the current session stays active and unchanged.
        """
        snapshot = decode_snapshot(data)
        table = snapshot.to_table()
        with self._lock:
            session = GameSession(
                difficulty=snapshot.difficulty,
                table=table,
                overlay=VisibilityOverlay(table.size),
                seed=snapshot.seed,
                tick_count=snapshot.tick,
            )
            self._install(session)
            logger.info(
                f"Loaded {session.difficulty.value} game at tick {session.tick_count} "
                f"({len(table.guards)} guards)"
            )
            self._event_bus.publish(GAME_LOADED, {
                "difficulty": session.difficulty.value,
                "size": table.size,
                "tick": session.tick_count,
            })
            return session

    def save_game(self, path: str | Path) -> None:
        """Save through the data access backend.  Ticks are suspended meanwhile."""
        with self._io_suspended():
            data = self.save()
            self._data_access.write(path, data)

    def load_game(self, path: str | Path) -> GameSession:
        """Load through the data access backend.  Ticks are suspended meanwhile."""
        with self._io_suspended():
            data = self._data_access.read(path)
            try:
                return self.load(data)
            except PersistenceFormatError as e:
                logger.warning(f"Load failed for {path}: {e}")
                raise

    # -- Internal ------------------------------------------------------------------

    @contextmanager
    def _io_suspended(self) -> Iterator[None]:
        with self._lock:
            self._io_pending += 1
        try:
            yield
        finally:
            with self._lock:
                self._io_pending -= 1

    def _install(self, session: GameSession) -> None:
        self._session = session
        self._detection.reset()
        self._fsm.force_state(GamePhase.PLAYING.value)

    def _player_detected(self) -> None:
        s = self._session
        s.detected = True
        self._fsm.transition(GamePhase.LOST.value)
        position = s.table.get_player_coords()
        logger.info(f"Player detected at {position} on tick {s.tick_count}")
        self._event_bus.publish(PLAYER_DETECTED, self._outcome(position))

    def _player_reached_exit(self) -> None:
        s = self._session
        self._fsm.transition(GamePhase.WON.value)
        position = s.table.get_player_coords()
        logger.info(f"Player reached the exit at {position} on tick {s.tick_count}")
        self._event_bus.publish(PLAYER_REACHED_EXIT, self._outcome(position))

    def _outcome(self, position: Cell) -> dict:
        return {
            "is_over": True,
            "position": position,
            "tick": self._session.tick_count,
            "difficulty": self._session.difficulty.value,
        }

    @staticmethod
    def _build_fsm() -> StateMachine:
        sm = StateMachine(GamePhase.SETUP.value)
        for phase in GamePhase:
            sm.add_state(State(phase.value))
        sm.add_transition(GamePhase.SETUP.value, GamePhase.PLAYING.value)
        sm.add_transition(GamePhase.PLAYING.value, GamePhase.PAUSED.value)
        sm.add_transition(GamePhase.PAUSED.value, GamePhase.PLAYING.value)
        sm.add_transition(GamePhase.PLAYING.value, GamePhase.WON.value)
        sm.add_transition(GamePhase.PLAYING.value, GamePhase.LOST.value)
        return sm
