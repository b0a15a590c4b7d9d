# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""TickDriver -- periodic daemon thread calling ``GameStateMachine.tick()``.

The driver only schedules.  Pausing, game over and outstanding save/load
I/O are all handled inside ``tick()`` (it becomes a no-op), so the driver
can keep running for the lifetime of the process.  Stopping it needs no
rollback: every tick completes under the game's lock before the next one
is admitted.
"""

from __future__ import annotations

import threading

from loguru import logger

from ..config import settings
from .game import GameStateMachine


class TickDriver:
    """Calls ``game.tick()`` every *interval* seconds on a daemon thread."""

    def __init__(self, game: GameStateMachine, interval: float | None = None) -> None:
        self._game = game
        self._interval = interval if interval is not None else settings.tick_interval
        if self._interval <= 0:
            raise ValueError(f"Tick interval must be positive, got {self._interval}")
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self.ticks_run = 0

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._tick_loop, name="stealth-tick", daemon=True
        )
        self._thread.start()
        logger.debug(f"Tick driver started ({self._interval}s interval)")

    def stop(self, timeout: float = 2.0) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout=timeout)
            self._thread = None
        logger.debug(f"Tick driver stopped after {self.ticks_run} ticks")

    def _tick_loop(self) -> None:
        while not self._stop.wait(self._interval):
            try:
                if self._game.tick():
                    self.ticks_run += 1
            except Exception:
                logger.exception("Tick failed")
