# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""Tests for TickDriver -- the periodic tick thread."""

import time

import pytest

from stealth.comms.event_bus import EventBus
from stealth.config import settings
from stealth.simulation.driver import TickDriver
from stealth.simulation.game import GameStateMachine


def wait_for(predicate, timeout=2.0):
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        if predicate():
            return True
        time.sleep(0.005)
    return predicate()


@pytest.fixture
def game(walled_table):
    g = GameStateMachine(EventBus(), difficulty="easy")
    g.new_game(table=walled_table)
    return g


class TestTickDriver:

    @pytest.mark.unit
    def test_rejects_non_positive_interval(self, game):
        with pytest.raises(ValueError):
            TickDriver(game, interval=0)

    @pytest.mark.unit
    def test_default_interval_from_settings(self, game):
        assert TickDriver(game).interval == settings.tick_interval

    @pytest.mark.unit
    def test_not_running_before_start(self, game):
        assert not TickDriver(game, interval=0.01).running

    @pytest.mark.integration
    def test_ticks_game_until_stopped(self, game):
        driver = TickDriver(game, interval=0.01)
        driver.start()
        try:
            assert driver.running
            assert wait_for(lambda: game.session.tick_count >= 3)
        finally:
            driver.stop()
        assert not driver.running
        count = game.session.tick_count
        time.sleep(0.05)
        assert game.session.tick_count == count

    @pytest.mark.integration
    def test_paused_game_does_not_advance(self, game):
        game.pause()
        driver = TickDriver(game, interval=0.01)
        driver.start()
        try:
            time.sleep(0.1)
        finally:
            driver.stop()
        assert game.session.tick_count == 0
        assert driver.ticks_run == 0

    @pytest.mark.integration
    def test_start_twice_is_noop(self, game):
        driver = TickDriver(game, interval=0.01)
        driver.start()
        try:
            thread = driver._thread
            driver.start()
            assert driver._thread is thread
        finally:
            driver.stop()
