# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""Session snapshots -- the serialized form of a game in progress.

A snapshot captures everything needed to resume play identically:
difficulty, table size, the full wall layout, the exit, the player, every
guard (position, facing, vision range, patrol parameters), the session seed
and the tick counter (which together fix the patrol RNG stream).

The encoding is JSON produced by pydantic.  Anything that fails to parse,
has the wrong shape for its difficulty, or describes an inconsistent table
raises ``PersistenceFormatError``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Literal

from pydantic import BaseModel, Field, ValidationError, model_validator

from ..simulation.difficulty import Difficulty, get_profile
from ..simulation.grid import Direction
from ..simulation.patrol import policy_names
from ..simulation.table import GameTable, GuardState, TableInvariantError

if TYPE_CHECKING:
    from ..simulation.game import GameSession

FORMAT_VERSION = 1


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------

class PersistenceError(Exception):
    """Base class for recoverable save/load failures."""


class PersistenceFormatError(PersistenceError):
    """Snapshot data is malformed or describes an invalid session."""


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------

class GuardSnapshot(BaseModel):
    position: tuple[int, int]
    facing: Literal["N", "E", "S", "W"]
    vision_range: int = Field(ge=0)
    patrol: str = "bounce"
    waypoints: list[tuple[int, int]] = Field(default_factory=list)
    waypoint_index: int = Field(default=0, ge=0)

    @classmethod
    def from_guard(cls, guard: GuardState) -> GuardSnapshot:
        return cls(
            position=guard.position,
            facing=guard.facing.code,
            vision_range=guard.vision_range,
            patrol=guard.patrol,
            waypoints=list(guard.waypoints),
            waypoint_index=guard.waypoint_index,
        )

    def to_guard(self) -> GuardState:
        return GuardState(
            position=self.position,
            facing=Direction.from_code(self.facing),
            vision_range=self.vision_range,
            patrol=self.patrol,
            waypoints=list(self.waypoints),
            waypoint_index=self.waypoint_index,
        )


class SessionSnapshot(BaseModel):
    format_version: int = FORMAT_VERSION
    difficulty: Difficulty
    size: int = Field(gt=0)
    walls: list[tuple[int, int]]
    exit: tuple[int, int]
    player: tuple[int, int]
    guards: list[GuardSnapshot]
    seed: int = 0
    tick: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def _check_shape(self) -> SessionSnapshot:
        if self.format_version != FORMAT_VERSION:
            raise ValueError(f"unsupported format version {self.format_version}")
        expected = get_profile(self.difficulty).size
        if self.size != expected:
            raise ValueError(
                f"{self.difficulty.value} tables are {expected}x{expected}, got size {self.size}"
            )
        known = set(policy_names())
        for guard in self.guards:
            if guard.patrol not in known:
                raise ValueError(f"unknown patrol policy {guard.patrol!r}")
            if guard.patrol == "loop" and not guard.waypoints:
                raise ValueError("loop patrol without waypoints")
            if guard.vision_range > self.size:
                raise ValueError(
                    f"vision range {guard.vision_range} exceeds table size {self.size}"
                )
        return self

    @classmethod
    def from_session(cls, session: GameSession) -> SessionSnapshot:
        table = session.table
        return cls(
            difficulty=session.difficulty,
            size=table.size,
            walls=table.wall_cells(),
            exit=table.exit,
            player=table.get_player_coords(),
            guards=[GuardSnapshot.from_guard(g) for g in table.guards],
            seed=session.seed,
            tick=session.tick_count,
        )

    def to_table(self) -> GameTable:
        """Build the table; broken invariants become PersistenceFormatError."""
        try:
            return GameTable(
                size=self.size,
                walls=self.walls,
                exit=self.exit,
                player=self.player,
                guards=[g.to_guard() for g in self.guards],
            )
        except TableInvariantError as e:
            raise PersistenceFormatError(f"Invalid table in snapshot: {e}") from e


# ---------------------------------------------------------------------------
# Codec
# ---------------------------------------------------------------------------

def encode_snapshot(snapshot: SessionSnapshot) -> bytes:
    return snapshot.model_dump_json(indent=2).encode("utf-8")


def decode_snapshot(data: bytes | str) -> SessionSnapshot:
    try:
        return SessionSnapshot.model_validate_json(data)
    except (ValidationError, ValueError) as e:
        raise PersistenceFormatError(f"Malformed session snapshot: {e}") from e


def encode_session(session: GameSession) -> bytes:
    return encode_snapshot(SessionSnapshot.from_session(session))
