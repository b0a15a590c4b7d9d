"""Difficulty levels and their static table/guard profiles.

Architecture
------------
Every difficulty maps to exactly one ``DifficultyProfile``.  The profile is
the single place that decides how large the table is, how many guards patrol
it, how far they see and how dense the wall layout is.  Callers never branch
on the difficulty themselves; they look the profile up.

  easy:   20x20 table,  3 guards, vision range 4,  bounce patrols
  medium: 30x30 table,  6 guards, vision range 5,  bounce + loop patrols
  hard:   40x40 table, 10 guards, vision range 6,  bounce + loop + wander

``layout_seed`` fixes the wall layout per difficulty, so a fresh easy game
always has the same walls unless the seed is overridden in settings.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @classmethod
    def parse(cls, value: str | Difficulty) -> Difficulty:
        """Accept an enum member or a case-insensitive name/value."""
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        for d in cls:
            if d.value == text:
                return d
        raise ValueError(f"Unknown difficulty: {value!r}")


@dataclass(frozen=True)
class DifficultyProfile:
    """Static table and guard parameters for one difficulty."""
    difficulty: Difficulty
    size: int
    guard_count: int
    vision_range: int
    wall_segments: int
    max_segment_length: int
    layout_seed: int
    # Patrol policy names cycled across generated guards
    patrols: tuple[str, ...] = ("bounce",)


PROFILES: dict[Difficulty, DifficultyProfile] = {
    Difficulty.EASY: DifficultyProfile(
        difficulty=Difficulty.EASY,
        size=20,
        guard_count=3,
        vision_range=4,
        wall_segments=12,
        max_segment_length=6,
        layout_seed=1001,
        patrols=("bounce",),
    ),
    Difficulty.MEDIUM: DifficultyProfile(
        difficulty=Difficulty.MEDIUM,
        size=30,
        guard_count=6,
        vision_range=5,
        wall_segments=26,
        max_segment_length=8,
        layout_seed=2002,
        patrols=("bounce", "loop"),
    ),
    Difficulty.HARD: DifficultyProfile(
        difficulty=Difficulty.HARD,
        size=40,
        guard_count=10,
        vision_range=6,
        wall_segments=48,
        max_segment_length=10,
        layout_seed=3003,
        patrols=("bounce", "loop", "wander"),
    ),
}


def get_profile(difficulty: Difficulty | str) -> DifficultyProfile:
    return PROFILES[Difficulty.parse(difficulty)]
