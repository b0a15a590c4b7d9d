# Created by Matthew Valancy
# Copyright 2026 Valpatel Software LLC
# Licensed under AGPL-3.0 — see LICENSE for details.
"""Runtime settings, read from the environment (``STEALTH_*``) or ``.env``."""

from __future__ import annotations

from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .simulation.difficulty import Difficulty


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="STEALTH_",
        env_file=".env",
        extra="ignore",
    )

    # Simulation
    tick_interval: float = Field(default=1.0, gt=0.0)  # seconds between guard steps
    default_difficulty: Difficulty = Difficulty.EASY
    seed: int = 0  # patrol RNG seed for new sessions
    layout_seed: int | None = None  # None = per-difficulty default layout

    # Persistence
    save_dir: Path = Path("saves")

    @field_validator("default_difficulty", mode="before")
    @classmethod
    def _parse_difficulty(cls, value: object) -> object:
        if isinstance(value, str):
            return Difficulty.parse(value)
        return value


settings = Settings()
