"""Runtime settings for the battle engine.

Everything has a sensible default; ``BattleSettings.from_env()`` lets a
host application override the values through environment variables:

- ``MATH_DUNGEON_ENEMY_TURN_DELAY``: seconds between the player's hit and
  the enemy's reply (``0`` resolves it immediately).
- ``MATH_DUNGEON_HERO_SAVE_KEY``: store key the hero is saved under.
- ``MATH_DUNGEON_LEADERBOARD_KEY``: store key for leaderboard entries.
- ``MATH_DUNGEON_DIFFICULTY_PROFILES``: path to a JSON profile override file.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping

from pydantic import BaseModel, Field

from math_dungeon.sim.difficulty import (
    DEFAULT_PROFILES,
    DifficultyProfile,
    load_difficulty_profiles,
)

_ENV_PREFIX = "MATH_DUNGEON_"


class BattleSettings(BaseModel):
    enemy_turn_delay: float = Field(default=1.0, ge=0)
    hero_save_key: str = "hero_stats"
    leaderboard_key: str = "leaderboard"
    difficulty_profiles_path: Path | None = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> BattleSettings:
        env = os.environ if environ is None else environ
        values: dict[str, object] = {}
        if (delay := env.get(f"{_ENV_PREFIX}ENEMY_TURN_DELAY")) is not None:
            values["enemy_turn_delay"] = delay
        if (save_key := env.get(f"{_ENV_PREFIX}HERO_SAVE_KEY")) is not None:
            values["hero_save_key"] = save_key
        if (board_key := env.get(f"{_ENV_PREFIX}LEADERBOARD_KEY")) is not None:
            values["leaderboard_key"] = board_key
        if (path := env.get(f"{_ENV_PREFIX}DIFFICULTY_PROFILES")) is not None:
            values["difficulty_profiles_path"] = path
        return cls.model_validate(values)

    def difficulty_profiles(self) -> dict[str, DifficultyProfile]:
        """Built-in profiles, with the override file applied if one is set."""
        if self.difficulty_profiles_path is None:
            return dict(DEFAULT_PROFILES)
        return load_difficulty_profiles(self.difficulty_profiles_path)
