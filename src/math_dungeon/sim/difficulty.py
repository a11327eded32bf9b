"""Difficulty profiles -- the multiplier sets a player picks before a battle.

Profiles are immutable and looked up by key.  The built-in set covers
``easy``, ``medium``, ``hard`` and ``nightmare``; a JSON file can replace
any of them (see :func:`load_difficulty_profiles`).

JSON format::

    {
      "hard": {
        "boss_health_multiplier": 1.5,
        "boss_attack_multiplier": 1.25,
        "player_damage_multiplier": 0.9,
        "experience_multiplier": 1.5,
        "wrong_answer_penalty": 0.5,
        "tier_bonus": 1
      }
    }
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Mapping

from pydantic import BaseModel, Field

from math_dungeon.sim.errors import UnknownDifficultyError

logger = logging.getLogger(__name__)

DIFFICULTY_KEYS = ("easy", "medium", "hard", "nightmare")


class DifficultyProfile(BaseModel):
    """Multipliers applied for the duration of one battle."""

    model_config = {"frozen": True}

    key: str
    boss_health_multiplier: float = Field(gt=0)
    boss_attack_multiplier: float = Field(gt=0)
    player_damage_multiplier: float = Field(gt=0)
    experience_multiplier: float = Field(gt=0)
    wrong_answer_penalty: float = Field(gt=0)
    """Extra multiplier on damage dealt with a wrong answer, on top of the
    halving already done by the damage formula."""

    tier_bonus: int = Field(default=0, ge=0)
    """Difficulty tiers added to the enemy before the tier cap."""


DEFAULT_PROFILES: dict[str, DifficultyProfile] = {
    "easy": DifficultyProfile(
        key="easy",
        boss_health_multiplier=0.75,
        boss_attack_multiplier=0.75,
        player_damage_multiplier=1.25,
        experience_multiplier=0.75,
        wrong_answer_penalty=0.75,
    ),
    "medium": DifficultyProfile(
        key="medium",
        boss_health_multiplier=1.0,
        boss_attack_multiplier=1.0,
        player_damage_multiplier=1.0,
        experience_multiplier=1.0,
        wrong_answer_penalty=0.5,
    ),
    "hard": DifficultyProfile(
        key="hard",
        boss_health_multiplier=1.5,
        boss_attack_multiplier=1.25,
        player_damage_multiplier=0.9,
        experience_multiplier=1.5,
        wrong_answer_penalty=0.5,
        tier_bonus=1,
    ),
    "nightmare": DifficultyProfile(
        key="nightmare",
        boss_health_multiplier=2.0,
        boss_attack_multiplier=1.5,
        player_damage_multiplier=0.75,
        experience_multiplier=2.0,
        wrong_answer_penalty=0.25,
        tier_bonus=2,
    ),
}


def get_difficulty_profile(
    key: str,
    profiles: Mapping[str, DifficultyProfile] | None = None,
) -> DifficultyProfile:
    """Look up a profile by key (case-insensitive).

    Raises :class:`UnknownDifficultyError` for keys outside the table.
    """
    table = DEFAULT_PROFILES if profiles is None else profiles
    normalized = key.strip().lower()
    try:
        return table[normalized]
    except KeyError:
        raise UnknownDifficultyError(key, sorted(table)) from None


def load_difficulty_profiles(path: Path) -> dict[str, DifficultyProfile]:
    """Load profile overrides from JSON, merged over the built-in table.

    Keys outside the fixed difficulty set are rejected.
    """
    raw = json.loads(Path(path).read_text())
    profiles = dict(DEFAULT_PROFILES)
    for key, values in raw.items():
        normalized = key.strip().lower()
        if normalized not in DIFFICULTY_KEYS:
            raise UnknownDifficultyError(key, list(DIFFICULTY_KEYS))
        profiles[normalized] = DifficultyProfile.model_validate(
            {**values, "key": normalized}
        )
    logger.info("Loaded %d difficulty override(s) from %s", len(raw), path)
    return profiles
