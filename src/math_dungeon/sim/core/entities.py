"""Stat blocks for the hero and the enemies they fight.

A single :class:`StatBlock` model covers both combatants.  The hero's
block lives for the whole session and is mutated in place by battles,
so callers treat it as the source of truth for persistence.  Enemy
blocks are built fresh for each battle and discarded afterwards.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field, model_validator

if TYPE_CHECKING:
    from math_dungeon.sim.persistence import StatStore

logger = logging.getLogger(__name__)

# Per-level growth, in percent.  Integer arithmetic keeps floor() exact.
_HP_GROWTH = 120
_ATTACK_GROWTH = 115
_DEFENSE_GROWTH = 110
_EXP_CURVE_GROWTH = 150


def _scale(value: int, percent: int) -> int:
    """Return ``floor(value * percent / 100)`` without float error."""
    return value * percent // 100


class StatBlock(BaseModel):
    """Health, offence, defence and progression of one combatant."""

    name: str = "Hero"
    max_hp: int = Field(gt=0)
    current_hp: int = Field(ge=0)
    attack: int = Field(default=0, ge=0)
    defense: int = Field(default=0, ge=0)
    level: int = Field(default=1, ge=1)
    experience: int = Field(default=0, ge=0)
    experience_to_next_level: int = Field(default=100, gt=0)
    gold: int = Field(default=0, ge=0)
    weapon_damage_bonus: int = Field(default=0, ge=0)
    """Flat bonus from the equipped weapon, added to ``attack`` when
    dealing damage."""

    @model_validator(mode="after")
    def _check_hp_bounds(self) -> StatBlock:
        if self.current_hp > self.max_hp:
            raise ValueError(
                f"current_hp ({self.current_hp}) exceeds max_hp ({self.max_hp})"
            )
        return self

    @classmethod
    def new_hero(cls, name: str = "Hero") -> StatBlock:
        """Starting stats for a brand-new hero."""
        return cls(
            name=name,
            max_hp=100,
            current_hp=100,
            attack=10,
            defense=5,
            level=1,
            experience=0,
            experience_to_next_level=100,
            gold=0,
        )

    # -- health --------------------------------------------------------------

    @property
    def is_dead(self) -> bool:
        return self.current_hp <= 0

    @property
    def hp_ratio(self) -> float:
        return self.current_hp / self.max_hp

    def lose_hp(self, amount: int) -> int:
        """Remove up to *amount* HP, flooring at 0.  Returns HP actually lost."""
        if amount <= 0:
            return 0
        lost = min(self.current_hp, amount)
        self.current_hp -= lost
        return lost

    def heal(self, amount: int) -> None:
        """Restore *amount* HP, capped at ``max_hp``."""
        if amount <= 0:
            return
        self.current_hp = min(self.max_hp, self.current_hp + amount)

    # -- progression ---------------------------------------------------------

    def add_gold(self, amount: int) -> None:
        if amount < 0:
            raise ValueError(f"add_gold amount must be >= 0, got {amount}")
        self.gold += amount

    def add_experience(self, amount: int) -> bool:
        """Award *amount* experience, levelling up as many times as it covers.

        Each level-up consumes the current ``experience_to_next_level`` and
        raises the requirement for the next one, so large awards compound.
        Returns ``True`` if at least one level-up happened.
        """
        if amount < 0:
            raise ValueError(f"add_experience amount must be >= 0, got {amount}")
        self.experience += amount
        leveled_up = False
        while self.experience >= self.experience_to_next_level:
            self.experience -= self.experience_to_next_level
            self.level_up()
            leveled_up = True
        return leveled_up

    def level_up(self) -> None:
        """Gain one level.

        Only the HP gained by the new maximum is healed; a wounded hero
        stays wounded.
        """
        old_max_hp = self.max_hp
        self.level += 1
        self.max_hp = _scale(self.max_hp, _HP_GROWTH)
        self.current_hp += self.max_hp - old_max_hp
        self.attack = _scale(self.attack, _ATTACK_GROWTH)
        self.defense = _scale(self.defense, _DEFENSE_GROWTH)
        self.experience_to_next_level = _scale(
            self.experience_to_next_level, _EXP_CURVE_GROWTH,
        )
        logger.debug("%s reached level %d", self.name, self.level)

    # -- persistence ---------------------------------------------------------

    def snapshot(self) -> dict[str, Any]:
        """Plain-dict record of every stat, suitable for a key-value store."""
        return self.model_dump()

    def save(self, store: StatStore, key: str = "hero_stats") -> None:
        store.put(key, self.snapshot())

    @classmethod
    def load(cls, store: StatStore, key: str = "hero_stats") -> StatBlock | None:
        """Rebuild a stat block from *store*, or ``None`` if nothing is saved."""
        record = store.get(key)
        if record is None:
            return None
        return cls.model_validate(record)
