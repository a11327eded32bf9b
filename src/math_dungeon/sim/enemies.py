"""Enemy construction from grade, unit tier and difficulty profile.

The tier comes from the unit (or ``ceil(grade / 2)`` when the unit has
none), is raised by the profile's ``tier_bonus`` and capped at
:data:`MAX_TIER`.  Base stats grow linearly with grade and tier; the
profile then scales health and attack.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

from math_dungeon.sim.core.entities import StatBlock
from math_dungeon.sim.mechanics.damage import floor_scaled

if TYPE_CHECKING:
    from math_dungeon.sim.difficulty import DifficultyProfile
    from math_dungeon.sim.problems import Unit

MIN_TIER = 1
MAX_TIER = 5

# Base stat = BASE + PER_GRADE * grade + PER_TIER * tier
_HP_BASE, _HP_PER_GRADE, _HP_PER_TIER = 20, 5, 10
_ATTACK_BASE, _ATTACK_PER_GRADE, _ATTACK_PER_TIER = 3, 1, 2
_DEFENSE_BASE, _DEFENSE_PER_GRADE, _DEFENSE_PER_TIER = 2, 1, 1

ENEMY_NAMES: dict[int, str] = {
    1: "Counting Slime",
    2: "Sum Goblin",
    3: "Fraction Troll",
    4: "Equation Wraith",
    5: "Calculus Dragon",
}


def enemy_tier(grade: int, unit: Unit, profile: DifficultyProfile) -> int:
    """Difficulty tier of the enemy guarding *unit*, after the profile bonus."""
    base = unit.difficulty if unit.difficulty is not None else math.ceil(grade / 2)
    return max(MIN_TIER, min(MAX_TIER, base + profile.tier_bonus))


def create_enemy(grade: int, tier: int, profile: DifficultyProfile) -> StatBlock:
    """Build a full-health enemy for *grade* at *tier*.

    Max HP is scaled by ``boss_health_multiplier`` and attack by
    ``boss_attack_multiplier``; level is ``grade + tier - 1``.
    """
    grade = max(1, grade)
    tier = max(MIN_TIER, min(MAX_TIER, tier))

    base_hp = _HP_BASE + _HP_PER_GRADE * grade + _HP_PER_TIER * tier
    max_hp = max(1, floor_scaled(base_hp, profile.boss_health_multiplier))
    attack = floor_scaled(
        _ATTACK_BASE + _ATTACK_PER_GRADE * grade + _ATTACK_PER_TIER * tier,
        profile.boss_attack_multiplier,
    )
    defense = _DEFENSE_BASE + _DEFENSE_PER_GRADE * grade + _DEFENSE_PER_TIER * tier

    return StatBlock(
        name=ENEMY_NAMES[tier],
        max_hp=max_hp,
        current_hp=max_hp,
        attack=attack,
        defense=defense,
        level=grade + tier - 1,
    )
