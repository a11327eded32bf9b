"""Damage calculation, damage application and the boss fairness cap.

Player pipeline::

    attack + weapon bonus -> halve if wrong -> + variance [0, 5]
        -> - defense / 2 -> floor -> at least 1

The floor is taken once, at the very end, so half points from a wrong
answer and from odd defense values are kept until then.

Enemy hits go through the same pipeline (always as a correct answer)
and are then passed through :func:`cap_boss_damage`, which scales them
with the hero's level but never lets a single hit exceed 20% of the
hero's maximum HP.
"""

from __future__ import annotations

import math
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from math_dungeon.sim.core.entities import StatBlock
    from math_dungeon.sim.core.rng import GameRNG

VARIANCE_MIN = 0
VARIANCE_MAX = 5

# Fairness cap, in percent: +5% per hero level above 1, ceiling 20% of max HP.
_LEVEL_SCALING_PERCENT = 5
_MAX_HIT_PERCENT = 20


def calculate_damage(
    attacker: StatBlock,
    defender: StatBlock,
    was_correct: bool,
    rng: GameRNG,
) -> int:
    """Roll the damage *attacker* deals to *defender*.

    Only ``attacker.attack`` and ``defender.defense`` are required; a
    missing ``weapon_damage_bonus`` counts as 0.  A wrong answer halves
    the base before variance is added.  The result is never below 1,
    however large the defender's defense.
    """
    base = float(attacker.attack + getattr(attacker, "weapon_damage_bonus", 0))
    if not was_correct:
        base *= 0.5

    variance = rng.random_int(VARIANCE_MIN, VARIANCE_MAX)
    raw = base + variance
    defense_penalty = defender.defense * 0.5

    return max(1, math.floor(raw - defense_penalty))


def apply_damage(target: StatBlock, amount: int) -> bool:
    """Subtract *amount* (clamped to >= 0) from *target*'s HP.

    Returns ``True`` while the target is still alive.
    """
    target.lose_hp(max(0, amount))
    return target.current_hp > 0


def cap_boss_damage(nominal_damage: int, hero_level: int, hero_max_hp: int) -> int:
    """Scale an enemy hit by hero level, then cap it at 20% of max HP.

    ``min(nominal * (1 + 0.05 * levels_above_one), max_hp * 0.20)``,
    floored and at least 1.  Worked in hundredths so the floor is exact.
    """
    levels_above_one = max(0, hero_level - 1)
    boosted = nominal_damage * (100 + levels_above_one * _LEVEL_SCALING_PERCENT)
    ceiling = hero_max_hp * _MAX_HIT_PERCENT
    return max(1, min(boosted, ceiling) // 100)


def scale_damage(damage: int, multiplier: float) -> int:
    """Apply a difficulty multiplier to already-rolled damage (floor, >= 1)."""
    return max(1, floor_scaled(damage, multiplier))


def floor_scaled(value: int, multiplier: float) -> int:
    """``floor(value * multiplier)`` tolerant of binary float error.

    ``100 * 0.29`` evaluates to ``28.999999999999996``; the epsilon keeps
    products that are mathematically integral from flooring one short.
    """
    return math.floor(value * multiplier + 1e-9)
