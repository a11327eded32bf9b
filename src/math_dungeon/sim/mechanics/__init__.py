"""Combat mechanics.

Usage::

    from math_dungeon.sim.mechanics import (
        calculate_damage, apply_damage, cap_boss_damage, scale_damage,
    )
"""

from .damage import apply_damage, calculate_damage, cap_boss_damage, floor_scaled, scale_damage

__all__ = [
    "apply_damage",
    "calculate_damage",
    "cap_boss_damage",
    "floor_scaled",
    "scale_damage",
]
