"""Core battle primitives: stat blocks, RNG, turns and battle state."""

from math_dungeon.sim.core.battle_state import (
    BattleLog,
    BattlePhase,
    BattleResult,
    EnemyTurnResult,
)
from math_dungeon.sim.core.entities import StatBlock
from math_dungeon.sim.core.rng import GameRNG
from math_dungeon.sim.core.turns import TurnController, TurnPhase, TurnSide

__all__ = [
    # rng
    "GameRNG",
    # entities
    "StatBlock",
    # turns
    "TurnController",
    "TurnPhase",
    "TurnSide",
    # battle_state
    "BattleLog",
    "BattlePhase",
    "BattleResult",
    "EnemyTurnResult",
]
