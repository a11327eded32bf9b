"""Battle phase, per-action results and the battle log."""

from __future__ import annotations

from enum import Enum
from typing import Iterator

from pydantic import BaseModel, Field


class BattlePhase(str, Enum):
    """Where a battle stands.  ``VICTORY`` and ``DEFEAT`` are terminal."""

    WAITING = "waiting"
    PLAYER_TURN = "player-turn"
    ENEMY_TURN = "enemy-turn"
    VICTORY = "victory"
    DEFEAT = "defeat"

    @property
    def is_terminal(self) -> bool:
        return self in (BattlePhase.VICTORY, BattlePhase.DEFEAT)


class BattleResult(BaseModel):
    """Outcome of one ``submit_answer`` call."""

    accepted: bool = True
    """``False`` when the call had no effect (wrong phase, battle over)."""

    correct: bool = False
    damage: int = Field(default=0, ge=0)
    enemy_hp: int = 0
    victory: bool = False
    leveled_up: bool = False
    exp_gained: int = Field(default=0, ge=0)
    gold_gained: int = Field(default=0, ge=0)
    phase: BattlePhase = BattlePhase.WAITING
    """Battle phase right after the call returned."""


class EnemyTurnResult(BaseModel):
    """Outcome of one enemy-turn resolution."""

    accepted: bool = True
    nominal_damage: int = Field(default=0, ge=0)
    """Damage rolled before the fairness cap."""

    damage: int = Field(default=0, ge=0)
    hero_hp: int = 0
    defeat: bool = False
    phase: BattlePhase = BattlePhase.WAITING


class BattleLog:
    """Append-only narrative of one battle.

    Entries are never removed; trimming for display is up to the caller.
    """

    def __init__(self) -> None:
        self._entries: list[str] = []

    def append(self, message: str) -> None:
        self._entries.append(message)

    @property
    def entries(self) -> list[str]:
        """A copy of every entry, oldest first."""
        return list(self._entries)

    @property
    def last(self) -> str | None:
        return self._entries[-1] if self._entries else None

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._entries))
