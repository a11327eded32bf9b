"""Turn sequencing: exactly one side may act at a time."""

from __future__ import annotations

from enum import Enum

from math_dungeon.sim.errors import TurnOrderError


class TurnSide(str, Enum):
    """The two combatants that take turns."""

    PLAYER = "player"
    ENEMY = "enemy"


class TurnPhase(str, Enum):
    IDLE = "idle"
    PLAYER_ACTIVE = "player-active"
    ENEMY_ACTIVE = "enemy-active"


_ACTIVE_PHASE = {
    TurnSide.PLAYER: TurnPhase.PLAYER_ACTIVE,
    TurnSide.ENEMY: TurnPhase.ENEMY_ACTIVE,
}


class TurnController:
    """Tracks whose turn it is and how many exchanges have happened.

    ``turn_count`` counts full player+enemy exchanges and is bumped when
    a player turn starts, so the first player turn is turn 1.

    Starting a turn while a side is already active, or ending one while
    idle, raises :class:`TurnOrderError` rather than silently overwriting
    state.
    """

    def __init__(self) -> None:
        self._phase = TurnPhase.IDLE
        self._active: TurnSide | None = None
        self._turn_count = 0

    @property
    def phase(self) -> TurnPhase:
        return self._phase

    @property
    def active_side(self) -> TurnSide | None:
        return self._active

    @property
    def turn_count(self) -> int:
        return self._turn_count

    def start_turn(self, side: TurnSide) -> None:
        if self._active is not None:
            raise TurnOrderError(
                f"Cannot start {side.value} turn: {self._active.value} turn is active"
            )
        self._active = side
        self._phase = _ACTIVE_PHASE[side]
        if side is TurnSide.PLAYER:
            self._turn_count += 1

    def end_turn(self) -> TurnSide:
        """Return to idle and report which side just finished."""
        if self._active is None:
            raise TurnOrderError("Cannot end turn: no side is active")
        ended = self._active
        self._active = None
        self._phase = TurnPhase.IDLE
        return ended

    def reset(self) -> None:
        self._active = None
        self._phase = TurnPhase.IDLE
        self._turn_count = 0

    def __repr__(self) -> str:
        return f"TurnController(phase={self._phase.value}, turn={self._turn_count})"
