"""Exception types raised by the battle engine.

Only genuine programming errors and missing collaborator results are
raised.  Calls made in the wrong battle phase are absorbed into inert
results by :class:`~math_dungeon.sim.battle.BattleManager` instead.
"""

from __future__ import annotations


class MathDungeonError(Exception):
    """Base class for every error raised by this package."""


class TurnOrderError(MathDungeonError, RuntimeError):
    """A turn was started while another side was active, or ended while idle."""


class ProblemGenerationError(MathDungeonError, RuntimeError):
    """The problem generator returned nothing for the requested grade/unit."""


class UnknownDifficultyError(MathDungeonError, ValueError):
    """No difficulty profile is registered under the requested key."""

    def __init__(self, key: str, known: list[str]) -> None:
        self.key = key
        self.known = known
        super().__init__(
            f"Unknown difficulty {key!r}; expected one of {', '.join(known)}"
        )
