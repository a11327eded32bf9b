"""Base class for simulated players that answer battle problems.

The battle simulator calls :meth:`AnswerAgent.choose_answer` once per
player turn and submits whatever string comes back.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from math_dungeon.sim.problems import Problem


class AnswerAgent(ABC):
    """Base class for simulated players."""

    @abstractmethod
    def choose_answer(self, problem: Problem) -> str:
        """Return the answer text to submit for *problem*.

        Parameters
        ----------
        problem:
            The problem currently shown to the player.  Agents may read
            ``problem.answer``; they are models of a student's accuracy,
            not solvers.

        Returns
        -------
        str
            The raw answer, exactly as a player would type or pick it.
        """
