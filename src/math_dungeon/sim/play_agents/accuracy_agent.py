"""Accuracy agent -- a student who gets a fixed share of problems right.

Used by the balance harness to ask "how does a 70%-accurate grade-3
student fare on hard?".

Behaviour:
    - With probability ``accuracy`` the correct answer is returned.
    - Otherwise, for multiple-choice problems a different option is
      picked at random; for typed answers a number near the right one
      (off by 1 to 3) is returned, or a placeholder if the answer is
      not numeric.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from math_dungeon.sim.core.rng import GameRNG
from math_dungeon.sim.play_agents.base import AnswerAgent
from math_dungeon.sim.problems import parse_number

if TYPE_CHECKING:
    from math_dungeon.sim.problems import Problem


class AccuracyAgent(AnswerAgent):
    """Answers correctly with a fixed probability.

    Parameters
    ----------
    accuracy:
        Probability (0.0 -- 1.0) of answering correctly.
    rng:
        Seeded RNG; defaults to ``GameRNG(seed=0)``.
    """

    def __init__(self, accuracy: float = 0.8, rng: GameRNG | None = None) -> None:
        if not 0.0 <= accuracy <= 1.0:
            raise ValueError(f"accuracy must be within [0, 1], got {accuracy}")
        self.accuracy = accuracy
        self._rng = rng or GameRNG(seed=0)

    def choose_answer(self, problem: Problem) -> str:
        correct = str(problem.answer)
        if self._rng.chance(self.accuracy):
            return correct
        return self._wrong_answer(problem, correct)

    def _wrong_answer(self, problem: Problem, correct: str) -> str:
        if problem.is_multiple_choice and problem.options:
            wrong_options = [o for o in problem.options if o != correct]
            if wrong_options:
                return self._rng.random_choice(wrong_options)

        value = parse_number(correct)
        if value is None:
            return "?"
        offset = self._rng.random_int(1, 3) * self._rng.random_choice([-1, 1])
        return str(value + offset)
