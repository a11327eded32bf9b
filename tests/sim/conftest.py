"""Shared fixtures and stubs for simulation tests."""

from __future__ import annotations

import pytest

from math_dungeon.sim.core.entities import StatBlock
from math_dungeon.sim.core.rng import GameRNG
from math_dungeon.sim.persistence import InMemoryStatStore
from math_dungeon.sim.problems import Problem, ProblemGenerator, Unit


class FixedVarianceRNG(GameRNG):
    """GameRNG whose integer rolls always return *value* (clamped to the range)."""

    def __init__(self, value: int = 0) -> None:
        super().__init__(seed=0)
        self.value = value

    def random_int(self, low: int, high: int) -> int:
        return max(low, min(high, self.value))


class FixedProblemGenerator(ProblemGenerator):
    """Always hands out ``2 + 2``; counts how often it was asked."""

    def __init__(self) -> None:
        self.calls = 0

    def generate(self, grade: int, unit: Unit) -> Problem | None:
        self.calls += 1
        return Problem(text="2 + 2 = ?", answer=4, topic="addition")


class EmptyProblemGenerator(ProblemGenerator):
    def generate(self, grade: int, unit: Unit) -> Problem | None:
        return None


@pytest.fixture
def hero() -> StatBlock:
    return StatBlock.new_hero("Ada")


@pytest.fixture
def store() -> InMemoryStatStore:
    return InMemoryStatStore()


@pytest.fixture
def fixed_rng() -> FixedVarianceRNG:
    return FixedVarianceRNG(3)


@pytest.fixture
def fixed_generator() -> FixedProblemGenerator:
    return FixedProblemGenerator()
