"""Curriculum lookup -- which grades, units and problem banks exist.

Grades are kept sorted by number and units by name so both lookups are
binary searches; topic and difficulty filters are plain scans over a
grade's problem bank.
"""

from __future__ import annotations

from bisect import bisect_left

from pydantic import BaseModel, Field

from math_dungeon.sim.problems import Problem, Unit


class BankedProblem(Problem):
    """A pre-authored problem with a difficulty rating."""

    difficulty: int = Field(default=1, ge=1)
    topics: list[str] = Field(default_factory=list)


class GradeEntry(BaseModel):
    grade: int = Field(ge=1)
    name: str
    min_level: int | None = None
    """Hero level needed to enter; defaults to the grade number."""

    units: list[Unit] = Field(default_factory=list)
    problems: list[BankedProblem] = Field(default_factory=list)

    @property
    def required_level(self) -> int:
        return self.min_level if self.min_level is not None else self.grade


class Curriculum:
    def __init__(self, grades: list[GradeEntry]) -> None:
        self._grades = sorted(grades, key=lambda g: g.grade)
        self._grade_numbers = [g.grade for g in self._grades]

    @property
    def grades(self) -> list[GradeEntry]:
        return list(self._grades)

    def find_grade(self, grade: int) -> GradeEntry | None:
        i = bisect_left(self._grade_numbers, grade)
        if i < len(self._grades) and self._grade_numbers[i] == grade:
            return self._grades[i]
        return None

    def find_unit(self, grade: int, unit_name: str) -> Unit | None:
        entry = self.find_grade(grade)
        if entry is None or not entry.units:
            return None
        units = sorted(entry.units, key=lambda u: u.name)
        names = [u.name for u in units]
        i = bisect_left(names, unit_name)
        if i < len(units) and names[i] == unit_name:
            return units[i]
        return None

    def find_problems_by_topic(self, grade: int, topic: str) -> list[BankedProblem]:
        entry = self.find_grade(grade)
        if entry is None:
            return []
        return [p for p in entry.problems if p.topic == topic or topic in p.topics]

    def find_problems_by_difficulty(
        self, grade: int, min_difficulty: int, max_difficulty: int,
    ) -> list[BankedProblem]:
        entry = self.find_grade(grade)
        if entry is None:
            return []
        return [
            p for p in entry.problems
            if min_difficulty <= p.difficulty <= max_difficulty
        ]

    def available_dungeons(self, player_level: int) -> list[GradeEntry]:
        """Grades the hero may enter at *player_level*, lowest first."""
        return [g for g in self._grades if g.required_level <= player_level]


def default_curriculum() -> Curriculum:
    """Grades 1-6 with the units the reference problem generator understands."""
    return Curriculum([
        GradeEntry(grade=1, name="Grade 1", units=[
            Unit(name="Number Sense", topics=["arithmetic"], difficulty=1),
            Unit(name="Addition", topics=["addition"], difficulty=1),
        ]),
        GradeEntry(grade=2, name="Grade 2", units=[
            Unit(name="Addition and Subtraction", topics=["addition", "subtraction"]),
            Unit(name="Subtraction", topics=["subtraction"], difficulty=2),
        ]),
        GradeEntry(grade=3, name="Grade 3", units=[
            Unit(name="Multiplication", topics=["multiplication"]),
            Unit(name="Division", topics=["division"], difficulty=3),
        ]),
        GradeEntry(grade=4, name="Grade 4", units=[
            Unit(name="Long Division", topics=["division"]),
            Unit(name="Fractions", topics=["fractions"], difficulty=3),
        ]),
        GradeEntry(grade=5, name="Grade 5", units=[
            Unit(name="Fractions", topics=["fractions"]),
            Unit(name="Decimals", topics=["decimals"], difficulty=4),
        ]),
        GradeEntry(grade=6, name="Grade 6", units=[
            Unit(name="Decimals", topics=["decimals"]),
            Unit(name="Mixed Operations", topics=["arithmetic"], difficulty=5),
        ]),
    ])
