"""The problem/answer boundary.

The battle engine never looks inside a problem.  It asks a
:class:`ProblemGenerator` for one, shows it to the player, and asks an
:class:`AnswerValidator` whether the submitted text is right.

Two reference implementations live here as well:

- :class:`StandardAnswerValidator` -- numeric near-equality (0.01),
  fractions and mixed numbers compared by value, case-insensitive text.
- :class:`TopicProblemGenerator` -- arithmetic problems picked from an
  explicit topic table.  A unit resolves to a topic in a fixed order:

    1. exact match of the unit name or one of its topics,
    2. keyword substring match over the same strings,
    3. the default topic for the grade.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from fractions import Fraction
from typing import Callable, Union

from pydantic import BaseModel, Field

from math_dungeon.sim.core.rng import GameRNG

logger = logging.getLogger(__name__)

ANSWER_TOLERANCE = 0.01

Answer = Union[int, float, str]


class Unit(BaseModel):
    """A curriculum unit the player chose to fight in."""

    name: str
    topics: list[str] = Field(default_factory=list)
    difficulty: int | None = Field(default=None, ge=1)
    """Enemy difficulty tier for this unit.  ``None`` derives it from
    the grade."""


class Problem(BaseModel):
    text: str
    answer: Answer
    topic: str
    is_multiple_choice: bool = False
    options: list[str] | None = None


# ---------------------------------------------------------------------------
# Collaborator interfaces
# ---------------------------------------------------------------------------

class ProblemGenerator(ABC):
    """Supplies the problem the player must answer this turn."""

    @abstractmethod
    def generate(self, grade: int, unit: Unit) -> Problem | None:
        """Return a fresh problem for *grade* / *unit*.

        Returning ``None`` means no problem could be produced; the battle
        surfaces that as :class:`~math_dungeon.sim.errors.ProblemGenerationError`.
        """


class AnswerValidator(ABC):
    @abstractmethod
    def validate(self, problem: Problem, submitted: str | None) -> bool:
        """Return whether *submitted* answers *problem* correctly."""


# ---------------------------------------------------------------------------
# StandardAnswerValidator
# ---------------------------------------------------------------------------

_MIXED_NUMBER = re.compile(r"^(-?)(\d+)\s+(\d+)\s*/\s*(\d+)$")
_SIMPLE_FRACTION = re.compile(r"^(-?\d+)\s*/\s*(-?\d+)$")


def parse_number(text: str) -> Fraction | None:
    """Parse an integer, decimal, fraction or mixed number.

    ``"3"``, ``"-2.5"``, ``"3/4"`` and ``"1 1/2"`` all parse; anything
    else (including a zero denominator) returns ``None``.
    """
    cleaned = text.strip().replace(",", "")
    if not cleaned:
        return None

    mixed = _MIXED_NUMBER.match(cleaned)
    if mixed:
        sign, whole, num, den = mixed.groups()
        if int(den) == 0:
            return None
        value = int(whole) + Fraction(int(num), int(den))
        return -value if sign else value

    simple = _SIMPLE_FRACTION.match(cleaned)
    if simple:
        num, den = (int(g) for g in simple.groups())
        if den == 0:
            return None
        return Fraction(num, den)

    try:
        return Fraction(cleaned)
    except (ValueError, ZeroDivisionError):
        return None


class StandardAnswerValidator(AnswerValidator):
    """Compare answers by numeric value first, then as text."""

    def __init__(self, tolerance: float = ANSWER_TOLERANCE) -> None:
        self.tolerance = tolerance

    def validate(self, problem: Problem, submitted: str | None) -> bool:
        if submitted is None:
            return False
        given = str(submitted).strip()
        if not given:
            return False
        expected = str(problem.answer).strip()

        given_value = parse_number(given)
        expected_value = parse_number(expected)
        if given_value is not None and expected_value is not None:
            return abs(float(given_value - expected_value)) <= self.tolerance

        return given.casefold() == expected.casefold()


# ---------------------------------------------------------------------------
# TopicProblemGenerator
# ---------------------------------------------------------------------------

TopicFn = Callable[[int, GameRNG], Problem]


def _addition(grade: int, rng: GameRNG) -> Problem:
    top = 10 * grade
    a, b = rng.random_int(1, top), rng.random_int(1, top)
    return Problem(text=f"{a} + {b} = ?", answer=a + b, topic="addition")


def _subtraction(grade: int, rng: GameRNG) -> Problem:
    top = 10 * grade
    a, b = rng.random_int(1, top), rng.random_int(1, top)
    a, b = max(a, b), min(a, b)
    return Problem(text=f"{a} - {b} = ?", answer=a - b, topic="subtraction")


def _multiplication(grade: int, rng: GameRNG) -> Problem:
    top = min(12, 2 + 2 * grade)
    a, b = rng.random_int(2, top), rng.random_int(2, top)
    return Problem(text=f"{a} × {b} = ?", answer=a * b, topic="multiplication")


def _division(grade: int, rng: GameRNG) -> Problem:
    top = min(12, 2 + 2 * grade)
    divisor, quotient = rng.random_int(2, top), rng.random_int(1, top)
    return Problem(
        text=f"{divisor * quotient} ÷ {divisor} = ?",
        answer=quotient,
        topic="division",
    )


def _fractions(grade: int, rng: GameRNG) -> Problem:
    denominator = rng.random_int(2, min(12, grade + 4))
    a = rng.random_int(1, denominator - 1)
    b = rng.random_int(1, denominator - 1)
    correct = Fraction(a + b, denominator)
    distractors = {
        Fraction(a + b, denominator * 2),
        Fraction(a * b, denominator),
        Fraction(a + b + 1, denominator),
        Fraction(abs(a - b) or 1, denominator),
    }
    distractors.discard(correct)
    options = [_format_fraction(correct)]
    options += [_format_fraction(d) for d in sorted(distractors)[:3]]
    rng.shuffle(options)
    return Problem(
        text=f"{a}/{denominator} + {b}/{denominator} = ?",
        answer=_format_fraction(correct),
        topic="fractions",
        is_multiple_choice=True,
        options=options,
    )


def _decimals(grade: int, rng: GameRNG) -> Problem:
    a = rng.random_int(1, 10 * grade) / 10
    b = rng.random_int(1, 10 * grade) / 10
    return Problem(
        text=f"{a:.1f} + {b:.1f} = ?",
        answer=round(a + b, 1),
        topic="decimals",
    )


def _arithmetic(grade: int, rng: GameRNG) -> Problem:
    fn = rng.random_choice([_addition, _subtraction])
    problem = fn(grade, rng)
    return problem.model_copy(update={"topic": "arithmetic"})


def _format_fraction(value: Fraction) -> str:
    if value.denominator == 1:
        return str(value.numerator)
    return f"{value.numerator}/{value.denominator}"


DEFAULT_TOPICS: dict[str, TopicFn] = {
    "addition": _addition,
    "subtraction": _subtraction,
    "multiplication": _multiplication,
    "division": _division,
    "fractions": _fractions,
    "decimals": _decimals,
    "arithmetic": _arithmetic,
}

# Substring -> topic key, checked in order.
DEFAULT_KEYWORDS: tuple[tuple[str, str], ...] = (
    ("fraction", "fractions"),
    ("decimal", "decimals"),
    ("multipl", "multiplication"),
    ("times", "multiplication"),
    ("divi", "division"),
    ("subtract", "subtraction"),
    ("differen", "subtraction"),
    ("add", "addition"),
    ("sum", "addition"),
    ("number sense", "arithmetic"),
    ("arithmetic", "arithmetic"),
)

DEFAULT_GRADE_TOPICS: dict[int, str] = {
    1: "addition",
    2: "arithmetic",
    3: "multiplication",
    4: "division",
    5: "fractions",
    6: "decimals",
}


def _normalize(text: str) -> str:
    return " ".join(text.lower().replace("_", " ").replace("-", " ").split())


class TopicProblemGenerator(ProblemGenerator):
    """Arithmetic problems drawn from an explicit topic table.

    Parameters
    ----------
    rng:
        Random source for operands and option order.
    topics:
        Topic key -> generator function.  Keys are normalised before use.
    keywords:
        Ordered ``(substring, topic key)`` pairs for the fuzzy match step.
    grade_topics:
        Grade -> default topic key.  Grades above the table use the
        highest grade's default.
    """

    def __init__(
        self,
        rng: GameRNG | None = None,
        topics: dict[str, TopicFn] | None = None,
        keywords: tuple[tuple[str, str], ...] = DEFAULT_KEYWORDS,
        grade_topics: dict[int, str] | None = None,
    ) -> None:
        self._rng = rng or GameRNG()
        source = DEFAULT_TOPICS if topics is None else topics
        self._topics = {_normalize(k): fn for k, fn in source.items()}
        self._keywords = tuple((_normalize(s), _normalize(k)) for s, k in keywords)
        self._grade_topics = dict(DEFAULT_GRADE_TOPICS if grade_topics is None else grade_topics)

    def resolve_topic(self, grade: int, unit: Unit) -> str | None:
        """Pick the topic key for *unit*, following the documented order."""
        candidates = [_normalize(unit.name)] + [_normalize(t) for t in unit.topics]

        for candidate in candidates:
            if candidate in self._topics:
                return candidate

        for candidate in candidates:
            for needle, key in self._keywords:
                if needle in candidate and key in self._topics:
                    return key

        if not self._grade_topics:
            return None
        clamped = min(max(grade, min(self._grade_topics)), max(self._grade_topics))
        key = _normalize(self._grade_topics.get(clamped, ""))
        logger.warning(
            "No topic matched unit %r; using grade %d default %r",
            unit.name, grade, key,
        )
        return key if key in self._topics else None

    def generate(self, grade: int, unit: Unit) -> Problem | None:
        key = self.resolve_topic(grade, unit)
        if key is None:
            return None
        return self._topics[key](max(1, grade), self._rng)
