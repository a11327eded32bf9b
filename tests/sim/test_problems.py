"""Tests for answer validation and the topic problem generator."""

from __future__ import annotations

from fractions import Fraction

import pytest

from math_dungeon.sim.core.rng import GameRNG
from math_dungeon.sim.problems import (
    DEFAULT_TOPICS,
    Problem,
    StandardAnswerValidator,
    TopicProblemGenerator,
    Unit,
    parse_number,
)


def _make_problem(answer, **kwargs) -> Problem:
    defaults = dict(text="?", answer=answer, topic="test")
    defaults.update(kwargs)
    return Problem(**defaults)


# ---------------------------------------------------------------------------
# parse_number
# ---------------------------------------------------------------------------

class TestParseNumber:
    @pytest.mark.parametrize(
        "text, expected",
        [
            ("3", Fraction(3)),
            ("-2.5", Fraction(-5, 2)),
            ("3/4", Fraction(3, 4)),
            (" 6 / 8 ", Fraction(3, 4)),
            ("1 1/2", Fraction(3, 2)),
            ("-1 1/2", Fraction(-3, 2)),
            ("1,000", Fraction(1000)),
        ],
    )
    def test_parses(self, text, expected):
        assert parse_number(text) == expected

    @pytest.mark.parametrize("text", ["", "  ", "abc", "1/0", "2 1/0", "3..4"])
    def test_rejects(self, text):
        assert parse_number(text) is None


# ---------------------------------------------------------------------------
# StandardAnswerValidator
# ---------------------------------------------------------------------------

class TestStandardAnswerValidator:
    def setup_method(self):
        self.validator = StandardAnswerValidator()

    def test_exact_integer(self):
        assert self.validator.validate(_make_problem(12), "12")

    def test_whitespace_ignored(self):
        assert self.validator.validate(_make_problem(12), "  12 ")

    def test_wrong_integer(self):
        assert not self.validator.validate(_make_problem(12), "13")

    def test_decimal_within_tolerance(self):
        assert self.validator.validate(_make_problem(0.3), "0.305")
        assert not self.validator.validate(_make_problem(0.3), "0.32")

    def test_equivalent_fraction(self):
        assert self.validator.validate(_make_problem("3/4"), "6/8")
        assert self.validator.validate(_make_problem("3/4"), "0.75")

    def test_mixed_number(self):
        assert self.validator.validate(_make_problem("3/2"), "1 1/2")

    def test_text_is_case_insensitive(self):
        assert self.validator.validate(_make_problem("Triangle"), "triangle")
        assert not self.validator.validate(_make_problem("Triangle"), "square")

    @pytest.mark.parametrize("submitted", [None, "", "   "])
    def test_blank_is_wrong(self, submitted):
        assert not self.validator.validate(_make_problem(0), submitted)

    def test_number_against_text_answer(self):
        assert not self.validator.validate(_make_problem("seven"), "7")


# ---------------------------------------------------------------------------
# TopicProblemGenerator
# ---------------------------------------------------------------------------

class TestResolveTopic:
    def setup_method(self):
        self.generator = TopicProblemGenerator(GameRNG(1))

    def test_exact_unit_name(self):
        assert self.generator.resolve_topic(1, Unit(name="Multiplication")) == "multiplication"

    def test_exact_topic(self):
        unit = Unit(name="Chapter 4", topics=["Division"])
        assert self.generator.resolve_topic(1, unit) == "division"

    def test_name_normalized(self):
        assert self.generator.resolve_topic(1, Unit(name="  DECIMALS ")) == "decimals"

    def test_keyword_match(self):
        assert self.generator.resolve_topic(3, Unit(name="Times Tables")) == "multiplication"
        assert self.generator.resolve_topic(4, Unit(name="Long Division")) == "division"
        assert self.generator.resolve_topic(5, Unit(name="Adding Fractions")) == "fractions"

    def test_exact_match_beats_keyword(self):
        unit = Unit(name="Adding Fractions", topics=["decimals"])
        assert self.generator.resolve_topic(5, unit) == "decimals"

    def test_grade_default(self):
        assert self.generator.resolve_topic(3, Unit(name="Geometry")) == "multiplication"

    def test_grade_default_clamped(self):
        assert self.generator.resolve_topic(12, Unit(name="Geometry")) == "decimals"
        assert self.generator.resolve_topic(0, Unit(name="Geometry")) == "addition"

    def test_no_table_returns_none(self):
        generator = TopicProblemGenerator(GameRNG(1), topics={}, grade_topics={})
        assert generator.resolve_topic(1, Unit(name="Addition")) is None
        assert generator.generate(1, Unit(name="Addition")) is None


class TestGenerate:
    @pytest.mark.parametrize("topic", sorted(DEFAULT_TOPICS))
    def test_every_topic_answers_itself(self, topic):
        generator = TopicProblemGenerator(GameRNG(3))
        validator = StandardAnswerValidator()
        for grade in range(1, 7):
            problem = generator.generate(grade, Unit(name=topic))
            assert problem is not None
            assert problem.topic == topic
            assert validator.validate(problem, str(problem.answer))

    def test_fractions_are_multiple_choice(self):
        generator = TopicProblemGenerator(GameRNG(5))
        for _ in range(20):
            problem = generator.generate(5, Unit(name="Fractions"))
            assert problem.is_multiple_choice
            assert problem.answer in problem.options
            assert len(set(problem.options)) == len(problem.options)

    def test_subtraction_never_negative(self):
        generator = TopicProblemGenerator(GameRNG(8))
        for _ in range(50):
            assert generator.generate(2, Unit(name="Subtraction")).answer >= 0

    def test_division_is_exact(self):
        generator = TopicProblemGenerator(GameRNG(8))
        for _ in range(50):
            problem = generator.generate(4, Unit(name="Division"))
            dividend, divisor = problem.text.split(" = ")[0].split(" ÷ ")
            assert int(dividend) == int(divisor) * problem.answer

    def test_seeded_generation_is_reproducible(self):
        unit = Unit(name="Addition")
        a, b = TopicProblemGenerator(GameRNG(11)), TopicProblemGenerator(GameRNG(11))
        assert [a.generate(2, unit) for _ in range(5)] == [b.generate(2, unit) for _ in range(5)]

    def test_custom_topic_table(self):
        def constant(grade, rng):
            return Problem(text="1 + 1 = ?", answer=2, topic="constant")

        generator = TopicProblemGenerator(
            GameRNG(1),
            topics={"Constant": constant},
            keywords=(),
            grade_topics={1: "constant"},
        )
        assert generator.generate(1, Unit(name="anything")).answer == 2
