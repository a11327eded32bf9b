"""Telemetry records for simulated battles.

``BattleTelemetry`` captures what balance analysis needs from one battle
without keeping the whole log:

- outcome and length,
- damage dealt and taken, including the single largest enemy hit,
- answer accuracy,
- rewards and whether the hero levelled up.

It is a plain ``dataclass`` rather than a Pydantic model to keep
collection cheap during large batch runs.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class BattleTelemetry:
    """Stats from a single simulated battle.

    Attributes
    ----------
    seed:
        Seed the battle was run with.
    difficulty:
        Difficulty profile key.
    grade, tier:
        Grade of the battle and resulting enemy tier.
    enemy_name, enemy_level, enemy_max_hp:
        The enemy that was fought.
    result:
        ``"win"``, ``"loss"`` or ``"timeout"`` (exchange cap reached).
    turns:
        Player turns taken.
    hero_level_start, hero_level_end:
        Hero level before and after the battle.
    hero_hp_start, hero_hp_end, hero_max_hp:
        Hero HP at the start and end, and max HP at the start.
    damage_dealt:
        Total damage dealt to the enemy.
    damage_taken:
        Total damage dealt to the hero.
    max_enemy_hit:
        Largest single enemy hit after the fairness cap.
    correct_answers, wrong_answers:
        Answer counts.
    exp_gained, gold_gained, leveled_up:
        Victory rewards (zero on loss).
    """

    seed: int
    difficulty: str
    grade: int
    tier: int
    enemy_name: str
    enemy_level: int
    enemy_max_hp: int
    result: str
    turns: int
    hero_level_start: int
    hero_level_end: int
    hero_hp_start: int
    hero_hp_end: int
    hero_max_hp: int
    damage_dealt: int = 0
    damage_taken: int = 0
    max_enemy_hit: int = 0
    correct_answers: int = 0
    wrong_answers: int = 0
    exp_gained: int = 0
    gold_gained: int = 0
    leveled_up: bool = False

    @property
    def accuracy(self) -> float:
        answered = self.correct_answers + self.wrong_answers
        return self.correct_answers / answered if answered else 0.0
