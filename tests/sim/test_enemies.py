"""Tests for enemy tiers and enemy construction."""

from __future__ import annotations

from math_dungeon.sim.difficulty import DEFAULT_PROFILES, DIFFICULTY_KEYS
from math_dungeon.sim.enemies import ENEMY_NAMES, MAX_TIER, create_enemy, enemy_tier
from math_dungeon.sim.problems import Unit

MEDIUM = DEFAULT_PROFILES["medium"]
HARD = DEFAULT_PROFILES["hard"]
NIGHTMARE = DEFAULT_PROFILES["nightmare"]


class TestEnemyTier:
    def test_unit_difficulty_used(self):
        unit = Unit(name="Division", difficulty=3)
        assert enemy_tier(1, unit, MEDIUM) == 3

    def test_derived_from_grade_when_missing(self):
        unit = Unit(name="Fractions")
        assert enemy_tier(1, unit, MEDIUM) == 1
        assert enemy_tier(3, unit, MEDIUM) == 2
        assert enemy_tier(4, unit, MEDIUM) == 2

    def test_tier_bonus_applied(self):
        unit = Unit(name="Division", difficulty=2)
        assert enemy_tier(3, unit, HARD) == 3
        assert enemy_tier(3, unit, NIGHTMARE) == 4

    def test_capped_at_max_tier(self):
        unit = Unit(name="Calculus", difficulty=5)
        assert enemy_tier(12, unit, NIGHTMARE) == MAX_TIER


class TestCreateEnemy:
    def test_full_health(self):
        enemy = create_enemy(2, 1, MEDIUM)
        assert enemy.current_hp == enemy.max_hp
        assert enemy.max_hp > 0

    def test_named_by_tier(self):
        for tier, name in ENEMY_NAMES.items():
            assert create_enemy(1, tier, MEDIUM).name == name

    def test_level_from_grade_and_tier(self):
        assert create_enemy(3, 2, MEDIUM).level == 4
        assert create_enemy(1, 1, MEDIUM).level == 1

    def test_medium_base_stats(self):
        enemy = create_enemy(1, 1, MEDIUM)
        assert enemy.max_hp == 35     # 20 + 5 + 10
        assert enemy.attack == 6      # 3 + 1 + 2
        assert enemy.defense == 4     # 2 + 1 + 1

    def test_health_and_attack_scaled_by_profile(self):
        base = create_enemy(2, 2, MEDIUM)
        hard = create_enemy(2, 2, HARD)
        assert hard.max_hp == int(base.max_hp * 1.5)
        assert hard.attack == int(base.attack * 1.25)
        assert hard.defense == base.defense

    def test_higher_grade_is_tougher(self):
        for key in DIFFICULTY_KEYS:
            profile = DEFAULT_PROFILES[key]
            low, high = create_enemy(1, 1, profile), create_enemy(6, 1, profile)
            assert high.max_hp > low.max_hp
            assert high.attack >= low.attack

    def test_out_of_range_tier_clamped(self):
        assert create_enemy(1, 9, MEDIUM).name == ENEMY_NAMES[MAX_TIER]
        assert create_enemy(1, 0, MEDIUM).name == ENEMY_NAMES[1]
