"""Tests for StatBlock health, progression and persistence."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from math_dungeon.sim.core.entities import StatBlock
from math_dungeon.sim.core.rng import GameRNG
from math_dungeon.sim.persistence import InMemoryStatStore


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _make_hero(**kwargs) -> StatBlock:
    defaults = dict(
        name="Ada", max_hp=400, current_hp=400, attack=10, defense=5,
        level=1, experience=0, experience_to_next_level=100,
    )
    defaults.update(kwargs)
    return StatBlock(**defaults)


# ---------------------------------------------------------------------------
# Construction
# ---------------------------------------------------------------------------

class TestConstruction:
    def test_new_hero_defaults(self):
        hero = StatBlock.new_hero("Ada")
        assert hero.name == "Ada"
        assert (hero.max_hp, hero.current_hp) == (100, 100)
        assert (hero.attack, hero.defense) == (10, 5)
        assert hero.level == 1
        assert hero.experience == 0
        assert hero.experience_to_next_level == 100
        assert hero.gold == 0
        assert hero.weapon_damage_bonus == 0

    def test_current_hp_above_max_rejected(self):
        with pytest.raises(ValidationError):
            _make_hero(max_hp=50, current_hp=51)

    def test_zero_max_hp_rejected(self):
        with pytest.raises(ValidationError):
            _make_hero(max_hp=0, current_hp=0)

    def test_negative_gold_rejected(self):
        with pytest.raises(ValidationError):
            _make_hero(gold=-1)


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------

class TestHealth:
    def test_lose_hp_returns_amount_lost(self):
        hero = _make_hero(max_hp=50, current_hp=50)
        assert hero.lose_hp(20) == 20
        assert hero.current_hp == 30

    def test_lose_hp_floors_at_zero(self):
        hero = _make_hero(max_hp=50, current_hp=10)
        assert hero.lose_hp(25) == 10
        assert hero.current_hp == 0
        assert hero.is_dead

    def test_lose_negative_hp_is_noop(self):
        hero = _make_hero(max_hp=50, current_hp=50)
        assert hero.lose_hp(-5) == 0
        assert hero.current_hp == 50

    def test_heal_capped_at_max(self):
        hero = _make_hero(max_hp=50, current_hp=45)
        hero.heal(20)
        assert hero.current_hp == 50

    def test_hp_ratio(self):
        hero = _make_hero(max_hp=200, current_hp=50)
        assert hero.hp_ratio == pytest.approx(0.25)


# ---------------------------------------------------------------------------
# Gold and experience
# ---------------------------------------------------------------------------

class TestProgression:
    def test_add_gold(self):
        hero = _make_hero()
        hero.add_gold(30)
        hero.add_gold(0)
        assert hero.gold == 30

    def test_negative_gold_raises(self):
        hero = _make_hero()
        with pytest.raises(ValueError):
            hero.add_gold(-1)

    def test_negative_experience_raises(self):
        hero = _make_hero()
        with pytest.raises(ValueError):
            hero.add_experience(-10)

    def test_zero_experience_changes_nothing(self):
        hero = _make_hero(experience=99)
        before = hero.snapshot()
        assert hero.add_experience(0) is False
        assert hero.snapshot() == before

    def test_experience_below_threshold_does_not_level(self):
        hero = _make_hero()
        assert hero.add_experience(99) is False
        assert hero.level == 1
        assert hero.experience == 99

    def test_award_150_exp_levels_once(self):
        """150 EXP on a 100 EXP curve: one level-up with 50 left over."""
        hero = _make_hero()

        leveled = hero.add_experience(150)

        assert leveled is True
        assert hero.level == 2
        assert hero.experience == 50
        assert hero.max_hp == 480
        assert hero.current_hp == 480
        assert hero.attack == 11
        assert hero.defense == 5
        assert hero.experience_to_next_level == 150

    def test_exact_threshold_levels_up(self):
        hero = _make_hero()
        assert hero.add_experience(100) is True
        assert hero.level == 2
        assert hero.experience == 0

    def test_large_award_levels_multiple_times(self):
        hero = _make_hero()
        # 100 for level 2, then 150 for level 3; 10 left over.
        assert hero.add_experience(260) is True
        assert hero.level == 3
        assert hero.experience == 10
        assert hero.experience_to_next_level == 225

    def test_level_up_heals_only_the_gain(self):
        hero = _make_hero(max_hp=100, current_hp=40)
        hero.level_up()
        assert hero.max_hp == 120
        assert hero.current_hp == 60

    def test_level_up_floors_growth(self):
        hero = _make_hero(max_hp=101, current_hp=101, attack=7, defense=9)
        hero.level_up()
        assert hero.max_hp == 121   # floor(121.2)
        assert hero.attack == 8     # floor(8.05)
        assert hero.defense == 9    # floor(9.9)

    def test_leftover_experience_below_next_threshold(self):
        rng = GameRNG(11)
        for _ in range(200):
            hero = _make_hero(experience=rng.random_int(0, 99))
            for _ in range(5):
                level_before = hero.level
                leveled = hero.add_experience(rng.random_int(0, 800))
                assert 0 <= hero.experience < hero.experience_to_next_level
                assert leveled == (hero.level > level_before)

    def test_stats_never_decrease_across_levels(self):
        hero = _make_hero(max_hp=100, current_hp=100, attack=1, defense=1)
        previous = hero.model_copy()
        for _ in range(10):
            hero.level_up()
            assert hero.max_hp >= previous.max_hp
            assert hero.attack >= previous.attack
            assert hero.defense >= previous.defense
            assert hero.experience_to_next_level >= previous.experience_to_next_level
            previous = hero.model_copy()
        assert hero.level == 11


# ---------------------------------------------------------------------------
# Persistence
# ---------------------------------------------------------------------------

class TestPersistence:
    def test_save_and_load(self):
        store = InMemoryStatStore()
        hero = _make_hero(gold=42, weapon_damage_bonus=3)
        hero.save(store)

        loaded = StatBlock.load(store)
        assert loaded == hero
        assert loaded is not hero

    def test_load_missing_returns_none(self):
        assert StatBlock.load(InMemoryStatStore()) is None

    def test_custom_key(self):
        store = InMemoryStatStore()
        _make_hero().save(store, key="slot_2")
        assert "slot_2" in store
        assert "hero_stats" not in store
        assert StatBlock.load(store, key="slot_2") is not None

    def test_snapshot_is_plain_dict(self):
        snap = _make_hero().snapshot()
        assert snap["max_hp"] == 400
        assert snap["experience_to_next_level"] == 100
