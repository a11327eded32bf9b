"""Headless battle runner -- drives battles with simulated players.

Provides two classes:

- **BattleSimulator**: plays one battle to completion with an answer agent.
- **BatchRunner**: runs many seeded battles (optionally in parallel) and
  collects their telemetry.

Battle configuration is a plain dict so it can cross process
boundaries::

    {
        "grade": 3,
        "unit": {"name": "Multiplication", "topics": ["multiplication"]},
        "difficulty": "hard",
        "hero": {...},          # optional StatBlock fields
    }
"""

from __future__ import annotations

import logging
import multiprocessing
from typing import Any

from math_dungeon.sim.battle import DEFAULT_UNIT, BattleManager
from math_dungeon.sim.core.battle_state import BattlePhase, EnemyTurnResult
from math_dungeon.sim.core.entities import StatBlock
from math_dungeon.sim.core.rng import GameRNG
from math_dungeon.sim.play_agents.accuracy_agent import AccuracyAgent
from math_dungeon.sim.play_agents.base import AnswerAgent
from math_dungeon.sim.problems import ProblemGenerator, TopicProblemGenerator
from math_dungeon.sim.scheduler import ImmediateScheduler
from math_dungeon.sim.telemetry import BattleTelemetry

logger = logging.getLogger(__name__)

_MAX_TURNS = 200


class BattleSimulator:
    """Plays single battles with an :class:`AnswerAgent`.

    Enemy turns resolve immediately, so a battle runs to a terminal
    phase in one call.  Battles still going after ``max_turns`` player
    turns are recorded as ``"timeout"``.
    """

    def __init__(self, agent: AnswerAgent, max_turns: int = _MAX_TURNS) -> None:
        self.agent = agent
        self.max_turns = max_turns

    def run_battle(
        self,
        hero: StatBlock,
        grade: int,
        unit: Any = None,
        difficulty: str = "medium",
        seed: int = 0,
        problem_generator: ProblemGenerator | None = None,
    ) -> BattleTelemetry:
        rng = GameRNG(seed)
        enemy_hits: list[EnemyTurnResult] = []

        manager = BattleManager(
            hero,
            grade,
            unit if unit is not None else DEFAULT_UNIT,
            difficulty,
            problem_generator=problem_generator
            or TopicProblemGenerator(rng.fork("problems")),
            rng=rng.fork("combat"),
            scheduler=ImmediateScheduler(),
            on_enemy_turn_resolved=enemy_hits.append,
        )

        level_start, hp_start, max_hp_start = hero.level, hero.current_hp, hero.max_hp
        manager.start_battle()
        enemy = manager.get_enemy_stats()
        if enemy is None:
            raise RuntimeError("Battle did not start")

        damage_dealt = correct = wrong = 0
        exp = gold = 0
        leveled_up = False

        while manager.state is BattlePhase.PLAYER_TURN and manager.turn_count <= self.max_turns:
            result = manager.submit_answer(self.agent.choose_answer(manager.current_problem))
            damage_dealt += result.damage
            if result.correct:
                correct += 1
            else:
                wrong += 1
            if result.victory:
                exp, gold, leveled_up = result.exp_gained, result.gold_gained, result.leveled_up

        if manager.state is BattlePhase.VICTORY:
            outcome = "win"
        elif manager.state is BattlePhase.DEFEAT:
            outcome = "loss"
        else:
            outcome = "timeout"
            manager.close()

        return BattleTelemetry(
            seed=seed,
            difficulty=manager.profile.key,
            grade=manager.grade,
            tier=manager.tier or 0,
            enemy_name=enemy.name,
            enemy_level=enemy.level,
            enemy_max_hp=enemy.max_hp,
            result=outcome,
            turns=manager.turn_count,
            hero_level_start=level_start,
            hero_level_end=hero.level,
            hero_hp_start=hp_start,
            hero_hp_end=hero.current_hp,
            hero_max_hp=max_hp_start,
            damage_dealt=damage_dealt,
            damage_taken=sum(h.damage for h in enemy_hits),
            max_enemy_hit=max((h.damage for h in enemy_hits), default=0),
            correct_answers=correct,
            wrong_answers=wrong,
            exp_gained=exp,
            gold_gained=gold,
            leveled_up=leveled_up,
        )


def _run_single_battle(
    agent: AnswerAgent,
    seed: int,
    config: dict[str, Any],
    max_turns: int = _MAX_TURNS,
) -> BattleTelemetry:
    """Build a fresh hero from *config* and play one battle."""
    hero_fields = config.get("hero")
    hero = StatBlock.model_validate(hero_fields) if hero_fields else StatBlock.new_hero()
    simulator = BattleSimulator(agent, max_turns=max_turns)
    return simulator.run_battle(
        hero,
        grade=config.get("grade", 1),
        unit=config.get("unit"),
        difficulty=config.get("difficulty", "medium"),
        seed=seed,
    )


def _worker_run_single(args: tuple) -> BattleTelemetry:
    """Top-level worker function for multiprocessing (must be picklable)."""
    seed, config, accuracy, max_turns = args
    agent = AccuracyAgent(accuracy=accuracy, rng=GameRNG(seed).fork("agent"))
    return _run_single_battle(agent, seed, config, max_turns)


class BatchRunner:
    """Runs many independent battles with :class:`AccuracyAgent` players.

    Each battle gets its own seed (``base_seed + i``) and a fresh hero, so
    results are reproducible and order-independent.
    """

    def __init__(self, accuracy: float = 0.8, max_turns: int = _MAX_TURNS) -> None:
        self.accuracy = accuracy
        self.max_turns = max_turns

    def run_batch(
        self,
        n_runs: int,
        config: dict[str, Any],
        base_seed: int = 42,
        parallel: bool = False,
    ) -> list[BattleTelemetry]:
        seeds = [base_seed + i for i in range(n_runs)]
        logger.info(
            "Running %d battles (difficulty=%s, grade=%s, accuracy=%.2f)",
            n_runs, config.get("difficulty", "medium"), config.get("grade", 1),
            self.accuracy,
        )
        if parallel and n_runs > 1:
            return self._run_parallel(seeds, config)
        return self._run_sequential(seeds, config)

    def _run_sequential(
        self, seeds: list[int], config: dict[str, Any],
    ) -> list[BattleTelemetry]:
        return [
            _worker_run_single((seed, config, self.accuracy, self.max_turns))
            for seed in seeds
        ]

    def _run_parallel(
        self, seeds: list[int], config: dict[str, Any],
    ) -> list[BattleTelemetry]:
        work_items = [(seed, config, self.accuracy, self.max_turns) for seed in seeds]
        n_workers = min(len(seeds), multiprocessing.cpu_count() or 1)
        with multiprocessing.Pool(processes=n_workers) as pool:
            return pool.map(_worker_run_single, work_items)
