"""Play a few battles with a simulated student and print each battle log.

The hero carries over from battle to battle (levels, gold, wounds) and
is saved to a JSON store after every victory, the way the game does.

Usage:
    uv run python scripts/demo_battle.py [--grade 2] [--difficulty hard] [--battles 3]
"""

from __future__ import annotations

import argparse
import logging
from pathlib import Path

from math_dungeon.sim.battle import BattleManager
from math_dungeon.sim.config import BattleSettings
from math_dungeon.sim.core.battle_state import BattlePhase
from math_dungeon.sim.core.entities import StatBlock
from math_dungeon.sim.core.rng import GameRNG
from math_dungeon.sim.dungeon.curriculum import default_curriculum
from math_dungeon.sim.persistence import JsonFileStatStore, Leaderboard
from math_dungeon.sim.play_agents import AccuracyAgent
from math_dungeon.sim.scheduler import ManualScheduler


def separator(title: str) -> None:
    print(f"\n{'=' * 60}")
    print(f"  {title}")
    print(f"{'=' * 60}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Run demo battles")
    parser.add_argument("--grade", type=int, default=2)
    parser.add_argument("--difficulty", type=str, default="medium")
    parser.add_argument("--accuracy", type=float, default=0.8)
    parser.add_argument("--battles", type=int, default=3)
    parser.add_argument("--seed", type=int, default=7)
    parser.add_argument("--save", type=str, default="demo_save.json")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    settings = BattleSettings.from_env()
    store = JsonFileStatStore(Path(args.save))
    hero = StatBlock.load(store, settings.hero_save_key) or StatBlock.new_hero()
    leaderboard = Leaderboard(store, settings.leaderboard_key)
    grade = default_curriculum().find_grade(args.grade)
    units = grade.units if grade is not None else [None]

    rng = GameRNG(args.seed)
    agent = AccuracyAgent(args.accuracy, rng.fork("agent"))

    for i in range(args.battles):
        if hero.is_dead:
            print("\nThe hero has fallen; no more battles.")
            break
        unit = units[i % len(units)]
        separator(f"Battle {i + 1}: {unit.name if unit else 'default unit'}")

        scheduler = ManualScheduler()
        manager = BattleManager(
            hero, args.grade, unit, args.difficulty,
            rng=rng.fork(f"battle-{i}"), scheduler=scheduler,
            store=store, leaderboard=leaderboard, settings=settings,
        )
        manager.start_battle()
        while manager.state is BattlePhase.PLAYER_TURN:
            problem = manager.current_problem
            answer = agent.choose_answer(problem)
            print(f"  Q: {problem.text}  ->  {answer}")
            manager.submit_answer(answer)
            # A front end would animate the hit here before the enemy replies.
            scheduler.advance()

        for line in manager.get_battle_log():
            print(f"  | {line}")
        print(
            f"  Hero: lv{hero.level} {hero.current_hp}/{hero.max_hp} HP, "
            f"{hero.gold} gold, {hero.experience}/{hero.experience_to_next_level} EXP"
        )

    separator("Leaderboard")
    for rank, entry in enumerate(leaderboard.top(5), start=1):
        print(f"  {rank}. {entry.player_name:10s} score={entry.score:4d} lv{entry.level}")


if __name__ == "__main__":
    main()
