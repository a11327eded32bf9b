"""Pure metric computation over battle telemetry.

No side effects, no I/O.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from math_dungeon.balance.models import DifficultyMetrics

if TYPE_CHECKING:
    from math_dungeon.sim.telemetry import BattleTelemetry


def compute_difficulty_metrics(
    battles: list[BattleTelemetry],
    difficulty: str | None = None,
) -> DifficultyMetrics:
    """Summarise *battles* (all fought at the same difficulty)."""
    if difficulty is None:
        difficulty = battles[0].difficulty if battles else "unknown"

    total = len(battles)
    if total == 0:
        return DifficultyMetrics(
            difficulty=difficulty, battles=0, wins=0, losses=0, timeouts=0,
            win_rate=0.0, avg_turns=0.0, avg_hp_lost_ratio=0.0,
            max_hit_ratio=0.0, avg_exp_per_win=0.0, avg_gold_per_win=0.0,
            level_up_rate=0.0, observed_accuracy=0.0,
        )

    wins = [b for b in battles if b.result == "win"]
    losses = sum(1 for b in battles if b.result == "loss")
    timeouts = total - len(wins) - losses

    answered = sum(b.correct_answers + b.wrong_answers for b in battles)
    correct = sum(b.correct_answers for b in battles)

    return DifficultyMetrics(
        difficulty=difficulty,
        battles=total,
        wins=len(wins),
        losses=losses,
        timeouts=timeouts,
        win_rate=len(wins) / total,
        avg_turns=sum(b.turns for b in battles) / total,
        avg_hp_lost_ratio=sum(hp_lost_ratio(b) for b in battles) / total,
        max_hit_ratio=max(b.max_enemy_hit / b.hero_max_hp for b in battles),
        avg_exp_per_win=sum(b.exp_gained for b in wins) / len(wins) if wins else 0.0,
        avg_gold_per_win=sum(b.gold_gained for b in wins) / len(wins) if wins else 0.0,
        level_up_rate=sum(1 for b in battles if b.leveled_up) / total,
        observed_accuracy=correct / answered if answered else 0.0,
    )


def hp_lost_ratio(battle: BattleTelemetry) -> float:
    """HP lost in *battle* as a fraction of the hero's starting max HP."""
    return max(0, battle.hero_hp_start - battle.hero_hp_end) / battle.hero_max_hp
