"""Pydantic v2 models for difficulty balance reports.

A report sweeps one grade/unit across difficulty profiles and records
how a simulated student of a given accuracy fares on each.  All models
round-trip through JSON.
"""

from __future__ import annotations

from pydantic import BaseModel


class DifficultyMetrics(BaseModel):
    """Aggregate outcome of a batch of battles at one difficulty."""

    difficulty: str
    battles: int
    wins: int
    losses: int
    timeouts: int
    win_rate: float
    avg_turns: float
    avg_hp_lost_ratio: float
    """Mean fraction of the hero's starting max HP lost per battle."""
    max_hit_ratio: float
    """Largest single enemy hit seen, as a fraction of hero max HP.  The
    fairness cap keeps this at or below 0.20."""
    avg_exp_per_win: float
    avg_gold_per_win: float
    level_up_rate: float
    """Fraction of battles that ended with at least one level-up."""
    observed_accuracy: float


class BalanceReport(BaseModel):
    grade: int
    unit: str
    accuracy: float
    """Answer accuracy of the simulated student."""
    runs_per_difficulty: int
    generated_at: str
    difficulty_metrics: list[DifficultyMetrics]

    def metrics_for(self, difficulty: str) -> DifficultyMetrics | None:
        for m in self.difficulty_metrics:
            if m.difficulty == difficulty:
                return m
        return None
