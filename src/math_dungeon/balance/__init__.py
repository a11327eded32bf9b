"""Balance analysis: difficulty sweeps, metrics, and reports."""

from math_dungeon.balance.metrics import compute_difficulty_metrics, hp_lost_ratio
from math_dungeon.balance.models import BalanceReport, DifficultyMetrics
from math_dungeon.balance.report import generate_text_report
from math_dungeon.balance.sweep import generate_balance_report, load_report, save_report

__all__ = [
    "BalanceReport",
    "DifficultyMetrics",
    "compute_difficulty_metrics",
    "generate_balance_report",
    "generate_text_report",
    "hp_lost_ratio",
    "load_report",
    "save_report",
]
