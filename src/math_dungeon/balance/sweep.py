"""Difficulty sweeps: run battles at every difficulty, compute metrics, save/load JSON.

Orchestrates BatchRunner -> compute_difficulty_metrics -> BalanceReport.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Sequence

from math_dungeon.balance.metrics import compute_difficulty_metrics
from math_dungeon.balance.models import BalanceReport
from math_dungeon.sim.battle import DEFAULT_UNIT
from math_dungeon.sim.difficulty import DIFFICULTY_KEYS
from math_dungeon.sim.problems import Unit
from math_dungeon.sim.runner import BatchRunner


def generate_balance_report(
    grade: int = 1,
    unit: Unit | None = None,
    accuracy: float = 0.8,
    num_runs: int = 1_000,
    base_seed: int = 42,
    difficulties: Sequence[str] = DIFFICULTY_KEYS,
    hero: dict[str, Any] | None = None,
    parallel: bool = False,
) -> BalanceReport:
    """Simulate *num_runs* battles per difficulty and summarise them.

    Parameters
    ----------
    grade, unit:
        Where the battles take place.
    accuracy:
        Probability the simulated student answers correctly.
    num_runs:
        Battles per difficulty.  Every difficulty reuses the same seeds.
    hero:
        Optional StatBlock fields for the starting hero; defaults to a
        new level-1 hero.
    """
    unit = unit or DEFAULT_UNIT
    runner = BatchRunner(accuracy=accuracy)

    metrics = []
    for difficulty in difficulties:
        config: dict[str, Any] = {
            "grade": grade,
            "unit": unit.model_dump(),
            "difficulty": difficulty,
        }
        if hero is not None:
            config["hero"] = hero
        battles = runner.run_batch(num_runs, config, base_seed=base_seed, parallel=parallel)
        metrics.append(compute_difficulty_metrics(battles, difficulty))

    return BalanceReport(
        grade=grade,
        unit=unit.name,
        accuracy=accuracy,
        runs_per_difficulty=num_runs,
        generated_at=datetime.now(timezone.utc).isoformat(),
        difficulty_metrics=metrics,
    )


def save_report(report: BalanceReport, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(report.model_dump(), indent=2))


def load_report(path: Path) -> BalanceReport:
    data = json.loads(path.read_text())
    return BalanceReport.model_validate(data)
