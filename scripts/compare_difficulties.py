"""Chart win rate and damage across difficulties and student accuracies.

Usage:
    uv run python scripts/compare_difficulties.py [--grade 3] [--runs 300]
"""

from __future__ import annotations

import argparse

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np

from math_dungeon.balance.metrics import hp_lost_ratio
from math_dungeon.sim.difficulty import DIFFICULTY_KEYS
from math_dungeon.sim.runner import BatchRunner

ACCURACIES = (0.5, 0.7, 0.9)


def run_comparison(grade: int, n_runs: int) -> None:
    results: dict[float, dict[str, list]] = {}
    for accuracy in ACCURACIES:
        runner = BatchRunner(accuracy=accuracy)
        results[accuracy] = {}
        for difficulty in DIFFICULTY_KEYS:
            print(f"Running {n_runs} grade-{grade} battles: {difficulty}, accuracy {accuracy:.0%}")
            results[accuracy][difficulty] = runner.run_batch(
                n_runs, {"grade": grade, "difficulty": difficulty}, base_seed=0,
            )

    generate_charts(results, grade, n_runs)


def generate_charts(results: dict[float, dict[str, list]], grade: int, n_runs: int) -> None:
    fig, axes = plt.subplots(1, 3, figsize=(18, 6))
    fig.suptitle(f"Grade {grade}: {n_runs} battles per cell", fontsize=16, fontweight="bold")

    x = np.arange(len(DIFFICULTY_KEYS))
    width = 0.8 / len(ACCURACIES)
    colors = {0.5: "#e74c3c", 0.7: "#f39c12", 0.9: "#2ecc71"}

    # --- Chart 1: Win rate ---
    ax = axes[0]
    for i, accuracy in enumerate(ACCURACIES):
        rates = [
            np.mean([b.result == "win" for b in results[accuracy][d]]) * 100
            for d in DIFFICULTY_KEYS
        ]
        ax.bar(x + i * width, rates, width, label=f"{accuracy:.0%} accurate",
               color=colors[accuracy], edgecolor="black", linewidth=0.5)
    ax.set_xticks(x + width, DIFFICULTY_KEYS)
    ax.set_ylabel("Win Rate (%)")
    ax.set_title("Win Rate")
    ax.set_ylim(0, 105)
    ax.legend()

    # --- Chart 2: Turns per battle ---
    ax = axes[1]
    for i, accuracy in enumerate(ACCURACIES):
        turns = [np.mean([b.turns for b in results[accuracy][d]]) for d in DIFFICULTY_KEYS]
        ax.bar(x + i * width, turns, width, color=colors[accuracy],
               edgecolor="black", linewidth=0.5)
    ax.set_xticks(x + width, DIFFICULTY_KEYS)
    ax.set_ylabel("Turns")
    ax.set_title("Average Battle Length")

    # --- Chart 3: Largest enemy hit vs fairness cap ---
    ax = axes[2]
    for accuracy in ACCURACIES:
        hits = [
            max(b.max_enemy_hit / b.hero_max_hp for b in results[accuracy][d]) * 100
            for d in DIFFICULTY_KEYS
        ]
        lost = [
            np.mean([hp_lost_ratio(b) for b in results[accuracy][d]]) * 100
            for d in DIFFICULTY_KEYS
        ]
        ax.plot(DIFFICULTY_KEYS, hits, marker="o", color=colors[accuracy],
                label=f"max hit, {accuracy:.0%}")
        ax.plot(DIFFICULTY_KEYS, lost, marker="x", linestyle="--", color=colors[accuracy],
                label=f"avg HP lost, {accuracy:.0%}")
    ax.axhline(20, color="black", linewidth=1, linestyle=":", label="fairness cap")
    ax.set_ylabel("% of hero max HP")
    ax.set_title("Enemy Damage")
    ax.legend(fontsize=8)

    plt.tight_layout()
    out_path = f"difficulty_comparison_grade{grade}.png"
    plt.savefig(out_path, dpi=150, bbox_inches="tight")
    print(f"\nChart saved to {out_path}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument("--grade", type=int, default=3, help="Grade to simulate")
    parser.add_argument("--runs", type=int, default=300, help="Battles per difficulty/accuracy cell")
    args = parser.parse_args()
    run_comparison(args.grade, args.runs)
