"""Sweep every difficulty for one grade/unit and print a balance report.

Usage:
    uv run python scripts/generate_balance_report.py [--grade 3] [--unit Multiplication]
        [--accuracy 0.8] [--runs 1000] [--output data/balance/]
"""

from __future__ import annotations

import argparse
import logging
import time
from pathlib import Path

from math_dungeon.balance.report import generate_text_report
from math_dungeon.balance.sweep import generate_balance_report, save_report
from math_dungeon.sim.dungeon.curriculum import default_curriculum


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate a difficulty balance report")
    parser.add_argument("--grade", type=int, default=1, help="Grade to simulate")
    parser.add_argument("--unit", type=str, default=None, help="Unit name within the grade")
    parser.add_argument("--accuracy", type=float, default=0.8, help="Student answer accuracy")
    parser.add_argument("--runs", type=int, default=1_000, help="Battles per difficulty")
    parser.add_argument("--seed", type=int, default=42, help="Base seed")
    parser.add_argument("--parallel", action="store_true", help="Use multiprocessing")
    parser.add_argument("--output", type=str, default=None, help="Directory for the JSON report")
    parser.add_argument("-v", "--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)

    curriculum = default_curriculum()
    unit = None
    if args.unit is not None:
        unit = curriculum.find_unit(args.grade, args.unit)
        if unit is None:
            parser.error(f"grade {args.grade} has no unit named {args.unit!r}")

    print(f"Running {args.runs:,} battles per difficulty...")
    t0 = time.perf_counter()
    report = generate_balance_report(
        grade=args.grade,
        unit=unit,
        accuracy=args.accuracy,
        num_runs=args.runs,
        base_seed=args.seed,
        parallel=args.parallel,
    )
    print(f"Done in {time.perf_counter() - t0:.1f}s")

    if args.output is not None:
        slug = report.unit.lower().replace(" ", "_")
        path = Path(args.output) / f"grade{report.grade}_{slug}_{int(args.accuracy * 100)}.json"
        save_report(report, path)
        print(f"Saved report to {path}")

    print()
    print(generate_text_report(report))


if __name__ == "__main__":
    main()
