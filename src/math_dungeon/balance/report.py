"""Human-readable rendering of a balance report."""

from __future__ import annotations

from math_dungeon.balance.models import BalanceReport

# Anything above this means the fairness cap was bypassed.
_FAIRNESS_LIMIT = 0.20


def generate_text_report(report: BalanceReport) -> str:
    lines: list[str] = []

    lines.append("=" * 60)
    lines.append(f"Difficulty Balance Report: grade {report.grade}, {report.unit}")
    lines.append(
        f"Accuracy: {report.accuracy:.0%} | Runs/difficulty: "
        f"{report.runs_per_difficulty:,} | Generated: {report.generated_at}"
    )
    lines.append("=" * 60)

    lines.append("")
    lines.append(
        f"  {'difficulty':12s} {'win':>7s} {'turns':>6s} {'hp lost':>8s}"
        f" {'max hit':>8s} {'exp/win':>8s} {'gold/win':>9s} {'lvl up':>7s}"
    )
    for m in report.difficulty_metrics:
        lines.append(
            f"  {m.difficulty:12s} {m.win_rate:7.1%} {m.avg_turns:6.1f}"
            f" {m.avg_hp_lost_ratio:8.1%} {m.max_hit_ratio:8.1%}"
            f" {m.avg_exp_per_win:8.1f} {m.avg_gold_per_win:9.1f}"
            f" {m.level_up_rate:7.1%}"
        )

    violations = [
        m for m in report.difficulty_metrics if m.max_hit_ratio > _FAIRNESS_LIMIT
    ]
    timeouts = [m for m in report.difficulty_metrics if m.timeouts]

    lines.append("")
    lines.append("## Checks")
    if violations:
        for m in violations:
            lines.append(
                f"  FAIRNESS: {m.difficulty} saw a hit of {m.max_hit_ratio:.1%} of max HP"
            )
    else:
        lines.append(f"  Fairness cap held (no hit above {_FAIRNESS_LIMIT:.0%} of max HP)")
    for m in timeouts:
        lines.append(f"  TIMEOUT: {m.timeouts} {m.difficulty} battle(s) hit the turn limit")

    lines.append("")
    return "\n".join(lines)
