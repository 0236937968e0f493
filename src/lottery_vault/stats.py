"""Progress and fairness reporting over stored cycles.

A cycle is fair when every color was drawn exactly ``draws_per_color`` times.
Colors are resolved through the prize catalog; results that reference an
unknown prize do not count towards any color.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Sequence

from .models import Config, Cycle, Prize, PrizeColor


@dataclass(frozen=True)
class CycleProgress:
    completed_draws: int
    total_draws: int
    percentage: float
    remaining_by_color: Dict[PrizeColor, int]


@dataclass(frozen=True)
class LotteryStats:
    total_cycles: int
    total_draws: int
    fairness_passed: int
    color_distribution: Dict[PrizeColor, int]


def cycle_progress(cycle: Cycle, config: Config) -> CycleProgress:
    total = config.draws_per_cycle
    done = cycle.draws_made()
    percentage = round(done / total * 100, 2) if total else 0.0
    return CycleProgress(
        completed_draws=done,
        total_draws=total,
        percentage=percentage,
        remaining_by_color=cycle.remaining_draws.by_color(),
    )


def _color_map(prizes: Iterable[Prize]) -> Dict[str, PrizeColor]:
    return {p.id: p.color for p in prizes}


def _count_colors(cycle: Cycle, colors: Dict[str, PrizeColor]) -> Dict[PrizeColor, int]:
    counts = {c: 0 for c in PrizeColor}
    for result in cycle.results:
        color: Optional[PrizeColor] = colors.get(result.prize_id)
        if color is not None:
            counts[color] += 1
    return counts


def validate_cycle_fairness(cycle: Cycle, prizes: Sequence[Prize], draws_per_color: int) -> bool:
    if not cycle.completed:
        return False
    counts = _count_colors(cycle, _color_map(prizes))
    return all(n == draws_per_color for n in counts.values())


def generate_lottery_stats(
    cycles: Sequence[Cycle], prizes: Sequence[Prize], draws_per_color: int
) -> LotteryStats:
    colors = _color_map(prizes)
    distribution = {c: 0 for c in PrizeColor}
    total_draws = 0
    fairness_passed = 0

    for cycle in cycles:
        if not cycle.completed:
            continue
        total_draws += cycle.draws_made()
        counts = _count_colors(cycle, colors)
        if all(n == draws_per_color for n in counts.values()):
            fairness_passed += 1
        for color, n in counts.items():
            distribution[color] += n

    return LotteryStats(
        total_cycles=len(cycles),
        total_draws=total_draws,
        fairness_passed=fairness_passed,
        color_distribution=distribution,
    )
