"""Condensed views of a victory curve for result tables."""

from __future__ import annotations

import math
import sys
from collections.abc import Sequence
from dataclasses import dataclass, field

from war_odds.domain.distribution import Distribution
from war_odds.domain.enums import Side
from war_odds.domain.rules_config import DEFAULT_RULES, OddsRules


@dataclass(slots=True)
class OutcomeSummary:
    """Statistics over the surviving headcounts of one side's victories."""

    side: Side
    total_chance: float
    minimum: int
    maximum: int
    average: float
    median: int
    probable_result: int
    victory_possible: bool = True
    columns: list[tuple[int, float]] = field(default_factory=list)


@dataclass(slots=True)
class BattleReport:
    """Everything a results page shows for one calculation."""

    attacker: OutcomeSummary
    defender: OutcomeSummary
    undecided: float
    round_count: int


def _odds_key(mass: float) -> int:
    # Saturating conversion to basis points; NaN and negatives rank as zero
    scaled = mass * 10000
    if math.isnan(scaled) or scaled <= 0:
        return 0
    if math.isinf(scaled):
        return sys.maxsize
    return int(scaled)


def summarize_outcomes(
    curve: Sequence[float], side: Side, rules: OddsRules = DEFAULT_RULES
) -> OutcomeSummary:
    """Summarize a victory curve indexed by surviving headcount.

    Columns are limited to the headcounts whose mass exceeds
    ``rules.display_threshold``. When none do, a window of
    ``rules.display_radius`` either side of the most probable result is shown
    instead, unless even that result is below ``rules.victory_threshold``.
    """
    above = [index for index, mass in enumerate(curve) if mass > rules.display_threshold]
    minimum = above[0] if above else 0
    maximum = above[-1] if above else 0

    total_chance = 0.0
    weighted = 0.0
    for index, mass in enumerate(curve):
        total_chance += mass
        weighted += index * mass
    average = weighted / total_chance if total_chance else 0.0

    median = 0
    cumulative = 0.0
    for index, mass in enumerate(curve):
        cumulative += mass
        if cumulative >= total_chance / 2:
            median = index
            break

    # Ties go to the highest headcount
    probable_result = 0
    best_key = None
    for index, mass in enumerate(curve):
        key = _odds_key(mass)
        if best_key is None or key >= best_key:
            best_key = key
            probable_result = index

    summary = OutcomeSummary(
        side=side,
        total_chance=total_chance,
        minimum=minimum,
        maximum=maximum,
        average=average,
        median=median,
        probable_result=probable_result,
    )

    if minimum == 0 and maximum == 0:
        if not curve or curve[probable_result] < rules.victory_threshold:
            summary.victory_possible = False
            return summary
        upper = len(curve) - 1
        minimum = max(probable_result, rules.display_radius) - rules.display_radius
        maximum = min(probable_result + rules.display_radius, upper)

    summary.columns = [(index, curve[index]) for index in range(minimum, maximum + 1)]
    return summary


def build_report(
    weights: Distribution, round_count: int, rules: OddsRules = DEFAULT_RULES
) -> BattleReport:
    """Summaries of both sides' victories plus the undecided mass."""

    return BattleReport(
        attacker=summarize_outcomes(weights.attackers_winning(), Side.ATTACKER, rules),
        defender=summarize_outcomes(weights.defenders_winning(), Side.DEFENDER, rules),
        undecided=weights.undecided(),
        round_count=round_count,
    )
