"""Driver threading the distribution through every round of a battle."""

from __future__ import annotations

import logging
import math

from war_odds.domain.battle import step_battle
from war_odds.domain.distribution import Distribution
from war_odds.domain.modifiers import CombatModifiers, kill_rates
from war_odds.domain.rules_config import DEFAULT_RULES, OddsRules

logger = logging.getLogger(__name__)


def coerce_headcount(value: float, rules: OddsRules = DEFAULT_RULES) -> int:
    """Truncate a headcount toward zero and clamp it onto the grid.

    Raises:
        ValueError: If ``value`` is NaN or infinite.
    """
    if not math.isfinite(value):
        raise ValueError(f"headcount must be finite, got {value}")
    count = int(value)
    clamped = max(0, min(rules.max_soldiers, count))
    if clamped != count:
        logger.info("headcount %s clamped to %s", value, clamped)
    return clamped


def calculate_weights(
    starting_attackers: float,
    starting_defenders: float,
    modifiers: CombatModifiers,
    *,
    rules: OddsRules = DEFAULT_RULES,
) -> Distribution:
    """Exact outcome distribution after ``modifiers.round_count`` rounds.

    Args:
        starting_attackers: Attacker headcount; truncated and clamped to the grid.
        starting_defenders: Defender headcount; truncated and clamped to the grid.
        modifiers: Modifiers and conditions; never mutated.
        rules: Grid size and kill truncation.

    Returns:
        The final distribution over ``(attackers, defenders)`` states.

    Raises:
        ValueError: If a headcount is not finite.
        DegenerateDistributionError: If a fire phase leaves no mass to renormalize.
    """
    attackers = coerce_headcount(starting_attackers, rules)
    defenders = coerce_headcount(starting_defenders, rules)
    weights = Distribution.point_mass(attackers, defenders, rules)

    rates = kill_rates(modifiers)
    if not rates.in_range:
        logger.warning(
            "kill rates outside [0, 1] (attacker=%s, defender=%s); results may contain "
            "negative or non-finite masses",
            rates.attacker,
            rates.defender,
        )
    logger.debug(
        "calculating %s rounds from (%s, %s) with rates %.4f/%.4f",
        modifiers.round_count,
        attackers,
        defenders,
        rates.attacker,
        rates.defender,
    )
    for _ in range(modifiers.round_count):
        weights = step_battle(weights, modifiers, rates=rates, rules=rules)
    return weights
