"""Round resolution: one exchange of fire advances the distribution."""

from __future__ import annotations

from war_odds.domain.combinatorics import kill_chances
from war_odds.domain.distribution import Distribution
from war_odds.domain.enums import Side
from war_odds.domain.modifiers import CombatModifiers, KillRates, engaged_count, kill_rates
from war_odds.domain.rules_config import DEFAULT_RULES, OddsRules


def resolve_fire(
    weights: Distribution,
    side: Side,
    rate: float,
    *,
    engagement_cap: int | None = None,
    rules: OddsRules = DEFAULT_RULES,
) -> Distribution:
    """Apply one side's volley to every state and renormalize.

    Absorbing states (either side at zero) carry their mass over untouched.
    For the rest, ``0..min(max_kills_per_phase, shooters)`` kills are spread
    over the target's reduced headcounts; the tail of the binomial beyond the
    truncation is dropped and recovered by the renormalization.
    """
    max_soldiers = weights.max_soldiers
    side_length = max_soldiers + 1
    max_kills = rules.max_kills_per_phase
    source = weights.weights
    result = [0.0] * len(source)

    # One binomial row per possible number of engaged shooters
    chances_by_count: dict[int, list[float]] = {}

    for attackers in range(side_length):
        row = attackers * side_length
        for defenders in range(side_length):
            slot = row + defenders
            weight = source[slot]
            if attackers == 0 or defenders == 0:
                result[slot] += weight
                continue
            if weight == 0.0:
                continue

            shooters = attackers if side is Side.ATTACKER else defenders
            engaged = engaged_count(shooters, engagement_cap)
            chances = chances_by_count.get(engaged)
            if chances is None:
                chances = kill_chances(engaged, rate, max_kills)
                chances_by_count[engaged] = chances

            for kills in range(min(max_kills, shooters) + 1):
                if side is Side.ATTACKER:
                    target = row + max(defenders - kills, 0)
                else:
                    target = max(attackers - kills, 0) * side_length + defenders
                result[target] += weight * chances[kills]

    return Distribution(max_soldiers, result).normalized(f"{side.value} fire")


def step_battle(
    weights: Distribution,
    modifiers: CombatModifiers,
    *,
    rates: KillRates | None = None,
    rules: OddsRules = DEFAULT_RULES,
) -> Distribution:
    """Advance the distribution by one round.

    The attacker volley resolves completely before the defenders return fire
    on the survivors; the two phases are never merged.
    """
    rates = rates or kill_rates(modifiers)
    for side in (Side.ATTACKER, Side.DEFENDER):
        weights = resolve_fire(
            weights,
            side,
            rates.for_side(side),
            engagement_cap=modifiers.engagement_cap,
            rules=rules,
        )
    return weights
