"""Dense probability grid over (attackers, defenders) headcounts."""

from __future__ import annotations

import math
from collections.abc import Iterator

from war_odds.domain.errors import DegenerateDistributionError
from war_odds.domain.rules_config import DEFAULT_RULES, OddsRules


class Distribution:
    """Probability mass for every force state on a square grid.

    Cells are stored row-major in a flat list: the mass of ``(attackers,
    defenders)`` lives at ``attackers * (max_soldiers + 1) + defenders``.
    Instances are treated as values; the transition functions always build a
    fresh grid rather than editing one in place.
    """

    __slots__ = ("max_soldiers", "weights")

    def __init__(
        self,
        max_soldiers: int = DEFAULT_RULES.max_soldiers,
        weights: list[float] | None = None,
    ) -> None:
        size = (max_soldiers + 1) * (max_soldiers + 1)
        if weights is None:
            weights = [0.0] * size
        elif len(weights) != size:
            raise ValueError(
                f"expected {size} weights for a {max_soldiers} soldier grid, got {len(weights)}"
            )
        self.max_soldiers = max_soldiers
        self.weights = weights

    @classmethod
    def empty(cls, rules: OddsRules = DEFAULT_RULES) -> Distribution:
        return cls(rules.max_soldiers)

    @classmethod
    def point_mass(
        cls, attackers: int, defenders: int, rules: OddsRules = DEFAULT_RULES
    ) -> Distribution:
        """Distribution with all mass on a single state."""

        dist = cls.empty(rules)
        dist.weights[dist.slot_for(attackers, defenders)] = 1.0
        return dist

    def slot_for(self, attackers: int, defenders: int) -> int:
        if not (0 <= attackers <= self.max_soldiers and 0 <= defenders <= self.max_soldiers):
            raise IndexError(f"state ({attackers}, {defenders}) outside 0..{self.max_soldiers}")
        return attackers * (self.max_soldiers + 1) + defenders

    def __getitem__(self, state: tuple[int, int]) -> float:
        attackers, defenders = state
        return self.weights[self.slot_for(attackers, defenders)]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Distribution):
            return NotImplemented
        return self.max_soldiers == other.max_soldiers and self.weights == other.weights

    def __repr__(self) -> str:
        return f"Distribution(max_soldiers={self.max_soldiers}, total={self.total()!r})"

    def states(self) -> Iterator[tuple[int, int, float]]:
        """Yield ``(attackers, defenders, mass)`` in slot order."""

        side = self.max_soldiers + 1
        for slot, weight in enumerate(self.weights):
            yield slot // side, slot % side, weight

    def total(self) -> float:
        # Left-to-right accumulation; sum() compensates on newer interpreters
        total = 0.0
        for weight in self.weights:
            total += weight
        return total

    def is_finite(self) -> bool:
        return all(math.isfinite(weight) for weight in self.weights)

    def normalized(self, phase: str = "renormalization") -> Distribution:
        """Return a copy rescaled so the masses sum to one.

        Raises:
            DegenerateDistributionError: If the grid holds no mass at all.
        """
        total = self.total()
        if total == 0.0:
            raise DegenerateDistributionError(phase)
        return Distribution(self.max_soldiers, [weight / total for weight in self.weights])

    def attackers_winning(self) -> list[float]:
        """Mass of each final attacker headcount with the defenders wiped out."""

        return [self[attackers, 0] for attackers in range(self.max_soldiers + 1)]

    def defenders_winning(self) -> list[float]:
        """Mass of each final defender headcount with the attackers wiped out."""

        return [self[0, defenders] for defenders in range(self.max_soldiers + 1)]

    def undecided(self) -> float:
        """Mass of states where both sides still have soldiers."""

        odds = 0.0
        for attackers in range(1, self.max_soldiers + 1):
            for defenders in range(1, self.max_soldiers + 1):
                odds += self[attackers, defenders]
        return odds
