"""Combat modifiers and the per-soldier kill rates derived from them.

Bonuses and maluses are expressed in percentage points. Each side's rate
starts at ``base_chance`` and accumulates signed adjustments for the
battlefield conditions that apply, then is divided by 100. The result is
deliberately left unclamped: stacking enough maluses drives a rate below
zero, and the binomial terms computed from it are carried through as-is.
"""

from __future__ import annotations

from dataclasses import dataclass

from war_odds.domain.enums import Side

BONUS_FIELDS = (
    "base_chance",
    "commander_bonus",
    "blessing_bonus",
    "fortified_def_bonus",
    "claimed_def_bonus",
    "city_def_bonus",
    "archer_attack_malus",
    "archer_defense_malus",
    "elite_attack_bonus",
    "elite_defense_bonus",
)

CONDITION_FLAGS = (
    "attacker_present",
    "defender_present",
    "attacker_blessed",
    "defender_blessed",
    "defender_fortified",
    "attacker_claimed",
    "defender_claimed",
    "attacker_city",
    "defender_city",
    "attacker_archers",
    "defender_archers",
    "attacker_elites",
    "defender_elites",
)


@dataclass(frozen=True, slots=True)
class CombatModifiers:
    """Named modifiers and battlefield conditions for one calculation."""

    base_chance: float = 10.0
    commander_bonus: float = 1.0
    blessing_bonus: float = 2.0
    fortified_def_bonus: float = 1.0
    claimed_def_bonus: float = 1.0
    city_def_bonus: float = 2.0
    archer_attack_malus: float = 1.0
    archer_defense_malus: float = 1.0
    elite_attack_bonus: float = 1.0
    elite_defense_bonus: float = 1.0
    attacker_present: bool = True
    defender_present: bool = False
    attacker_blessed: bool = True
    defender_blessed: bool = True
    defender_fortified: bool = False
    attacker_claimed: bool = False
    defender_claimed: bool = False
    attacker_city: bool = False
    defender_city: bool = False
    attacker_archers: bool = False
    defender_archers: bool = False
    attacker_elites: bool = False
    defender_elites: bool = False
    round_count: int = 20
    engagement_cap: int | None = None

    def __post_init__(self) -> None:
        if self.round_count < 0:
            raise ValueError(f"round_count must be non-negative, got {self.round_count}")
        if self.engagement_cap is not None and self.engagement_cap < 0:
            raise ValueError(f"engagement_cap must be non-negative, got {self.engagement_cap}")


@dataclass(frozen=True, slots=True)
class KillRates:
    """Per-soldier kill probabilities for both sides."""

    attacker: float
    defender: float

    @property
    def attacker_in_range(self) -> bool:
        return 0.0 <= self.attacker <= 1.0

    @property
    def defender_in_range(self) -> bool:
        return 0.0 <= self.defender <= 1.0

    @property
    def in_range(self) -> bool:
        return self.attacker_in_range and self.defender_in_range

    def for_side(self, side: Side) -> float:
        return self.attacker if side is Side.ATTACKER else self.defender


def attacker_rate(modifiers: CombatModifiers) -> float:
    """Return the attacker's per-soldier kill probability."""

    rate = modifiers.base_chance
    if modifiers.attacker_present:
        rate += modifiers.commander_bonus
    if modifiers.attacker_blessed:
        rate += modifiers.blessing_bonus
    if modifiers.defender_claimed:
        rate -= modifiers.claimed_def_bonus
    # Fortifications only count when the defending commander is on the field
    if modifiers.defender_present and modifiers.defender_fortified:
        rate -= modifiers.fortified_def_bonus
    if modifiers.defender_city:
        rate -= modifiers.city_def_bonus
    if modifiers.defender_archers:
        rate += modifiers.archer_defense_malus
    if modifiers.attacker_archers:
        rate -= modifiers.archer_attack_malus
    if modifiers.attacker_elites:
        rate += modifiers.elite_attack_bonus
    if modifiers.defender_elites:
        rate -= modifiers.elite_defense_bonus
    return rate / 100.0


def defender_rate(modifiers: CombatModifiers) -> float:
    """Return the defender's per-soldier kill probability."""

    rate = modifiers.base_chance
    if modifiers.defender_present:
        rate += modifiers.commander_bonus
    if modifiers.defender_blessed:
        rate += modifiers.blessing_bonus
    if modifiers.attacker_claimed:
        rate -= modifiers.claimed_def_bonus
    if modifiers.attacker_city:
        rate -= modifiers.city_def_bonus
    if modifiers.attacker_archers:
        rate += modifiers.archer_defense_malus
    if modifiers.defender_archers:
        rate -= modifiers.archer_attack_malus
    if modifiers.defender_elites:
        rate += modifiers.elite_attack_bonus
    if modifiers.attacker_elites:
        rate -= modifiers.elite_defense_bonus
    return rate / 100.0


def kill_rates(modifiers: CombatModifiers) -> KillRates:
    return KillRates(attacker=attacker_rate(modifiers), defender=defender_rate(modifiers))


def engaged_count(headcount: int, cap: int | None) -> int:
    """Number of soldiers rolling for kills this phase."""

    if cap:
        return min(headcount, cap)
    return headcount
