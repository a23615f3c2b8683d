"""Form state backing the interactive odds calculator.

The calculator form edits one field at a time from raw text. Text that does
not parse leaves the previous value in place, so a half-typed number never
reaches the calculation core. Condition checkboxes toggle, with archers and
elites mutually exclusive for each side.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, replace

from war_odds.domain.calculate import calculate_weights
from war_odds.domain.distribution import Distribution
from war_odds.domain.modifiers import (
    BONUS_FIELDS,
    CONDITION_FLAGS,
    CombatModifiers,
    KillRates,
    kill_rates,
)
from war_odds.domain.rules_config import DEFAULT_RULES, OddsRules
from war_odds.domain.summary import BattleReport, build_report

logger = logging.getLogger(__name__)

HEADCOUNT_FIELDS = ("starting_attackers", "starting_defenders")
COUNT_FIELDS = ("round_count", "engagement_cap")
FORM_FIELDS = BONUS_FIELDS + HEADCOUNT_FIELDS + COUNT_FIELDS

# Turning a flag on clears its partner
_EXCLUSIVE_FLAGS = {
    "attacker_archers": "attacker_elites",
    "attacker_elites": "attacker_archers",
    "defender_archers": "defender_elites",
    "defender_elites": "defender_archers",
}


@dataclass(frozen=True, slots=True)
class FormInputs:
    """The form values a calculation ran with."""

    modifiers: CombatModifiers
    starting_attackers: float
    starting_defenders: float


@dataclass(frozen=True, slots=True)
class FormResult:
    inputs: FormInputs
    weights: Distribution


def parse_real(text: str) -> float | None:
    """Parse a finite real number, or return ``None``."""

    try:
        value = float(text)
    except ValueError:
        return None
    return value if math.isfinite(value) else None


def parse_count(text: str) -> int | None:
    """Parse a non-negative integer, or return ``None``."""

    text = text.strip()
    if not (text.isascii() and text.isdigit()):
        return None
    return int(text)


class OddsForm:
    """Editable calculator state plus the most recent result."""

    def __init__(
        self,
        *,
        modifiers: CombatModifiers | None = None,
        starting_attackers: float = 100.0,
        starting_defenders: float = 100.0,
        rules: OddsRules = DEFAULT_RULES,
    ) -> None:
        self.modifiers = modifiers or CombatModifiers()
        self.starting_attackers = starting_attackers
        self.starting_defenders = starting_defenders
        self.rules = rules
        self.result: FormResult | None = None

    @property
    def rates(self) -> KillRates:
        return kill_rates(self.modifiers)

    def update_field(self, name: str, text: str) -> bool:
        """Set a field from raw text.

        Returns:
            True if the text parsed and the value was stored, False if the
            previous value was kept.

        Raises:
            KeyError: If ``name`` is not an editable field.
        """
        if name not in FORM_FIELDS:
            raise KeyError(name)

        if name in COUNT_FIELDS:
            count = parse_count(text)
            if count is None:
                logger.debug("ignoring malformed %s input %r", name, text)
                return False
            value: object = count
            if name == "engagement_cap" and count == 0:
                value = None
        else:
            real = parse_real(text)
            if real is None:
                logger.debug("ignoring malformed %s input %r", name, text)
                return False
            value = real

        if name in HEADCOUNT_FIELDS:
            setattr(self, name, value)
        else:
            self.modifiers = replace(self.modifiers, **{name: value})
        return True

    def toggle(self, flag: str) -> bool:
        """Flip a condition flag and return its new value.

        Raises:
            KeyError: If ``flag`` is not a condition flag.
        """
        if flag not in CONDITION_FLAGS:
            raise KeyError(flag)

        enabled = not getattr(self.modifiers, flag)
        changes = {flag: enabled}
        partner = _EXCLUSIVE_FLAGS.get(flag)
        if enabled and partner is not None:
            changes[partner] = False
        self.modifiers = replace(self.modifiers, **changes)
        return enabled

    def inputs(self) -> FormInputs:
        return FormInputs(
            modifiers=self.modifiers,
            starting_attackers=self.starting_attackers,
            starting_defenders=self.starting_defenders,
        )

    def calculate(self, inputs: FormInputs | None = None) -> FormResult:
        """Run the calculation and keep the result.

        ``inputs`` defaults to a snapshot of the current form values; edits
        made while the calculation runs do not leak into the result.
        """
        inputs = inputs or self.inputs()
        weights = calculate_weights(
            inputs.starting_attackers,
            inputs.starting_defenders,
            inputs.modifiers,
            rules=self.rules,
        )
        self.result = FormResult(inputs=inputs, weights=weights)
        return self.result

    def report(self) -> BattleReport | None:
        if self.result is None:
            return None
        return build_report(
            self.result.weights, self.result.inputs.modifiers.round_count, self.rules
        )
