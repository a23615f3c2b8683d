"""Runtime primitives backing the War Odds HTTP API."""

from __future__ import annotations

import asyncio
import logging

from war_odds.config import Settings, get_settings
from war_odds.domain.calculate import calculate_weights, coerce_headcount
from war_odds.domain.distribution import Distribution
from war_odds.domain.errors import RoundLimitExceededError
from war_odds.domain.modifiers import CombatModifiers, kill_rates
from war_odds.domain.rules_config import DEFAULT_RULES, OddsRules
from war_odds.domain.summary import build_report
from war_odds.schemas import (
    CalculationResponse,
    FormRead,
    ModifiersPayload,
    OutcomeSummaryRead,
    RatesRead,
)
from war_odds.services import FormResult, OddsForm

logger = logging.getLogger(__name__)


class ApiState:
    """Shared calculator state for the FastAPI layer."""

    def __init__(
        self, *, settings: Settings | None = None, rules: OddsRules = DEFAULT_RULES
    ) -> None:
        self.settings = settings or get_settings()
        self.rules = rules
        self.form = OddsForm(
            modifiers=CombatModifiers(round_count=self.settings.default_round_count),
            rules=rules,
        )
        self._form_lock = asyncio.Lock()

    def check_round_count(self, round_count: int) -> None:
        limit = self.settings.max_round_count
        if round_count > limit:
            logger.info("rejecting calculation of %s rounds (limit %s)", round_count, limit)
            raise RoundLimitExceededError(round_count, limit)

    async def calculate(
        self,
        starting_attackers: float,
        starting_defenders: float,
        modifiers: CombatModifiers,
    ) -> Distribution:
        """Run a stateless calculation off the event loop."""

        self.check_round_count(modifiers.round_count)
        return await asyncio.to_thread(
            calculate_weights,
            starting_attackers,
            starting_defenders,
            modifiers,
            rules=self.rules,
        )

    async def calculate_form(self) -> FormResult:
        """Calculate the server-held form; one form calculation at a time.

        The form values are captured once the lock is held, and the result
        carries them so a response never mixes inputs from different edits.
        """
        async with self._form_lock:
            inputs = self.form.inputs()
            self.check_round_count(inputs.modifiers.round_count)
            return await asyncio.to_thread(self.form.calculate, inputs)

    def form_read(self) -> FormRead:
        return FormRead(
            modifiers=ModifiersPayload.from_domain(self.form.modifiers),
            starting_attackers=self.form.starting_attackers,
            starting_defenders=self.form.starting_defenders,
            rates=RatesRead.from_domain(self.form.rates),
            has_result=self.form.result is not None,
        )

    def form_response(self, result: FormResult) -> CalculationResponse:
        inputs = result.inputs
        return self.to_response(
            result.weights,
            inputs.starting_attackers,
            inputs.starting_defenders,
            inputs.modifiers,
        )

    def to_response(
        self,
        weights: Distribution,
        starting_attackers: float,
        starting_defenders: float,
        modifiers: CombatModifiers,
    ) -> CalculationResponse:
        report = build_report(weights, modifiers.round_count, self.rules)
        return CalculationResponse(
            starting_attackers=coerce_headcount(starting_attackers, self.rules),
            starting_defenders=coerce_headcount(starting_defenders, self.rules),
            round_count=modifiers.round_count,
            rates=RatesRead.from_domain(kill_rates(modifiers)),
            attackers_winning=weights.attackers_winning(),
            defenders_winning=weights.defenders_winning(),
            undecided=report.undecided,
            attacker_summary=OutcomeSummaryRead.from_domain(report.attacker),
            defender_summary=OutcomeSummaryRead.from_domain(report.defender),
        )


def build_state() -> ApiState:
    """Factory used by the API to initialize state."""

    return ApiState()
