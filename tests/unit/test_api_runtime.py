"""Tests for API runtime helpers."""

from __future__ import annotations

import asyncio

import pytest

from war_odds.api.runtime import ApiState
from war_odds.config import Settings
from war_odds.domain.calculate import calculate_weights
from war_odds.domain.errors import RoundLimitExceededError
from war_odds.domain.modifiers import CombatModifiers
from war_odds.domain.rules_config import OddsRules


def _state() -> ApiState:
    return ApiState(
        settings=Settings(_env_file=None, default_round_count=2),
        rules=OddsRules(max_soldiers=8),
    )


def test_form_starts_with_configured_round_count():
    state = _state()
    assert state.form.modifiers.round_count == 2
    form = state.form_read()
    assert form.modifiers.round_count == 2
    assert form.has_result is False
    assert form.rates.attacker == pytest.approx(0.13)


@pytest.mark.asyncio
async def test_calculate_runs_off_the_event_loop():
    state = _state()
    modifiers = CombatModifiers(round_count=3)

    weights = await state.calculate(8, 5, modifiers)
    response = state.to_response(weights, 8, 5, modifiers)

    assert response.starting_attackers == 8
    assert response.starting_defenders == 5
    assert len(response.attackers_winning) == 9
    assert response.undecided == pytest.approx(weights.undecided())
    assert response.attacker_summary.total_chance == pytest.approx(
        sum(weights.attackers_winning())
    )


@pytest.mark.asyncio
async def test_calculate_form_stores_result():
    state = _state()
    state.form.update_field("starting_attackers", "6")
    state.form.update_field("starting_defenders", "6")

    result = await state.calculate_form()

    assert state.form.result is result
    assert result.inputs.starting_attackers == 6.0
    assert state.form_read().has_result is True
    response = state.form_response(result)
    assert response.starting_attackers == 6
    assert response.round_count == 2


@pytest.mark.asyncio
async def test_round_limit_is_enforced_for_both_calculations():
    state = ApiState(
        settings=Settings(_env_file=None, default_round_count=2, max_round_count=4),
        rules=OddsRules(max_soldiers=8),
    )

    with pytest.raises(RoundLimitExceededError, match="exceeds the limit of 4"):
        await state.calculate(8, 8, CombatModifiers(round_count=5))

    state.form.update_field("round_count", "5")
    with pytest.raises(RoundLimitExceededError):
        await state.calculate_form()
    assert state.form.result is None


@pytest.mark.asyncio
async def test_form_edits_while_waiting_do_not_mix_into_the_response():
    state = _state()
    state.form.update_field("starting_attackers", "8")
    state.form.update_field("starting_defenders", "8")
    state.form.update_field("round_count", "0")

    async with state._form_lock:
        pending = asyncio.create_task(state.calculate_form())
        await asyncio.sleep(0)
        state.form.update_field("round_count", "3")
    result = await pending

    assert result.inputs.modifiers.round_count == 3
    response = state.form_response(result)
    assert response.round_count == 3
    expected = calculate_weights(8, 8, CombatModifiers(round_count=3), rules=state.rules)
    assert result.weights == expected
    assert response.undecided == pytest.approx(expected.undecided())
