"""HTTP routes for the War Odds API."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, status

from war_odds import __version__
from war_odds.api.runtime import ApiState
from war_odds.domain.distribution import Distribution
from war_odds.domain.errors import DegenerateDistributionError, RoundLimitExceededError
from war_odds.domain.modifiers import CombatModifiers, kill_rates
from war_odds.schemas import (
    CalculationRequest,
    CalculationResponse,
    FieldUpdate,
    FieldUpdateResponse,
    FormRead,
    ModifiersPayload,
    RatesRead,
    ToggleResponse,
)

router = APIRouter()


def get_state(request: Request) -> ApiState:
    state = getattr(request.app.state, "api_state", None)
    if state is None:  # pragma: no cover - FastAPI should always initialise state
        raise RuntimeError("API state not initialised")
    return state


ApiStateDep = Annotated[ApiState, Depends(get_state)]


def _check_finite(weights: Distribution) -> None:
    if not weights.is_finite():
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="distribution contains non-finite mass; check for extreme modifiers",
        )


@router.get("/health")
async def health(state: ApiStateDep) -> dict[str, object]:
    return {
        "status": "ok",
        "version": __version__,
        "max_soldiers": state.rules.max_soldiers,
        "max_kills_per_phase": state.rules.max_kills_per_phase,
    }


@router.get("/modifiers/defaults")
async def default_modifiers(state: ApiStateDep) -> dict[str, object]:
    modifiers = CombatModifiers(round_count=state.settings.default_round_count)
    return {
        "modifiers": ModifiersPayload.from_domain(modifiers).model_dump(),
        "rates": RatesRead.from_domain(kill_rates(modifiers)).model_dump(),
    }


@router.post("/calculate", response_model=CalculationResponse)
async def calculate(request: CalculationRequest, state: ApiStateDep) -> CalculationResponse:
    modifiers = request.modifiers.to_domain()
    try:
        weights = await state.calculate(
            request.starting_attackers, request.starting_defenders, modifiers
        )
    except (DegenerateDistributionError, RoundLimitExceededError) as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc
    except ValueError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    _check_finite(weights)
    return state.to_response(
        weights, request.starting_attackers, request.starting_defenders, modifiers
    )


@router.get("/form", response_model=FormRead)
async def get_form(state: ApiStateDep) -> FormRead:
    return state.form_read()


@router.put("/form/fields/{field}", response_model=FieldUpdateResponse)
async def update_form_field(
    field: str, request: FieldUpdate, state: ApiStateDep
) -> FieldUpdateResponse:
    try:
        accepted = state.form.update_field(field, request.value)
    except KeyError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=f"unknown field: {field}"
        ) from exc
    return FieldUpdateResponse(accepted=accepted, form=state.form_read())


@router.post("/form/toggles/{flag}", response_model=ToggleResponse)
async def toggle_form_flag(flag: str, state: ApiStateDep) -> ToggleResponse:
    try:
        enabled = state.form.toggle(flag)
    except KeyError as exc:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail=f"unknown flag: {flag}"
        ) from exc
    return ToggleResponse(flag=flag, enabled=enabled, form=state.form_read())


@router.post("/form/calculate", response_model=CalculationResponse)
async def calculate_form(state: ApiStateDep) -> CalculationResponse:
    try:
        result = await state.calculate_form()
    except (DegenerateDistributionError, RoundLimitExceededError) as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)
        ) from exc

    _check_finite(result.weights)
    return state.form_response(result)
