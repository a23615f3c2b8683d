from __future__ import annotations

from pydantic import BaseModel, Field

from war_odds.schemas.calculation import ModifiersPayload, RatesRead


class FormRead(BaseModel):
    modifiers: ModifiersPayload
    starting_attackers: float
    starting_defenders: float
    rates: RatesRead
    has_result: bool = Field(..., description="Whether a calculation has been run")


class FieldUpdate(BaseModel):
    value: str = Field(..., description="Raw text as typed into the form")


class FieldUpdateResponse(BaseModel):
    accepted: bool = Field(..., description="False when the text was rejected and ignored")
    form: FormRead


class ToggleResponse(BaseModel):
    flag: str
    enabled: bool
    form: FormRead
