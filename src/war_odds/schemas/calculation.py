from __future__ import annotations

from dataclasses import asdict

from pydantic import BaseModel, Field

from war_odds.domain.enums import Side
from war_odds.domain.modifiers import CombatModifiers, KillRates
from war_odds.domain.summary import OutcomeSummary


class ModifiersPayload(BaseModel):
    base_chance: float = Field(default=10.0, description="Base kill chance in percentage points")
    commander_bonus: float = Field(default=1.0, description="Bonus for a commander on the field")
    blessing_bonus: float = Field(default=2.0, description="Bonus for a blessed side")
    fortified_def_bonus: float = Field(
        default=1.0, description="Attacker malus when a commanded defender is fortified"
    )
    claimed_def_bonus: float = Field(
        default=1.0, description="Opposing malus when fighting on claimed territory"
    )
    city_def_bonus: float = Field(
        default=2.0, description="Opposing malus when fighting from a city"
    )
    archer_attack_malus: float = Field(default=1.0, description="Own malus for fielding archers")
    archer_defense_malus: float = Field(
        default=1.0, description="Opposing bonus against a side fielding archers"
    )
    elite_attack_bonus: float = Field(default=1.0, description="Own bonus for fielding elites")
    elite_defense_bonus: float = Field(
        default=1.0, description="Opposing malus against a side fielding elites"
    )
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
    round_count: int = Field(default=20, ge=0, description="Number of rounds to resolve")
    engagement_cap: int | None = Field(
        default=None, ge=0, description="Most soldiers per side rolling each phase (0/None: all)"
    )

    def to_domain(self) -> CombatModifiers:
        return CombatModifiers(**self.model_dump())

    @classmethod
    def from_domain(cls, modifiers: CombatModifiers) -> ModifiersPayload:
        return cls(**asdict(modifiers))


class CalculationRequest(BaseModel):
    starting_attackers: float = Field(default=100.0, description="Attacker headcount (0-100)")
    starting_defenders: float = Field(default=100.0, description="Defender headcount (0-100)")
    modifiers: ModifiersPayload = Field(default_factory=ModifiersPayload)


class RatesRead(BaseModel):
    attacker: float
    defender: float
    attacker_in_range: bool
    defender_in_range: bool

    @classmethod
    def from_domain(cls, rates: KillRates) -> RatesRead:
        return cls(
            attacker=rates.attacker,
            defender=rates.defender,
            attacker_in_range=rates.attacker_in_range,
            defender_in_range=rates.defender_in_range,
        )


class OutcomeSummaryRead(BaseModel):
    side: Side
    total_chance: float
    minimum: int
    maximum: int
    average: float
    median: int
    probable_result: int
    victory_possible: bool
    columns: list[tuple[int, float]]

    @classmethod
    def from_domain(cls, summary: OutcomeSummary) -> OutcomeSummaryRead:
        return cls(
            side=summary.side,
            total_chance=summary.total_chance,
            minimum=summary.minimum,
            maximum=summary.maximum,
            average=summary.average,
            median=summary.median,
            probable_result=summary.probable_result,
            victory_possible=summary.victory_possible,
            columns=summary.columns,
        )


class CalculationResponse(BaseModel):
    starting_attackers: int
    starting_defenders: int
    round_count: int
    rates: RatesRead
    attackers_winning: list[float] = Field(..., description="Mass by surviving attacker count")
    defenders_winning: list[float] = Field(..., description="Mass by surviving defender count")
    undecided: float = Field(..., description="Mass with both sides still fighting")
    attacker_summary: OutcomeSummaryRead
    defender_summary: OutcomeSummaryRead
