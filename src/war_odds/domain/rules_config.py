"""Declarative constants for the odds calculation."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class OddsRules:
    """Grid and truncation parameters shared by every calculation."""

    max_soldiers: int = 100
    max_kills_per_phase: int = 22  # binomial tail above this is dropped
    display_threshold: float = 0.01  # summary columns shown above 1%
    victory_threshold: float = 0.0001
    display_radius: int = 10

    @property
    def side_length(self) -> int:
        return self.max_soldiers + 1

    @property
    def slot_count(self) -> int:
        return self.side_length * self.side_length


DEFAULT_RULES = OddsRules()
