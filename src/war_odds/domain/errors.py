"""Exceptions raised by the odds domain."""

from __future__ import annotations


class OddsError(RuntimeError):
    """Base class for calculation failures."""


class DegenerateDistributionError(OddsError):
    """Raised when a fire phase leaves no probability mass to renormalize."""

    def __init__(self, phase: str) -> None:
        super().__init__(f"{phase} phase produced a distribution with zero total mass")
        self.phase = phase


class RoundLimitExceededError(OddsError):
    """Raised when a request asks for more rounds than the service allows."""

    def __init__(self, round_count: int, limit: int) -> None:
        super().__init__(f"round_count {round_count} exceeds the limit of {limit}")
        self.round_count = round_count
        self.limit = limit
