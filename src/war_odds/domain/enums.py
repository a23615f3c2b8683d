"""Enumerations for the odds domain."""

from __future__ import annotations

from enum import StrEnum


class Side(StrEnum):
    """The two forces taking part in a battle."""

    ATTACKER = "attacker"
    DEFENDER = "defender"
