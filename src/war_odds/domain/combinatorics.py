"""Binomial coefficients and kill-count probabilities."""

from __future__ import annotations

import math


def _round_half_away(value: float) -> float:
    # Adding 0.5 before flooring is inexact above 2**52
    magnitude = abs(value)
    rounded = math.floor(magnitude)
    if magnitude - rounded >= 0.5:
        rounded += 1.0
    return math.copysign(rounded, value)


def combinations(count: int, kills: int) -> float:
    """Number of ways ``kills`` casualties can be chosen among ``count`` shooters.

    The multiplicative recurrence is evaluated in floating point and only the
    final product is rounded, which keeps the values exact well beyond the
    integer range a double represents precisely.

    Examples:
        >>> combinations(100, 2)
        4950.0
        >>> combinations(7, 0)
        1.0
    """
    on_balance = 1.0
    for i in range(kills):
        on_balance *= (count - i) / (kills - i)
    return _round_half_away(on_balance)


def _power(base: float, exponent: int) -> float:
    try:
        return base**exponent
    except OverflowError:
        # IEEE overflow semantics instead of Python's exception
        sign = -1.0 if base < 0 and exponent % 2 else 1.0
        return sign * math.inf


def odds_of_kills(count: int, rate: float, kills: int) -> float:
    """Binomial probability of exactly ``kills`` hits from ``count`` shooters.

    ``rate`` is used as given; values outside ``[0, 1]`` produce masses that
    are not probabilities.
    """
    if kills > count:
        return 0.0
    kill = _power(rate, kills)
    no_kill = _power(1.0 - rate, count - kills)
    return combinations(count, kills) * kill * no_kill


def kill_chances(count: int, rate: float, max_kills: int) -> list[float]:
    """Probabilities for ``0..max_kills`` kills, zero past ``count``."""

    return [odds_of_kills(count, rate, kills) for kills in range(max_kills + 1)]
