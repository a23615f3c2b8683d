"""Pure calculation core for battle odds.

Everything in this package operates in memory without side effects:

* :mod:`modifiers` turns named bonuses and battlefield conditions into
  per-soldier kill rates.
* :mod:`combinatorics` provides binomial coefficients and kill-count odds.
* :mod:`distribution` holds the dense probability grid and its projections.
* :mod:`battle` advances a grid by one round of fire.
* :mod:`calculate` runs a whole battle from a point mass.
* :mod:`summary` condenses victory curves for result tables.
"""

from . import (
    battle,
    calculate,
    combinatorics,
    distribution,
    enums,
    errors,
    modifiers,
    rules_config,
    summary,
)

__all__ = [
    "battle",
    "calculate",
    "combinatorics",
    "distribution",
    "enums",
    "errors",
    "modifiers",
    "rules_config",
    "summary",
]
