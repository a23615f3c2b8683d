"""Service layer sitting between the calculation core and its front ends.

- OddsForm: editable calculator state (parse-or-retain field input,
  exclusive condition toggles, calculation and reporting)
"""

from war_odds.services.form_service import FormInputs, FormResult, OddsForm

__all__ = ["FormInputs", "FormResult", "OddsForm"]
