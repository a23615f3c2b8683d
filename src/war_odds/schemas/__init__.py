from .calculation import (
    CalculationRequest,
    CalculationResponse,
    ModifiersPayload,
    OutcomeSummaryRead,
    RatesRead,
)
from .form import FieldUpdate, FieldUpdateResponse, FormRead, ToggleResponse

__all__ = [
    "CalculationRequest",
    "CalculationResponse",
    "FieldUpdate",
    "FieldUpdateResponse",
    "FormRead",
    "ModifiersPayload",
    "OutcomeSummaryRead",
    "RatesRead",
    "ToggleResponse",
]
