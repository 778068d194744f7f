"""
Formula registry: each FormulaVariant pairs an input validator with a calculator.

One variant is active per deployment (Settings.FORMULA_VARIANT) and picks
both halves at once; every variant stays registered so each can be tested
on its own.
"""

from dataclasses import dataclass
from typing import Callable

from .area_service import AreaServiceSubsidyCalculator
from .base import BaseSubsidyCalculator
from .income import IncomeSubsidyCalculator
from ..domain import FormulaVariant, SubsidyRequest
from ..validation import AREA_FIELDS, INCOME_FIELDS, validate_area_request, validate_income_request


@dataclass(frozen=True)
class Formula:
    variant: FormulaVariant
    validate: Callable[[object], SubsidyRequest]
    calculator: BaseSubsidyCalculator
    fields: tuple  # wire names the form must send


FORMULAS: dict[FormulaVariant, Formula] = {
    FormulaVariant.INCOME: Formula(
        FormulaVariant.INCOME, validate_income_request, IncomeSubsidyCalculator(), INCOME_FIELDS,
    ),
    FormulaVariant.AREA_SERVICE: Formula(
        FormulaVariant.AREA_SERVICE, validate_area_request, AreaServiceSubsidyCalculator(), AREA_FIELDS,
    ),
}


def get_formula(variant) -> Formula:
    """Accepts the enum or its string value; unknown variants raise ValueError."""
    try:
        return FORMULAS[FormulaVariant(variant)]
    except (ValueError, KeyError):
        raise ValueError(
            f"Unknown formula variant: {variant!r}. "
            f"Available: {[v.value for v in FORMULAS]}"
        ) from None
