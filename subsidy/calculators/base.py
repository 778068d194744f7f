"""
Abstract base class for the formula variants.

Input: RegionRecord (from the store) + validated request (from validation.py)
Output: SubsidyResult with amount rounded to cents and a breakdown dict
"""

import math
from abc import ABC, abstractmethod
from decimal import Decimal, ROUND_HALF_UP, localcontext

from ..domain import RegionRecord, SubsidyResult
from ..errors import RegionDataError

CENT = Decimal("0.01")


def round_currency(value: float) -> float:
    """
    Round to cents, half away from zero.

    Goes through repr() so 40000.005 rounds as the decimal the user typed
    (-> 40000.01), not as its binary approximation 40000.00499999...
    Any finite float is accepted; the context precision grows with the
    magnitude so quantize never runs out of digits.
    """
    if not math.isfinite(value):
        raise ValueError(f"Cannot round a non-finite amount: {value!r}")
    exact = Decimal(repr(value))
    with localcontext() as ctx:
        ctx.prec = max(28, exact.adjusted() + 3)
        return float(exact.quantize(CENT, rounding=ROUND_HALF_UP))


class BaseSubsidyCalculator(ABC):
    """All formula variants inherit from this."""

    @abstractmethod
    def calculate(self, region: RegionRecord, request) -> SubsidyResult:
        pass

    def require_constant(self, region: RegionRecord, attr: str) -> float:
        """Region constant needed by this formula, or RegionDataError if the record lacks it."""
        value = getattr(region, attr)
        if value is None:
            raise RegionDataError(
                f"Region {region.id!r} ({region.name}) has no {attr} "
                f"required by {type(self).__name__}"
            )
        return value

    def round_amount(self, region: RegionRecord, amount: float) -> float:
        """
        Rounded amount, or RegionDataError when the product overflowed.

        Validated inputs are bounded, so only implausibly large region
        constants can push the product past the float range.
        """
        if not math.isfinite(amount):
            raise RegionDataError(
                f"Region {region.id!r} ({region.name}) constants give a non-finite "
                f"amount in {type(self).__name__}"
            )
        return round_currency(amount)
