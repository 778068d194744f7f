"""
Variant A: income-based subsidy.

    subsidy = (familyIncome / familyMembers) * coefficient

Division is safe: validation guarantees familyMembers >= 1.
"""

from .base import BaseSubsidyCalculator
from ..domain import IncomeSubsidyRequest, RegionRecord, SubsidyResult


class IncomeSubsidyCalculator(BaseSubsidyCalculator):

    def calculate(self, region: RegionRecord, request: IncomeSubsidyRequest) -> SubsidyResult:
        coefficient = self.require_constant(region, "coefficient")
        per_member = request.family_income / request.family_members
        amount = self.round_amount(region, per_member * coefficient)
        return SubsidyResult(amount=amount, breakdown={
            "regionName": region.name,
            "cityName": region.name,
            "coefficient": coefficient,
            "familyIncome": request.family_income,
            "familyMembers": request.family_members,
        })
