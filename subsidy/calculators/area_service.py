"""
Variant B: area/service-based subsidy.

  1. normative area by household size (step function)
  2. total area = normative + additional - owned   (NOT clamped; may go negative)
  3. service coefficient by years of service (tiered, then linear to a 1.5 cap)
  4. amount = total area * value per m² * correction factor * service coefficient
"""

from decimal import Decimal

from .base import BaseSubsidyCalculator
from ..domain import AreaSubsidyRequest, RegionRecord, SubsidyResult

# m² for single-person and two-person households; larger ones get 18 m² each
NORMATIVE_AREA_SINGLE = 33
NORMATIVE_AREA_COUPLE = 42
NORMATIVE_AREA_PER_MEMBER = 18

# (years from, coefficient): lower bound inclusive, checked highest first
SERVICE_TIERS = [
    (15, Decimal("1.25")),
    (11, Decimal("1.2")),
    (9, Decimal("1.15")),
    (7, Decimal("1.1")),
]
SERVICE_BASE = Decimal("1.0")
SERVICE_LINEAR_FROM = 20
SERVICE_LINEAR_START = Decimal("1.25")
SERVICE_LINEAR_STEP = Decimal("0.025")   # per year past 20
SERVICE_CAP = Decimal("1.5")             # reached at 30 years


def normative_area(family_members: int) -> int:
    if family_members == 1:
        return NORMATIVE_AREA_SINGLE
    if family_members == 2:
        return NORMATIVE_AREA_COUPLE
    return NORMATIVE_AREA_PER_MEMBER * family_members


def service_coefficient(years_of_service: int) -> float:
    if years_of_service >= SERVICE_LINEAR_FROM:
        grown = SERVICE_LINEAR_START + (years_of_service - SERVICE_LINEAR_FROM) * SERVICE_LINEAR_STEP
        return float(min(SERVICE_CAP, grown))
    for years_from, coefficient in SERVICE_TIERS:
        if years_of_service >= years_from:
            return float(coefficient)
    return float(SERVICE_BASE)


def total_area(normative: float, additional_area: float, owned_area: float) -> float:
    # Owned area above entitlement gives a negative total; passed through as-is
    return normative + additional_area - owned_area


class AreaServiceSubsidyCalculator(BaseSubsidyCalculator):

    def calculate(self, region: RegionRecord, request: AreaSubsidyRequest) -> SubsidyResult:
        value_per_area = self.require_constant(region, "value_per_area")
        correction_factor = self.require_constant(region, "correction_factor")

        normative = normative_area(request.family_members)
        area = total_area(normative, request.additional_area, request.owned_area)
        coefficient = service_coefficient(request.years_of_service)

        amount = self.round_amount(region, area * value_per_area * correction_factor * coefficient)
        return SubsidyResult(amount=amount, breakdown={
            "regionName": region.name,
            "valuePerArea": value_per_area,
            "correctionFactor": correction_factor,
            "yearsOfService": request.years_of_service,
            "serviceCoefficient": coefficient,
            "familyMembers": request.family_members,
            "normativeArea": normative,
            "additionalArea": request.additional_area,
            "ownedArea": request.owned_area,
            "totalArea": area,
            "amount": amount,
        })
