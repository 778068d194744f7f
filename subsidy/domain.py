"""
Value objects passed between the validation stage, the store and the calculators.

All are frozen: region records live for the process, requests and results
live for one HTTP call, and nothing downstream mutates them.
"""

import enum
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Union

RegionId = Union[int, str]


class FormulaVariant(str, enum.Enum):
    """Deployment configuration: exactly one formula is active per process."""
    INCOME = "income"              # Variant A: income / members * coefficient
    AREA_SERVICE = "area_service"  # Variant B: area * value * correction * service


class RegionSource(str, enum.Enum):
    FILE = "file"
    DATABASE = "database"


@dataclass(frozen=True)
class RegionRecord:
    id: RegionId
    name: str
    coefficient: Optional[float] = None
    value_per_area: Optional[float] = None
    correction_factor: Optional[float] = None

    @property
    def key(self) -> str:
        """Lookup key: 1 and "1" name the same region."""
        return normalize_region_id(self.id)

    def to_dict(self) -> dict:
        """Wire shape used by GET /api/cities."""
        return {
            "id": self.id,
            "city_name": self.name,
            "coefficient": self.coefficient,
            "market_value_per_sq_meter": self.value_per_area,
            "market_value_correction_factor": self.correction_factor,
        }


@dataclass(frozen=True)
class IncomeSubsidyRequest:
    region_id: RegionId
    family_income: float
    family_members: int


@dataclass(frozen=True)
class AreaSubsidyRequest:
    region_id: RegionId
    family_members: int
    additional_area: float
    owned_area: float
    years_of_service: int


SubsidyRequest = Union[IncomeSubsidyRequest, AreaSubsidyRequest]


@dataclass(frozen=True)
class SubsidyResult:
    amount: float
    breakdown: Mapping = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "breakdown", MappingProxyType(dict(self.breakdown)))

    def to_response(self) -> dict:
        return {
            "success": True,
            "subsidy": self.amount,
            "calculationDetails": dict(self.breakdown),
        }


def normalize_region_id(region_id: RegionId) -> str:
    return str(region_id).strip()
