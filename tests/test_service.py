"""
SubsidyService tests: the validate -> lookup -> calculate pipeline without HTTP.
"""

import pytest

from subsidy.domain import FormulaVariant, RegionRecord
from subsidy.errors import MissingFieldError, OutOfDomainError, RegionDataError, RegionNotFoundError
from subsidy.service import SubsidyService
from subsidy.store import InMemoryRegionStore


def test_area_service_pipeline(store, area_payload):
    result = SubsidyService(store, FormulaVariant.AREA_SERVICE).calculate(area_payload)
    assert result.amount == 6156000.00
    assert result.breakdown["totalArea"] == 57


def test_income_pipeline(store):
    service = SubsidyService(store, "income")
    assert service.variant is FormulaVariant.INCOME
    result = service.calculate({"regionId": 1, "familyIncome": 150000, "familyMembers": 3})
    assert result.amount == 40000.00


def test_unknown_region_is_not_found_not_validation(store, area_payload):
    area_payload["regionId"] = 999
    with pytest.raises(RegionNotFoundError):
        SubsidyService(store, FormulaVariant.AREA_SERVICE).calculate(area_payload)


def test_validation_runs_before_lookup(store, area_payload):
    """Invalid input against an unknown region reports the input problem."""
    area_payload.update(regionId=999, familyMembers=0)
    with pytest.raises(OutOfDomainError):
        SubsidyService(store, FormulaVariant.AREA_SERVICE).calculate(area_payload)

    del area_payload["ownedArea"]
    with pytest.raises(MissingFieldError):
        SubsidyService(store, FormulaVariant.AREA_SERVICE).calculate(area_payload)


def test_region_missing_variant_constants(store):
    """Region 5 only carries variant A constants."""
    service = SubsidyService(store, FormulaVariant.AREA_SERVICE)
    with pytest.raises(RegionDataError):
        service.calculate({
            "regionId": 5, "familyMembers": 1, "additionalArea": 0,
            "ownedArea": 0, "yearsOfService": 0,
        })


def test_region_records_are_not_mutated(area_payload):
    region = RegionRecord(id=1, name="Тестоград", value_per_area=90000.0, correction_factor=1.0)
    store = InMemoryRegionStore([region])
    SubsidyService(store, FormulaVariant.AREA_SERVICE).calculate(area_payload)
    assert store.lookup(1) == RegionRecord(
        id=1, name="Тестоград", value_per_area=90000.0, correction_factor=1.0,
    )


def test_unknown_variant_rejected(store):
    with pytest.raises(ValueError):
        SubsidyService(store, "bogus")
