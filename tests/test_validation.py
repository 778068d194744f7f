"""
Validation stage tests.

Tests:
1-4.   Rule 1: required fields (absent / null / blank), alias, zero is not absence
5-10.  Rule 2: parsing (numeric strings, bools, NaN, whole numbers)
11-15. Rule 3: domain bounds
16-18. Rule ordering: presence before parsing before bounds
19-25. Upper bounds, region id forms, field order
"""

import pytest

from subsidy.domain import AreaSubsidyRequest, IncomeSubsidyRequest
from subsidy.errors import InvalidRequestError, MissingFieldError, OutOfDomainError
from subsidy.schemas import MAX_AREA, MAX_FAMILY_INCOME, MAX_FAMILY_MEMBERS
from subsidy.validation import (
    AREA_FIELDS,
    INCOME_FIELDS,
    validate_area_request,
    validate_income_request,
)


def _area(**overrides):
    payload = {
        "regionId": 1,
        "familyMembers": 2,
        "additionalArea": 15,
        "ownedArea": 0,
        "yearsOfService": 11,
    }
    payload.update(overrides)
    return payload


def _income(**overrides):
    payload = {"regionId": 1, "familyIncome": 150000, "familyMembers": 3}
    payload.update(overrides)
    return payload


# ============================================================
# Rule 1: presence
# ============================================================

def test_valid_area_request_is_typed():
    request = validate_area_request(_area())
    assert request == AreaSubsidyRequest(
        region_id=1, family_members=2, additional_area=15.0, owned_area=0.0, years_of_service=11,
    )
    assert isinstance(request.additional_area, float)
    assert isinstance(request.family_members, int)


@pytest.mark.parametrize("field", ["regionId", "familyMembers", "additionalArea", "ownedArea", "yearsOfService"])
def test_absent_field_is_missing(field):
    payload = _area()
    del payload[field]
    with pytest.raises(MissingFieldError) as exc:
        validate_area_request(payload)
    assert exc.value.field == field
    assert field in exc.value.message


@pytest.mark.parametrize("blank", [None, "", "   "])
def test_null_and_blank_are_missing(blank):
    with pytest.raises(MissingFieldError):
        validate_income_request(_income(familyIncome=blank))


def test_zero_is_a_value_not_an_absence():
    """ownedArea=0 is valid; familyIncome=0 is out of domain, not missing."""
    assert validate_area_request(_area(ownedArea=0)).owned_area == 0.0
    with pytest.raises(OutOfDomainError) as exc:
        validate_income_request(_income(familyIncome=0))
    assert not isinstance(exc.value, MissingFieldError)


def test_city_id_alias():
    payload = _income()
    del payload["regionId"]
    payload["cityId"] = 7
    assert validate_income_request(payload).region_id == 7


# ============================================================
# Rule 2: parsing
# ============================================================

def test_numeric_strings_accepted():
    request = validate_area_request(_area(familyMembers="3", additionalArea="12.5", ownedArea=" 4 ",
                                          yearsOfService="20"))
    assert request.family_members == 3
    assert request.additional_area == 12.5
    assert request.owned_area == 4.0
    assert request.years_of_service == 20


@pytest.mark.parametrize("value", ["abc", "12,5", [1], {"a": 1}])
def test_non_numbers_rejected(value):
    with pytest.raises(OutOfDomainError) as exc:
        validate_area_request(_area(additionalArea=value))
    assert exc.value.field == "additionalArea"


def test_booleans_rejected():
    with pytest.raises(OutOfDomainError):
        validate_area_request(_area(familyMembers=True))
    with pytest.raises(OutOfDomainError):
        validate_income_request(_income(familyIncome=True))


@pytest.mark.parametrize("value", ["nan", "inf", "-inf", float("nan"), float("inf")])
def test_non_finite_rejected(value):
    with pytest.raises(OutOfDomainError):
        validate_income_request(_income(familyIncome=value))


def test_fractional_family_members_rejected():
    with pytest.raises(OutOfDomainError) as exc:
        validate_area_request(_area(familyMembers=2.5))
    assert exc.value.field == "familyMembers"
    assert "whole number" in exc.value.message
    with pytest.raises(OutOfDomainError):
        validate_area_request(_area(yearsOfService="7.5"))


def test_whole_floats_become_ints():
    assert validate_area_request(_area(familyMembers=2.0)).family_members == 2
    assert validate_area_request(_area(familyMembers="4.0")).family_members == 4
    assert validate_area_request(_area(yearsOfService=9.0)).years_of_service == 9


# ============================================================
# Rule 3: bounds
# ============================================================

def test_zero_family_members_rejected():
    with pytest.raises(OutOfDomainError) as exc:
        validate_area_request(_area(familyMembers=0))
    assert exc.value.field == "familyMembers"


def test_negative_additional_area_rejected():
    with pytest.raises(OutOfDomainError) as exc:
        validate_area_request(_area(additionalArea=-1))
    assert exc.value.field == "additionalArea"


def test_negative_owned_area_and_service_rejected():
    with pytest.raises(OutOfDomainError):
        validate_area_request(_area(ownedArea=-0.5))
    with pytest.raises(OutOfDomainError):
        validate_area_request(_area(yearsOfService=-1))


def test_income_must_be_positive():
    with pytest.raises(OutOfDomainError) as exc:
        validate_income_request(_income(familyIncome=-100))
    assert exc.value.field == "familyIncome"


def test_valid_income_request():
    assert validate_income_request(_income()) == IncomeSubsidyRequest(
        region_id=1, family_income=150000.0, family_members=3,
    )


# ============================================================
# Rule ordering
# ============================================================

def test_missing_reported_before_invalid():
    """A bad value elsewhere does not mask an absent field."""
    payload = _area(familyMembers="abc")
    del payload["yearsOfService"]
    with pytest.raises(MissingFieldError) as exc:
        validate_area_request(payload)
    assert exc.value.field == "yearsOfService"


def test_parse_errors_reported_before_bounds():
    with pytest.raises(OutOfDomainError) as exc:
        validate_area_request(_area(familyMembers=0, additionalArea="x"))
    assert exc.value.field == "additionalArea"


def test_non_object_body_rejected():
    for body in (None, [1, 2], "regionId=1", 42):
        with pytest.raises(InvalidRequestError):
            validate_area_request(body)


# ============================================================
# Upper bounds + region id + fields
# ============================================================

def test_magnitudes_up_to_the_bounds_accepted():
    income = validate_income_request(_income(familyIncome=MAX_FAMILY_INCOME, familyMembers=MAX_FAMILY_MEMBERS))
    assert income.family_income == float(MAX_FAMILY_INCOME)
    assert income.family_members == MAX_FAMILY_MEMBERS
    area = validate_area_request(_area(additionalArea=MAX_AREA, ownedArea=str(MAX_AREA)))
    assert area.additional_area == float(MAX_AREA)
    assert area.owned_area == float(MAX_AREA)


@pytest.mark.parametrize("field, value", [
    ("familyIncome", 1e27),
    ("familyIncome", "1e300"),
    ("familyMembers", MAX_FAMILY_MEMBERS + 1),
])
def test_income_magnitude_above_bound_rejected(field, value):
    with pytest.raises(OutOfDomainError) as exc:
        validate_income_request(_income(**{field: value}))
    assert exc.value.field == field
    assert "at most" in exc.value.message


@pytest.mark.parametrize("field, value", [
    ("additionalArea", 1e25),
    ("ownedArea", MAX_AREA + 0.5),
    ("familyMembers", 10 ** 6),
])
def test_area_magnitude_above_bound_rejected(field, value):
    with pytest.raises(OutOfDomainError) as exc:
        validate_area_request(_area(**{field: value}))
    assert exc.value.field == field


def test_bound_reported_after_parse_error_elsewhere():
    with pytest.raises(OutOfDomainError) as exc:
        validate_income_request(_income(familyIncome=1e27, familyMembers="many"))
    assert exc.value.field == "familyMembers"


def test_region_id_forms():
    assert validate_income_request(_income(regionId="spb")).region_id == "spb"
    assert validate_income_request(_income(regionId=" 12 ")).region_id == "12"
    assert validate_income_request(_income(regionId=3.0)).region_id == 3


@pytest.mark.parametrize("value", [True, 1.5, [1], {"id": 1}])
def test_region_id_invalid_forms(value):
    with pytest.raises(OutOfDomainError) as exc:
        validate_income_request(_income(regionId=value))
    assert exc.value.field == "regionId"


def test_wire_fields_in_validation_order():
    assert INCOME_FIELDS == ("regionId", "familyIncome", "familyMembers")
    assert AREA_FIELDS == ("regionId", "familyMembers", "additionalArea", "ownedArea", "yearsOfService")
