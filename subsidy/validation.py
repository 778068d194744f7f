"""
Validation stage: raw JSON body in, typed in-domain request out.

The pydantic input models in schemas.py do the parsing and the bounds;
this module maps their errors onto the calculator's own taxonomy.
Rules are reported in a fixed order, first violation only:
  1. every required field present          -> MissingFieldError
  2. every value parses (whole numbers for integer fields) -> OutOfDomainError
  3. every value inside its bounds         -> OutOfDomainError
Region existence is NOT checked here; that happens after the store lookup.
"""

from collections.abc import Mapping

from pydantic import AliasChoices, BaseModel, ValidationError

from .domain import AreaSubsidyRequest, IncomeSubsidyRequest
from .errors import InvalidRequestError, MissingFieldError, OutOfDomainError
from .schemas import AreaSubsidyInput, IncomeSubsidyInput

BOUND_ERRORS = {"greater_than", "greater_than_equal", "less_than_equal"}


def _wire_name(info, name: str) -> str:
    alias = info.validation_alias
    if isinstance(alias, AliasChoices):
        return alias.choices[0]
    return alias or info.alias or name


def request_fields(model: type[BaseModel]) -> tuple:
    """Wire names of a model's fields, in the order they are validated."""
    return tuple(_wire_name(info, name) for name, info in model.model_fields.items())


def _field_of(model: type[BaseModel], loc: tuple) -> str:
    """Error location -> wire name, whichever alias the caller used."""
    key = str(loc[0]) if loc else "body"
    for name, info in model.model_fields.items():
        wire = _wire_name(info, name)
        names = {name, wire, info.alias}
        if isinstance(info.validation_alias, AliasChoices):
            names.update(info.validation_alias.choices)
        if key in names:
            return wire
    return key


def _reason(error: dict) -> str:
    kind = error["type"]
    ctx = error.get("ctx", {})
    if kind == "value_error":
        return str(ctx["error"])
    if kind == "greater_than":
        return f"must be greater than {ctx['gt']}"
    if kind == "greater_than_equal":
        return "must not be negative" if ctx["ge"] == 0 else f"must be at least {ctx['ge']}"
    if kind == "less_than_equal":
        return f"must be at most {ctx['le']}"
    if kind == "finite_number":
        return "must be a finite number"
    if kind.startswith("int_"):
        return "must be a whole number"
    return "must be a number"


def _first_violation(errors: list) -> dict:
    """Missing beats unparseable beats out-of-bounds; field order within each."""
    missing = [e for e in errors if e["type"] == "missing"]
    unparsed = [e for e in errors if e["type"] not in BOUND_ERRORS]
    return (missing or unparsed or errors)[0]


def parse_input(model: type[BaseModel], raw):
    if not isinstance(raw, Mapping):
        raise InvalidRequestError("body", "Request body must be a JSON object")
    try:
        return model.model_validate(raw)
    except ValidationError as e:
        error = _first_violation(e.errors())
        field = _field_of(model, error["loc"])
        if error["type"] == "missing":
            raise MissingFieldError(field) from None
        raise OutOfDomainError(field, _reason(error)) from None


# --- Validators ---

def validate_income_request(raw) -> IncomeSubsidyRequest:
    """Variant A input: regionId, familyIncome, familyMembers."""
    data = parse_input(IncomeSubsidyInput, raw)
    return IncomeSubsidyRequest(
        region_id=data.region_id,
        family_income=float(data.family_income),
        family_members=int(data.family_members),
    )


def validate_area_request(raw) -> AreaSubsidyRequest:
    """Variant B input: regionId, familyMembers, additionalArea, ownedArea, yearsOfService."""
    data = parse_input(AreaSubsidyInput, raw)
    return AreaSubsidyRequest(
        region_id=data.region_id,
        family_members=int(data.family_members),
        additional_area=float(data.additional_area),
        owned_area=float(data.owned_area),
        years_of_service=int(data.years_of_service),
    )


INCOME_FIELDS = request_fields(IncomeSubsidyInput)
AREA_FIELDS = request_fields(AreaSubsidyInput)
