from collections.abc import Mapping
from pydantic import AliasChoices, BaseModel, BeforeValidator, Field, model_validator
from typing import Annotated, Optional, List, Union

from .domain import FormulaVariant

# Upper bounds keep every product of validated input and region constants finite
MAX_FAMILY_INCOME = 10 ** 15
MAX_FAMILY_MEMBERS = 1000
MAX_AREA = 10 ** 6


def is_blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _number(value):
    # bool is an int subclass; a checkbox value is not a count
    if isinstance(value, bool):
        raise ValueError("must be a number")
    if isinstance(value, str):
        return value.strip()
    return value


def _region_identifier(value):
    if isinstance(value, bool):
        raise ValueError("must be an integer or string identifier")
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        return value.strip()
    raise ValueError("must be an integer or string identifier")


Number = Annotated[float, BeforeValidator(_number)]
WholeNumber = Annotated[int, BeforeValidator(_number)]
RegionIdentifier = Annotated[Union[int, str], BeforeValidator(_region_identifier)]


# --- Request bodies (one per formula variant) ---

class SubsidyInput(BaseModel):
    """Shared by both variants: null and blank values count as absent."""

    region_id: RegionIdentifier = Field(validation_alias=AliasChoices("regionId", "cityId"))

    @model_validator(mode="before")
    @classmethod
    def drop_blank_values(cls, data):
        if isinstance(data, Mapping):
            return {key: value for key, value in data.items() if not is_blank(value)}
        return data


class IncomeSubsidyInput(SubsidyInput):
    family_income: Number = Field(alias="familyIncome", gt=0, le=MAX_FAMILY_INCOME, allow_inf_nan=False)
    family_members: WholeNumber = Field(alias="familyMembers", ge=1, le=MAX_FAMILY_MEMBERS)


class AreaSubsidyInput(SubsidyInput):
    family_members: WholeNumber = Field(alias="familyMembers", ge=1, le=MAX_FAMILY_MEMBERS)
    additional_area: Number = Field(alias="additionalArea", ge=0, le=MAX_AREA, allow_inf_nan=False)
    owned_area: Number = Field(alias="ownedArea", ge=0, le=MAX_AREA, allow_inf_nan=False)
    years_of_service: WholeNumber = Field(alias="yearsOfService", ge=0)


# --- Responses ---

class Region(BaseModel):
    id: Union[int, str]
    city_name: str
    coefficient: Optional[float] = None
    market_value_per_sq_meter: Optional[float] = None
    market_value_correction_factor: Optional[float] = None


class CitiesResponse(BaseModel):
    success: bool = True
    cities: List[Region]


class CalculationResponse(BaseModel):
    success: bool = True
    subsidy: float
    calculationDetails: dict


class ErrorResponse(BaseModel):
    success: bool = False
    error: str


class FormConfig(BaseModel):
    formula_variant: FormulaVariant
    fields: List[str]
