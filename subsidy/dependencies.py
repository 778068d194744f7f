"""
FastAPI dependencies: the store is built once at startup and lives on app.state.

Tests swap it out with app.dependency_overrides[get_region_store].
"""

from fastapi import Depends, Request

from .config import settings
from .domain import FormulaVariant
from .errors import StoreUnavailableError
from .service import SubsidyService
from .store import RegionStore


def get_region_store(request: Request) -> RegionStore:
    store = getattr(request.app.state, "region_store", None)
    if store is None:
        raise StoreUnavailableError("Region store was not initialised at startup")
    return store


def get_formula_variant() -> FormulaVariant:
    return settings.FORMULA_VARIANT


def get_subsidy_service(
    store: RegionStore = Depends(get_region_store),
    variant: FormulaVariant = Depends(get_formula_variant),
) -> SubsidyService:
    return SubsidyService(store, variant)
