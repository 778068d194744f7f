"""
Shared test fixtures: in-memory region store, test clients per formula variant.
"""

import os
import pytest
from fastapi.testclient import TestClient

# Keep tests off any real database / .env values
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["REGION_SOURCE"] = "file"

from subsidy.dependencies import get_formula_variant, get_region_store
from subsidy.domain import FormulaVariant, RegionRecord
from subsidy.main import app
from subsidy.store import InMemoryRegionStore


# Region 1 matches the worked examples: coefficient 0.8 (variant A),
# 90 000 per m² with correction 1.0 (variant B)
TEST_REGIONS = [
    RegionRecord(id=1, name="Тестоград", coefficient=0.8, value_per_area=90000.0, correction_factor=1.0),
    RegionRecord(id=2, name="Екатеринбург", coefficient=0.95, value_per_area=104000.0, correction_factor=0.97),
    RegionRecord(id=3, name="Ёлкино", coefficient=0.7, value_per_area=45000.0, correction_factor=0.9),
    RegionRecord(id="spb", name="Санкт-Петербург", coefficient=1.1, value_per_area=164000.0, correction_factor=1.0),
    RegionRecord(id=5, name="Абакан", coefficient=0.75),  # variant A constants only
]


@pytest.fixture
def regions():
    return list(TEST_REGIONS)


@pytest.fixture
def store(regions):
    return InMemoryRegionStore(regions)


def _client_for(store, variant):
    app.dependency_overrides[get_region_store] = lambda: store
    app.dependency_overrides[get_formula_variant] = lambda: variant
    return TestClient(app)


@pytest.fixture
def client(store):
    """Area/service (variant B) deployment."""
    yield _client_for(store, FormulaVariant.AREA_SERVICE)
    app.dependency_overrides.clear()


@pytest.fixture
def income_client(store):
    """Income-based (variant A) deployment."""
    yield _client_for(store, FormulaVariant.INCOME)
    app.dependency_overrides.clear()


@pytest.fixture
def area_payload():
    """The worked end-to-end example: 2 members, +15 m², 11 years of service."""
    return {
        "regionId": 1,
        "familyMembers": 2,
        "additionalArea": 15,
        "ownedArea": 0,
        "yearsOfService": 11,
    }
