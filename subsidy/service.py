"""
Subsidy pipeline: validation -> store lookup -> calculator.

Stateless apart from its three collaborators, which are fixed at startup.
"""

import logging

from .calculators.registry import get_formula
from .domain import FormulaVariant, SubsidyResult
from .store import RegionStore

logger = logging.getLogger(__name__)


class SubsidyService:

    def __init__(self, store: RegionStore, variant: FormulaVariant):
        self.store = store
        formula = get_formula(variant)
        self.variant = formula.variant
        self.validate = formula.validate
        self.calculator = formula.calculator

    def calculate(self, raw) -> SubsidyResult:
        """
        Raises:
            MissingFieldError / OutOfDomainError: bad input, before any lookup
            RegionNotFoundError: regionId unknown to the store
            RegionDataError / StoreUnavailableError: internal
        """
        request = self.validate(raw)
        region = self.store.lookup(request.region_id)
        result = self.calculator.calculate(region, request)
        logger.debug("Subsidy %s for region %s (%s): %.2f",
                     self.variant.value, region.id, region.name, result.amount)
        return result
