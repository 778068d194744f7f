"""
Calculation API.

POST /api/calculate: validate, look up the region, run the active formula
GET  /api/config   : active formula variant and the fields it expects
"""

import logging
from typing import Any

from fastapi import APIRouter, Body, Depends

from .. import schemas
from ..calculators.registry import get_formula
from ..dependencies import get_formula_variant, get_subsidy_service
from ..domain import FormulaVariant
from ..errors import CalculationFailedError, SubsidyError
from ..service import SubsidyService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["calculate"])

ERROR_RESPONSES = {
    400: {"model": schemas.ErrorResponse, "description": "Missing field or out-of-domain value"},
    404: {"model": schemas.ErrorResponse, "description": "Region not found"},
    500: {"model": schemas.ErrorResponse, "description": "Internal failure"},
}


@router.post("/calculate", response_model=schemas.CalculationResponse, responses=ERROR_RESPONSES)
def calculate(
    # Parsed by the active variant's input model (schemas.IncomeSubsidyInput or AreaSubsidyInput)
    payload: Any = Body(None),
    service: SubsidyService = Depends(get_subsidy_service),
):
    try:
        result = service.calculate(payload)
    except SubsidyError:
        raise
    except Exception as e:
        logger.exception("Calculation error")
        raise CalculationFailedError(f"Unexpected {type(e).__name__}: {e}") from e
    return result.to_response()


@router.get("/config", response_model=schemas.FormConfig)
def form_config(variant: FormulaVariant = Depends(get_formula_variant)):
    return {"formula_variant": variant, "fields": list(get_formula(variant).fields)}
