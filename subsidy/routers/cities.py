import logging

from fastapi import APIRouter, Depends

from .. import schemas
from ..dependencies import get_region_store
from ..errors import StoreUnavailableError, SubsidyError
from ..store import RegionStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["cities"])


@router.get("/cities", response_model=schemas.CitiesResponse)
def list_cities(store: RegionStore = Depends(get_region_store)):
    """All regions, sorted by name (Russian collation)."""
    try:
        records = store.list_all()
    except SubsidyError:
        raise
    except Exception as e:
        logger.exception("Region listing error")
        raise StoreUnavailableError(f"Unexpected {type(e).__name__}: {e}") from e
    return {
        "success": True,
        "cities": [record.to_dict() for record in records],
    }
