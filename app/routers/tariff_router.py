# app/routers/tariff_router.py

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse

from app.core import logger, ValidationError, StoreFailure
from app.database.dependencies import get_tariff_store
from app.repositories import TariffRepository
from app.schemas import TariffResponse
from app.services import build_query, lookup_tariffs_service

router = APIRouter(prefix="/tariff", tags=["Tariffs"])


@router.get("", response_model=TariffResponse, response_model_exclude_none=True)
def get_tariffs_route(
    energy_type: str = Query("", alias="energyType"),
    commissioning_date: str | None = Query(None, alias="commissioningDate"),
    power_output: str | None = Query(None, alias="powerOutput"),
    criteria: str | None = Query(None),
    bezeichnung: str | None = Query(None),
    store: TariffRepository = Depends(get_tariff_store),
):
    """
    Looks up the EEG tariff categories for an installation.

    Only `energyType` is required; `commissioningDate` (YYYY-MM-DD) and
    `powerOutput` (kW) narrow the result, `criteria` and `bezeichnung` are
    case-insensitive substring filters. Results are sorted by power, smallest first.
    """
    try:
        query = build_query(energy_type, commissioning_date, power_output, criteria, bezeichnung)
        return lookup_tariffs_service(store, query)
    except ValidationError as e:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"found": False, "error": e.reason},
        )
    except StoreFailure as e:
        logger.error(f"Error querying tariffs: {e.__cause__ or e}")
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"found": False, "error": e.reason},
        )
