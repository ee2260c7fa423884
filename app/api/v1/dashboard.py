from fastapi import APIRouter, Depends, HTTPException, Query

from app.api.v1.schemas import DataResponseSchema
from app.application.exceptions import StoreUnavailableError
from app.application.use_cases.reports import ReportsUseCase
from app.wiring.dependencies import get_reports_use_case

router = APIRouter()


@router.get("/overview", response_model=DataResponseSchema)
def overview(uc: ReportsUseCase = Depends(get_reports_use_case)):
    try:
        data = uc.overview()
    except StoreUnavailableError:
        raise HTTPException(status_code=502, detail="Booking store is unavailable")
    return DataResponseSchema(data=data)


@router.get("/trend", response_model=DataResponseSchema)
def booking_trend(
    days: int | None = Query(default=None, ge=1, le=366),
    uc: ReportsUseCase = Depends(get_reports_use_case),
):
    try:
        data = uc.booking_trend(days)
    except StoreUnavailableError:
        raise HTTPException(status_code=502, detail="Booking store is unavailable")
    return DataResponseSchema(data=data)
