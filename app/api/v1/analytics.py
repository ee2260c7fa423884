import datetime as dt

from fastapi import APIRouter, Depends, HTTPException, Query

from app.api.v1.schemas import DataResponseSchema
from app.application.exceptions import StoreUnavailableError
from app.application.use_cases.reports import ReportsUseCase
from app.wiring.dependencies import get_reports_use_case

router = APIRouter()

STORE_ERROR = "Booking store is unavailable"


@router.get("", response_model=DataResponseSchema)
def analytics(
    branch: str = "All",
    range_name: str = Query(default="year", alias="range"),
    start_date: dt.date | None = Query(default=None, alias="startDate"),
    end_date: dt.date | None = Query(default=None, alias="endDate"),
    uc: ReportsUseCase = Depends(get_reports_use_case),
):
    try:
        data = uc.analytics_report(branch=branch, range_name=range_name, start=start_date, end=end_date)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StoreUnavailableError:
        raise HTTPException(status_code=502, detail=STORE_ERROR)
    return DataResponseSchema(data=data)


@router.get("/agent-performance", response_model=DataResponseSchema)
def agent_performance(
    days: int = Query(default=30, ge=1),
    start_date: dt.date | None = Query(default=None, alias="startDate"),
    end_date: dt.date | None = Query(default=None, alias="endDate"),
    uc: ReportsUseCase = Depends(get_reports_use_case),
):
    try:
        data = uc.agent_performance(days=days, start=start_date, end=end_date)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StoreUnavailableError:
        raise HTTPException(status_code=502, detail=STORE_ERROR)
    return DataResponseSchema(data=data)


@router.get("/ad-performance", response_model=DataResponseSchema)
def ad_performance(
    days: int = Query(default=30, ge=1),
    start_date: dt.date | None = Query(default=None, alias="startDate"),
    end_date: dt.date | None = Query(default=None, alias="endDate"),
    branch: str | None = None,
    uc: ReportsUseCase = Depends(get_reports_use_case),
):
    try:
        data = uc.ad_performance(days=days, start=start_date, end=end_date, branch=branch)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StoreUnavailableError:
        raise HTTPException(status_code=502, detail=STORE_ERROR)
    return DataResponseSchema(data=data)


@router.get("/sales-report", response_model=DataResponseSchema)
def sales_report(
    time_range: str | None = Query(default=None, alias="timeRange"),
    start_date: dt.date | None = Query(default=None, alias="startDate"),
    end_date: dt.date | None = Query(default=None, alias="endDate"),
    branch: str = "all",
    uc: ReportsUseCase = Depends(get_reports_use_case),
):
    try:
        data = uc.sales_report(time_range=time_range, start=start_date, end=end_date, branch=branch)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StoreUnavailableError:
        raise HTTPException(status_code=502, detail=STORE_ERROR)
    return DataResponseSchema(data=data)
