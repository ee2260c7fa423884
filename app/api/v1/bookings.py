import datetime as dt

from fastapi import APIRouter, Depends, HTTPException, Query

from app.api.v1.schemas import (
    BookingCreateSchema,
    BookingCreatedResponseSchema,
    BookingUpdateSchema,
    DailyReportResponseSchema,
    DataResponseSchema,
    MessageResponseSchema,
)
from app.application.exceptions import BookingNotFoundError, InvariantViolationError, StoreUnavailableError
from app.application.use_cases.manage_bookings import ManageBookingsUseCase
from app.application.use_cases.reports import ReportsUseCase
from app.wiring.dependencies import get_manage_bookings_use_case, get_reports_use_case

router = APIRouter()

STORE_ERROR = "Booking store is unavailable"


@router.post("", response_model=BookingCreatedResponseSchema, status_code=201)
def create_booking(
    req: BookingCreateSchema,
    uc: ManageBookingsUseCase = Depends(get_manage_bookings_use_case),
):
    try:
        booking = uc.create(req.model_dump())
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StoreUnavailableError:
        raise HTTPException(status_code=502, detail=STORE_ERROR)
    return BookingCreatedResponseSchema(message="Booking created successfully", booking=booking)


@router.get("/old", response_model=DataResponseSchema)
def list_bookings(
    branch: str | None = None,
    status: str | None = None,
    date_range: str | None = Query(default=None, alias="dateRange"),
    start_date: dt.date | None = Query(default=None, alias="startDate"),
    end_date: dt.date | None = Query(default=None, alias="endDate"),
    search: str | None = None,
    sort_order: str = Query(default="newest", alias="sortOrder"),
    page: int = Query(default=1, ge=1),
    limit: int | None = Query(default=None, ge=1, le=500),
    uc: ManageBookingsUseCase = Depends(get_manage_bookings_use_case),
    reports: ReportsUseCase = Depends(get_reports_use_case),
):
    try:
        data = uc.list_bookings(
            today=reports.today(),
            branch=branch,
            status=status,
            date_range=date_range,
            start=start_date,
            end=end_date,
            search=search,
            sort_order=sort_order,
            page=page,
            limit=limit,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StoreUnavailableError:
        raise HTTPException(status_code=502, detail=STORE_ERROR)
    return DataResponseSchema(data=data)


@router.get("/reports/daily", response_model=DailyReportResponseSchema)
def daily_report(uc: ReportsUseCase = Depends(get_reports_use_case)):
    try:
        report = uc.daily_report()
    except StoreUnavailableError:
        raise HTTPException(status_code=502, detail=STORE_ERROR)
    return DailyReportResponseSchema(date=report["date"], reports=report["reports"])


@router.get("/reports/daily/{section}", response_model=DataResponseSchema)
def daily_report_section(
    section: str,
    branch: str | None = None,
    uc: ReportsUseCase = Depends(get_reports_use_case),
):
    try:
        data = uc.daily_section(section, branch)
    except ValueError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except StoreUnavailableError:
        raise HTTPException(status_code=502, detail=STORE_ERROR)
    return DataResponseSchema(data=data)


@router.get("/{record_id}", response_model=DataResponseSchema)
def get_booking(record_id: str, uc: ManageBookingsUseCase = Depends(get_manage_bookings_use_case)):
    try:
        data = uc.get_by_record_id(record_id)
    except BookingNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except StoreUnavailableError:
        raise HTTPException(status_code=502, detail=STORE_ERROR)
    return DataResponseSchema(data=data)


@router.put("/{row_number}", response_model=DataResponseSchema)
def update_booking(
    row_number: int,
    req: BookingUpdateSchema,
    uc: ManageBookingsUseCase = Depends(get_manage_bookings_use_case),
):
    try:
        data = uc.update(row_number, req.model_dump(exclude_unset=True))
    except BookingNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except InvariantViolationError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except StoreUnavailableError:
        raise HTTPException(status_code=502, detail=STORE_ERROR)
    return DataResponseSchema(data=data)


@router.delete("/{row_number}", response_model=MessageResponseSchema)
def delete_booking(row_number: int, uc: ManageBookingsUseCase = Depends(get_manage_bookings_use_case)):
    try:
        uc.delete(row_number)
    except BookingNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except StoreUnavailableError:
        raise HTTPException(status_code=502, detail=STORE_ERROR)
    return MessageResponseSchema(message=f"Row {row_number} deleted")
