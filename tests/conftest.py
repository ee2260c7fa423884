"""
Shared fixtures: a fixed "today", booking/row factories and an in-memory stack.
"""

from __future__ import annotations

from datetime import date, datetime
from zoneinfo import ZoneInfo

import pytest

from app.application.use_cases.booking_collection import BookingCollection
from app.application.use_cases.manage_bookings import ManageBookingsUseCase
from app.application.use_cases.promo_hunter import PromoHunterMatcher
from app.application.use_cases.reports import ReportsUseCase
from app.application.utils.record_parser import row_to_booking
from app.domain.entities.column_map import DB_V44, INTAKE_V37, ColumnMap
from app.infrastructure.cache.memory_cache import MemoryTTLCache
from app.infrastructure.store.memory_store import MemoryTabularStore

TODAY = date(2026, 3, 10)
NOW = datetime(2026, 3, 10, 15, 0, 0)
TZ = ZoneInfo("Asia/Manila")

DEFAULTS = {
    "timestamp": "2026-03-01T09:00:00",
    "branch": "FELIZ",
    "status": "Scheduled",
    "appointment_text": "Mar 10 2026 2:00 PM",
    "first_name": "Ana",
    "last_name": "Reyes",
    "age": "30",
    "gender": "Female",
    "treatment": "Hydrafacial",
    "total_price": "1000",
    "payment_mode": "Cash",
    "agent": "Joy",
}


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


def header_row(column_map: ColumnMap) -> list[str]:
    header = [""] * column_map.width
    for name, index in column_map.indices.items():
        header[index] = name
    return header


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def make_row():
    def _make(column_map: ColumnMap = DB_V44, **values):
        return column_map.build_row({**DEFAULTS, **values})

    return _make


@pytest.fixture
def make_booking(make_row):
    def _make(row_number: int = 2, **values):
        return row_to_booking(make_row(**values), DB_V44, row_number, TZ)

    return _make


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> MemoryTabularStore:
    return MemoryTabularStore(
        {
            "Intake": [header_row(INTAKE_V37)],
            "DB": [header_row(DB_V44)],
        }
    )


@pytest.fixture
def collection(store, clock) -> BookingCollection:
    return BookingCollection(
        store=store,
        cache=MemoryTTLCache(clock=clock),
        column_map=DB_V44,
        table="DB",
        timezone=TZ,
    )


@pytest.fixture
def manage(store, collection) -> ManageBookingsUseCase:
    return ManageBookingsUseCase(
        store=store,
        collection=collection,
        matcher=PromoHunterMatcher(),
        intake_map=INTAKE_V37,
        intake_table="Intake",
        timezone=TZ,
        now=lambda: NOW,
    )


@pytest.fixture
def reports(collection) -> ReportsUseCase:
    return ReportsUseCase(collection=collection, timezone=TZ, now=lambda: NOW)
