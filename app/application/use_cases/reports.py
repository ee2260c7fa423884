from __future__ import annotations

from datetime import date, datetime
from typing import Any, Callable, Sequence
from zoneinfo import ZoneInfo

from app.application.reports import analytics, daily, dashboard, sales
from app.application.use_cases.booking_collection import BookingCollection


class ReportsUseCase:
    """Loads the booking collection and hands it, with today's date, to the report builders."""

    def __init__(
        self,
        collection: BookingCollection,
        timezone: ZoneInfo,
        branches: Sequence[str] = daily.DEFAULT_BRANCHES,
        high_value_threshold: float = dashboard.HIGH_VALUE_THRESHOLD,
        kpi_date_basis: str = "appointment",
        trend_default_days: int = dashboard.DEFAULT_TREND_DAYS,
        now: Callable[[], datetime] | None = None,
    ) -> None:
        self._collection = collection
        self._branches = tuple(branches)
        self._high_value_threshold = high_value_threshold
        self._kpi_date_basis = kpi_date_basis
        self._trend_default_days = trend_default_days
        self._now = now or (lambda: datetime.now(timezone))

    def today(self) -> date:
        return self._now().date()

    def overview(self) -> dict[str, Any]:
        return dashboard.build_overview(
            self._collection.load(),
            self.today(),
            high_value_threshold=self._high_value_threshold,
            basis=self._kpi_date_basis,
        )

    def booking_trend(self, days: int | None = None) -> dict[str, Any]:
        return dashboard.build_booking_trend(self._collection.load(), self.today(), days or self._trend_default_days)

    def daily_report(self) -> dict[str, Any]:
        return daily.build_daily_report(self._collection.load(), self.today(), self._branches)

    def daily_section(self, section: str, branch: str | None = None) -> dict[str, Any]:
        return daily.section_bookings(self._collection.load(), self.today(), section, branch)

    def analytics_report(
        self,
        branch: str = analytics.ALL_BRANCHES,
        range_name: str = analytics.DEFAULT_RANGE,
        start: date | None = None,
        end: date | None = None,
    ) -> dict[str, Any]:
        return analytics.build_analytics(self._collection.load(), self.today(), branch, range_name, start, end)

    def agent_performance(self, days: int = 30, start: date | None = None, end: date | None = None) -> dict[str, Any]:
        return analytics.build_agent_performance(self._collection.load(), self.today(), days, start, end)

    def ad_performance(
        self,
        days: int = 30,
        start: date | None = None,
        end: date | None = None,
        branch: str | None = None,
    ) -> dict[str, Any]:
        return analytics.build_ad_performance(self._collection.load(), self.today(), days, start, end, branch)

    def sales_report(
        self,
        time_range: str | None = None,
        start: date | None = None,
        end: date | None = None,
        branch: str | None = None,
    ) -> dict[str, Any]:
        return sales.build_sales_report(self._collection.load(), self.today(), time_range, start, end, branch)
