"""Sales report.

Sales revenue counts only purchase-confirming statuses ("Arrived & bought",
"Comeback & bought"). Booking counts next to it exclude only cancellations.
"""

from __future__ import annotations

from datetime import date
from typing import Any, Sequence

from dateutil.relativedelta import relativedelta

from app.application.reports.common import UNKNOWN, sorted_money
from app.application.utils.date_parser import MONTH_ABBR, month_label
from app.application.utils.date_windows import DEFAULT_SALES_PRESET, DateWindow
from app.application.utils.metrics import pct_change, ratio_pct, round_money
from app.application.utils.status import is_arrival, is_purchase
from app.domain.entities.booking import Booking


class _Sales:
    def __init__(self) -> None:
        self.overall = 0.0
        self.by_branch: dict[str, float] = {}

    def add(self, booking: Booking) -> None:
        branch = booking.branch or UNKNOWN
        self.overall += booking.total_price
        self.by_branch[branch] = self.by_branch.get(branch, 0.0) + booking.total_price

    def to_dict(self) -> dict[str, Any]:
        return {"overall": round_money(self.overall), "byBranch": sorted_money(self.by_branch)}


class _Series:
    def __init__(self, keys) -> None:
        self.rows: dict[Any, dict[str, float]] = {key: {"sales": 0.0, "bookings": 0} for key in keys}

    def add_sale(self, key, amount: float) -> None:
        if key in self.rows:
            self.rows[key]["sales"] += amount

    def add_booking(self, key) -> None:
        if key in self.rows:
            self.rows[key]["bookings"] += 1


def _month_keys(first: date, last: date) -> list[tuple[int, int]]:
    keys = []
    cursor = first.replace(day=1)
    while cursor <= last:
        keys.append((cursor.year, cursor.month))
        cursor += relativedelta(months=1)
    return keys


def build_sales_report(
    bookings: Sequence[Booking],
    today: date,
    time_range: str | None = None,
    start: date | None = None,
    end: date | None = None,
    branch: str | None = None,
) -> dict[str, Any]:
    window = DateWindow(today)
    date_range = window.sales_range(time_range, start, end)
    previous = date_range.previous()
    midpoint = date_range.midpoint()
    label = "custom" if start and end else (time_range or DEFAULT_SALES_PRESET)
    selected_branch = branch or "all"
    scoped = [b for b in bookings if selected_branch.lower() == "all" or b.branch == selected_branch]

    range_sales, previous_sales = _Sales(), _Sales()
    first_half, second_half = _Sales(), _Sales()
    daily_sales, current_month, last_month = _Sales(), _Sales(), _Sales()
    yearly = _Series(range(1, 13))
    yearly_total = 0.0
    daily = _Series(date_range.days())
    monthly = _Series(_month_keys(date_range.start.date(), date_range.end.date()))
    bookings_by_branch: dict[str, int] = {}
    arrivals_by_branch: dict[str, int] = {}
    total_bookings = 0
    total_arrivals = 0
    last_month_day = today - relativedelta(months=1)

    for booking in scoped:
        when = booking.appointment_date
        if when is None:
            continue
        day = when.date()
        in_range = date_range.contains(when)
        branch_name = booking.branch or UNKNOWN

        if in_range:
            total_bookings += 1
            bookings_by_branch[branch_name] = bookings_by_branch.get(branch_name, 0) + 1
            if is_arrival(booking.status):
                total_arrivals += 1
                arrivals_by_branch[branch_name] = arrivals_by_branch.get(branch_name, 0) + 1
            if not booking.is_cancelled:
                daily.add_booking(day)
                monthly.add_booking((day.year, day.month))
        if day.year == today.year and not booking.is_cancelled:
            yearly.add_booking(day.month)

        if not is_purchase(booking.status):
            continue

        if previous.contains(when):
            previous_sales.add(booking)
        if day == today:
            daily_sales.add(booking)
        if (day.year, day.month) == (today.year, today.month):
            current_month.add(booking)
        if (day.year, day.month) == (last_month_day.year, last_month_day.month):
            last_month.add(booking)
        if day.year == today.year:
            yearly_total += booking.total_price
            yearly.add_sale(day.month, booking.total_price)
        if not in_range:
            continue
        range_sales.add(booking)
        (first_half if when <= midpoint else second_half).add(booking)
        daily.add_sale(day, booking.total_price)
        monthly.add_sale((day.year, day.month), booking.total_price)

    arrival_by_branch = [
        {
            "branch": name,
            "bookings": count,
            "arrivals": arrivals_by_branch.get(name, 0),
            "arrivalRate": ratio_pct(arrivals_by_branch.get(name, 0), count, digits=2),
        }
        for name, count in bookings_by_branch.items()
    ]
    arrival_by_branch.sort(key=lambda r: r["arrivalRate"], reverse=True)

    return {
        "timeRange": label,
        "branch": selected_branch,
        "startDate": date_range.start.date().isoformat(),
        "endDate": date_range.end.date().isoformat(),
        "arrivalRate": ratio_pct(total_arrivals, total_bookings, digits=2),
        "totalArrivals": total_arrivals,
        "totalBookings": total_bookings,
        "arrivalRateByBranch": arrival_by_branch,
        "rangeSales": range_sales.to_dict(),
        "previousRangeSales": previous_sales.to_dict(),
        "rangeChange": pct_change(range_sales.overall, previous_sales.overall),
        "rangeFirstHalfSales": first_half.to_dict(),
        "rangeSecondHalfSales": second_half.to_dict(),
        "dailySalesAndBookings": [
            {"date": day.isoformat(), "sales": round_money(v["sales"]), "bookings": v["bookings"]}
            for day, v in daily.rows.items()
        ],
        "dailySales": daily_sales.to_dict(),
        "currentMonthSales": current_month.to_dict(),
        "lastMonthSales": last_month.to_dict(),
        "yearlySales": {
            "overall": round_money(yearly_total),
            "monthlyBreakdown": [
                {"month": MONTH_ABBR[month - 1], "sales": round_money(v["sales"]), "bookings": v["bookings"]}
                for month, v in yearly.rows.items()
            ],
        },
        "monthlySalesAndBookings": [
            {"month": month_label(year, month), "sales": round_money(v["sales"]), "bookings": v["bookings"]}
            for (year, month), v in monthly.rows.items()
        ],
    }
