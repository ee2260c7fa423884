"""Front-page dashboard: today-versus-yesterday KPIs, leaderboards, alerts, trend."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Any, Sequence

from app.application.reports.common import booking_summary, group_totals, count_by
from app.application.utils.date_parser import day_label
from app.application.utils.date_windows import DateWindow
from app.application.utils.metrics import pct_change, ratio_pct, round_money, top_k, trend
from app.application.utils.status import is_refund, is_new_customer
from app.domain.entities.booking import Booking
from app.domain.entities.status import StatusCategory

HIGH_VALUE_THRESHOLD = 50000.0
DEFAULT_TREND_DAYS = 20


def _kpi(today_value: float, yesterday_value: float, money: bool = False) -> dict[str, Any]:
    change = pct_change(today_value, yesterday_value)
    if money:
        today_value, yesterday_value = round_money(today_value), round_money(yesterday_value)
    return {"today": today_value, "yesterday": yesterday_value, "change": change, "trend": trend(change)}


def _average(bookings: Sequence[Booking]) -> float:
    if not bookings:
        return 0.0
    return round_money(sum(b.total_price for b in bookings) / len(bookings))


def build_overview(
    bookings: Sequence[Booking],
    today: date,
    high_value_threshold: float = HIGH_VALUE_THRESHOLD,
    basis: str = "appointment",
) -> dict[str, Any]:
    """Compare today's bookings with yesterday's.

    ``basis`` picks which timestamp decides the day: the appointment date or the
    creation timestamp. Cancelled bookings are listed and alerted on but do not
    count toward the KPIs.
    """
    window = DateWindow(today)

    def when(b: Booking):
        return b.created_at if basis == "created" else b.appointment_date

    todays = [b for b in bookings if window.is_today(when(b))]
    yesterdays = [b for b in bookings if window.is_yesterday(when(b))]
    today_active = [b for b in todays if not b.is_cancelled]
    yesterday_active = [b for b in yesterdays if not b.is_cancelled]

    today_revenue = sum(b.total_price for b in today_active)
    yesterday_revenue = sum(b.total_price for b in yesterday_active)
    converted = sum(1 for b in today_active if b.status_category == StatusCategory.converted)

    branches = [
        {"name": name, "bookings": int(v["bookings"]), "revenue": round_money(v["revenue"])}
        for name, v in group_totals(today_active, lambda b: b.branch).items()
    ]
    agents = [
        {"name": name, "bookings": int(v["bookings"]), "revenue": round_money(v["revenue"])}
        for name, v in group_totals(today_active, lambda b: b.agent, skip_blank=True).items()
    ]
    treatments = [
        {"name": name, "count": count}
        for name, count in count_by(today_active, lambda b: b.treatment, skip_blank=True).items()
    ]

    alerts = {
        "highValue": [
            {
                "customer": b.full_name,
                "amount": round_money(b.total_price),
                "treatment": b.treatment,
                "branch": b.branch,
            }
            for b in today_active
            if b.total_price >= high_value_threshold
        ],
        "cancelled": [
            {"customer": b.full_name, "treatment": b.treatment, "branch": b.branch, "reason": b.booking_details}
            for b in todays
            if b.is_cancelled or is_refund(b.status)
        ],
        "promoHunters": sum(1 for b in todays if b.status_category == StatusCategory.promo_hunter),
        "newCustomers": sum(1 for b in todays if is_new_customer(b.status)),
    }

    return {
        "todayBookings": [booking_summary(b) for b in todays],
        "kpis": {
            "bookings": _kpi(len(today_active), len(yesterday_active)),
            "revenue": _kpi(today_revenue, yesterday_revenue, money=True),
            "avgBookingValue": {"today": _average(today_active), "yesterday": _average(yesterday_active)},
            "conversionRate": ratio_pct(converted, len(today_active)),
        },
        "topPerformers": {
            "branches": top_k(branches, key=lambda r: r["bookings"], k=3),
            "agents": top_k(agents, key=lambda r: r["bookings"], k=3),
            "treatments": top_k(treatments, key=lambda r: r["count"], k=5),
        },
        "alerts": alerts,
        "comparison": {
            "today": {"bookings": len(today_active), "revenue": round_money(today_revenue)},
            "yesterday": {"bookings": len(yesterday_active), "revenue": round_money(yesterday_revenue)},
        },
    }


def build_booking_trend(bookings: Sequence[Booking], today: date, days: int = DEFAULT_TREND_DAYS) -> dict[str, list]:
    """Daily appointment counts for the last ``days`` calendar days, oldest first."""
    if days < 1:
        raise ValueError("days must be >= 1")
    window = DateWindow(today)
    first = today - timedelta(days=days - 1)
    counts = {first + timedelta(days=i): 0 for i in range(days)}
    for booking in bookings:
        if booking.is_cancelled or not window.within_last_days(booking.appointment_date, days):
            continue
        counts[booking.appointment_date.date()] += 1
    return {"dates": [day_label(d) for d in counts], "bookings": list(counts.values())}
