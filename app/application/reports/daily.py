"""Daily operational report.

Six sections, each a predicate over (booking, window):

- ``otsBookings``: created today, appointment today, not cancelled
- ``overallBookings``: created today, appointment in the next 7 days excluding today, not cancelled
- ``bookedTomorrow``: created today, appointment tomorrow, not cancelled
- ``bookedNext7Days``: appointment today through today+7, not cancelled, any creation date
- ``cancellations``: created today, cancelled, cancellation time today
- ``overallBookingsTomorrow``: appointment tomorrow, not cancelled, any creation date
"""

from __future__ import annotations

from datetime import date
from typing import Any, Callable, Sequence

from app.application.reports.common import UNKNOWN, booking_summary
from app.application.utils.date_windows import DateWindow
from app.application.utils.metrics import round_money
from app.domain.entities.booking import Booking

DEFAULT_BRANCHES = (
    "STA LUCIA",
    "FELIZ",
    "ESTANCIA",
    "Spa",
    "Clinic",
    "Lab",
    "Dermatology",
    "Wellness",
    "Med Spa",
    "Aesthetic",
    "Hydro",
    "Hair Care",
    "Anti-Aging",
    "Mother Care",
    "Other",
    "AI SKIN",
    "CENTRIS",
    "DNA MANILA",
    "GENEVA",
    "GLORIETTA",
    "HERA",
    "LIONESSE",
    "LUMIA",
    "PARIS",
    "SM NORTH",
    "VENICE",
)

Predicate = Callable[[Booking, DateWindow], bool]


def _ots(b: Booking, w: DateWindow) -> bool:
    return w.is_today(b.created_at) and w.is_today(b.appointment_date) and not b.is_cancelled


def _overall(b: Booking, w: DateWindow) -> bool:
    return w.is_today(b.created_at) and w.is_strictly_next_7_days(b.appointment_date) and not b.is_cancelled


def _booked_tomorrow(b: Booking, w: DateWindow) -> bool:
    return w.is_today(b.created_at) and w.is_tomorrow(b.appointment_date) and not b.is_cancelled


def _next_7_days(b: Booking, w: DateWindow) -> bool:
    return w.is_in_next_7_days(b.appointment_date) and not b.is_cancelled


def _cancellations(b: Booking, w: DateWindow) -> bool:
    return (
        b.appointment_date is not None
        and w.is_today(b.created_at)
        and b.is_cancelled
        and w.is_today(b.cancelled_at)
    )


def _tomorrow_summary(b: Booking, w: DateWindow) -> bool:
    return w.is_tomorrow(b.appointment_date) and not b.is_cancelled


SECTIONS: dict[str, Predicate] = {
    "otsBookings": _ots,
    "overallBookings": _overall,
    "bookedTomorrow": _booked_tomorrow,
    "bookedNext7Days": _next_7_days,
    "cancellations": _cancellations,
    "overallBookingsTomorrow": _tomorrow_summary,
}

# sections reported with totals and a branch breakdown
_WITH_TOTALS = ("otsBookings", "overallBookings", "cancellations")
_BRANCH_ONLY = ("bookedTomorrow", "bookedNext7Days")

# URL slugs for the detail endpoints
SECTION_SLUGS = {
    "ots": "otsBookings",
    "overall": "overallBookings",
    "tomorrow": "bookedTomorrow",
    "next7days": "bookedNext7Days",
    "cancellations": "cancellations",
    "tomorrow-summary": "overallBookingsTomorrow",
}


def _empty_branches(branches: Sequence[str]) -> dict[str, dict[str, float]]:
    return {name: {"count": 0, "revenue": 0.0} for name in branches}


def _finish_branches(by_branch: dict[str, dict[str, float]]) -> dict[str, dict[str, Any]]:
    return {name: {"count": int(v["count"]), "revenue": round_money(v["revenue"])} for name, v in by_branch.items()}


def build_daily_report(
    bookings: Sequence[Booking],
    today: date,
    branches: Sequence[str] = DEFAULT_BRANCHES,
) -> dict[str, Any]:
    window = DateWindow(today)
    totals = {name: {"count": 0, "revenue": 0.0} for name in SECTIONS}
    by_branch = {name: _empty_branches(branches) for name in _WITH_TOTALS + _BRANCH_ONLY}

    for booking in bookings:
        for name, predicate in SECTIONS.items():
            if not predicate(booking, window):
                continue
            totals[name]["count"] += 1
            totals[name]["revenue"] += booking.total_price
            if name in by_branch:
                entry = by_branch[name].setdefault(booking.branch or UNKNOWN, {"count": 0, "revenue": 0.0})
                entry["count"] += 1
                entry["revenue"] += booking.total_price

    reports: dict[str, Any] = {}
    for name in SECTIONS:
        count = int(totals[name]["count"])
        revenue = round_money(totals[name]["revenue"])
        if name in _BRANCH_ONLY:
            reports[name] = {"byBranch": _finish_branches(by_branch[name])}
        elif name in by_branch:
            reports[name] = {
                "total": count,
                "revenue": revenue,
                "count": count,
                "byBranch": _finish_branches(by_branch[name]),
            }
        else:
            reports[name] = {"total": count, "revenue": revenue, "count": count}
    return {"date": today.isoformat(), "reports": reports}


def section_bookings(
    bookings: Sequence[Booking],
    today: date,
    section: str,
    branch: str | None = None,
) -> dict[str, Any]:
    """Customer rows behind one section of the daily report."""
    key = SECTION_SLUGS.get(section, section)
    predicate = SECTIONS.get(key)
    if predicate is None:
        raise ValueError(f"Unknown daily report section: {section!r}")
    window = DateWindow(today)
    selected = [
        b for b in bookings if predicate(b, window) and (not branch or branch == "all" or b.branch == branch)
    ]
    return {
        "section": key,
        "date": today.isoformat(),
        "count": len(selected),
        "revenue": round_money(sum(b.total_price for b in selected)),
        "bookings": [booking_summary(b) for b in selected],
    }
