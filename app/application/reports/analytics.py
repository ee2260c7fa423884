"""Analytics page sections plus the agent and ad performance reports.

Every ``calculate_*`` function is a fold over an already-windowed list of
bookings. Cancelled bookings are dropped from counts and revenue; only the
status breakdown sees them.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Any, Sequence

from app.application.reports.common import UNKNOWN, count_by, group_totals, most_common
from app.application.utils.date_parser import month_day_label, month_label
from app.application.utils.date_windows import DateRange, DateWindow
from app.application.utils.metrics import ratio_pct, round_money, top_k
from app.application.utils.status import is_ad_conversion
from app.domain.entities.booking import Booking
from app.domain.entities.match_result import PROMO_HUNTER_STATUS
from app.domain.entities.status import StatusCategory

PRICE_BUCKETS = (
    ("0-1000", 1000.0),
    ("1001-2000", 2000.0),
    ("2001-3000", 3000.0),
    ("3001-5000", 5000.0),
    ("5000+", None),
)

AGE_BUCKETS = (
    ("18-25", 18, 25),
    ("26-35", 26, 35),
    ("36-45", 36, 45),
    ("46-55", 46, 55),
    ("56+", 56, None),
)

ALL_BRANCHES = "All"
DEFAULT_RANGE = "year"
DEFAULT_PERFORMANCE_DAYS = 30


def _active(bookings: Sequence[Booking]) -> list[Booking]:
    return [b for b in bookings if not b.is_cancelled]


def _in_range(bookings: Sequence[Booking], date_range: DateRange | None) -> list[Booking]:
    if date_range is None:
        return list(bookings)
    return [b for b in bookings if date_range.contains(b.appointment_date)]


def _is_all(branch: str | None) -> bool:
    return not branch or branch.lower() == "all"


def _leaderboard(bookings: Sequence[Booking], key, value_key: str = "avgBookingValue") -> list[dict[str, Any]]:
    rows = []
    for name, totals in group_totals(bookings, key).items():
        count = int(totals["bookings"])
        rows.append(
            {
                "name": name,
                "bookings": count,
                "revenue": round_money(totals["revenue"]),
                value_key: round_money(totals["revenue"] / count),
            }
        )
    return rows


def calculate_overview(bookings: Sequence[Booking]) -> dict[str, Any]:
    active = _active(bookings)
    total = len(active)
    revenue = sum(b.total_price for b in active)
    customers = {b.email_norm or b.full_name_norm for b in active if b.email_norm or b.full_name_norm}
    status_breakdown: dict[str, int] = {}
    for booking in bookings:
        status = booking.status or UNKNOWN
        status_breakdown[status] = status_breakdown.get(status, 0) + 1
    return {
        "totalBookings": total,
        "totalRevenue": round_money(revenue),
        "avgBookingValue": round_money(revenue / total) if total else 0.0,
        "uniqueCustomers": len(customers),
        "repeatCustomerRate": ratio_pct(total - len(customers), total),
        "cancelledBookings": len(bookings) - total,
        "statusBreakdown": status_breakdown,
    }


def calculate_branch_performance(bookings: Sequence[Booking]) -> list[dict[str, Any]]:
    return top_k(_leaderboard(_active(bookings), lambda b: b.branch), key=lambda r: r["revenue"])


def calculate_agent_leaderboard(bookings: Sequence[Booking]) -> list[dict[str, Any]]:
    return top_k(_leaderboard(_active(bookings), lambda b: b.agent), key=lambda r: r["revenue"])


def calculate_treatment_analysis(bookings: Sequence[Booking], limit: int = 15) -> list[dict[str, Any]]:
    rows = [
        {"name": r["name"], "count": r["bookings"], "revenue": r["revenue"], "avgPrice": r["avgPrice"]}
        for r in _leaderboard(_active(bookings), lambda b: b.treatment, value_key="avgPrice")
    ]
    return top_k(rows, key=lambda r: r["count"], k=limit)


def _price_bucket(price: float) -> str:
    for label, upper in PRICE_BUCKETS:
        if upper is None or price <= upper:
            return label
    return PRICE_BUCKETS[-1][0]


def calculate_revenue_analysis(bookings: Sequence[Booking]) -> dict[str, Any]:
    active = _active(bookings)
    by_mode: dict[str, float] = {}
    buckets = {label: 0 for label, _ in PRICE_BUCKETS}
    for booking in active:
        mode = booking.payment_mode or UNKNOWN
        by_mode[mode] = by_mode.get(mode, 0.0) + booking.total_price
        buckets[_price_bucket(booking.total_price)] += 1
    modes = [{"mode": mode, "revenue": round_money(amount)} for mode, amount in by_mode.items()]
    return {
        "byPaymentMode": top_k(modes, key=lambda r: r["revenue"]),
        "byPriceRange": [{"range": label, "count": count} for label, count in buckets.items()],
    }


def calculate_demographics(bookings: Sequence[Booking]) -> dict[str, Any]:
    active = _active(bookings)
    by_gender = count_by(active, lambda b: b.gender)
    by_age = {label: 0 for label, _, _ in AGE_BUCKETS}
    for booking in active:
        for label, low, high in AGE_BUCKETS:
            if booking.age >= low and (high is None or booking.age <= high):
                by_age[label] += 1
                break
    return {
        "byGender": [{"gender": gender, "count": count} for gender, count in by_gender.items()],
        "byAgeGroup": [{"ageGroup": label, "count": count} for label, count in by_age.items()],
    }


def time_series_granularity(date_range: DateRange | None) -> str:
    if date_range is None:
        return "month"
    span = date_range.span_days
    if span <= 31:
        return "day"
    if span <= 90:
        return "week"
    return "month"


def _bucket(day: date, granularity: str) -> tuple[date, str]:
    if granularity == "day":
        return day, month_day_label(day)
    if granularity == "week":
        # weeks start on Sunday
        start = day - timedelta(days=(day.weekday() + 1) % 7)
        return start, f"Week of {month_day_label(start)}"
    start = day.replace(day=1)
    return start, month_label(start.year, start.month)


def calculate_time_series(bookings: Sequence[Booking], date_range: DateRange | None) -> dict[str, Any]:
    granularity = time_series_granularity(date_range)
    buckets: dict[date, dict[str, Any]] = {}
    for booking in _active(bookings):
        if booking.appointment_date is None:
            continue
        start, label = _bucket(booking.appointment_date.date(), granularity)
        entry = buckets.setdefault(start, {"month": label, "count": 0, "revenue": 0.0})
        entry["count"] += 1
        entry["revenue"] += booking.total_price
    series = [
        {"month": entry["month"], "count": entry["count"], "revenue": round_money(entry["revenue"])}
        for _, entry in sorted(buckets.items())
    ]
    return {"granularity": granularity, "byMonth": series}


def calculate_marketing_channels(bookings: Sequence[Booking]) -> list[dict[str, Any]]:
    rows = [
        {"channel": r["name"], "bookings": r["bookings"], "revenue": r["revenue"], "conversionValue": r["conversionValue"]}
        for r in _leaderboard(_active(bookings), lambda b: b.social_media, value_key="conversionValue")
    ]
    return top_k(rows, key=lambda r: r["bookings"])


def build_analytics(
    bookings: Sequence[Booking],
    today: date,
    branch: str = ALL_BRANCHES,
    range_name: str = DEFAULT_RANGE,
    start: date | None = None,
    end: date | None = None,
) -> dict[str, Any]:
    date_range = DateWindow(today).analytics_range(range_name, start, end)
    scoped = bookings if _is_all(branch) else [b for b in bookings if b.branch == branch]
    windowed = _in_range(scoped, date_range)
    return {
        "branch": branch or ALL_BRANCHES,
        "range": f"{start.isoformat()} to {end.isoformat()}" if start and end else range_name,
        "overview": calculate_overview(windowed),
        "branchPerformance": calculate_branch_performance(windowed) if _is_all(branch) else [],
        "treatmentAnalysis": calculate_treatment_analysis(windowed),
        "revenueAnalysis": calculate_revenue_analysis(windowed),
        "agentPerformance": calculate_agent_leaderboard(windowed),
        "demographicAnalysis": calculate_demographics(windowed),
        "timeSeriesData": calculate_time_series(windowed, date_range),
        "marketingChannels": calculate_marketing_channels(windowed),
    }


def _performance_range(today: date, days: int, start: date | None, end: date | None) -> tuple[DateRange, dict[str, Any]]:
    window = DateWindow(today)
    custom = window.custom(start, end)
    if custom is not None:
        return custom, {"from": custom.start.isoformat(), "to": custom.end.isoformat(), "custom": True}
    if days < 1:
        raise ValueError("days must be >= 1")
    date_range = window.since_days_ago(days)
    return date_range, {"from": date_range.start.isoformat(), "to": None, "days": days}


def build_agent_performance(
    bookings: Sequence[Booking],
    today: date,
    days: int = DEFAULT_PERFORMANCE_DAYS,
    start: date | None = None,
    end: date | None = None,
) -> dict[str, Any]:
    date_range, range_info = _performance_range(today, days, start, end)
    stats: dict[str, dict[str, Any]] = {}
    for booking in _in_range(bookings, date_range):
        agent = stats.setdefault(
            booking.agent or UNKNOWN,
            {
                "bookings": 0,
                "revenue": 0.0,
                "converted": 0,
                "scheduled": 0,
                "cancelled": 0,
                "promoHunters": 0,
                "treatments": {},
                "branches": {},
            },
        )
        agent["bookings"] += 1
        category = booking.status_category
        if category == StatusCategory.cancelled:
            agent["cancelled"] += 1
        else:
            agent["revenue"] += booking.total_price
        if category == StatusCategory.converted:
            agent["converted"] += 1
        elif category == StatusCategory.scheduled:
            agent["scheduled"] += 1
        if category == StatusCategory.promo_hunter or booking.promo_hunter_status.lower() == PROMO_HUNTER_STATUS.lower():
            agent["promoHunters"] += 1
        if booking.treatment:
            agent["treatments"][booking.treatment] = agent["treatments"].get(booking.treatment, 0) + 1
        if booking.branch:
            agent["branches"][booking.branch] = agent["branches"].get(booking.branch, 0) + 1

    agents = []
    for name, agent in stats.items():
        treatments = [{"name": t, "count": c} for t, c in agent["treatments"].items()]
        agents.append(
            {
                "name": name,
                "bookings": agent["bookings"],
                "revenue": round_money(agent["revenue"]),
                "avgBookingValue": round_money(agent["revenue"] / agent["bookings"]),
                "conversionRate": ratio_pct(agent["converted"], agent["bookings"], digits=2),
                "converted": agent["converted"],
                "scheduled": agent["scheduled"],
                "cancelled": agent["cancelled"],
                "promoHunters": agent["promoHunters"],
                "topTreatment": most_common(agent["treatments"]) if agent["treatments"] else None,
                "topBranch": most_common(agent["branches"]) if agent["branches"] else None,
                "treatments": top_k(treatments, key=lambda r: r["count"]),
            }
        )
    agents = top_k(agents, key=lambda r: r["revenue"])

    summary = {
        "totalAgents": len(agents),
        "totalBookings": sum(a["bookings"] for a in agents),
        "totalRevenue": round_money(sum(a["revenue"] for a in agents)),
        "avgConversion": round_money(sum(a["conversionRate"] for a in agents) / len(agents)) if agents else 0.0,
    }
    return {"summary": summary, "agents": agents, "dateRange": range_info}


def build_ad_performance(
    bookings: Sequence[Booking],
    today: date,
    days: int = DEFAULT_PERFORMANCE_DAYS,
    start: date | None = None,
    end: date | None = None,
    branch: str | None = None,
) -> dict[str, Any]:
    """Bookings grouped by the ad the customer interacted with.

    Revenue is credited only for converted bookings (arrived or bought).
    """
    date_range, range_info = _performance_range(today, days, start, end)
    stats: dict[str, dict[str, Any]] = {}
    for booking in _in_range(bookings, date_range):
        ad_name = booking.ad_interacted.strip()
        if not ad_name:
            continue
        if not _is_all(branch) and booking.branch != branch:
            continue
        ad = stats.setdefault(ad_name, {"total": 0, "converted": 0, "revenue": 0.0, "branches": {}, "treatments": {}})
        ad["total"] += 1
        if is_ad_conversion(booking.status):
            ad["converted"] += 1
            ad["revenue"] += booking.total_price
        if booking.branch:
            ad["branches"][booking.branch] = ad["branches"].get(booking.branch, 0) + 1
        if booking.treatment:
            ad["treatments"][booking.treatment] = ad["treatments"].get(booking.treatment, 0) + 1

    ads = [
        {
            "adName": name,
            "totalBookings": ad["total"],
            "convertedBookings": ad["converted"],
            "conversionRate": ratio_pct(ad["converted"], ad["total"], digits=2),
            "totalRevenue": round_money(ad["revenue"]),
            "avgRevenuePerBooking": round_money(ad["revenue"] / ad["converted"]) if ad["converted"] else 0.0,
            "topBranch": most_common(ad["branches"]) if ad["branches"] else None,
            "topTreatment": most_common(ad["treatments"]) if ad["treatments"] else None,
        }
        for name, ad in stats.items()
    ]
    ads = top_k(ads, key=lambda r: r["totalBookings"])
    summary = {
        "totalAds": len(ads),
        "totalBookings": sum(a["totalBookings"] for a in ads),
        "totalRevenue": round_money(sum(a["totalRevenue"] for a in ads)),
        "avgConversionRate": round_money(sum(a["conversionRate"] for a in ads) / len(ads)) if ads else 0.0,
    }
    return {"summary": summary, "ads": ads, "dateRange": range_info}
