from __future__ import annotations

from typing import Any, Callable, Iterable

from app.application.utils.metrics import round_money
from app.domain.entities.booking import Booking

UNKNOWN = "Unknown"


def booking_summary(booking: Booking) -> dict[str, Any]:
    """Customer-facing projection used by every list section."""
    return {
        "rowNumber": booking.row_number,
        "recordId": booking.record_id,
        "timestamp": booking.timestamp,
        "branch": booking.branch,
        "customer": booking.full_name,
        "age": booking.age,
        "gender": booking.gender,
        "phone": booking.phone,
        "email": booking.email,
        "socialMedia": booking.social_media,
        "treatment": booking.treatment,
        "area": booking.area,
        "freebie": booking.freebie,
        "date": booking.appointment_text,
        "paymentMode": booking.payment_mode,
        "price": round_money(booking.total_price),
        "agent": booking.agent,
        "bookingDetails": booking.booking_details,
        "companionName": booking.companion_full_name
        if booking.companion_first_name and booking.companion_last_name
        else "",
        "companionAge": booking.companion_age or "",
        "companionGender": booking.companion_gender,
        "companionFreebie": booking.companion_freebie,
        "companionTreatment": booking.companion_treatment,
        "status": booking.status,
        "promoHunterStatus": booking.promo_hunter_status,
        "matchReason": booking.match_reason,
        "matchedSource": booking.matched_source,
        "matchedRow": booking.matched_row,
        "cancellationTime": booking.cancellation_time,
    }


def group_totals(
    bookings: Iterable[Booking],
    key: Callable[[Booking], str],
    skip_blank: bool = False,
) -> dict[str, dict[str, float]]:
    """Bookings count and revenue per key, in first-seen order."""
    groups: dict[str, dict[str, float]] = {}
    for booking in bookings:
        name = key(booking)
        if not name:
            if skip_blank:
                continue
            name = UNKNOWN
        entry = groups.setdefault(name, {"bookings": 0, "revenue": 0.0})
        entry["bookings"] += 1
        entry["revenue"] += booking.total_price
    return groups


def count_by(bookings: Iterable[Booking], key: Callable[[Booking], str], skip_blank: bool = False) -> dict[str, int]:
    counts: dict[str, int] = {}
    for booking in bookings:
        name = key(booking)
        if not name:
            if skip_blank:
                continue
            name = UNKNOWN
        counts[name] = counts.get(name, 0) + 1
    return counts


def most_common(counts: dict[str, int]) -> str:
    """Highest count, first-seen wins ties. Empty counts give "N/A"."""
    best = "N/A"
    best_count = 0
    for name, count in counts.items():
        if count > best_count:
            best, best_count = name, count
    return best


def sorted_money(totals: dict[str, float], label: str = "branch", value: str = "sales") -> list[dict[str, Any]]:
    rows = [{label: name, value: round_money(amount)} for name, amount in totals.items()]
    return sorted(rows, key=lambda r: r[value], reverse=True)
