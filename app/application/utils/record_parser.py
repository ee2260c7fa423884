from __future__ import annotations

import logging
import math
import re
from typing import Any, Sequence
from zoneinfo import ZoneInfo

from app.application.utils.date_parser import parse_date_string
from app.application.utils.status import classify_status
from app.domain.entities.booking import Booking
from app.domain.entities.column_map import ColumnMap

logger = logging.getLogger(__name__)

_NOT_PRICE = re.compile(r"[^\d.]")
_NOT_DIGIT = re.compile(r"\D")

_TEXT_FIELDS = (
    "timestamp",
    "branch",
    "status",
    "appointment_text",
    "first_name",
    "last_name",
    "gender",
    "treatment",
    "area",
    "freebie",
    "payment_mode",
    "phone",
    "social_media",
    "email",
    "agent",
    "booking_details",
    "ad_interacted",
    "companion_first_name",
    "companion_last_name",
    "companion_gender",
    "companion_treatment",
    "companion_freebie",
    "email_norm",
    "phone_norm",
    "social_norm",
    "full_name_norm",
    "companion_full_name_norm",
    "promo_hunter_status",
    "match_reason",
    "matched_source",
    "matched_row",
    "record_id",
    "record_status",
    "last_checked_at",
    "cancellation_time",
)


def cell_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def parse_price(value: Any) -> float:
    """"₱1,234.50" -> 1234.5. Anything unparsable is 0.0."""
    if isinstance(value, bool) or value is None:
        return 0.0
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        cleaned = _NOT_PRICE.sub("", str(value))
        if not cleaned:
            return 0.0
        try:
            number = float(cleaned)
        except ValueError:
            return 0.0
    if math.isnan(number) or math.isinf(number) or number < 0:
        return 0.0
    return number


def parse_age(value: Any) -> int:
    if isinstance(value, bool) or value is None:
        return 0
    try:
        age = int(float(str(value).strip()))
    except (ValueError, OverflowError):
        return 0
    return age if age > 0 else 0


def normalize_email(value: str | None) -> str:
    return (value or "").strip().lower()


def normalize_phone(value: str | None) -> str:
    return _NOT_DIGIT.sub("", value or "")


def normalize_social(value: str | None) -> str:
    return (value or "").strip().lower()


def normalize_name(first: str | None, last: str | None) -> str:
    return f"{(first or '').strip()} {(last or '').strip()}".strip().lower()


def normalize_companion_name(first: str | None, last: str | None) -> str:
    """Only a companion with both names counts."""
    if not (first or "").strip() or not (last or "").strip():
        return ""
    return normalize_name(first, last)


def normalized_fields(values: dict[str, Any]) -> dict[str, str]:
    """Match keys derived from the identity fields of a booking payload."""
    return {
        "email_norm": normalize_email(values.get("email")),
        "phone_norm": normalize_phone(values.get("phone")),
        "social_norm": normalize_social(values.get("social_media")),
        "full_name_norm": normalize_name(values.get("first_name"), values.get("last_name")),
        "companion_full_name_norm": normalize_companion_name(
            values.get("companion_first_name"), values.get("companion_last_name")
        ),
    }


def row_to_booking(
    row: Sequence[Any],
    column_map: ColumnMap,
    row_number: int,
    timezone: ZoneInfo | None = None,
) -> Booking:
    """Build a Booking from a raw sheet row. Never raises on bad cell data."""
    text = {name: cell_text(column_map.get(row, name)) for name in _TEXT_FIELDS}

    derived = normalized_fields(text)
    for key, value in derived.items():
        if not text[key]:
            text[key] = value

    created_at = parse_date_string(text["timestamp"], timezone)
    appointment_date = parse_date_string(text["appointment_text"], timezone)
    cancelled_at = parse_date_string(text["cancellation_time"], timezone)
    if appointment_date is None and text["appointment_text"]:
        logger.debug(
            "Unparsable appointment date",
            extra={"row_number": row_number, "reason": text["appointment_text"]},
        )

    return Booking(
        row_number=row_number,
        created_at=created_at,
        appointment_date=appointment_date,
        cancelled_at=cancelled_at,
        status_category=classify_status(text["status"]),
        age=parse_age(column_map.get(row, "age")),
        companion_age=parse_age(column_map.get(row, "companion_age")),
        total_price=parse_price(column_map.get(row, "total_price")),
        **text,
    )


def rows_to_bookings(rows: Sequence[Sequence[Any]], column_map: ColumnMap, timezone: ZoneInfo | None = None) -> list[Booking]:
    """Skip the header row and blank rows; sheet row numbers start at 2."""
    bookings = []
    for index, row in enumerate(rows[1:], start=2):
        if not any(cell_text(cell) for cell in row):
            continue
        bookings.append(row_to_booking(row, column_map, index, timezone))
    return bookings
