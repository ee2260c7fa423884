from __future__ import annotations

import re
from datetime import date, datetime, time
from typing import Any
from zoneinfo import ZoneInfo

from dateutil import parser as date_parser

MONTH_ABBR = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]

MONTHS = {
    "jan": 1,
    "january": 1,
    "feb": 2,
    "february": 2,
    "mar": 3,
    "march": 3,
    "apr": 4,
    "april": 4,
    "may": 5,
    "jun": 6,
    "june": 6,
    "jul": 7,
    "july": 7,
    "aug": 8,
    "august": 8,
    "sep": 9,
    "sept": 9,
    "september": 9,
    "oct": 10,
    "october": 10,
    "nov": 11,
    "november": 11,
    "dec": 12,
    "december": 12,
}

_TIME = r"(?:[ ,T]+(\d{1,2}):(\d{2})(?::(\d{2}))?\s*([AaPp]\.?[Mm]\.?)?)?"

ISO_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}[T ]\d{2}:\d{2}")
MONTH_NAME_PATTERN = re.compile(r"^([A-Za-z]+)\.?\s+(\d{1,2}),?\s+(\d{4})" + _TIME + r"$")
SLASH_PATTERN = re.compile(r"^(\d{1,2})/(\d{1,2})/(\d{4})" + _TIME + r"$")
DASH_PATTERN = re.compile(r"^(\d{4})-(\d{1,2})-(\d{1,2})$")
YEAR_PATTERN = re.compile(r"\d{4}")
TIME_OF_DAY_PATTERN = re.compile(r"^(\d{1,2}):(\d{2})(?::\d{2})?\s*([AaPp][Mm])?$")


def parse_date_string(value: Any, timezone: ZoneInfo | None = None) -> datetime | None:
    """Parse a spreadsheet date cell into a naive local datetime.

    Formats are tried in order: ISO 8601, "Jan 22 2026 6:35 PM", "1/22/2026 18:35",
    "2026-01-22", then a generic dateutil parse. Offset-aware values are converted to
    ``timezone`` before the offset is dropped. Returns None when nothing matches.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return _localize(value, timezone)
    if isinstance(value, date):
        return datetime.combine(value, time.min)

    text = str(value).strip()
    if not text:
        return None

    if "T" in text or ISO_PATTERN.match(text):
        try:
            return _localize(datetime.fromisoformat(text.replace("Z", "+00:00")), timezone)
        except ValueError:
            pass

    match = MONTH_NAME_PATTERN.match(text)
    if match:
        month = MONTHS.get(match.group(1).lower())
        if month is not None:
            return _build(int(match.group(3)), month, int(match.group(2)), match.groups()[3:])

    match = SLASH_PATTERN.match(text)
    if match:
        return _build(int(match.group(3)), int(match.group(1)), int(match.group(2)), match.groups()[3:])

    match = DASH_PATTERN.match(text)
    if match:
        return _build(int(match.group(1)), int(match.group(2)), int(match.group(3)), (None, None, None, None))

    # bare numbers and words make dateutil fill in today's month/year
    if not YEAR_PATTERN.search(text):
        return None
    try:
        return _localize(date_parser.parse(text), timezone)
    except (ValueError, OverflowError):
        return None


def _build(year: int, month: int, day: int, time_parts: tuple[str | None, ...]) -> datetime | None:
    hour_s, minute_s, second_s, meridiem = time_parts
    hour = int(hour_s) if hour_s else 0
    minute = int(minute_s) if minute_s else 0
    second = int(second_s) if second_s else 0
    if meridiem:
        if hour < 1 or hour > 12:
            return None
        is_pm = meridiem.lower().startswith("p")
        hour = hour % 12 + (12 if is_pm else 0)
    try:
        return datetime(year, month, day, hour, minute, second)
    except ValueError:
        return None


def _localize(value: datetime, timezone: ZoneInfo | None) -> datetime:
    if value.tzinfo is None:
        return value
    if timezone is not None:
        value = value.astimezone(timezone)
    return value.replace(tzinfo=None)


def parse_time_of_day(text: str) -> time | None:
    """Parse "18:35" or "6:35 PM"."""
    match = TIME_OF_DAY_PATTERN.match(text.strip())
    if not match:
        return None
    hour, minute = int(match.group(1)), int(match.group(2))
    meridiem = match.group(3)
    if meridiem:
        if hour < 1 or hour > 12:
            return None
        hour = hour % 12 + (12 if meridiem.lower() == "pm" else 0)
    if hour > 23 or minute > 59:
        return None
    return time(hour, minute)


def format_appointment(value: datetime) -> str:
    """Render the sheet's appointment format, e.g. "Jan 22 2026 6:35 PM"."""
    hour = value.hour % 12 or 12
    meridiem = "PM" if value.hour >= 12 else "AM"
    return f"{MONTH_ABBR[value.month - 1]} {value.day} {value.year} {hour}:{value.minute:02d} {meridiem}"


def day_label(value: date) -> str:
    """"18 Oct" style label."""
    return f"{value.day} {MONTH_ABBR[value.month - 1]}"


def month_day_label(value: date) -> str:
    """"Oct 18" style label."""
    return f"{MONTH_ABBR[value.month - 1]} {value.day}"


def month_label(year: int, month: int) -> str:
    return f"{MONTH_ABBR[month - 1]} {year}"
