from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta

from dateutil.relativedelta import relativedelta

ANALYTICS_PRESET_DAYS = {"today": 0, "week": 7, "month": 30, "quarter": 90}
UNFILTERED_ANALYTICS_PRESETS = ("year", "all")
LISTING_PRESET_DAYS = {"7": 7, "30": 30, "90": 90}
SALES_PRESETS = ("30days", "60days", "90days", "thisMonth", "6months", "1year")
DEFAULT_SALES_PRESET = "6months"


def start_of_day(value: date) -> datetime:
    return datetime.combine(value, time.min)


def end_of_day(value: date) -> datetime:
    return datetime.combine(value, time.max)


@dataclass(frozen=True)
class DateRange:
    """Interval [start, end] of naive local datetimes.

    An open-ended range only enforces ``start``; ``end`` is then the day the
    range was resolved on and is used for labels and bucket sizing.
    """

    start: datetime
    end: datetime
    open_ended: bool = False

    @classmethod
    def from_dates(cls, start: date, end: date) -> DateRange:
        if end < start:
            raise ValueError("endDate must not be before startDate")
        return cls(start=start_of_day(start), end=end_of_day(end))

    def contains(self, value: datetime | None) -> bool:
        if value is None or value < self.start:
            return False
        return self.open_ended or value <= self.end

    @property
    def span_days(self) -> int:
        """Whole days between the two boundary calendar days."""
        return (self.end.date() - self.start.date()).days

    def days(self) -> list[date]:
        current = self.start.date()
        last = self.end.date()
        result = []
        while current <= last:
            result.append(current)
            current += timedelta(days=1)
        return result

    def previous(self) -> DateRange:
        """Equal-length range ending just before this one starts."""
        duration = self.end - self.start
        previous_end = self.start - timedelta(microseconds=1)
        return DateRange(start=previous_end - duration, end=previous_end)

    def midpoint(self) -> datetime:
        return self.start + (self.end - self.start) / 2


class DateWindow:
    """Classifies timestamps against calendar days relative to a fixed ``today``."""

    def __init__(self, today: date) -> None:
        self.today = today
        self.yesterday = today - timedelta(days=1)
        self.tomorrow = today + timedelta(days=1)

    def is_today(self, value: datetime | None) -> bool:
        return value is not None and value.date() == self.today

    def is_yesterday(self, value: datetime | None) -> bool:
        return value is not None and value.date() == self.yesterday

    def is_tomorrow(self, value: datetime | None) -> bool:
        return value is not None and value.date() == self.tomorrow

    def is_in_next_7_days(self, value: datetime | None) -> bool:
        """today <= day <= today+7."""
        if value is None:
            return False
        return self.today <= value.date() <= self.today + timedelta(days=7)

    def is_strictly_next_7_days(self, value: datetime | None) -> bool:
        """today < day <= today+7."""
        if value is None:
            return False
        return self.today < value.date() <= self.today + timedelta(days=7)

    def within_last_days(self, value: datetime | None, days: int) -> bool:
        """Day falls in [today-days+1, today]."""
        if value is None:
            return False
        return self.today - timedelta(days=days - 1) <= value.date() <= self.today

    def since_days_ago(self, days: int) -> DateRange:
        """Everything from the start of today-days on, upcoming days included."""
        start = self.today - timedelta(days=days)
        return DateRange(start=start_of_day(start), end=end_of_day(self.today), open_ended=True)

    def custom(self, start: date | None, end: date | None) -> DateRange | None:
        if start is None and end is None:
            return None
        if start is None or end is None:
            raise ValueError("startDate and endDate must be provided together")
        return DateRange.from_dates(start, end)

    def analytics_range(self, preset: str, start: date | None = None, end: date | None = None) -> DateRange | None:
        """Resolve an analytics window; None means no date filter ("year" and "all")."""
        custom = self.custom(start, end)
        if custom is not None:
            return custom
        key = (preset or "month").lower()
        if key in UNFILTERED_ANALYTICS_PRESETS:
            return None
        if key not in ANALYTICS_PRESET_DAYS:
            raise ValueError(f"Unknown range {preset!r}")
        return self.since_days_ago(ANALYTICS_PRESET_DAYS[key])

    def listing_range(self, preset: str | None, start: date | None = None, end: date | None = None) -> DateRange | None:
        custom = self.custom(start, end)
        if custom is not None:
            return custom
        if not preset or preset == "all":
            return None
        if preset == "today":
            return DateRange.from_dates(self.today, self.today)
        if preset == "yesterday":
            return DateRange.from_dates(self.yesterday, self.yesterday)
        if preset in LISTING_PRESET_DAYS:
            return self.since_days_ago(LISTING_PRESET_DAYS[preset])
        raise ValueError(f"Unknown dateRange {preset!r}")

    def sales_range(self, preset: str | None, start: date | None = None, end: date | None = None) -> DateRange:
        custom = self.custom(start, end)
        if custom is not None:
            return custom
        key = preset or DEFAULT_SALES_PRESET
        if key == "30days":
            first = self.today - timedelta(days=30)
        elif key == "60days":
            first = self.today - timedelta(days=60)
        elif key == "90days":
            first = self.today - timedelta(days=90)
        elif key == "thisMonth":
            first = self.today.replace(day=1)
        elif key == "6months":
            first = self.today - relativedelta(months=6)
        elif key == "1year":
            first = self.today - relativedelta(years=1)
        else:
            raise ValueError(f"Unknown timeRange {preset!r}")
        return DateRange.from_dates(first, self.today)
