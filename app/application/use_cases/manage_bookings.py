from __future__ import annotations

import logging
import uuid
from datetime import date, datetime, time
from typing import Any, Callable
from zoneinfo import ZoneInfo

from app.application.exceptions import BookingNotFoundError, InvariantViolationError
from app.application.ports.tabular_store import TabularStorePort
from app.application.reports.common import booking_summary
from app.application.use_cases.booking_collection import BookingCollection
from app.application.use_cases.promo_hunter import MatchCandidate, PromoHunterMatcher
from app.application.utils.date_parser import format_appointment, parse_time_of_day
from app.application.utils.date_windows import DateWindow
from app.application.utils.pagination import paginate
from app.application.utils.record_parser import normalized_fields, row_to_booking, rows_to_bookings
from app.application.utils.status import DEFAULT_STATUS, classify_status
from app.domain.entities.booking import Booking
from app.domain.entities.column_map import ColumnMap
from app.domain.entities.status import StatusCategory

ACTIVE_RECORD = "active"

# fields a client may write; everything else is managed here
EDITABLE_FIELDS = (
    "branch",
    "status",
    "first_name",
    "last_name",
    "age",
    "gender",
    "treatment",
    "area",
    "freebie",
    "total_price",
    "payment_mode",
    "phone",
    "social_media",
    "email",
    "agent",
    "booking_details",
    "ad_interacted",
    "companion_first_name",
    "companion_last_name",
    "companion_age",
    "companion_gender",
    "companion_treatment",
    "companion_freebie",
)

NUMERIC_FIELDS = ("age", "total_price", "companion_age")

IDENTITY_FIELDS = (
    "first_name",
    "last_name",
    "email",
    "phone",
    "social_media",
    "companion_first_name",
    "companion_last_name",
)


class ManageBookingsUseCase:
    def __init__(
        self,
        store: TabularStorePort,
        collection: BookingCollection,
        matcher: PromoHunterMatcher,
        intake_map: ColumnMap,
        intake_table: str,
        timezone: ZoneInfo,
        default_page_size: int = 50,
        now: Callable[[], datetime] | None = None,
    ) -> None:
        self._store = store
        self._collection = collection
        self._matcher = matcher
        self._intake_map = intake_map
        self._intake_table = intake_table
        self._timezone = timezone
        self._default_page_size = default_page_size
        self._now = now or (lambda: datetime.now(timezone))
        self._logger = logging.getLogger(__name__)

    def create(self, payload: dict[str, Any]) -> dict[str, Any]:
        """Run the promo hunter check, then append the booking to intake and master tables."""
        clock = parse_time_of_day(str(payload.get("time") or ""))
        if clock is None:
            raise ValueError("time must look like HH:MM or h:mm AM/PM")
        appointment = datetime.combine(payload["date"], clock)

        candidate = MatchCandidate(
            first_name=payload.get("first_name") or "",
            last_name=payload.get("last_name") or "",
            email=payload.get("email") or "",
            phone=payload.get("phone") or "",
            social_media=payload.get("social_media") or "",
            companion_first_name=payload.get("companion_first_name") or "",
            companion_last_name=payload.get("companion_last_name") or "",
        )
        match = self._matcher.match(candidate, self._collection.load(), default_status=payload.get("status") or DEFAULT_STATUS)

        timestamp = self._now().isoformat()
        appointment_text = format_appointment(appointment)
        values: dict[str, Any] = {name: payload.get(name, "") for name in EDITABLE_FIELDS}
        values.update(normalized_fields(values))
        values.update(
            {
                "timestamp": timestamp,
                "status": match.status,
                "appointment_text": appointment_text,
                "promo_hunter_status": match.status,
                "match_reason": match.match_reason,
                "matched_source": match.matched_source,
                "matched_row": match.matched_row,
                "record_id": str(uuid.uuid4()),
                "record_status": ACTIVE_RECORD,
                "last_checked_at": timestamp,
                "dash_booking_created_at": timestamp,
                "dash_appointment_date": appointment_text,
                "dash_branch": values["branch"],
                "dash_booking_status": match.status,
            }
        )

        self._store.append(self._intake_table, self._intake_map.build_row(values))
        self._store.append(self._collection.table, self._collection.column_map.build_row(values))
        self._collection.invalidate()
        self._logger.info(
            "Booking created",
            extra={"record_id": values["record_id"], "branch": values["branch"], "reason": match.match_reason},
        )
        return {
            "recordId": values["record_id"],
            "timestamp": timestamp,
            "branch": values["branch"],
            "customer": f"{values['first_name']} {values['last_name']}".strip(),
            "date": appointment_text,
            "status": match.status,
            "promoHunter": {
                "status": match.status,
                "matchReason": match.match_reason,
                "matchedSource": match.matched_source,
                "matchedRow": match.matched_row,
                "matchCount": match.match_count,
            },
        }

    def list_bookings(
        self,
        today: date,
        branch: str | None = None,
        status: str | None = None,
        date_range: str | None = None,
        start: date | None = None,
        end: date | None = None,
        search: str | None = None,
        sort_order: str = "newest",
        page: int = 1,
        limit: int | None = None,
    ) -> dict[str, Any]:
        window = DateWindow(today).listing_range(date_range, start, end)
        bookings = self._collection.load()
        if branch and branch.lower() != "all":
            bookings = [b for b in bookings if b.branch == branch]
        if status and status.lower() != "all":
            wanted = status.strip().lower()
            bookings = [b for b in bookings if b.status.strip().lower() == wanted]
        if window is not None:
            bookings = [b for b in bookings if window.contains(b.appointment_date)]
        if search and search.strip():
            bookings = [b for b in bookings if _matches_search(b, search)]
        if sort_order == "newest":
            bookings = list(reversed(bookings))
        elif sort_order != "oldest":
            raise ValueError("sortOrder must be 'newest' or 'oldest'")

        chunk, pagination = paginate(bookings, page, limit or self._default_page_size)
        return {"bookings": [booking_summary(b) for b in chunk], "pagination": pagination}

    def get_by_record_id(self, record_id: str) -> dict[str, Any]:
        """Look in the intake table first, then the master table."""
        sources = (
            (self._intake_table, self._intake_map),
            (self._collection.table, self._collection.column_map),
        )
        for table, column_map in sources:
            rows = self._store.read_all(table)
            for booking in rows_to_bookings(rows, column_map, self._timezone):
                if booking.record_id == record_id:
                    return {"source": table, "booking": booking_summary(booking)}
        raise BookingNotFoundError(f"Booking {record_id} not found")

    def update(self, row_number: int, changes: dict[str, Any]) -> dict[str, Any]:
        """Rewrite one master-table row.

        Creation timestamp, record id and promo hunter fields are kept as stored.
        """
        rows = self._collection.read_rows()
        if row_number < 2 or row_number > len(rows):
            raise BookingNotFoundError(f"Row {row_number} does not exist")
        column_map = self._collection.column_map
        if len(rows[0]) < column_map.width:
            raise InvariantViolationError(
                f"{self._collection.table} header has {len(rows[0])} columns, expected {column_map.width}"
            )
        existing = row_to_booking(rows[row_number - 1], column_map, row_number, self._timezone)
        now = self._now().isoformat()

        # numeric cells stay as stored unless changed
        values: dict[str, Any] = {name: getattr(existing, name) for name in EDITABLE_FIELDS if name not in NUMERIC_FIELDS}
        values.update({name: value for name, value in changes.items() if name in EDITABLE_FIELDS and value is not None})
        if any(name in changes for name in IDENTITY_FIELDS):
            values.update(normalized_fields(values))

        if changes.get("date") is not None or changes.get("time"):
            values["appointment_text"] = self._rebuild_appointment(existing, changes)
            values["dash_appointment_date"] = values["appointment_text"]

        values["last_checked_at"] = now
        values["dash_branch"] = values["branch"]
        values["dash_booking_status"] = values["status"]
        if (
            classify_status(values["status"]) == StatusCategory.cancelled
            and column_map.has("cancellation_time")
            and not existing.cancellation_time
        ):
            values["cancellation_time"] = now

        row = column_map.merge_row(rows[row_number - 1], values)
        self._store.update_row(self._collection.table, row_number, row)
        self._collection.invalidate()
        self._logger.info(
            "Booking updated",
            extra={"row_number": row_number, "record_id": existing.record_id, "branch": values["branch"]},
        )
        updated = row_to_booking(row, column_map, row_number, self._timezone)
        return booking_summary(updated)

    def delete(self, row_number: int) -> None:
        rows = self._collection.read_rows()
        if row_number < 2 or row_number > len(rows):
            raise BookingNotFoundError(f"Row {row_number} does not exist")
        self._store.delete_row(self._collection.table, row_number)
        self._collection.invalidate()
        self._logger.info("Booking deleted", extra={"row_number": row_number})

    @staticmethod
    def _rebuild_appointment(existing: Booking, changes: dict[str, Any]) -> str:
        day = changes.get("date") or (existing.appointment_date.date() if existing.appointment_date else None)
        if day is None:
            raise ValueError("date is required when the stored appointment date is unreadable")
        if changes.get("time"):
            clock = parse_time_of_day(str(changes["time"]))
            if clock is None:
                raise ValueError("time must look like HH:MM or h:mm AM/PM")
        else:
            clock = existing.appointment_date.time() if existing.appointment_date else time(0, 0)
        return format_appointment(datetime.combine(day, clock))


def _matches_search(booking: Booking, search: str) -> bool:
    term = search.strip().lower()
    haystack = (
        booking.first_name,
        booking.last_name,
        booking.full_name,
        booking.email,
        booking.agent,
        booking.treatment,
        booking.branch,
    )
    if any(term in value.lower() for value in haystack):
        return True
    return term in booking.phone
