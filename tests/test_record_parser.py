"""
Tests for turning raw sheet rows into bookings.
"""

from __future__ import annotations

from datetime import datetime

from app.application.utils.record_parser import (
    cell_text,
    normalize_companion_name,
    normalize_phone,
    normalized_fields,
    parse_age,
    parse_price,
    row_to_booking,
    rows_to_bookings,
)
from app.domain.entities.column_map import DB_V44
from app.domain.entities.status import StatusCategory


def test_parse_price_strips_currency_and_commas():
    assert parse_price("₱1,234.50") == 1234.5
    assert parse_price(2500) == 2500.0
    assert parse_price("PHP 999") == 999.0


def test_parse_price_never_raises():
    """Unparsable, empty or negative prices all become zero."""
    assert parse_price("N/A") == 0.0
    assert parse_price("") == 0.0
    assert parse_price(None) == 0.0
    assert parse_price("1.2.3") == 0.0
    assert parse_price(-50) == 0.0
    assert parse_price(float("nan")) == 0.0


def test_parse_age():
    assert parse_age("31") == 31
    assert parse_age(30.0) == 30
    assert parse_age("") == 0
    assert parse_age("thirty") == 0
    assert parse_age("-4") == 0


def test_cell_text_drops_float_suffix():
    assert cell_text(2500.0) == "2500"
    assert cell_text("  FELIZ ") == "FELIZ"
    assert cell_text(None) == ""


def test_normalizers():
    assert normalize_phone("0917 555-0101") == "09175550101"
    assert normalize_companion_name("Lia", "") == ""
    assert normalize_companion_name(" Lia ", "Gomez") == "lia gomez"

    fields = normalized_fields({"first_name": "Maria ", "last_name": "SANTOS", "email": " M@X.com "})
    assert fields["full_name_norm"] == "maria santos"
    assert fields["email_norm"] == "m@x.com"
    assert fields["phone_norm"] == ""


def test_row_to_booking_parses_typed_fields(make_row):
    row = make_row(total_price="₱2,500", appointment_text="Jan 22 2026 6:35 PM", status="Arrived & bought")
    booking = row_to_booking(row, DB_V44, 5)

    assert booking.row_number == 5
    assert booking.total_price == 2500.0
    assert booking.appointment_date == datetime(2026, 1, 22, 18, 35)
    assert booking.created_at == datetime(2026, 3, 1, 9, 0)
    assert booking.status_category == StatusCategory.converted
    assert booking.full_name_norm == "ana reyes"


def test_row_to_booking_tolerates_bad_cells(make_row):
    row = make_row(total_price="N/A", appointment_text="next week sometime", age="?")
    booking = row_to_booking(row, DB_V44, 2)

    assert booking.total_price == 0.0
    assert booking.appointment_date is None
    assert booking.age == 0


def test_row_to_booking_accepts_short_rows():
    booking = row_to_booking(["2026-03-01T09:00:00", "FELIZ"], DB_V44, 2)

    assert booking.branch == "FELIZ"
    assert booking.status == ""
    assert booking.status_category == StatusCategory.unknown
    assert booking.total_price == 0.0
    assert booking.cancelled_at is None


def test_stored_norm_columns_win_over_derived(make_row):
    row = make_row(email="new@x.com", email_norm="old@x.com")
    booking = row_to_booking(row, DB_V44, 2)

    assert booking.email_norm == "old@x.com"


def test_rows_to_bookings_skips_header_and_blank_rows(make_row):
    rows = [
        ["header"] * DB_V44.width,
        make_row(first_name="Ana"),
        [""] * DB_V44.width,
        make_row(first_name="Lia"),
    ]
    bookings = rows_to_bookings(rows, DB_V44)

    assert [b.row_number for b in bookings] == [2, 4]
    assert [b.first_name for b in bookings] == ["Ana", "Lia"]
