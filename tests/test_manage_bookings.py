"""
Tests for creating, listing, updating and deleting bookings.
"""

from __future__ import annotations

from datetime import date

import pytest

from app.application.exceptions import BookingNotFoundError, InvariantViolationError
from app.domain.entities.column_map import DB_V44, INTAKE_V37

NOW_ISO = "2026-03-10T15:00:00"


def new_booking(**overrides):
    payload = {
        "branch": "FELIZ",
        "status": "Scheduled",
        "first_name": "Maria",
        "last_name": "Santos",
        "age": 31,
        "phone": "0917 555 0101",
        "email": "maria@example.com",
        "treatment": "Hydrafacial",
        "date": date(2026, 3, 12),
        "time": "2:30 PM",
        "payment_mode": "Cash",
        "total_price": 2499.0,
        "gender": "Female",
        "agent": "Joy",
    }
    payload.update(overrides)
    return payload


def test_create_appends_to_both_tables(manage, store):
    created = manage.create(new_booking())

    assert created["date"] == "Mar 12 2026 2:30 PM"
    assert created["customer"] == "Maria Santos"
    assert created["timestamp"] == NOW_ISO
    assert created["promoHunter"]["matchCount"] == 0

    intake = store.read_all("Intake")
    db = store.read_all("DB")
    assert len(intake) == 2
    assert len(db) == 2
    assert INTAKE_V37.get(intake[1], "record_id") == created["recordId"]
    assert DB_V44.get(db[1], "record_status") == "active"
    assert DB_V44.get(db[1], "phone_norm") == "09175550101"
    assert DB_V44.get(db[1], "dash_branch") == "FELIZ"


def test_create_flags_returning_customer(manage, store, make_row):
    store.append("DB", make_row(first_name="Lia", last_name="Gomez", email="maria@example.com"))

    created = manage.create(new_booking(status="Arrived & bought"))

    assert created["status"] == "Promo hunter"
    assert created["promoHunter"]["matchReason"] == "Email Match"
    assert created["promoHunter"]["matchedRow"] == "Row 2"
    db = store.read_all("DB")
    assert DB_V44.get(db[2], "status") == "Promo hunter"
    assert DB_V44.get(db[2], "matched_source") == "customer (FELIZ)"


def test_create_rejects_bad_time(manage, store):
    with pytest.raises(ValueError):
        manage.create(new_booking(time="half past two"))
    assert len(store.read_all("DB")) == 1


def test_create_invalidates_cached_collection(manage, collection):
    assert collection.load() == []
    manage.create(new_booking())
    assert len(collection.load()) == 1


def test_list_bookings_paginates(manage, store, make_row, today):
    for i in range(120):
        store.append("DB", make_row(first_name=f"Customer{i}"))

    data = manage.list_bookings(today=today, page=3, limit=50)

    assert len(data["bookings"]) == 20
    assert data["pagination"]["totalPages"] == 3
    assert not data["pagination"]["hasNext"]
    # newest first
    assert data["bookings"][-1]["customer"] == "Customer0 Reyes"


def test_list_bookings_filters(manage, store, make_row, today):
    store.append("DB", make_row(first_name="Maria", phone="0917 555 0101", status="Arrived & bought"))
    store.append("DB", make_row(first_name="Lia", branch="ESTANCIA", appointment_text="Mar 9 2026 9:00 AM"))
    store.append("DB", make_row(first_name="Joy", appointment_text="Jan 2 2026 9:00 AM"))

    def names(**kwargs):
        return [b["customer"] for b in manage.list_bookings(today=today, **kwargs)["bookings"]]

    assert names(search="555 01") == ["Maria Reyes"]
    assert names(search="lia") == ["Lia Reyes"]
    assert names(status="arrived & BOUGHT") == ["Maria Reyes"]
    assert names(branch="ESTANCIA") == ["Lia Reyes"]
    assert names(date_range="yesterday") == ["Lia Reyes"]
    assert names(date_range="30", sort_order="oldest") == ["Maria Reyes", "Lia Reyes"]
    with pytest.raises(ValueError):
        names(sort_order="random")


def test_get_by_record_id(manage):
    created = manage.create(new_booking())

    found = manage.get_by_record_id(created["recordId"])
    assert found["source"] == "Intake"
    assert found["booking"]["customer"] == "Maria Santos"
    with pytest.raises(BookingNotFoundError):
        manage.get_by_record_id("missing")


def test_update_keeps_creation_fields(manage, store, make_row):
    store.append("DB", make_row(record_id="abc", match_reason="Email Match", legacy_full_name="Ana R."))

    updated = manage.update(2, {"first_name": "Anna", "total_price": 1500.0})

    assert updated["customer"] == "Anna Reyes"
    assert updated["price"] == 1500.0
    assert updated["recordId"] == "abc"
    assert updated["matchReason"] == "Email Match"
    row = store.read_all("DB")[1]
    assert DB_V44.get(row, "timestamp") == "2026-03-01T09:00:00"
    assert DB_V44.get(row, "legacy_full_name") == "Ana R."
    assert DB_V44.get(row, "full_name_norm") == "anna reyes"
    assert DB_V44.get(row, "last_checked_at") == NOW_ISO
    assert DB_V44.get(row, "age") == "30"


def test_update_records_cancellation_once(manage, store, make_row):
    store.append("DB", make_row())

    manage.update(2, {"status": "Cancelled"})
    assert DB_V44.get(store.read_all("DB")[1], "cancellation_time") == NOW_ISO

    store.update_row("DB", 2, DB_V44.merge_row(store.read_all("DB")[1], {"cancellation_time": "2026-03-09T08:00:00"}))
    manage.update(2, {"status": "Cancelled", "booking_details": "no show"})
    assert DB_V44.get(store.read_all("DB")[1], "cancellation_time") == "2026-03-09T08:00:00"


def test_update_rebuilds_appointment(manage, store, make_row):
    store.append("DB", make_row(appointment_text="Mar 10 2026 2:00 PM"))

    assert manage.update(2, {"date": date(2026, 3, 15)})["date"] == "Mar 15 2026 2:00 PM"
    assert manage.update(2, {"time": "9:15 AM"})["date"] == "Mar 15 2026 9:15 AM"
    with pytest.raises(ValueError):
        manage.update(2, {"time": "later"})


def test_update_bounds_and_layout(manage, store, make_row):
    store.append("DB", make_row())
    with pytest.raises(BookingNotFoundError):
        manage.update(1, {"status": "Cancelled"})
    with pytest.raises(BookingNotFoundError):
        manage.update(3, {"status": "Cancelled"})

    narrow = store.read_all("DB")
    narrow[0] = narrow[0][:40]
    store._tables["DB"] = narrow
    with pytest.raises(InvariantViolationError):
        manage.update(2, {"status": "Cancelled"})


def test_delete(manage, store, make_row, collection):
    store.append("DB", make_row(first_name="Ana"))
    store.append("DB", make_row(first_name="Lia"))
    assert len(collection.load()) == 2

    manage.delete(2)

    assert [b.first_name for b in collection.load()] == ["Lia"]
    with pytest.raises(BookingNotFoundError):
        manage.delete(5)
