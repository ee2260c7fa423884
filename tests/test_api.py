"""
HTTP-level tests against the FastAPI app with the in-memory stack injected.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from app.application.exceptions import StoreUnavailableError
from app.application.use_cases.booking_collection import BookingCollection
from app.application.use_cases.reports import ReportsUseCase
from app.domain.entities.column_map import DB_V44
from app.infrastructure.cache.memory_cache import MemoryTTLCache
from app.infrastructure.store.memory_store import MemoryTabularStore
from app.main import app
from app.wiring.dependencies import get_manage_bookings_use_case, get_reports_use_case, get_store


class UnreachableStore(MemoryTabularStore):
    def read_all(self, table):
        raise StoreUnavailableError("quota exceeded")

    def ping(self):
        raise StoreUnavailableError("quota exceeded")


BOOKING = {
    "branch": "FELIZ",
    "firstName": "Maria",
    "lastName": "Santos",
    "age": 31,
    "phone": "0917 555 0101",
    "email": "maria@example.com",
    "treatment": "Hydrafacial",
    "date": "2026-03-11",
    "time": "2:30 PM",
    "paymentMode": "Cash",
    "totalPrice": 2499,
    "gender": "Female",
    "agent": "Joy",
}


@pytest.fixture
def client(store, manage, reports):
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_manage_bookings_use_case] = lambda: manage
    app.dependency_overrides[get_reports_use_case] = lambda: reports
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def seeded(client, store, make_row):
    store.append("DB", make_row(timestamp="2026-03-10T09:00:00", appointment_text="Mar 11 2026 10:00 AM"))
    store.append("DB", make_row(status="Arrived & bought", total_price="1500"))
    return client


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "OK"


def test_health_degraded_when_store_unreachable(client):
    app.dependency_overrides[get_store] = lambda: UnreachableStore()

    response = client.get("/health")

    assert response.status_code == 503
    assert response.json()["status"] == "DEGRADED"


def test_create_booking(client):
    response = client.post("/api/bookings", json=BOOKING)

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["booking"]["date"] == "Mar 11 2026 2:30 PM"
    assert body["booking"]["promoHunter"]["status"] == "Scheduled"

    again = client.post("/api/bookings", json={**BOOKING, "firstName": "Other", "lastName": "Person"})
    assert again.json()["booking"]["promoHunter"]["matchReason"] == "Email Match"

    found = client.get(f"/api/bookings/{body['booking']['recordId']}")
    assert found.status_code == 200
    assert found.json()["data"]["booking"]["customer"] == "Maria Santos"


def test_create_booking_validation(client):
    assert client.post("/api/bookings", json={**BOOKING, "email": "not-an-email"}).status_code == 422
    assert client.post("/api/bookings", json={**BOOKING, "paymentMode": "Barter"}).status_code == 422
    assert client.post("/api/bookings", json={**BOOKING, "time": "soon"}).status_code == 400


def test_list_bookings(seeded):
    response = seeded.get("/api/bookings/old", params={"limit": 1, "sortOrder": "oldest"})

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["pagination"]["total"] == 2
    assert data["pagination"]["hasNext"] is True
    assert len(data["bookings"]) == 1
    assert seeded.get("/api/bookings/old", params={"sortOrder": "sideways"}).status_code == 400


def test_update_and_delete(seeded):
    response = seeded.put("/api/bookings/2", json={"status": "Cancelled", "bookingDetails": "changed plans"})
    assert response.status_code == 200
    assert response.json()["data"]["status"] == "Cancelled"
    assert response.json()["data"]["cancellationTime"] == "2026-03-10T15:00:00"

    assert seeded.put("/api/bookings/99", json={"status": "Cancelled"}).status_code == 404
    assert seeded.delete("/api/bookings/2").status_code == 200
    assert seeded.delete("/api/bookings/3").status_code == 404
    assert seeded.get("/api/bookings/unknown-record").status_code == 404


def test_daily_report(seeded):
    response = seeded.get("/api/bookings/reports/daily")

    assert response.status_code == 200
    body = response.json()
    assert body["date"] == "2026-03-10"
    assert body["reports"]["overallBookingsTomorrow"]["total"] == 1

    detail = seeded.get("/api/bookings/reports/daily/tomorrow-summary")
    assert detail.json()["data"]["count"] == 1
    assert seeded.get("/api/bookings/reports/daily/bogus").status_code == 404


def test_dashboard(seeded):
    overview = seeded.get("/api/dashboard/overview").json()["data"]
    assert overview["kpis"]["bookings"]["today"] == 1
    assert overview["kpis"]["revenue"]["today"] == 1500.0

    trend = seeded.get("/api/dashboard/trend", params={"days": 5}).json()["data"]
    assert len(trend["dates"]) == 5
    assert trend["bookings"][-1] == 1


def test_analytics_endpoints(seeded):
    analytics = seeded.get("/api/analytics", params={"range": "month"})
    assert analytics.status_code == 200
    assert analytics.json()["data"]["overview"]["totalBookings"] == 2

    assert seeded.get("/api/analytics", params={"range": "forever"}).status_code == 400
    assert seeded.get("/api/analytics", params={"startDate": "2026-03-01"}).status_code == 400

    sales = seeded.get("/api/analytics/sales-report", params={"timeRange": "thisMonth"}).json()["data"]
    assert sales["startDate"] == "2026-03-01"
    assert sales["rangeSales"]["overall"] == 1500.0

    agents = seeded.get("/api/analytics/agent-performance").json()["data"]
    assert agents["summary"]["totalAgents"] == 1
    assert seeded.get("/api/analytics/ad-performance").status_code == 200


def test_store_outage_maps_to_502(client, clock):
    collection = BookingCollection(UnreachableStore(), MemoryTTLCache(clock=clock), DB_V44, "DB", timezone=None)
    app.dependency_overrides[get_reports_use_case] = lambda: ReportsUseCase(collection, timezone=None)

    response = client.get("/api/dashboard/overview")

    assert response.status_code == 502
    assert response.json()["detail"] == "Booking store is unavailable"
