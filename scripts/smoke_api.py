#!/usr/bin/env python3
"""Smoke requests against a running API (uvicorn app.main:app --port 8001)."""

import json
import sys
from datetime import date, timedelta

import httpx


BASE_URL = "http://127.0.0.1:8001"


def show(title: str, response: httpx.Response) -> None:
    print("=" * 60)
    print(title)
    print("=" * 60)
    print(f"HTTP {response.status_code}")
    print(json.dumps(response.json(), indent=2)[:1500])


def create_booking() -> str | None:
    payload = {
        "branch": "FELIZ",
        "firstName": "Maria",
        "lastName": "Santos",
        "age": 31,
        "phone": "0917 555 0101",
        "email": "maria.santos@example.com",
        "treatment": "Hydrafacial",
        "date": (date.today() + timedelta(days=1)).isoformat(),
        "time": "2:30 PM",
        "paymentMode": "Cash",
        "totalPrice": 2499,
        "gender": "Female",
        "agent": "Joy",
    }
    try:
        response = httpx.post(f"{BASE_URL}/api/bookings", json=payload, timeout=30.0)
        show("POST /api/bookings", response)
        response.raise_for_status()
        return response.json()["booking"]["recordId"]
    except httpx.HTTPError as e:
        print(f"❌ Error: {e}")
        return None


def get_report(path: str) -> bool:
    try:
        response = httpx.get(f"{BASE_URL}{path}", timeout=30.0)
        show(f"GET {path}", response)
        return response.is_success
    except httpx.HTTPError as e:
        print(f"❌ Error: {e}")
        return False


def main() -> int:
    record_id = create_booking()
    paths = [
        "/health",
        "/api/bookings/old?limit=5",
        "/api/bookings/reports/daily",
        "/api/bookings/reports/daily/tomorrow-summary",
        "/api/dashboard/overview",
        "/api/dashboard/trend?days=7",
        "/api/analytics?range=month",
        "/api/analytics/agent-performance",
        "/api/analytics/ad-performance",
        "/api/analytics/sales-report?timeRange=30days",
    ]
    if record_id:
        paths.append(f"/api/bookings/{record_id}")
    ok = [get_report(path) for path in paths]
    print(f"\n{sum(ok)}/{len(ok)} report requests succeeded")
    return 0 if record_id and all(ok) else 1


if __name__ == "__main__":
    sys.exit(main())
