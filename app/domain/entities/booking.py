from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from app.domain.entities.status import StatusCategory


@dataclass(frozen=True)
class Booking:
    row_number: int
    timestamp: str = ""
    created_at: datetime | None = None
    branch: str = ""
    status: str = ""
    status_category: StatusCategory = StatusCategory.unknown
    appointment_text: str = ""
    appointment_date: datetime | None = None
    first_name: str = ""
    last_name: str = ""
    age: int = 0
    gender: str = ""
    treatment: str = ""
    area: str = ""
    freebie: str = ""
    total_price: float = 0.0
    payment_mode: str = ""
    phone: str = ""
    social_media: str = ""
    email: str = ""
    agent: str = ""
    booking_details: str = ""
    ad_interacted: str = ""
    # companion
    companion_first_name: str = ""
    companion_last_name: str = ""
    companion_age: int = 0
    companion_gender: str = ""
    companion_treatment: str = ""
    companion_freebie: str = ""
    # normalized match keys
    email_norm: str = ""
    phone_norm: str = ""
    social_norm: str = ""
    full_name_norm: str = ""
    companion_full_name_norm: str = ""
    # frozen at creation
    promo_hunter_status: str = ""
    match_reason: str = ""
    matched_source: str = ""
    matched_row: str = ""
    record_id: str = ""
    record_status: str = ""
    last_checked_at: str = ""
    cancellation_time: str = ""
    cancelled_at: datetime | None = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def companion_full_name(self) -> str:
        return f"{self.companion_first_name} {self.companion_last_name}".strip()

    @property
    def is_cancelled(self) -> bool:
        return self.status_category == StatusCategory.cancelled
