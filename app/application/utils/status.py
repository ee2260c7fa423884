from __future__ import annotations

from app.domain.entities.status import StatusCategory

DEFAULT_STATUS = "Scheduled"

# Revenue for sales reports counts only these.
PURCHASE_STATUSES = frozenset({"arrived & bought", "comeback & bought"})
ARRIVAL_STATUSES = PURCHASE_STATUSES | {"arrived not potential"}


def classify_status(status: str | None) -> StatusCategory:
    text = (status or "").strip().lower()
    if not text:
        return StatusCategory.unknown
    if "cancel" in text:
        return StatusCategory.cancelled
    if "promo hunter" in text or "promo_hunter" in text:
        return StatusCategory.promo_hunter
    if "bought" in text or "completed" in text:
        return StatusCategory.converted
    if "scheduled" in text:
        return StatusCategory.scheduled
    return StatusCategory.unknown


def is_purchase(status: str | None) -> bool:
    return (status or "").strip().lower() in PURCHASE_STATUSES


def is_arrival(status: str | None) -> bool:
    return (status or "").strip().lower() in ARRIVAL_STATUSES


def is_ad_conversion(status: str | None) -> bool:
    text = (status or "").lower()
    return "bought" in text or "arrived" in text


def is_refund(status: str | None) -> bool:
    return "refund" in (status or "").lower()


def is_new_customer(status: str | None) -> bool:
    return "new" in (status or "").lower()
