from enum import Enum


class StatusCategory(str, Enum):
    scheduled = "scheduled"
    cancelled = "cancelled"
    converted = "converted"
    promo_hunter = "promo_hunter"
    unknown = "unknown"
