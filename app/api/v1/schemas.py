import datetime as dt
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class PaymentMode(str, Enum):
    cash = "Cash"
    debit = "Debit"
    credit = "Credit"


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, use_enum_values=True)


class BookingCreateSchema(CamelModel):
    branch: str = Field(min_length=1)
    status: str = "Scheduled"
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    age: int = Field(ge=1, le=150)
    phone: str = Field(min_length=1)
    social_media: str = ""
    email: str = Field(pattern=EMAIL_PATTERN)
    treatment: str = Field(min_length=1)
    area: str = ""
    freebie: str = ""
    date: dt.date
    time: str = Field(min_length=1)
    payment_mode: PaymentMode
    total_price: float = Field(ge=0)
    gender: Literal["Male", "Female"]
    companion_first_name: str = ""
    companion_last_name: str = ""
    companion_age: int | None = None
    companion_freebie: str = ""
    companion_treatment: str = ""
    companion_gender: Literal["Male", "Female", ""] = ""
    booking_details: str = ""
    ad_interacted: str = ""
    agent: str = Field(min_length=1)

    @field_validator("companion_age", mode="before")
    @classmethod
    def blank_age_is_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class BookingUpdateSchema(CamelModel):
    branch: str | None = None
    status: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    age: int | None = Field(default=None, ge=1, le=150)
    phone: str | None = None
    social_media: str | None = None
    email: str | None = Field(default=None, pattern=EMAIL_PATTERN)
    treatment: str | None = None
    area: str | None = None
    freebie: str | None = None
    date: dt.date | None = None
    time: str | None = None
    payment_mode: PaymentMode | None = None
    total_price: float | None = Field(default=None, ge=0)
    gender: str | None = None
    companion_first_name: str | None = None
    companion_last_name: str | None = None
    companion_age: int | None = None
    companion_freebie: str | None = None
    companion_treatment: str | None = None
    companion_gender: str | None = None
    booking_details: str | None = None
    ad_interacted: str | None = None
    agent: str | None = None

    @field_validator("companion_age", mode="before")
    @classmethod
    def blank_age_is_none(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value


class PromoHunterSchema(BaseModel):
    status: str
    matchReason: str
    matchedSource: str
    matchedRow: str
    matchCount: int


class CreatedBookingSchema(BaseModel):
    recordId: str
    timestamp: str
    branch: str
    customer: str
    date: str
    status: str
    promoHunter: PromoHunterSchema


class BookingCreatedResponseSchema(BaseModel):
    success: bool = True
    message: str
    booking: CreatedBookingSchema


class DataResponseSchema(BaseModel):
    success: bool = True
    data: dict[str, Any] = Field(default_factory=dict)


class MessageResponseSchema(BaseModel):
    success: bool = True
    message: str


class DailyReportResponseSchema(BaseModel):
    success: bool = True
    date: str
    reports: dict[str, Any]
