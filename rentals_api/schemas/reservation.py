"""
Pydantic schemas for the availability calendar and reservations.
"""

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator
from typing import Optional, List
from datetime import date, datetime
from decimal import Decimal
from rentals_api.models.booking import ReservationStatus, PaymentStatus


class AvailabilityDay(BaseModel):
    """One calendar day. special_price overrides the daily rate."""

    date: date
    is_available: bool = True
    special_price: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    notes: Optional[str] = None


class AvailabilityUpdate(BaseModel):
    days: List[AvailabilityDay] = Field(..., min_length=1, max_length=366)

    @field_validator('days')
    @classmethod
    def unique_dates(cls, v):
        dates = [day.date for day in v]
        if len(dates) != len(set(dates)):
            raise ValueError("Each date may appear only once")
        return v


class AvailabilityDayResponse(BaseModel):
    date: date
    is_available: bool
    special_price: Optional[float] = None
    notes: Optional[str] = None


class AvailabilityCalendarResponse(BaseModel):
    property_id: str
    start_date: date
    end_date: date
    days: List[AvailabilityDayResponse]


class AvailabilityCheckResponse(BaseModel):
    """Whether a stay can be booked, with its price when it can."""

    property_id: str
    check_in_date: date
    check_out_date: date
    nights: int
    available: bool
    reason: Optional[str] = None
    total_amount: Optional[float] = None


class ReservationCreate(BaseModel):
    """Guest reservation request."""

    guest_name: str = Field(..., min_length=2, max_length=255, examples=["Ana Lima"])
    guest_email: EmailStr = Field(..., examples=["ana@example.com"])
    guest_phone: Optional[str] = Field(None, max_length=20)
    check_in_date: date
    check_out_date: date
    number_of_guests: int = Field(..., ge=1, le=100)
    special_requests: Optional[str] = None

    @field_validator('guest_name')
    @classmethod
    def validate_guest_name(cls, v):
        if not v.strip():
            raise ValueError("Guest name cannot be empty")
        return v.strip()

    @field_validator('guest_email')
    @classmethod
    def normalize_email(cls, v):
        return v.lower().strip()

    @model_validator(mode='after')
    def validate_dates(self):
        if self.check_out_date <= self.check_in_date:
            raise ValueError("check_out_date must be after check_in_date")
        return self


class ReservationStatusUpdate(BaseModel):
    status: ReservationStatus
    payment_status: Optional[PaymentStatus] = None


class ReservationResponse(BaseModel):
    id: int
    property_id: str
    user_id: Optional[int] = None
    guest_name: str
    guest_email: EmailStr
    guest_phone: Optional[str] = None
    check_in_date: date
    check_out_date: date
    number_of_guests: int
    total_amount: float
    status: ReservationStatus
    payment_status: PaymentStatus
    special_requests: Optional[str] = None
    created_at: Optional[datetime] = None


class ReservationListResponse(BaseModel):
    reservations: List[ReservationResponse]
    total: int
