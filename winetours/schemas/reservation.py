"""Reservation schemas"""

import re
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, List
from pydantic import BaseModel, EmailStr, Field, field_validator

from winetours.config import settings
from winetours.models.reservation import ReservationStatus, PaymentMethod
from winetours.schemas.customer import CustomerSummary

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


class ReservationCreate(BaseModel):
    """Create reservation request"""
    customer_name: str = Field(min_length=1, max_length=255)
    customer_email: EmailStr
    customer_phone: Optional[str] = Field(default=None, max_length=20)
    party_size: int = Field(ge=1)
    preferred_date: date
    alternate_date: Optional[date] = None
    event_type: Optional[str] = Field(default=None, max_length=100)
    special_requests: Optional[str] = None
    deposit_amount: Decimal = Field(gt=0, max_digits=10, decimal_places=2)
    payment_method: PaymentMethod
    brand_id: Optional[int] = None

    @field_validator("customer_name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("customer_name must not be blank")
        return v

    @field_validator("customer_email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("party_size")
    @classmethod
    def check_party_size(cls, v: int) -> int:
        if v > settings.reservation_max_party_size:
            raise ValueError(f"party_size must be at most {settings.reservation_max_party_size}")
        return v

    @field_validator("preferred_date", "alternate_date", mode="before")
    @classmethod
    def check_date_format(cls, v):
        if isinstance(v, str) and not DATE_PATTERN.match(v):
            raise ValueError("date must be formatted YYYY-MM-DD")
        return v


class ReservationStatusUpdate(BaseModel):
    """Status change request"""
    status: ReservationStatus


class ReservationBookingLink(BaseModel):
    """Promotion of a reservation to a full booking"""
    booking_id: int


class ReservationResponse(BaseModel):
    """Reservation response"""
    id: int
    reservation_number: str
    customer_id: int
    customer_name: str
    customer_email: str
    customer_phone: Optional[str]
    party_size: int
    preferred_date: date
    alternate_date: Optional[date]
    event_type: Optional[str]
    special_requests: Optional[str]
    deposit_amount: float
    deposit_paid: bool
    payment_method: str
    status: str
    consultation_deadline: datetime
    brand_id: Optional[int]
    booking_id: Optional[int]
    created_at: datetime
    updated_at: datetime
    customer: Optional[CustomerSummary] = None

    class Config:
        from_attributes = True


class ReservationListResponse(BaseModel):
    """Filtered, paginated reservation list"""
    reservations: List[ReservationResponse]
    total: int
    limit: int
    offset: int
