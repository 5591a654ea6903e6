"""Customer schemas"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional, List
from pydantic import BaseModel, EmailStr, Field, field_validator


class CustomerResolve(BaseModel):
    """Find-or-create lookup by email"""
    email: EmailStr
    name: str = Field(min_length=1, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=20)
    email_marketing_consent: Optional[bool] = None
    sms_marketing_consent: Optional[bool] = None

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v):
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name must not be blank")
        return v

    @field_validator("phone")
    @classmethod
    def blank_phone_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        return v


class CustomerCreate(CustomerResolve):
    """Create customer request"""
    vip_status: bool = False
    dietary_restrictions: Optional[str] = None
    accessibility_needs: Optional[str] = None


class CustomerUpdate(BaseModel):
    """Update customer request"""
    name: Optional[str] = Field(default=None, min_length=1, max_length=255)
    phone: Optional[str] = Field(default=None, max_length=20)
    vip_status: Optional[bool] = None
    dietary_restrictions: Optional[str] = None
    accessibility_needs: Optional[str] = None
    email_marketing_consent: Optional[bool] = None
    sms_marketing_consent: Optional[bool] = None

    @field_validator("name", "vip_status", "email_marketing_consent", "sms_marketing_consent")
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("may be omitted but not null")
        return v


class BookingStatisticsUpdate(BaseModel):
    """Statistics increment recorded after a completed booking"""
    amount: Decimal = Field(ge=0)
    booking_date: date


class CustomerSummary(BaseModel):
    """Compact customer projection embedded in other payloads"""
    id: int
    email: str
    name: str
    phone: Optional[str]

    class Config:
        from_attributes = True


class CustomerResponse(BaseModel):
    """Customer response"""
    id: int
    email: str
    name: str
    phone: Optional[str]
    vip_status: bool
    dietary_restrictions: Optional[str]
    accessibility_needs: Optional[str]
    email_marketing_consent: bool
    sms_marketing_consent: bool
    total_bookings: int
    total_spent: float
    last_booking_date: Optional[date]
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True


class CustomerListResponse(BaseModel):
    """Paginated customer list"""
    items: List[CustomerResponse]
    total: int
    limit: int
    offset: int
