"""Reservation model"""

import enum
from datetime import datetime
from sqlalchemy import Column, String, Integer, Boolean, Date, DateTime, ForeignKey, Numeric, Text

from winetours.database import Base


class ReservationStatus(str, enum.Enum):
    """Reservation lifecycle states"""
    PENDING = "pending"
    CONTACTED = "contacted"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class PaymentMethod(str, enum.Enum):
    """Deposit payment methods"""
    CARD = "card"
    CHECK = "check"


class Reservation(Base):
    """Deposit-only booking intent, pending full scheduling"""
    __tablename__ = "reservations"

    id = Column(Integer, primary_key=True, autoincrement=True)
    reservation_number = Column(String(20), unique=True, nullable=False)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, index=True)

    # Customer snapshot at creation time
    customer_name = Column(String(255), nullable=False)
    customer_email = Column(String(255), nullable=False)
    customer_phone = Column(String(20))

    # Reservation details
    party_size = Column(Integer, nullable=False)
    preferred_date = Column(Date, nullable=False)
    alternate_date = Column(Date)
    event_type = Column(String(100))
    special_requests = Column(Text)

    # Deposit
    deposit_amount = Column(Numeric(10, 2), nullable=False)
    deposit_paid = Column(Boolean, default=False, nullable=False)
    payment_method = Column(String(20), nullable=False)

    # Status
    status = Column(String(20), default=ReservationStatus.PENDING.value, nullable=False, index=True)
    consultation_deadline = Column(DateTime, nullable=False)

    # Set by other domains
    brand_id = Column(Integer, index=True)
    booking_id = Column(Integer)

    # Metadata
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
