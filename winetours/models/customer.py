"""Customer model"""

from datetime import datetime
from sqlalchemy import Column, String, Integer, Boolean, Date, DateTime, Numeric, Text

from winetours.database import Base


class Customer(Base):
    """Identity anchor for reservations and bookings"""
    __tablename__ = "customers"

    id = Column(Integer, primary_key=True, autoincrement=True)

    # Stored normalized (stripped, lower-cased); the unique index is the
    # one-row-per-email guarantee.
    email = Column(String(255), unique=True, nullable=False, index=True)
    name = Column(String(255), nullable=False)
    phone = Column(String(20))

    # Preferences
    vip_status = Column(Boolean, default=False, nullable=False, index=True)
    dietary_restrictions = Column(Text)
    accessibility_needs = Column(Text)

    # Marketing
    email_marketing_consent = Column(Boolean, default=False, nullable=False)
    sms_marketing_consent = Column(Boolean, default=False, nullable=False)

    # Statistics
    total_bookings = Column(Integer, default=0, nullable=False)
    total_spent = Column(Numeric(10, 2), default=0, nullable=False)
    last_booking_date = Column(Date)

    # Metadata
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)
