"""Winery and restaurant directory models (read-only here)"""

from datetime import datetime
from sqlalchemy import Column, String, Integer, Boolean, DateTime, Numeric, Text

from winetours.database import Base


class Winery(Base):
    """Winery directory entry"""
    __tablename__ = "wineries"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    slug = Column(String(255), unique=True, nullable=False)

    # Location
    address = Column(String(500))
    city = Column(String(100), default="Walla Walla")
    state = Column(String(2), default="WA")

    # Tasting details
    tasting_fee = Column(Numeric(6, 2))
    average_visit_duration = Column(Integer, default=60)  # minutes
    reservation_required = Column(Boolean, default=False)

    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)


class Restaurant(Base):
    """Lunch partner restaurant"""
    __tablename__ = "restaurants"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    cuisine_type = Column(String(100))

    # Location / contact
    address = Column(String(500))
    phone = Column(String(20))
    email = Column(String(255))
    website = Column(String(500))

    # Menu
    menu_url = Column(String(500))
    accepts_pre_orders = Column(Boolean, default=True)
    minimum_order_value = Column(Numeric(8, 2))

    # Partnership
    is_partner = Column(Boolean, default=False)
    commission_rate = Column(Numeric(4, 2))

    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)
