"""Itinerary models"""

from datetime import datetime
from sqlalchemy import Column, String, Integer, Boolean, DateTime, ForeignKey, Text, UniqueConstraint

from winetours.database import Base


class Itinerary(Base):
    """Driver-facing schedule, one per booking"""
    __tablename__ = "itineraries"

    id = Column(Integer, primary_key=True, autoincrement=True)
    booking_id = Column(Integer, unique=True, nullable=False)

    # Pickup / dropoff ("HH:MM")
    pickup_location = Column(String(500), nullable=False)
    pickup_time = Column(String(5), nullable=False)
    dropoff_location = Column(String(500), nullable=False)
    estimated_dropoff_time = Column(String(5), nullable=False)
    pickup_drive_time_minutes = Column(Integer)
    dropoff_drive_time_minutes = Column(Integer)

    # Notes
    driver_notes = Column(Text)  # visible to driver
    internal_notes = Column(Text)  # staff only

    # Metadata
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)


class ItineraryStop(Base):
    """One winery visit within an itinerary"""
    __tablename__ = "itinerary_stops"
    __table_args__ = (
        UniqueConstraint("itinerary_id", "stop_order", name="uq_itinerary_stops_order"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    itinerary_id = Column(Integer, ForeignKey("itineraries.id", ondelete="CASCADE"), nullable=False, index=True)

    # Wineries belong to the directory domain; a dangling id is possible.
    winery_id = Column(Integer, nullable=False)

    # Schedule
    stop_order = Column(Integer, nullable=False)
    arrival_time = Column(String(5))
    departure_time = Column(String(5))
    duration_minutes = Column(Integer)
    drive_time_to_next_minutes = Column(Integer)  # null for the last stop

    # Details
    stop_type = Column(String(50), default="tasting", nullable=False)
    reservation_confirmed = Column(Boolean, default=False, nullable=False)
    special_notes = Column(Text)
    is_lunch_stop = Column(Boolean, default=False, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
