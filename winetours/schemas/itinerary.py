"""Itinerary schemas"""

from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, Field, field_validator

TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"

# Columns that are NOT NULL; an explicit null in an update is rejected
# rather than silently overwriting the stored value.
REQUIRED_FIELDS = ("pickup_location", "pickup_time", "dropoff_location", "estimated_dropoff_time")


class StopInput(BaseModel):
    """One stop as supplied by the caller"""
    winery_id: int
    stop_order: int = Field(ge=1)
    arrival_time: Optional[str] = Field(default=None, pattern=TIME_PATTERN)
    departure_time: Optional[str] = Field(default=None, pattern=TIME_PATTERN)
    duration_minutes: Optional[int] = Field(default=None, ge=0)
    drive_time_to_next_minutes: Optional[int] = Field(default=None, ge=0)
    stop_type: str = Field(default="tasting", max_length=50)
    reservation_confirmed: bool = False
    special_notes: Optional[str] = None
    is_lunch_stop: bool = False


class ItineraryFields(BaseModel):
    """Itinerary header fields; every field optional"""
    pickup_location: Optional[str] = Field(default=None, min_length=1, max_length=500)
    pickup_time: Optional[str] = Field(default=None, pattern=TIME_PATTERN)
    dropoff_location: Optional[str] = Field(default=None, min_length=1, max_length=500)
    estimated_dropoff_time: Optional[str] = Field(default=None, pattern=TIME_PATTERN)
    pickup_drive_time_minutes: Optional[int] = Field(default=None, ge=0)
    dropoff_drive_time_minutes: Optional[int] = Field(default=None, ge=0)
    driver_notes: Optional[str] = None
    internal_notes: Optional[str] = None

    @field_validator(*REQUIRED_FIELDS)
    @classmethod
    def reject_null(cls, v):
        if v is None:
            raise ValueError("may be omitted but not null")
        return v


class ItineraryCreate(ItineraryFields):
    """Create itinerary request"""
    stops: Optional[List[StopInput]] = None


class ItineraryUpdate(ItineraryFields):
    """Partial itinerary update; omitted fields keep their stored value"""


class StopsReplace(BaseModel):
    """Replace the full ordered stop list"""
    stops: List[StopInput]


class WinerySummary(BaseModel):
    """Winery display fields shown on a stop"""
    id: int
    name: str
    slug: str
    address: Optional[str]
    city: Optional[str]
    tasting_fee: Optional[float]
    average_visit_duration: Optional[int]

    class Config:
        from_attributes = True


class StopResponse(BaseModel):
    """Stop enriched with its winery"""
    id: int
    winery_id: int
    stop_order: int
    arrival_time: Optional[str]
    departure_time: Optional[str]
    duration_minutes: Optional[int]
    drive_time_to_next_minutes: Optional[int]
    stop_type: str
    reservation_confirmed: bool
    special_notes: Optional[str]
    is_lunch_stop: bool
    winery: WinerySummary


class ItineraryResponse(BaseModel):
    """Itinerary with its ordered stops"""
    id: int
    booking_id: int
    pickup_location: str
    pickup_time: str
    dropoff_location: str
    estimated_dropoff_time: str
    pickup_drive_time_minutes: Optional[int]
    dropoff_drive_time_minutes: Optional[int]
    driver_notes: Optional[str]
    internal_notes: Optional[str]
    created_at: datetime
    updated_at: datetime
    stops: List[StopResponse] = []

    class Config:
        from_attributes = True
