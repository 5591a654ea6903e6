"""Operations digest schemas"""

from datetime import date, datetime
from typing import List
from pydantic import BaseModel


class DigestReservation(BaseModel):
    """Reservation line in the digest"""
    id: int
    reservation_number: str
    customer_name: str
    party_size: int
    preferred_date: date
    status: str
    consultation_deadline: datetime

    class Config:
        from_attributes = True


class Digest(BaseModel):
    """Operations digest assembled from independent read-only queries"""
    generated_at: datetime
    pending_reservations: int
    new_reservations: int
    expiring_consultations: List[DigestReservation]
    upcoming_reservations: List[DigestReservation]
    unread_client_notes: int
    proposals_awaiting_reply: int
    itineraries_without_stops: int
