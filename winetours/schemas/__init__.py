"""Pydantic schemas for request/response validation"""

from winetours.schemas.customer import (
    CustomerResolve,
    CustomerCreate,
    CustomerUpdate,
    CustomerResponse,
    CustomerSummary,
    CustomerListResponse,
    BookingStatisticsUpdate,
)
from winetours.schemas.reservation import (
    ReservationCreate,
    ReservationStatusUpdate,
    ReservationBookingLink,
    ReservationResponse,
    ReservationListResponse,
)
from winetours.schemas.itinerary import (
    StopInput,
    ItineraryCreate,
    ItineraryUpdate,
    StopsReplace,
    StopResponse,
    ItineraryResponse,
    WinerySummary,
)
from winetours.schemas.proposal_note import (
    NoteCreate,
    MarkReadRequest,
    NoteResponse,
    NoteListResponse,
    UnreadCountResponse,
    MarkReadResponse,
    ThreadSummary,
)
from winetours.schemas.restaurant import RestaurantResponse, RestaurantListResponse
from winetours.schemas.digest import Digest, DigestReservation

__all__ = [
    "CustomerResolve",
    "CustomerCreate",
    "CustomerUpdate",
    "CustomerResponse",
    "CustomerSummary",
    "CustomerListResponse",
    "BookingStatisticsUpdate",
    "ReservationCreate",
    "ReservationStatusUpdate",
    "ReservationBookingLink",
    "ReservationResponse",
    "ReservationListResponse",
    "StopInput",
    "ItineraryCreate",
    "ItineraryUpdate",
    "StopsReplace",
    "StopResponse",
    "ItineraryResponse",
    "WinerySummary",
    "NoteCreate",
    "MarkReadRequest",
    "NoteResponse",
    "NoteListResponse",
    "UnreadCountResponse",
    "MarkReadResponse",
    "ThreadSummary",
    "RestaurantResponse",
    "RestaurantListResponse",
    "Digest",
    "DigestReservation",
]
