"""Database models"""

from winetours.models.customer import Customer
from winetours.models.reservation import Reservation, ReservationStatus, PaymentMethod
from winetours.models.itinerary import Itinerary, ItineraryStop
from winetours.models.proposal_note import ProposalNote, AuthorType
from winetours.models.winery import Winery, Restaurant

__all__ = [
    "Customer",
    "Reservation",
    "ReservationStatus",
    "PaymentMethod",
    "Itinerary",
    "ItineraryStop",
    "ProposalNote",
    "AuthorType",
    "Winery",
    "Restaurant",
]
