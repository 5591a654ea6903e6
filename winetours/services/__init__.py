"""Service layer"""

from dataclasses import dataclass
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from winetours.services.customers import CustomerDirectory
from winetours.services.digest import DigestService
from winetours.services.email import EmailDispatcher
from winetours.services.itineraries import ItineraryScheduler
from winetours.services.notes import NoteThreadTracker
from winetours.services.reservations import ReservationService
from winetours.services.restaurants import RestaurantDirectory


@dataclass
class Services:
    """Service instances sharing one session factory"""
    customers: CustomerDirectory
    reservations: ReservationService
    itineraries: ItineraryScheduler
    notes: NoteThreadTracker
    restaurants: RestaurantDirectory
    digest: DigestService


def build_services(
    session_factory: async_sessionmaker[AsyncSession],
    dispatcher: Optional[EmailDispatcher] = None,
) -> Services:
    customers = CustomerDirectory(session_factory)
    reservations = ReservationService(session_factory, customers)
    return Services(
        customers=customers,
        reservations=reservations,
        itineraries=ItineraryScheduler(session_factory),
        notes=NoteThreadTracker(session_factory),
        restaurants=RestaurantDirectory(session_factory),
        digest=DigestService(session_factory, reservations, dispatcher or EmailDispatcher()),
    )


__all__ = [
    "Services",
    "build_services",
    "CustomerDirectory",
    "ReservationService",
    "ItineraryScheduler",
    "NoteThreadTracker",
    "RestaurantDirectory",
    "DigestService",
    "EmailDispatcher",
]
