"""Itinerary API endpoints, keyed by booking id"""

from fastapi import APIRouter, Depends, Response

from winetours.api.deps import get_services
from winetours.schemas.itinerary import (
    ItineraryCreate,
    ItineraryResponse,
    ItineraryUpdate,
    StopsReplace,
)
from winetours.services import Services

router = APIRouter()


@router.post("/{booking_id}", response_model=ItineraryResponse, status_code=201)
async def create_itinerary(
    booking_id: int,
    itinerary_data: ItineraryCreate,
    services: Services = Depends(get_services),
):
    """Create the itinerary for a booking"""
    return await services.itineraries.create(booking_id, itinerary_data)


@router.get("/{booking_id}", response_model=ItineraryResponse)
async def get_itinerary(
    booking_id: int,
    services: Services = Depends(get_services),
):
    """Get itinerary with ordered stops"""
    return await services.itineraries.get_by_booking_id(booking_id)


@router.patch("/{booking_id}", response_model=ItineraryResponse)
async def update_itinerary(
    booking_id: int,
    itinerary_data: ItineraryUpdate,
    services: Services = Depends(get_services),
):
    """Update only the supplied itinerary fields"""
    return await services.itineraries.update_by_booking_id(booking_id, itinerary_data)


@router.put("/{booking_id}/stops", response_model=ItineraryResponse)
async def replace_itinerary_stops(
    booking_id: int,
    stops_data: StopsReplace,
    services: Services = Depends(get_services),
):
    """Replace all stops"""
    return await services.itineraries.replace_stops(booking_id, stops_data)


@router.delete("/{booking_id}", status_code=204)
async def delete_itinerary(
    booking_id: int,
    services: Services = Depends(get_services),
):
    """Delete itinerary; succeeds whether or not one exists"""
    await services.itineraries.delete_by_booking_id(booking_id)
    return Response(status_code=204)
