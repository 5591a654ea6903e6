"""Reservation management API endpoints"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from winetours.api.deps import get_services
from winetours.models.reservation import ReservationStatus
from winetours.schemas.reservation import (
    ReservationBookingLink,
    ReservationCreate,
    ReservationListResponse,
    ReservationResponse,
    ReservationStatusUpdate,
)
from winetours.services import Services

router = APIRouter()


@router.get("", response_model=ReservationListResponse)
async def list_reservations(
    status: Optional[ReservationStatus] = None,
    customer_id: Optional[int] = None,
    brand_id: Optional[int] = None,
    include_customer: bool = False,
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    services: Services = Depends(get_services),
):
    """List reservations, newest first"""
    page = await services.reservations.find_many_with_filters(
        status=status,
        customer_id=customer_id,
        brand_id=brand_id,
        include_customer=include_customer,
        limit=limit,
        offset=offset,
    )
    return ReservationListResponse(
        reservations=page.reservations,
        total=page.total,
        limit=page.limit,
        offset=page.offset,
    )


@router.post("", response_model=ReservationResponse, status_code=201)
async def create_reservation(
    reservation_data: ReservationCreate,
    services: Services = Depends(get_services),
):
    """Create a deposit-only reservation"""
    return await services.reservations.create(reservation_data)


@router.get("/number/{reservation_number}", response_model=ReservationResponse)
async def get_reservation_by_number(
    reservation_number: str,
    services: Services = Depends(get_services),
):
    """Get reservation by its human-readable number"""
    return await services.reservations.get_by_number(reservation_number)


@router.get("/{reservation_id}", response_model=ReservationResponse)
async def get_reservation(
    reservation_id: int,
    services: Services = Depends(get_services),
):
    """Get reservation details"""
    return await services.reservations.get_by_id(reservation_id)


@router.patch("/{reservation_id}/status", response_model=ReservationResponse)
async def update_reservation_status(
    reservation_id: int,
    status_data: ReservationStatusUpdate,
    services: Services = Depends(get_services),
):
    """Change reservation status"""
    return await services.reservations.update_status(reservation_id, status_data.status)


@router.post("/{reservation_id}/booking", response_model=ReservationResponse)
async def link_reservation_booking(
    reservation_id: int,
    link: ReservationBookingLink,
    services: Services = Depends(get_services),
):
    """Record the booking this reservation was promoted to"""
    return await services.reservations.link_booking(reservation_id, link.booking_id)
