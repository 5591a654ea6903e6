"""Customer directory API endpoints"""

from typing import Optional

from fastapi import APIRouter, Depends, Query

from winetours.api.deps import get_services
from winetours.errors import NotFoundError
from winetours.schemas.customer import (
    BookingStatisticsUpdate,
    CustomerCreate,
    CustomerListResponse,
    CustomerResolve,
    CustomerResponse,
    CustomerUpdate,
)
from winetours.services import Services

router = APIRouter()


@router.get("", response_model=CustomerListResponse)
async def list_customers(
    vip_only: bool = False,
    min_bookings: Optional[int] = Query(None, ge=0),
    search: Optional[str] = None,
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    services: Services = Depends(get_services),
):
    """List customers with filters"""
    customers, total = await services.customers.list_customers(
        vip_only=vip_only,
        min_bookings=min_bookings,
        search=search,
        limit=limit,
        offset=offset,
    )
    return CustomerListResponse(items=customers, total=total, limit=limit, offset=offset)


@router.post("", response_model=CustomerResponse, status_code=201)
async def create_customer(
    customer_data: CustomerCreate,
    services: Services = Depends(get_services),
):
    """Create a customer; 409 if the email is taken"""
    return await services.customers.create(customer_data)


@router.post("/resolve", response_model=CustomerResponse)
async def resolve_customer(
    customer_data: CustomerResolve,
    services: Services = Depends(get_services),
):
    """Find or create a customer by email"""
    return await services.customers.resolve_or_create(
        customer_data.email,
        customer_data.name,
        customer_data.phone,
        email_marketing_consent=customer_data.email_marketing_consent,
        sms_marketing_consent=customer_data.sms_marketing_consent,
    )


@router.get("/by-email", response_model=CustomerResponse)
async def get_customer_by_email(
    email: str,
    services: Services = Depends(get_services),
):
    """Look up a customer by email"""
    customer = await services.customers.get_by_email(email)
    if not customer:
        raise NotFoundError("Customer", email)
    return customer


@router.get("/{customer_id}", response_model=CustomerResponse)
async def get_customer(
    customer_id: int,
    services: Services = Depends(get_services),
):
    """Get customer details"""
    return await services.customers.get_by_id(customer_id)


@router.patch("/{customer_id}", response_model=CustomerResponse)
async def update_customer(
    customer_id: int,
    customer_data: CustomerUpdate,
    services: Services = Depends(get_services),
):
    """Update customer"""
    return await services.customers.update(customer_id, customer_data)


@router.post("/{customer_id}/statistics", response_model=CustomerResponse)
async def record_booking_statistics(
    customer_id: int,
    stats: BookingStatisticsUpdate,
    services: Services = Depends(get_services),
):
    """Record a completed booking against the customer's lifetime totals"""
    await services.customers.record_booking_statistics(customer_id, stats.amount, stats.booking_date)
    return await services.customers.get_by_id(customer_id)
