"""Restaurant listing API endpoints"""

from typing import Optional

from fastapi import APIRouter, Depends

from winetours.api.deps import get_services
from winetours.schemas.restaurant import RestaurantListResponse
from winetours.services import Services

router = APIRouter()


@router.get("", response_model=RestaurantListResponse)
async def list_restaurants(
    partners_only: bool = False,
    accepts_pre_orders: Optional[bool] = None,
    search: Optional[str] = None,
    services: Services = Depends(get_services),
):
    """List active restaurants"""
    restaurants = await services.restaurants.list_restaurants(
        partners_only=partners_only,
        accepts_pre_orders=accepts_pre_orders,
        search=search,
    )
    return RestaurantListResponse(items=restaurants)
