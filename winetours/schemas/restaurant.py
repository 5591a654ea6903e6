"""Restaurant schemas"""

from typing import Optional, List
from pydantic import BaseModel


class RestaurantResponse(BaseModel):
    """Restaurant listing entry"""
    id: int
    name: str
    cuisine_type: Optional[str]
    address: Optional[str]
    phone: Optional[str]
    website: Optional[str]
    menu_url: Optional[str]
    accepts_pre_orders: Optional[bool]
    minimum_order_value: Optional[float]
    is_partner: Optional[bool]

    class Config:
        from_attributes = True


class RestaurantListResponse(BaseModel):
    """Restaurant listing"""
    items: List[RestaurantResponse]
