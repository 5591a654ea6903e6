"""Restaurant listing for lunch stops"""

from typing import List, Optional

from sqlalchemy import select, func, or_
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from winetours.database import contains_pattern
from winetours.models.winery import Restaurant


class RestaurantDirectory:
    """Read-only view over the restaurant directory"""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def list_restaurants(
        self,
        partners_only: bool = False,
        accepts_pre_orders: Optional[bool] = None,
        search: Optional[str] = None,
    ) -> List[Restaurant]:
        """Active restaurants ordered by name"""
        query = select(Restaurant).where(Restaurant.is_active.is_(True))

        if partners_only:
            query = query.where(Restaurant.is_partner.is_(True))
        if accepts_pre_orders is not None:
            query = query.where(Restaurant.accepts_pre_orders.is_(accepts_pre_orders))
        if search:
            pattern = contains_pattern(search)
            query = query.where(or_(
                func.lower(Restaurant.name).like(pattern, escape="\\"),
                func.lower(Restaurant.cuisine_type).like(pattern, escape="\\"),
            ))

        async with self.session_factory() as db:
            result = await db.execute(query.order_by(Restaurant.name.asc()))
            return list(result.scalars().all())
