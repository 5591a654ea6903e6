"""Itinerary scheduler: per-booking driver schedules and their ordered stops"""

from datetime import datetime
from typing import List, Optional

import structlog
from sqlalchemy import select, delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from winetours.config import settings
from winetours.errors import ConflictError, NotFoundError, ValidationError, parse_input
from winetours.models.itinerary import Itinerary, ItineraryStop
from winetours.models.winery import Winery
from winetours.schemas.itinerary import (
    ItineraryCreate,
    ItineraryResponse,
    ItineraryUpdate,
    StopInput,
    StopResponse,
    StopsReplace,
    WinerySummary,
)

logger = structlog.get_logger()

STOP_FIELDS = (
    "id",
    "winery_id",
    "stop_order",
    "arrival_time",
    "departure_time",
    "duration_minutes",
    "drive_time_to_next_minutes",
    "stop_type",
    "reservation_confirmed",
    "special_notes",
    "is_lunch_stop",
)


def add_minutes(hhmm: str, minutes: int) -> str:
    """Add minutes to an "HH:MM" clock time, wrapping at midnight"""
    hours, mins = (int(part) for part in hhmm.split(":"))
    total = (hours * 60 + mins + minutes) % (24 * 60)
    return f"{total // 60:02d}:{total % 60:02d}"


def check_stop_order(stops: List[StopInput]) -> None:
    """stop_order values must be unique and run 1..n"""
    orders = sorted(stop.stop_order for stop in stops)
    if orders != list(range(1, len(stops) + 1)):
        raise ValidationError(
            "Invalid stop order",
            {"stops": ["stop_order values must be unique and contiguous starting at 1"]},
        )


def chain_stop_times(
    stops: List[StopInput],
    pickup_time: str,
    pickup_drive_minutes: Optional[int] = None,
) -> List[dict]:
    """Fill in missing arrival and departure times along the stop chain.

    The first stop is reached pickup_drive_minutes after pickup; each later
    stop is reached the previous stop's drive time after it departs.
    Supplied times are kept as given and the chain continues from them.
    """
    ordered = sorted(stops, key=lambda s: s.stop_order)
    rows = []
    arrival = add_minutes(pickup_time, pickup_drive_minutes or 0)

    for index, stop in enumerate(ordered):
        row = stop.model_dump()
        is_last = index == len(ordered) - 1

        duration = stop.duration_minutes
        if duration is None:
            duration = settings.itinerary_default_stop_minutes

        row["arrival_time"] = stop.arrival_time or arrival
        row["departure_time"] = stop.departure_time or add_minutes(row["arrival_time"], duration)
        row["duration_minutes"] = duration
        if is_last:
            row["drive_time_to_next_minutes"] = None

        rows.append(row)
        arrival = add_minutes(row["departure_time"], stop.drive_time_to_next_minutes or 0)

    return rows


class ItineraryScheduler:
    """Owns itineraries, at most one per booking"""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def create(self, booking_id: int, data=None) -> ItineraryResponse:
        """Create the itinerary for a booking, with defaults for unset fields"""
        data = parse_input(ItineraryCreate, data)
        if data.stops:
            check_stop_order(data.stops)

        async with self.session_factory() as db:
            existing = await self._find(db, booking_id)
            if existing:
                raise ConflictError("Itinerary", booking_id, f"Itinerary already exists for booking {booking_id}")

            now = datetime.utcnow()
            itinerary = Itinerary(
                booking_id=booking_id,
                pickup_location=data.pickup_location or settings.itinerary_default_location,
                pickup_time=data.pickup_time or settings.itinerary_default_pickup_time,
                dropoff_location=data.dropoff_location or settings.itinerary_default_location,
                estimated_dropoff_time=data.estimated_dropoff_time or settings.itinerary_default_dropoff_time,
                pickup_drive_time_minutes=data.pickup_drive_time_minutes,
                dropoff_drive_time_minutes=data.dropoff_drive_time_minutes,
                driver_notes=data.driver_notes,
                internal_notes=data.internal_notes,
                created_at=now,
                updated_at=now,
            )
            db.add(itinerary)

            try:
                await db.flush()
                if data.stops:
                    self._add_stops(db, itinerary, data.stops)
                await db.commit()
            except IntegrityError as e:
                # Lost a race with a concurrent create for the same booking
                await db.rollback()
                raise ConflictError("Itinerary", booking_id, f"Itinerary already exists for booking {booking_id}") from e

            view = await self._view(db, itinerary)

        logger.info("Itinerary created", itinerary_id=view.id, booking_id=booking_id, stops=len(view.stops))
        return view

    async def get_by_booking_id(self, booking_id: int) -> ItineraryResponse:
        """Itinerary with its stops in order, each enriched with winery details"""
        async with self.session_factory() as db:
            itinerary = await self._get(db, booking_id)
            return await self._view(db, itinerary)

    async def update_by_booking_id(self, booking_id: int, data) -> ItineraryResponse:
        """Merge the supplied fields; omitted fields keep their stored value"""
        data = parse_input(ItineraryUpdate, data)
        changes = data.model_dump(exclude_unset=True)

        async with self.session_factory() as db:
            itinerary = await self._get(db, booking_id)

            for field, value in changes.items():
                setattr(itinerary, field, value)
            itinerary.updated_at = datetime.utcnow()

            await db.commit()
            view = await self._view(db, itinerary)

        logger.info("Itinerary updated", booking_id=booking_id, fields=sorted(changes))
        return view

    async def delete_by_booking_id(self, booking_id: int) -> bool:
        """Delete an itinerary and its stops; absent itineraries are not an error"""
        async with self.session_factory() as db:
            itinerary = await self._find(db, booking_id)
            if not itinerary:
                return False

            await db.execute(delete(ItineraryStop).where(ItineraryStop.itinerary_id == itinerary.id))
            await db.execute(delete(Itinerary).where(Itinerary.id == itinerary.id))
            await db.commit()

        logger.info("Itinerary deleted", booking_id=booking_id)
        return True

    async def replace_stops(self, booking_id: int, stops) -> ItineraryResponse:
        """Replace the whole stop list in one transaction"""
        if isinstance(stops, StopsReplace):
            data = stops
        else:
            data = parse_input(StopsReplace, {"stops": stops})
        check_stop_order(data.stops)

        async with self.session_factory() as db:
            itinerary = await self._get(db, booking_id)

            await db.execute(delete(ItineraryStop).where(ItineraryStop.itinerary_id == itinerary.id))
            self._add_stops(db, itinerary, data.stops)
            itinerary.updated_at = datetime.utcnow()

            await db.commit()
            view = await self._view(db, itinerary)

        logger.info("Itinerary stops replaced", booking_id=booking_id, stops=len(data.stops))
        return view

    def _add_stops(self, db: AsyncSession, itinerary: Itinerary, stops: List[StopInput]) -> None:
        rows = chain_stop_times(stops, itinerary.pickup_time, itinerary.pickup_drive_time_minutes)
        now = datetime.utcnow()
        for row in rows:
            db.add(ItineraryStop(itinerary_id=itinerary.id, created_at=now, **row))

    async def _find(self, db: AsyncSession, booking_id: int) -> Optional[Itinerary]:
        result = await db.execute(select(Itinerary).where(Itinerary.booking_id == booking_id))
        return result.scalar_one_or_none()

    async def _get(self, db: AsyncSession, booking_id: int) -> Itinerary:
        itinerary = await self._find(db, booking_id)
        if not itinerary:
            raise NotFoundError("Itinerary", booking_id)
        return itinerary

    async def _view(self, db: AsyncSession, itinerary: Itinerary) -> ItineraryResponse:
        # Inner join: stops pointing at a missing winery are left out
        result = await db.execute(
            select(ItineraryStop, Winery)
            .join(Winery, Winery.id == ItineraryStop.winery_id)
            .where(ItineraryStop.itinerary_id == itinerary.id)
            .order_by(ItineraryStop.stop_order.asc())
        )

        stops = []
        for stop, winery in result.all():
            stops.append(StopResponse(
                winery=WinerySummary.model_validate(winery),
                **{name: getattr(stop, name) for name in STOP_FIELDS},
            ))

        view = ItineraryResponse.model_validate(itinerary)
        view.stops = stops
        return view
