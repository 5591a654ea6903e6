"""Reservation lifecycle: atomic creation, listing and status changes"""

import time
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import List, Optional

import structlog
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from winetours.config import settings
from winetours.errors import (
    ConflictError,
    NotFoundError,
    TransactionFailure,
    ValidationError,
    page_bounds,
    parse_input,
)
from winetours.models.customer import Customer
from winetours.models.reservation import Reservation, ReservationStatus, PaymentMethod
from winetours.schemas.customer import CustomerResolve, CustomerSummary
from winetours.schemas.reservation import (
    ReservationBookingLink,
    ReservationCreate,
    ReservationResponse,
    ReservationStatusUpdate,
)
from winetours.services.customers import CustomerDirectory

logger = structlog.get_logger()


@dataclass
class ReservationPage:
    """One page of reservations and the total matching the filters"""
    reservations: List[ReservationResponse] = field(default_factory=list)
    total: int = 0
    limit: int = 0
    offset: int = 0


def generate_reservation_number(now: Optional[datetime] = None) -> str:
    """RES-<year>-<last six digits of a microsecond timestamp>"""
    now = now or datetime.utcnow()
    suffix = str(time.time_ns() // 1000)[-6:]
    return f"RES-{now.year}-{suffix}"


class ReservationService:
    """Creates reservations and moves them through their status lifecycle"""

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        customers: CustomerDirectory,
    ):
        self.session_factory = session_factory
        self.customers = customers

    async def create(self, data) -> Reservation:
        """Create a reservation and resolve its customer in one transaction.

        Input is validated before any storage access. The customer upsert,
        number generation and reservation insert commit together; any
        failure rolls all of them back.
        """
        data = parse_input(ReservationCreate, data)
        now = datetime.utcnow()

        async with self.session_factory() as db:
            try:
                customer = await self.customers.upsert(db, CustomerResolve(
                    email=data.customer_email,
                    name=data.customer_name,
                    phone=data.customer_phone,
                ))

                reservation_number = await self._next_reservation_number(db, now)

                reservation = Reservation(
                    reservation_number=reservation_number,
                    customer_id=customer.id,
                    customer_name=data.customer_name,
                    customer_email=data.customer_email,
                    customer_phone=data.customer_phone,
                    party_size=data.party_size,
                    preferred_date=data.preferred_date,
                    alternate_date=data.alternate_date,
                    event_type=data.event_type,
                    special_requests=data.special_requests,
                    deposit_amount=data.deposit_amount,
                    deposit_paid=data.payment_method == PaymentMethod.CARD,
                    payment_method=data.payment_method.value,
                    status=ReservationStatus.PENDING.value,
                    consultation_deadline=now + timedelta(hours=settings.consultation_window_hours),
                    brand_id=data.brand_id,
                    created_at=now,
                    updated_at=now,
                )
                db.add(reservation)
                await db.commit()

            except (ValidationError, ConflictError):
                await db.rollback()
                raise
            except Exception as e:
                await db.rollback()
                logger.error(
                    "Reservation creation failed",
                    customer_email=data.customer_email,
                    error=str(e),
                )
                raise TransactionFailure("Failed to create reservation") from e

            await db.refresh(reservation)

        logger.info(
            "Reservation created",
            reservation_id=reservation.id,
            reservation_number=reservation.reservation_number,
            customer_id=reservation.customer_id,
        )
        return reservation

    async def _next_reservation_number(self, db: AsyncSession, now: datetime) -> str:
        """Generate a number not yet taken; the unique index is the backstop"""
        for _ in range(settings.reservation_number_attempts):
            candidate = generate_reservation_number(now)
            taken = await db.execute(
                select(Reservation.id).where(Reservation.reservation_number == candidate)
            )
            if taken.scalar_one_or_none() is None:
                return candidate
            logger.warning("Reservation number collision", reservation_number=candidate)

        raise ConflictError("Reservation", candidate, "Could not allocate a unique reservation number")

    async def find_many_with_filters(
        self,
        status: Optional[str] = None,
        customer_id: Optional[int] = None,
        brand_id: Optional[int] = None,
        include_customer: bool = False,
        limit: int = None,
        offset: int = 0,
    ) -> ReservationPage:
        """Filtered page, newest first, with a total independent of the page"""
        limit, offset = page_bounds(limit, offset, settings.default_page_size, settings.max_page_size)

        conditions = []
        if status:
            conditions.append(Reservation.status == _status_value(status))
        if customer_id is not None:
            conditions.append(Reservation.customer_id == customer_id)
        if brand_id is not None:
            conditions.append(Reservation.brand_id == brand_id)

        count_query = select(func.count(Reservation.id)).where(*conditions)

        if include_customer:
            query = select(Reservation, Customer).join(Customer, Customer.id == Reservation.customer_id)
        else:
            query = select(Reservation)
        query = (
            query.where(*conditions)
            .order_by(Reservation.created_at.desc(), Reservation.id.desc())
            .offset(offset)
            .limit(limit)
        )

        async with self.session_factory() as db:
            total = (await db.execute(count_query)).scalar()
            result = await db.execute(query)

            reservations = []
            if include_customer:
                for reservation, customer in result.all():
                    view = ReservationResponse.model_validate(reservation)
                    view.customer = CustomerSummary.model_validate(customer)
                    reservations.append(view)
            else:
                for reservation in result.scalars().all():
                    reservations.append(ReservationResponse.model_validate(reservation))

        return ReservationPage(reservations=reservations, total=total, limit=limit, offset=offset)

    async def get_by_id(self, reservation_id: int) -> Reservation:
        async with self.session_factory() as db:
            reservation = await db.get(Reservation, reservation_id)

        if not reservation:
            raise NotFoundError("Reservation", reservation_id)
        return reservation

    async def get_by_number(self, reservation_number: str) -> Reservation:
        async with self.session_factory() as db:
            result = await db.execute(
                select(Reservation).where(Reservation.reservation_number == reservation_number)
            )
            reservation = result.scalar_one_or_none()

        if not reservation:
            raise NotFoundError("Reservation", reservation_number)
        return reservation

    async def update_status(self, reservation_id: int, status) -> Reservation:
        """Set any lifecycle status; transition legality is left to callers"""
        data = parse_input(ReservationStatusUpdate, {"status": status})

        async with self.session_factory() as db:
            reservation = await db.get(Reservation, reservation_id)
            if not reservation:
                raise NotFoundError("Reservation", reservation_id)

            previous = reservation.status
            reservation.status = data.status.value
            reservation.updated_at = datetime.utcnow()
            await db.commit()
            await db.refresh(reservation)

        logger.info(
            "Reservation status changed",
            reservation_id=reservation_id,
            from_status=previous,
            to_status=reservation.status,
        )
        return reservation

    async def link_booking(self, reservation_id: int, booking_id) -> Reservation:
        """Record the booking a reservation was promoted to"""
        data = parse_input(ReservationBookingLink, {"booking_id": booking_id})

        async with self.session_factory() as db:
            reservation = await db.get(Reservation, reservation_id)
            if not reservation:
                raise NotFoundError("Reservation", reservation_id)
            if reservation.booking_id is not None and reservation.booking_id != data.booking_id:
                raise ConflictError(
                    "Reservation",
                    reservation_id,
                    f"Reservation {reservation_id} is already linked to booking {reservation.booking_id}",
                )

            reservation.booking_id = data.booking_id
            reservation.updated_at = datetime.utcnow()
            await db.commit()
            await db.refresh(reservation)

        logger.info("Reservation linked to booking", reservation_id=reservation_id, booking_id=data.booking_id)
        return reservation

    async def list_expiring_consultations(
        self,
        within_hours: int = None,
        now: Optional[datetime] = None,
    ) -> List[Reservation]:
        """Pending reservations whose consultation deadline falls within the window"""
        now = now or datetime.utcnow()
        within_hours = settings.consultation_window_hours if within_hours is None else within_hours

        async with self.session_factory() as db:
            result = await db.execute(
                select(Reservation)
                .where(
                    Reservation.status == ReservationStatus.PENDING.value,
                    Reservation.consultation_deadline <= now + timedelta(hours=within_hours),
                )
                .order_by(Reservation.consultation_deadline.asc(), Reservation.id.asc())
            )
            return list(result.scalars().all())


def _status_value(status) -> str:
    try:
        return ReservationStatus(status).value
    except ValueError:
        raise ValidationError(
            "Invalid reservation status",
            {"status": [f"must be one of {', '.join(s.value for s in ReservationStatus)}"]},
        )
