"""Customer directory: identity resolution and booking statistics"""

from datetime import datetime
from decimal import Decimal
from typing import List, Optional, Tuple

import structlog
from sqlalchemy import select, func, update, or_
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from winetours.config import settings
from winetours.database import contains_pattern
from winetours.errors import ConflictError, NotFoundError, page_bounds, parse_input
from winetours.models.customer import Customer
from winetours.schemas.customer import (
    BookingStatisticsUpdate,
    CustomerCreate,
    CustomerResolve,
    CustomerUpdate,
)

logger = structlog.get_logger()


def normalize_email(email: str) -> str:
    return email.strip().lower()


def _insert_for(db: AsyncSession):
    """Dialect-specific INSERT construct supporting ON CONFLICT"""
    if db.bind.dialect.name == "postgresql":
        return postgresql.insert
    return sqlite.insert


class CustomerDirectory:
    """Owns customer identity, one row per normalized email"""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory

    async def resolve_or_create(
        self,
        email: str,
        name: str,
        phone: Optional[str] = None,
        *,
        email_marketing_consent: Optional[bool] = None,
        sms_marketing_consent: Optional[bool] = None,
    ) -> Customer:
        """Find the customer for an email, creating it if absent.

        An existing row gets its name refreshed and its phone replaced only
        when a new one is supplied. Statistics are never touched.
        """
        data = parse_input(CustomerResolve, {
            "email": email,
            "name": name,
            "phone": phone,
            "email_marketing_consent": email_marketing_consent,
            "sms_marketing_consent": sms_marketing_consent,
        })

        async with self.session_factory() as db:
            customer = await self.upsert(db, data)
            await db.commit()

        return customer

    async def upsert(self, db: AsyncSession, data: CustomerResolve) -> Customer:
        """Resolve-or-create inside the caller's transaction.

        Runs as a single INSERT ... ON CONFLICT (email) DO UPDATE so that
        concurrent first-time resolutions serialize on the unique index.
        """
        now = datetime.utcnow()
        insert = _insert_for(db)

        stmt = insert(Customer).values(
            email=data.email,
            name=data.name,
            phone=data.phone,
            email_marketing_consent=bool(data.email_marketing_consent),
            sms_marketing_consent=bool(data.sms_marketing_consent),
            total_bookings=0,
            total_spent=Decimal("0"),
            created_at=now,
            updated_at=now,
        )

        set_ = {
            "name": stmt.excluded.name,
            "phone": func.coalesce(stmt.excluded.phone, Customer.phone),
            "updated_at": now,
        }
        if data.email_marketing_consent is not None:
            set_["email_marketing_consent"] = data.email_marketing_consent
        if data.sms_marketing_consent is not None:
            set_["sms_marketing_consent"] = data.sms_marketing_consent

        stmt = stmt.on_conflict_do_update(
            index_elements=[Customer.email],
            set_=set_,
        ).returning(Customer)

        result = await db.execute(
            select(Customer).from_statement(stmt).execution_options(populate_existing=True)
        )
        customer = result.scalar_one()

        logger.info("Customer resolved", customer_id=customer.id, email=customer.email)
        return customer

    async def create(self, data) -> Customer:
        """Explicitly create a customer; a duplicate email is a conflict"""
        data = parse_input(CustomerCreate, data)

        async with self.session_factory() as db:
            existing = await db.execute(
                select(Customer.id).where(Customer.email == data.email)
            )
            if existing.scalar_one_or_none() is not None:
                raise ConflictError("Customer", data.email)

            customer = Customer(
                email=data.email,
                name=data.name,
                phone=data.phone,
                vip_status=data.vip_status,
                dietary_restrictions=data.dietary_restrictions,
                accessibility_needs=data.accessibility_needs,
                email_marketing_consent=bool(data.email_marketing_consent),
                sms_marketing_consent=bool(data.sms_marketing_consent),
                total_bookings=0,
                total_spent=Decimal("0"),
            )
            db.add(customer)

            try:
                await db.commit()
            except IntegrityError as e:
                await db.rollback()
                raise ConflictError("Customer", data.email) from e

            await db.refresh(customer)

        logger.info("Customer created", customer_id=customer.id, email=customer.email)
        return customer

    async def update(self, customer_id: int, data) -> Customer:
        """Merge the supplied fields into an existing customer"""
        data = parse_input(CustomerUpdate, data)

        async with self.session_factory() as db:
            customer = await db.get(Customer, customer_id)
            if not customer:
                raise NotFoundError("Customer", customer_id)

            for field, value in data.model_dump(exclude_unset=True).items():
                setattr(customer, field, value)

            await db.commit()
            await db.refresh(customer)

        logger.info("Customer updated", customer_id=customer_id)
        return customer

    async def record_booking_statistics(self, customer_id: int, amount, booking_date) -> None:
        """Increment lifetime bookings and spend in one UPDATE"""
        data = parse_input(BookingStatisticsUpdate, {"amount": amount, "booking_date": booking_date})

        async with self.session_factory() as db:
            result = await db.execute(
                update(Customer)
                .where(Customer.id == customer_id)
                .values(
                    total_bookings=Customer.total_bookings + 1,
                    total_spent=Customer.total_spent + data.amount,
                    last_booking_date=data.booking_date,
                    updated_at=datetime.utcnow(),
                )
                .execution_options(synchronize_session=False)
            )
            if result.rowcount == 0:
                await db.rollback()
                raise NotFoundError("Customer", customer_id)
            await db.commit()

        logger.info(
            "Booking statistics recorded",
            customer_id=customer_id,
            amount=str(data.amount),
        )

    async def get_by_id(self, customer_id: int) -> Customer:
        async with self.session_factory() as db:
            customer = await db.get(Customer, customer_id)

        if not customer:
            raise NotFoundError("Customer", customer_id)
        return customer

    async def get_by_email(self, email: str) -> Optional[Customer]:
        """Case-insensitive lookup; None when no customer has the email"""
        async with self.session_factory() as db:
            result = await db.execute(
                select(Customer).where(Customer.email == normalize_email(email))
            )
            return result.scalar_one_or_none()

    async def list_customers(
        self,
        vip_only: bool = False,
        min_bookings: Optional[int] = None,
        search: Optional[str] = None,
        limit: int = None,
        offset: int = 0,
    ) -> Tuple[List[Customer], int]:
        """Filtered page of customers plus the unbounded match count"""
        limit, offset = page_bounds(limit, offset, settings.default_page_size, settings.max_page_size)

        conditions = []
        if vip_only:
            conditions.append(Customer.vip_status.is_(True))
        if min_bookings is not None:
            conditions.append(Customer.total_bookings >= min_bookings)
        if search:
            pattern = contains_pattern(search)
            conditions.append(or_(
                func.lower(Customer.name).like(pattern, escape="\\"),
                Customer.email.like(pattern, escape="\\"),
            ))

        query = select(Customer).where(*conditions)
        count_query = select(func.count(Customer.id)).where(*conditions)

        async with self.session_factory() as db:
            total = (await db.execute(count_query)).scalar()

            query = query.order_by(Customer.created_at.desc(), Customer.id.desc()).offset(offset).limit(limit)
            result = await db.execute(query)
            customers = result.scalars().all()

        return list(customers), total
