"""Reservation lifecycle tests"""

import re
from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest

from winetours.errors import NotFoundError, TransactionFailure, ValidationError, ConflictError
from winetours.models.reservation import Reservation
from winetours.services import reservations as reservations_module
from winetours.services.reservations import generate_reservation_number


class TestCreateReservation:
    """Atomic customer resolution plus reservation insert"""

    async def test_end_to_end_new_customer(self, services, reservation_data):
        reservation = await services.reservations.create(reservation_data)

        assert re.fullmatch(r"RES-\d{4}-\d{6}", reservation.reservation_number)
        assert reservation.reservation_number.startswith(f"RES-{datetime.utcnow().year}-")
        assert reservation.deposit_paid is True
        assert reservation.status == "pending"
        assert reservation.preferred_date == date(2025, 6, 1)

        customer = await services.customers.get_by_email("a@example.com")
        assert customer is not None
        assert reservation.customer_id == customer.id
        assert customer.name == "Ann"
        assert customer.total_bookings == 0

    async def test_check_payment_is_unpaid(self, services, reservation_data):
        reservation_data["payment_method"] = "check"

        reservation = await services.reservations.create(reservation_data)

        assert reservation.deposit_paid is False
        assert reservation.payment_method == "check"

    async def test_snapshot_and_deadline(self, services, reservation_data):
        reservation_data["customer_phone"] = "509-555-0100"
        before = datetime.utcnow()

        reservation = await services.reservations.create(reservation_data)

        assert reservation.customer_name == "Ann"
        assert reservation.customer_email == "a@example.com"
        assert reservation.customer_phone == "509-555-0100"
        assert reservation.deposit_amount == Decimal("50")
        deadline = reservation.consultation_deadline - before
        assert timedelta(hours=23, minutes=59) < deadline < timedelta(hours=24, minutes=1)

    async def test_existing_customer_is_reused(self, services, reservation_data):
        existing = await services.customers.resolve_or_create("a@example.com", "Ann Old", "509-555-0100")
        reservation_data["customer_email"] = "A@EXAMPLE.COM"

        reservation = await services.reservations.create(reservation_data)

        assert reservation.customer_id == existing.id
        customer = await services.customers.get_by_id(existing.id)
        assert customer.name == "Ann"
        assert customer.phone == "509-555-0100"

    async def test_reservation_numbers_are_unique(self, services, reservation_data):
        numbers = set()
        for _ in range(5):
            reservation = await services.reservations.create(reservation_data)
            numbers.add(reservation.reservation_number)

        assert len(numbers) == 5

    @pytest.mark.parametrize("field,value", [
        ("party_size", 0),
        ("party_size", 51),
        ("preferred_date", "06/01/2025"),
        ("preferred_date", "2025-13-01"),
        ("deposit_amount", 0),
        ("deposit_amount", -10),
        ("payment_method", "cash"),
        ("customer_email", "not-an-email"),
        ("customer_name", "  "),
    ])
    async def test_invalid_input_rejected_before_storage(self, services, reservation_data, field, value):
        reservation_data[field] = value

        with pytest.raises(ValidationError) as exc_info:
            await services.reservations.create(reservation_data)

        assert field in exc_info.value.errors
        assert await services.customers.get_by_email("a@example.com") is None

    async def test_failure_after_customer_resolution_rolls_back(self, services, reservation_data, monkeypatch):
        def fail(now=None):
            raise RuntimeError("number generator down")

        monkeypatch.setattr(reservations_module, "generate_reservation_number", fail)

        with pytest.raises(TransactionFailure) as exc_info:
            await services.reservations.create(reservation_data)

        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert await services.customers.get_by_email("a@example.com") is None
        page = await services.reservations.find_many_with_filters()
        assert page.total == 0

    async def test_failure_leaves_existing_customer_untouched(self, services, reservation_data, monkeypatch):
        existing = await services.customers.resolve_or_create("a@example.com", "Ann Old", "509-555-0100")
        reservation_data["customer_name"] = "Ann New"
        reservation_data["customer_phone"] = "509-555-0199"

        def fail(now=None):
            raise RuntimeError("number generator down")

        monkeypatch.setattr(reservations_module, "generate_reservation_number", fail)

        with pytest.raises(TransactionFailure):
            await services.reservations.create(reservation_data)

        customer = await services.customers.get_by_id(existing.id)
        assert customer.name == "Ann Old"
        assert customer.phone == "509-555-0100"

    async def test_exhausted_number_attempts_conflict(self, services, reservation_data, monkeypatch):
        first = await services.reservations.create(reservation_data)
        monkeypatch.setattr(
            reservations_module,
            "generate_reservation_number",
            lambda now=None: first.reservation_number,
        )

        with pytest.raises(ConflictError):
            await services.reservations.create(reservation_data)

        page = await services.reservations.find_many_with_filters()
        assert page.total == 1


def test_generate_reservation_number_format():
    number = generate_reservation_number(datetime(2025, 3, 4))

    assert re.fullmatch(r"RES-2025-\d{6}", number)


class TestFindManyWithFilters:
    @pytest.fixture
    async def bulk(self, services, session_factory):
        """120 reservations for one customer, plus 5 cancelled for another"""
        ann = await services.customers.resolve_or_create("ann@example.com", "Ann")
        bob = await services.customers.resolve_or_create("bob@example.com", "Bob")
        base = datetime(2025, 1, 1)

        async with session_factory() as db:
            for i in range(125):
                customer = ann if i < 120 else bob
                db.add(Reservation(
                    reservation_number=f"RES-2025-{i:06d}",
                    customer_id=customer.id,
                    customer_name=customer.name,
                    customer_email=customer.email,
                    party_size=2,
                    preferred_date=date(2025, 6, 1),
                    deposit_amount=Decimal("50.00"),
                    deposit_paid=True,
                    payment_method="card",
                    status="pending" if i < 120 else "cancelled",
                    consultation_deadline=base + timedelta(hours=24),
                    brand_id=1 if i % 2 == 0 else 2,
                    created_at=base + timedelta(minutes=i),
                    updated_at=base + timedelta(minutes=i),
                ))
            await db.commit()

        return ann, bob

    async def test_total_is_independent_of_page(self, services, bulk):
        page = await services.reservations.find_many_with_filters(status="pending", limit=50, offset=100)

        assert len(page.reservations) == 20
        assert page.total == 120

    async def test_newest_first(self, services, bulk):
        page = await services.reservations.find_many_with_filters(limit=3)

        assert [r.reservation_number for r in page.reservations] == [
            "RES-2025-000124",
            "RES-2025-000123",
            "RES-2025-000122",
        ]

    async def test_filters_combine(self, services, bulk):
        ann, bob = bulk

        page = await services.reservations.find_many_with_filters(customer_id=ann.id, brand_id=1)
        assert page.total == 60

        page = await services.reservations.find_many_with_filters(status="cancelled", customer_id=ann.id)
        assert page.total == 0

        page = await services.reservations.find_many_with_filters(status="cancelled", customer_id=bob.id)
        assert page.total == 5

    async def test_include_customer(self, services, bulk):
        ann, _ = bulk

        page = await services.reservations.find_many_with_filters(customer_id=ann.id, include_customer=True, limit=1)

        assert page.reservations[0].customer.id == ann.id
        assert page.reservations[0].customer.email == "ann@example.com"

    async def test_customer_omitted_by_default(self, services, bulk):
        page = await services.reservations.find_many_with_filters(limit=1)

        assert page.reservations[0].customer is None

    async def test_invalid_status_filter(self, services):
        with pytest.raises(ValidationError):
            await services.reservations.find_many_with_filters(status="archived")

    @pytest.mark.parametrize("limit,offset,field", [(0, 0, "limit"), (-1, 0, "limit"), (10, -1, "offset")])
    async def test_out_of_range_page_rejected(self, services, limit, offset, field):
        with pytest.raises(ValidationError) as exc_info:
            await services.reservations.find_many_with_filters(limit=limit, offset=offset)

        assert field in exc_info.value.errors

    async def test_limit_capped_at_maximum(self, services, bulk):
        page = await services.reservations.find_many_with_filters(limit=500)

        assert len(page.reservations) == 125
        assert page.limit == 200


class TestStatusAndLinks:
    async def test_update_status(self, services, reservation_data):
        reservation = await services.reservations.create(reservation_data)

        updated = await services.reservations.update_status(reservation.id, "confirmed")

        assert updated.status == "confirmed"
        assert updated.updated_at >= reservation.updated_at

    async def test_any_enum_value_accepted(self, services, reservation_data):
        reservation = await services.reservations.create(reservation_data)
        await services.reservations.update_status(reservation.id, "completed")

        updated = await services.reservations.update_status(reservation.id, "pending")

        assert updated.status == "pending"

    async def test_invalid_status(self, services, reservation_data):
        reservation = await services.reservations.create(reservation_data)

        with pytest.raises(ValidationError):
            await services.reservations.update_status(reservation.id, "archived")

    async def test_update_status_missing(self, services):
        with pytest.raises(NotFoundError):
            await services.reservations.update_status(9999, "confirmed")

    async def test_get_by_id_and_number(self, services, reservation_data):
        reservation = await services.reservations.create(reservation_data)

        by_id = await services.reservations.get_by_id(reservation.id)
        by_number = await services.reservations.get_by_number(reservation.reservation_number)

        assert by_id.id == by_number.id == reservation.id

    async def test_get_missing(self, services):
        with pytest.raises(NotFoundError):
            await services.reservations.get_by_id(9999)
        with pytest.raises(NotFoundError):
            await services.reservations.get_by_number("RES-2025-000000")

    async def test_link_booking(self, services, reservation_data):
        reservation = await services.reservations.create(reservation_data)

        linked = await services.reservations.link_booking(reservation.id, 42)
        assert linked.booking_id == 42

        # Re-linking to the same booking is a no-op
        assert (await services.reservations.link_booking(reservation.id, 42)).booking_id == 42

        with pytest.raises(ConflictError):
            await services.reservations.link_booking(reservation.id, 43)

    async def test_list_expiring_consultations(self, services, reservation_data):
        pending = await services.reservations.create(reservation_data)
        contacted = await services.reservations.create(reservation_data)
        await services.reservations.update_status(contacted.id, "contacted")

        soon = await services.reservations.list_expiring_consultations(within_hours=25)
        later = await services.reservations.list_expiring_consultations(within_hours=1)

        assert [r.id for r in soon] == [pending.id]
        assert later == []
