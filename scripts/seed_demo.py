#!/usr/bin/env python3
"""
Seed script to create demo wineries, restaurants and a sample booking flow
"""

import asyncio
from datetime import date, timedelta
from decimal import Decimal


async def seed_demo_data():
    """Seed demo data for development"""
    from sqlalchemy import select

    from winetours.database import SessionLocal, engine, Base
    from winetours.models import Winery, Restaurant
    from winetours.services import build_services

    # Create tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async with SessionLocal() as db:
        # Check if demo wineries already exist
        result = await db.execute(
            select(Winery).where(Winery.slug == "leonetti-cellar")
        )
        existing = result.scalar_one_or_none()

        if existing:
            print("Demo data already exists. Skipping...")
            return

        print("Creating demo wineries...")

        wineries = [
            Winery(
                name="Leonetti Cellar",
                slug="leonetti-cellar",
                address="1875 Foothills Ln",
                tasting_fee=Decimal("40.00"),
                average_visit_duration=75,
                reservation_required=True,
            ),
            Winery(
                name="L'Ecole No 41",
                slug="lecole-no-41",
                address="41 Lowden School Rd",
                city="Lowden",
                tasting_fee=Decimal("25.00"),
                average_visit_duration=60,
            ),
            Winery(
                name="Woodward Canyon",
                slug="woodward-canyon",
                address="11920 W Hwy 12",
                city="Lowden",
                tasting_fee=Decimal("30.00"),
                average_visit_duration=60,
            ),
        ]
        for winery in wineries:
            db.add(winery)

        print("Creating demo restaurants...")

        restaurants = [
            Restaurant(
                name="Saffron Mediterranean Kitchen",
                cuisine_type="Mediterranean",
                address="125 W Alder St",
                accepts_pre_orders=True,
                minimum_order_value=Decimal("150.00"),
                is_partner=True,
                commission_rate=Decimal("10.00"),
            ),
            Restaurant(
                name="Walla Walla Bread Company",
                cuisine_type="Bakery & Deli",
                address="201 E Main St",
                accepts_pre_orders=True,
                is_partner=False,
            ),
        ]
        for restaurant in restaurants:
            db.add(restaurant)

        await db.commit()
        winery_ids = [w.id for w in wineries]

    services = build_services(SessionLocal)

    print("Creating demo reservation...")
    reservation = await services.reservations.create({
        "customer_name": "Ann Example",
        "customer_email": "ann@example.com",
        "customer_phone": "509-555-0100",
        "party_size": 6,
        "preferred_date": (date.today() + timedelta(days=14)).isoformat(),
        "event_type": "birthday",
        "deposit_amount": "250.00",
        "payment_method": "card",
    })

    print("Creating demo itinerary...")
    itinerary = await services.itineraries.create(1001, {
        "pickup_location": "Marcus Whitman Hotel",
        "pickup_time": "10:30",
        "pickup_drive_time_minutes": 15,
        "dropoff_location": "Marcus Whitman Hotel",
        "estimated_dropoff_time": "16:30",
        "stops": [
            {"winery_id": winery_ids[0], "stop_order": 1, "duration_minutes": 75, "drive_time_to_next_minutes": 20},
            {"winery_id": winery_ids[1], "stop_order": 2, "drive_time_to_next_minutes": 5},
            {"winery_id": winery_ids[2], "stop_order": 3},
        ],
    })
    await services.reservations.link_booking(reservation.id, itinerary.booking_id)

    await services.notes.create_note(
        500, "client", "Ann Example", "Could we add a lunch stop between the second and third winery?",
    )
    await services.notes.create_note(
        500, "staff", "Tour Desk", "Absolutely, we'll add Saffron for lunch.", context_type="day", context_id=1,
    )

    print(f"""
Demo data created successfully!

Wineries: {len(wineries)} created
Restaurants: {len(restaurants)} created

Reservation: {reservation.reservation_number}
  Customer: {reservation.customer_name} <{reservation.customer_email}>

Itinerary for booking {itinerary.booking_id}:
""" + "\n".join(
        f"  {s.stop_order}. {s.winery.name} {s.arrival_time}-{s.departure_time}" for s in itinerary.stops
    ))


if __name__ == "__main__":
    asyncio.run(seed_demo_data())
