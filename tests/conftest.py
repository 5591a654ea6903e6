"""Test configuration and fixtures"""

from decimal import Decimal

import pytest
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine

from winetours.main import app
from winetours.api.deps import get_services
from winetours.database import Base, create_session_factory
from winetours.models.winery import Winery, Restaurant
from winetours.services import build_services


class RecordingDispatcher:
    """Stands in for EmailDispatcher and keeps every message it is given"""

    def __init__(self):
        self.sent = []

    async def send(self, to, subject, html, text):
        self.sent.append({"to": to, "subject": subject, "html": html, "text": text})
        return {"id": f"test-{len(self.sent)}"}


@pytest.fixture
async def session_factory(tmp_path):
    """File-backed SQLite database so concurrent sessions share one store"""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path}/test.db", echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield create_session_factory(engine)

    await engine.dispose()


@pytest.fixture
def dispatcher():
    return RecordingDispatcher()


@pytest.fixture
def services(session_factory, dispatcher):
    return build_services(session_factory, dispatcher=dispatcher)


@pytest.fixture
async def wineries(session_factory):
    """Three wineries in display order"""
    items = [
        Winery(name="Leonetti Cellar", slug="leonetti-cellar", address="1875 Foothills Ln",
               tasting_fee=Decimal("40.00"), average_visit_duration=75),
        Winery(name="L'Ecole No 41", slug="lecole-no-41", address="41 Lowden School Rd",
               city="Lowden", tasting_fee=Decimal("25.00"), average_visit_duration=60),
        Winery(name="Woodward Canyon", slug="woodward-canyon", address="11920 W Hwy 12",
               city="Lowden", tasting_fee=Decimal("30.00"), average_visit_duration=60),
    ]

    async with session_factory() as db:
        for item in items:
            db.add(item)
        await db.commit()

    return items


@pytest.fixture
async def restaurants(session_factory):
    items = [
        Restaurant(name="Saffron Mediterranean Kitchen", cuisine_type="Mediterranean",
                   accepts_pre_orders=True, is_partner=True),
        Restaurant(name="Walla Walla Bread Company", cuisine_type="Bakery",
                   accepts_pre_orders=False, is_partner=False),
        Restaurant(name="Closed Diner", cuisine_type="American", is_active=False),
    ]

    async with session_factory() as db:
        for item in items:
            db.add(item)
        await db.commit()

    return items


@pytest.fixture
def reservation_data():
    return {
        "customer_name": "Ann",
        "customer_email": "a@example.com",
        "party_size": 4,
        "preferred_date": "2025-06-01",
        "deposit_amount": 50,
        "payment_method": "card",
    }


@pytest.fixture
async def client(services):
    """Create test client with overridden services"""
    app.dependency_overrides[get_services] = lambda: services

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client

    app.dependency_overrides.clear()
