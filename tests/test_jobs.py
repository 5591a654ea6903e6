"""Background job tests"""

from datetime import date, datetime, timedelta
from decimal import Decimal

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session

from winetours.config import settings
from winetours.database import Base
from winetours.jobs.celery_app import celery_app
from winetours.jobs import tasks
from winetours.models.customer import Customer
from winetours.models.reservation import Reservation


def test_digest_scheduled_daily():
    entry = celery_app.conf.beat_schedule["send-operations-digest"]

    assert entry["task"] == "send_operations_digest"
    assert tasks.send_operations_digest.name == "send_operations_digest"
    assert "send_operations_digest" in celery_app.tasks


@pytest.fixture
def job_database(tmp_path, monkeypatch):
    """SQLite file holding one pending reservation, used as the task's database"""
    path = tmp_path / "jobs.db"
    engine = create_engine(f"sqlite:///{path}")
    Base.metadata.create_all(engine)

    now = datetime.utcnow()
    with Session(engine) as db:
        customer = Customer(email="ann@example.com", name="Ann", total_bookings=0, total_spent=Decimal("0"))
        db.add(customer)
        db.flush()
        db.add(Reservation(
            reservation_number="RES-2025-000001",
            customer_id=customer.id,
            customer_name="Ann",
            customer_email="ann@example.com",
            party_size=2,
            preferred_date=date.today() + timedelta(days=2),
            deposit_amount=Decimal("50.00"),
            deposit_paid=True,
            payment_method="card",
            status="pending",
            consultation_deadline=now + timedelta(hours=12),
            created_at=now,
            updated_at=now,
        ))
        db.commit()
    engine.dispose()

    monkeypatch.setattr(settings, "database_url", f"sqlite+aiosqlite:///{path}")
    monkeypatch.setattr(settings, "digest_recipients", "")
    return path


def test_send_operations_digest_runs_against_database(job_database):
    """Test that the task builds its own services and summarizes the database"""
    result = tasks.send_operations_digest.run()

    assert result == {
        "pending_reservations": 1,
        "expiring_consultations": 1,
        "unread_client_notes": 0,
    }
