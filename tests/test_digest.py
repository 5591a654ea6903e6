"""Operations digest and email dispatch tests"""

from datetime import date, timedelta

import httpx
import pytest

from winetours.config import settings
from winetours.services.email import EmailDeliveryError, EmailDispatcher


@pytest.fixture
async def activity(services, reservation_data):
    """Two pending reservations, one unread client thread and a bare itinerary"""
    reservation_data["preferred_date"] = (date.today() + timedelta(days=3)).isoformat()
    first = await services.reservations.create(reservation_data)
    await services.reservations.create({**reservation_data, "customer_email": "b@example.com", "customer_name": "Bo"})

    far = (date.today() + timedelta(days=60)).isoformat()
    confirmed = await services.reservations.create({**reservation_data, "preferred_date": far})
    await services.reservations.update_status(confirmed.id, "confirmed")

    await services.notes.create_note(7, "client", "Ann", "Any update?")
    await services.notes.create_note(7, "client", "Ann", "Hello?")
    await services.notes.create_note(8, "staff", "Tour Desk", "Draft ready")

    await services.itineraries.create(101)

    return first


class TestBuild:
    async def test_counts(self, services, activity):
        digest = await services.digest.build()

        assert digest.pending_reservations == 2
        assert digest.new_reservations == 3
        assert len(digest.expiring_consultations) == 2
        assert len(digest.upcoming_reservations) == 2
        assert digest.unread_client_notes == 2
        assert digest.proposals_awaiting_reply == 1
        assert digest.itineraries_without_stops == 1

    async def test_empty(self, services):
        digest = await services.digest.build()

        assert digest.pending_reservations == 0
        assert digest.expiring_consultations == []
        assert digest.unread_client_notes == 0


class TestRenderAndSend:
    async def test_render(self, services, activity):
        digest = await services.digest.build()

        subject, html, text = services.digest.render(digest)

        assert "2 pending reservations" in subject
        assert activity.reservation_number in text
        assert "<h2>Upcoming tours</h2>" in html
        assert "Unread client notes: 2" in text

    async def test_send_to_recipients(self, services, dispatcher, activity):
        await services.digest.send(["ops@example.com"])

        assert len(dispatcher.sent) == 1
        assert dispatcher.sent[0]["to"] == ["ops@example.com"]
        assert dispatcher.sent[0]["subject"].startswith("Operations digest")

    async def test_send_skipped_without_recipients(self, services, dispatcher, monkeypatch):
        monkeypatch.setattr(settings, "digest_recipients", "")

        digest = await services.digest.send()

        assert dispatcher.sent == []
        assert digest.pending_reservations == 0


class TestEmailDispatcher:
    async def test_posts_with_bearer_key(self):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["auth"] = request.headers["Authorization"]
            captured["body"] = request.read()
            return httpx.Response(200, json={"id": "email_123"})

        dispatcher = EmailDispatcher(
            api_url="https://email.example.com/emails",
            api_key="re_test",
            from_address="Tours <tours@example.com>",
            transport=httpx.MockTransport(handler),
        )

        result = await dispatcher.send(["ops@example.com"], "Subject", "<p>Hi</p>", "Hi")

        assert result == {"id": "email_123"}
        assert captured["auth"] == "Bearer re_test"
        assert b"ops@example.com" in captured["body"]

    async def test_non_2xx_raises(self):
        dispatcher = EmailDispatcher(
            api_url="https://email.example.com/emails",
            api_key="re_test",
            transport=httpx.MockTransport(lambda request: httpx.Response(422, json={"message": "bad"})),
        )

        with pytest.raises(EmailDeliveryError) as exc_info:
            await dispatcher.send(["ops@example.com"], "Subject", "<p>Hi</p>", "Hi")

        assert exc_info.value.status_code == 422

    async def test_missing_api_key(self):
        dispatcher = EmailDispatcher(api_key="")

        with pytest.raises(EmailDeliveryError):
            await dispatcher.send(["ops@example.com"], "Subject", "<p>Hi</p>", "Hi")
