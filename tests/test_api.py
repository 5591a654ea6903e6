"""HTTP API tests"""

import re


class TestReservationEndpoints:
    async def test_create_and_fetch(self, client, reservation_data):
        response = await client.post("/reservations", json=reservation_data)

        assert response.status_code == 201
        body = response.json()
        assert re.fullmatch(r"RES-\d{4}-\d{6}", body["reservation_number"])
        assert body["deposit_paid"] is True
        assert body["status"] == "pending"
        assert body["deposit_amount"] == 50.0

        response = await client.get(f"/reservations/number/{body['reservation_number']}")
        assert response.status_code == 200
        assert response.json()["id"] == body["id"]

    async def test_validation_error_envelope(self, client, reservation_data):
        reservation_data["party_size"] = 51

        response = await client.post("/reservations", json=reservation_data)

        assert response.status_code == 422
        body = response.json()
        assert body["success"] is False
        assert body["error"]["code"] == "VALIDATION_ERROR"
        assert "party_size" in body["error"]["errors"]

    async def test_not_found_envelope(self, client):
        response = await client.get("/reservations/9999")

        assert response.status_code == 404
        assert response.json() == {
            "success": False,
            "error": {
                "code": "NOT_FOUND",
                "message": "Reservation not found: 9999",
                "statusCode": 404,
            },
        }

    async def test_list_with_customer(self, client, reservation_data):
        await client.post("/reservations", json=reservation_data)
        await client.post("/reservations", json=reservation_data)

        response = await client.get("/reservations", params={"include_customer": True, "limit": 1})

        body = response.json()
        assert body["total"] == 2
        assert len(body["reservations"]) == 1
        assert body["reservations"][0]["customer"]["email"] == "a@example.com"

    async def test_update_status(self, client, reservation_data):
        created = (await client.post("/reservations", json=reservation_data)).json()

        response = await client.patch(f"/reservations/{created['id']}/status", json={"status": "contacted"})

        assert response.status_code == 200
        assert response.json()["status"] == "contacted"

        response = await client.get("/reservations", params={"status": "contacted"})
        assert response.json()["total"] == 1


class TestCustomerEndpoints:
    async def test_create_conflict(self, client):
        payload = {"email": "ann@example.com", "name": "Ann"}

        assert (await client.post("/customers", json=payload)).status_code == 201
        response = await client.post("/customers", json=payload)

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "CONFLICT"

    async def test_resolve_and_statistics(self, client):
        first = (await client.post("/customers/resolve", json={"email": "Ann@Example.com", "name": "Ann"})).json()
        second = (await client.post("/customers/resolve", json={"email": "ann@example.com", "name": "Ann B"})).json()
        assert first["id"] == second["id"]

        response = await client.post(
            f"/customers/{first['id']}/statistics",
            json={"amount": "75.00", "booking_date": "2025-06-01"},
        )

        assert response.status_code == 200
        assert response.json()["total_bookings"] == 1
        assert response.json()["total_spent"] == 75.0

    async def test_by_email(self, client):
        await client.post("/customers", json={"email": "ann@example.com", "name": "Ann"})

        assert (await client.get("/customers/by-email", params={"email": "ANN@example.com"})).status_code == 200
        assert (await client.get("/customers/by-email", params={"email": "bob@example.com"})).status_code == 404


class TestItineraryEndpoints:
    async def test_lifecycle(self, client, wineries):
        response = await client.post("/itineraries/101", json={})
        assert response.status_code == 201
        assert response.json()["pickup_location"] == "TBD"

        assert (await client.post("/itineraries/101", json={})).status_code == 409

        response = await client.put("/itineraries/101/stops", json={"stops": [
            {"winery_id": wineries[1].id, "stop_order": 2},
            {"winery_id": wineries[0].id, "stop_order": 1},
        ]})
        assert response.status_code == 200
        assert [s["winery"]["slug"] for s in response.json()["stops"]] == ["leonetti-cellar", "lecole-no-41"]

        response = await client.patch("/itineraries/101", json={"driver_notes": "Call on arrival"})
        assert response.json()["driver_notes"] == "Call on arrival"
        assert response.json()["pickup_time"] == "10:00"

        assert (await client.delete("/itineraries/101")).status_code == 204
        assert (await client.delete("/itineraries/101")).status_code == 204
        assert (await client.get("/itineraries/101")).status_code == 404

    async def test_update_missing(self, client):
        response = await client.patch("/itineraries/404", json={"driver_notes": "x"})

        assert response.status_code == 404


class TestNoteEndpoints:
    async def test_thread_flow(self, client):
        for author_type, name in (("client", "Ann"), ("client", "Ann"), ("staff", "Tour Desk")):
            response = await client.post(
                "/proposals/7/notes",
                json={"author_type": author_type, "author_name": name, "content": "Hello"},
            )
            assert response.status_code == 201

        response = await client.post("/proposals/7/notes/read", json={"author_type": "client"})
        assert response.json() == {"updated": 2}

        response = await client.get("/proposals/7/notes/unread", params={"author_type": "staff"})
        assert response.json() == {"count": 1}

        response = await client.get("/proposals/7/notes/summary")
        assert response.json() == {
            "trip_proposal_id": 7,
            "total": 3,
            "unread_from_client": 0,
            "unread_from_staff": 1,
        }

        notes = (await client.get("/proposals/7/notes")).json()["notes"]
        response = await client.post(f"/notes/{notes[-1]['id']}/read")
        assert response.json()["is_read"] is True

    async def test_mark_missing_note(self, client):
        assert (await client.post("/notes/9999/read")).status_code == 404


class TestRestaurantEndpoints:
    async def test_list_active(self, client, restaurants):
        response = await client.get("/restaurants")

        names = [r["name"] for r in response.json()["items"]]
        assert names == ["Saffron Mediterranean Kitchen", "Walla Walla Bread Company"]

    async def test_partners_only(self, client, restaurants):
        response = await client.get("/restaurants", params={"partners_only": True})

        assert [r["name"] for r in response.json()["items"]] == ["Saffron Mediterranean Kitchen"]

    async def test_pre_order_filter_and_search(self, client, restaurants):
        response = await client.get("/restaurants", params={"accepts_pre_orders": False})
        assert [r["name"] for r in response.json()["items"]] == ["Walla Walla Bread Company"]

        response = await client.get("/restaurants", params={"search": "mediterr"})
        assert [r["name"] for r in response.json()["items"]] == ["Saffron Mediterranean Kitchen"]

    async def test_search_wildcards_match_literally(self, client, restaurants):
        response = await client.get("/restaurants", params={"search": "_"})

        assert response.json()["items"] == []


async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
