import pytest
from decimal import Decimal
from httpx import AsyncClient
from fastapi import status

from tests.payloads import flight_payload, hotel_payload


@pytest.mark.asyncio
class TestReservationEndpoints:
    """Reservation create, update, status and listing"""

    async def test_create_returns_reservation_envelope(self, client: AsyncClient, employee):
        response = await client.post(
            "/api/v1/reservations", json=flight_payload(), headers={"X-User-Id": str(employee.id)}
        )
        assert response.status_code == status.HTTP_201_CREATED
        body = response.json()
        assert body["status"] is True
        assert body["message"] == "Reservation created successfully"

        reservation = body["reservation"]
        assert reservation["reservable_type"] == "Flight"
        assert reservation["status"] == "Hold"
        assert reservation["user_id"] == employee.id
        assert reservation["reservable"]["status"] == "Pending"
        assert reservation["customer"]["name"] == "Ahmed Hassan"
        assert reservation["supplier"]["name"] == "Sky Consolidator"
        assert Decimal(reservation["net_profit"]) == Decimal("250")

    async def test_create_validation_errors(self, client: AsyncClient):
        payload = flight_payload(details={"sell_price": 1000})
        del payload["flightnumber"]

        response = await client.post("/api/v1/reservations", json=payload)
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        body = response.json()
        assert body["status"] is False
        assert "details.cost" in body["errors"]

        payload["details"]["cost"] = 700
        response = await client.post("/api/v1/reservations", json=payload)
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert "flightnumber" in response.json()["errors"]

        listing = await client.get("/api/v1/reservations")
        assert listing.json()["data"]["count"] == 0

    async def test_update_and_type_guard(self, client: AsyncClient):
        created = await client.post("/api/v1/reservations", json=hotel_payload())
        reservation_id = created.json()["reservation"]["id"]

        response = await client.put(f"/api/v1/reservations/{reservation_id}", json={
            "details": {"cost": 350}, "roomType": "Suite"
        })
        assert response.status_code == status.HTTP_200_OK
        updated = response.json()["reservation"]
        assert Decimal(updated["net_profit"]) == Decimal("150")
        assert updated["reservable"]["room_type"] == "Suite"
        assert updated["reservable"]["name"] == "Nile Ritz"

        response = await client.put(f"/api/v1/reservations/{reservation_id}", json={"type": "Flight"})
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert "type" in response.json()["errors"]

    async def test_status_cancel_and_send(self, client: AsyncClient, employee):
        created = await client.post("/api/v1/reservations", json=flight_payload())
        reservation_id = created.json()["reservation"]["id"]

        response = await client.patch(f"/api/v1/reservations/{reservation_id}/status", json={"status": "Issued"})
        assert response.json()["data"]["status"] == "Issued"

        response = await client.patch(f"/api/v1/reservations/{reservation_id}/status", json={"status": "Lost"})
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert "status" in response.json()["errors"]

        response = await client.post(
            f"/api/v1/reservations/{reservation_id}/send", headers={"X-User-Id": str(employee.id)}
        )
        assert response.json()["data"]["sent"] is True

        sent = await client.get("/api/v1/reservations/sent")
        assert [r["id"] for r in sent.json()["data"]["data"]] == [reservation_id]

        response = await client.post(f"/api/v1/reservations/{reservation_id}/cancel", json={"reason_cancelled": "Visa refused"})
        assert response.json()["data"]["status"] == "Cancelled"
        assert response.json()["data"]["reason_cancelled"] == "Visa refused"

        response = await client.post(f"/api/v1/reservations/{reservation_id}/cancel", json={"reason_cancelled": "Again"})
        assert response.status_code == status.HTTP_409_CONFLICT

        response = await client.post(f"/api/v1/reservations/{reservation_id}/cancel", json={"reason_cancelled": "   "})
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY
        assert response.json()["errors"]["reason_cancelled"] == ["A cancellation reason is required"]

    async def test_list_filters_and_delete(self, client: AsyncClient):
        flight = await client.post("/api/v1/reservations", json=flight_payload())
        await client.post("/api/v1/reservations", json=hotel_payload())

        response = await client.get("/api/v1/reservations", params={"type": "Hotel"})
        page = response.json()["data"]
        assert page["count"] == 1
        assert page["data"][0]["reservable"]["name"] == "Nile Ritz"

        response = await client.get("/api/v1/reservations", params={"status": "Hold"})
        assert response.json()["data"]["count"] == 2

        flight_id = flight.json()["reservation"]["id"]
        response = await client.delete(f"/api/v1/reservations/{flight_id}")
        assert response.json()["message"] == "Reservation deleted successfully"

        response = await client.get(f"/api/v1/reservations/{flight_id}")
        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["message"] == f"Reservation {flight_id} not found"
