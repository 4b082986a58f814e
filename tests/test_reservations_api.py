"""Tests for reservation management"""

from datetime import date, datetime

import pytest
from sqlalchemy import select

from app.models.reservation import PaymentStatus
from app.models.sms import ScheduleType, SmsSchedule

RESERVATION = {
    "use_date": "2025-06-10",
    "product_type": "overnight",
    "people_count": 30,
    "company_name": "Acme Corp",
    "manager_name": "Kim",
    "phone": "010-1234-5678",
    "deposit_amount": 100000,
    "payment_status": "completed",
}


@pytest.mark.asyncio
async def test_requires_login(client):
    response = await client.get("/reservations")
    assert response.status_code == 401

    response = await client.post("/reservations", json=RESERVATION)
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_create_reservation_schedules_messages(authenticated_client, test_db):
    response = await authenticated_client.post("/reservations", json=RESERVATION)

    assert response.status_code == 201
    data = response.json()
    assert data["payment_status"] == "completed"

    result = await test_db.execute(
        select(SmsSchedule.schedule_type, SmsSchedule.scheduled_at)
        .where(SmsSchedule.reservation_id == data["id"])
    )
    scheduled = dict(result.all())
    assert scheduled == {
        ScheduleType.D_MINUS_1: datetime(2025, 6, 9, 1, 0),
        ScheduleType.D_DAY_MORNING: datetime(2025, 6, 9, 23, 0),
        ScheduleType.BEFORE_MEAL: datetime(2025, 6, 10, 8, 30),
        ScheduleType.BEFORE_CLOSE: datetime(2025, 6, 11, 1, 0),
    }


@pytest.mark.asyncio
async def test_create_rejects_unknown_product(authenticated_client):
    response = await authenticated_client.post(
        "/reservations", json={**RESERVATION, "product_type": "camping"}
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_list_reservations_filters(authenticated_client, make_reservation):
    await make_reservation(use_date=date(2025, 6, 10))
    await make_reservation(use_date=date(2025, 7, 1), payment_status=PaymentStatus.PARTIAL)
    await make_reservation(use_date=date(2025, 8, 1), payment_status=PaymentStatus.PENDING)

    response = await authenticated_client.get("/reservations")
    data = response.json()
    assert data["total"] == 3
    assert [item["use_date"] for item in data["items"]] == ["2025-08-01", "2025-07-01", "2025-06-10"]

    response = await authenticated_client.get("/reservations", params={"status": "partial"})
    assert response.json()["total"] == 1

    response = await authenticated_client.get(
        "/reservations", params={"from_date": "2025-06-15", "to_date": "2025-07-31"}
    )
    items = response.json()["items"]
    assert [item["use_date"] for item in items] == ["2025-07-01"]


@pytest.mark.asyncio
async def test_update_payment_status(authenticated_client, make_reservation):
    reservation = await make_reservation(payment_status=PaymentStatus.PENDING)

    response = await authenticated_client.patch(
        f"/reservations/{reservation.id}", json={"payment_status": "completed"}
    )

    assert response.status_code == 200
    data = response.json()
    assert data["payment_status"] == "completed"
    assert data["company_name"] == "Acme Corp"


@pytest.mark.asyncio
async def test_get_missing_reservation(authenticated_client):
    response = await authenticated_client.get("/reservations/9999")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_delete_keeps_schedules(authenticated_client, test_db):
    created = (await authenticated_client.post("/reservations", json=RESERVATION)).json()

    response = await authenticated_client.delete(f"/reservations/{created['id']}")

    assert response.status_code == 200
    assert response.json() == {"success": True}

    result = await test_db.execute(select(SmsSchedule.reservation_id))
    reservation_ids = result.scalars().all()
    assert len(reservation_ids) == 4
    assert all(reservation_id is None for reservation_id in reservation_ids)

    response = await authenticated_client.get(f"/reservations/{created['id']}")
    assert response.status_code == 404
