"""Tests for schedule listing, logs and test sends"""

from datetime import date

import httpx
import pytest

from app.api.sms import get_sms_client
from app.main import app
from app.models.reservation import ProductType
from app.sms.gateway import SensSmsClient
from app.sms.notifier import TelegramNotifier
from app.sms.schedule import create_sms_schedules


@pytest.fixture
async def scheduled_reservation(test_db, make_reservation):
    # KST: d_minus_1 06-09 10:00, d_day_morning 06-10 08:00, before_meal 06-10 17:30, before_close 06-11 10:00
    reservation = await make_reservation(use_date=date(2025, 6, 10), product_type=ProductType.OVERNIGHT)
    await create_sms_schedules(test_db, reservation)
    return reservation


@pytest.mark.asyncio
async def test_requires_login(client):
    response = await client.get("/sms/schedules")
    assert response.status_code == 401


@pytest.mark.asyncio
async def test_list_all_schedules(authenticated_client, scheduled_reservation):
    response = await authenticated_client.get("/sms/schedules")

    assert response.status_code == 200
    items = response.json()["items"]
    assert len(items) == 4
    assert items[0]["schedule_type"] == "before_close"
    assert items[0]["reservation"]["company_name"] == "Acme Corp"


@pytest.mark.asyncio
@pytest.mark.parametrize("view_type,day,expected", [
    ("daily", "2025-06-09", {"d_minus_1"}),
    ("daily", "2025-06-10", {"d_day_morning", "before_meal"}),
    ("monthly", "2025-06", {"d_minus_1", "d_day_morning", "before_meal", "before_close"}),
    ("monthly", "2025-07", set()),
])
async def test_list_schedules_by_kst_period(authenticated_client, scheduled_reservation, view_type, day, expected):
    response = await authenticated_client.get(
        "/sms/schedules", params={"view_type": view_type, "date": day}
    )

    assert response.status_code == 200
    assert {item["schedule_type"] for item in response.json()["items"]} == expected


@pytest.mark.asyncio
async def test_list_schedules_bad_date(authenticated_client):
    response = await authenticated_client.get(
        "/sms/schedules", params={"view_type": "daily", "date": "June 9th"}
    )
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_list_schedules_by_status(authenticated_client, scheduled_reservation):
    response = await authenticated_client.get("/sms/schedules", params={"status": "sent"})
    assert response.json()["items"] == []

    response = await authenticated_client.get("/sms/schedules", params={"status": "pending"})
    assert len(response.json()["items"]) == 4


@pytest.mark.asyncio
async def test_logs_empty(authenticated_client):
    response = await authenticated_client.get("/sms/logs")

    assert response.status_code == 200
    assert response.json() == {"items": []}


@pytest.mark.asyncio
@pytest.mark.parametrize("payload", [
    {"phone": "", "message": "hello"},
    {"phone": "010-1234-5678", "message": "   "},
    {"phone": "02-123-4567", "message": "hello"},
])
async def test_test_send_validation(authenticated_client, payload):
    response = await authenticated_client.post("/sms/test", json=payload)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_test_send_in_development_mode(authenticated_client):
    response = await authenticated_client.post(
        "/sms/test", json={"phone": "010-1234-5678", "message": "hello"}
    )

    assert response.status_code == 200
    assert response.json() == {"success": True, "request_id": "dev-mode", "message_type": "SMS"}


def test_test_send_client_reports_to_operator(test_settings):
    client = get_sms_client(test_settings)
    assert isinstance(client.notifier, TelegramNotifier)


@pytest.mark.asyncio
async def test_test_send_through_gateway_notifies_operator(authenticated_client, gateway_settings, notifier):
    def handler(request):
        return httpx.Response(202, json={"requestId": "req-77", "statusCode": "202"})

    app.dependency_overrides[get_sms_client] = lambda: SensSmsClient(
        gateway_settings,
        notifier=notifier,
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )

    response = await authenticated_client.post(
        "/sms/test", json={"phone": "010-1234-5678", "message": "hello"}
    )

    assert response.status_code == 200
    assert response.json()["request_id"] == "req-77"
    assert len(notifier.messages) == 1
    assert "010-1234-5678" in notifier.messages[0]
