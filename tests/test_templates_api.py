"""Tests for message template management"""

import pytest

TEMPLATE = {
    "product_type": "daytrip",
    "schedule_type": "before_meal",
    "message_content": "{company_name}, lunch is served at 12:00",
}


@pytest.mark.asyncio
async def test_create_and_list_templates(authenticated_client):
    response = await authenticated_client.post("/templates", json=TEMPLATE)
    assert response.status_code == 201
    template_id = response.json()["id"]

    response = await authenticated_client.get("/templates")
    items = response.json()["items"]
    assert [item["id"] for item in items] == [template_id]
    assert items[0]["schedule_type"] == "before_meal"


@pytest.mark.asyncio
async def test_duplicate_template_conflicts(authenticated_client):
    await authenticated_client.post("/templates", json=TEMPLATE)

    response = await authenticated_client.post("/templates", json=TEMPLATE)

    assert response.status_code == 409


@pytest.mark.asyncio
async def test_update_template(authenticated_client, make_template):
    template = await make_template()

    response = await authenticated_client.put(
        f"/templates/{template.id}", json={"message_content": "New body {use_date}"}
    )

    assert response.status_code == 200
    assert response.json()["message_content"] == "New body {use_date}"


@pytest.mark.asyncio
async def test_empty_body_rejected(authenticated_client):
    response = await authenticated_client.post("/templates", json={**TEMPLATE, "message_content": ""})
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_missing_template(authenticated_client):
    response = await authenticated_client.get("/templates/9999")
    assert response.status_code == 404
