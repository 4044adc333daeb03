"""API tests for admin activity and notification endpoints."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from httpx import AsyncClient


@pytest.fixture
async def seeded(client: AsyncClient, auth_headers: dict[str, str], doctor_payload) -> str:
    """Create and suspend a doctor so activity and notifications exist."""
    response = await client.post("/api/v1/doctors", json=doctor_payload(), headers=auth_headers)
    doctor_id = response.json()["data"]["id"]
    await client.post(f"/api/v1/doctors/{doctor_id}/suspend", json={"reason": "complaint"}, headers=auth_headers)
    return doctor_id


# --- Admin activity ---

@pytest.mark.asyncio
async def test_activity_list(client: AsyncClient, auth_headers: dict[str, str], seeded: str) -> None:
    response = await client.get("/api/v1/admin-activities", headers=auth_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["pagination"]["total"] == 2
    assert [a["action"] for a in body["data"]] == ["SUSPEND_DOCTOR", "CREATE_DOCTOR"]
    assert body["data"][0]["admin_name"] == "Test Admin"
    assert body["data"][0]["metadata"]["suspension_count"] == 1


@pytest.mark.asyncio
async def test_activity_filter_by_action(client: AsyncClient, ops_headers: dict[str, str], seeded: str) -> None:
    response = await client.get("/api/v1/admin-activities?action=CREATE_DOCTOR", headers=ops_headers)
    assert response.json()["pagination"]["total"] == 1


@pytest.mark.asyncio
async def test_activity_bad_range(client: AsyncClient, auth_headers: dict[str, str]) -> None:
    now = datetime.now(UTC)
    params = {"start": now.isoformat(), "end": (now - timedelta(days=1)).isoformat()}
    response = await client.get("/api/v1/admin-activities", params=params, headers=auth_headers)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_activity_stats(client: AsyncClient, auth_headers: dict[str, str], seeded: str) -> None:
    response = await client.get("/api/v1/admin-activities/stats?period=1d", headers=auth_headers)
    data = response.json()["data"]
    assert data["total"] == 2
    assert data["by_admin"] == {"Test Admin": 2}

    response = await client.get("/api/v1/admin-activities/stats?period=1y", headers=auth_headers)
    assert response.status_code == 422


# --- Notifications ---

@pytest.mark.asyncio
async def test_notifications_flow(client: AsyncClient, ops_headers: dict[str, str], seeded: str) -> None:
    response = await client.get("/api/v1/notifications?category=suspensions", headers=ops_headers)
    items = response.json()["data"]
    assert len(items) == 1
    assert items[0]["related_entity_id"] == seeded
    assert items[0]["read"] is False

    response = await client.get("/api/v1/notifications/unread-count", headers=ops_headers)
    assert response.json()["data"]["unread"] == 1

    response = await client.patch(f"/api/v1/notifications/{items[0]['id']}/read", headers=ops_headers)
    assert response.json()["data"]["read"] is True

    response = await client.patch("/api/v1/notifications/read-all", headers=ops_headers)
    assert response.json()["data"] == {"updated": 0}

    response = await client.delete(f"/api/v1/notifications/{items[0]['id']}", headers=ops_headers)
    assert response.json()["data"] == {"id": items[0]["id"]}

    response = await client.delete(f"/api/v1/notifications/{items[0]['id']}", headers=ops_headers)
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "NOTIFICATION_NOT_FOUND"
