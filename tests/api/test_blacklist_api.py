"""API tests for blacklist endpoints."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

if TYPE_CHECKING:
    from httpx import AsyncClient

BASE = "/api/v1/blacklist"


@pytest.fixture
def entry_payload() -> dict:
    return {
        "email": "struck.off@example.com",
        "phone": "+91 98111 22233",
        "licenses": ["DL-2015-777"],
        "name": "Dr. Struck Off",
        "original_entity_type": "doctor",
        "description": "Registration cancelled by the council",
    }


@pytest.fixture
async def entry_id(client: AsyncClient, ops_headers: dict[str, str], entry_payload: dict) -> str:
    response = await client.post(BASE, json=entry_payload, headers=ops_headers)
    assert response.status_code == 201
    return response.json()["data"]["id"]


@pytest.mark.asyncio
async def test_create_entry(client: AsyncClient, ops_headers: dict[str, str], entry_payload: dict) -> None:
    response = await client.post(BASE, json=entry_payload, headers=ops_headers)
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["reason"] == "manual"
    assert data["phone"] == "+919811122233"
    assert data["is_active"] is True
    assert data["created_by"] == "Ops User"


@pytest.mark.asyncio
async def test_create_requires_identifier(client: AsyncClient, ops_headers: dict[str, str]) -> None:
    response = await client.post(BASE, json={"original_entity_type": "doctor"}, headers=ops_headers)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_create_duplicate(client: AsyncClient, ops_headers: dict[str, str], entry_payload: dict, entry_id: str) -> None:
    response = await client.post(BASE, json=entry_payload, headers=ops_headers)
    assert response.status_code == 409
    error = response.json()["error"]
    assert error["code"] == "ALREADY_BLACKLISTED"
    assert error["details"]["existing_entry_id"] == entry_id


@pytest.mark.asyncio
async def test_check(client: AsyncClient, ops_headers: dict[str, str], entry_id: str) -> None:
    response = await client.post(f"{BASE}/check", json={"licenses": ["dl-2015-777"]}, headers=ops_headers)
    data = response.json()["data"]
    assert data["is_blacklisted"] is True
    assert data["entry"]["id"] == entry_id

    response = await client.post(f"{BASE}/check", json={"email": "clean@example.com"}, headers=ops_headers)
    assert response.json()["data"] == {"is_blacklisted": False, "entry": None}


@pytest.mark.asyncio
async def test_list_search_stats(client: AsyncClient, ops_headers: dict[str, str], entry_id: str) -> None:
    response = await client.get(f"{BASE}?reason=manual&is_active=true", headers=ops_headers)
    assert response.json()["pagination"]["total"] == 1

    response = await client.get(f"{BASE}/search?q=struck", headers=ops_headers)
    assert [e["id"] for e in response.json()["data"]] == [entry_id]

    response = await client.get(f"{BASE}/stats", headers=ops_headers)
    assert response.json()["data"] == {"total": 1, "active": 1, "inactive": 0, "by_reason": {"manual": 1}}


@pytest.mark.asyncio
async def test_update_entry(client: AsyncClient, ops_headers: dict[str, str], entry_id: str) -> None:
    response = await client.patch(f"{BASE}/{entry_id}", json={"description": "Appeal denied"}, headers=ops_headers)
    assert response.status_code == 200
    assert response.json()["data"]["description"] == "Appeal denied"

    response = await client.patch(f"{BASE}/{entry_id}", json={"email": "other@example.com"}, headers=ops_headers)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_remove_requires_admin(client: AsyncClient, ops_headers: dict[str, str], entry_id: str) -> None:
    response = await client.delete(f"{BASE}/{entry_id}", headers=ops_headers)
    assert response.status_code == 403


@pytest.mark.asyncio
async def test_deactivate_then_delete(client: AsyncClient, auth_headers: dict[str, str], entry_id: str) -> None:
    response = await client.delete(f"{BASE}/{entry_id}", headers=auth_headers)
    assert response.status_code == 200
    assert response.json()["message"] == "Blacklist entry deactivated"

    response = await client.get(f"{BASE}/{entry_id}", headers=auth_headers)
    assert response.json()["data"]["is_active"] is False

    response = await client.delete(f"{BASE}/{entry_id}?permanent=true", headers=auth_headers)
    assert response.json()["data"] == {"id": entry_id, "permanent": True}

    response = await client.get(f"{BASE}/{entry_id}", headers=auth_headers)
    assert response.status_code == 404
    assert response.json()["error"]["code"] == "BLACKLIST_ENTRY_NOT_FOUND"


@pytest.mark.asyncio
@pytest.mark.parametrize("field", ["is_active", "reason"])
async def test_update_cannot_null_required_fields(
    client: AsyncClient, ops_headers: dict[str, str], entry_id: str, field: str
) -> None:
    response = await client.patch(f"{BASE}/{entry_id}", json={field: None}, headers=ops_headers)
    assert response.status_code == 422
    assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    response = await client.get(f"{BASE}/{entry_id}", headers=ops_headers)
    data = response.json()["data"]
    assert (data["is_active"], data["reason"]) == (True, "manual")


@pytest.mark.asyncio
async def test_search_rejects_blank_term(client: AsyncClient, ops_headers: dict[str, str], entry_id: str) -> None:
    response = await client.get(f"{BASE}/search", params={"q": "   "}, headers=ops_headers)
    assert response.status_code == 422
